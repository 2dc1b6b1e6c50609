"""
PCA projection for dimensionality reduction.
Handles fitting and transforming embeddings to 2D/3D space.
"""

import logging
from typing import Optional, Sequence, Union

import numpy as np

from embedscape.core.errors import EmptyBatch, InvalidDimension
import config

logger = logging.getLogger(__name__)

VectorBatch = Union[np.ndarray, Sequence[Sequence[float]]]


def as_matrix(vectors: VectorBatch, dimension: Optional[int] = None) -> np.ndarray:
    """
    Convert a batch of raw vectors into a float64 matrix.

    Args:
        vectors: 2D array or sequence of equal-length sequences
        dimension: Declared vector length D (defaults to the first vector's length)

    Returns:
        Array of shape (n, dimension)

    Raises:
        EmptyBatch: If the batch holds no vectors
        InvalidDimension: If any vector's length differs from the declared one
    """
    if isinstance(vectors, np.ndarray):
        if vectors.ndim != 2:
            if vectors.size == 0:
                raise EmptyBatch("Cannot reduce an empty batch")
            raise InvalidDimension(f"Expected a 2D array of vectors, got shape {vectors.shape}")
        if len(vectors) == 0:
            raise EmptyBatch("Cannot reduce an empty batch")
        if dimension is not None and vectors.shape[1] != dimension:
            raise InvalidDimension(
                f"Vectors have length {vectors.shape[1]}, expected {dimension}"
            )
        return np.asarray(vectors, dtype=np.float64)

    rows = list(vectors)
    if not rows:
        raise EmptyBatch("Cannot reduce an empty batch")

    expected = len(rows[0]) if dimension is None else dimension
    for i, row in enumerate(rows):
        if len(row) != expected:
            raise InvalidDimension(
                f"Vector {i} has length {len(row)}, expected {expected}"
            )

    return np.asarray(rows, dtype=np.float64).reshape(len(rows), expected)


class PCAProjector:
    """
    PCA-based dimensionality reduction for embedding visualization.

    Features:
    - Fits principal components on a batch of embeddings
    - Projects new vectors onto the fitted space
    - Uses the N x N Gram matrix when vectors are wider than the batch
    """

    def __init__(
        self,
        n_components: int = config.N_COMPONENTS_2D,
        tolerance: float = config.ZERO_VARIANCE_TOLERANCE
    ):
        """
        Initialize PCA projector.

        Args:
            n_components: Output dimensions, 2 or 3 (default: 2)
            tolerance: Relative eigenvalue threshold below which a direction
                is treated as having no variance
        """
        if n_components not in config.SUPPORTED_COMPONENTS:
            raise InvalidDimension(
                f"n_components must be one of {config.SUPPORTED_COMPONENTS}, got {n_components}"
            )
        self.n_components = n_components
        self.tolerance = tolerance

        self._mean: Optional[np.ndarray] = None
        self._components: Optional[np.ndarray] = None  # (n_components, dimension)
        self._explained_variance: Optional[np.ndarray] = None
        self._total_variance: float = 0.0

    def fit(self, vectors: VectorBatch, dimension: Optional[int] = None) -> np.ndarray:
        """
        Fit principal components and return projected coordinates.

        Args:
            vectors: Array of shape (n, dimension)
            dimension: Declared vector length (optional)

        Returns:
            Array of shape (n, n_components) with projected coordinates
        """
        data = as_matrix(vectors, dimension)
        n_items, n_dims = data.shape

        if self.n_components > n_dims:
            raise InvalidDimension(
                f"Cannot reduce {n_dims}-dimensional vectors to {self.n_components} dimensions"
            )

        self._mean = data.mean(axis=0)
        centered = data - self._mean
        self._components = np.zeros((self.n_components, n_dims))
        self._explained_variance = np.zeros(self.n_components)

        # A single point has no variance: every output lands on the origin
        if n_items == 1:
            self._total_variance = 0.0
            logger.debug("Single vector batch, returning origin")
            return np.zeros((1, self.n_components))

        if n_dims > n_items:
            variances, directions = self._gram_directions(centered)
        else:
            variances, directions = self._covariance_directions(centered)

        self._total_variance = float(np.sum(centered ** 2) / (n_items - 1))

        # Measured on centered data so a common offset never changes the result
        scale = float(np.max(np.abs(centered)))
        threshold = self.tolerance * max(float(variances[0]), scale ** 2, np.finfo(np.float64).tiny)

        kept = 0
        for i in range(min(self.n_components, len(variances))):
            if variances[i] <= threshold:
                break
            self._components[i] = directions[i]
            self._explained_variance[i] = variances[i]
            kept += 1

        if kept < self.n_components:
            logger.debug(
                f"Only {kept} of {self.n_components} directions have variance, "
                "padding with zeros"
            )

        coords = centered @ self._components.T
        self._flip_signs(coords)

        logger.debug(f"Fitted PCA ({self.n_components}D) on {n_items} vectors of length {n_dims}")
        return coords

    def _covariance_directions(self, centered: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Eigen-decompose the D x D covariance matrix."""
        n_items = len(centered)
        covariance = centered.T @ centered / (n_items - 1)
        eigenvalues, eigenvectors = np.linalg.eigh(covariance)

        order = np.argsort(eigenvalues)[::-1]
        variances = np.clip(eigenvalues[order], 0.0, None)
        return variances, eigenvectors[:, order].T

    def _gram_directions(self, centered: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        """Eigen-decompose the N x N Gram matrix and lift eigenvectors back to D."""
        n_items = len(centered)
        gram = centered @ centered.T
        eigenvalues, eigenvectors = np.linalg.eigh(gram)

        order = np.argsort(eigenvalues)[::-1]
        eigenvalues = np.clip(eigenvalues[order], 0.0, None)
        eigenvectors = eigenvectors[:, order]

        directions = centered.T @ eigenvectors  # (dimension, n_items)
        norms = np.linalg.norm(directions, axis=0)
        norms = np.where(norms == 0, 1, norms)
        directions = (directions / norms).T

        return eigenvalues / (n_items - 1), directions

    def _flip_signs(self, coords: np.ndarray) -> None:
        """Flip each component so its largest-magnitude coordinate is positive."""
        for j in range(self.n_components):
            column = coords[:, j]
            pivot = int(np.argmax(np.abs(column)))
            if column[pivot] < 0:
                coords[:, j] = -column
                self._components[j] = -self._components[j]

    def transform(self, vectors: VectorBatch) -> np.ndarray:
        """
        Project new vectors onto the fitted components.

        Args:
            vectors: Array of shape (n, dimension)

        Returns:
            Array of shape (n, n_components)

        Raises:
            RuntimeError: If the projector hasn't been fitted
        """
        if self._components is None:
            raise RuntimeError("PCA projector not fitted. Call fit() first.")

        data = as_matrix(vectors, dimension=len(self._mean))
        return (data - self._mean) @ self._components.T

    def transform_single(self, vector: Sequence[float]) -> np.ndarray:
        """
        Project a single vector.

        Args:
            vector: Array of shape (dimension,)

        Returns:
            Array of shape (n_components,)
        """
        return self.transform(np.asarray(vector, dtype=np.float64).reshape(1, -1))[0]

    @property
    def explained_variance_ratio(self) -> np.ndarray:
        """Share of total variance captured by each output component."""
        if self._explained_variance is None:
            raise RuntimeError("PCA projector not fitted. Call fit() first.")
        if self._total_variance == 0:
            return np.zeros(self.n_components)
        return self._explained_variance / self._total_variance

    @property
    def components(self) -> Optional[np.ndarray]:
        """Fitted principal directions, shape (n_components, dimension)."""
        return self._components

    @property
    def is_fitted(self) -> bool:
        """Check if the projector has been fitted."""
        return self._components is not None


def reduce(
    vectors: VectorBatch,
    n_components: int = config.N_COMPONENTS_2D,
    dimension: Optional[int] = None
) -> np.ndarray:
    """
    Reduce a batch of vectors to 2 or 3 principal-component coordinates.

    Row i of the result corresponds to vector i of the input.
    """
    return PCAProjector(n_components=n_components).fit(vectors, dimension=dimension)
