"""
PointStore: holds the current batch of reduced points and their metadata.
Batches are immutable and replaced wholesale.
"""

import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Any, Callable, Iterator, Mapping, Optional, Sequence, Union

import numpy as np

from embedscape.core.errors import BatchMismatch, EmptyBatch, InvalidDimension

logger = logging.getLogger(__name__)

# Keys accepted for the owner field in metadata mappings
OWNER_KEYS = ("ownerId", "owner_id", "creatorId")


@dataclass(frozen=True)
class PointMetadata:
    """Immutable metadata attached to one input vector."""
    text: str
    owner_id: Optional[str] = None

    @classmethod
    def coerce(cls, value: Union["PointMetadata", str, Mapping[str, Any]]) -> "PointMetadata":
        """Build metadata from a PointMetadata, a plain text, or a mapping."""
        if isinstance(value, PointMetadata):
            return value
        if isinstance(value, str):
            return cls(text=value)
        if isinstance(value, Mapping):
            owner = next((value[k] for k in OWNER_KEYS if value.get(k) is not None), None)
            return cls(
                text=str(value.get("text", "")),
                owner_id=str(owner) if owner is not None else None,
            )
        raise TypeError(f"Unsupported metadata type: {type(value).__name__}")


@dataclass(frozen=True)
class EmbeddingPoint:
    """A reduced point paired with the text that produced it."""
    coordinates: tuple[float, ...]
    source_text: str
    owner_id: Optional[str] = None

    @property
    def dimensions(self) -> int:
        return len(self.coordinates)

    def scaled(self, factor: float) -> "EmbeddingPoint":
        """Return a copy with every coordinate multiplied by factor."""
        return EmbeddingPoint(
            coordinates=tuple(c * factor for c in self.coordinates),
            source_text=self.source_text,
            owner_id=self.owner_id,
        )


@dataclass(frozen=True)
class PointBatch:
    """One full reduction result. Never mutated after creation."""
    points: tuple[EmbeddingPoint, ...]
    batch_id: int
    source: str = ""

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[EmbeddingPoint]:
        return iter(self.points)

    def __getitem__(self, index: int) -> EmbeddingPoint:
        return self.points[index]

    @property
    def dimensions(self) -> int:
        """Coordinate dimension of the batch (0 when empty)."""
        return self.points[0].dimensions if self.points else 0

    @property
    def owner_ids(self) -> list[Optional[str]]:
        return [p.owner_id for p in self.points]

    def coords_array(self) -> np.ndarray:
        """Coordinates as an (n, dimensions) float array."""
        if not self.points:
            return np.zeros((0, 0))
        return np.array([p.coordinates for p in self.points], dtype=np.float64)


class PointStore:
    """
    Holds the currently visible batch of embedding points.

    Responsibilities:
    - Zip reduced coordinates with metadata by position
    - Atomically swap the whole batch on replace
    - Notify subscribers after each swap
    """

    def __init__(self):
        self._current: Optional[PointBatch] = None
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self._subscribers: list[Callable[[PointBatch], None]] = []

    def load(
        self,
        reduced_points: Union[np.ndarray, Sequence[Sequence[float]]],
        metadata: Sequence[Union[PointMetadata, str, Mapping[str, Any]]],
        source: str = ""
    ) -> PointBatch:
        """
        Build a batch by pairing row i of reduced_points with metadata[i].

        Args:
            reduced_points: Array of shape (n, 2) or (n, 3)
            metadata: n metadata entries in the same order as the points
            source: Free-form label for where the batch came from

        Returns:
            New PointBatch (not yet visible, see replace())

        Raises:
            BatchMismatch: If the two sequences have different lengths
            EmptyBatch: If there are no points
            InvalidDimension: If point rows have different lengths
        """
        rows = [tuple(float(c) for c in row) for row in reduced_points]

        if len(rows) != len(metadata):
            raise BatchMismatch(
                f"Got {len(rows)} points but {len(metadata)} metadata entries"
            )
        if not rows:
            raise EmptyBatch("Cannot load an empty batch")

        width = len(rows[0])
        if any(len(row) != width for row in rows):
            raise InvalidDimension("Reduced points must all have the same dimension")

        points = []
        for coords, meta in zip(rows, metadata):
            meta = PointMetadata.coerce(meta)
            points.append(EmbeddingPoint(
                coordinates=coords,
                source_text=meta.text,
                owner_id=meta.owner_id,
            ))

        return PointBatch(points=tuple(points), batch_id=next(self._ids), source=source)

    def replace(self, batch: PointBatch) -> None:
        """Make batch the visible batch, discarding the previous one."""
        with self._lock:
            previous = self._current
            self._current = batch
            subscribers = list(self._subscribers)

        logger.info(
            f"Replaced batch {previous.batch_id if previous else None} "
            f"with batch {batch.batch_id} ({len(batch)} points, {batch.dimensions}D)"
        )

        for callback in subscribers:
            callback(batch)

    def load_and_replace(
        self,
        reduced_points: Union[np.ndarray, Sequence[Sequence[float]]],
        metadata: Sequence[Union[PointMetadata, str, Mapping[str, Any]]],
        source: str = ""
    ) -> PointBatch:
        """Build a batch and make it visible."""
        batch = self.load(reduced_points, metadata, source=source)
        self.replace(batch)
        return batch

    def subscribe(self, callback: Callable[[PointBatch], None]) -> None:
        """Register a callback invoked with each new batch after it is swapped in."""
        with self._lock:
            self._subscribers.append(callback)

    @property
    def current(self) -> Optional[PointBatch]:
        """Snapshot of the visible batch (None before the first replace)."""
        with self._lock:
            return self._current

    @property
    def n_points(self) -> int:
        batch = self.current
        return len(batch) if batch is not None else 0

    @property
    def has_batch(self) -> bool:
        return self.current is not None
