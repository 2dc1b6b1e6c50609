"""Tests for PCA reduction."""
import itertools

import numpy as np
import pytest

from embedscape.core.errors import EmptyBatch, InvalidDimension
from embedscape.core.projector import PCAProjector, as_matrix, reduce


def pairwise_distances(coords):
    coords = np.asarray(coords)
    return np.array([
        np.linalg.norm(coords[i] - coords[j])
        for i, j in itertools.combinations(range(len(coords)), 2)
    ])


@pytest.mark.parametrize("n_items,n_dims,k", [
    (5, 10, 2),
    (5, 10, 3),
    (40, 4, 2),
    (40, 4, 3),
    (3, 3, 3),
])
def test_output_shape(n_items, n_dims, k):
    rng = np.random.default_rng(0)
    coords = reduce(rng.normal(size=(n_items, n_dims)), n_components=k)
    assert coords.shape == (n_items, k)
    assert np.all(np.isfinite(coords))


def test_orthogonal_vectors_are_equidistant(orthogonal_vectors):
    coords = reduce(orthogonal_vectors, n_components=2)

    distances = pairwise_distances(coords)
    assert np.allclose(distances, np.sqrt(2), atol=1e-9)


def test_orthogonal_vectors_keep_input_order(orthogonal_vectors):
    """Row i of the output is vector i of the input."""
    coords = reduce(orthogonal_vectors, n_components=2)
    projector = PCAProjector(n_components=2)
    projector.fit(orthogonal_vectors)

    for i, vector in enumerate(orthogonal_vectors):
        assert np.allclose(projector.transform_single(vector), coords[i])


def test_single_vector_lands_on_origin():
    coords = reduce([[0.3, -1.2, 4.0, 7.5]], n_components=3)
    assert coords.shape == (1, 3)
    assert np.all(coords == 0)


def test_identical_vectors_collapse_to_one_point():
    coords = reduce([[1.0, 2.0, 3.0]] * 4, n_components=2)
    assert coords.shape == (4, 2)
    assert np.allclose(coords, 0.0)


def test_missing_directions_are_zero_columns():
    # Two distinct points only span one direction
    coords = reduce([[0.0, 0.0, 0.0, 0.0], [1.0, 1.0, 0.0, 0.0]], n_components=3)
    assert coords.shape == (2, 3)
    assert np.allclose(coords[:, 1:], 0.0)
    assert np.isclose(abs(coords[0, 0] - coords[1, 0]), np.sqrt(2))


def test_low_rank_distances_are_preserved():
    """Data spanning exactly K directions keeps every pairwise distance."""
    rng = np.random.default_rng(42)
    basis, _ = np.linalg.qr(rng.normal(size=(12, 3)))
    data = rng.normal(size=(8, 3)) @ basis.T + rng.normal(size=12)

    coords = reduce(data, n_components=3)

    assert np.allclose(pairwise_distances(coords), pairwise_distances(data), atol=1e-8)


@pytest.mark.parametrize("shape", [(6, 20), (30, 5)])
def test_matches_svd_reference(shape):
    """Gram (wide) and covariance (tall) paths agree with an SVD projection."""
    rng = np.random.default_rng(7)
    data = rng.normal(size=shape)

    coords = reduce(data, n_components=2)

    centered = data - data.mean(axis=0)
    u, s, _ = np.linalg.svd(centered, full_matrices=False)
    reference = u[:, :2] * s[:2]
    for j in range(2):
        assert np.allclose(np.abs(coords[:, j]), np.abs(reference[:, j]), atol=1e-8)


def test_common_offset_does_not_change_coordinates():
    rng = np.random.default_rng(11)
    data = rng.normal(size=(6, 4))

    base = reduce(data, n_components=2)
    shifted = reduce(data + 1e6, n_components=2)

    assert np.any(base[:, 1] != 0)
    assert np.allclose(shifted, base, atol=1e-6)


def test_sign_convention_is_deterministic():
    rng = np.random.default_rng(3)
    data = rng.normal(size=(10, 6))

    first = reduce(data, n_components=2)
    second = reduce(data.copy(), n_components=2)

    assert np.array_equal(first, second)
    for j in range(2):
        pivot = np.argmax(np.abs(first[:, j]))
        assert first[pivot, j] > 0


def test_empty_batch_raises():
    with pytest.raises(EmptyBatch):
        reduce([], n_components=2)
    with pytest.raises(EmptyBatch):
        reduce(np.zeros((0, 5)), n_components=2)


def test_ragged_vectors_raise():
    with pytest.raises(InvalidDimension):
        reduce([[1.0, 2.0, 3.0], [1.0, 2.0]], n_components=2)


def test_declared_dimension_is_enforced():
    with pytest.raises(InvalidDimension):
        as_matrix([[1.0, 2.0, 3.0]], dimension=4)
    with pytest.raises(InvalidDimension):
        as_matrix(np.ones((2, 3)), dimension=4)


def test_target_wider_than_input_raises():
    with pytest.raises(InvalidDimension):
        reduce([[1.0, 2.0], [3.0, 4.0]], n_components=3)


@pytest.mark.parametrize("k", [0, 1, 4])
def test_unsupported_component_count_raises(k):
    with pytest.raises(InvalidDimension):
        PCAProjector(n_components=k)


def test_errors_are_value_errors():
    with pytest.raises(ValueError):
        reduce([], n_components=2)


def test_explained_variance_of_planar_data():
    rng = np.random.default_rng(1)
    plane = rng.normal(size=(20, 2)) @ rng.normal(size=(2, 5))

    projector = PCAProjector(n_components=2)
    projector.fit(plane)

    ratio = projector.explained_variance_ratio
    assert ratio.shape == (2,)
    assert ratio[0] >= ratio[1] >= 0
    assert np.isclose(ratio.sum(), 1.0)


def test_transform_before_fit_raises():
    projector = PCAProjector()
    assert not projector.is_fitted
    with pytest.raises(RuntimeError):
        projector.transform([[1.0, 2.0]])


def test_transform_reproduces_fit():
    rng = np.random.default_rng(5)
    data = rng.normal(size=(15, 8))

    projector = PCAProjector(n_components=3)
    coords = projector.fit(data)

    assert projector.is_fitted
    assert projector.components.shape == (3, 8)
    assert np.allclose(projector.transform(data), coords)
