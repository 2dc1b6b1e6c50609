"""Tests for PointStore batches."""
import numpy as np
import pytest

from embedscape.core.errors import BatchMismatch, EmptyBatch, InvalidDimension
from embedscape.core.point_store import EmbeddingPoint, PointMetadata, PointStore


def test_load_pairs_points_with_metadata_by_position(store):
    batch = store.load(
        np.array([[0.0, 1.0], [2.0, 3.0], [4.0, 5.0]]),
        ["a", {"text": "b", "ownerId": "u1"}, PointMetadata("c", "u2")],
    )

    assert [p.source_text for p in batch] == ["a", "b", "c"]
    assert batch.owner_ids == [None, "u1", "u2"]
    assert batch[1].coordinates == (2.0, 3.0)
    assert batch.dimensions == 2
    assert store.current is None


def test_load_length_mismatch_raises(store):
    with pytest.raises(BatchMismatch):
        store.load([[0.0, 0.0], [1.0, 1.0]], ["only one"])


def test_load_empty_raises(store):
    with pytest.raises(EmptyBatch):
        store.load([], [])


def test_load_ragged_points_raise(store):
    with pytest.raises(InvalidDimension):
        store.load([[0.0, 0.0], [1.0, 1.0, 1.0]], ["a", "b"])


def test_metadata_accepts_creator_alias():
    meta = PointMetadata.coerce({"creatorId": 181694388, "text": "hi"})
    assert meta == PointMetadata(text="hi", owner_id="181694388")


def test_metadata_rejects_unknown_types():
    with pytest.raises(TypeError):
        PointMetadata.coerce(42)


def test_points_are_immutable():
    point = EmbeddingPoint(coordinates=(1.0, 2.0), source_text="a")
    with pytest.raises(AttributeError):
        point.source_text = "b"
    assert point.scaled(2.0).coordinates == (2.0, 4.0)
    assert point.coordinates == (1.0, 2.0)


def test_replace_swaps_whole_batch_and_notifies(store):
    seen = []
    store.subscribe(seen.append)

    first = store.load_and_replace([[0.0, 0.0]], ["a"])
    second = store.load_and_replace([[1.0, 1.0], [2.0, 2.0]], ["b", "c"])

    assert store.current is second
    assert seen == [first, second]
    assert second.batch_id > first.batch_id
    assert store.n_points == 2
    assert store.has_batch

