"""Tests for DisplayController."""
import math
import threading

import pytest

from embedscape.core.display import DisplayController, ViewState


def test_no_batch_shows_nothing(controller):
    assert controller.visible_points() == []
    assert controller.signature()[0] is None


def test_count_is_clamped_to_batch(controller, abc_batch):
    assert controller.display_count == 3
    assert len(controller.visible_points()) == 3

    assert controller.set_display_count(0) == 1
    assert controller.set_display_count(-5) == 1
    assert controller.set_display_count(99) == 3


def test_requested_count_survives_smaller_batch(store, controller):
    controller.set_display_count(4)
    store.load_and_replace([[float(i), 0.0] for i in range(2)], ["a", "b"])
    assert controller.display_count == 2

    store.load_and_replace([[float(i), 0.0] for i in range(6)], list("abcdef"))
    assert controller.display_count == 4


def test_prefix_of_batch_is_shown(controller, abc_batch):
    controller.set_display_count(2)
    visible = controller.visible_points()

    assert [p.source_text for p in visible] == ["a", "b"]
    assert [p.coordinates for p in visible] == [p.coordinates for p in abc_batch.points[:2]]


def test_scale_factor_is_linear(controller, abc_batch):
    controller.set_scale_factor(2.5)
    visible = controller.visible_points()

    for point, original in zip(visible, abc_batch):
        assert point.coordinates == pytest.approx(tuple(2.5 * c for c in original.coordinates))
    # Stored batch is untouched
    assert controller.store.current is abc_batch


@pytest.mark.parametrize("bad", [0, -1.0, math.nan, math.inf, "wide", None])
def test_invalid_scale_factor_is_ignored(controller, bad):
    controller.set_scale_factor(3.0)
    assert controller.set_scale_factor(bad) == 3.0
    assert controller.scale_factor == 3.0


def test_invalid_initial_scale_falls_back_to_default():
    from embedscape.core.point_store import PointStore

    controller = DisplayController(PointStore(), scale_factor=-2)
    assert controller.scale_factor == 1.0


def test_visible_points_are_deterministic(controller, abc_batch):
    controller.set_scale_factor(1.7)
    assert controller.visible_points() == controller.visible_points()


def test_replace_shows_only_new_batch(store, controller, abc_batch):
    store.load_and_replace([[5.0, 5.0], [6.0, 6.0]], ["x", "y"])
    assert [p.source_text for p in controller.visible_points()] == ["x", "y"]


def test_signature_tracks_every_input(store, controller, abc_batch):
    before = controller.signature()

    controller.set_scale_factor(2.0)
    scaled = controller.signature()
    assert scaled != before

    controller.set_display_count(1)
    counted = controller.signature()
    assert counted != scaled

    store.load_and_replace([[0.0, 0.0]], ["z"])
    assert controller.signature()[0] != counted[0]


def test_view_state_snapshot(controller, abc_batch):
    controller.set_display_count(2)
    controller.set_scale_factor(0.5)
    assert controller.view_state == ViewState(display_count=2, scale_factor=0.5)


def test_count_is_derived_from_batch_on_read(store):
    controller = DisplayController(store, display_count=5)
    assert store._subscribers == []

    store.load_and_replace([[0.0, 0.0], [1.0, 0.0]], ["a", "b"])
    assert len(controller.visible_points()) == 2
    assert controller.view_state.display_count == 2


def test_concurrent_replace_never_mixes_visible_points(store):
    sizes = {"a": 5, "b": 10, "c": 15, "d": 20}
    batches = [
        store.load([[float(i), 0.0] for i in range(n)], [f"{tag}-{i}" for i in range(n)])
        for tag, n in sizes.items()
    ]
    controller = DisplayController(store, display_count=12, scale_factor=2.0)
    stop = threading.Event()
    bad = []

    def reader():
        while not stop.is_set():
            visible = controller.visible_points()
            if not visible:
                continue
            tags = {p.source_text.split("-")[0] for p in visible}
            if len(tags) != 1:
                bad.append(tags)
                continue
            tag = tags.pop()
            if len(visible) != min(12, sizes[tag]):
                bad.append((tag, len(visible)))

    thread = threading.Thread(target=reader)
    thread.start()
    for _ in range(200):
        for batch in batches:
            store.replace(batch)
    stop.set()
    thread.join()

    assert bad == []
