"""Tests for the orbit camera."""
import math

import numpy as np
import pytest

from embedscape.visualization.camera import MAX_ELEVATION, OrbitCamera, quaternion_up


def test_default_pose():
    camera = OrbitCamera()
    assert np.allclose(camera.position, [0.0, 0.0, 5.0])
    assert camera.quaternion == pytest.approx((1.0, 0.0, 0.0, 0.0))


def test_quaternion_is_unit_length():
    camera = OrbitCamera()
    camera.orbit(120, -45)
    w, x, y, z = camera.quaternion
    assert math.isclose(w * w + x * x + y * y + z * z, 1.0, rel_tol=1e-9)


def test_orbit_keeps_distance_to_target():
    camera = OrbitCamera()
    camera.orbit(200, 80)

    assert np.isclose(np.linalg.norm(camera.position - camera.target), 5.0)
    assert not np.allclose(camera.position, [0.0, 0.0, 5.0])


def test_elevation_stops_short_of_the_poles():
    camera = OrbitCamera()
    camera.orbit(0, 1e6)
    assert camera.elevation == pytest.approx(MAX_ELEVATION)

    right, up, forward = camera.basis()
    assert np.all(np.isfinite(right))
    assert np.isclose(np.dot(up, forward), 0.0, atol=1e-9)


def test_zoom_is_clamped():
    camera = OrbitCamera(min_distance=1.0, max_distance=10.0)

    camera.zoom(-1e4)
    assert camera.distance == 1.0

    camera.zoom(1e4)
    assert camera.distance == 10.0


def test_pan_moves_target_and_position_together():
    camera = OrbitCamera()
    before = camera.position - camera.target

    camera.pan(30, 0)

    assert camera.target[0] < 0
    assert np.allclose(camera.position - camera.target, before)


def test_drag_routes_by_button():
    camera = OrbitCamera()

    camera.drag(10, 0, button="left")
    assert camera.azimuth != 0.0
    assert np.allclose(camera.target, 0.0)

    camera.drag(10, 0, button="right")
    assert not np.allclose(camera.target, 0.0)

    with pytest.raises(ValueError):
        camera.drag(1, 1, button="back")


def test_reset_restores_initial_pose():
    camera = OrbitCamera()
    camera.orbit(50, 20)
    camera.pan(5, 5)
    camera.zoom(2)

    camera.reset()

    assert np.allclose(camera.position, [0.0, 0.0, 5.0])
    assert np.allclose(camera.target, 0.0)


def test_to_plotly():
    camera = OrbitCamera()
    scene_camera = camera.to_plotly(units_per_eye=5.0)

    assert scene_camera["eye"] == pytest.approx({"x": 0.0, "y": 0.0, "z": 1.0})
    assert scene_camera["up"] == {"x": 0.0, "y": 1.0, "z": 0.0}


def test_quaternion_up_matches_camera_basis():
    camera = OrbitCamera()
    assert quaternion_up(camera.quaternion) == pytest.approx((0.0, 1.0, 0.0))

    camera.orbit(90, 150)
    _, up, _ = camera.basis()
    assert np.allclose(quaternion_up(camera.quaternion), up)
