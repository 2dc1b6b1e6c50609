"""
Orbit camera for the 3D scene.
Translates pointer drag and wheel input into orbit, pan and zoom.
"""

import math
from typing import Sequence

import numpy as np

import config

# Keep the camera off the poles so the view basis stays defined
MAX_ELEVATION = math.pi / 2 - 1e-3

WORLD_UP = np.array([0.0, 1.0, 0.0])


class OrbitCamera:
    """
    Camera orbiting a target point, y-up, looking down its local -Z axis.

    State is (target, distance, azimuth, elevation). At azimuth = elevation = 0
    the camera sits on the +Z axis looking at the target.
    """

    def __init__(
        self,
        distance: float = config.CAMERA_DISTANCE,
        azimuth: float = 0.0,
        elevation: float = 0.0,
        target: Sequence[float] = (0.0, 0.0, 0.0),
        rotate_speed: float = config.CAMERA_ROTATE_SPEED,
        pan_speed: float = config.CAMERA_PAN_SPEED,
        zoom_speed: float = config.CAMERA_ZOOM_SPEED,
        min_distance: float = config.CAMERA_MIN_DISTANCE,
        max_distance: float = config.CAMERA_MAX_DISTANCE
    ):
        self.rotate_speed = rotate_speed
        self.pan_speed = pan_speed
        self.zoom_speed = zoom_speed
        self.min_distance = min_distance
        self.max_distance = max_distance

        self._initial = (distance, azimuth, elevation, tuple(target))
        self.reset()

    def reset(self) -> None:
        """Return to the initial position."""
        distance, azimuth, elevation, target = self._initial
        self.target = np.array(target, dtype=np.float64)
        self.distance = float(np.clip(distance, self.min_distance, self.max_distance))
        self.azimuth = float(azimuth)
        self.elevation = float(np.clip(elevation, -MAX_ELEVATION, MAX_ELEVATION))

    @property
    def position(self) -> np.ndarray:
        offset = np.array([
            math.cos(self.elevation) * math.sin(self.azimuth),
            math.sin(self.elevation),
            math.cos(self.elevation) * math.cos(self.azimuth),
        ])
        return self.target + self.distance * offset

    def basis(self) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Camera (right, up, forward) unit vectors in world space."""
        forward = self.target - self.position
        forward /= np.linalg.norm(forward)
        right = np.cross(forward, WORLD_UP)
        right /= np.linalg.norm(right)
        up = np.cross(right, forward)
        return right, up, forward

    @property
    def quaternion(self) -> tuple[float, float, float, float]:
        """Camera orientation as a (w, x, y, z) unit quaternion."""
        right, up, forward = self.basis()
        return _matrix_to_quaternion(np.column_stack([right, up, -forward]))

    # -------------------------------------------------------------------------
    # Pointer input
    # -------------------------------------------------------------------------

    def orbit(self, dx: float, dy: float) -> None:
        """Rotate around the target by a pointer delta in pixels."""
        self.azimuth -= dx * self.rotate_speed
        self.elevation = float(np.clip(
            self.elevation + dy * self.rotate_speed, -MAX_ELEVATION, MAX_ELEVATION
        ))

    def pan(self, dx: float, dy: float) -> None:
        """Move the target in the view plane by a pointer delta in pixels."""
        right, up, _ = self.basis()
        step = self.pan_speed * self.distance
        self.target = self.target + (-dx * right + dy * up) * step

    def zoom(self, delta: float) -> None:
        """Dolly toward (delta < 0) or away from (delta > 0) the target."""
        self.distance = float(np.clip(
            self.distance * math.exp(delta * self.zoom_speed),
            self.min_distance,
            self.max_distance,
        ))

    def drag(self, dx: float, dy: float, button: str = "left") -> None:
        """Continuous drag: left button orbits, right or middle pans."""
        if button == "left":
            self.orbit(dx, dy)
        elif button in ("right", "middle"):
            self.pan(dx, dy)
        else:
            raise ValueError(f"Unknown pointer button: {button}")

    # -------------------------------------------------------------------------
    # Plotly conversion
    # -------------------------------------------------------------------------

    def to_plotly(self, units_per_eye: float = config.CAMERA_UNITS_PER_EYE) -> dict:
        """Camera as a Plotly scene.camera dict."""
        eye = self.position / units_per_eye
        center = self.target / units_per_eye
        return dict(
            eye=dict(x=float(eye[0]), y=float(eye[1]), z=float(eye[2])),
            center=dict(x=float(center[0]), y=float(center[1]), z=float(center[2])),
            up=dict(x=0.0, y=1.0, z=0.0),
        )


def _matrix_to_quaternion(m: np.ndarray) -> tuple[float, float, float, float]:
    """Convert a 3x3 rotation matrix to a (w, x, y, z) quaternion."""
    trace = m[0, 0] + m[1, 1] + m[2, 2]

    if trace > 0:
        s = 0.5 / math.sqrt(trace + 1.0)
        w = 0.25 / s
        x = (m[2, 1] - m[1, 2]) * s
        y = (m[0, 2] - m[2, 0]) * s
        z = (m[1, 0] - m[0, 1]) * s
    elif m[0, 0] > m[1, 1] and m[0, 0] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[0, 0] - m[1, 1] - m[2, 2])
        w = (m[2, 1] - m[1, 2]) / s
        x = 0.25 * s
        y = (m[0, 1] + m[1, 0]) / s
        z = (m[0, 2] + m[2, 0]) / s
    elif m[1, 1] > m[2, 2]:
        s = 2.0 * math.sqrt(1.0 + m[1, 1] - m[0, 0] - m[2, 2])
        w = (m[0, 2] - m[2, 0]) / s
        x = (m[0, 1] + m[1, 0]) / s
        y = 0.25 * s
        z = (m[1, 2] + m[2, 1]) / s
    else:
        s = 2.0 * math.sqrt(1.0 + m[2, 2] - m[0, 0] - m[1, 1])
        w = (m[1, 0] - m[0, 1]) / s
        x = (m[0, 2] + m[2, 0]) / s
        y = (m[1, 2] + m[2, 1]) / s
        z = 0.25 * s

    return (float(w), float(x), float(y), float(z))


def quaternion_up(quaternion: Sequence[float]) -> tuple[float, float, float]:
    """World-space direction of the local +Y axis for a (w, x, y, z) rotation."""
    w, x, y, z = quaternion
    return (
        2.0 * (x * y - w * z),
        1.0 - 2.0 * (x * x + z * z),
        2.0 * (y * z + w * x),
    )
