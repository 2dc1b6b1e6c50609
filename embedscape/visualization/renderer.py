"""
InteractiveRenderer: draws the visible points and tracks hover and camera state.
Hover flags live in a side table keyed by visible index, never on the points.
"""

import logging
from typing import Callable, Mapping, Optional, Union

import numpy as np
import plotly.graph_objects as go

from embedscape.core.display import DisplayController
from embedscape.visualization.camera import OrbitCamera, quaternion_up
from embedscape.visualization.colors import ColorMap
from embedscape.visualization.scatter import ScatterPlotBuilder, points_to_frame
import config

logger = logging.getLogger(__name__)

ColorSource = Union[ColorMap, Mapping[str, str], Callable[[Optional[str]], Optional[str]]]

Quaternion = tuple[float, float, float, float]


class InteractiveRenderer:
    """
    Renders DisplayController.visible_points() as a 2D or 3D scatter.

    Responsibilities:
    - Resolve marker colors with a fallback for unknown owners
    - Track per-point hover flags
    - Keep one camera for the life of the renderer
    - Update billboard orientations once per frame
    """

    def __init__(
        self,
        controller: DisplayController,
        color_map: Optional[ColorSource] = None,
        owner_names: Optional[Mapping[str, str]] = None,
        mode_3d: bool = False,
        camera: Optional[OrbitCamera] = None,
        builder: Optional[ScatterPlotBuilder] = None,
        hover_radius: float = config.HOVER_RADIUS
    ):
        """
        Initialize the renderer.

        Args:
            controller: Source of the visible points
            color_map: Owner id -> color. A ColorMap, a plain mapping, or any callable.
                Defaults to a palette assigned per batch.
            owner_names: Owner id -> display name for labels
            mode_3d: Start in 3D mode
            camera: Camera to use (a default OrbitCamera otherwise)
            builder: Figure builder
            hover_radius: 2D hit-test radius as a fraction of the larger axis span
        """
        self.controller = controller
        self.owner_names = dict(owner_names or {})
        self.mode_3d = mode_3d
        self.camera = camera or OrbitCamera()
        self.builder = builder or ScatterPlotBuilder()
        self.hover_radius = hover_radius
        self.fallback_color = config.FALLBACK_COLOR

        self._auto_colors = color_map is None
        if color_map is None:
            self._color_map: ColorSource = ColorMap()
        elif isinstance(color_map, Mapping) and not isinstance(color_map, ColorMap):
            self._color_map = ColorMap(color_map)
        else:
            self._color_map = color_map

        self._hovered: dict[int, bool] = {}
        self._billboards: dict[int, Quaternion] = {}
        self._batch_id: Optional[int] = None
        self._last_signature = None
        self.frame_count = 0
        self._camera_moves = 0

        # Fixed between camera moves so the client keeps its own camera across redraws
        self.uirevision = "embedscape"

    # -------------------------------------------------------------------------
    # Colors
    # -------------------------------------------------------------------------

    def color_for(self, owner_id: Optional[str]) -> str:
        """Color for an owner, falling back when the map has no entry."""
        try:
            color = self._color_map(owner_id)
        except LookupError:
            color = None
        return color or self.fallback_color

    # -------------------------------------------------------------------------
    # Hover state
    # -------------------------------------------------------------------------

    def hover_enter(self, index: int) -> None:
        self._sync_batch()
        self._hovered[index] = True

    def hover_exit(self, index: int) -> None:
        self._sync_batch()
        self._hovered[index] = False

    def is_hovered(self, index: int) -> bool:
        self._sync_batch()
        return self._hovered.get(index, False)

    def hovered_indices(self) -> list[int]:
        """Hovered indices that are currently visible, ascending."""
        self._sync_batch()
        n_visible = self._n_visible()
        return sorted(i for i, flag in self._hovered.items() if flag and i < n_visible)

    def clear_hover(self) -> None:
        self._hovered.clear()

    def pointer_move(self, x: float, y: float) -> list[int]:
        """
        Hit-test a pointer position in 2D data coordinates.

        Each visible point's hover flag is set independently: True when the
        pointer is within the hover radius of the marker.

        Returns:
            Indices hovered after the move
        """
        self._sync_batch()
        points = self.controller.visible_points()
        if not points:
            return []

        coords = np.array([p.coordinates[:2] for p in points], dtype=np.float64)
        span = float(np.max(np.ptp(coords, axis=0)))
        radius = self.hover_radius * (span if span > 0 else 1.0)

        distances = np.hypot(coords[:, 0] - x, coords[:, 1] - y)
        for i, distance in enumerate(distances):
            self._hovered[i] = bool(distance <= radius)

        return self.hovered_indices()

    def pointer_leave(self) -> None:
        """Pointer left the plot: nothing is hovered."""
        for i in self._hovered:
            self._hovered[i] = False

    # -------------------------------------------------------------------------
    # Frame loop
    # -------------------------------------------------------------------------

    def on_frame(self) -> None:
        """
        Per-frame callback for the host render loop.

        Every visible marker takes the camera's orientation so it always
        faces the viewer, whatever its position. In 3D, render() floats each
        hovered label along its marker's billboard up axis.
        """
        self._sync_batch()
        orientation = self.camera.quaternion
        self._billboards = {i: orientation for i in range(self._n_visible())}
        self.frame_count += 1

    def billboard(self, index: int) -> Optional[Quaternion]:
        """Orientation applied to a marker on the last frame."""
        return self._billboards.get(index)

    # -------------------------------------------------------------------------
    # Camera input
    # -------------------------------------------------------------------------

    def drag_camera(self, dx: float, dy: float, button: str = "left") -> None:
        """Apply a pointer drag to the camera and push it to the client."""
        self.camera.drag(dx, dy, button)
        self._bump_revision()

    def zoom_camera(self, delta: float) -> None:
        """Apply a wheel delta to the camera and push it to the client."""
        self.camera.zoom(delta)
        self._bump_revision()

    def reset_camera(self) -> None:
        self.camera.reset()
        self._bump_revision()

    def _bump_revision(self) -> None:
        # A new revision makes the client take the server camera over its own
        self._camera_moves += 1
        self.uirevision = f"embedscape-{self._camera_moves}"
        self._last_signature = None

    def _label_directions(self, indices: list[int]) -> dict[int, tuple[float, float, float]]:
        """Screen-up direction of each labelled marker's billboard."""
        fallback = self.camera.quaternion
        return {i: quaternion_up(self._billboards.get(i, fallback)) for i in indices}

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def set_mode_3d(self, mode_3d: bool) -> None:
        if mode_3d != self.mode_3d:
            self.mode_3d = mode_3d
            self._last_signature = None

    @property
    def needs_render(self) -> bool:
        """True when the visible output changed since the last render."""
        return self._last_signature != (self.controller.signature(), self.mode_3d)

    def render(self) -> go.Figure:
        """Build the figure for the current visible points."""
        self._sync_batch()
        signature = self.controller.signature()
        points = self.controller.visible_points()

        if self._auto_colors:
            self._color_map.assign_palette(p.owner_id for p in points)

        df = points_to_frame(points, self.color_for, self.owner_names)
        if self.mode_3d:
            df["z"] = df["z"].fillna(0.0)

        hovered = self.hovered_indices()
        fig = self.builder.build(
            df,
            hovered=hovered,
            mode_3d=self.mode_3d,
            camera=self.camera.to_plotly() if self.mode_3d else None,
            uirevision=self.uirevision,
            label_directions=self._label_directions(hovered) if self.mode_3d else None,
        )

        self._last_signature = (signature, self.mode_3d)
        logger.debug(f"Rendered {len(points)} points ({'3D' if self.mode_3d else '2D'})")
        return fig

    def _n_visible(self) -> int:
        batch = self.controller.store.current
        return self.controller.display_count if batch is not None else 0

    def _sync_batch(self) -> None:
        """Drop per-point state that belonged to a replaced batch."""
        batch = self.controller.store.current
        batch_id = batch.batch_id if batch is not None else None
        if batch_id != self._batch_id:
            self._hovered.clear()
            self._billboards.clear()
            self._batch_id = batch_id
