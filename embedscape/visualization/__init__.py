"""
Plotly rendering for Embedscape.
"""

from .camera import OrbitCamera
from .colors import ColorMap
from .renderer import InteractiveRenderer
from .scatter import ScatterPlotBuilder, points_to_frame

__all__ = ["OrbitCamera", "ColorMap", "InteractiveRenderer", "ScatterPlotBuilder", "points_to_frame"]
