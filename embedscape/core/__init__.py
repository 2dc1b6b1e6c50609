"""
Core components for Embedscape.
"""

from .errors import BatchMismatch, EmbedscapeError, EmptyBatch, InvalidDimension, RequestInFlight
from .projector import PCAProjector, reduce
from .point_store import EmbeddingPoint, PointBatch, PointMetadata, PointStore
from .display import DisplayController, ViewState
from .workspace import Workspace

__all__ = [
    "BatchMismatch",
    "EmbedscapeError",
    "EmptyBatch",
    "InvalidDimension",
    "RequestInFlight",
    "PCAProjector",
    "reduce",
    "EmbeddingPoint",
    "PointBatch",
    "PointMetadata",
    "PointStore",
    "DisplayController",
    "ViewState",
    "Workspace",
]
