"""
DisplayController: user-adjustable view parameters over the point store.
Selects a stable prefix of the current batch and applies the spacing factor.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from embedscape.core.point_store import EmbeddingPoint, PointBatch, PointStore
import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ViewState:
    """Snapshot of the view parameters."""
    display_count: int
    scale_factor: float


class DisplayController:
    """
    Owns display_count and scale_factor and derives the visible points.

    The requested count is remembered across batches; the effective count is
    always clamped to [1, len(batch)].
    """

    def __init__(
        self,
        store: PointStore,
        display_count: int = config.DEFAULT_DISPLAY_COUNT,
        scale_factor: float = config.DEFAULT_SCALE_FACTOR
    ):
        self.store = store
        self._requested_count = max(1, int(display_count))
        self._scale_factor = config.DEFAULT_SCALE_FACTOR
        self.set_scale_factor(scale_factor)

    @staticmethod
    def _clamp(count: int, batch: Optional[PointBatch]) -> int:
        if batch is None or len(batch) == 0:
            return max(1, count)
        return min(max(1, count), len(batch))

    @property
    def display_count(self) -> int:
        """Effective number of points shown for the current batch."""
        return self._clamp(self._requested_count, self.store.current)

    @property
    def scale_factor(self) -> float:
        return self._scale_factor

    @property
    def view_state(self) -> ViewState:
        return ViewState(display_count=self.display_count, scale_factor=self._scale_factor)

    def set_display_count(self, count: int) -> int:
        """
        Set how many points to show.

        Returns:
            The effective (clamped) count
        """
        self._requested_count = max(1, int(count))
        return self.display_count

    def set_scale_factor(self, factor: float) -> float:
        """
        Set the spacing multiplier.

        Non-positive or non-finite values are ignored and the last valid
        factor is kept.

        Returns:
            The scale factor in effect after the call
        """
        try:
            value = float(factor)
        except (TypeError, ValueError):
            logger.debug(f"Ignoring non-numeric scale factor {factor!r}")
            return self._scale_factor

        if not math.isfinite(value) or value <= 0:
            logger.debug(f"Ignoring invalid scale factor {value}, keeping {self._scale_factor}")
            return self._scale_factor

        self._scale_factor = value
        return self._scale_factor

    def visible_points(self) -> list[EmbeddingPoint]:
        """
        First display_count points of the current batch, scaled.

        The batch is read once, so a concurrent replace can never produce a
        mix of two batches.
        """
        batch = self.store.current
        if batch is None:
            return []

        count = self._clamp(self._requested_count, batch)
        factor = self._scale_factor
        return [point.scaled(factor) for point in batch.points[:count]]

    def signature(self) -> tuple[Optional[int], int, float]:
        """Identity of the current visible output: (batch_id, count, scale)."""
        batch = self.store.current
        return (
            batch.batch_id if batch is not None else None,
            self._clamp(self._requested_count, batch),
            self._scale_factor,
        )
