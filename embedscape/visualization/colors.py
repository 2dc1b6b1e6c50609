"""Owner-to-color mapping with a fallback for unknown owners."""

from typing import Iterable, Mapping, Optional

import plotly.express as px

import config


class ColorMap:
    """
    Maps owner ids to marker colors.

    Owners without an entry (including points with no owner) get the
    fallback color.
    """

    # Categorical palette for owners without an explicit color
    PALETTE = px.colors.qualitative.Set2 + px.colors.qualitative.Pastel1

    def __init__(
        self,
        colors: Optional[Mapping[str, str]] = None,
        fallback: str = config.FALLBACK_COLOR
    ):
        self._colors = dict(colors or {})
        self.fallback = fallback

    def __call__(self, owner_id: Optional[str]) -> str:
        if owner_id is None:
            return self.fallback
        return self._colors.get(owner_id, self.fallback)

    def __contains__(self, owner_id: object) -> bool:
        return owner_id in self._colors

    def assign_palette(self, owner_ids: Iterable[Optional[str]]) -> "ColorMap":
        """Give every owner that has no color yet the next palette color."""
        for owner_id in owner_ids:
            if owner_id is None or owner_id in self._colors:
                continue
            self._colors[owner_id] = self.PALETTE[len(self._colors) % len(self.PALETTE)]
        return self

    def as_dict(self) -> dict[str, str]:
        return dict(self._colors)
