"""
Interactive scatter plot figures for the embedding point cloud.
Uses Plotly for hover tooltips and camera interaction.
"""

import html
from typing import Callable, Mapping, Optional, Sequence

import numpy as np
import pandas as pd
import plotly.graph_objects as go

from embedscape.core.point_store import EmbeddingPoint
import config


def points_to_frame(
    points: Sequence[EmbeddingPoint],
    color_map: Callable[[Optional[str]], str],
    owner_names: Optional[Mapping[str, str]] = None
) -> pd.DataFrame:
    """
    Flatten points into a DataFrame with one row per point.

    Columns: index, x, y, z (3D only), text, owner, owner_name, color
    """
    owner_names = owner_names or {}
    rows = []
    for i, point in enumerate(points):
        row = {
            "index": i,
            "text": point.source_text,
            "owner": point.owner_id,
            "owner_name": owner_names.get(point.owner_id, point.owner_id) if point.owner_id else "Unknown",
            "color": color_map(point.owner_id),
        }
        for axis, value in zip("xyz", point.coordinates):
            row[axis] = value
        rows.append(row)

    return pd.DataFrame(rows, columns=["index", "x", "y", "z", "text", "owner", "owner_name", "color"])


def axis_range(values: np.ndarray, padding: float = config.AXIS_PADDING) -> list[float]:
    """Min/max range of values with padding on both sides."""
    low, high = float(np.min(values)), float(np.max(values))
    span = high - low
    pad = span * padding if span > 0 else max(abs(low), 1.0) * padding
    return [low - pad, high + pad]


class ScatterPlotBuilder:
    """
    Builds interactive Plotly scatter plots for embedding visualization.

    Features:
    - One trace per owner, colored through a color map
    - 2D mode with gridlines and auto-ranged axes
    - 3D mode with a persistent camera
    - In-scene labels for hovered points
    """

    COLORS = {
        "label_bg": "rgba(0, 0, 0, 0.8)",
        "label_text": "#ffffff",
        "grid": "rgba(102, 126, 234, 0.2)",
        "outline": "#ffffff",
    }

    MARKERS = {
        "2d": dict(symbol="circle", size=config.MARKER_SIZE_2D, opacity=0.85),
        "3d": dict(symbol="circle", size=config.MARKER_SIZE_3D, opacity=0.9),
    }

    def __init__(
        self,
        height: int = config.PLOT_HEIGHT,
        width: Optional[int] = config.PLOT_WIDTH
    ):
        """
        Initialize the scatter plot builder.

        Args:
            height: Plot height in pixels
            width: Plot width in pixels (None to fill the container)
        """
        self.height = height
        self.width = width

    def build(
        self,
        df: pd.DataFrame,
        hovered: Optional[Sequence[int]] = None,
        mode_3d: bool = False,
        camera: Optional[dict] = None,
        uirevision: Optional[str] = None,
        label_directions: Optional[Mapping[int, Sequence[float]]] = None,
    ) -> go.Figure:
        """
        Build an interactive scatter plot.

        Args:
            df: Frame from points_to_frame()
            hovered: Row indices whose in-scene label should be shown
            mode_3d: If True, build a 3D scatter plot
            camera: Plotly scene.camera dict (3D only)
            uirevision: Constant key that keeps client-side zoom/camera across redraws
            label_directions: Row index -> scene direction a 3D label floats along
                (defaults to +Y)

        Returns:
            Plotly Figure object
        """
        hovered = list(hovered or [])
        if mode_3d:
            return self._build_3d(df, hovered, camera, uirevision, label_directions or {})
        return self._build_2d(df, hovered, uirevision)

    def _build_2d(
        self,
        df: pd.DataFrame,
        hovered: list[int],
        uirevision: Optional[str]
    ) -> go.Figure:
        fig = go.Figure()

        for owner_name, owner_df in self._group_by_owner(df):
            fig.add_trace(go.Scatter(
                x=owner_df["x"],
                y=owner_df["y"],
                mode="markers",
                marker=dict(color=owner_df["color"], **self.MARKERS["2d"]),
                text=self._build_hover_text(owner_df, with_owner=False),
                hovertemplate="%{text}<extra></extra>",
                name=owner_name,
                customdata=owner_df["index"].values,
            ))

        label_df = df[df["index"].isin(hovered)]
        if not label_df.empty:
            fig.add_trace(go.Scatter(
                x=label_df["x"],
                y=label_df["y"],
                mode="markers+text",
                marker=dict(
                    color=label_df["color"],
                    line=dict(color=self.COLORS["outline"], width=2),
                    **self.MARKERS["2d"]
                ),
                text=self._build_label_text(label_df, with_owner=False),
                textposition="top center",
                hoverinfo="skip",
                showlegend=False,
                name="Hovered",
            ))

        layout = dict(
            height=self.height,
            template="plotly_dark",
            paper_bgcolor="rgba(0,0,0,0)",
            plot_bgcolor="rgba(17,17,17,0.8)",
            showlegend=bool(df["owner"].notna().any()),
            margin=dict(l=20, r=20, t=30, b=20),
            hovermode="closest",
            dragmode="pan",
            uirevision=uirevision,
        )
        if self.width:
            layout["width"] = self.width

        if not df.empty:
            layout["xaxis"] = dict(
                showgrid=True, gridcolor=self.COLORS["grid"], showticklabels=True,
                zeroline=False, title="X", range=axis_range(df["x"].values),
            )
            layout["yaxis"] = dict(
                showgrid=True, gridcolor=self.COLORS["grid"], showticklabels=True,
                zeroline=False, title="Y", range=axis_range(df["y"].values),
            )

        fig.update_layout(**layout)
        return fig

    def _build_3d(
        self,
        df: pd.DataFrame,
        hovered: list[int],
        camera: Optional[dict],
        uirevision: Optional[str],
        label_directions: Mapping[int, Sequence[float]]
    ) -> go.Figure:
        fig = go.Figure()

        for owner_name, owner_df in self._group_by_owner(df):
            fig.add_trace(go.Scatter3d(
                x=owner_df["x"],
                y=owner_df["y"],
                z=owner_df["z"],
                mode="markers",
                marker=dict(
                    color=owner_df["color"],
                    size=self.MARKERS["3d"]["size"],
                    opacity=self.MARKERS["3d"]["opacity"],
                    symbol=self.MARKERS["3d"]["symbol"],
                ),
                text=self._build_hover_text(owner_df, with_owner=True),
                hovertemplate="%{text}<extra></extra>",
                name=owner_name,
                customdata=owner_df["index"].values,
            ))

        label_df = df[df["index"].isin(hovered)]
        if not label_df.empty:
            # Labels float just above their marker as seen from the camera
            offset = self._label_offset(df)
            directions = np.array([
                label_directions.get(int(i), (0.0, 1.0, 0.0)) for i in label_df["index"]
            ], dtype=np.float64).reshape(-1, 3)
            fig.add_trace(go.Scatter3d(
                x=label_df["x"].to_numpy() + offset * directions[:, 0],
                y=label_df["y"].to_numpy() + offset * directions[:, 1],
                z=label_df["z"].to_numpy() + offset * directions[:, 2],
                mode="text",
                text=self._build_label_text(label_df, with_owner=True),
                textfont=dict(color=self.COLORS["label_text"], size=12),
                hoverinfo="skip",
                showlegend=False,
                name="Labels",
            ))

        axis = dict(
            showgrid=True,
            gridcolor=self.COLORS["grid"],
            showticklabels=True,
            zeroline=False,
        )
        scene = dict(
            bgcolor="rgba(0,0,0,1)",
            xaxis=dict(title="X", **axis),
            yaxis=dict(title="Y", **axis),
            zaxis=dict(title="Z", **axis),
            aspectmode="data",
        )
        if camera is not None:
            scene["camera"] = camera

        layout = dict(
            height=self.height + 100,  # Slightly taller for 3D
            template="plotly_dark",
            paper_bgcolor="rgba(0,0,0,0)",
            scene=scene,
            showlegend=bool(df["owner"].notna().any()),
            legend=dict(
                yanchor="top",
                y=0.99,
                xanchor="left",
                x=0.01,
                bgcolor="rgba(0,0,0,0.5)",
                font=dict(size=10)
            ),
            margin=dict(l=0, r=0, t=30, b=0),
            hoverlabel=dict(bgcolor=self.COLORS["label_bg"], font=dict(color=self.COLORS["label_text"])),
            uirevision=uirevision,
        )
        if self.width:
            layout["width"] = self.width

        fig.update_layout(**layout)
        return fig

    @staticmethod
    def _group_by_owner(df: pd.DataFrame):
        """Yield (legend name, rows) per owner, keeping first-seen order."""
        if df.empty:
            return
        for owner_name in df["owner_name"].unique():
            yield str(owner_name), df[df["owner_name"] == owner_name]

    @staticmethod
    def _label_offset(df: pd.DataFrame) -> float:
        if df.empty:
            return 0.03
        span = float(np.nanmax(np.ptp(df[["x", "y", "z"]].to_numpy(dtype=float), axis=0)))
        return span * 0.03 if span > 0 else 0.03

    def _build_hover_text(self, df: pd.DataFrame, with_owner: bool) -> list[str]:
        """Build tooltip text for items."""
        texts = []
        for _, row in df.iterrows():
            text = f"Text: {_truncate(row['text'])}"
            if with_owner:
                text = f"User: {html.escape(str(row['owner_name']))}<br>{text}"
            texts.append(text)
        return texts

    def _build_label_text(self, df: pd.DataFrame, with_owner: bool) -> list[str]:
        """Build in-scene label text for hovered items."""
        texts = []
        for _, row in df.iterrows():
            label = _truncate(row["text"], max_chars=60)
            if with_owner:
                label = f"{html.escape(str(row['owner_name']))}: {label}"
            texts.append(label)
        return texts


def _truncate(text: str, max_chars: int = config.TOOLTIP_MAX_CHARS) -> str:
    text = str(text)
    if len(text) > max_chars:
        text = text[:max_chars] + "..."
    return html.escape(text)
