"""
Static point file loader.
Loads a JSON array of already reduced points with their texts and owners.
"""

import json
from pathlib import Path
from typing import Optional

import pandas as pd

from .base import BaseBatchLoader, register_loader
import config


@register_loader("points_file")
class PointsFileLoader(BaseBatchLoader):
    """
    Loader for precomputed point files.

    Expected JSON format:
        [{"ownerId": "user1", "text": "...", "embedding": [x, y, z]}, ...]

    'creatorId' is accepted in place of 'ownerId'. Every embedding must have
    the same length, 2 or 3. No reduction is applied to these points.
    """

    required_columns = frozenset({"text", "owner_id", "embedding"})

    OWNER_COLUMNS = ["ownerId", "owner_id", "creatorId", "owner"]

    def __init__(self, path: Optional[Path] = None):
        """
        Args:
            path: Path to the JSON file (defaults to config.POINTS_FILE_PATH)
        """
        self.path = Path(path) if path else config.POINTS_FILE_PATH

    @property
    def name(self) -> str:
        return f"points_file:{self.path.name}"

    def load(self) -> pd.DataFrame:
        """
        Load the point file.

        Returns:
            DataFrame with columns: text, owner_id, embedding

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the content is not a list of valid point records
        """
        with open(self.path, encoding="utf-8") as f:
            records = json.load(f)

        if not isinstance(records, list):
            raise ValueError(f"{self.path} must contain a JSON array of points")

        rows = []
        for i, record in enumerate(records):
            if not isinstance(record, dict):
                raise ValueError(f"Point {i} is not a JSON object")
            # Owner key can differ from record to record
            owner = next(
                (record[k] for k in self.OWNER_COLUMNS if record.get(k) is not None), None
            )
            rows.append({
                "text": record.get("text", ""),
                "owner_id": owner,
                "embedding": record.get("embedding"),
            })

        df = pd.DataFrame(rows, columns=["text", "owner_id", "embedding"])
        if df.empty:
            return df

        df = self.validate(df, drop_empty_text=False)
        self._check_embeddings(df)
        df["embedding"] = df["embedding"].apply(lambda e: [float(c) for c in e])
        return df

    def _check_embeddings(self, df: pd.DataFrame) -> None:
        lengths = set()
        for i, embedding in enumerate(df["embedding"]):
            if not isinstance(embedding, (list, tuple)):
                raise ValueError(f"Point {i} has no embedding list")
            lengths.add(len(embedding))

        if len(lengths) > 1:
            raise ValueError(f"Point embeddings have mixed lengths: {sorted(lengths)}")
        if lengths and lengths.pop() not in config.SUPPORTED_COMPONENTS:
            raise ValueError(
                f"Point embeddings must have length {config.SUPPORTED_COMPONENTS}"
            )

    def exists(self) -> bool:
        return self.path.exists()
