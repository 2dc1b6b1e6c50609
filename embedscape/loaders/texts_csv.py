"""
Texts CSV loader for batch embedding.
Loads a user-provided CSV with one text per row and an optional owner.
"""

from pathlib import Path
from typing import Optional

import pandas as pd

from .base import BaseBatchLoader, register_loader
import config


@register_loader("texts_csv")
class TextsCsvLoader(BaseBatchLoader):
    """
    Loader for a CSV of texts to embed.

    Expected CSV format:
    - text: Main content (also accepted: content, body, message)
    - owner: Optional owner id (also accepted: ownerId, owner_id, author, user)
    """

    TEXT_COLUMNS = ["text", "content", "body", "message"]
    OWNER_COLUMNS = ["ownerId", "owner_id", "owner", "creatorId", "author", "user"]

    def __init__(
        self,
        csv_path: Optional[Path] = None,
        default_owner: Optional[str] = None
    ):
        """
        Args:
            csv_path: Path to the CSV file (defaults to config.TEXTS_CSV_PATH)
            default_owner: Owner id for rows without one
        """
        self.csv_path = Path(csv_path) if csv_path else config.TEXTS_CSV_PATH
        self.default_owner = default_owner

    @property
    def name(self) -> str:
        return f"texts_csv:{self.csv_path.name}"

    def load(self) -> pd.DataFrame:
        """
        Load the CSV and normalize to text/owner_id columns.

        Returns:
            DataFrame with columns: text, owner_id.
            Empty DataFrame if the file doesn't exist.
        """
        if not self.csv_path.exists():
            return pd.DataFrame(columns=["text", "owner_id"])

        df = pd.read_csv(self.csv_path, dtype=str)
        if df.empty:
            return pd.DataFrame(columns=["text", "owner_id"])

        text_col = self._find_column(list(df.columns), self.TEXT_COLUMNS)
        if text_col is None:
            raise ValueError(
                f"Texts CSV must have a 'text' column. "
                f"Available columns: {list(df.columns)}"
            )

        owner_col = self._find_column(list(df.columns), self.OWNER_COLUMNS)
        normalized = pd.DataFrame({
            "text": df[text_col],
            "owner_id": df[owner_col] if owner_col else self.default_owner,
        })
        if owner_col and self.default_owner is not None:
            normalized["owner_id"] = normalized["owner_id"].fillna(self.default_owner)

        return self.validate(normalized)

    def exists(self) -> bool:
        return self.csv_path.exists()
