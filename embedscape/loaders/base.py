"""
Base class for batch loaders.
Defines the interface all loaders must implement.
"""

import logging
from abc import ABC, abstractmethod

import pandas as pd

logger = logging.getLogger(__name__)


class BaseBatchLoader(ABC):
    """
    Abstract base class for batch loaders.

    All loaders return a DataFrame with at least these columns:
    - text: The text each point stands for
    - owner_id: Who wrote the text (may be None)

    Loaders of precomputed points add an 'embedding' column holding the
    already reduced coordinates.
    """

    required_columns: frozenset[str] = frozenset({"text", "owner_id"})

    @abstractmethod
    def load(self) -> pd.DataFrame:
        """Load and return the batch as a DataFrame."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this loader."""

    def validate(self, df: pd.DataFrame, drop_empty_text: bool = True) -> pd.DataFrame:
        """
        Validate that DataFrame has required columns.

        Args:
            df: DataFrame to validate
            drop_empty_text: Remove rows whose text is missing or blank

        Returns:
            Validated DataFrame with a fresh index

        Raises:
            ValueError: If required columns are missing
        """
        missing = set(self.required_columns) - set(df.columns)
        if missing:
            raise ValueError(f"{self.name} missing required columns: {sorted(missing)}")

        df["owner_id"] = df["owner_id"].apply(lambda v: str(v) if pd.notna(v) else None)

        if drop_empty_text:
            original_count = len(df)
            df = df[df["text"].notna() & (df["text"].astype(str).str.strip() != "")].copy()
            dropped_count = original_count - len(df)
            if dropped_count > 0:
                logger.warning(
                    f"Dropped {dropped_count} rows with empty/missing text "
                    f"({dropped_count / original_count * 100:.1f}% of {original_count} total)"
                )
        else:
            df["text"] = df["text"].fillna("")

        df["text"] = df["text"].astype(str)
        logger.info(f"Validated {self.name}: {len(df)} rows")

        return df.reset_index(drop=True)

    def _find_column(self, columns: list[str], candidates: list[str]) -> str | None:
        """Return the first column matching a candidate name, case-insensitively."""
        columns_lower = {c.lower(): c for c in columns}
        for candidate in candidates:
            if candidate in columns:
                return candidate
            if candidate.lower() in columns_lower:
                return columns_lower[candidate.lower()]
        return None


# Registry for available loaders
_LOADER_REGISTRY: dict[str, type[BaseBatchLoader]] = {}


def register_loader(name: str):
    """
    Decorator to register a loader class.

    Raises:
        TypeError: If class doesn't inherit from BaseBatchLoader
        ValueError: If name is already registered
    """
    def decorator(cls: type[BaseBatchLoader]):
        if not issubclass(cls, BaseBatchLoader):
            raise TypeError(f"{cls.__name__} must inherit from BaseBatchLoader")
        if name in _LOADER_REGISTRY:
            raise ValueError(
                f"Loader '{name}' already registered by {_LOADER_REGISTRY[name].__name__}"
            )
        _LOADER_REGISTRY[name] = cls
        return cls
    return decorator


def get_loader(name: str, **kwargs) -> BaseBatchLoader:
    """
    Get a loader instance by name.

    Raises:
        ValueError: If loader name not found
    """
    if name not in _LOADER_REGISTRY:
        available = list(_LOADER_REGISTRY.keys())
        raise ValueError(f"Unknown loader '{name}'. Available: {available}")

    return _LOADER_REGISTRY[name](**kwargs)


def list_loaders() -> list[str]:
    """Return list of registered loader names."""
    return list(_LOADER_REGISTRY.keys())
