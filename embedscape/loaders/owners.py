"""
Owner directory: display names and colors per owner id.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OwnerDirectory:
    """Owner id -> display name and owner id -> color."""
    names: dict[str, str]
    colors: dict[str, str]

    def name_for(self, owner_id: Optional[str]) -> str:
        if owner_id is None:
            return "Unknown"
        return self.names.get(owner_id, owner_id)


def load_owner_directory(path: Optional[Path] = None) -> OwnerDirectory:
    """
    Load an owner directory JSON file.

    Expected format:
        {"user181694388": {"name": "Amir", "color": "#8884d8"}, ...}

    A missing file yields an empty directory.

    Raises:
        ValueError: If the file is not a JSON object of owner entries
    """
    path = Path(path) if path else config.OWNERS_FILE_PATH
    if not path.exists():
        logger.debug(f"No owner directory at {path}")
        return OwnerDirectory(names={}, colors={})

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object keyed by owner id")

    names, colors = {}, {}
    for owner_id, entry in data.items():
        if isinstance(entry, str):
            names[owner_id] = entry
            continue
        if not isinstance(entry, dict):
            raise ValueError(f"Owner entry for {owner_id!r} must be an object or a name")
        if entry.get("name"):
            names[owner_id] = str(entry["name"])
        if entry.get("color"):
            colors[owner_id] = str(entry["color"])

    logger.info(f"Loaded {len(data)} owners from {path}")
    return OwnerDirectory(names=names, colors=colors)
