"""
Batch loaders for Embedscape.
"""

from .base import BaseBatchLoader, get_loader, list_loaders, register_loader
from .points_file import PointsFileLoader
from .texts_csv import TextsCsvLoader
from .owners import OwnerDirectory, load_owner_directory

__all__ = [
    "BaseBatchLoader",
    "get_loader",
    "list_loaders",
    "register_loader",
    "PointsFileLoader",
    "TextsCsvLoader",
    "OwnerDirectory",
    "load_owner_directory",
]
