"""Sync engine for pythemekit - download/upload/remove of theme assets."""

from .engine import SyncEngine
from .operations import END_OF_ASSETS, SyncOperations

__all__ = [
    "SyncEngine",
    "SyncOperations",
    "END_OF_ASSETS",
]
