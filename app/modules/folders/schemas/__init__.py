# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/schemas/__init__.py
"""

from .cleanup_schemas import CleanupWindow, FolderRef
from .folder_stats_schemas import (
    FolderStats,
    FolderSizeResponse,
    FolderStatsResponse,
    RetroactiveCleanupRequest,
    RetroactiveCleanupAccepted,
)

__all__ = [
    "CleanupWindow",
    "FolderRef",
    "FolderStats",
    "FolderSizeResponse",
    "FolderStatsResponse",
    "RetroactiveCleanupRequest",
    "RetroactiveCleanupAccepted",
]
