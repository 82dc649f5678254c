# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/routes/__init__.py
"""

from .folder_stats_routes import router as folder_stats_router
from .internal_cleanup_routes import router as internal_cleanup_router

__all__ = ["folder_stats_router", "internal_cleanup_router"]
