# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/jobs/__init__.py

Jobs de mantenimiento del módulo Folders.
"""

from .deleted_items_cleanup_job import (
    JOB_ID as DELETED_ITEMS_CLEANUP_JOB_ID,
    DeletedItemsCleanupJob,
    deleted_items_cleanup_job,
    register_deleted_items_cleanup_job,
)
from .retroactive_items_cleanup_job import RetroactiveItemsCleanupJob

__all__ = [
    "DELETED_ITEMS_CLEANUP_JOB_ID",
    "DeletedItemsCleanupJob",
    "deleted_items_cleanup_job",
    "register_deleted_items_cleanup_job",
    "RetroactiveItemsCleanupJob",
]
