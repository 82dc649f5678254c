# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/enums/__init__.py
"""

from .file_status_enum import FileStatus

__all__ = ["FileStatus"]
