# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/repositories/__init__.py
"""

from .folder_repository import FolderRepository
from .file_repository import FileRepository
from .user_repository import UserRepository

__all__ = ["FolderRepository", "FileRepository", "UserRepository"]
