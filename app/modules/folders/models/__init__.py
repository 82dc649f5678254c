# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/models/__init__.py

Modelos ORM del árbol: Folder, File y User.
"""

from .folder_models import Folder
from .file_models import File
from .user_models import User

__all__ = ["Folder", "File", "User"]
