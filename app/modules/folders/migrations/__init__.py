# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/migrations/__init__.py

Migraciones de datos únicas (se ejecutan por CLI).
"""
