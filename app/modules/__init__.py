# -*- coding: utf-8 -*-
"""
backend/app/modules/__init__.py

Módulos de dominio:
- folders: cascada de borrado, estadísticas de carpeta y deduplicación
- jobs: registro de ejecuciones (checkpoint por nombre de job)
"""
