# -*- coding: utf-8 -*-
"""
backend/app/routes/__init__.py

Ensamblador de ruteadores de la API.

Responsabilidades:
- Incluir el router de health (/health)
- Incluir los routers del módulo Folders (estadísticas e internos)

Autor: Equipo Backend
Fecha: 2026-10-11
"""

from fastapi import APIRouter

from .health_routes import router as health_router
from app.modules.folders.routes import folder_stats_router, internal_cleanup_router

router = APIRouter()

router.include_router(health_router)
router.include_router(folder_stats_router)
router.include_router(internal_cleanup_router)

__all__ = ["router"]

# Fin del archivo backend/app/routes/__init__.py
