# -*- coding: utf-8 -*-
"""
backend/app/shared/database/__init__.py

Re-exporta utilidades comunes de base de datos.

Solo se re-exporta lo que no crea el engine al importar (Base y helpers);
engine/SessionLocal se importan desde app.shared.database.database.

Autor: Equipo Backend
Fecha: 2026-10-02
"""

from __future__ import annotations

from .base import Base, NAMING_CONVENTION, as_utc, utcnow
from .repository import BaseRepository

__all__ = [
    "Base",
    "NAMING_CONVENTION",
    "as_utc",
    "utcnow",
    "BaseRepository",
]

# Fin del archivo backend/app/shared/database/__init__.py
