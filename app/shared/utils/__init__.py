"""
backend/app/shared/utils/__init__.py

Utilidades comunes: lectura tolerante de variables de entorno.

Autor: Equipo Backend
Fecha: 2026-10-03
"""

from .env_utils import env_bool, env_datetime, env_float, env_int

__all__ = [
    "env_bool",
    "env_int",
    "env_float",
    "env_datetime",
]
