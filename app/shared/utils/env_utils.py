# -*- coding: utf-8 -*-
"""
backend/app/shared/utils/env_utils.py

Lectura tolerante de variables de entorno para la configuración de jobs.
Un valor mal formado cae al default en lugar de romper el import.

Autor: Equipo Backend
Fecha: 2026-10-03
"""

from __future__ import annotations

import os
from datetime import datetime, timezone


def env_bool(name: str, default: bool) -> bool:
    """Lee un booleano desde env de forma robusta."""
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    return v in ("1", "true", "t", "yes", "y", "on")


def env_int(name: str, default: int) -> int:
    """Lee un int desde env de forma robusta."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw.strip())
    except ValueError:
        return default


def env_float(name: str, default: float) -> float:
    """Lee un float desde env de forma robusta."""
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw.strip())
    except ValueError:
        return default


def env_datetime(name: str, default: datetime) -> datetime:
    """
    Lee una fecha ISO-8601 desde env. Sin zona horaria se asume UTC.
    """
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = datetime.fromisoformat(raw.strip())
    except ValueError:
        return default
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


__all__ = ["env_bool", "env_int", "env_float", "env_datetime"]
