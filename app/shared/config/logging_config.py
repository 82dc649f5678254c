# -*- coding: utf-8 -*-
"""
backend/app/shared/config/logging_config.py

Configuración centralizada de logging.
Soporta formato plain (desarrollo) y json (producción).

Los jobs de limpieza y los comandos de consola usan la misma
configuración: en json cada línea es un objeto con asctime/name/levelname.

Autor: Equipo Backend
Fecha: 2026-10-02
"""

import logging.config
from typing import Literal


def _json_formatter_path() -> str:
    """Resuelve la ruta del JsonFormatter (v3 movió jsonlogger -> json)."""
    import importlib
    try:
        importlib.import_module("pythonjsonlogger.json")
        return "pythonjsonlogger.json.JsonFormatter"
    except ImportError:  # pragma: no cover
        return "pythonjsonlogger.jsonlogger.JsonFormatter"


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
    fmt: Literal["plain", "pretty", "json"] = "plain"
) -> None:
    """
    Configura el sistema de logging de la aplicación.

    Args:
        level: Nivel de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: Formato de salida (plain, pretty, json)

    Ejemplos:
        >>> setup_logging("INFO", "plain")
        >>> setup_logging("WARNING", "json")
    """
    use_json = fmt == "json"

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json" if use_json else ("pretty" if fmt == "pretty" else "default"),
            "stream": "ext://sys.stdout",
        }
    }

    formatters = {
        "default": {
            "format": "%(levelname)s [%(name)s]: %(message)s"
        },
        "pretty": {
            "format": "%(asctime)s - %(levelname)s - %(name)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "json": {
            "()": _json_formatter_path(),
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s"
        },
    }

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "loggers": {
            # El pool de NullPool es muy ruidoso al cerrar conexiones asyncpg
            "sqlalchemy.pool.impl.NullPool": {"level": "CRITICAL"},
            "apscheduler": {"level": "WARNING"},
        },
        "root": {
            "handlers": ["console"],
            "level": level.upper(),
        },
    }

    logging.config.dictConfig(logging_config)


__all__ = ["setup_logging"]
# Fin del archivo backend/app/shared/config/logging_config.py
