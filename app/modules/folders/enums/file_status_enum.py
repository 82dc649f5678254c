# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/enums/file_status_enum.py

Estado de un archivo en el árbol del usuario.

Valores:
- EXISTS: visible en su carpeta
- TRASHED: en la papelera del usuario (cuenta para el uso si se pide)
- DELETED: terminal; la cascada sólo mueve archivos hacia este estado

Autor: Equipo Backend
Fecha: 2026-10-04
"""

from __future__ import annotations

from enum import StrEnum

from sqlalchemy import Enum as SAEnum


class FileStatus(StrEnum):
    """Estado de ciclo de vida de un archivo."""
    EXISTS = "EXISTS"
    TRASHED = "TRASHED"
    DELETED = "DELETED"


def file_status_column_type() -> SAEnum:
    """Tipo de columna; VARCHAR con CHECK para funcionar igual en PostgreSQL y SQLite."""
    return SAEnum(
        FileStatus,
        name="file_status_enum",
        native_enum=False,
        length=20,
        values_callable=lambda e: [m.value for m in e],
    )


__all__ = ["FileStatus", "file_status_column_type"]

# Fin del archivo backend/app/modules/folders/enums/file_status_enum.py
