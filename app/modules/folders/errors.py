# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/errors.py

Errores de dominio del módulo Folders.

Los ruteadores traducen estas excepciones a respuestas HTTP; los jobs
las registran en su ejecución y las propagan.

Autor: Equipo Backend
Fecha: 2026-10-05
"""

from __future__ import annotations

from typing import Optional


class FoldersError(Exception):
    """
    Error base para el módulo Folders.
    """

    pass


class FolderNotFoundError(FoldersError):
    """
    La carpeta no existe, está removida o no pertenece al usuario.
    """

    def __init__(self, message: str = "Folder not found") -> None:
        super().__init__(message)


class CalculateFolderSizeTimeoutError(FoldersError):
    """
    El cálculo de tamaño/estadísticas excedió el statement_timeout.

    Es reintentable: el cliente puede volver a pedir el dato más tarde.
    """

    retryable = True

    def __init__(self, message: str = "Calculating folder size timed out, please retry later") -> None:
        super().__init__(message)


class CascadeStalledError(FoldersError):
    """
    Un lote de la cascada no progresa: el mismo elemento sigue apareciendo
    como violación después de aplicar las correcciones.
    """

    def __init__(self, phase: str, stuck_uuid: Optional[object] = None) -> None:
        self.phase = phase
        self.stuck_uuid = stuck_uuid
        super().__init__(
            f"Cascade phase '{phase}' is not making progress (stuck on {stuck_uuid})"
        )


__all__ = [
    "FoldersError",
    "FolderNotFoundError",
    "CalculateFolderSizeTimeoutError",
    "CascadeStalledError",
]

# Fin del archivo backend/app/modules/folders/errors.py
