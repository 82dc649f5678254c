# -*- coding: utf-8 -*-
"""
backend/app/modules/jobs/enums/job_enums.py

Nombres de jobs con checkpoint y estados de una ejecución.

Autor: Equipo Backend
Fecha: 2026-10-04
"""

from __future__ import annotations

from enum import StrEnum


class JobName(StrEnum):
    """Nombre lógico de un job; clave de búsqueda en job_executions."""
    DELETED_ITEMS_CLEANUP = "deleted-items-cleanup"


class JobStatus(StrEnum):
    """
    Estado de una ejecución.

    RUNNING es el único estado no terminal. Una fila que queda en RUNNING
    (proceso muerto a mitad de corrida) se ignora en la búsqueda del
    último éxito.
    """
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


__all__ = ["JobName", "JobStatus"]
