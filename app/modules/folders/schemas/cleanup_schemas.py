# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/schemas/cleanup_schemas.py

Valores inmutables que recorren las fases de la cascada.

- FolderRef: (uuid, user_id) de una carpeta que viola la cascada. El
  uuid solo no identifica una carpeta; siempre viaja con su dueño.
- CleanupWindow: contexto de una corrida del reconciliador, ventana
  semiabierta [start_date, until_date).

Autor: Equipo Backend
Fecha: 2026-10-05
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import NamedTuple
from uuid import UUID


class FolderRef(NamedTuple):
    uuid: UUID
    user_id: int


@dataclass(frozen=True)
class CleanupWindow:
    """Ventana de trabajo de una corrida (start inclusivo, until exclusivo)."""

    start_date: datetime
    until_date: datetime
    run_id: int

    def __post_init__(self) -> None:
        if self.start_date > self.until_date:
            raise ValueError(
                f"Invalid cleanup window: start {self.start_date.isoformat()} "
                f"is after until {self.until_date.isoformat()}"
            )

    def describe(self) -> str:
        return f"[{self.start_date.isoformat()}, {self.until_date.isoformat()})"


__all__ = ["CleanupWindow", "FolderRef"]

# Fin del archivo backend/app/modules/folders/schemas/cleanup_schemas.py
