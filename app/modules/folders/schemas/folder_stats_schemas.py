# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/schemas/folder_stats_schemas.py

Esquemas de estadísticas de carpeta y de los endpoints del módulo.

FolderStats es el resultado de dominio (snake_case); FolderStatsResponse
es su forma en la API (camelCase).

Autor: Equipo Backend
Fecha: 2026-10-05
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


@dataclass(frozen=True)
class FolderStats:
    """
    Conteo y tamaño de los archivos vivos de un subárbol.

    - file_count: como máximo 1000
    - is_file_count_exact: False cuando hay más de 1000 archivos
    - total_size: suma de tamaños de a lo sumo 10000 archivos
    - is_total_size_exact: False cuando se alcanzó el tope de 10000
    """

    file_count: int
    is_file_count_exact: bool
    total_size: int
    is_total_size_exact: bool


class FolderSizeResponse(BaseModel):
    size: int = Field(..., ge=0, description="Total size in bytes")


class FolderStatsResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    file_count: int = Field(..., ge=0)
    is_file_count_exact: bool
    total_size: int = Field(..., ge=0)
    is_total_size_exact: bool

    @classmethod
    def from_stats(cls, stats: FolderStats) -> "FolderStatsResponse":
        return cls(
            file_count=stats.file_count,
            is_file_count_exact=stats.is_file_count_exact,
            total_size=stats.total_size,
            is_total_size_exact=stats.is_total_size_exact,
        )


class RetroactiveCleanupRequest(BaseModel):
    """Payload del disparo interno del barrido retroactivo."""

    start_from_user_id: Optional[int] = Field(
        default=None,
        ge=1,
        description="Resume the sweep from this user id (inclusive).",
    )


class RetroactiveCleanupAccepted(BaseModel):
    status: str = "accepted"
    start_from_user_id: Optional[int] = None


__all__ = [
    "FolderStats",
    "FolderSizeResponse",
    "FolderStatsResponse",
    "RetroactiveCleanupRequest",
    "RetroactiveCleanupAccepted",
]

# Fin del archivo backend/app/modules/folders/schemas/folder_stats_schemas.py
