# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/services/folder_stats_service.py

Servicio de tamaño y estadísticas de carpeta.

Responsabilidades:
- Verificar que la carpeta exista para el usuario (FolderNotFoundError)
- En PostgreSQL, acotar la consulta con SET LOCAL statement_timeout
- Delegar el recorrido al repositorio, que traduce la cancelación por
  timeout (57014) a CalculateFolderSizeTimeoutError

Autor: Equipo Backend
Fecha: 2026-10-07
"""

from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config import settings
from app.modules.folders.errors import FolderNotFoundError
from app.modules.folders.repositories import FolderRepository
from app.modules.folders.schemas import FolderStats

logger = logging.getLogger(__name__)


class FolderStatsService:
    """Tamaño exacto y estadísticas acotadas de un subárbol."""

    def __init__(
        self,
        db: AsyncSession,
        folder_repository: Optional[FolderRepository] = None,
        statement_timeout_ms: Optional[int] = None,
    ) -> None:
        self.db = db
        self.folders = folder_repository or FolderRepository()
        self.statement_timeout_ms = (
            statement_timeout_ms
            if statement_timeout_ms is not None
            else int(settings.folders_stats_statement_timeout_ms)
        )

    async def get_folder_size(
        self,
        folder_uuid: UUID,
        user_id: int,
        include_trash: bool = True,
    ) -> int:
        await self._ensure_folder(folder_uuid, user_id)
        await self._apply_statement_timeout()
        size = await self.folders.calculate_folder_size(
            self.db, folder_uuid, include_trash=include_trash, user_id=user_id
        )
        logger.debug("folder_size: folder_uuid=%s user_id=%s size=%d", folder_uuid, user_id, size)
        return size

    async def get_folder_stats(self, folder_uuid: UUID, user_id: int) -> FolderStats:
        await self._ensure_folder(folder_uuid, user_id)
        await self._apply_statement_timeout()
        stats = await self.folders.calculate_folder_stats(self.db, folder_uuid, user_id=user_id)
        logger.debug(
            "folder_stats: folder_uuid=%s user_id=%s count=%d exact=%s",
            folder_uuid, user_id, stats.file_count, stats.is_file_count_exact,
        )
        return stats

    async def _ensure_folder(self, folder_uuid: UUID, user_id: int) -> None:
        folder = await self.folders.get_folder_for_user(self.db, folder_uuid, user_id)
        if folder is None:
            raise FolderNotFoundError()

    async def _apply_statement_timeout(self) -> None:
        bind = self.db.get_bind()
        if bind.dialect.name != "postgresql" or self.statement_timeout_ms <= 0:
            return
        await self.db.execute(text(f"SET LOCAL statement_timeout = {int(self.statement_timeout_ms)}"))


__all__ = ["FolderStatsService"]

# Fin del archivo backend/app/modules/folders/services/folder_stats_service.py
