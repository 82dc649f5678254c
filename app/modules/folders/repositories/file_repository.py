# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/repositories/file_repository.py

Escritura correctiva de la cascada sobre `files`.

Autor: Equipo Backend
Fecha: 2026-10-06
"""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.base import utcnow
from app.shared.database.repository import BaseRepository
from app.modules.folders.enums import FileStatus
from app.modules.folders.models import File
from app.modules.folders.repositories.folder_repository import group_refs_by_user
from app.modules.folders.schemas import FolderRef


class FileRepository(BaseRepository[File]):

    def __init__(self) -> None:
        super().__init__(File)

    async def mark_files_in_folders_as_removed(
        self,
        session: AsyncSession,
        folders: Iterable[FolderRef],
    ) -> int:
        """
        Pasa a DELETED (y removed) los archivos directos de las carpetas
        dadas, del mismo dueño. Archivos ya DELETED no se tocan.

        Returns:
            Filas actualizadas.
        """
        now = utcnow()
        updated = 0
        for user_id, uuids in group_refs_by_user(folders).items():
            stmt = (
                update(File)
                .where(
                    File.user_id == user_id,
                    File.folder_uuid.in_(uuids),
                    File.status != FileStatus.DELETED,
                )
                .values(
                    status=FileStatus.DELETED,
                    removed=True,
                    removed_at=now,
                    updated_at=now,
                )
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(stmt)
            updated += result.rowcount or 0
        return updated


__all__ = ["FileRepository"]

# Fin del archivo backend/app/modules/folders/repositories/file_repository.py
