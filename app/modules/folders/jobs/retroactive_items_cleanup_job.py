# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/jobs/retroactive_items_cleanup_job.py

Barrido retroactivo de la cascada de borrado, usuario por usuario.

Cubre lo que quedó fuera de la ventana del reconciliador periódico (datos
anteriores a su puesta en marcha). Para cada usuario, en orden de id:

1. Busca su carpeta removida más reciente; si no tiene, lo omite
2. Corte = removed_at de esa carpeta (o ahora, si es NULL)
3. Corre FoldersPhase y FilesPhase acotadas a (user_id, updated_at <= corte)
   mientras los lotes vengan llenos

No usa job_executions: la reanudación es manual con start_from_user_id,
a partir del último id registrado en log.

Autor: Equipo Backend
Fecha: 2026-10-08
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.base import utcnow
from app.shared.database.database import SessionLocal
from app.modules.folders.repositories import FileRepository, FolderRepository, UserRepository
from app.modules.folders.services.cascade_phase_runner import run_cascade_phase

_logger = logging.getLogger("folders.jobs.retroactive_items_cleanup")

USERS_PAGE_SIZE = 100
MAX_ITEMS_PER_BATCH = 100


class RetroactiveItemsCleanupJob:
    """Barrido por usuario sin checkpoint."""

    def __init__(
        self,
        session_factory: Optional[Callable[[], AsyncSession]] = None,
        batch_size: int = MAX_ITEMS_PER_BATCH,
        users_page_size: int = USERS_PAGE_SIZE,
        folder_repository: Optional[FolderRepository] = None,
        file_repository: Optional[FileRepository] = None,
        user_repository: Optional[UserRepository] = None,
    ) -> None:
        self.session_factory = session_factory or SessionLocal
        self.batch_size = batch_size
        self.users_page_size = users_page_size
        self.folders = folder_repository or FolderRepository()
        self.files = file_repository or FileRepository()
        self.users = user_repository or UserRepository()

    async def run(self, start_from_user_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Recorre todos los usuarios (desde start_from_user_id, inclusive).

        Returns:
            Resumen: users_processed, users_with_removed_folders,
            folders_updated, files_updated, last_user_id.
        """
        summary: Dict[str, Any] = {
            "users_processed": 0,
            "users_with_removed_folders": 0,
            "folders_updated": 0,
            "files_updated": 0,
            "last_user_id": None,
        }

        _logger.info(
            "retroactive_cleanup_start: start_from_user_id=%s page_size=%d batch_size=%d",
            start_from_user_id, self.users_page_size, self.batch_size,
        )

        async with self.session_factory() as db:
            offset = 0
            while True:
                users = await self.users.get_users_ordered_by_id(
                    db, self.users_page_size, offset, start_from_user_id
                )
                user_ids = [user.id for user in users]

                for user_id in user_ids:
                    folders_updated, files_updated = await self.process_user(db, user_id)
                    summary["users_processed"] += 1
                    if folders_updated is not None:
                        summary["users_with_removed_folders"] += 1
                        summary["folders_updated"] += folders_updated
                        summary["files_updated"] += files_updated
                    summary["last_user_id"] = user_id

                if user_ids:
                    _logger.info(
                        "retroactive_cleanup_page_done: users_processed=%d last_user_id=%s",
                        summary["users_processed"], user_ids[-1],
                    )

                if len(user_ids) < self.users_page_size:
                    break
                offset += self.users_page_size

        _logger.info(
            "retroactive_cleanup_finished: users_processed=%d folders_updated=%d files_updated=%d",
            summary["users_processed"], summary["folders_updated"], summary["files_updated"],
        )
        return summary

    async def process_user(self, db: AsyncSession, user_id: int) -> tuple[Optional[int], int]:
        """
        Drena las violaciones de un usuario.

        Returns:
            (carpetas actualizadas, archivos actualizados); carpetas es None
            si el usuario no tiene carpetas removidas.
        """
        last_removed = await self.folders.get_last_removed_folder(db, user_id)
        if last_removed is None:
            return None, 0

        cutoff = last_removed.removed_at or utcnow()
        prefix = f"[user {user_id}] "

        folders_phase = await run_cascade_phase(
            "FoldersPhase",
            lambda: self.folders.get_user_folders_with_active_children(
                db, user_id, cutoff, self.batch_size
            ),
            lambda refs: self._apply(db, self.folders.mark_child_folders_as_removed, refs),
            logger=_logger,
            log_prefix=prefix,
            drain_while_full=self.batch_size,
        )
        files_phase = await run_cascade_phase(
            "FilesPhase",
            lambda: self.folders.get_user_folders_with_active_files(
                db, user_id, cutoff, self.batch_size
            ),
            lambda refs: self._apply(db, self.files.mark_files_in_folders_as_removed, refs),
            logger=_logger,
            log_prefix=prefix,
            drain_while_full=self.batch_size,
        )

        _logger.info(
            "retroactive_cleanup_user_done: user_id=%d cutoff=%s affected_folders=%d affected_files=%d",
            user_id, cutoff.isoformat(), folders_phase.rows_updated, files_phase.rows_updated,
        )
        return folders_phase.rows_updated, files_phase.rows_updated

    @staticmethod
    async def _apply(db: AsyncSession, writer, refs) -> int:
        updated = await writer(db, refs)
        await db.commit()
        return updated


__all__ = ["RetroactiveItemsCleanupJob", "USERS_PAGE_SIZE", "MAX_ITEMS_PER_BATCH"]

# Fin del archivo backend/app/modules/folders/jobs/retroactive_items_cleanup_job.py
