# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/jobs/deleted_items_cleanup_job.py

Job periódico que repara la cascada de borrado diferido.

Marcar una carpeta como `removed` no reescribe su subárbol. Este job
recorre las carpetas removidas desde la última corrida exitosa y propaga
la remoción a sus hijos directos, en lotes, hasta el punto fijo:

1. FoldersPhase: subcarpetas vivas de carpetas removidas → removed/deleted
   (cada hija hereda el updated_at del padre y entra en la misma ventana)
2. FilesPhase: archivos no DELETED de carpetas removidas → DELETED

Ventana de trabajo [start, until):
- until = started_at de esta corrida (fila en job_executions)
- start = started_at de la última corrida COMPLETED; si no hay, inicio
  del día UTC actual

Cada corrida queda registrada en job_executions (RUNNING → COMPLETED |
FAILED). Un error aborta la corrida, se registra y se propaga; el punto de
entrada del scheduler lo registra en log sin tumbar al scheduler.

Configuración por env vars:
- FOLDERS_CLEANUP_ENABLED: "true"/"false" (default: true)
- FOLDERS_CLEANUP_INTERVAL_HOURS: int (default: 4)
- FOLDERS_CLEANUP_BATCH_SIZE: int (default: 100)
- FOLDERS_CLEANUP_LOCK_TTL_SECONDS: int (default: 60)

Autor: Equipo Backend
Fecha: 2026-10-08
"""

from __future__ import annotations

import logging
from datetime import datetime, time, timezone
from typing import Any, Callable, Dict, Optional, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.config import settings
from app.shared.database.base import as_utc, utcnow
from app.shared.database.database import SessionLocal
from app.shared.redis import try_acquire_lock
from app.shared.utils.env_utils import env_bool, env_int
from app.modules.jobs.enums import JobName
from app.modules.jobs.models import JobExecution
from app.modules.jobs.repositories import JobExecutionRepository
from app.modules.folders.repositories import FileRepository, FolderRepository
from app.modules.folders.schemas import CleanupWindow, FolderRef
from app.modules.folders.services.cascade_phase_runner import run_cascade_phase

_logger = logging.getLogger("folders.jobs.deleted_items_cleanup")

# ═══════════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════════
JOB_ID = "folders_deleted_items_cleanup"

FOLDERS_CLEANUP_ENABLED = env_bool("FOLDERS_CLEANUP_ENABLED", True)
FOLDERS_CLEANUP_INTERVAL_HOURS = env_int("FOLDERS_CLEANUP_INTERVAL_HOURS", 4)
FOLDERS_CLEANUP_BATCH_SIZE = env_int("FOLDERS_CLEANUP_BATCH_SIZE", 100)
FOLDERS_CLEANUP_LOCK_TTL_SECONDS = env_int("FOLDERS_CLEANUP_LOCK_TTL_SECONDS", 60)

FOLDERS_PHASE = "FoldersPhase"
FILES_PHASE = "FilesPhase"


def _start_of_utc_day(now: datetime) -> datetime:
    return datetime.combine(now.astimezone(timezone.utc).date(), time.min, tzinfo=timezone.utc)


# ═══════════════════════════════════════════════════════════════════════════════
# JOB
# ═══════════════════════════════════════════════════════════════════════════════

class DeletedItemsCleanupJob:
    """
    Reconciliador de la cascada de borrado.

    Args:
        session_factory: Fábrica de AsyncSession (default: SessionLocal)
        batch_size: Carpetas por lote (default: FOLDERS_CLEANUP_BATCH_SIZE)
    """

    def __init__(
        self,
        session_factory: Optional[Callable[[], AsyncSession]] = None,
        batch_size: Optional[int] = None,
        folder_repository: Optional[FolderRepository] = None,
        file_repository: Optional[FileRepository] = None,
        job_repository: Optional[JobExecutionRepository] = None,
    ) -> None:
        self.session_factory = session_factory or SessionLocal
        self.batch_size = batch_size or FOLDERS_CLEANUP_BATCH_SIZE
        self.folders = folder_repository or FolderRepository()
        self.files = file_repository or FileRepository()
        self.executions = job_repository or JobExecutionRepository()

    async def run(self, metadata: Optional[Dict[str, Any]] = None) -> Dict[str, int]:
        """
        Ejecuta una corrida completa (ambas fases).

        Returns:
            Resumen guardado como metadata de la ejecución completada.

        Raises:
            Cualquier error de las fases, después de marcar la ejecución
            como FAILED.
        """
        async with self.session_factory() as db:
            window = await self._initialize_execution(db, metadata)
            prefix = f"[{window.run_id}] "

            _logger.info(
                "%sdeleted_items_cleanup_start: window=%s batch_size=%d",
                prefix, window.describe(), self.batch_size,
            )

            try:
                _logger.info("%sPhase 1: processing folders", prefix)
                folders_phase = await run_cascade_phase(
                    FOLDERS_PHASE,
                    lambda: self.folders.get_removed_folders_with_active_children(
                        db, window, self.batch_size
                    ),
                    lambda refs: self._apply(db, self.folders.mark_child_folders_as_removed, refs),
                    logger=_logger,
                    log_prefix=prefix,
                )

                _logger.info("%sPhase 2: processing files", prefix)
                files_phase = await run_cascade_phase(
                    FILES_PHASE,
                    lambda: self.folders.get_removed_folders_with_active_files(
                        db, window, self.batch_size
                    ),
                    lambda refs: self._apply(db, self.files.mark_files_in_folders_as_removed, refs),
                    logger=_logger,
                    log_prefix=prefix,
                )

                summary = {
                    "folders_with_children_processed": folders_phase.items_processed,
                    "folders_with_files_processed": files_phase.items_processed,
                    "folders_updated": folders_phase.rows_updated,
                    "files_updated": files_phase.rows_updated,
                    "batches": folders_phase.batches + files_phase.batches,
                }

                completed = await self.executions.mark_as_completed(db, window.run_id, summary)
                await db.commit()

            except Exception as e:
                _logger.error(
                    "%sdeleted_items_cleanup_error: %s", prefix, str(e)[:200], exc_info=True
                )
                await db.rollback()
                await self.executions.mark_as_failed(db, window.run_id, str(e))
                await db.commit()
                raise

        _logger.info(
            "%sdeleted_items_cleanup_done: completed_at=%s folders_updated=%d files_updated=%d batches=%d",
            prefix,
            completed.completed_at.isoformat() if completed and completed.completed_at else None,
            summary["folders_updated"],
            summary["files_updated"],
            summary["batches"],
        )
        return summary

    async def _initialize_execution(
        self,
        db: AsyncSession,
        metadata: Optional[Dict[str, Any]],
    ) -> CleanupWindow:
        """Lee la última corrida exitosa, registra la nueva y arma la ventana."""
        last_ok = await self.executions.get_last_successful(db, JobName.DELETED_ITEMS_CLEANUP)
        execution = await self.executions.start_job(db, JobName.DELETED_ITEMS_CLEANUP, metadata)
        await db.commit()

        until_date = execution.started_at
        start_date = self._calculate_start_date(last_ok, until_date)
        return CleanupWindow(start_date=start_date, until_date=until_date, run_id=execution.id)

    @staticmethod
    def _calculate_start_date(last_ok: Optional[JobExecution], until_date: datetime) -> datetime:
        until_date = as_utc(until_date)
        if last_ok is None or last_ok.started_at is None:
            start_date = _start_of_utc_day(until_date)
            _logger.warning(
                "deleted_items_cleanup_no_previous_run: using start of day %s",
                start_date.isoformat(),
            )
            return start_date

        last_started = as_utc(last_ok.started_at)
        if last_started > until_date:
            _logger.warning(
                "deleted_items_cleanup_watermark_ahead: last=%s until=%s",
                last_started.isoformat(), until_date.isoformat(),
            )
            return until_date
        return last_started

    @staticmethod
    async def _apply(
        db: AsyncSession,
        writer: Callable[[AsyncSession, Sequence[FolderRef]], Any],
        refs: Sequence[FolderRef],
    ) -> int:
        updated = await writer(db, refs)
        await db.commit()
        return updated


# ═══════════════════════════════════════════════════════════════════════════════
# PUNTO DE ENTRADA DEL SCHEDULER
# ═══════════════════════════════════════════════════════════════════════════════

async def deleted_items_cleanup_job(batch_size: int | None = None) -> Dict[str, Any] | None:
    """
    Corrida programada: toma el lock entre instancias y ejecuta el job.

    Nunca propaga: un error se registra en log (y en job_executions).

    Returns:
        Resumen de la corrida, o None si se omitió o falló.
    """
    lock_key = settings.folders_cleanup_lock_key
    started = utcnow()

    try:
        acquired = await try_acquire_lock(lock_key, FOLDERS_CLEANUP_LOCK_TTL_SECONDS)
        if not acquired:
            _logger.info(
                "deleted_items_cleanup_skipped: lock %s held by another instance", lock_key
            )
            return None

        _logger.info("deleted_items_cleanup_lock_acquired: key=%s", lock_key)
        summary = await DeletedItemsCleanupJob(batch_size=batch_size).run(
            metadata={"trigger": "scheduler"}
        )
    except Exception as e:
        _logger.error(
            "deleted_items_cleanup_job_error: started=%s error=%s",
            started.isoformat(), str(e)[:200], exc_info=True,
        )
        return None

    return summary


# ═══════════════════════════════════════════════════════════════════════════════
# REGISTRO EN SCHEDULER
# ═══════════════════════════════════════════════════════════════════════════════

def register_deleted_items_cleanup_job(
    scheduler=None,
) -> str | None:
    """
    Registra el reconciliador en el scheduler.

    Args:
        scheduler: Instancia de SchedulerService (opcional, usa global si None)

    Returns:
        ID del job registrado, o None si está deshabilitado
    """
    if not FOLDERS_CLEANUP_ENABLED:
        _logger.info(
            "[deleted_items_cleanup] Job disabled (FOLDERS_CLEANUP_ENABLED=false)"
        )
        return None

    if scheduler is None:
        from app.shared.scheduler import get_scheduler
        scheduler = get_scheduler()

    hours = FOLDERS_CLEANUP_INTERVAL_HOURS

    job_id = scheduler.add_interval_job(
        func=deleted_items_cleanup_job,
        job_id=JOB_ID,
        hours=hours,
        minutes=0,
        seconds=0,
    )

    _logger.info(
        "[deleted_items_cleanup] Job '%s' registered: every %d hours (batch_size=%d)",
        JOB_ID, hours, FOLDERS_CLEANUP_BATCH_SIZE,
    )

    return job_id


__all__ = [
    "JOB_ID",
    "DeletedItemsCleanupJob",
    "deleted_items_cleanup_job",
    "register_deleted_items_cleanup_job",
    "FOLDERS_CLEANUP_ENABLED",
    "FOLDERS_CLEANUP_INTERVAL_HOURS",
    "FOLDERS_CLEANUP_BATCH_SIZE",
    "FOLDERS_CLEANUP_LOCK_TTL_SECONDS",
]

# Fin del archivo backend/app/modules/folders/jobs/deleted_items_cleanup_job.py
