# -*- coding: utf-8 -*-
"""
backend/app/modules/jobs/repositories/job_execution_repository.py

Checkpoint store de jobs sobre `job_executions`.

Uso típico (el commit queda a cargo del job):

    repo = JobExecutionRepository()
    last_ok = await repo.get_last_successful(db, JobName.DELETED_ITEMS_CLEANUP)
    execution = await repo.start_job(db, JobName.DELETED_ITEMS_CLEANUP)
    await db.commit()
    try:
        ...
        await repo.mark_as_completed(db, execution.id, {"items": 10})
    except Exception as e:
        await repo.mark_as_failed(db, execution.id, str(e))
        raise
    finally:
        await db.commit()

Las filas sólo se finalizan si siguen en RUNNING: una ejecución ya
cerrada nunca se reescribe.

Autor: Equipo Backend
Fecha: 2026-10-04
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from app.shared.database.base import as_utc, utcnow
from app.shared.database.repository import BaseRepository
from app.modules.jobs.enums import JobStatus
from app.modules.jobs.models import JobExecution

logger = logging.getLogger(__name__)

ERROR_MESSAGE_MAX_LEN = 500


class JobExecutionRepository(BaseRepository[JobExecution]):
    """Repositorio del registro de ejecuciones de jobs."""

    def __init__(self) -> None:
        super().__init__(JobExecution)

    async def start_job(
        self,
        session: AsyncSession,
        job_name: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> JobExecution:
        """Registra el inicio de una corrida (status RUNNING, started_at=now)."""
        execution = await self.create(
            session,
            job_name=str(job_name),
            status=JobStatus.RUNNING,
            started_at=utcnow(),
            job_metadata=metadata,
        )
        logger.info(
            "job_execution_started: job=%s execution_id=%s started_at=%s",
            job_name, execution.id, execution.started_at.isoformat(),
        )
        return execution

    async def mark_as_completed(
        self,
        session: AsyncSession,
        execution_id: int,
        metadata: Optional[dict[str, Any]] = None,
    ) -> Optional[JobExecution]:
        """
        Cierra la corrida como COMPLETED.

        Returns:
            La ejecución actualizada, o None si no existe o ya estaba cerrada.
        """
        execution = await self._get_running(session, execution_id)
        if execution is None:
            return None

        execution.status = JobStatus.COMPLETED
        execution.completed_at = utcnow()
        execution.job_metadata = self._merge_metadata(execution.job_metadata, metadata)
        await session.flush()
        return execution

    async def mark_as_failed(
        self,
        session: AsyncSession,
        execution_id: int,
        error_message: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> Optional[JobExecution]:
        """Cierra la corrida como FAILED con el mensaje de error (truncado)."""
        execution = await self._get_running(session, execution_id)
        if execution is None:
            return None

        execution.status = JobStatus.FAILED
        execution.failed_at = utcnow()
        execution.error_message = (error_message or "Unknown error")[:ERROR_MESSAGE_MAX_LEN]
        execution.job_metadata = self._merge_metadata(execution.job_metadata, metadata)
        await session.flush()
        return execution

    async def get_last_successful(
        self,
        session: AsyncSession,
        job_name: str,
    ) -> Optional[JobExecution]:
        """Última corrida COMPLETED del job, por started_at descendente."""
        stmt = (
            select(JobExecution)
            .where(
                JobExecution.job_name == str(job_name),
                JobExecution.status == JobStatus.COMPLETED,
            )
            .order_by(JobExecution.started_at.desc(), JobExecution.id.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        execution = result.scalars().first()
        if execution is not None:
            # normaliza sin marcar la fila como modificada
            set_committed_value(execution, "started_at", as_utc(execution.started_at))
        return execution

    async def _get_running(self, session: AsyncSession, execution_id: int) -> Optional[JobExecution]:
        execution = await self.get(session, execution_id)
        if execution is None:
            logger.warning("job_execution_not_found: execution_id=%s", execution_id)
            return None
        if execution.status != JobStatus.RUNNING:
            logger.warning(
                "job_execution_already_finished: execution_id=%s status=%s",
                execution_id, execution.status,
            )
            return None
        return execution

    @staticmethod
    def _merge_metadata(
        current: Optional[dict[str, Any]],
        extra: Optional[dict[str, Any]],
    ) -> Optional[dict[str, Any]]:
        if not extra:
            return current
        return {**(current or {}), **extra}


__all__ = ["JobExecutionRepository", "ERROR_MESSAGE_MAX_LEN"]
