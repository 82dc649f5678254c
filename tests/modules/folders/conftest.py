# -*- coding: utf-8 -*-
"""
Fixtures del módulo Folders.

- seed_execution: inserta una fila en job_executions (por defecto una
  corrida COMPLETED de hace 1 hora, que fija el inicio de la ventana)
- minutes_ago: fecha UTC relativa al momento del test
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import pytest

from app.modules.jobs.enums import JobName, JobStatus
from app.modules.jobs.models import JobExecution


def minutes_ago(minutes: float) -> datetime:
    return datetime.now(timezone.utc) - timedelta(minutes=minutes)


@pytest.fixture
def seed_execution(db_session):
    async def _seed(
        status: JobStatus = JobStatus.COMPLETED,
        started_at: Optional[datetime] = None,
        job_name: str = JobName.DELETED_ITEMS_CLEANUP,
    ) -> JobExecution:
        execution = JobExecution(
            job_name=str(job_name),
            status=status,
            started_at=started_at or minutes_ago(60),
        )
        db_session.add(execution)
        await db_session.flush()
        return execution

    return _seed

# Fin del archivo backend/tests/modules/folders/conftest.py
