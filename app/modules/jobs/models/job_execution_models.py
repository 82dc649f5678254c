# -*- coding: utf-8 -*-
"""
backend/app/modules/jobs/models/job_execution_models.py

Modelo ORM de la tabla `job_executions`.

Una fila por corrida de un job con checkpoint:
- started_at: inicio de la corrida; también es el límite superior de la
  ventana que procesa esa corrida.
- completed_at / failed_at: sólo uno se llena, una única vez.
- metadata: JSON opaco (resumen de resultados, id de disparo, etc.).

Autor: Equipo Backend
Fecha: 2026-10-04
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Enum as SAEnum, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, utcnow
from app.modules.jobs.enums import JobStatus


class JobExecution(Base):
    """Ejecución de un job (registro append-only)."""

    __tablename__ = "job_executions"
    __table_args__ = (
        Index("ix_job_executions_name_status_started", "job_name", "status", "started_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    job_name: Mapped[str] = mapped_column(String(100), nullable=False)
    status: Mapped[JobStatus] = mapped_column(
        SAEnum(
            JobStatus,
            name="job_execution_status_enum",
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=JobStatus.RUNNING,
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    failed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    error_message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # "metadata" está reservado por la API declarativa
    job_metadata: Mapped[Optional[dict[str, Any]]] = mapped_column(
        "metadata",
        JSON().with_variant(JSONB(), "postgresql"),
        nullable=True,
    )

    def __repr__(self) -> str:
        return (
            f"<JobExecution id={self.id} job={self.job_name} status={self.status} "
            f"started_at={self.started_at}>"
        )


__all__ = ["JobExecution"]
