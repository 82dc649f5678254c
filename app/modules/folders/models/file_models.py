# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/models/file_models.py

Modelo ORM de la tabla `files`.

Un archivo pertenece a una carpeta por (folder_uuid, user_id). `size` es
BIGINT en bytes. La cascada mueve archivos directamente a DELETED y nunca
los regresa.

Autor: Equipo Backend
Fecha: 2026-10-04
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import BigInteger, Boolean, DateTime, Index, Integer, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, utcnow
from app.modules.folders.enums.file_status_enum import FileStatus, file_status_column_type


class File(Base):
    """Archivo dentro de una carpeta."""

    __tablename__ = "files"
    __table_args__ = (
        Index("ix_files_folder_user_status", "folder_uuid", "user_id", "status"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[UUID] = mapped_column(Uuid(), nullable=False, default=uuid4, index=True)
    folder_uuid: Mapped[UUID] = mapped_column(Uuid(), nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)

    status: Mapped[FileStatus] = mapped_column(
        file_status_column_type(), nullable=False, default=FileStatus.EXISTS
    )
    size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    removed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    removed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    creation_time: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return f"<File id={self.id} uuid={self.uuid} status={self.status} size={self.size}>"


__all__ = ["File"]

# Fin del archivo backend/app/modules/folders/models/file_models.py
