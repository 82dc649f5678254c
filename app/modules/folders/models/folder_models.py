# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/models/folder_models.py

Modelo ORM de la tabla `folders`.

Notas:
- `uuid` NO es único globalmente: puede repetirse entre usuarios. Toda
  navegación padre → hijo se hace por (parent_uuid, user_id).
- `parent_uuid` es NULL para carpetas de primer nivel.
- Borrado suave en dos pasos: `deleted` (papelera visible) y `removed`
  (terminal). Marcar una carpeta como removed no reescribe su subárbol;
  eso lo repara el job de limpieza.
- `id` es autoincremental; la deduplicación conserva el menor id.

Autor: Equipo Backend
Fecha: 2026-10-04
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Boolean, DateTime, Index, Integer, String, Uuid, false
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base, utcnow


class Folder(Base):
    """Carpeta del árbol de un usuario."""

    __tablename__ = "folders"
    __table_args__ = (
        Index("ix_folders_parent_user", "parent_uuid", "user_id"),
        Index("ix_folders_removed_updated", "removed", "updated_at"),
        Index("ix_folders_user_removed_at", "user_id", "removed_at"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[UUID] = mapped_column(Uuid(), nullable=False, default=uuid4, index=True)
    parent_uuid: Mapped[Optional[UUID]] = mapped_column(Uuid(), nullable=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)

    plain_name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    bucket: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    removed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    removed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<Folder id={self.id} uuid={self.uuid} user_id={self.user_id} "
            f"removed={self.removed} deleted={self.deleted}>"
        )


__all__ = ["Folder"]

# Fin del archivo backend/app/modules/folders/models/folder_models.py
