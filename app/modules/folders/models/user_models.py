# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/models/user_models.py

Vista mínima de la tabla `users`: sólo lo necesario para paginar el
barrido retroactivo por id ascendente.

Autor: Equipo Backend
Fecha: 2026-10-04
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from app.shared.database.base import Base


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    uuid: Mapped[UUID] = mapped_column(Uuid(), nullable=False, default=uuid4, unique=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<User id={self.id} uuid={self.uuid}>"


__all__ = ["User"]

# Fin del archivo backend/app/modules/folders/models/user_models.py
