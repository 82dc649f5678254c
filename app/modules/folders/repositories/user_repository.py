# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/repositories/user_repository.py

Paginación de usuarios por id ascendente para el barrido retroactivo.

Autor: Equipo Backend
Fecha: 2026-10-06
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.repository import BaseRepository
from app.modules.folders.models import User


class UserRepository(BaseRepository[User]):

    def __init__(self) -> None:
        super().__init__(User)

    async def get_users_ordered_by_id(
        self,
        session: AsyncSession,
        limit: int,
        offset: int = 0,
        start_from_user_id: Optional[int] = None,
    ) -> list[User]:
        """Página de usuarios con id >= start_from_user_id (si se indica)."""
        stmt = select(User).order_by(User.id.asc()).limit(limit).offset(offset)
        if start_from_user_id is not None:
            stmt = stmt.where(User.id >= start_from_user_id)
        result = await session.execute(stmt)
        return list(result.scalars().all())


__all__ = ["UserRepository"]

# Fin del archivo backend/app/modules/folders/repositories/user_repository.py
