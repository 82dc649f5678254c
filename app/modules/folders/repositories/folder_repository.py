# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/repositories/folder_repository.py

Primitivas de consulta/actualización sobre `folders` para la cascada de
borrado y las estadísticas de carpeta.

Reglas que cumplen todas las consultas de este módulo:
- Padre e hijo se relacionan por (parent_uuid = uuid, user_id = user_id);
  nunca se cruza el árbol de otro usuario.
- Toda escritura correctiva está condicionada a `removed = false`, de modo
  que repetirla no tiene efecto.
- Sólo SQLAlchemy Core/ORM (sin SQL crudo) para que el mismo código corra
  en PostgreSQL y en SQLite.

Los repositorios no hacen commit.

Autor: Equipo Backend
Fecha: 2026-10-06
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import datetime
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import exists, false, func, literal, or_, select, true, update
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased
from sqlalchemy.orm.attributes import set_committed_value

from app.shared.database.base import as_utc, utcnow
from app.shared.database.repository import BaseRepository
from app.modules.folders.enums import FileStatus
from app.modules.folders.errors import CalculateFolderSizeTimeoutError
from app.modules.folders.models import File, Folder
from app.modules.folders.schemas import CleanupWindow, FolderRef, FolderStats

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════════
# CONSTANTES
# ═══════════════════════════════════════════════════════════════════════════════

# Guardia de profundidad del recorrido recursivo
MAX_TREE_DEPTH = 100_000

# Archivos considerados por calculate_folder_stats (orden por creation_time)
STATS_MAX_FILES_SCANNED = 10_000

# Tope del conteo reportado
STATS_MAX_FILE_COUNT = 1_000

# SQLSTATE de PostgreSQL para "canceling statement due to statement timeout"
PG_QUERY_CANCELED = "57014"


def group_refs_by_user(refs: Iterable[FolderRef]) -> dict[int, list[UUID]]:
    """Agrupa referencias por dueño, sin repetir uuids dentro de un usuario."""
    grouped: dict[int, list[UUID]] = defaultdict(list)
    for ref in refs:
        if ref.uuid not in grouped[ref.user_id]:
            grouped[ref.user_id].append(ref.uuid)
    return dict(grouped)


def is_statement_timeout(exc: BaseException) -> bool:
    """True si el error de driver corresponde a SQLSTATE 57014."""
    orig = getattr(exc, "orig", None)
    for candidate in (orig, getattr(orig, "__cause__", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(candidate, "pgcode", None)
        if code == PG_QUERY_CANCELED:
            return True
    return False


class FolderRepository(BaseRepository[Folder]):
    """Consultas de la cascada de borrado y del árbol de carpetas."""

    def __init__(self) -> None:
        super().__init__(Folder)

    # ───────────────────────────────────────────────────────────────────────
    # Detección de violaciones (ventana global)
    # ───────────────────────────────────────────────────────────────────────

    async def get_removed_folders_with_active_children(
        self,
        session: AsyncSession,
        window: CleanupWindow,
        limit: int,
    ) -> list[FolderRef]:
        """
        Carpetas removidas dentro de [start, until) con al menos una
        subcarpeta directa (mismo usuario) todavía no removida.
        """
        child = aliased(Folder)
        has_active_child = exists().where(
            child.parent_uuid == Folder.uuid,
            child.user_id == Folder.user_id,
            child.removed == false(),
        )
        stmt = (
            select(Folder.uuid, Folder.user_id)
            .where(
                Folder.removed == true(),
                Folder.updated_at >= window.start_date,
                Folder.updated_at < window.until_date,
                has_active_child,
            )
            .order_by(Folder.updated_at, Folder.id)
            .limit(limit)
        )
        return await self._fetch_refs(session, stmt)

    async def get_removed_folders_with_active_files(
        self,
        session: AsyncSession,
        window: CleanupWindow,
        limit: int,
    ) -> list[FolderRef]:
        """
        Carpetas removidas dentro de [start, until) con al menos un archivo
        directo (mismo usuario) cuyo status no es DELETED.
        """
        stmt = (
            select(Folder.uuid, Folder.user_id)
            .where(
                Folder.removed == true(),
                Folder.updated_at >= window.start_date,
                Folder.updated_at < window.until_date,
                self._has_live_file(),
            )
            .order_by(Folder.updated_at, Folder.id)
            .limit(limit)
        )
        return await self._fetch_refs(session, stmt)

    # ───────────────────────────────────────────────────────────────────────
    # Detección de violaciones (por usuario, hasta una fecha de corte)
    # ───────────────────────────────────────────────────────────────────────

    async def get_user_folders_with_active_children(
        self,
        session: AsyncSession,
        user_id: int,
        cutoff: datetime,
        limit: int,
    ) -> list[FolderRef]:
        child = aliased(Folder)
        has_active_child = exists().where(
            child.parent_uuid == Folder.uuid,
            child.user_id == Folder.user_id,
            child.removed == false(),
        )
        stmt = (
            select(Folder.uuid, Folder.user_id)
            .where(
                Folder.user_id == user_id,
                Folder.removed == true(),
                self._within_cutoff(cutoff),
                has_active_child,
            )
            .order_by(Folder.updated_at, Folder.id)
            .limit(limit)
        )
        return await self._fetch_refs(session, stmt)

    async def get_user_folders_with_active_files(
        self,
        session: AsyncSession,
        user_id: int,
        cutoff: datetime,
        limit: int,
    ) -> list[FolderRef]:
        stmt = (
            select(Folder.uuid, Folder.user_id)
            .where(
                Folder.user_id == user_id,
                Folder.removed == true(),
                self._within_cutoff(cutoff),
                self._has_live_file(),
            )
            .order_by(Folder.updated_at, Folder.id)
            .limit(limit)
        )
        return await self._fetch_refs(session, stmt)

    async def get_last_removed_folder(
        self,
        session: AsyncSession,
        user_id: int,
    ) -> Optional[Folder]:
        """Carpeta removida más reciente del usuario (removed_at NULL primero)."""
        stmt = (
            select(Folder)
            .where(Folder.user_id == user_id, Folder.removed == true())
            .order_by(Folder.removed_at.desc().nulls_first(), Folder.id.desc())
            .limit(1)
        )
        result = await session.execute(stmt)
        folder = result.scalars().first()
        if folder is not None:
            set_committed_value(folder, "removed_at", as_utc(folder.removed_at))
        return folder

    # ───────────────────────────────────────────────────────────────────────
    # Escritura correctiva
    # ───────────────────────────────────────────────────────────────────────

    async def mark_child_folders_as_removed(
        self,
        session: AsyncSession,
        parents: Iterable[FolderRef],
    ) -> int:
        """
        Marca como removidas (y borradas) las subcarpetas directas de los
        padres dados. Cada hija hereda el updated_at de su padre removido
        para quedar en la misma ventana que él.

        Returns:
            Filas actualizadas.
        """
        now = utcnow()
        parent = aliased(Folder)
        parent_updated_at = (
            select(func.max(parent.updated_at))
            .where(
                parent.uuid == Folder.parent_uuid,
                parent.user_id == Folder.user_id,
                parent.removed == true(),
            )
            .scalar_subquery()
        )

        updated = 0
        for user_id, uuids in group_refs_by_user(parents).items():
            stmt = (
                update(Folder)
                .where(
                    Folder.user_id == user_id,
                    Folder.parent_uuid.in_(uuids),
                    Folder.removed == false(),
                )
                .values(
                    removed=True,
                    removed_at=now,
                    deleted=True,
                    deleted_at=now,
                    updated_at=func.coalesce(parent_updated_at, now),
                )
                .execution_options(synchronize_session=False)
            )
            result = await session.execute(stmt)
            updated += result.rowcount or 0
        return updated

    # ───────────────────────────────────────────────────────────────────────
    # Lectura puntual
    # ───────────────────────────────────────────────────────────────────────

    async def get_folder_for_user(
        self,
        session: AsyncSession,
        folder_uuid: UUID,
        user_id: Optional[int] = None,
    ) -> Optional[Folder]:
        """Carpeta no removida con ese uuid (del usuario, si se indica)."""
        stmt = select(Folder).where(Folder.uuid == folder_uuid, Folder.removed == false())
        if user_id is not None:
            stmt = stmt.where(Folder.user_id == user_id)
        result = await session.execute(stmt.order_by(Folder.id).limit(1))
        return result.scalars().first()

    # ───────────────────────────────────────────────────────────────────────
    # Estadísticas
    # ───────────────────────────────────────────────────────────────────────

    async def calculate_folder_size(
        self,
        session: AsyncSession,
        folder_uuid: UUID,
        include_trash: bool = True,
        user_id: Optional[int] = None,
    ) -> int:
        """
        Suma exacta de tamaños de los archivos del subárbol (raíz incluida).

        - Carpetas removidas se excluyen siempre; las borradas (papelera)
          sólo cuando include_trash es False.
        - Archivos EXISTS, más TRASHED si include_trash.

        Raises:
            CalculateFolderSizeTimeoutError: si el motor cancela la consulta
                por statement_timeout.
        """
        tree = self._folder_tree_cte(folder_uuid, user_id, skip_trashed_folders=not include_trash)
        statuses = [FileStatus.EXISTS]
        if include_trash:
            statuses.append(FileStatus.TRASHED)

        stmt = select(func.coalesce(func.sum(File.size), 0)).where(
            File.status.in_(statuses),
            self._file_in_tree(tree),
        )
        try:
            result = await session.execute(stmt)
        except DBAPIError as e:
            self._raise_if_timeout(e, folder_uuid)
            raise
        return int(result.scalar_one() or 0)

    async def calculate_folder_stats(
        self,
        session: AsyncSession,
        folder_uuid: UUID,
        user_id: Optional[int] = None,
    ) -> FolderStats:
        """
        Conteo y tamaño aproximados de los archivos EXISTS del subárbol,
        sobre carpetas ni borradas ni removidas.

        Se agregan a lo sumo STATS_MAX_FILES_SCANNED archivos (los más
        antiguos por creation_time).
        """
        tree = self._folder_tree_cte(folder_uuid, user_id, skip_trashed_folders=True)
        scanned = (
            select(File.size.label("size"))
            .where(File.status == FileStatus.EXISTS, self._file_in_tree(tree))
            .order_by(File.creation_time, File.id)
            .limit(STATS_MAX_FILES_SCANNED)
            .subquery("scanned_files")
        )
        stmt = select(func.count(), func.coalesce(func.sum(scanned.c.size), 0)).select_from(scanned)
        try:
            result = await session.execute(stmt)
        except DBAPIError as e:
            self._raise_if_timeout(e, folder_uuid)
            raise

        found, total_size = result.one()
        found = int(found or 0)
        return FolderStats(
            file_count=min(found, STATS_MAX_FILE_COUNT),
            is_file_count_exact=found <= STATS_MAX_FILE_COUNT,
            total_size=int(total_size or 0),
            is_total_size_exact=found < STATS_MAX_FILES_SCANNED,
        )

    # ───────────────────────────────────────────────────────────────────────
    # Helpers
    # ───────────────────────────────────────────────────────────────────────

    @staticmethod
    async def _fetch_refs(session: AsyncSession, stmt) -> list[FolderRef]:
        result = await session.execute(stmt)
        return [FolderRef(uuid=row.uuid, user_id=row.user_id) for row in result.all()]

    @staticmethod
    def _has_live_file():
        return exists().where(
            File.folder_uuid == Folder.uuid,
            File.user_id == Folder.user_id,
            File.status != FileStatus.DELETED,
        )

    @staticmethod
    def _within_cutoff(cutoff: datetime):
        """
        Removida hasta el corte.

        updated_at cubre a los hijos marcados en cascada (heredan el
        updated_at del padre); removed_at cubre a la carpeta que definió
        el corte aunque su updated_at haya quedado unos ms después.
        """
        return or_(Folder.updated_at <= cutoff, Folder.removed_at <= cutoff)

    @staticmethod
    def _folder_tree_cte(
        folder_uuid: UUID,
        user_id: Optional[int],
        skip_trashed_folders: bool,
    ):
        """WITH RECURSIVE (uuid, owner_id, depth) desde la carpeta raíz."""
        root = select(
            Folder.uuid.label("uuid"),
            Folder.user_id.label("owner_id"),
            literal(0).label("depth"),
        ).where(Folder.uuid == folder_uuid, Folder.removed == false())
        if user_id is not None:
            root = root.where(Folder.user_id == user_id)
        if skip_trashed_folders:
            root = root.where(Folder.deleted == false())

        tree = root.cte("folder_tree", recursive=True)

        child = aliased(Folder)
        step = select(child.uuid, child.user_id, tree.c.depth + 1).where(
            child.parent_uuid == tree.c.uuid,
            child.user_id == tree.c.owner_id,
            child.removed == false(),
            tree.c.depth < MAX_TREE_DEPTH,
        )
        if skip_trashed_folders:
            step = step.where(child.deleted == false())

        return tree.union_all(step)

    @staticmethod
    def _file_in_tree(tree):
        # EXISTS evita contar dos veces un archivo si el uuid de carpeta se repite
        return exists().where(
            tree.c.uuid == File.folder_uuid,
            tree.c.owner_id == File.user_id,
        )

    @staticmethod
    def _raise_if_timeout(exc: DBAPIError, folder_uuid: UUID) -> None:
        if is_statement_timeout(exc):
            logger.warning("folder_stats_timeout: folder_uuid=%s", folder_uuid)
            raise CalculateFolderSizeTimeoutError() from exc


__all__ = [
    "FolderRepository",
    "group_refs_by_user",
    "is_statement_timeout",
    "MAX_TREE_DEPTH",
    "STATS_MAX_FILES_SCANNED",
    "STATS_MAX_FILE_COUNT",
]

# Fin del archivo backend/app/modules/folders/repositories/folder_repository.py
