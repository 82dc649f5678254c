# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/migrations/cleanup_duplicate_folders.py

Migración única de deduplicación de carpetas, en lotes con reintentos.

Modos:
- top-level: carpetas de primer nivel (parent_uuid NULL) duplicadas por
  (plain_name, bucket, user_id), creadas dentro de la ventana del
  incidente. Se conserva la de menor id; el resto se remueve (borrado
  suave) sólo si está vacía: sin archivos no DELETED y sin subcarpetas
  no borradas.
- nested: subcarpetas duplicadas por (parent_uuid, plain_name) del mismo
  usuario. Se conserva la de menor id; el resto se renombra a
  "<plain_name>_<id>".

Ciclo:
- Cada lote toma hasta batch_size grupos duplicados y aplica el cambio en
  una transacción
- Se repite hasta que un lote afecta 0 filas, con una pausa entre lotes
- Un lote fallido se reintenta hasta max_attempts veces con la misma
  pausa; agotados los intentos se propaga el error (los lotes previos ya
  quedaron confirmados)

Limitación (top-level): el LIMIT de batch_size se aplica a los grupos
antes de filtrar por carpetas vacías. Si todos los grupos de un lote
tienen duplicados con contenido, el lote afecta 0 filas y la corrida
termina aunque queden grupos posteriores con duplicados vacíos. Revisar
con --dry-run y, si hace falta, correr de nuevo con un --batch-size
mayor.

Configuración por env vars (los flags del comando tienen prioridad):
- FOLDERS_DEDUP_BATCH_SIZE: int (default: 100)
- FOLDERS_DEDUP_SLEEP_SECONDS: float (default: 5.0)
- FOLDERS_DEDUP_MAX_ATTEMPTS: int (default: 10)
- FOLDERS_DEDUP_WINDOW_START / FOLDERS_DEDUP_WINDOW_END: ISO-8601 (UTC)

Autor: Equipo Backend
Fecha: 2026-10-09
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import StrEnum
from typing import Callable, Optional

from sqlalchemy import String, and_, cast, exists, false, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.shared.database.base import utcnow
from app.shared.utils.env_utils import env_datetime, env_float, env_int
from app.modules.folders.enums import FileStatus
from app.modules.folders.models import File, Folder

logger = logging.getLogger("folders.migrations.cleanup_duplicate_folders")

# ═══════════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════════

BATCH_SIZE = env_int("FOLDERS_DEDUP_BATCH_SIZE", 100)
SLEEP_SECONDS = env_float("FOLDERS_DEDUP_SLEEP_SECONDS", 5.0)
MAX_ATTEMPTS = env_int("FOLDERS_DEDUP_MAX_ATTEMPTS", 10)

# Ventana del incidente que generó los duplicados de primer nivel
INCIDENT_WINDOW_START = env_datetime(
    "FOLDERS_DEDUP_WINDOW_START", datetime(2025, 12, 17, 14, 16, 0, tzinfo=timezone.utc)
)
INCIDENT_WINDOW_END = env_datetime(
    "FOLDERS_DEDUP_WINDOW_END", datetime(2026, 1, 5, 21, 50, 0, tzinfo=timezone.utc)
)


class DedupMode(StrEnum):
    TOP_LEVEL = "top-level"
    NESTED = "nested"


@dataclass
class DedupResult:
    mode: str
    batches: int = 0
    affected: int = 0
    dry_run: bool = False


# ═══════════════════════════════════════════════════════════════════════════════
# CONSULTAS
# ═══════════════════════════════════════════════════════════════════════════════

def _top_level_candidates(batch_size: int, window_start: datetime, window_end: datetime):
    """ids de duplicados vacíos de primer nivel (sin el conservado de cada grupo)."""
    groups = (
        select(
            Folder.plain_name.label("plain_name"),
            Folder.bucket.label("bucket"),
            Folder.user_id.label("user_id"),
            func.min(Folder.id).label("id_to_keep"),
        )
        .where(
            Folder.created_at >= window_start,
            Folder.created_at <= window_end,
            Folder.parent_uuid.is_(None),
            Folder.deleted == false(),
            Folder.removed == false(),
            Folder.plain_name.is_not(None),
        )
        .group_by(Folder.plain_name, Folder.bucket, Folder.user_id)
        .having(func.count() > 1)
        .limit(batch_size)
        .cte("duplicate_groups")
    )

    child = aliased(Folder)
    has_live_file = exists().where(
        File.folder_uuid == Folder.uuid,
        File.user_id == Folder.user_id,
        File.status != FileStatus.DELETED,
    )
    has_live_child = exists().where(
        child.parent_uuid == Folder.uuid,
        child.user_id == Folder.user_id,
        child.deleted == false(),
    )

    return (
        select(Folder.id)
        .join(
            groups,
            and_(
                Folder.plain_name == groups.c.plain_name,
                Folder.bucket == groups.c.bucket,
                Folder.user_id == groups.c.user_id,
            ),
        )
        .where(
            Folder.id != groups.c.id_to_keep,
            Folder.parent_uuid.is_(None),
            Folder.deleted == false(),
            Folder.removed == false(),
            ~has_live_file,
            ~has_live_child,
        )
    )


def _nested_candidates(batch_size: int):
    """ids de subcarpetas duplicadas a renombrar (sin el conservado de cada grupo)."""
    groups = (
        select(
            Folder.parent_uuid.label("parent_uuid"),
            Folder.plain_name.label("plain_name"),
            Folder.user_id.label("user_id"),
            func.min(Folder.id).label("id_to_keep"),
        )
        .where(
            Folder.deleted == false(),
            Folder.removed == false(),
            Folder.parent_uuid.is_not(None),
            Folder.plain_name.is_not(None),
        )
        .group_by(Folder.parent_uuid, Folder.plain_name, Folder.user_id)
        .having(func.count() > 1)
        .limit(batch_size)
        .cte("duplicate_groups")
    )

    return (
        select(Folder.id)
        .join(
            groups,
            and_(
                Folder.parent_uuid == groups.c.parent_uuid,
                Folder.plain_name == groups.c.plain_name,
                Folder.user_id == groups.c.user_id,
            ),
        )
        .where(
            Folder.id != groups.c.id_to_keep,
            Folder.deleted == false(),
            Folder.removed == false(),
        )
    )


# ═══════════════════════════════════════════════════════════════════════════════
# MIGRACIÓN
# ═══════════════════════════════════════════════════════════════════════════════

class DuplicateFoldersCleanup:
    """
    Ejecuta la deduplicación en lotes.

    Args:
        session_factory: Fábrica de AsyncSession
        mode: top-level | nested
        sleep: Corutina de pausa (inyectable en pruebas)
    """

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        mode: DedupMode | str = DedupMode.TOP_LEVEL,
        batch_size: int = BATCH_SIZE,
        sleep_seconds: float = SLEEP_SECONDS,
        max_attempts: int = MAX_ATTEMPTS,
        window_start: datetime = INCIDENT_WINDOW_START,
        window_end: datetime = INCIDENT_WINDOW_END,
        sleep: Optional[Callable[[float], object]] = None,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if max_attempts <= 0:
            raise ValueError("max_attempts must be positive")

        self.session_factory = session_factory
        self.mode = DedupMode(mode)
        self.batch_size = batch_size
        self.sleep_seconds = sleep_seconds
        self.max_attempts = max_attempts
        self.window_start = window_start
        self.window_end = window_end
        self._sleep = sleep or asyncio.sleep

    def _candidates(self):
        if self.mode is DedupMode.NESTED:
            return _nested_candidates(self.batch_size)
        return _top_level_candidates(self.batch_size, self.window_start, self.window_end)

    async def count_candidates(self) -> int:
        """Filas que el próximo lote afectaría (para --dry-run)."""
        async with self.session_factory() as db:
            stmt = select(func.count()).select_from(self._candidates().subquery())
            return int((await db.execute(stmt)).scalar_one())

    async def run_batch(self) -> int:
        """Aplica un lote en su propia transacción; devuelve filas afectadas."""
        async with self.session_factory() as db:
            ids = list((await db.execute(self._candidates())).scalars().all())
            if not ids:
                return 0

            now = utcnow()
            stmt = update(Folder).where(
                Folder.id.in_(ids),
                Folder.deleted == false(),
                Folder.removed == false(),
            )
            if self.mode is DedupMode.NESTED:
                stmt = stmt.values(
                    plain_name=Folder.plain_name.concat("_").concat(cast(Folder.id, String)),
                    updated_at=now,
                )
            else:
                stmt = stmt.values(
                    deleted=True,
                    deleted_at=now,
                    removed=True,
                    removed_at=now,
                )

            result = await db.execute(stmt.execution_options(synchronize_session=False))
            await db.commit()
            return result.rowcount or 0

    async def run(self, dry_run: bool = False) -> DedupResult:
        """
        Corre lotes hasta que uno afecte 0 filas.

        Raises:
            SQLAlchemyError: si un lote falla max_attempts veces seguidas.
        """
        result = DedupResult(mode=str(self.mode), dry_run=dry_run)
        logger.info(
            "cleanup_duplicate_folders_start: mode=%s batch_size=%d dry_run=%s",
            self.mode, self.batch_size, dry_run,
        )

        if dry_run:
            result.affected = await self.count_candidates()
            logger.info(
                "cleanup_duplicate_folders_dry_run: mode=%s candidates_in_next_batch=%d",
                self.mode, result.affected,
            )
            return result

        attempts = 0
        while True:
            try:
                affected = await self.run_batch()
            except SQLAlchemyError as e:
                attempts += 1
                logger.error(
                    "cleanup_duplicate_folders_batch_error: batch=%d attempt=%d/%d error=%s",
                    result.batches + 1, attempts, self.max_attempts, str(e)[:200],
                )
                if attempts >= self.max_attempts:
                    logger.error("cleanup_duplicate_folders_aborted: max attempts reached")
                    raise
                await self._sleep(self.sleep_seconds)
                continue

            attempts = 0
            result.batches += 1
            result.affected += affected
            logger.info(
                "cleanup_duplicate_folders_batch: batch=%d affected=%d total=%d",
                result.batches, affected, result.affected,
            )

            if affected == 0:
                break
            await self._sleep(self.sleep_seconds)

        logger.info(
            "cleanup_duplicate_folders_done: mode=%s batches=%d affected=%d",
            self.mode, result.batches, result.affected,
        )
        return result


__all__ = [
    "DuplicateFoldersCleanup",
    "DedupMode",
    "DedupResult",
    "BATCH_SIZE",
    "SLEEP_SECONDS",
    "MAX_ATTEMPTS",
    "INCIDENT_WINDOW_START",
    "INCIDENT_WINDOW_END",
]

# Fin del archivo backend/app/modules/folders/migrations/cleanup_duplicate_folders.py
