# -*- coding: utf-8 -*-
"""
backend/app/shared/database/database.py

SQLAlchemy + asyncpg detrás de PgBouncer, sin prepared/statement cache.
NullPool en la app; el pool lo maneja PgBouncer.

Provee:
- engine (create_async_engine)
- SessionLocal (async_sessionmaker)
- Base (DeclarativeBase con naming convention)
- Dependencia FastAPI: get_db
- context manager: session_scope() para jobs y comandos de consola
- check_database_health()

Notas:
- Timeouts a nivel de conexión (asyncpg: timeout, command_timeout).
- SET SESSION statement_timeout al abrir cada sesión (configurable). Es el
  origen del error 57014 ("query canceled") que traducen las estadísticas
  de carpeta.
"""

import asyncio
import logging
import ssl
from contextlib import asynccontextmanager
from typing import AsyncGenerator
from uuid import uuid4

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.shared.config import settings
from app.shared.database.base import Base  # reutilizamos la Base única

logger = logging.getLogger(__name__)


DB_ECHO_SQL = bool(settings.db_echo_sql)
DB_TLS_ENABLED = bool(settings.db_tls)
DB_CONNECT_TIMEOUT_S = float(settings.db_connect_timeout_s)
DB_COMMAND_TIMEOUT_S = float(settings.db_command_timeout_s)
DB_SESSION_STATEMENT_TIMEOUT_MS = int(settings.db_session_statement_timeout_ms)

ASYNC_DSN = settings.database_url


def _prepared_statement_name_func() -> str:
    # Nombres únicos: PgBouncer en transaction mode comparte backends
    return f"__asyncpg_{uuid4().hex[:8]}__"


connect_args = {
    "statement_cache_size": 0,
    "prepared_statement_cache_size": 0,
    "prepared_statement_name_func": _prepared_statement_name_func,
    "timeout": DB_CONNECT_TIMEOUT_S,
    "command_timeout": DB_COMMAND_TIMEOUT_S,
}

if DB_TLS_ENABLED:
    connect_args["ssl"] = ssl.create_default_context(purpose=ssl.Purpose.SERVER_AUTH)

engine = create_async_engine(
    ASYNC_DSN,
    poolclass=NullPool,
    pool_pre_ping=False,
    echo=DB_ECHO_SQL,
    connect_args=connect_args,
)

SessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)


async def _configure_session(session: AsyncSession) -> None:
    """Aplica SET SESSION statement_timeout a la sesión recién abierta."""
    try:
        await session.execute(text(f"SET SESSION statement_timeout = {DB_SESSION_STATEMENT_TIMEOUT_MS}"))
    except SQLAlchemyError as e:
        # No es fatal si el backend no soporta el comando
        logger.debug(f"[DB] No se pudo aplicar statement_timeout de sesión: {e}")


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependencia FastAPI: sesión configurada con rollback garantizado."""
    async with SessionLocal() as session:
        await _configure_session(session)
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


@asynccontextmanager
async def session_scope(configure: bool = True) -> AsyncGenerator[AsyncSession, None]:
    """
    Context manager reutilizable en jobs y scripts.

    El commit queda a cargo de quien usa el scope; al salir se hace
    rollback de cualquier transacción pendiente.
    """
    async with SessionLocal() as session:
        if configure:
            await _configure_session(session)
        try:
            yield session
        finally:
            if session.in_transaction():
                await session.rollback()


async def check_database_health(timeout_s: float = 3.0, sql: str = "SELECT 1") -> bool:
    """
    Verifica conectividad a la base de datos.

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with engine.connect() as conn:
                await conn.execute(text(sql))
        return True
    except (SQLAlchemyError, OSError, TimeoutError) as e:
        logger.warning(f"[DB] Health check falló: {e}")
        return False


__all__ = [
    "engine",
    "SessionLocal",
    "Base",
    "get_db",
    "session_scope",
    "check_database_health",
]
# Fin del archivo backend/app/shared/database/database.py
