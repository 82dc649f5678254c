# backend/tests/conftest.py
# -*- coding: utf-8 -*-
"""
Config global de tests.

- PYTHON_ENV=test antes de importar cualquier módulo de app (settings
  cacheados con EnvTestingSettings, scheduler apagado)
- Sin REDIS_URL: el lock de limpieza opera en modo fail-open
- Motor ASYNC sqlite+aiosqlite en archivo temporal por test, con todas
  las tablas de Base.metadata
- Fábricas de datos: make_user, make_folder, make_file (hacen flush; el
  test hace commit antes de correr un job, que usa su propia sesión)
"""

import os

os.environ["PYTHON_ENV"] = "test"
os.environ.pop("REDIS_URL", None)
os.environ.pop("APP_SERVICE_TOKEN", None)

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.shared.database.base import Base

# Registro de modelos en Base.metadata
from app.modules.folders.enums import FileStatus
from app.modules.folders.models import File, Folder, User
from app.modules.jobs.models import JobExecution  # noqa: F401


@pytest.fixture
async def engine(tmp_path):
    """Motor ASYNC SQLite (archivo temporal) con el esquema completo."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def session_factory(engine):
    """Equivalente de SessionLocal sobre el motor de pruebas."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


# ═══════════════════════════════════════════════════════════════════════════════
# FÁBRICAS DE DATOS
# ═══════════════════════════════════════════════════════════════════════════════

@pytest.fixture
def make_user(db_session):
    async def _make(user_id: Optional[int] = None, email: Optional[str] = None) -> User:
        user = User(id=user_id, email=email or f"user{user_id or ''}@example.com")
        db_session.add(user)
        await db_session.flush()
        return user

    return _make


@pytest.fixture
def make_folder(db_session):
    async def _make(
        user_id: int = 1,
        parent: Optional[Folder] = None,
        parent_uuid: Optional[UUID] = None,
        uuid: Optional[UUID] = None,
        removed: bool = False,
        deleted: bool = False,
        updated_at: Optional[datetime] = None,
        removed_at: Optional[datetime] = None,
        created_at: Optional[datetime] = None,
        plain_name: Optional[str] = None,
        bucket: Optional[str] = None,
    ) -> Folder:
        now = datetime.now(timezone.utc)
        folder = Folder(
            uuid=uuid or uuid4(),
            parent_uuid=parent.uuid if parent is not None else parent_uuid,
            user_id=user_id,
            plain_name=plain_name,
            bucket=bucket,
            removed=removed,
            removed_at=removed_at if removed_at is not None else (now if removed else None),
            deleted=deleted or removed,
            deleted_at=now if (deleted or removed) else None,
            created_at=created_at or now,
            updated_at=updated_at or now,
        )
        db_session.add(folder)
        await db_session.flush()
        return folder

    return _make


@pytest.fixture
def make_file(db_session):
    async def _make(
        folder: Optional[Folder] = None,
        folder_uuid: Optional[UUID] = None,
        user_id: Optional[int] = None,
        status: FileStatus = FileStatus.EXISTS,
        size: int = 100,
        creation_time: Optional[datetime] = None,
    ) -> File:
        file = File(
            uuid=uuid4(),
            folder_uuid=folder.uuid if folder is not None else folder_uuid,
            user_id=user_id if user_id is not None else folder.user_id,
            status=status,
            size=size,
            removed=status == FileStatus.DELETED,
            creation_time=creation_time or datetime.now(timezone.utc),
        )
        db_session.add(file)
        await db_session.flush()
        return file

    return _make

# Fin del archivo backend/tests/conftest.py
