# -*- coding: utf-8 -*-
"""
Tests del barrido retroactivo por usuario (RetroactiveItemsCleanupJob).
"""

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock

from app.modules.folders.enums import FileStatus
from app.modules.folders.jobs import RetroactiveItemsCleanupJob


def minutes_ago(minutes: float) -> datetime:
    return datetime.now(timezone.utc) - timedelta(minutes=minutes)


async def _removed_folder(make_folder, user_id: int, minutes: float = 5, **kwargs):
    """Carpeta removida como lo hace el flujo normal: updated_at apenas después de removed_at."""
    removed_at = minutes_ago(minutes)
    return await make_folder(
        user_id=user_id,
        removed=True,
        removed_at=removed_at,
        updated_at=removed_at + timedelta(milliseconds=3),
        **kwargs,
    )


async def _seed_three_users(make_user, make_folder, make_file):
    """
    Usuario 1: carpeta removida con subcarpeta viva y archivo dentro.
    Usuario 2: sin carpetas removidas.
    Usuario 3: carpeta removida con un archivo vivo.
    """
    for user_id in (1, 2, 3):
        await make_user(user_id=user_id)

    parent = await _removed_folder(make_folder, user_id=1)
    child = await make_folder(user_id=1, parent=parent)
    nested_file = await make_file(folder=child)

    await make_folder(user_id=2)

    other = await _removed_folder(make_folder, user_id=3)
    other_file = await make_file(folder=other)
    return child, nested_file, other_file


async def test_sweeps_every_user(db_session, session_factory, make_user, make_folder, make_file):
    child, nested_file, other_file = await _seed_three_users(make_user, make_folder, make_file)
    await db_session.commit()

    summary = await RetroactiveItemsCleanupJob(session_factory=session_factory).run()

    assert summary == {
        "users_processed": 3,
        "users_with_removed_folders": 2,
        "folders_updated": 1,
        "files_updated": 2,
        "last_user_id": 3,
    }

    await db_session.refresh(child)
    await db_session.refresh(nested_file)
    await db_session.refresh(other_file)
    assert child.removed is True
    assert nested_file.status == FileStatus.DELETED
    assert other_file.status == FileStatus.DELETED


async def test_resumes_from_given_user(db_session, session_factory, make_user, make_folder, make_file):
    child, nested_file, other_file = await _seed_three_users(make_user, make_folder, make_file)
    await db_session.commit()

    summary = await RetroactiveItemsCleanupJob(session_factory=session_factory).run(
        start_from_user_id=2
    )

    assert summary["users_processed"] == 2
    assert summary["files_updated"] == 1
    await db_session.refresh(child)
    await db_session.refresh(other_file)
    assert child.removed is False
    assert other_file.status == FileStatus.DELETED


async def test_pages_through_users(db_session, session_factory, make_user, make_folder, make_file):
    await _seed_three_users(make_user, make_folder, make_file)
    await db_session.commit()

    summary = await RetroactiveItemsCleanupJob(
        session_factory=session_factory, users_page_size=2
    ).run()

    assert summary["users_processed"] == 3
    assert summary["last_user_id"] == 3


async def test_latest_removed_folder_is_swept_when_updated_after_removal(
    db_session, session_factory, make_user, make_folder, make_file
):
    await make_user(user_id=1)
    parent = await _removed_folder(make_folder, user_id=1)
    child = await make_folder(user_id=1, parent=parent)
    file = await make_file(folder=parent)
    await db_session.commit()

    async with session_factory() as db:
        folders_updated, files_updated = await RetroactiveItemsCleanupJob(
            session_factory=session_factory
        ).process_user(db, 1)

    assert folders_updated == 1
    assert files_updated == 1
    await db_session.refresh(child)
    await db_session.refresh(file)
    assert child.removed is True
    assert file.status == FileStatus.DELETED


async def test_folder_removed_before_cutoff_is_swept_even_if_touched_later(
    db_session, session_factory, make_user, make_folder
):
    await make_user(user_id=1)
    await _removed_folder(make_folder, user_id=1, minutes=60)
    touched = await make_folder(
        user_id=1, removed=True, removed_at=minutes_ago(90), updated_at=minutes_ago(30)
    )
    child = await make_folder(user_id=1, parent=touched)
    await db_session.commit()

    async with session_factory() as db:
        folders_updated, _ = await RetroactiveItemsCleanupJob(
            session_factory=session_factory
        ).process_user(db, 1)

    assert folders_updated == 1
    await db_session.refresh(child)
    assert child.removed is True


async def test_folders_removed_after_cutoff_are_ignored(
    db_session, session_factory, make_user, make_folder
):
    await make_user(user_id=1)
    late_parent = await _removed_folder(make_folder, user_id=1, minutes=5)
    late_child = await make_folder(user_id=1, parent=late_parent)
    await db_session.commit()

    job = RetroactiveItemsCleanupJob(session_factory=session_factory)
    # corte leído antes de que late_parent fuera removida
    job.folders.get_last_removed_folder = AsyncMock(
        return_value=SimpleNamespace(removed_at=minutes_ago(60))
    )

    async with session_factory() as db:
        folders_updated, files_updated = await job.process_user(db, 1)

    assert folders_updated == 0
    assert files_updated == 0
    await db_session.refresh(late_child)
    assert late_child.removed is False


async def test_sweep_never_touches_other_users_rows_with_colliding_uuids(
    db_session, session_factory, make_user, make_folder, make_file
):
    await make_user(user_id=1)
    await make_user(user_id=2)
    parent = await _removed_folder(make_folder, user_id=1)
    own_child = await make_folder(user_id=1, parent=parent)
    foreign_child = await make_folder(user_id=2, parent_uuid=parent.uuid)
    foreign_file = await make_file(folder_uuid=parent.uuid, user_id=2)
    await db_session.commit()

    async with session_factory() as db:
        folders_updated, files_updated = await RetroactiveItemsCleanupJob(
            session_factory=session_factory
        ).process_user(db, 1)

    assert folders_updated == 1
    assert files_updated == 0
    await db_session.refresh(own_child)
    await db_session.refresh(foreign_child)
    await db_session.refresh(foreign_file)
    assert own_child.removed is True
    assert foreign_child.removed is False
    assert foreign_child.removed_at is None
    assert foreign_file.status == FileStatus.EXISTS
    assert foreign_file.removed is False


async def test_user_without_removed_folders_is_skipped(session_factory, db_session, make_user):
    await make_user(user_id=5)
    await db_session.commit()

    async with session_factory() as db:
        result = await RetroactiveItemsCleanupJob(session_factory=session_factory).process_user(db, 5)

    assert result == (None, 0)

# Fin del archivo backend/tests/modules/folders/test_retroactive_items_cleanup_job.py
