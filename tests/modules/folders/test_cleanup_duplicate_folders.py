# -*- coding: utf-8 -*-
"""
Tests de la migración de deduplicación de carpetas.

Cubre:
- top-level: sólo se remueven duplicados vacíos dentro de la ventana
- nested: renombrado "<nombre>_<id>" agrupando por padre y usuario
- dry-run sin escrituras
- Reintentos por lote y agotamiento de intentos
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from app.modules.folders.migrations.cleanup_duplicate_folders import (
    DedupMode,
    DuplicateFoldersCleanup,
)

IN_WINDOW = datetime(2025, 12, 20, 10, 0, tzinfo=timezone.utc)
AFTER_WINDOW = datetime(2026, 3, 1, 10, 0, tzinfo=timezone.utc)


async def _top_level_scenario(make_folder, make_file):
    def top(created_at, name="Docs"):
        return make_folder(user_id=1, plain_name=name, bucket="bucket-1", created_at=created_at)

    keep = await top(IN_WINDOW)
    empty_dup = await top(IN_WINDOW)
    dup_with_file = await top(IN_WINDOW)
    await make_file(folder=dup_with_file)
    dup_with_child = await top(IN_WINDOW)
    await make_folder(user_id=1, parent=dup_with_child, plain_name="inner")

    late_a = await top(AFTER_WINDOW, name="Late")
    late_b = await top(AFTER_WINDOW, name="Late")
    return keep, empty_dup, dup_with_file, dup_with_child, late_a, late_b


async def test_top_level_removes_only_empty_duplicates(
    db_session, session_factory, make_folder, make_file
):
    keep, empty_dup, dup_with_file, dup_with_child, late_a, late_b = await _top_level_scenario(
        make_folder, make_file
    )
    await db_session.commit()
    sleep = AsyncMock()

    result = await DuplicateFoldersCleanup(
        session_factory, mode=DedupMode.TOP_LEVEL, batch_size=10, sleep=sleep
    ).run()

    assert result.affected == 1
    assert result.batches == 2
    assert sleep.await_count == 1

    await db_session.refresh(empty_dup)
    assert empty_dup.removed is True and empty_dup.deleted is True
    for folder in (keep, dup_with_file, dup_with_child, late_a, late_b):
        await db_session.refresh(folder)
        assert folder.removed is False


async def test_dry_run_only_counts(db_session, session_factory, make_folder, make_file):
    _, empty_dup, *_ = await _top_level_scenario(make_folder, make_file)
    await db_session.commit()

    result = await DuplicateFoldersCleanup(session_factory, sleep=AsyncMock()).run(dry_run=True)

    assert result.dry_run is True
    assert result.affected == 1
    assert result.batches == 0
    await db_session.refresh(empty_dup)
    assert empty_dup.removed is False


async def test_nested_renames_duplicates(db_session, session_factory, make_folder):
    parent = await make_folder(user_id=1, plain_name="root")
    keep = await make_folder(user_id=1, parent=parent, plain_name="x")
    dup_a = await make_folder(user_id=1, parent=parent, plain_name="x")
    dup_b = await make_folder(user_id=1, parent=parent, plain_name="x")
    foreign = await make_folder(user_id=2, parent_uuid=parent.uuid, plain_name="x")
    await db_session.commit()

    result = await DuplicateFoldersCleanup(
        session_factory, mode="nested", batch_size=10, sleep=AsyncMock()
    ).run()

    assert result.affected == 2
    for folder in (keep, dup_a, dup_b, foreign):
        await db_session.refresh(folder)
    assert keep.plain_name == "x"
    assert foreign.plain_name == "x"
    assert dup_a.plain_name == f"x_{dup_a.id}"
    assert dup_b.plain_name == f"x_{dup_b.id}"


async def test_failed_batch_is_retried(session_factory):
    sleep = AsyncMock()
    migration = DuplicateFoldersCleanup(session_factory, sleep=sleep, sleep_seconds=0.5)
    migration.run_batch = AsyncMock(
        side_effect=[OperationalError("UPDATE", {}, Exception("locked")), 3, 0]
    )

    result = await migration.run()

    assert result.affected == 3
    assert result.batches == 2
    assert sleep.await_count == 2
    sleep.assert_awaited_with(0.5)


async def test_gives_up_after_max_attempts(session_factory):
    sleep = AsyncMock()
    migration = DuplicateFoldersCleanup(session_factory, max_attempts=3, sleep=sleep)
    migration.run_batch = AsyncMock(side_effect=OperationalError("UPDATE", {}, Exception("down")))

    with pytest.raises(OperationalError):
        await migration.run()

    assert migration.run_batch.await_count == 3
    assert sleep.await_count == 2


@pytest.mark.parametrize("kwargs", [{"batch_size": 0}, {"max_attempts": 0}])
def test_rejects_non_positive_settings(session_factory, kwargs):
    with pytest.raises(ValueError):
        DuplicateFoldersCleanup(session_factory, **kwargs)

# Fin del archivo backend/tests/modules/folders/test_cleanup_duplicate_folders.py
