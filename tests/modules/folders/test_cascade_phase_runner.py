# -*- coding: utf-8 -*-
"""
Tests del bucle de lotes compartido por los jobs de limpieza.

Cubre:
- Terminación con lote vacío y acumulado de resultados
- Estancamiento: el mismo uuid presente en lotes consecutivos
- Reinicio del contador cuando el uuid rastreado desaparece
- drain_while_full: termina tras el primer lote incompleto
"""

import logging
from uuid import uuid4

import pytest
from unittest.mock import AsyncMock

from app.modules.folders.errors import CascadeStalledError
from app.modules.folders.schemas import FolderRef
from app.modules.folders.services.cascade_phase_runner import (
    STALL_THRESHOLD,
    run_cascade_phase,
)

logger = logging.getLogger("tests.cascade_phase_runner")


def _ref(user_id: int = 1) -> FolderRef:
    return FolderRef(uuid=uuid4(), user_id=user_id)


def _fetch_sequence(*batches):
    """fetch_batch que devuelve los lotes en orden y luego listas vacías."""
    pending = list(batches)

    async def _fetch():
        return pending.pop(0) if pending else []

    return _fetch


async def test_runs_until_empty_batch_and_accumulates():
    a, b, c = _ref(), _ref(), _ref()
    apply_batch = AsyncMock(side_effect=[2, 1])

    result = await run_cascade_phase(
        "FoldersPhase",
        _fetch_sequence([a, b], [c]),
        apply_batch,
        logger=logger,
    )

    assert result.batches == 2
    assert result.items_processed == 3
    assert result.rows_updated == 3
    assert apply_batch.await_count == 2


async def test_empty_first_batch_does_nothing():
    apply_batch = AsyncMock()

    result = await run_cascade_phase("FilesPhase", _fetch_sequence(), apply_batch, logger=logger)

    assert result.batches == 0
    apply_batch.assert_not_awaited()


async def test_stalled_uuid_raises_before_applying_again():
    stuck = _ref()
    apply_batch = AsyncMock(return_value=0)

    with pytest.raises(CascadeStalledError) as exc_info:
        await run_cascade_phase(
            "FoldersPhase",
            _fetch_sequence([stuck], [stuck], [stuck], [stuck], [stuck]),
            apply_batch,
            logger=logger,
        )

    assert apply_batch.await_count == STALL_THRESHOLD
    assert exc_info.value.phase == "FoldersPhase"
    assert exc_info.value.stuck_uuid == stuck.uuid


async def test_counter_resets_when_tracked_uuid_disappears():
    a, b = _ref(), _ref()
    apply_batch = AsyncMock(return_value=1)

    result = await run_cascade_phase(
        "FoldersPhase",
        _fetch_sequence([a], [a], [b], [a]),
        apply_batch,
        logger=logger,
    )

    assert result.batches == 4
    assert apply_batch.await_count == 4


async def test_drain_while_full_stops_after_partial_batch():
    apply_batch = AsyncMock(return_value=1)
    fetch = _fetch_sequence([_ref(), _ref()], [_ref()], [_ref(), _ref()])

    result = await run_cascade_phase(
        "FilesPhase",
        fetch,
        apply_batch,
        logger=logger,
        log_prefix="[user 7] ",
        drain_while_full=2,
    )

    assert result.batches == 2
    assert result.items_processed == 3

# Fin del archivo backend/tests/modules/folders/test_cascade_phase_runner.py
