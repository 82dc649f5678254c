# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/services/cascade_phase_runner.py

Bucle de lotes compartido por el reconciliador y el barrido retroactivo.

Cada iteración:
1. fetch_batch() devuelve hasta N carpetas que violan la cascada
2. apply_batch(refs) corrige sus hijos directos y confirma (commit)
3. se repite hasta que un lote viene vacío, o (con drain_while_full)
   hasta que un lote trae menos de batch_size elementos

Detección de estancamiento: si el primer uuid de un lote sigue
apareciendo en 3 lotes consecutivos posteriores, la escritura no está
surtiendo efecto y la fase aborta con CascadeStalledError.

Autor: Equipo Backend
Fecha: 2026-10-06
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, Sequence
from uuid import UUID

from app.modules.folders.errors import CascadeStalledError
from app.modules.folders.schemas import FolderRef

STALL_THRESHOLD = 3

FetchBatch = Callable[[], Awaitable[Sequence[FolderRef]]]
ApplyBatch = Callable[[Sequence[FolderRef]], Awaitable[int]]


@dataclass
class PhaseResult:
    items_processed: int = 0
    rows_updated: int = 0
    batches: int = 0


async def run_cascade_phase(
    phase: str,
    fetch_batch: FetchBatch,
    apply_batch: ApplyBatch,
    *,
    logger: logging.Logger,
    log_prefix: str = "",
    drain_while_full: Optional[int] = None,
) -> PhaseResult:
    """
    Ejecuta una fase hasta el punto fijo.

    Args:
        phase: Nombre para logs y errores (p.ej. "FoldersPhase")
        fetch_batch: Lectura del siguiente lote de violaciones
        apply_batch: Corrección del lote; devuelve filas actualizadas
        logger: Logger del job que invoca
        log_prefix: Prefijo de los mensajes (p.ej. "[42] ")
        drain_while_full: Si se indica, la fase termina tras el primer lote
            con menos elementos que este tamaño

    Raises:
        CascadeStalledError: si el mismo uuid sigue presente tras 3 lotes
    """
    result = PhaseResult()
    tracked_uuid: Optional[UUID] = None
    repeated = 0

    while True:
        refs = list(await fetch_batch())
        if not refs:
            logger.info("%s%s: no more items to process", log_prefix, phase)
            break

        if tracked_uuid is not None and any(ref.uuid == tracked_uuid for ref in refs):
            repeated += 1
        else:
            repeated = 0
            tracked_uuid = refs[0].uuid

        if repeated >= STALL_THRESHOLD:
            logger.error(
                "%s%s: uuid %s still present after %d batches",
                log_prefix, phase, tracked_uuid, STALL_THRESHOLD,
            )
            raise CascadeStalledError(phase, tracked_uuid)

        updated = await apply_batch(refs)
        result.batches += 1
        result.items_processed += len(refs)
        result.rows_updated += updated

        logger.info(
            "%s%s: batch=%d folders=%d updated=%d",
            log_prefix, phase, result.batches, len(refs), updated,
        )

        if drain_while_full is not None and len(refs) < drain_while_full:
            break

    return result


__all__ = ["PhaseResult", "run_cascade_phase", "STALL_THRESHOLD"]

# Fin del archivo backend/app/modules/folders/services/cascade_phase_runner.py
