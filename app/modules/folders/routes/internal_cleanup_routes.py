# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/routes/internal_cleanup_routes.py

Endpoint interno para disparar el barrido retroactivo de la cascada.

Endpoint:
- POST /_internal/folders/retroactive-cleanup

El barrido corre como tarea en segundo plano; la respuesta es 202 de
inmediato. El progreso se sigue en los logs (último user id procesado).

Auth: require_internal_service_token (APP_SERVICE_TOKEN)

Autor: Equipo Backend
Fecha: 2026-10-10
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, status

from app.shared.internal_auth import require_internal_service_token
from app.modules.folders.jobs.retroactive_items_cleanup_job import RetroactiveItemsCleanupJob
from app.modules.folders.schemas import RetroactiveCleanupAccepted, RetroactiveCleanupRequest

logger = logging.getLogger(__name__)


async def run_retroactive_cleanup(start_from_user_id: Optional[int]) -> None:
    """Tarea de fondo: los errores quedan en log, la respuesta ya se envió."""
    try:
        summary = await RetroactiveItemsCleanupJob().run(start_from_user_id=start_from_user_id)
    except Exception as e:
        logger.error(
            "retroactive_cleanup_background_error: start_from_user_id=%s error=%s",
            start_from_user_id, str(e)[:200], exc_info=True,
        )
        return
    logger.info(
        "retroactive_cleanup_background_done: users_processed=%d last_user_id=%s",
        summary["users_processed"], summary["last_user_id"],
    )


# ═══════════════════════════════════════════════════════════════════════════════
# ROUTER
# ═══════════════════════════════════════════════════════════════════════════════

router = APIRouter(
    prefix="/_internal/folders",
    tags=["internal-folders-cleanup"],
    dependencies=[Depends(require_internal_service_token)],
)


@router.post(
    "/retroactive-cleanup",
    response_model=RetroactiveCleanupAccepted,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Barrido retroactivo de carpetas removidas",
)
async def trigger_retroactive_cleanup(
    background_tasks: BackgroundTasks,
    request: Optional[RetroactiveCleanupRequest] = None,
) -> RetroactiveCleanupAccepted:
    start_from_user_id = request.start_from_user_id if request else None
    logger.info("retroactive_cleanup_triggered: start_from_user_id=%s", start_from_user_id)
    background_tasks.add_task(run_retroactive_cleanup, start_from_user_id)
    return RetroactiveCleanupAccepted(start_from_user_id=start_from_user_id)


# Fin del archivo backend/app/modules/folders/routes/internal_cleanup_routes.py
