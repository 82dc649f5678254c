# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/routes/folder_stats_routes.py

Endpoints de tamaño y estadísticas de carpeta.

Endpoints:
- GET /folders/{folder_uuid}/size?include_trash=true
- GET /folders/{folder_uuid}/stats

El usuario llega en el header X-User-Id (la autenticación ocurre antes,
en el gateway). Errores:
- 404: carpeta inexistente, removida o de otro usuario
- 408: el cálculo excedió el statement_timeout (reintentable)

Autor: Equipo Backend
Fecha: 2026-10-10
"""
from __future__ import annotations

import logging
from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.database.database import get_db
from app.modules.folders.errors import CalculateFolderSizeTimeoutError, FolderNotFoundError
from app.modules.folders.schemas import FolderSizeResponse, FolderStatsResponse
from app.modules.folders.services import FolderStatsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/folders", tags=["folders-stats"])

RequestUserId = Annotated[int, Header(alias="X-User-Id", ge=1)]


def _timeout_exception(e: CalculateFolderSizeTimeoutError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_408_REQUEST_TIMEOUT,
        detail={"message": str(e), "retryable": True},
    )


@router.get(
    "/{folder_uuid}/size",
    response_model=FolderSizeResponse,
    summary="Tamaño total de una carpeta",
)
async def get_folder_size(
    folder_uuid: UUID,
    user_id: RequestUserId,
    include_trash: bool = Query(default=True),
    db: AsyncSession = Depends(get_db),
) -> FolderSizeResponse:
    service = FolderStatsService(db)
    try:
        size = await service.get_folder_size(folder_uuid, user_id, include_trash=include_trash)
    except FolderNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except CalculateFolderSizeTimeoutError as e:
        raise _timeout_exception(e)
    return FolderSizeResponse(size=size)


@router.get(
    "/{folder_uuid}/stats",
    response_model=FolderStatsResponse,
    response_model_by_alias=True,
    summary="Conteo y tamaño acotados de una carpeta",
    description="""
    fileCount se reporta hasta 1000 (isFileCountExact=false por encima);
    totalSize suma a lo sumo 10000 archivos (isTotalSizeExact=false al
    alcanzar el tope).
    """,
)
async def get_folder_stats(
    folder_uuid: UUID,
    user_id: RequestUserId,
    db: AsyncSession = Depends(get_db),
) -> FolderStatsResponse:
    service = FolderStatsService(db)
    try:
        stats = await service.get_folder_stats(folder_uuid, user_id)
    except FolderNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except CalculateFolderSizeTimeoutError as e:
        raise _timeout_exception(e)
    return FolderStatsResponse.from_stats(stats)


# Fin del archivo backend/app/modules/folders/routes/folder_stats_routes.py
