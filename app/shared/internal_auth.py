# -*- coding: utf-8 -*-
"""
backend/app/shared/internal_auth.py

Token de servicio para endpoints /_internal (disparos operativos como el
barrido retroactivo de carpetas).

El header esperado es `Authorization: Bearer <APP_SERVICE_TOKEN>`.

Uso:
    router = APIRouter(dependencies=[Depends(require_internal_service_token)])

Autor: Equipo Backend
Fecha: 2026-10-10
"""

from __future__ import annotations

import logging
import secrets
from typing import Annotated, Optional

from fastapi import Header, HTTPException, status

logger = logging.getLogger(__name__)


def _bearer_token(authorization: Optional[str]) -> str:
    """Extrae el token de un header Bearer; 401 si falta o está mal formado."""
    if not authorization:
        logger.warning("internal_auth_missing_header")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authorization header required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        logger.warning("internal_auth_invalid_format")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authorization format. Use: Bearer <token>",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token.strip()


async def require_internal_service_token(
    authorization: Annotated[Optional[str], Header()] = None,
) -> bool:
    """
    Valida el token de servicio interno.

    Raises:
        HTTPException 500: APP_SERVICE_TOKEN no configurado en el backend
        HTTPException 401: header ausente o sin formato Bearer
        HTTPException 403: token distinto al configurado
    """
    from app.shared.config.config_loader import get_settings

    expected = get_settings().internal_service_token
    if expected is not None and hasattr(expected, "get_secret_value"):
        expected = expected.get_secret_value()

    if not expected:
        logger.error("internal_service_token_not_configured: APP_SERVICE_TOKEN is empty")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal service token not configured",
        )

    provided = _bearer_token(authorization)

    if not secrets.compare_digest(provided.encode(), str(expected).encode()):
        logger.warning("internal_auth_invalid_token")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid service token",
        )

    return True


__all__ = [
    "require_internal_service_token",
]

# Fin del archivo backend/app/shared/internal_auth.py
