# -*- coding: utf-8 -*-
"""
backend/app/routes/health_routes.py

Health check del backend: conectividad a la base de datos y estado del
scheduler de limpieza.

Autor: Equipo Backend
Fecha: 2026-10-11
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from app.shared.config.config_loader import get_settings
from app.shared.database.database import check_database_health
from app.shared.scheduler import get_scheduler

router = APIRouter()


@router.get(
    "/health",
    summary="Health check del backend",
)
async def health_check() -> dict:
    settings = get_settings()

    db_ok = await check_database_health(timeout_s=2.0)
    scheduler = get_scheduler()

    return {
        "status": "ok" if db_ok else "degraded",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.python_env,
        "database": {"reachable": db_ok},
        "scheduler": {
            "running": scheduler.is_running,
            "jobs": [job["id"] for job in scheduler.get_jobs()],
        },
        "service": {"name": settings.app_name, "version": settings.app_version},
    }

# Fin del archivo backend/app/routes/health_routes.py
