# -*- coding: utf-8 -*-
"""
backend/app/main.py

Punto de entrada principal del backend.

Ajustes clave:
- Carga de .env antes de leer configuración
- Logging según settings (plain/pretty en desarrollo, json en producción)
- Scheduler con el job de limpieza de la cascada de borrado
  (folders_deleted_items_cleanup)
- Routers: /health, /folders (estadísticas) y /_internal/folders

Autor: Equipo Backend
Fecha: 2026-10-11
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

# ---------------------------------------------------------------------------
# Cargar .env ANTES de cualquier import que use os.getenv
# En producción no se sobreescriben variables ya definidas en el entorno
# ---------------------------------------------------------------------------
from dotenv import load_dotenv

_ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
_PYTHON_ENV = os.getenv("PYTHON_ENV", "development").strip().lower()
load_dotenv(dotenv_path=_ENV_PATH, override=_PYTHON_ENV == "development")

import anyio
import uvicorn
from fastapi import FastAPI

from app.shared.config.config_loader import get_settings
from app.shared.config.logging_config import setup_logging

_settings = get_settings()
setup_logging(_settings.log_level, _settings.log_format)
logger = logging.getLogger(__name__)

logger.info(f"[dotenv] Loaded {_ENV_PATH} (PYTHON_ENV={_PYTHON_ENV})")


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ────────── STARTUP ──────────
    settings = get_settings()

    if settings.scheduler_enabled:
        from app.shared.scheduler import get_scheduler
        from app.modules.folders.jobs import register_deleted_items_cleanup_job

        scheduler = get_scheduler()
        register_deleted_items_cleanup_job(scheduler)
        scheduler.start()
        logger.info("⏰ Scheduler iniciado con jobs programados")
    else:
        logger.info("⏰ Scheduler deshabilitado (SCHEDULER_ENABLED=false)")

    logger.info("🟢 Backend iniciado.")
    try:
        yield
    finally:
        # ────────── SHUTDOWN ──────────
        logger.info("🔴 Iniciando shutdown ordenado...")
        with anyio.CancelScope(shield=True):
            from app.shared.scheduler import get_scheduler
            from app.shared.redis import close_async_redis_client

            get_scheduler().shutdown(wait=True)
            await close_async_redis_client()

        logger.info("🔴 Backend apagado.")


openapi_tags = [
    {"name": "folders-stats", "description": "Tamaño y estadísticas de carpetas"},
    {"name": "internal-folders-cleanup", "description": "Disparos operativos de limpieza"},
]


def create_app() -> FastAPI:
    settings = get_settings()
    application = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        lifespan=lifespan,
        openapi_tags=openapi_tags,
    )

    from app.routes import router as api_router

    application.include_router(api_router)
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=_settings.app_host,
        port=_settings.app_port,
        reload=_settings.is_dev,
    )

# Fin del archivo backend/app/main.py
