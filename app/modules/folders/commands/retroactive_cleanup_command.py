#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/commands/retroactive_cleanup_command.py

Comando de consola para el barrido retroactivo de la cascada de borrado.

Uso:
    retroactive-items-cleanup                 # todos los usuarios
    retroactive-items-cleanup --userId=4500   # reanudar desde el id 4500

Código de salida: 0 al completar, 1 si el barrido falla.

Autor: Equipo Backend
Fecha: 2026-10-09
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv

logger = logging.getLogger("folders.commands.retroactive_cleanup")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="retroactive-items-cleanup",
        description="Propaga la remoción de carpetas a sus hijos, usuario por usuario",
    )
    parser.add_argument(
        "--userId",
        dest="user_id",
        type=int,
        default=None,
        help="Id de usuario desde el cual iniciar (inclusive)",
    )
    return parser


async def _run(start_from_user_id: Optional[int]) -> dict:
    from app.shared.database.database import session_scope
    from app.modules.folders.jobs.retroactive_items_cleanup_job import RetroactiveItemsCleanupJob

    # sesión con statement_timeout por sentencia
    job = RetroactiveItemsCleanupJob(session_factory=session_scope)
    return await job.run(start_from_user_id=start_from_user_id)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv()
    from app.shared.config import settings
    from app.shared.config.logging_config import setup_logging

    setup_logging(settings.log_level, settings.log_format)

    try:
        summary = asyncio.run(_run(args.user_id))
    except Exception as e:
        logger.error("retroactive_cleanup_failed: %s", str(e), exc_info=True)
        return 1

    logger.info(
        "retroactive_cleanup_completed: users_processed=%d last_user_id=%s",
        summary["users_processed"], summary["last_user_id"],
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
