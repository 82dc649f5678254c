#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
backend/app/modules/folders/commands/cleanup_duplicate_folders_command.py

Comando de consola de la migración de deduplicación de carpetas.

Uso:
    cleanup-duplicate-folders --dry-run             # contar candidatos
    cleanup-duplicate-folders                       # top-level (default)
    cleanup-duplicate-folders --mode nested --batch-size 500 --sleep-seconds 1

Código de salida: 0 al completar, 1 si la migración aborta.

Autor: Equipo Backend
Fecha: 2026-10-09
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from dotenv import load_dotenv

from app.modules.folders.migrations.cleanup_duplicate_folders import (
    BATCH_SIZE,
    MAX_ATTEMPTS,
    SLEEP_SECONDS,
    DedupMode,
    DedupResult,
)

logger = logging.getLogger("folders.commands.cleanup_duplicate_folders")


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value <= 0:
        raise argparse.ArgumentTypeError(f"debe ser positivo: {raw}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cleanup-duplicate-folders",
        description="Deduplicación de carpetas en lotes con reintentos",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in DedupMode],
        default=DedupMode.TOP_LEVEL.value,
        help="top-level: remueve duplicados vacíos; nested: renombra duplicados",
    )
    parser.add_argument("--batch-size", type=_positive_int, default=BATCH_SIZE)
    parser.add_argument("--sleep-seconds", type=float, default=SLEEP_SECONDS)
    parser.add_argument("--max-attempts", type=_positive_int, default=MAX_ATTEMPTS)
    parser.add_argument("--dry-run", action="store_true", help="Solo contar candidatos")
    return parser


async def _run(args: argparse.Namespace) -> DedupResult:
    from app.shared.database.database import session_scope
    from app.modules.folders.migrations.cleanup_duplicate_folders import DuplicateFoldersCleanup

    migration = DuplicateFoldersCleanup(
        session_scope,
        mode=args.mode,
        batch_size=args.batch_size,
        sleep_seconds=args.sleep_seconds,
        max_attempts=args.max_attempts,
    )
    return await migration.run(dry_run=args.dry_run)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    load_dotenv()
    from app.shared.config import settings
    from app.shared.config.logging_config import setup_logging

    setup_logging(settings.log_level, settings.log_format)

    try:
        result = asyncio.run(_run(args))
    except Exception as e:
        logger.error("cleanup_duplicate_folders_failed: %s", str(e), exc_info=True)
        return 1

    logger.info(
        "cleanup_duplicate_folders_completed: mode=%s batches=%d affected=%d dry_run=%s",
        result.mode, result.batches, result.affected, result.dry_run,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
