# -*- coding: utf-8 -*-
"""
Tests de los comandos de consola del módulo Folders.
"""

from unittest.mock import AsyncMock, patch

import pytest

from app.modules.folders.commands import cleanup_duplicate_folders_command as dedup_cmd
from app.modules.folders.commands import retroactive_cleanup_command as retro_cmd
from app.modules.folders.migrations.cleanup_duplicate_folders import DedupResult


@pytest.fixture(autouse=True)
def _quiet_startup():
    with patch("app.shared.config.logging_config.setup_logging"), \
         patch.object(dedup_cmd, "load_dotenv"), \
         patch.object(retro_cmd, "load_dotenv"):
        yield


def test_retroactive_parser_reads_user_id():
    assert retro_cmd.build_parser().parse_args(["--userId", "15"]).user_id == 15
    assert retro_cmd.build_parser().parse_args([]).user_id is None


def test_retroactive_main_exit_codes():
    summary = {"users_processed": 2, "last_user_id": 9}
    with patch.object(retro_cmd, "_run", AsyncMock(return_value=summary)) as run:
        assert retro_cmd.main(["--userId", "3"]) == 0
    run.assert_awaited_once_with(3)

    with patch.object(retro_cmd, "_run", AsyncMock(side_effect=RuntimeError("db down"))):
        assert retro_cmd.main([]) == 1


def test_dedup_parser_defaults_and_validation():
    args = dedup_cmd.build_parser().parse_args([])
    assert args.mode == "top-level"
    assert args.batch_size == 100
    assert args.dry_run is False

    args = dedup_cmd.build_parser().parse_args(
        ["--mode", "nested", "--batch-size", "5", "--sleep-seconds", "0", "--dry-run"]
    )
    assert (args.mode, args.batch_size, args.sleep_seconds, args.dry_run) == ("nested", 5, 0.0, True)

    with pytest.raises(SystemExit):
        dedup_cmd.build_parser().parse_args(["--batch-size", "0"])
    with pytest.raises(SystemExit):
        dedup_cmd.build_parser().parse_args(["--mode", "sideways"])


def test_dedup_main_exit_codes():
    result = DedupResult(mode="nested", batches=2, affected=4)
    with patch.object(dedup_cmd, "_run", AsyncMock(return_value=result)):
        assert dedup_cmd.main(["--mode", "nested"]) == 0

    with patch.object(dedup_cmd, "_run", AsyncMock(side_effect=RuntimeError("locked"))):
        assert dedup_cmd.main([]) == 1

# Fin del archivo backend/tests/modules/folders/test_commands.py
