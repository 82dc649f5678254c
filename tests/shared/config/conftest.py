# -*- coding: utf-8 -*-
import os

import pytest

_ISOLATED_PREFIXES = (
    "DB_", "APP_", "REDIS_", "LOG_", "FOLDERS_", "SCHEDULER_", "INTERNAL_",
)


@pytest.fixture(autouse=True)
def _isolate_env_and_cache(monkeypatch, tmp_path):
    """
    Aísla variables de entorno y limpia el caché de get_settings() en cada test.
    """
    # Asegura que no heredamos PYTHON_ENV ni secretos del shell del dev
    for k in list(os.environ.keys()):
        if k.startswith(_ISOLATED_PREFIXES):
            monkeypatch.delenv(k, raising=False)
    monkeypatch.setenv("PYTHON_ENV", "development")
    # Sin .env del repo
    monkeypatch.chdir(tmp_path)

    from app.shared.config.config_loader import get_settings
    get_settings.cache_clear()

    yield

    get_settings.cache_clear()
# Fin del archivo backend/tests/shared/config/conftest.py
