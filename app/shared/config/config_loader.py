# -*- coding: utf-8 -*-
"""
backend/app/shared/config/config_loader.py

Selección de la clase de configuración según PYTHON_ENV.

- "production" → ProdSettings (TLS y token de servicio obligatorios)
- "test"       → EnvTestingSettings (scheduler apagado)
- otro valor   → DevSettings

La instancia se valida con _security_checks() y queda cacheada; los tests
que cambian el entorno llaman get_settings.cache_clear().

Autor: Equipo Backend
Actualizado: 2026-10-02
"""

import logging
import os
from functools import lru_cache

from .settings_base import BaseAppSettings
from .settings_dev import DevSettings
from .settings_prod import ProdSettings
from .settings_testing import EnvTestingSettings

logger = logging.getLogger(__name__)

_ENV_CLASSES: dict[str, type[BaseAppSettings]] = {
    "production": ProdSettings,
    "test": EnvTestingSettings,
}


@lru_cache(maxsize=1)
def get_settings() -> BaseAppSettings:
    """
    Raises:
        ValueError: si las validaciones de seguridad fallan
    """
    env = os.getenv("PYTHON_ENV", "development").strip().lower()
    settings_cls = _ENV_CLASSES.get(env, DevSettings)

    settings = settings_cls()
    settings._security_checks()

    logger.debug("settings_loaded: env=%s class=%s", env, settings_cls.__name__)
    return settings


__all__ = ["get_settings"]
# Fin del archivo backend/app/shared/config/config_loader.py
