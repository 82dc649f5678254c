# -*- coding: utf-8 -*-
"""
backend/app/shared/config/__init__.py

Punto único de acceso a la configuración:
    from app.shared.config import settings

La instancia real se construye de forma perezosa con
config_loader.get_settings() (según PYTHON_ENV) la primera vez que se
consulta un atributo, para no disparar validaciones al importar.

El proxy devuelve valores por defecto para atributos ausentes en el
modelo Pydantic subyacente, sin intentar mutarlo.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping

from .config_loader import get_settings


class _SettingsProxy:
    __slots__ = ("_base_getter", "_defaults")

    def __init__(self, base_getter: Callable[[], object], defaults: Mapping[str, Any]) -> None:
        object.__setattr__(self, "_base_getter", base_getter)
        object.__setattr__(self, "_defaults", dict(defaults))

    def _get_base(self) -> object:
        return object.__getattribute__(self, "_base_getter")()

    def __getattr__(self, name: str) -> Any:
        base = self._get_base()
        if hasattr(base, name):
            return getattr(base, name)
        defaults = object.__getattribute__(self, "_defaults")
        if name in defaults:
            return defaults[name]
        raise AttributeError(f"{type(base).__name__!r} object has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        base = self._get_base()
        if hasattr(base, name):
            setattr(base, name, value)
        else:
            defaults = object.__getattribute__(self, "_defaults")
            defaults[name] = value


# Defaults para atributos opcionales que algunos módulos consultan con getattr
_DEFAULTS = {
    "folders_cleanup_lock_key": "cleanup:deleted-items",
}

settings = _SettingsProxy(get_settings, _DEFAULTS)

__all__ = ["settings", "get_settings"]
# Fin del archivo
