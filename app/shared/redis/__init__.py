# -*- coding: utf-8 -*-
"""
backend/app/shared/redis/__init__.py

Cliente Redis async compartido y lock distribuido best-effort.
"""

from .client import (
    get_async_redis_client,
    close_async_redis_client,
    try_acquire_lock,
    RedisClientManager,
)

__all__ = [
    "get_async_redis_client",
    "close_async_redis_client",
    "try_acquire_lock",
    "RedisClientManager",
]
