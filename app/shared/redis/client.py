# -*- coding: utf-8 -*-
"""
backend/app/shared/redis/client.py

Canonical async Redis client singleton.
Used by the folders cleanup jobs to hold a cross-instance run lock.

Features:
- Lazy connection initialization (no blocking in import)
- Single shared client across all consumers
- Best-effort: returns None if Redis not configured or unreachable
- Lock helper basado en SET NX EX (expira solo; no hay release explícito
  obligatorio)

Autor: Equipo Backend
Fecha: 2026-10-03
"""
from __future__ import annotations

import asyncio
import logging
import os
from typing import Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)


class RedisClientManager:
    """
    Manages a single shared async Redis client.

    Best-effort: if Redis is unavailable, get_client() returns None (fail-open).
    """

    _instance: Optional["RedisClientManager"] = None

    @classmethod
    def get_instance(cls) -> "RedisClientManager":
        """Get singleton instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    async def reset_instance_async(cls) -> None:
        """Reset singleton closing the client (tests)."""
        if cls._instance is not None:
            await cls._instance.close()
        cls._instance = None

    def __init__(self, redis_url: Optional[str] = None):
        self._redis_url = redis_url if redis_url is not None else os.getenv("REDIS_URL")
        self._client: Optional[aioredis.Redis] = None
        self._connected: Optional[bool] = None  # None = not tried
        self._connect_lock: Optional[asyncio.Lock] = None

        if not self._redis_url:
            logger.debug("RedisClientManager: REDIS_URL not configured pid=%d", os.getpid())

    @property
    def is_configured(self) -> bool:
        """True if Redis URL is configured."""
        return bool(self._redis_url)

    async def get_client(self) -> Optional[aioredis.Redis]:
        """
        Get the async Redis client (lazy connect).

        Returns:
            Redis client or None if not available/failed.
        """
        if self._connected is not None:
            return self._client if self._connected else None

        if not self.is_configured:
            self._connected = False
            return None

        if self._connect_lock is None:
            self._connect_lock = asyncio.Lock()

        async with self._connect_lock:
            if self._connected is not None:
                return self._client if self._connected else None

            try:
                self._client = aioredis.from_url(
                    self._redis_url,
                    decode_responses=True,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )
                await self._client.ping()
                self._connected = True
                logger.info("RedisClientManager: connected pid=%d", os.getpid())
                return self._client
            except (RedisError, OSError) as e:
                logger.warning("RedisClientManager: connection failed: %s", str(e))
                self._connected = False
                self._client = None
                return None

    async def close(self) -> None:
        """Close the Redis connection."""
        if self._client is not None:
            try:
                await self._client.aclose()
            except RedisError as e:
                logger.warning("RedisClientManager: close error: %s", str(e))
            finally:
                self._client = None
                self._connected = None


async def get_async_redis_client() -> Optional[aioredis.Redis]:
    """Get the canonical async Redis client (or None)."""
    return await RedisClientManager.get_instance().get_client()


async def close_async_redis_client() -> None:
    """Close the Redis client connection."""
    await RedisClientManager.get_instance().close()


async def try_acquire_lock(key: str, ttl_seconds: int) -> bool:
    """
    Intenta tomar un lock distribuido con SET key NX EX ttl.

    Returns:
        True si el lock fue adquirido, o si Redis no está disponible
        (despliegue de una sola instancia). False si otra instancia lo tiene.
    """
    client = await get_async_redis_client()
    if client is None:
        logger.debug("redis_lock_unavailable: key=%s (fail-open)", key)
        return True

    try:
        acquired = await client.set(key, str(os.getpid()), nx=True, ex=ttl_seconds)
    except RedisError as e:
        logger.warning("redis_lock_error: key=%s error=%s (fail-open)", key, str(e)[:200])
        return True
    return bool(acquired)


__all__ = [
    "get_async_redis_client",
    "close_async_redis_client",
    "try_acquire_lock",
    "RedisClientManager",
]
