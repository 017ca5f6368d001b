"""Redis-backed entity cache.

Stores entity records as JSON under entity:<class>:<key> with an optional
TTL. Redis failures never fail a retrieval: an unavailable cache behaves as
a permanent miss, so every strategy degrades to a network fetch. Errors
raised by the network fetch itself propagate unchanged.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as redis

from viewcache.application.dtos.retrieval import NetworkFetch
from viewcache.core.config import Settings, get_settings
from viewcache.domain.enums import EntityClass, StrategyType
from viewcache.infrastructure.cache.keys import storage_key

logger = logging.getLogger(__name__)


class RedisEntityCache:
    """Async Redis IEntityCache.

    Call connect() at session start and disconnect() at session end.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize cache.

        Args:
            redis_client: Optional Redis client for testing or DI.
            settings: Optional settings (defaults to get_settings()).
        """
        self.redis = redis_client
        self.settings = settings or get_settings()
        self._connected = redis_client is not None

    async def connect(self) -> None:
        """Establish Redis connection."""
        if self.redis is None:
            try:
                self.redis = redis.Redis(
                    host=self.settings.redis_host,
                    port=self.settings.redis_port,
                    db=self.settings.redis_db,
                    password=self.settings.redis_password.get_secret_value() if self.settings.redis_password else None,
                    decode_responses=True,
                    socket_connect_timeout=5,
                    socket_keepalive=True,
                )
                await self.redis.ping()
                self._connected = True
                logger.info(
                    "Redis entity cache connected: %s:%s",
                    self.settings.redis_host,
                    self.settings.redis_port,
                )
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.warning("Redis connection failed: %s. Entity cache disabled.", e)
                self._connected = False
                self.redis = None

    async def disconnect(self) -> None:
        """Close Redis connection."""
        if self.redis:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis entity cache disconnected")

    async def _reconnect(self) -> bool:
        """Attempt to reconnect after a dropped connection. Returns True if reconnected."""
        if self.redis is None:
            return False
        try:
            await self.redis.aclose()
        except redis.RedisError:
            logger.debug("Ignoring error while closing dropped Redis connection")
        self.redis = None
        self._connected = False
        await self.connect()
        return self._connected

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    async def _read(self, key: str) -> Any | None:
        if not self.is_available() or self.redis is None:
            return None
        try:
            value = await self.redis.get(key)
        except (redis.ConnectionError, redis.TimeoutError):
            if not await self._reconnect():
                logger.warning("Cache read unavailable for %s (Redis disconnected)", key)
                return None
            try:
                value = await self.redis.get(key)
            except redis.RedisError:
                logger.exception("Cache read error for %s after reconnect", key)
                return None
        except redis.RedisError:
            logger.exception("Cache read error for %s", key)
            return None
        if value is None:
            return None
        try:
            return json.loads(value)
        except ValueError:
            logger.warning("Cache value for %s is not valid JSON; treating as miss", key)
            return None

    async def _write(self, key: str, value: Any) -> bool:
        if not self.is_available() or self.redis is None:
            return False
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError):
            logger.warning("Entity for %s is not JSON-serializable; not cached", key)
            return False
        ttl = self.settings.cache_ttl_entities
        try:
            await self.redis.set(key, serialized, ex=ttl)
            logger.debug("Cache SET: %s (TTL: %s)", key, ttl)
            return True
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect():
                try:
                    await self.redis.set(key, serialized, ex=ttl)
                    return True
                except redis.RedisError:
                    logger.exception("Cache write error for %s after reconnect", key)
            return False
        except redis.RedisError:
            logger.exception("Cache write error for %s", key)
            return False

    async def get(
        self,
        entity_class: EntityClass,
        key: str,
        network_fetch: NetworkFetch,
        strategy: StrategyType,
    ) -> Any:
        """Resolve an entity with the given strategy (see IEntityCache)."""
        skey = storage_key(entity_class, key)
        if strategy == StrategyType.CACHE_FIRST:
            cached = await self._read(skey)
            if cached is not None:
                logger.debug("Cache HIT: %s", skey)
                return cached
            logger.debug("Cache MISS: %s", skey)

        value = await network_fetch()
        if value is not None:
            await self._write(skey, value)
        return value

    async def delete(self, entity_class: EntityClass, key: str) -> None:
        """Remove the stored record (no-op when absent or Redis unavailable)."""
        skey = storage_key(entity_class, key)
        if not self.is_available() or self.redis is None:
            return
        try:
            await self.redis.delete(skey)
            logger.debug("Cache DELETE: %s", skey)
        except (redis.ConnectionError, redis.TimeoutError):
            if await self._reconnect():
                try:
                    await self.redis.delete(skey)
                except redis.RedisError:
                    logger.exception("Cache delete error for %s after reconnect", skey)
        except redis.RedisError:
            logger.exception("Cache delete error for %s", skey)

    async def has_record(self, entity_class: EntityClass, key: str) -> bool:
        """Return True if a record is stored; False when Redis is unavailable."""
        skey = storage_key(entity_class, key)
        if not self.is_available() or self.redis is None:
            return False
        try:
            return bool(await self.redis.exists(skey))
        except redis.RedisError:
            logger.exception("Cache exists error for %s", skey)
            return False
