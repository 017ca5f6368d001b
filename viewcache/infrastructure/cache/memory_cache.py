"""In-process entity cache.

Used when Redis is disabled or unreachable, and in tests. Implements the
same strategies as RedisEntityCache over a plain dict.
"""

from __future__ import annotations

import logging
from typing import Any

from viewcache.application.dtos.retrieval import NetworkFetch
from viewcache.domain.enums import EntityClass, StrategyType

logger = logging.getLogger(__name__)


class InMemoryEntityCache:
    """Dict-backed IEntityCache."""

    def __init__(self) -> None:
        self._records: dict[tuple[EntityClass, str], Any] = {}

    async def get(
        self,
        entity_class: EntityClass,
        key: str,
        network_fetch: NetworkFetch,
        strategy: StrategyType,
    ) -> Any:
        slot = (entity_class, key)
        if strategy == StrategyType.CACHE_FIRST:
            value = self._records.get(slot)
            if value is not None:
                logger.debug("Cache HIT: %s %s", entity_class.value, key)
                return value
            logger.debug("Cache MISS: %s %s", entity_class.value, key)

        value = await network_fetch()
        if value is not None:
            self._records[slot] = value
        return value

    async def delete(self, entity_class: EntityClass, key: str) -> None:
        if self._records.pop((entity_class, key), None) is not None:
            logger.debug("Cache DELETE: %s %s", entity_class.value, key)

    async def has_record(self, entity_class: EntityClass, key: str) -> bool:
        return (entity_class, key) in self._records

    def put(self, entity_class: EntityClass, key: str, value: Any) -> None:
        """Seed a record directly (warm start, tests)."""
        self._records[(entity_class, key)] = value

    def peek(self, entity_class: EntityClass, key: str) -> Any:
        """Return the stored record without fetching."""
        return self._records.get((entity_class, key))
