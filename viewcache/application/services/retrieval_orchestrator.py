"""Retrieval policy: choose a cache strategy per key and heal the cache on failure.

A key not yet loaded this session is fetched with CACHE_AND_NETWORK (the
stored copy may be from an earlier session); once loaded it is served with
CACHE_FIRST. Session-scoped staleness after the first successful fetch is
accepted in exchange for fewer round-trips.

When the network fetch fails, the orchestrator spawns a background task
that drops the key from the registry and deletes the stored record (if
any), then rejects the caller without waiting for that task. Tasks are
tracked so wait_for_pending() and dispose() can join them.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from viewcache.application.dtos.retrieval import NetworkFetch, RetrievalRequest
from viewcache.application.interfaces.services import IEntityCache
from viewcache.application.services.loaded_key_registry import LoadedKeyRegistry
from viewcache.core.constants import MSG_DOCUMENT_NOT_FOUND
from viewcache.domain.enums import EntityClass, StrategyType
from viewcache.domain.exceptions import (
    FetchFailedException,
    NotFoundException,
    ValidationException,
)
from viewcache.shared.telemetry.tracing import add_span_attributes, traced

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[Exception], None]


def _is_empty(entity: Any) -> bool:
    """True for None and for empty containers/strings/bytes."""
    if entity is None:
        return True
    if isinstance(entity, (dict, list, tuple, str, bytes)):
        return len(entity) == 0
    return False


class RetrievalOrchestrator:
    """Owns the loaded-key registry and the invalidation tasks of one session.

    Construct one per session and call dispose() when the session ends.
    """

    def __init__(
        self,
        cache: IEntityCache,
        registry: LoadedKeyRegistry | None = None,
        max_pending_invalidations: int = 64,
    ) -> None:
        """Initialize orchestrator.

        Args:
            cache: Strategy-aware entity cache.
            registry: Optional registry (a fresh one is created when omitted).
            max_pending_invalidations: Upper bound on in-flight invalidation
                tasks; further invalidations are skipped while at the bound.
        """
        self._cache = cache
        self.registry = registry if registry is not None else LoadedKeyRegistry()
        self._max_pending = max_pending_invalidations
        self._pending: set[asyncio.Task[None]] = set()
        self._disposed = False

    @property
    def pending_invalidations(self) -> int:
        """Number of invalidation tasks not yet finished."""
        return len(self._pending)

    def choose_strategy(self, entity_class: EntityClass, key: str) -> StrategyType:
        """CACHE_FIRST for keys loaded this session, CACHE_AND_NETWORK otherwise."""
        if self.registry.has(entity_class, key):
            return StrategyType.CACHE_FIRST
        return StrategyType.CACHE_AND_NETWORK

    @traced("retrieval.retrieve")
    async def retrieve(
        self,
        key: str,
        entity_class: EntityClass,
        network_fetch: NetworkFetch,
        *,
        not_found_message: str = MSG_DOCUMENT_NOT_FOUND,
        on_error: ErrorCallback | None = None,
    ) -> Any:
        """Resolve an entity through the cache using the session load state.

        Args:
            key: Entity key (non-empty).
            entity_class: Registry and storage partition.
            network_fetch: Zero-argument coroutine function hitting the network.
            not_found_message: Message for NotFoundException on empty results.
            on_error: Optional callback given the original network error.

        Returns:
            The resolved entity.

        Raises:
            ValidationException: If key is empty.
            FetchFailedException: If network_fetch rejected.
            NotFoundException: If the resolved entity is empty or absent.
            RuntimeError: If the orchestrator was disposed.
        """
        if self._disposed:
            raise RuntimeError("RetrievalOrchestrator has been disposed")
        if not key:
            raise ValidationException("Entity key must be non-empty", field="key")

        request = RetrievalRequest(
            key=key,
            entity_class=entity_class,
            strategy=self.choose_strategy(entity_class, key),
            network_fetch=self._guarded_fetch(entity_class, key, network_fetch, on_error),
        )
        add_span_attributes(
            entity_class=entity_class.value, key=key, strategy=request.strategy.value
        )
        logger.debug(
            "Retrieve %s %s with %s", entity_class.value, key, request.strategy.value
        )

        entity = await self._cache.get(
            request.entity_class, request.key, request.network_fetch, request.strategy
        )
        if _is_empty(entity):
            raise NotFoundException(not_found_message, entity_class.value, key)

        if not self.registry.has(entity_class, key):
            self.registry.add(entity_class, key)
        return entity

    def _guarded_fetch(
        self,
        entity_class: EntityClass,
        key: str,
        network_fetch: NetworkFetch,
        on_error: ErrorCallback | None,
    ) -> NetworkFetch:
        """Wrap network_fetch so a rejection schedules invalidation and becomes FetchFailed."""

        async def fetch() -> Any:
            try:
                return await network_fetch()
            except Exception as e:
                logger.warning(
                    "Network fetch failed for %s %s: %s", entity_class.value, key, e
                )
                self._schedule_invalidation(entity_class, key)
                if on_error is not None:
                    try:
                        on_error(e)
                    except Exception:
                        logger.exception(
                            "on_error callback failed for %s %s", entity_class.value, key
                        )
                raise FetchFailedException(entity_class.value, key, str(e)) from e

        return fetch

    def _schedule_invalidation(self, entity_class: EntityClass, key: str) -> None:
        """Spawn a tracked invalidation task; skip it when the bound is reached."""
        if len(self._pending) >= self._max_pending:
            logger.warning(
                "Invalidation backlog full (%s tasks); skipping %s %s",
                len(self._pending),
                entity_class.value,
                key,
            )
            return
        task = asyncio.create_task(
            self._invalidate(entity_class, key),
            name=f"invalidate:{entity_class.value}:{key}",
        )
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _invalidate(self, entity_class: EntityClass, key: str) -> None:
        """Drop key and its stored record if the cache holds one. Errors are logged only."""
        try:
            if not await self._cache.has_record(entity_class, key):
                logger.debug(
                    "No stored record for %s %s; nothing to invalidate",
                    entity_class.value,
                    key,
                )
                return
            self.registry.remove(entity_class, key)
            await self._cache.delete(entity_class, key)
            logger.info("Invalidated stale %s %s", entity_class.value, key)
        except Exception:
            logger.exception("Invalidation failed for %s %s", entity_class.value, key)

    async def wait_for_pending(self) -> None:
        """Wait until every scheduled invalidation has finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def dispose(self) -> None:
        """Join in-flight invalidations and reset session state."""
        self._disposed = True
        await self.wait_for_pending()
        self.registry.clear()
        logger.debug("RetrievalOrchestrator disposed")
