"""Client session: startup and shutdown.

Single place for wiring infrastructure (HTTP client, entity cache, sync
publisher) into a ClientService; no retrieval policy here.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx

from viewcache.application.dtos.retrieval import SyncContext
from viewcache.application.interfaces.services import (
    ICollabDocument,
    IEntityCache,
    IIdentityProvider,
)
from viewcache.application.services.client_service import ClientService
from viewcache.application.services.sync_registrar import SyncRegistrar
from viewcache.core.config import Settings, get_settings
from viewcache.infrastructure.cache.memory_cache import InMemoryEntityCache
from viewcache.infrastructure.cache.redis_cache import RedisEntityCache
from viewcache.infrastructure.http.api_client import ApiClient, TokenProvider
from viewcache.infrastructure.messaging.collab_sync import (
    CollabSyncBinding,
    CollabSyncPublisher,
)
from viewcache.shared.context import ContextIdentityProvider
from viewcache.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_client_session(
    settings: Settings | None = None,
    *,
    http_client: httpx.AsyncClient | None = None,
    token_provider: TokenProvider | None = None,
    identity: IIdentityProvider | None = None,
) -> AsyncIterator[ClientService]:
    """Build a ClientService, yield it, then tear everything down.

    Startup order: HTTP client, entity cache (Redis if enabled and
    reachable, else in-memory), sync publisher (if enabled). Shutdown order:
    service dispose (joins invalidations, closes bindings), sync publisher,
    entity cache, HTTP client.
    """
    settings = settings or get_settings()

    # ---- Startup ----
    setup_logging(settings)
    api = ApiClient(settings, http_client=http_client, token_provider=token_provider)

    redis_cache: RedisEntityCache | None = None
    cache: IEntityCache
    if settings.redis_enabled:
        redis_cache = RedisEntityCache(settings=settings)
        await redis_cache.connect()
    if redis_cache is not None and redis_cache.is_available():
        cache = redis_cache
    else:
        cache = InMemoryEntityCache()
        logger.info("Using in-memory entity cache")

    publisher = CollabSyncPublisher(settings=settings)
    if settings.sync_enabled:
        await publisher.connect()

    def make_binding(document: ICollabDocument, context: SyncContext) -> CollabSyncBinding:
        return CollabSyncBinding(document, context, publisher)

    service = ClientService(
        api,
        cache,
        identity or ContextIdentityProvider(),
        SyncRegistrar(make_binding),
        client_id=settings.client_id,
        max_pending_invalidations=settings.max_pending_invalidations,
    )
    publisher.device_id = service.device_id
    logger.info("Client session started (device %s)", service.device_id)

    try:
        yield service
    finally:
        # ---- Shutdown ----
        await service.dispose()
        await publisher.disconnect()
        if redis_cache is not None:
            await redis_cache.disconnect()
        await api.aclose()
        logger.info("Client session closed")
