"""Application services: retrieval policy, publish info cache, sync registration."""

from viewcache.application.services.client_service import ClientService
from viewcache.application.services.identity_guard import require_identity, with_identity
from viewcache.application.services.loaded_key_registry import LoadedKeyRegistry
from viewcache.application.services.publish_info_cache import PublishInfoCache
from viewcache.application.services.retrieval_orchestrator import RetrievalOrchestrator
from viewcache.application.services.sync_registrar import SyncRegistrar

__all__ = [
    "ClientService",
    "LoadedKeyRegistry",
    "PublishInfoCache",
    "RetrievalOrchestrator",
    "SyncRegistrar",
    "require_identity",
    "with_identity",
]
