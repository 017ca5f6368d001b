"""Service interfaces (ports) for the application layer.

Protocols define the collaborators the retrieval core consumes (DIP).
Infrastructure provides the implementations (entity caches, HTTP API
client, Redis sync transport, identity context).
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol

from viewcache.domain.enums import EntityClass, StrategyType

if TYPE_CHECKING:
    from viewcache.application.dtos.retrieval import NetworkFetch, SyncContext


# Entity cache (storage collaborator)
class IEntityCache(Protocol):
    """Protocol for strategy-aware entity storage, partitioned by entity class."""

    async def get(
        self,
        entity_class: EntityClass,
        key: str,
        network_fetch: NetworkFetch,
        strategy: StrategyType,
    ) -> Any:
        """Resolve an entity with the given strategy.

        CACHE_FIRST serves a stored value when present, else calls
        network_fetch and stores the result. CACHE_AND_NETWORK always calls
        network_fetch and stores the result. Errors from network_fetch
        propagate unchanged.
        """

    async def delete(self, entity_class: EntityClass, key: str) -> None:
        """Remove the stored record for key (no-op when absent)."""

    async def has_record(self, entity_class: EntityClass, key: str) -> bool:
        """Return True if a record is stored for key."""


# Network transport
class IPublishApi(Protocol):
    """Protocol for the remote API calls the client service issues."""

    async def fetch_publish_view_meta(self, namespace: str, publish_name: str) -> Any: ...

    async def fetch_publish_view(self, namespace: str, publish_name: str) -> Any: ...

    async def fetch_page_collab(self, workspace_id: str, view_id: str) -> Any: ...

    async def fetch_view_info(self, view_id: str) -> dict[str, Any]: ...

    async def get_current_user(self) -> Any: ...

    async def get_user_workspace_info(self) -> dict[str, Any] | None: ...

    async def publish_view(
        self, workspace_id: str, view_id: str, payload: dict[str, Any] | None = None
    ) -> Any: ...

    async def unpublish_view(self, workspace_id: str, view_id: str) -> Any: ...

    async def get_publish_namespace(self, workspace_id: str) -> str: ...

    async def update_publish_namespace(
        self, workspace_id: str, payload: dict[str, Any]
    ) -> Any: ...

    async def get_publish_homepage(self, workspace_id: str) -> Any: ...

    async def update_publish_homepage(self, workspace_id: str, view_id: str) -> Any: ...

    async def remove_publish_homepage(self, workspace_id: str) -> Any: ...

    async def update_publish_config(
        self, workspace_id: str, config: dict[str, Any]
    ) -> Any: ...

    async def get_publish_outline(self, namespace: str) -> Any: ...


# Collaborative document seen by the sync layer
class ICollabDocument(Protocol):
    """Protocol for a live document that emits binary updates."""

    def observe_updates(self, callback: Callable[[bytes], None]) -> Callable[[], None]:
        """Register callback for local updates; return a function that unregisters it."""


# Sync transport
class ISyncTransport(Protocol):
    """Protocol for the outbound sync channel."""

    async def publish_update(self, context: SyncContext, update: bytes) -> bool:
        """Send one document update for the context; return True when delivered."""


class ISyncBinding(Protocol):
    """Protocol for a started binding between a document and a sync channel."""

    def initialize(self) -> None:
        """Start syncing. Returns immediately; work continues in the background."""

    async def close(self) -> None:
        """Stop syncing and release the document observer."""


# Identity provider
class IIdentityProvider(Protocol):
    """Protocol for the current session's user identity."""

    def current_user_id(self) -> str | None:
        """Return the signed-in user ID, or None if not signed in."""
