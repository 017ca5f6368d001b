"""Client service: entity retrieval and publish operations for one session.

Owns the retrieval orchestrator (and through it the loaded-key registry),
the publish info cache and the sync registrar. Everything else is a
single call on the API client.
"""

from __future__ import annotations

import logging
from typing import Any

from viewcache.application.dtos.publish import (
    PublishConfigUpdate,
    PublishInfoRecord,
    WorkspaceInfo,
)
from viewcache.application.interfaces.services import (
    ICollabDocument,
    IEntityCache,
    IIdentityProvider,
    IPublishApi,
)
from viewcache.application.services.identity_guard import with_identity
from viewcache.application.services.publish_info_cache import PublishInfoCache
from viewcache.application.services.retrieval_orchestrator import (
    ErrorCallback,
    RetrievalOrchestrator,
)
from viewcache.application.services.sync_registrar import SyncRegistrar
from viewcache.core.constants import (
    MSG_DOCUMENT_NOT_FOUND,
    MSG_USER_NOT_FOUND,
    MSG_VIEW_NOT_PUBLISHED,
    MSG_WORKSPACE_INFO_NOT_FOUND,
)
from viewcache.domain.enums import CollabType, EntityClass, StrategyType
from viewcache.domain.exceptions import NotFoundException
from viewcache.infrastructure.cache.keys import page_view_key, publish_view_key, user_key
from viewcache.shared.utils.generators import generate_device_id

logger = logging.getLogger(__name__)


class ClientService:
    """Session-scoped facade over retrieval, publish info and sync registration."""

    def __init__(
        self,
        api: IPublishApi,
        cache: IEntityCache,
        identity: IIdentityProvider,
        sync_registrar: SyncRegistrar,
        *,
        client_id: str = "web",
        max_pending_invalidations: int = 64,
    ) -> None:
        self._api = api
        self._cache = cache
        self._identity = identity
        self._client_id = client_id
        self._device_id = generate_device_id()
        self.orchestrator = RetrievalOrchestrator(
            cache, max_pending_invalidations=max_pending_invalidations
        )
        self.publish_info = PublishInfoCache()
        self.sync_registrar = sync_registrar

        self.get_page_doc = with_identity(identity, self._get_page_doc)
        self.get_current_user = with_identity(identity, self._get_current_user)
        self.register_doc_update = with_identity(identity, self._register_doc_update)

    @property
    def client_id(self) -> str:
        return self._client_id

    @property
    def device_id(self) -> str:
        return self._device_id

    # ---- Retrieval ----

    async def get_publish_view_meta(self, namespace: str, publish_name: str) -> Any:
        """Return published view metadata; NotFound if the view is not published."""
        return await self.orchestrator.retrieve(
            publish_view_key(namespace, publish_name),
            EntityClass.PUBLISH_VIEW_META,
            lambda: self._api.fetch_publish_view_meta(namespace, publish_name),
            not_found_message=MSG_VIEW_NOT_PUBLISHED,
        )

    async def get_publish_view(self, namespace: str, publish_name: str) -> Any:
        """Return the published view document."""
        return await self.orchestrator.retrieve(
            publish_view_key(namespace, publish_name),
            EntityClass.PUBLISH_VIEW,
            lambda: self._api.fetch_publish_view(namespace, publish_name),
            not_found_message=MSG_DOCUMENT_NOT_FOUND,
        )

    async def _get_page_doc(
        self,
        user_id: str,
        workspace_id: str,
        view_id: str,
        on_error: ErrorCallback | None = None,
    ) -> Any:
        """Return the page document for the signed-in user (wrapped by with_identity)."""
        return await self.orchestrator.retrieve(
            page_view_key(user_id, workspace_id, view_id),
            EntityClass.PAGE,
            lambda: self._api.fetch_page_collab(workspace_id, view_id),
            not_found_message=MSG_DOCUMENT_NOT_FOUND,
            on_error=on_error,
        )

    async def _get_current_user(self, user_id: str) -> Any:
        """Return the signed-in user's profile, always refreshed from the network."""
        user = await self._cache.get(
            EntityClass.USER,
            user_key(user_id),
            self._api.get_current_user,
            StrategyType.CACHE_AND_NETWORK,
        )
        if not user:
            raise NotFoundException(MSG_USER_NOT_FOUND, EntityClass.USER.value, user_id)
        return user

    async def get_user_workspace_info(self) -> WorkspaceInfo:
        info = await self._api.get_user_workspace_info()
        if not info:
            raise NotFoundException(MSG_WORKSPACE_INFO_NOT_FOUND)
        return WorkspaceInfo(
            user_id=info["user_id"],
            selected_workspace=info.get("selected_workspace") or {},
            workspaces=info.get("workspaces") or [],
        )

    # ---- Publish info ----

    async def get_publish_info(self, view_id: str) -> PublishInfoRecord:
        """Return publish info from memory, fetching it once per invalidation."""
        return await self.publish_info.resolve(view_id, self._api.fetch_view_info)

    async def publish_view(
        self, workspace_id: str, view_id: str, payload: dict[str, Any] | None = None
    ) -> Any:
        self.publish_info.invalidate(view_id)
        return await self._api.publish_view(workspace_id, view_id, payload)

    async def unpublish_view(self, workspace_id: str, view_id: str) -> Any:
        self.publish_info.invalidate(view_id)
        return await self._api.unpublish_view(workspace_id, view_id)

    async def update_publish_namespace(self, workspace_id: str, payload: dict[str, Any]) -> Any:
        # Every publish info record embeds the namespace.
        self.publish_info.invalidate_all()
        return await self._api.update_publish_namespace(workspace_id, payload)

    async def update_publish_homepage(self, workspace_id: str, view_id: str) -> Any:
        self.publish_info.invalidate(view_id)
        return await self._api.update_publish_homepage(workspace_id, view_id)

    async def remove_publish_homepage(self, workspace_id: str) -> Any:
        # The previous homepage view is not known here.
        self.publish_info.invalidate_all()
        return await self._api.remove_publish_homepage(workspace_id)

    async def update_publish_config(self, workspace_id: str, config: PublishConfigUpdate) -> Any:
        self.publish_info.invalidate(config.view_id)
        return await self._api.update_publish_config(workspace_id, config.to_api())

    async def get_publish_namespace(self, workspace_id: str) -> str:
        return await self._api.get_publish_namespace(workspace_id)

    async def get_publish_homepage(self, workspace_id: str) -> Any:
        return await self._api.get_publish_homepage(workspace_id)

    async def get_publish_outline(self, namespace: str) -> Any:
        return await self._api.get_publish_outline(namespace)

    # ---- Sync ----

    def _register_doc_update(
        self,
        user_id: str,
        document: ICollabDocument,
        workspace_id: str,
        object_id: str,
        collab_type: CollabType,
    ) -> None:
        self.sync_registrar.register(document, user_id, workspace_id, object_id, collab_type)

    # ---- Lifecycle ----

    async def dispose(self) -> None:
        """Join background invalidations, close sync bindings and drop session state."""
        await self.orchestrator.dispose()
        await self.sync_registrar.dispose()
        self.publish_info.invalidate_all()
        logger.info("Client session %s disposed", self._device_id)
