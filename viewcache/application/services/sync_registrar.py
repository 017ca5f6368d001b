"""Bind live documents to the sync channel.

Registration is fire-and-forget: the binding is started and the call
returns; retries and transport failures are the binding's concern.
Registering the same (document, context) pair twice keeps the first
binding and ignores the second call.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from viewcache.application.dtos.retrieval import SyncContext
from viewcache.application.interfaces.services import ICollabDocument, ISyncBinding
from viewcache.domain.enums import CollabType
from viewcache.domain.exceptions import ValidationException

logger = logging.getLogger(__name__)

BindingFactory = Callable[[ICollabDocument, SyncContext], ISyncBinding]


class SyncRegistrar:
    """Creates, starts and tracks sync bindings for one session."""

    def __init__(self, binding_factory: BindingFactory) -> None:
        self._binding_factory = binding_factory
        # Keyed by document identity; documents need not be hashable.
        self._bindings: dict[tuple[int, SyncContext], tuple[ICollabDocument, ISyncBinding]] = {}

    @property
    def active_count(self) -> int:
        return len(self._bindings)

    def is_registered(self, document: ICollabDocument, context: SyncContext) -> bool:
        return (id(document), context) in self._bindings

    def register(
        self,
        document: ICollabDocument,
        user_id: str,
        workspace_id: str,
        object_id: str,
        collab_type: CollabType,
    ) -> None:
        """Start syncing document under the given identity and object scope.

        Identity must already be resolved by the caller.

        Raises:
            ValidationException: If user_id, workspace_id or object_id is empty.
        """
        for value, name in (
            (user_id, "user_id"),
            (workspace_id, "workspace_id"),
            (object_id, "object_id"),
        ):
            if not value:
                raise ValidationException(f"{name} is required for sync registration", field=name)

        context = SyncContext(
            user_id=user_id,
            workspace_id=workspace_id,
            object_id=object_id,
            collab_type=CollabType(collab_type),
        )
        slot = (id(document), context)
        if slot in self._bindings:
            logger.debug(
                "Sync already registered for %s/%s; ignoring", workspace_id, object_id
            )
            return

        binding = self._binding_factory(document, context)
        # Slot is taken only once the binding has started.
        binding.initialize()
        self._bindings[slot] = (document, binding)
        logger.info(
            "Sync registered: workspace=%s object=%s type=%s",
            workspace_id,
            object_id,
            context.collab_type.name,
        )

    async def unregister(self, document: ICollabDocument, context: SyncContext) -> bool:
        """Close and forget the binding for (document, context). Returns True if one existed."""
        entry = self._bindings.pop((id(document), context), None)
        if entry is None:
            return False
        await entry[1].close()
        return True

    async def dispose(self) -> None:
        """Close every binding."""
        entries = list(self._bindings.values())
        self._bindings.clear()
        for _, binding in entries:
            try:
                await binding.close()
            except Exception:
                logger.exception("Failed to close sync binding")
