"""Messaging: Redis pub/sub sync transport for collaborative documents."""

from viewcache.infrastructure.messaging.collab_sync import (
    CollabSyncBinding,
    CollabSyncPublisher,
    CollabUpdateMessage,
)

__all__ = ["CollabSyncBinding", "CollabSyncPublisher", "CollabUpdateMessage"]
