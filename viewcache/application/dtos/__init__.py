"""Application DTOs: publish metadata, workspace info, retrieval and sync values."""

from viewcache.application.dtos.publish import (
    PublishConfigUpdate,
    PublishInfoRecord,
    WorkspaceInfo,
)
from viewcache.application.dtos.retrieval import (
    NetworkFetch,
    RetrievalRequest,
    SyncContext,
)

__all__ = [
    "NetworkFetch",
    "PublishConfigUpdate",
    "PublishInfoRecord",
    "RetrievalRequest",
    "SyncContext",
    "WorkspaceInfo",
]
