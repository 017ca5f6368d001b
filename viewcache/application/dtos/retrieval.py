"""DTOs for retrieval and sync (transient values, never persisted)."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from viewcache.domain.enums import CollabType, EntityClass, StrategyType

NetworkFetch = Callable[[], Awaitable[Any]]


@dataclass(frozen=True)
class RetrievalRequest:
    """One retrieval: key, partition, chosen strategy and the network fetch closure."""

    key: str
    entity_class: EntityClass
    strategy: StrategyType
    network_fetch: NetworkFetch


@dataclass(frozen=True)
class SyncContext:
    """Identity and object scope of a sync binding."""

    user_id: str
    workspace_id: str
    object_id: str
    collab_type: CollabType
