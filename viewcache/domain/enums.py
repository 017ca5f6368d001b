"""Domain enumerations: entity classes, retrieval strategies, collab types."""

from enum import Enum, IntEnum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class EntityClass(_ValuesMixin, str, Enum):
    """Class of cacheable entity; partitions both the registry and storage."""

    PAGE = "page"
    PUBLISH_VIEW = "publish_view"
    PUBLISH_VIEW_META = "publish_view_meta"
    USER = "user"


class StrategyType(_ValuesMixin, str, Enum):
    """How the entity cache should satisfy a retrieval."""

    # Serve stored value when present; hit the network only on a miss.
    CACHE_FIRST = "cache_first"
    # Always fetch from the network and overwrite the stored value.
    CACHE_AND_NETWORK = "cache_and_network"


class CollabType(IntEnum):
    """Collaborative object type carried in sync bindings."""

    DOCUMENT = 0
    DATABASE = 1
    WORKSPACE_DATABASE = 2
    FOLDER = 3
    DATABASE_ROW = 4
    USER_AWARENESS = 5
