"""Cache: entity cache implementations and key builders.

RedisEntityCache is the persistent store; InMemoryEntityCache is used when
Redis is disabled or unreachable. Key format is in keys.py.
"""

from viewcache.infrastructure.cache.keys import (
    page_view_key,
    publish_view_key,
    storage_key,
    user_key,
)
from viewcache.infrastructure.cache.memory_cache import InMemoryEntityCache
from viewcache.infrastructure.cache.redis_cache import RedisEntityCache

__all__ = [
    "InMemoryEntityCache",
    "RedisEntityCache",
    "page_view_key",
    "publish_view_key",
    "storage_key",
    "user_key",
]
