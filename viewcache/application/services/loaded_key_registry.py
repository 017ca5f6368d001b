"""In-memory record of entity keys fetched at least once this session.

One set per entity class, so "view X loaded as a page" and "view X loaded
as a published view" are independent facts. Never persisted.
"""

from __future__ import annotations

from viewcache.domain.enums import EntityClass


class LoadedKeyRegistry:
    """Per-entity-class sets of loaded keys."""

    def __init__(self) -> None:
        self._loaded: dict[EntityClass, set[str]] = {cls: set() for cls in EntityClass}

    def has(self, entity_class: EntityClass, key: str) -> bool:
        """Return True if key was loaded for entity_class this session."""
        return key in self._loaded[entity_class]

    def add(self, entity_class: EntityClass, key: str) -> None:
        """Mark key as loaded."""
        self._loaded[entity_class].add(key)

    def remove(self, entity_class: EntityClass, key: str) -> None:
        """Unmark key; no-op when absent."""
        self._loaded[entity_class].discard(key)

    def clear(self) -> None:
        """Forget every key (session restart)."""
        for keys in self._loaded.values():
            keys.clear()

    def count(self, entity_class: EntityClass) -> int:
        return len(self._loaded[entity_class])
