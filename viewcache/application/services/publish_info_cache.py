"""In-memory cache of publish metadata keyed by view id.

Records are never expired by time. Every mutation that can change a view's
publish state or configuration invalidates the record before the mutation
is sent. Each invalidation bumps a generation counter so that a read whose
fetch was already in flight does not write its (possibly pre-mutation)
result back into the cache.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from viewcache.application.dtos.publish import PublishInfoRecord
from viewcache.core.constants import MSG_VIEW_NOT_FOUND
from viewcache.domain.exceptions import NotFoundException
from viewcache.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)

FetchViewInfo = Callable[[str], Awaitable[dict[str, Any]]]


class PublishInfoCache:
    """Keyed cache of PublishInfoRecord with mutation-driven invalidation."""

    def __init__(self) -> None:
        self._records: dict[str, PublishInfoRecord] = {}
        self._generations: dict[str, int] = {}
        self._epoch = 0

    def get(self, view_id: str) -> PublishInfoRecord | None:
        """Return the cached record, or None (ask the network)."""
        return self._records.get(view_id)

    def put(self, view_id: str, record: PublishInfoRecord) -> None:
        """Store record for view_id."""
        self._records[view_id] = record

    def invalidate(self, view_id: str) -> None:
        """Drop the record for view_id. Idempotent."""
        self._generations[view_id] = self._generations.get(view_id, 0) + 1
        if self._records.pop(view_id, None) is not None:
            logger.debug("Publish info INVALIDATE: %s", view_id)

    def invalidate_all(self) -> None:
        """Drop every record (namespace-wide changes)."""
        self._epoch += 1
        if self._records:
            logger.debug("Publish info INVALIDATE ALL (%s records)", len(self._records))
        self._records.clear()

    def _stamp(self, view_id: str) -> tuple[int, int]:
        return self._epoch, self._generations.get(view_id, 0)

    @traced("publish_info.resolve")
    async def resolve(self, view_id: str, fetch_view_info: FetchViewInfo) -> PublishInfoRecord:
        """Return the cached record or fetch, shape and cache it.

        Args:
            view_id: View whose publish info is requested.
            fetch_view_info: Network call returning the raw view-info payload.

        Returns:
            PublishInfoRecord for the view.

        Raises:
            NotFoundException: If the response carries no namespace.
        """
        record = self._records.get(view_id)
        if record is not None:
            logger.debug("Publish info HIT: %s", view_id)
            return record

        logger.debug("Publish info MISS: %s", view_id)
        stamp = self._stamp(view_id)
        info = await fetch_view_info(view_id)
        if not info or not info.get("namespace"):
            raise NotFoundException(MSG_VIEW_NOT_FOUND, key=view_id)

        record = PublishInfoRecord.from_api(info)
        if self._stamp(view_id) == stamp:
            self.put(view_id, record)
        else:
            logger.debug("Publish info for %s invalidated during fetch; not cached", view_id)
        return record
