"""PublishInfoCache: read path, invalidation, and in-flight read protection."""

import asyncio
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from viewcache.application.dtos.publish import PublishInfoRecord
from viewcache.application.services.publish_info_cache import PublishInfoCache
from viewcache.domain.exceptions import NotFoundException

VIEW_INFO = {
    "namespace": "ns1",
    "publish_name": "note",
    "publisher_email": "owner@example.com",
    "view_id": "view42",
    "publish_timestamp": "2024-05-01T10:00:00Z",
    "comments_enabled": True,
    "duplicate_enabled": False,
}


@pytest.mark.asyncio
async def test_resolve_shapes_and_caches_record() -> None:
    cache = PublishInfoCache()
    fetch = AsyncMock(return_value=VIEW_INFO)

    record = await cache.resolve("view42", fetch)

    assert record == PublishInfoRecord(
        namespace="ns1",
        publish_name="note",
        publisher_email="owner@example.com",
        view_id="view42",
        published_at=datetime(2024, 5, 1, 10, 0, tzinfo=UTC),
        comment_enabled=True,
        duplicate_enabled=False,
    )
    assert cache.get("view42") == record
    fetch.assert_awaited_once_with("view42")


@pytest.mark.asyncio
async def test_second_resolve_uses_memory() -> None:
    cache = PublishInfoCache()
    fetch = AsyncMock(return_value=VIEW_INFO)

    first = await cache.resolve("view42", fetch)
    second = await cache.resolve("view42", fetch)

    assert second is first
    assert fetch.await_count == 1


@pytest.mark.asyncio
async def test_missing_namespace_raises_view_not_found() -> None:
    cache = PublishInfoCache()

    with pytest.raises(NotFoundException, match="View not found"):
        await cache.resolve("view42", AsyncMock(return_value={"namespace": None}))

    assert cache.get("view42") is None


@pytest.mark.asyncio
async def test_invalidate_forces_refetch() -> None:
    cache = PublishInfoCache()
    fetch = AsyncMock(return_value=VIEW_INFO)
    await cache.resolve("view42", fetch)

    cache.invalidate("view42")
    await cache.resolve("view42", fetch)

    assert fetch.await_count == 2


def test_invalidate_is_idempotent() -> None:
    cache = PublishInfoCache()
    record = PublishInfoRecord.from_api(VIEW_INFO)
    cache.put("view42", record)
    cache.put("view7", record)

    cache.invalidate("view42")
    cache.invalidate("view42")
    cache.invalidate("never-cached")

    assert cache.get("view42") is None
    assert cache.get("view7") == record


def test_invalidate_all_clears_every_record() -> None:
    cache = PublishInfoCache()
    record = PublishInfoRecord.from_api(VIEW_INFO)
    cache.put("a", record)
    cache.put("b", record)

    cache.invalidate_all()

    assert cache.get("a") is None
    assert cache.get("b") is None


@pytest.mark.asyncio
async def test_read_in_flight_during_invalidation_is_not_cached() -> None:
    """A fetch that started before invalidate() must not repopulate the cache."""
    cache = PublishInfoCache()
    release = asyncio.Event()

    async def slow_fetch(view_id: str) -> dict:
        await release.wait()
        return VIEW_INFO

    read = asyncio.create_task(cache.resolve("view42", slow_fetch))
    await asyncio.sleep(0)
    cache.invalidate("view42")
    release.set()
    record = await read

    assert record.namespace == "ns1"
    assert cache.get("view42") is None


@pytest.mark.asyncio
async def test_read_in_flight_during_invalidate_all_is_not_cached() -> None:
    cache = PublishInfoCache()
    release = asyncio.Event()

    async def slow_fetch(view_id: str) -> dict:
        await release.wait()
        return VIEW_INFO

    read = asyncio.create_task(cache.resolve("view42", slow_fetch))
    await asyncio.sleep(0)
    cache.invalidate_all()
    release.set()
    await read

    assert cache.get("view42") is None
