"""InMemoryEntityCache strategy semantics."""

from unittest.mock import AsyncMock

import pytest

from viewcache.domain.enums import EntityClass, StrategyType
from viewcache.infrastructure.cache.memory_cache import InMemoryEntityCache


@pytest.mark.asyncio
async def test_cache_first_serves_stored_value() -> None:
    cache = InMemoryEntityCache()
    cache.put(EntityClass.PAGE, "k", {"v": 1})
    fetch = AsyncMock(return_value={"v": 2})

    value = await cache.get(EntityClass.PAGE, "k", fetch, StrategyType.CACHE_FIRST)

    assert value == {"v": 1}
    fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_cache_first_miss_fetches_and_stores() -> None:
    cache = InMemoryEntityCache()
    fetch = AsyncMock(return_value={"v": 2})

    value = await cache.get(EntityClass.PAGE, "k", fetch, StrategyType.CACHE_FIRST)

    assert value == {"v": 2}
    assert cache.peek(EntityClass.PAGE, "k") == {"v": 2}


@pytest.mark.asyncio
async def test_cache_and_network_always_fetches() -> None:
    cache = InMemoryEntityCache()
    cache.put(EntityClass.PAGE, "k", {"v": 1})
    fetch = AsyncMock(return_value={"v": 2})

    value = await cache.get(EntityClass.PAGE, "k", fetch, StrategyType.CACHE_AND_NETWORK)

    assert value == {"v": 2}
    assert cache.peek(EntityClass.PAGE, "k") == {"v": 2}


@pytest.mark.asyncio
async def test_fetch_error_propagates_and_keeps_stored_value() -> None:
    cache = InMemoryEntityCache()
    cache.put(EntityClass.PAGE, "k", {"v": 1})

    with pytest.raises(ConnectionError):
        await cache.get(
            EntityClass.PAGE,
            "k",
            AsyncMock(side_effect=ConnectionError()),
            StrategyType.CACHE_AND_NETWORK,
        )

    assert await cache.has_record(EntityClass.PAGE, "k")


@pytest.mark.asyncio
async def test_delete_and_has_record() -> None:
    cache = InMemoryEntityCache()
    cache.put(EntityClass.USER, "u1", {"uid": "u1"})

    await cache.delete(EntityClass.USER, "u1")
    await cache.delete(EntityClass.USER, "u1")

    assert not await cache.has_record(EntityClass.USER, "u1")
