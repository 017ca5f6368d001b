"""RedisEntityCache with a mocked redis client (no server needed)."""

import json
from unittest.mock import AsyncMock

import pytest
import redis.asyncio as redis

from viewcache.core.config import Settings
from viewcache.domain.enums import EntityClass, StrategyType
from viewcache.infrastructure.cache.redis_cache import RedisEntityCache

SKEY = "entity:publish_view:ns1_note"


@pytest.fixture
def redis_client() -> AsyncMock:
    client = AsyncMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock(return_value=True)
    client.delete = AsyncMock(return_value=1)
    client.exists = AsyncMock(return_value=0)
    return client


@pytest.fixture
def redis_cache(redis_client: AsyncMock, settings: Settings) -> RedisEntityCache:
    return RedisEntityCache(redis_client=redis_client, settings=settings)


@pytest.mark.asyncio
async def test_cache_first_hit_skips_network(
    redis_cache: RedisEntityCache, redis_client: AsyncMock
) -> None:
    redis_client.get.return_value = json.dumps({"v": 1})
    fetch = AsyncMock()

    value = await redis_cache.get(EntityClass.PUBLISH_VIEW, "ns1_note", fetch, StrategyType.CACHE_FIRST)

    assert value == {"v": 1}
    redis_client.get.assert_awaited_once_with(SKEY)
    fetch.assert_not_awaited()


@pytest.mark.asyncio
async def test_cache_and_network_fetches_and_stores(
    redis_cache: RedisEntityCache, redis_client: AsyncMock
) -> None:
    fetch = AsyncMock(return_value={"v": 2})

    value = await redis_cache.get(
        EntityClass.PUBLISH_VIEW, "ns1_note", fetch, StrategyType.CACHE_AND_NETWORK
    )

    assert value == {"v": 2}
    redis_client.get.assert_not_awaited()
    redis_client.set.assert_awaited_once_with(SKEY, json.dumps({"v": 2}), ex=None)


@pytest.mark.asyncio
async def test_ttl_from_settings(redis_client: AsyncMock) -> None:
    cache = RedisEntityCache(
        redis_client=redis_client, settings=Settings(_env_file=None, cache_ttl_entities=60)
    )

    await cache.get(EntityClass.PAGE, "k", AsyncMock(return_value={"v": 1}), StrategyType.CACHE_FIRST)

    assert redis_client.set.await_args.kwargs["ex"] == 60


@pytest.mark.asyncio
async def test_redis_error_degrades_to_network(
    redis_cache: RedisEntityCache, redis_client: AsyncMock
) -> None:
    redis_client.get.side_effect = redis.RedisError("boom")
    fetch = AsyncMock(return_value={"v": 3})

    value = await redis_cache.get(EntityClass.PAGE, "k", fetch, StrategyType.CACHE_FIRST)

    assert value == {"v": 3}
    fetch.assert_awaited_once()


@pytest.mark.asyncio
async def test_corrupt_stored_value_is_treated_as_miss(
    redis_cache: RedisEntityCache, redis_client: AsyncMock, caplog: pytest.LogCaptureFixture
) -> None:
    redis_client.get.return_value = "{not json"
    fetch = AsyncMock(return_value={"v": 4})

    value = await redis_cache.get(
        EntityClass.PUBLISH_VIEW, "ns1_note", fetch, StrategyType.CACHE_FIRST
    )

    assert value == {"v": 4}
    fetch.assert_awaited_once()
    redis_client.set.assert_awaited_once_with(SKEY, json.dumps({"v": 4}), ex=None)
    assert "not valid JSON" in caplog.text


@pytest.mark.asyncio
async def test_fetch_error_propagates(redis_cache: RedisEntityCache) -> None:
    with pytest.raises(ConnectionError):
        await redis_cache.get(
            EntityClass.PAGE,
            "k",
            AsyncMock(side_effect=ConnectionError("offline")),
            StrategyType.CACHE_AND_NETWORK,
        )


@pytest.mark.asyncio
async def test_has_record_and_delete(redis_cache: RedisEntityCache, redis_client: AsyncMock) -> None:
    redis_client.exists.return_value = 1

    assert await redis_cache.has_record(EntityClass.PUBLISH_VIEW, "ns1_note") is True
    await redis_cache.delete(EntityClass.PUBLISH_VIEW, "ns1_note")

    redis_client.exists.assert_awaited_once_with(SKEY)
    redis_client.delete.assert_awaited_once_with(SKEY)


@pytest.mark.asyncio
async def test_unavailable_cache_is_permanent_miss(settings: Settings) -> None:
    cache = RedisEntityCache(settings=settings)
    fetch = AsyncMock(return_value={"v": 1})

    assert cache.is_available() is False
    assert await cache.get(EntityClass.PAGE, "k", fetch, StrategyType.CACHE_FIRST) == {"v": 1}
    assert await cache.has_record(EntityClass.PAGE, "k") is False
    await cache.delete(EntityClass.PAGE, "k")


@pytest.mark.asyncio
async def test_non_json_value_is_returned_but_not_cached(
    redis_cache: RedisEntityCache, redis_client: AsyncMock
) -> None:
    value = await redis_cache.get(
        EntityClass.PAGE, "k", AsyncMock(return_value={"raw": b"\x00"}), StrategyType.CACHE_FIRST
    )

    assert value == {"raw": b"\x00"}
    redis_client.set.assert_not_awaited()
