"""Destination cache tests (fakeredis)"""

import asyncio

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core.errors import CacheError
from app.schemas.destination import DestinationData, WeatherData
from app.services.cache_service import DestinationCache, cache_key, connect_redis
from app.tests.fakes import sample_data


class UnreachableRedis:
    async def get(self, key):
        raise RedisConnectionError("connection refused")

    async def set(self, key, value, px=None):
        raise RedisConnectionError("connection refused")

    async def delete(self, key):
        raise RedisConnectionError("connection refused")

    async def ping(self):
        raise RedisConnectionError("connection refused")


class TestDestinationCache:
    @pytest.mark.asyncio
    async def test_set_and_get(self, cache):
        await cache.set("Paris", sample_data())

        got = await cache.get("Paris")

        assert got == sample_data()

    @pytest.mark.asyncio
    async def test_miss_returns_none(self, cache):
        assert await cache.get("nonexistent") is None

    @pytest.mark.asyncio
    async def test_key_is_normalized(self, cache, redis_client):
        await cache.set("  PARIS ", sample_data())

        assert await cache.get("paris") is not None
        assert await cache.get("Paris") is not None
        assert await redis_client.exists("destination:paris") == 1

    def test_cache_key(self):
        assert cache_key(" Rome ") == "destination:rome"

    @pytest.mark.asyncio
    async def test_entry_is_serialized_record_without_absent_facts(self, cache, redis_client):
        data = DestinationData(weather=WeatherData(temperature=22.5, description="clear sky"))
        await cache.set("Paris", data)

        raw = await redis_client.get("destination:paris")

        assert raw.decode() == data.to_json()
        assert b"country" not in raw

    @pytest.mark.asyncio
    async def test_set_none_is_noop(self, cache, redis_client):
        await cache.set("Paris", None)
        assert await redis_client.exists("destination:paris") == 0

    @pytest.mark.asyncio
    async def test_set_replaces_existing(self, cache):
        await cache.set("Paris", sample_data())
        await cache.set("Paris", DestinationData())

        assert (await cache.get("Paris")).is_empty()

    @pytest.mark.asyncio
    async def test_delete(self, cache):
        await cache.set("Paris", sample_data())
        await cache.delete("Paris")
        assert await cache.get("Paris") is None

    @pytest.mark.asyncio
    async def test_delete_nonexistent(self, cache):
        await cache.delete("ghost")

    @pytest.mark.asyncio
    async def test_ttl_is_applied(self, cache, redis_client):
        await cache.set("Paris", sample_data())

        ttl = await redis_client.ttl("destination:paris")

        assert 3590 <= ttl <= 3600

    @pytest.mark.asyncio
    async def test_entry_expires_after_ttl(self, redis_client):
        cache = DestinationCache(redis_client, ttl_seconds=0.1)
        await cache.set("Paris", sample_data())
        assert await cache.get("Paris") is not None

        await asyncio.sleep(0.25)

        assert await cache.get("Paris") is None

    @pytest.mark.asyncio
    async def test_corrupt_entry_raises_cache_error(self, cache, redis_client):
        await redis_client.set("destination:paris", b"not-valid-json")
        with pytest.raises(CacheError, match="decoding"):
            await cache.get("Paris")

    @pytest.mark.asyncio
    async def test_redis_errors_are_wrapped(self):
        cache = DestinationCache(UnreachableRedis())

        with pytest.raises(CacheError):
            await cache.get("Paris")
        with pytest.raises(CacheError):
            await cache.set("Paris", sample_data())
        with pytest.raises(CacheError):
            await cache.delete("Paris")
        with pytest.raises(CacheError):
            await cache.ping()


class TestConnectRedis:
    @pytest.mark.asyncio
    async def test_invalid_url(self):
        with pytest.raises(CacheError):
            await connect_redis("not-a-url")

    @pytest.mark.asyncio
    async def test_unreachable_server(self):
        with pytest.raises(CacheError):
            await connect_redis("redis://localhost:19999")
