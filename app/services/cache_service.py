"""Redis-backed cache of aggregated destination data."""

from __future__ import annotations

from typing import Optional

from pydantic import ValidationError
from redis import asyncio as aioredis
from redis.exceptions import RedisError

from app.core.errors import CacheError
from app.core.logging import get_logger
from app.schemas.destination import DestinationData, normalize_city

log = get_logger("cache_service")

DEFAULT_TTL_SECONDS = 60 * 60
KEY_PREFIX = "destination:"


def cache_key(city: str) -> str:
    return KEY_PREFIX + normalize_city(city)


async def connect_redis(redis_url: str) -> aioredis.Redis:
    """Create a client from ``redis_url`` and verify it with a ping."""
    try:
        client = aioredis.from_url(redis_url)
    except ValueError as exc:
        raise CacheError(f"parsing redis URL: {exc}") from exc

    try:
        await client.ping()
    except RedisError as exc:
        await client.aclose()
        raise CacheError(f"pinging redis: {exc}") from exc
    return client


class DestinationCache:
    """Typed get/set/delete over Redis with a fixed TTL per write.

    A miss (never written or expired) is ``None``, not an error. Redis and
    decoding failures raise ``CacheError``.
    """

    def __init__(self, client: aioredis.Redis, ttl_seconds: float = DEFAULT_TTL_SECONDS):
        self.client = client
        self.ttl_seconds = ttl_seconds

    async def get(self, city: str) -> Optional[DestinationData]:
        key = cache_key(city)
        try:
            raw = await self.client.get(key)
        except RedisError as exc:
            raise CacheError(f"cache get for city {city}: {exc}") from exc

        if raw is None:
            return None

        try:
            return DestinationData.model_validate_json(raw)
        except ValidationError as exc:
            raise CacheError(f"decoding cached data for city {city}: {exc}") from exc

    async def set(self, city: str, data: Optional[DestinationData], ttl_seconds: Optional[float] = None) -> None:
        if data is None:
            return

        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        try:
            await self.client.set(cache_key(city), data.to_json(), px=int(ttl * 1000))
        except RedisError as exc:
            raise CacheError(f"cache set for city {city}: {exc}") from exc

    async def delete(self, city: str) -> None:
        try:
            await self.client.delete(cache_key(city))
        except RedisError as exc:
            raise CacheError(f"cache delete for city {city}: {exc}") from exc

    async def ping(self) -> None:
        try:
            await self.client.ping()
        except RedisError as exc:
            raise CacheError(f"pinging redis: {exc}") from exc
