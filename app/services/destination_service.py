"""Cache-aside read path and refresh path for destination data."""

from __future__ import annotations

from typing import List, Optional, Protocol

from app.core.errors import DestinationNotFound, ReadFailure, RefreshFailure
from app.core.logging import get_logger
from app.schemas.destination import DestinationData, StoredDestination, normalize_city

log = get_logger("destination_service")


class Store(Protocol):
    async def get(self, city: str) -> Optional[StoredDestination]: ...

    async def upsert(self, city: str, country: Optional[str], data: DestinationData) -> None: ...

    async def find_by_weather(self, description: str) -> List[StoredDestination]: ...

    async def ping(self) -> None: ...


class Cache(Protocol):
    async def get(self, city: str) -> Optional[DestinationData]: ...

    async def set(self, city: str, data: Optional[DestinationData], ttl_seconds: Optional[float] = None) -> None: ...

    async def delete(self, city: str) -> None: ...

    async def ping(self) -> None: ...


class Aggregator(Protocol):
    async def fetch_all(self, city: str, country: Optional[str] = None, timeout: Optional[float] = None) -> DestinationData: ...


class DestinationService:
    """Ties the aggregator, the durable store and the cache together.

    The store is the source of truth and the cache only an accelerator:
    - Read: cache -> store -> repopulate cache; a cache fault is a miss.
    - Refresh: aggregate -> upsert -> invalidate and repopulate cache.
      Succeeds once the upsert succeeds; cache faults are only logged.

    No per-city locking is done. A concurrent read and refresh may interleave;
    the resulting staleness is bounded by the cache TTL.
    """

    def __init__(
        self,
        store: Store,
        cache: Cache,
        aggregator: Aggregator,
        refresh_timeout: Optional[float] = None,
    ):
        self.store = store
        self.cache = cache
        self.aggregator = aggregator
        self.refresh_timeout = refresh_timeout

    async def get_destination(self, city: str) -> DestinationData:
        """Return the destination record, raising DestinationNotFound or ReadFailure."""
        key = normalize_city(city)

        cached = await self._cache_get(key)
        if cached is not None:
            log.bind(city=key).debug("Cache hit")
            return cached

        try:
            stored = await self.store.get(key)
        except Exception as exc:  # noqa: BLE001
            log.bind(city=key).error(f"DB get failed: {exc}")
            raise ReadFailure(f"reading destination {key}") from exc

        if stored is None:
            log.bind(city=key).info("Destination not found; refresh required")
            raise DestinationNotFound(key)

        await self._cache_set(key, stored.data, "after db hit")
        return stored.data

    async def refresh_destination(self, city: str, country: Optional[str] = None) -> DestinationData:
        """Re-aggregate, persist and re-cache one destination."""
        key = normalize_city(city)
        city = city.strip()
        country = (country or "").strip() or city

        try:
            data = await self.aggregator.fetch_all(city, country, timeout=self.refresh_timeout)
        except Exception as exc:  # noqa: BLE001
            log.bind(city=key).error(f"Fetch all failed: {exc}")
            raise RefreshFailure(f"fetching destination data for {key}") from exc

        try:
            await self.store.upsert(key, country, data)
        except Exception as exc:  # noqa: BLE001
            log.bind(city=key).error(f"Upsert failed: {exc}")
            raise RefreshFailure(f"storing destination data for {key}") from exc

        await self._cache_delete(key)
        await self._cache_set(key, data, "after refresh")

        log.bind(city=key).info(f"Refreshed (country={country}) | facts={data.present_facts()}")
        return data

    async def find_by_weather(self, description: str) -> List[StoredDestination]:
        try:
            return await self.store.find_by_weather(description)
        except Exception as exc:  # noqa: BLE001
            log.error(f"Weather condition query failed for {description!r}: {exc}")
            raise ReadFailure(f"querying destinations by weather {description!r}") from exc

    # -------------------------------------------------------------------------
    # Best-effort cache access
    # -------------------------------------------------------------------------
    async def _cache_get(self, key: str) -> Optional[DestinationData]:
        try:
            return await self.cache.get(key)
        except Exception as exc:  # noqa: BLE001
            log.bind(city=key).warning(f"Cache get failed, treating as miss: {exc}")
            return None

    async def _cache_set(self, key: str, data: DestinationData, when: str) -> None:
        try:
            await self.cache.set(key, data)
        except Exception as exc:  # noqa: BLE001
            log.bind(city=key).warning(f"Cache set failed {when}: {exc}")

    async def _cache_delete(self, key: str) -> None:
        try:
            await self.cache.delete(key)
        except Exception as exc:  # noqa: BLE001
            log.bind(city=key).warning(f"Cache delete failed: {exc}")
