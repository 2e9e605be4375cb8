"""Destination Store - durable keyed repository with last-write-wins upsert."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Callable, List, Optional, TypeVar

from sqlalchemy import select, text
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from app.core.errors import StoreError
from app.core.logging import get_logger
from app.models.destination import Destination
from app.schemas.destination import DestinationData, StoredDestination, normalize_city

log = get_logger("destination_store")

T = TypeVar("T")

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class DestinationStore:
    """Reads and upserts destination rows keyed by normalized city.

    Every call opens its own session and runs in a worker thread, so the store
    is safe to share between concurrent requests.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    async def get(self, city: str) -> Optional[StoredDestination]:
        """Return the stored destination, or None when the city was never refreshed."""
        key = normalize_city(city)
        return await self._run(f"reading destination for city {key}", self._get, key)

    async def upsert(self, city: str, country: Optional[str], data: DestinationData) -> None:
        """Create or wholesale-replace the destination row for ``city``."""
        key = normalize_city(city)
        await self._run(f"upserting destination for city {key}", self._upsert, key, country, data)

    async def find_by_weather(self, description: str) -> List[StoredDestination]:
        """Destinations whose stored weather description matches exactly."""
        return await self._run(
            f"querying destinations by weather condition {description!r}",
            self._find_by_weather,
            description,
        )

    async def ping(self) -> None:
        await self._run("pinging database", self._ping)

    # -------------------------------------------------------------------------
    # Synchronous implementations (run in worker threads)
    # -------------------------------------------------------------------------
    async def _run(self, what: str, fn: Callable[..., T], *args) -> T:
        try:
            return await asyncio.to_thread(fn, *args)
        except SQLAlchemyError as exc:
            raise StoreError(f"{what}: {exc}") from exc

    def _get(self, key: str) -> Optional[StoredDestination]:
        with self.session_factory() as db:
            row = db.execute(select(Destination).where(Destination.city == key)).scalar_one_or_none()
            return self._to_stored(row) if row else None

    def _upsert(self, key: str, country: Optional[str], data: DestinationData) -> None:
        now = datetime.now(timezone.utc)
        with self.session_factory() as db:
            insert = self._insert_for(db)
            stmt = insert(Destination).values(
                city=key,
                country=(country or "").strip() or None,
                data=data.to_document(),
                fetched_at=now,
                updated_at=now,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=[Destination.city],
                set_={
                    "country": stmt.excluded.country,
                    "data": stmt.excluded.data,
                    "fetched_at": stmt.excluded.fetched_at,
                    "updated_at": stmt.excluded.updated_at,
                },
            )
            db.execute(stmt)
            db.commit()
        log.debug(f"Upserted destination {key}")

    def _find_by_weather(self, description: str) -> List[StoredDestination]:
        with self.session_factory() as db:
            stmt = (
                select(Destination)
                .where(Destination.data[("weather", "description")].as_string() == description)
                .order_by(Destination.city)
            )
            return [self._to_stored(row) for row in db.execute(stmt).scalars().all()]

    def _ping(self) -> None:
        with self.session_factory() as db:
            db.execute(text("SELECT 1"))

    @staticmethod
    def _insert_for(db: Session):
        dialect = db.get_bind().dialect.name
        try:
            return _INSERTS[dialect]
        except KeyError:
            raise StoreError(f"upsert not supported for dialect {dialect}") from None

    @staticmethod
    def _to_stored(row: Destination) -> StoredDestination:
        try:
            return StoredDestination.model_validate(row)
        except ValueError as exc:
            raise StoreError(f"decoding stored data for city {row.city}: {exc}") from exc
