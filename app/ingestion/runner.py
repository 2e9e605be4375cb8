"""Concurrent fan-out over all destination sources."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import httpx
from pydantic import TypeAdapter, ValidationError

from app.core.config import Settings
from app.core.errors import AggregationError
from app.core.logging import get_logger
from app.schemas.destination import DestinationData
from .base import BaseSource
from .countries import CountriesSource
from .points_of_interest import PointsOfInterestSource
from .quality_scores import QualityScoreSource
from .weather import WeatherSource

log = get_logger("ingestion.runner")

# One validator per record field, so a malformed fact fails only its own source.
_FACT_ADAPTERS: Dict[str, TypeAdapter] = {
    name: TypeAdapter(info.annotation) for name, info in DestinationData.model_fields.items()
}


@dataclass
class SourceOutcome:
    name: str
    ok: bool
    error: Optional[str] = None


@dataclass
class AggregationResult:
    data: DestinationData
    outcomes: List[SourceOutcome] = field(default_factory=list)

    @property
    def failed(self) -> List[str]:
        return [o.name for o in self.outcomes if not o.ok]


class DestinationAggregator:
    """Runs every source concurrently and keeps whatever succeeded.

    A source failing, timing out or raising is never fatal: its fact is simply
    absent from the record. ``fetch_all`` raises ``AggregationError`` only when
    the coordination wrapper faults for every source, or when the record
    cannot be assembled.
    """

    def __init__(self, sources: List[BaseSource]):
        self.sources = sources

    async def fetch_all(self, city: str, country: Optional[str] = None, timeout: Optional[float] = None) -> DestinationData:
        result = await self.fetch_all_detailed(city, country, timeout=timeout)
        return result.data

    async def fetch_all_detailed(
        self,
        city: str,
        country: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> AggregationResult:
        city = city.strip()
        country = (country or city).strip()
        if not self.sources:
            return AggregationResult(data=DestinationData())

        tasks: Dict[str, asyncio.Task] = {}
        for source in self.sources:
            subject = country if source.subject == "country" else city
            tasks[source.name] = asyncio.create_task(
                self._run_source(source, subject),
                name=f"fetch:{source.name}",
            )

        try:
            _, pending = await asyncio.wait(tasks.values(), timeout=timeout)
        finally:
            # Caller cancellation or deadline: stop whatever is still in flight
            # and wait for it to unwind before leaving.
            unfinished = [task for task in tasks.values() if not task.done()]
            for task in unfinished:
                task.cancel()
            if unfinished:
                await asyncio.gather(*unfinished, return_exceptions=True)

        facts: Dict[str, Any] = {}
        outcomes: List[SourceOutcome] = []
        faults = 0

        for source in self.sources:
            task = tasks[source.name]
            if task in pending or task.cancelled():
                log.warning(f"{source.name} fetch for {city} cancelled at deadline ({timeout}s)")
                outcomes.append(SourceOutcome(source.name, ok=False, error="deadline exceeded"))
                continue

            exc = task.exception()
            if exc is not None:
                faults += 1
                log.error(f"{source.name} fetch coordination fault for {city}: {exc!r}")
                outcomes.append(SourceOutcome(source.name, ok=False, error=repr(exc)))
                continue

            outcome, fact = task.result()
            outcomes.append(outcome)
            if outcome.ok:
                facts[source.field] = fact

        if self.sources and faults == len(self.sources):
            raise AggregationError(f"every source task faulted while fetching destination data for {city}")

        try:
            data = DestinationData.model_validate(facts)
        except ValueError as exc:
            raise AggregationError(f"assembling destination data for {city}: {exc}") from exc

        failed = [o.name for o in outcomes if not o.ok]
        if failed:
            log.info(f"Aggregated {city} with partial data | present={data.present_facts()} failed={failed}")
        else:
            log.info(f"Aggregated {city} | present={data.present_facts()}")
        return AggregationResult(data=data, outcomes=outcomes)

    async def _run_source(self, source: BaseSource, subject: str) -> Tuple[SourceOutcome, Any]:
        try:
            fact = await asyncio.wait_for(source.fetch(subject), timeout=source.config.timeout_seconds)
        except asyncio.TimeoutError:
            log.warning(f"{source.name} fetch timed out for {subject} after {source.config.timeout_seconds}s")
            return SourceOutcome(source.name, ok=False, error="timeout"), None
        except Exception as exc:  # noqa: BLE001
            log.warning(f"{source.name} fetch failed for {subject}: {exc}")
            return SourceOutcome(source.name, ok=False, error=str(exc)), None

        try:
            fact = _FACT_ADAPTERS[source.field].validate_python(fact)
        except ValidationError as exc:
            log.warning(f"{source.name} returned a malformed fact for {subject}: {exc}")
            return SourceOutcome(source.name, ok=False, error=f"malformed fact: {exc}"), None
        return SourceOutcome(source.name, ok=True), fact


def build_aggregator(settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> DestinationAggregator:
    """Wire the four production sources from settings."""
    return DestinationAggregator(
        [
            WeatherSource(settings.weather_source, transport),
            PointsOfInterestSource(settings.poi_geo_source, settings.poi_radius_source, transport),
            CountriesSource(settings.countries_source, transport),
            QualityScoreSource(settings.quality_source, transport),
        ]
    )
