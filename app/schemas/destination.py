"""Destination facts and the aggregate record shared by cache, store and API."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def normalize_city(city: str) -> str:
    """Canonical subject key: trimmed and case-insensitive."""
    key = (city or "").strip().lower()
    if not key:
        raise ValueError("city must not be empty")
    return key


class WeatherData(BaseModel):
    temperature: float = 0.0
    feels_like: float = 0.0
    humidity: int = 0
    description: str = ""
    wind_speed: float = 0.0


class PointOfInterest(BaseModel):
    name: str
    kinds: str = ""
    rate: int = 0


class CountryData(BaseModel):
    currencies: Dict[str, str] = Field(default_factory=dict)
    languages: List[str] = Field(default_factory=list)
    region: str = ""
    capital: str = ""


class QualityScore(BaseModel):
    name: str
    score_out_of_10: float = 0.0


class DestinationData(BaseModel):
    """Union of whatever facts were available for one destination.

    A missing fact is ``None`` and is left out of the serialized document, so
    a partial record is a normal, valid record.
    """

    weather: Optional[WeatherData] = None
    points_of_interest: Optional[List[PointOfInterest]] = None
    country: Optional[CountryData] = None
    quality_scores: Optional[List[QualityScore]] = None

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for name in type(self).model_fields)

    def present_facts(self) -> List[str]:
        return [name for name in type(self).model_fields if getattr(self, name) is not None]

    def to_document(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)

    def to_json(self) -> str:
        return self.model_dump_json(exclude_none=True)


class StoredDestination(BaseModel):
    """A destination row as read back from the store."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    city: str
    country: Optional[str] = None
    data: DestinationData
    fetched_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
