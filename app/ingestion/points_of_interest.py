"""OpenTripMap source implementation (geocode, then radius search)."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from app.core.config import SourceConfig
from app.core.errors import SourceError
from app.core.logging import get_logger
from app.schemas.destination import PointOfInterest
from .base import BaseSource

log = get_logger("ingestion.points_of_interest")

SEARCH_RADIUS_METERS = 5000
MAX_POINTS = 5


class PointsOfInterestSource(BaseSource):
    """Fetches the top points of interest around a city."""

    name = "points_of_interest"
    field = "points_of_interest"

    def __init__(
        self,
        geo_config: SourceConfig,
        radius_config: SourceConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(geo_config, transport)
        self.radius_config = radius_config

    async def fetch(self, subject: str) -> List[PointOfInterest]:
        async with self._client() as client:
            geo = await self._get_json(
                client,
                self.config.base_url,
                self._with_key({"name": subject}),
            )
            if not isinstance(geo, dict) or "lat" not in geo or "lon" not in geo:
                raise SourceError(self.name, f"no coordinates for {subject}")

            data = await self._get_json(
                client,
                self.radius_config.base_url,
                self._with_key(
                    {
                        "radius": SEARCH_RADIUS_METERS,
                        "lon": geo["lon"],
                        "lat": geo["lat"],
                        "limit": MAX_POINTS,
                        "format": "geojson",
                    }
                ),
            )

        if not isinstance(data, dict):
            raise SourceError(self.name, "expected a GeoJSON object")

        points: List[PointOfInterest] = []
        for feature in data.get("features") or []:
            props = feature.get("properties") or {}
            if not props.get("name"):
                continue
            points.append(
                self._parse(
                    PointOfInterest,
                    {
                        "name": props["name"],
                        "kinds": props.get("kinds", ""),
                        "rate": props.get("rate", 0),
                    },
                )
            )
        log.debug(f"Fetched {len(points)} points of interest for {subject}")
        return points

    def _with_key(self, params: Dict[str, Any]) -> Dict[str, Any]:
        if self.config.api_key:
            params["apikey"] = self.config.api_key
        return params
