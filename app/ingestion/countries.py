"""RestCountries source implementation (no API key required)."""

from __future__ import annotations

from urllib.parse import quote

from app.core.errors import SourceError
from app.core.logging import get_logger
from app.schemas.destination import CountryData
from .base import BaseSource

log = get_logger("ingestion.countries")


class CountriesSource(BaseSource):
    """Fetches country metadata; looked up by country name, not city."""

    name = "countries"
    field = "country"
    subject = "country"

    async def fetch(self, subject: str) -> CountryData:
        url = f"{self.config.base_url.rstrip('/')}/{quote(subject)}"
        async with self._client() as client:
            data = await self._get_json(client, url, {"fullText": "true"})

        if not isinstance(data, list) or not data:
            raise SourceError(self.name, f"no results for {subject}")

        entry = data[0]
        currencies = {
            code: (cur or {}).get("name", "")
            for code, cur in (entry.get("currencies") or {}).items()
        }
        capitals = entry.get("capital") or []

        country = self._parse(
            CountryData,
            {
                "currencies": currencies,
                "languages": list((entry.get("languages") or {}).values()),
                "region": entry.get("region", ""),
                "capital": capitals[0] if capitals else "",
            },
        )
        log.debug(f"Fetched country info for {subject}: region={country.region}")
        return country
