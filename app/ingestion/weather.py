"""OpenWeatherMap source implementation."""

from __future__ import annotations

from typing import Any, Dict

from app.core.errors import SourceError
from app.core.logging import get_logger
from app.schemas.destination import WeatherData
from .base import BaseSource

log = get_logger("ingestion.weather")


class WeatherSource(BaseSource):
    """Fetches current weather conditions for a city."""

    name = "weather"
    field = "weather"

    async def fetch(self, subject: str) -> WeatherData:
        params: Dict[str, Any] = {"q": subject, "units": "metric"}
        if self.config.api_key:
            params["appid"] = self.config.api_key

        async with self._client() as client:
            data = await self._get_json(client, self.config.base_url, params)

        if not isinstance(data, dict):
            raise SourceError(self.name, "expected a JSON object")

        main = data.get("main") or {}
        conditions = data.get("weather") or []
        wind = data.get("wind") or {}

        weather = self._parse(
            WeatherData,
            {
                "temperature": main.get("temp", 0.0),
                "feels_like": main.get("feels_like", 0.0),
                "humidity": main.get("humidity", 0),
                "description": conditions[0].get("description", "") if conditions else "",
                "wind_speed": wind.get("speed", 0.0),
            },
        )
        log.debug(f"Fetched weather for {subject}: {weather.description}")
        return weather
