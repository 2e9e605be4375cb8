"""Source client tests against mock HTTP transports"""

import httpx
import pytest

from app.core.config import SourceConfig
from app.core.errors import SourceError
from app.ingestion.countries import CountriesSource
from app.ingestion.points_of_interest import PointsOfInterestSource
from app.ingestion.quality_scores import QualityScoreSource, city_slug
from app.ingestion.weather import WeatherSource


def config(url: str, api_key: str | None = "test-key") -> SourceConfig:
    return SourceConfig(base_url=url, api_key=api_key, timeout_seconds=5.0)


def json_transport(payload, status_code: int = 200, seen: list | None = None) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload)

    return httpx.MockTransport(handler)


def error_transport(status_code: int = 500) -> httpx.MockTransport:
    return httpx.MockTransport(lambda request: httpx.Response(status_code, text="internal error"))


WEATHER_PAYLOAD = {
    "main": {"temp": 22.5, "feels_like": 21.0, "humidity": 60},
    "weather": [{"description": "clear sky"}],
    "wind": {"speed": 3.5},
}

COUNTRIES_PAYLOAD = [
    {
        "capital": ["Paris"],
        "region": "Europe",
        "languages": {"fra": "French"},
        "currencies": {"EUR": {"name": "Euro"}},
    }
]

TELEPORT_PAYLOAD = {
    "categories": [
        {"name": "Housing", "score_out_of_10": 5.5},
        {"name": "Safety", "score_out_of_10": 6.0},
    ]
}


class TestWeatherSource:
    @pytest.mark.asyncio
    async def test_fetch(self):
        seen = []
        source = WeatherSource(config("http://owm.test/weather"), json_transport(WEATHER_PAYLOAD, seen=seen))

        weather = await source.fetch("Paris")

        assert weather.temperature == 22.5
        assert weather.humidity == 60
        assert weather.description == "clear sky"
        assert weather.wind_speed == 3.5
        params = seen[0].url.params
        assert params["q"] == "Paris"
        assert params["appid"] == "test-key"
        assert params["units"] == "metric"

    @pytest.mark.asyncio
    async def test_server_error(self):
        source = WeatherSource(config("http://owm.test/weather"), error_transport())
        with pytest.raises(SourceError):
            await source.fetch("Paris")

    @pytest.mark.asyncio
    async def test_malformed_payload(self):
        source = WeatherSource(config("http://owm.test/weather"), json_transport(["not", "an", "object"]))
        with pytest.raises(SourceError):
            await source.fetch("Paris")

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        source = WeatherSource(config("http://owm.test/weather"), httpx.MockTransport(handler))
        with pytest.raises(SourceError):
            await source.fetch("Paris")


class TestPointsOfInterestSource:
    @staticmethod
    def transport(seen: list) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            if request.url.path.endswith("/geoname"):
                return httpx.Response(200, json={"lat": 48.8566, "lon": 2.3522})
            return httpx.Response(
                200,
                json={
                    "features": [
                        {"properties": {"name": "Eiffel Tower", "kinds": "architecture", "rate": 7}},
                        {"properties": {"name": "", "kinds": "other", "rate": 1}},
                    ]
                },
            )

        return httpx.MockTransport(handler)

    @pytest.mark.asyncio
    async def test_fetch_geocodes_then_searches_radius(self):
        seen = []
        source = PointsOfInterestSource(
            config("http://otm.test/places/geoname"),
            config("http://otm.test/places/radius"),
            self.transport(seen),
        )

        points = await source.fetch("Paris")

        assert [p.name for p in points] == ["Eiffel Tower"]
        assert points[0].rate == 7
        radius_params = seen[1].url.params
        assert radius_params["lat"] == "48.8566"
        assert radius_params["limit"] == "5"
        assert radius_params["radius"] == "5000"
        assert radius_params["apikey"] == "test-key"

    @pytest.mark.asyncio
    async def test_geocode_failure(self):
        source = PointsOfInterestSource(
            config("http://otm.test/places/geoname"),
            config("http://otm.test/places/radius"),
            error_transport(),
        )
        with pytest.raises(SourceError):
            await source.fetch("Paris")

    @pytest.mark.asyncio
    async def test_missing_coordinates(self):
        source = PointsOfInterestSource(
            config("http://otm.test/places/geoname"),
            config("http://otm.test/places/radius"),
            json_transport({"error": "not found"}),
        )
        with pytest.raises(SourceError):
            await source.fetch("Atlantis")


class TestCountriesSource:
    @pytest.mark.asyncio
    async def test_fetch(self):
        seen = []
        source = CountriesSource(config("http://rc.test/v3.1/name", api_key=None), json_transport(COUNTRIES_PAYLOAD, seen=seen))

        country = await source.fetch("France")

        assert country.region == "Europe"
        assert country.capital == "Paris"
        assert country.currencies == {"EUR": "Euro"}
        assert country.languages == ["French"]
        assert seen[0].url.path == "/v3.1/name/France"
        assert seen[0].url.params["fullText"] == "true"

    @pytest.mark.asyncio
    async def test_empty_response(self):
        source = CountriesSource(config("http://rc.test/v3.1/name", api_key=None), json_transport([]))
        with pytest.raises(SourceError):
            await source.fetch("Nowhere")


class TestQualityScoreSource:
    def test_city_slug(self):
        assert city_slug("  San Francisco ") == "san-francisco"

    @pytest.mark.asyncio
    async def test_fetch(self):
        seen = []
        source = QualityScoreSource(config("http://teleport.test/api/urban_areas", api_key=None), json_transport(TELEPORT_PAYLOAD, seen=seen))

        scores = await source.fetch("New York")

        assert [s.name for s in scores] == ["Housing", "Safety"]
        assert scores[1].score_out_of_10 == 6.0
        assert seen[0].url.path == "/api/urban_areas/slug:new-york/scores/"

    @pytest.mark.asyncio
    async def test_not_found(self):
        source = QualityScoreSource(config("http://teleport.test/api/urban_areas", api_key=None), error_transport(404))
        with pytest.raises(SourceError):
            await source.fetch("Unknown")
