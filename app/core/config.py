from typing import Literal

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict


class SourceConfig(BaseModel):
    """Per-source connection settings injected into each ingestion client."""

    base_url: str
    api_key: str | None = None
    timeout_seconds: float = 10.0


class Settings(BaseSettings):
    # Environment mode: dev or prod
    ENV: Literal["dev", "prod"] = "dev"

    # Storage
    DATABASE_URL: str
    REDIS_URL: str = "redis://localhost:6379/0"

    # Auth for destination routes
    BEARER_TOKEN: str

    # API Keys
    OPENWEATHER_API_KEY: str | None = None
    OPENTRIPMAP_API_KEY: str | None = None

    # Upstream endpoints (override to point at test doubles)
    OPENWEATHER_URL: str = "https://api.openweathermap.org/data/2.5/weather"
    OPENTRIPMAP_GEO_URL: str = "https://api.opentripmap.com/0.1/en/places/geoname"
    OPENTRIPMAP_RADIUS_URL: str = "https://api.opentripmap.com/0.1/en/places/radius"
    RESTCOUNTRIES_URL: str = "https://restcountries.com/v3.1/name"
    TELEPORT_URL: str = "https://api.teleport.org/api/urban_areas"

    # Timeouts
    SOURCE_TIMEOUT_SECONDS: float = 10.0
    REFRESH_TIMEOUT_SECONDS: float = 30.0

    # Cache
    CACHE_TTL_SECONDS: int = 60 * 60  # 1 hour

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    LOG_JSON: bool = False  # serialize console output as JSON lines
    SLACK_WEBHOOK_URL: str | None = None

    # Docs Configuration
    DOCS_ENABLED: bool | None = None  # Override docs setting (None = auto based on ENV)

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",  # ignore unrelated keys in local .env
    )

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENV == "prod"

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENV == "dev"

    @property
    def debug_enabled(self) -> bool:
        """Debug mode is only enabled in development."""
        return self.is_development

    @property
    def docs_enabled(self) -> bool:
        """Swagger/ReDoc docs enabled based on environment or override."""
        if self.DOCS_ENABLED is not None:
            return self.DOCS_ENABLED
        return self.is_development

    @property
    def weather_source(self) -> SourceConfig:
        return SourceConfig(
            base_url=self.OPENWEATHER_URL,
            api_key=self.OPENWEATHER_API_KEY,
            timeout_seconds=self.SOURCE_TIMEOUT_SECONDS,
        )

    @property
    def poi_geo_source(self) -> SourceConfig:
        return SourceConfig(
            base_url=self.OPENTRIPMAP_GEO_URL,
            api_key=self.OPENTRIPMAP_API_KEY,
            timeout_seconds=self.SOURCE_TIMEOUT_SECONDS,
        )

    @property
    def poi_radius_source(self) -> SourceConfig:
        return SourceConfig(
            base_url=self.OPENTRIPMAP_RADIUS_URL,
            api_key=self.OPENTRIPMAP_API_KEY,
            timeout_seconds=self.SOURCE_TIMEOUT_SECONDS,
        )

    @property
    def countries_source(self) -> SourceConfig:
        return SourceConfig(base_url=self.RESTCOUNTRIES_URL, timeout_seconds=self.SOURCE_TIMEOUT_SECONDS)

    @property
    def quality_source(self) -> SourceConfig:
        return SourceConfig(base_url=self.TELEPORT_URL, timeout_seconds=self.SOURCE_TIMEOUT_SECONDS)


settings = Settings()
