from pathlib import Path
from contextlib import asynccontextmanager

from alembic import command
from alembic.config import Config
from fastapi import FastAPI

from app.api.routes import destinations, health
from app.core.config import settings
from app.core.db import SessionLocal, engine
from app.core.logging import get_logger
from app.ingestion.runner import build_aggregator
from app.services.cache_service import DestinationCache, connect_redis
from app.services.destination_service import DestinationService
from app.services.destination_store import DestinationStore


log = get_logger("app")


def run_migrations() -> None:
    """Execute Alembic migrations programmatically on startup."""
    project_root = Path(__file__).resolve().parent.parent
    alembic_cfg = Config(str(project_root / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(project_root / "alembic"))
    alembic_cfg.set_main_option("sqlalchemy.url", settings.DATABASE_URL)
    log.info("Running Alembic migrations to head")
    command.upgrade(alembic_cfg, "head")
    log.info("Alembic migrations applied")


async def build_destination_service() -> DestinationService:
    """Connect Redis and wire store, cache and aggregator together."""
    redis_client = await connect_redis(settings.REDIS_URL)
    return DestinationService(
        store=DestinationStore(SessionLocal),
        cache=DestinationCache(redis_client, ttl_seconds=settings.CACHE_TTL_SECONDS),
        aggregator=build_aggregator(settings),
        refresh_timeout=settings.REFRESH_TIMEOUT_SECONDS,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info(f"Starting application in {settings.ENV.upper()} mode")

    # Startup
    try:
        run_migrations()
    except Exception:
        log.exception("Failed to apply migrations on startup")
        raise

    try:
        service = await build_destination_service()
    except Exception:
        log.exception("Failed to connect to Redis on startup")
        engine.dispose()
        raise
    app.state.destination_service = service
    log.info("Destination service ready")

    yield

    # Shutdown
    log.info("Shutting down services...")
    await service.cache.client.aclose()
    engine.dispose()
    log.info("Application shutdown complete")


app = FastAPI(
    title="Destination Aggregator",
    description="Aggregates travel destination data from weather, POI, country and quality-score APIs",
    version="1.0.0",
    lifespan=lifespan,
    # Disable docs in production for security
    docs_url="/docs" if settings.docs_enabled else None,
    redoc_url="/redoc" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.docs_enabled else None,
    debug=settings.debug_enabled,
)


app.include_router(health.router)
app.include_router(destinations.router)
