"""Health routes - database and cache connectivity checks."""

import asyncio

from fastapi import APIRouter, Depends, Response

from app.api.deps import get_destination_service
from app.core.logging import get_logger
from app.schemas.api import HealthResponse
from app.services.destination_service import DestinationService

router = APIRouter(prefix="/api/v1/health", tags=["health"])
log = get_logger("health_routes")

PING_TIMEOUT_SECONDS = 3.0


async def _check(name: str, ping) -> str:
    try:
        await asyncio.wait_for(ping(), timeout=PING_TIMEOUT_SECONDS)
        return "ok"
    except Exception as exc:  # noqa: BLE001
        log.error(f"Health check: {name} ping failed: {exc}")
        return "error"


@router.get("", response_model=HealthResponse)
async def health(response: Response, service: DestinationService = Depends(get_destination_service)):
    """
    Health check endpoint for load balancer and Docker health checks.

    Pings the database and Redis. Returns 503 if either is unreachable.
    """
    db_status = await _check("db", service.store.ping)
    redis_status = await _check("redis", service.cache.ping)

    healthy = db_status == "ok" and redis_status == "ok"
    if not healthy:
        response.status_code = 503

    return HealthResponse(
        status="ok" if healthy else "degraded",
        db=db_status,
        redis=redis_status,
    )
