"""Destination routes - cache-aside reads and on-demand refresh."""

import uuid
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.deps import get_destination_service, require_bearer_token
from app.core.errors import DependencyFailure, DestinationNotFound
from app.core.logging import get_logger
from app.schemas.api import DestinationListResponse, StoredDestinationOut
from app.schemas.destination import DestinationData
from app.services.destination_service import DestinationService

router = APIRouter(
    prefix="/api/v1/destinations",
    tags=["destinations"],
    dependencies=[Depends(require_bearer_token)],
)
log = get_logger("destination_routes")


def _require_city(city: str) -> None:
    if not city.strip():
        raise HTTPException(status_code=422, detail="city must not be empty")


@router.get("", response_model=DestinationListResponse, response_model_exclude_none=True)
async def find_destinations(
    weather: str = Query(..., min_length=1, description="Exact weather description, e.g. 'clear sky'"),
    service: DestinationService = Depends(get_destination_service),
):
    """List stored destinations whose current weather matches ``weather``."""
    try:
        results = await service.find_by_weather(weather)
    except DependencyFailure:
        raise HTTPException(status_code=500, detail="internal server error")

    return DestinationListResponse(
        request_id=str(uuid.uuid4()),
        count=len(results),
        data=[StoredDestinationOut.model_validate(r) for r in results],
    )


@router.get("/{city}", response_model=DestinationData, response_model_exclude_none=True)
async def get_destination(
    city: str,
    service: DestinationService = Depends(get_destination_service),
):
    """
    Get aggregated destination data.

    Cache hit returns immediately; otherwise the stored record is returned and
    re-cached. Returns 404 until the destination has been refreshed once.
    """
    _require_city(city)
    try:
        return await service.get_destination(city)
    except DestinationNotFound:
        raise HTTPException(status_code=404, detail=f"destination '{city}' not found - POST /refresh first")
    except DependencyFailure:
        raise HTTPException(status_code=500, detail="internal server error")


@router.post("/{city}/refresh", response_model=DestinationData, response_model_exclude_none=True)
async def refresh_destination(
    city: str,
    country: Optional[str] = Query(None, description="Country name (defaults to the city)"),
    service: DestinationService = Depends(get_destination_service),
):
    """
    Fetch fresh data from all sources, store it and repopulate the cache.

    Sources that fail are left out of the response; the refresh only fails
    when the data cannot be stored.
    """
    _require_city(city)
    log.info(f"Refresh triggered for {city} (country={country})")
    try:
        return await service.refresh_destination(city, country)
    except DependencyFailure as exc:
        log.error(f"Refresh failed for {city}: {exc}")
        raise HTTPException(status_code=500, detail="failed to refresh destination")
