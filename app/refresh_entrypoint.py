"""Refresh entrypoint - Standalone script for refreshing a destination.

Usage:
    python -m app.refresh_entrypoint Paris               # Country defaults to the city
    python -m app.refresh_entrypoint Paris France
"""

import asyncio
import sys
from typing import Optional

from app.core.db import engine
from app.core.errors import CacheError, DependencyFailure
from app.core.logging import get_logger
from app.main import build_destination_service

logger = get_logger("refresh_entrypoint")


async def run_refresh(city: str, country: Optional[str] = None) -> dict:
    """Refresh one destination and return its aggregated document."""
    service = None
    try:
        service = await build_destination_service()
        data = await service.refresh_destination(city, country)
        return data.to_document()
    finally:
        if service is not None:
            await service.cache.client.aclose()
        engine.dispose()


def main(argv: Optional[list] = None) -> int:
    """Main entry point for a one-off refresh."""
    args = sys.argv[1:] if argv is None else argv
    if not args or len(args) > 2:
        logger.error("Usage: python -m app.refresh_entrypoint <city> [country]")
        return 1

    city = args[0]
    country = args[1] if len(args) > 1 else None
    logger.info(f"Refreshing destination {city} (country={country})")

    try:
        result = asyncio.run(run_refresh(city, country))
    except (CacheError, DependencyFailure) as exc:
        logger.error(f"Refresh failed for {city}: {exc}")
        return 1

    logger.info(f"Refresh completed for {city}: facts={sorted(result)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
