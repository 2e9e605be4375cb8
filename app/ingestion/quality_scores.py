"""Teleport urban quality scores source (no API key required)."""

from __future__ import annotations

from typing import List

from app.core.errors import SourceError
from app.core.logging import get_logger
from app.schemas.destination import QualityScore
from .base import BaseSource

log = get_logger("ingestion.quality_scores")


def city_slug(city: str) -> str:
    """Teleport slug: lowercase, spaces replaced by hyphens."""
    return city.strip().replace(" ", "-").lower()


class QualityScoreSource(BaseSource):
    """Fetches urban quality-of-life scores for a city."""

    name = "quality_scores"
    field = "quality_scores"

    async def fetch(self, subject: str) -> List[QualityScore]:
        url = f"{self.config.base_url.rstrip('/')}/slug:{city_slug(subject)}/scores/"
        async with self._client() as client:
            data = await self._get_json(client, url)

        if not isinstance(data, dict):
            raise SourceError(self.name, "expected a JSON object")

        scores = [
            self._parse(
                QualityScore,
                {"name": cat.get("name", ""), "score_out_of_10": cat.get("score_out_of_10", 0.0)},
            )
            for cat in data.get("categories") or []
        ]
        log.debug(f"Fetched {len(scores)} quality scores for {subject}")
        return scores
