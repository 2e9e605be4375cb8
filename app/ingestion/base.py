"""Abstract source interface for destination ingestion."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Literal, Optional

import httpx
from pydantic import BaseModel

from app.core.config import SourceConfig
from app.core.errors import SourceError


class BaseSource(ABC):
    """One upstream API producing exactly one fact of the aggregate record.

    ``fetch`` either returns the fact or raises; callers decide how to treat
    failures. ``field`` names the ``DestinationData`` attribute the fact fills,
    ``subject`` selects whether the city or the country is looked up.
    """

    name: str
    field: str
    subject: Literal["city", "country"] = "city"

    def __init__(self, config: SourceConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self.transport = transport

    @abstractmethod
    async def fetch(self, subject: str) -> Any:
        """Fetch and parse the fact for ``subject``."""

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.config.timeout_seconds, transport=self.transport)

    async def _get_json(self, client: httpx.AsyncClient, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        try:
            resp = await client.get(url, params=params)
        except httpx.HTTPError as exc:
            raise SourceError(self.name, f"GET {url} failed: {exc!r}") from exc

        if resp.status_code != httpx.codes.OK:
            raise SourceError(self.name, f"GET {url} returned status {resp.status_code}")

        try:
            return resp.json()
        except ValueError as exc:
            raise SourceError(self.name, f"decoding response from {url}: {exc}") from exc

    def _parse(self, model: type[BaseModel], payload: Any) -> Any:
        try:
            return model.model_validate(payload)
        except ValueError as exc:
            raise SourceError(self.name, f"malformed payload: {exc}") from exc
