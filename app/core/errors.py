"""Error taxonomy for the destination read/refresh paths.

Only ``DestinationNotFound`` and ``DependencyFailure`` ever reach the
transport layer. Source, cache and store errors are component-level and are
either absorbed or chained into a ``DependencyFailure`` by the service.
"""

from __future__ import annotations


class DestinationError(Exception):
    """Base class for errors surfaced by the destination service."""


class DestinationNotFound(DestinationError):
    """No stored destination exists for the requested city."""

    def __init__(self, city: str):
        super().__init__(f"destination '{city}' not found")
        self.city = city


class DependencyFailure(DestinationError):
    """The store or the aggregation coordination failed."""


class ReadFailure(DependencyFailure):
    pass


class RefreshFailure(DependencyFailure):
    pass


class SourceError(Exception):
    """A single upstream source could not produce its fact."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class AggregationError(Exception):
    """The aggregator's own coordination failed."""


class StoreError(Exception):
    pass


class CacheError(Exception):
    pass
