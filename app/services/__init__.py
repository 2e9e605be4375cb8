# Services package
from app.services.cache_service import DestinationCache, connect_redis
from app.services.destination_service import DestinationService
from app.services.destination_store import DestinationStore

__all__ = [
    "DestinationCache",
    "connect_redis",
    "DestinationService",
    "DestinationStore",
]
