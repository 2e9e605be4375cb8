from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict

from app.schemas.destination import DestinationData


class StoredDestinationOut(BaseModel):
    """Stored destination with identity and bookkeeping timestamps."""

    model_config = ConfigDict(from_attributes=True)

    city: str
    country: Optional[str] = None
    data: DestinationData
    fetched_at: Optional[datetime] = None
    updated_at: datetime


class DestinationListResponse(BaseModel):
    request_id: str
    count: int
    data: list[StoredDestinationOut]


class HealthResponse(BaseModel):
    status: str
    db: str
    redis: str
