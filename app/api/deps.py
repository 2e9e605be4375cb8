"""API dependencies"""

import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import settings
from app.services.destination_service import DestinationService

_bearer = HTTPBearer(auto_error=False)


def get_destination_service(request: Request) -> DestinationService:
    """Service wired by the application lifespan."""
    service = getattr(request.app.state, "destination_service", None)
    if service is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="service not initialized")
    return service


def require_bearer_token(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> None:
    """Reject requests without ``Authorization: Bearer <BEARER_TOKEN>``."""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
    if not secrets.compare_digest(credentials.credentials.encode(), settings.BEARER_TOKEN.encode()):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="unauthorized")
