from app.api.routes.destinations import router as destinations_router
from app.api.routes.health import router as health_router

__all__ = ["destinations_router", "health_router"]
