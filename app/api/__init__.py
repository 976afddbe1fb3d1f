from .endpoints.health_api import router as health_router
from .analytics import (
    jobs_analytics_router,
    interviews_analytics_router,
    networking_analytics_router,
)
__all__ = [
    "health_router",
    "jobs_analytics_router",
    "interviews_analytics_router",
    "networking_analytics_router",
]
