from .jobs import router as jobs_analytics_router
from .interviews import router as interviews_analytics_router
from .networking import router as networking_analytics_router

__all__ = [
    "jobs_analytics_router",
    "interviews_analytics_router",
    "networking_analytics_router",
]
