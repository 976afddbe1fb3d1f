"""
Job Search Analytics Main Application

FastAPI application serving job-search, interview and networking analytics reports.
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from app.api import (
    health_router,
    jobs_analytics_router,
    interviews_analytics_router,
    networking_analytics_router,
)
from app.core import settings
from app.schemas.analytics import ResponseEnvelope

logger = logging.getLogger("app_logger")

app = FastAPI(
    title=settings.APP_NAME,
    description="Funnels, rates, cohorts, trends and recommendations over tracked job-search records",
    version="1.0.0",
    docs_url="/analytics/api/docs",
    redoc_url="/redoc"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=ResponseEnvelope(success=False, message=message).model_dump(),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"[API] Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=ResponseEnvelope(success=False, message="Internal server error").model_dump(),
    )


# Include API routers
app.include_router(health_router)
app.include_router(jobs_analytics_router)
app.include_router(interviews_analytics_router)
app.include_router(networking_analytics_router)
