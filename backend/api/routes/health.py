"""
Health check endpoints.

Provides endpoints for monitoring application health and readiness.
"""

from fastapi import APIRouter, Response
from pydantic import BaseModel

from shared.config import get_settings
from shared.database import get_supabase_client

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    version: str


class ReadinessResponse(BaseModel):
    """Readiness check response model."""

    status: str
    storage: str
    database: str


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """
    Basic health check endpoint.

    Returns 200 if the API is running.
    """
    return HealthResponse(status="healthy", version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
async def readiness_check(response: Response) -> ReadinessResponse:
    """
    Readiness check endpoint.

    In-memory storage is always ready; Supabase storage must be configured.
    """
    settings = get_settings()
    if settings.storage_backend == "memory":
        return ReadinessResponse(status="ready", storage="memory", database="not_used")

    try:
        get_supabase_client()
    except RuntimeError:
        response.status_code = 503
        return ReadinessResponse(status="not_ready", storage="supabase", database="unconfigured")

    return ReadinessResponse(status="ready", storage="supabase", database="configured")
