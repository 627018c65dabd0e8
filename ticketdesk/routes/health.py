"""
Health check endpoints

Provides two endpoints:
- GET /api/health - Basic health check
- GET /api/health/config - Which collaborators are configured
"""
import time
from datetime import datetime
from typing import Dict
from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from ticketdesk.config import get_settings

router = APIRouter(prefix="/api/health", tags=["health"])

APP_VERSION = "1.0.0"

# Application start time for uptime calculation
APP_START_TIME = time.time()


class HealthResponse(BaseModel):
    """Basic health check response"""
    status: str = Field(..., description="Overall status: healthy, degraded")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Check timestamp")
    version: str = Field(..., description="Application version")
    uptime_seconds: float = Field(..., description="Application uptime in seconds")


class ConfigHealth(BaseModel):
    """Collaborator configuration status"""
    status: str
    configured: Dict[str, bool]


@router.get(
    "",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check"
)
async def basic_health_check() -> HealthResponse:
    """
    Basic health check endpoint

    Always returns 200 OK. Does not check external dependencies.
    """
    uptime = time.time() - APP_START_TIME

    return HealthResponse(
        status="healthy",
        timestamp=datetime.utcnow(),
        version=APP_VERSION,
        uptime_seconds=round(uptime, 2)
    )


@router.get(
    "/config",
    response_model=ConfigHealth,
    status_code=status.HTTP_200_OK,
    summary="Collaborator configuration check"
)
async def config_health_check() -> ConfigHealth:
    """Reports degraded when the store or the model is not configured"""
    settings = get_settings()
    configured = {
        "supabase": bool(settings.supabase_url and settings.SUPABASE_KEY),
        "openai_api": bool(settings.openai_api_key),
    }
    return ConfigHealth(
        status="healthy" if all(configured.values()) else "degraded",
        configured=configured
    )
