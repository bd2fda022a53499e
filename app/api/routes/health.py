from fastapi import APIRouter, Depends, status
from pydantic import BaseModel
from datetime import datetime, timezone
from app.config.settings import settings
from app.core.dependencies import get_generation_provider
from app.repositories.interfaces.generation_provider import IGenerationProvider

router = APIRouter(prefix="/health", tags=["health"])

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
    version: str
    environment: str


@router.get("/", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=VERSION,
        environment=settings.environment
    )


@router.get("/readiness")
async def readiness_check(provider: IGenerationProvider = Depends(get_generation_provider)):
    """Readiness check endpoint"""
    # A missing key does not block serving; upstream calls will fail with an auth error
    checks = {
        "gemini": "ok" if provider.is_configured() else "not_configured",
    }

    all_ok = all(status == "ok" for status in checks.values())

    return {
        "status": "ready" if all_ok else "not_ready",
        "checks": checks,
        "timestamp": datetime.now(timezone.utc)
    }
