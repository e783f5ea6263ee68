"""Health check endpoint."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from cyclefit.dependencies import AppConfig, AppSettings

router = APIRouter(tags=["system"])


@router.get("/health")
async def health_check(settings: AppSettings, config: AppConfig) -> dict:
    """Liveness probe. Returns 200 if the API process is up and the planning config loaded."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "planning_config": config.version,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
