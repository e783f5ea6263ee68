"""Cyclefit API: FastAPI application entry point.

Run locally:
    uvicorn cyclefit.main:app --reload --port 8000
"""

from __future__ import annotations

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cyclefit.config import get_settings
from cyclefit.engine.config_loader import get_planning_config, reload_planning_config
from cyclefit.routers import cycle, fitness_plan, health, race_training

# ---------- Logging ----------

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stdout,
)
logger = logging.getLogger("cyclefit")


# ---------- Lifespan ----------

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup / shutdown hooks.  The planning config is validated before serving."""
    settings = get_settings()
    if settings.planning_config_path is not None:
        config = reload_planning_config(settings.planning_config_path)
    else:
        config = get_planning_config()
    logger.info(
        "Starting Cyclefit API v%s [%s], planning config v%s",
        settings.app_version,
        settings.environment,
        config.version,
    )
    yield
    logger.info("Cyclefit API shut down")


# ---------- App factory ----------

def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Cyclefit API",
        description=(
            "Cycle-phase calculation, cycle prediction and cycle-aware "
            "fitness and race training plans."
        ),
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- Health check (outside v1 prefix, always at /health) ----------
    app.include_router(health.router)

    # ---------- API v1 routes ----------
    v1_prefix = "/api/v1"

    app.include_router(cycle.router, prefix=v1_prefix)
    app.include_router(fitness_plan.router, prefix=v1_prefix)
    app.include_router(race_training.router, prefix=v1_prefix)

    return app


app = create_app()
