"""Fitness plan generation endpoint."""

from __future__ import annotations

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter

from cyclefit.dependencies import AppConfig, AppSettings, Catalog
from cyclefit.fitness.plan_entry import summarize_plan
from cyclefit.fitness.preferences import resolve_plan_start
from cyclefit.fitness.scheduler import FitnessPlanScheduler
from cyclefit.models.fitness import FitnessPlanRequest, FitnessPlanResponse, PlanEntryRead
from cyclefit.services.generation import run_with_timeout

router = APIRouter(prefix="/fitness-plan", tags=["fitness"])
logger = logging.getLogger("cyclefit.routers.fitness_plan")


@router.post("", response_model=FitnessPlanResponse)
async def generate_fitness_plan(
    body: FitnessPlanRequest,
    config: AppConfig,
    catalog: Catalog,
    settings: AppSettings,
) -> Any:
    """Generate a 14-day plan.  ``start_date`` wins over ``plan_start_choice``."""
    start = body.start_date or resolve_plan_start(body.plan_start_choice, body.today or date.today())
    scheduler = FitnessPlanScheduler(config)
    entries = await run_with_timeout(
        scheduler.generate,
        body.profile.to_profile(),
        body.preferences.to_preferences(),
        start,
        catalog,
        timeout_seconds=settings.plan_generation_timeout_seconds,
    )
    logger.info("Generated %d-day fitness plan from %s", len(entries), start)
    return FitnessPlanResponse(
        start_date=start,
        entries=[PlanEntryRead.from_entry(entry) for entry in entries],
        summary=summarize_plan(entries),
    )
