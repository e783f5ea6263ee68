"""Race training plan endpoint."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException

from cyclefit.dependencies import AppConfig, AppSettings
from cyclefit.models.race import RaceTrainingPlanResponse, RaceTrainingRequest
from cyclefit.race.planner import RaceTrainingPlanner
from cyclefit.services.generation import run_with_timeout

router = APIRouter(prefix="/race-training-plan", tags=["race"])


@router.post("", response_model=RaceTrainingPlanResponse)
async def generate_race_plan(body: RaceTrainingRequest, config: AppConfig, settings: AppSettings) -> Any:
    if body.race_date < body.training_start_date:
        raise HTTPException(status_code=422, detail="race_date must not be before training_start_date")

    planner = RaceTrainingPlanner(config)
    plan = await run_with_timeout(
        planner.generate,
        race_type=body.race_type,
        race_date=body.race_date,
        training_start_date=body.training_start_date,
        runner_level=body.runner_level,
        run_days=body.run_days,
        cross_train_days=body.cross_train_days,
        rest_days=body.rest_days,
        goal=body.goal,
        profile=body.profile.to_profile() if body.profile else None,
        timeout_seconds=settings.plan_generation_timeout_seconds,
    )
    return RaceTrainingPlanResponse.model_validate(plan)
