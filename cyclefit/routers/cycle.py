"""Cycle phase and prediction endpoints."""

from __future__ import annotations

from datetime import date
from typing import Any

from fastapi import APIRouter

from cyclefit.cycle.phase_calculator import PhaseCalculator
from cyclefit.cycle.predictor import CyclePredictor
from cyclefit.dependencies import AppConfig, AppSettings
from cyclefit.models.cycle import PhaseRequest, PhaseResponse, PredictionRequest, PredictionResponse
from cyclefit.services.generation import run_with_timeout

router = APIRouter(prefix="/cycle", tags=["cycle"])


@router.post("/phase", response_model=PhaseResponse)
async def phase_for_date(body: PhaseRequest, config: AppConfig) -> Any:
    calculator = PhaseCalculator(config)
    profile = body.profile.to_profile()
    phase = calculator.phase_for_date(body.date, profile)
    return PhaseResponse(
        date=body.date,
        phase=phase,
        display_name=phase.info.display_name,
        description=phase.info.description,
        fitness_focus=phase.info.fitness_focus,
        is_moon_based=phase.is_moon_based,
        cycle_day=calculator.cycle_day(body.date, profile),
    )


@router.post("/predictions", response_model=PredictionResponse)
async def predict_cycles(body: PredictionRequest, config: AppConfig, settings: AppSettings) -> Any:
    predictor = CyclePredictor(config=config)
    prediction = await run_with_timeout(
        predictor.predict,
        body.profile.to_profile(),
        body.today or date.today(),
        body.cycles_ahead,
        timeout_seconds=settings.plan_generation_timeout_seconds,
    )
    return PredictionResponse.model_validate(prediction)
