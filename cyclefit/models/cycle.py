"""Pydantic models for cycle phase and prediction requests."""

from __future__ import annotations

from datetime import date

from pydantic import Field

from cyclefit.cycle.phase_calculator import CycleMode, CycleProfile
from cyclefit.cycle.phases import CyclePhase
from cyclefit.models.base import CyclefitBase


# ---------- Cycle profile ----------

class CycleProfileSchema(CyclefitBase):
    """Stored cycle parameters.  Missing or non-positive lengths fall back to defaults."""

    cycle_length: int | None = Field(default=None, le=120)
    period_length: int | None = Field(default=None, le=30)
    last_cycle_start: date | None = None
    mode: CycleMode = CycleMode.REGULAR
    is_irregular: bool = False

    def to_profile(self) -> CycleProfile:
        return CycleProfile(
            cycle_length=self.cycle_length,
            period_length=self.period_length,
            last_cycle_start=self.last_cycle_start,
            mode=self.mode,
            is_irregular=self.is_irregular,
        )

    @classmethod
    def from_profile(cls, profile: CycleProfile) -> CycleProfileSchema:
        return cls.model_validate(profile)


# ---------- Phase for a date ----------

class PhaseRequest(CyclefitBase):
    profile: CycleProfileSchema
    date: date


class PhaseResponse(CyclefitBase):
    date: date
    phase: CyclePhase
    display_name: str
    description: str
    fitness_focus: str
    is_moon_based: bool
    cycle_day: int | None = None


# ---------- Predictions ----------

class PredictionRequest(CyclefitBase):
    profile: CycleProfileSchema
    today: date | None = None  # server date when omitted
    cycles_ahead: int = Field(default=3, ge=1, le=12)


class DailyPhaseRead(CyclefitBase):
    date: date
    phase: CyclePhase
    is_widening_window: bool


class PredictionResponse(CyclefitBase):
    model_used: str
    predicted_starts: list[date]
    predicted_ends: list[date]
    widening_window: list[date]
    daily_phase_table: list[DailyPhaseRead]
    warnings: list[str] = Field(default_factory=list)
