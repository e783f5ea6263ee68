"""Pydantic models for race training plans."""

from __future__ import annotations

from datetime import date

from pydantic import Field

from cyclefit.cycle.phases import CyclePhase
from cyclefit.models.base import CyclefitBase
from cyclefit.models.cycle import CycleProfileSchema
from cyclefit.race.planner import RaceWorkoutType, TrainingPhase, WorkoutIntensity


class RaceTrainingRequest(CyclefitBase):
    race_type: str = Field(min_length=1, max_length=50)  # 5K | 10K | Half Marathon | Marathon
    race_date: date
    training_start_date: date
    runner_level: str = "Beginner"
    run_days: int = Field(default=3, ge=0, le=7)
    cross_train_days: int = Field(default=2, ge=0, le=7)
    rest_days: int = Field(default=2, ge=0, le=7)
    goal: str = ""
    profile: CycleProfileSchema | None = None


class RaceWorkoutRead(CyclefitBase):
    type: RaceWorkoutType
    intensity: WorkoutIntensity
    description: str
    distance_miles: float | None = None
    duration_minutes: int | None = None
    instructions: list[str] = Field(default_factory=list)


class DailyTrainingPlanRead(CyclefitBase):
    date: date
    workout_type: RaceWorkoutType
    workout: RaceWorkoutRead
    cycle_phase: CyclePhase
    cycle_day: int | None = None
    is_late_luteal: bool = False
    cycle_adaptations: list[str] = Field(default_factory=list)


class WeeklyTrainingPlanRead(CyclefitBase):
    week_number: int
    phase: TrainingPhase
    is_down_week: bool
    start_date: date
    daily_plans: list[DailyTrainingPlanRead]


class RaceTrainingPlanResponse(CyclefitBase):
    race_type: str
    race_date: date
    training_start_date: date
    total_weeks: int
    runner_level: str
    run_days: int
    cross_train_days: int
    rest_days: int
    goal: str
    weekly_plans: list[WeeklyTrainingPlanRead]
    warnings: list[str] = Field(default_factory=list)
