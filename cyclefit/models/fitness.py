"""Pydantic models for fitness plan generation."""

from __future__ import annotations

from datetime import date

from pydantic import Field, field_validator

from cyclefit.cycle.phases import CyclePhase
from cyclefit.fitness.plan_entry import DayType, Difficulty, PlanEntry, WorkoutStatus, WorkoutType
from cyclefit.fitness.preferences import (
    CustomWorkout,
    FitnessLevel,
    Injury,
    PlanStartChoice,
    UserFitnessPreferences,
    parse_weekday,
    parse_weekdays,
)
from cyclefit.models.base import CyclefitBase
from cyclefit.models.cycle import CycleProfileSchema


# ---------- Preferences ----------

class InjurySchema(CyclefitBase):
    area: str = Field(min_length=1)
    notes: str = ""


class CustomWorkoutSchema(CyclefitBase):
    name: str = Field(min_length=1, max_length=100)
    activity_type: str = Field(min_length=1, max_length=50)
    intensity: str = "mid"
    duration_minutes: int = Field(default=30, ge=1, le=300)


class FitnessPreferencesSchema(CyclefitBase):
    # At least one rest day per week is mandatory
    workout_frequency: int = Field(default=4, ge=1, le=6)
    favorite_workouts: list[str] = Field(default_factory=list)
    disliked_workouts: list[str] = Field(default_factory=list)
    preferred_rest_days: list[str] = Field(default_factory=list)  # weekday names
    injuries: list[InjurySchema] = Field(default_factory=list)
    custom_workouts: list[CustomWorkoutSchema] = Field(default_factory=list)
    fitness_level: FitnessLevel = FitnessLevel.BEGINNER
    fitness_goal: str | None = None

    @field_validator("preferred_rest_days")
    @classmethod
    def _known_weekdays(cls, value: list[str]) -> list[str]:
        unknown = [name for name in value if parse_weekday(name) is None]
        if unknown:
            raise ValueError(f"unknown weekday(s): {', '.join(unknown)}")
        return value

    def to_preferences(self) -> UserFitnessPreferences:
        return UserFitnessPreferences(
            workout_frequency=self.workout_frequency,
            favorite_workouts=tuple(self.favorite_workouts),
            disliked_workouts=tuple(self.disliked_workouts),
            preferred_rest_days=parse_weekdays(self.preferred_rest_days),
            injuries=tuple(Injury(area=i.area, notes=i.notes) for i in self.injuries),
            custom_workouts=tuple(
                CustomWorkout(
                    name=cw.name,
                    activity_type=cw.activity_type,
                    intensity=cw.intensity,
                    duration_minutes=cw.duration_minutes,
                )
                for cw in self.custom_workouts
            ),
            fitness_level=self.fitness_level,
            fitness_goal=self.fitness_goal,
        )


# ---------- Plan request / response ----------

class FitnessPlanRequest(CyclefitBase):
    profile: CycleProfileSchema
    preferences: FitnessPreferencesSchema = Field(default_factory=FitnessPreferencesSchema)
    start_date: date | None = None  # wins over plan_start_choice
    plan_start_choice: PlanStartChoice | None = None
    today: date | None = None  # server date when omitted


class PlanEntryRead(CyclefitBase):
    date: date
    day_type: DayType
    title: str
    description: str
    duration_minutes: int
    workout_type: WorkoutType
    phase: CyclePhase
    difficulty: Difficulty
    instructor: str | None = None
    equipment: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    status: WorkoutStatus
    catalog_id: str | None = None
    is_custom: bool = False

    @classmethod
    def from_entry(cls, entry: PlanEntry) -> PlanEntryRead:
        workout = entry.workout
        return cls(
            date=entry.date,
            day_type=entry.day_type,
            title=entry.title,
            description=entry.description,
            duration_minutes=entry.duration_minutes,
            workout_type=entry.workout_type,
            phase=entry.phase,
            difficulty=entry.difficulty,
            instructor=entry.instructor,
            equipment=list(entry.equipment),
            benefits=list(entry.benefits),
            status=entry.status,
            catalog_id=workout.entry_id if workout else None,
            is_custom=workout.is_custom if workout else False,
        )


class FitnessPlanResponse(CyclefitBase):
    start_date: date
    entries: list[PlanEntryRead]
    summary: dict[DayType, int]
