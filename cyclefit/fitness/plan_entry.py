"""Plan entries: the rows the fitness scheduler emits, one per calendar day."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from datetime import date
from enum import Enum

from cyclefit.cycle.phases import CyclePhase
from cyclefit.fitness.catalog import WorkoutCatalogEntry


class DayType(str, Enum):
    WORKOUT = "workout"
    MEDITATION = "meditation"
    REST = "rest"


class WorkoutStatus(str, Enum):
    """Lifecycle of a plan entry.  The scheduler only ever emits SUGGESTED."""

    SUGGESTED = "suggested"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    SKIPPED = "skipped"
    CONFIRMED = "confirmed"


class WorkoutType(str, Enum):
    YOGA = "yoga"
    STRENGTH = "strength"
    CARDIO = "cardio"
    PILATES = "pilates"
    DANCE = "dance"
    WALKING = "walking"
    STRETCHING = "stretching"
    MEDITATION = "meditation"
    HIIT = "hiit"
    BOXING = "boxing"
    REST = "rest"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


# Catalog type tag → workout type; unknown tags are cardio
_WORKOUT_TYPE_BY_TAG: dict[str, WorkoutType] = {
    "strength": WorkoutType.STRENGTH,
    "cardio": WorkoutType.CARDIO,
    "run": WorkoutType.CARDIO,
    "cycle": WorkoutType.CARDIO,
    "cycling": WorkoutType.CARDIO,
    "walk": WorkoutType.WALKING,
    "walking": WorkoutType.WALKING,
    "yoga": WorkoutType.YOGA,
    "pilates": WorkoutType.PILATES,
    "stretching": WorkoutType.STRETCHING,
    "meditation": WorkoutType.MEDITATION,
    "dance": WorkoutType.DANCE,
    "hiit": WorkoutType.HIIT,
    "boxing": WorkoutType.BOXING,
}

_DIFFICULTY_BY_INTENSITY: dict[str, Difficulty] = {
    "low": Difficulty.BEGINNER,
    "mid": Difficulty.INTERMEDIATE,
    "mid-high": Difficulty.INTERMEDIATE,
    "high": Difficulty.ADVANCED,
}


def workout_type_for(entry: WorkoutCatalogEntry) -> WorkoutType:
    """Workout type from the entry's first type tag."""
    if entry.is_meditation:
        return WorkoutType.MEDITATION
    if not entry.types:
        return WorkoutType.CARDIO
    return _WORKOUT_TYPE_BY_TAG.get(entry.types[0].strip().lower(), WorkoutType.CARDIO)


def difficulty_for(intensity: str) -> Difficulty:
    return _DIFFICULTY_BY_INTENSITY.get(intensity.strip().lower(), Difficulty.INTERMEDIATE)


@dataclass(frozen=True)
class PlanEntry:
    """One dated row of a fitness plan.

    Attributes:
        date:             Calendar day.
        day_type:         Workout, meditation or rest.
        title:            Class name, or a rest/meditation label.
        description:      Short text shown with the entry.
        duration_minutes: 0 for rest days.
        workout_type:     Category derived from the catalog type tags.
        phase:            Cycle phase on that date.
        difficulty:       Derived from the catalog intensity tier.
        instructor:       Class instructor, if any.
        equipment:        Required equipment.
        benefits:         Advertised benefits.
        status:           Lifecycle status; always SUGGESTED when generated.
        workout:          Source catalog entry; None for rest and placeholders.
    """

    date: date
    day_type: DayType
    title: str
    description: str
    duration_minutes: int
    workout_type: WorkoutType
    phase: CyclePhase
    difficulty: Difficulty
    instructor: str | None = None
    equipment: tuple[str, ...] = ()
    benefits: tuple[str, ...] = ()
    status: WorkoutStatus = WorkoutStatus.SUGGESTED
    workout: WorkoutCatalogEntry | None = None

    @classmethod
    def from_catalog(
        cls,
        day: date,
        day_type: DayType,
        entry: WorkoutCatalogEntry,
        phase: CyclePhase,
    ) -> PlanEntry:
        if entry.is_custom:
            description = f"Your custom {entry.types[0].lower()} workout"
        else:
            description = f"{phase.info.display_name} phase: {phase.info.description.lower()}"
        return cls(
            date=day,
            day_type=day_type,
            title=entry.name,
            description=description,
            duration_minutes=entry.duration_minutes,
            workout_type=workout_type_for(entry),
            phase=phase,
            difficulty=difficulty_for(entry.intensity),
            instructor=entry.instructor or None,
            equipment=entry.equipment,
            benefits=entry.benefits,
            workout=entry,
        )

    @classmethod
    def rest(cls, day: date, phase: CyclePhase) -> PlanEntry:
        return cls(
            date=day,
            day_type=DayType.REST,
            title="Rest Day",
            description="Scheduled rest day for recovery",
            duration_minutes=0,
            workout_type=WorkoutType.REST,
            phase=phase,
            difficulty=Difficulty.BEGINNER,
            benefits=("Recovery", "Rest", "Restoration"),
        )

    @classmethod
    def meditation_placeholder(cls, day: date, phase: CyclePhase) -> PlanEntry:
        return cls(
            date=day,
            day_type=DayType.MEDITATION,
            title="Guided Meditation",
            description="Take 10 minutes for a guided meditation",
            duration_minutes=10,
            workout_type=WorkoutType.MEDITATION,
            phase=phase,
            difficulty=Difficulty.BEGINNER,
            benefits=("Stress relief", "Focus"),
        )


def summarize_plan(entries: list[PlanEntry]) -> dict[DayType, int]:
    """Count entries per day type; every day type is present in the result."""
    counts = Counter(entry.day_type for entry in entries)
    return {day_type: counts.get(day_type, 0) for day_type in DayType}
