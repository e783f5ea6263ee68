"""Cycle-aware fitness planning.

Modules:
    catalog: Workout catalog entries and the JSON catalog loader
    preferences: User fitness preferences and legacy string parsers
    plan_entry: PlanEntry rows, day types and statuses
    day_allocation: Workout / meditation / rest placement over the horizon
    scheduler: FitnessPlanScheduler
"""

from cyclefit.fitness.catalog import CatalogLoadError, WorkoutCatalogEntry, load_catalog
from cyclefit.fitness.day_allocation import allocate_day_types
from cyclefit.fitness.plan_entry import DayType, PlanEntry, WorkoutStatus, summarize_plan
from cyclefit.fitness.preferences import (
    CustomWorkout,
    FitnessLevel,
    Injury,
    PlanStartChoice,
    UserFitnessPreferences,
    resolve_plan_start,
)
from cyclefit.fitness.scheduler import FitnessPlanScheduler

__all__ = [
    "CatalogLoadError",
    "CustomWorkout",
    "DayType",
    "FitnessLevel",
    "FitnessPlanScheduler",
    "Injury",
    "PlanEntry",
    "PlanStartChoice",
    "UserFitnessPreferences",
    "WorkoutCatalogEntry",
    "WorkoutStatus",
    "allocate_day_types",
    "load_catalog",
    "resolve_plan_start",
    "summarize_plan",
]
