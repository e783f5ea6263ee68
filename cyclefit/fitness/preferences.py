"""User fitness preferences as read by the scheduler.

Preferences arrive as structured snapshots; the scheduler never mutates them.
The ``parse_*`` helpers accept the legacy string encodings still found in
stored profiles ("4 days", "HIIT, Yoga", "Mon") so callers can migrate
records before building a ``UserFitnessPreferences``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum

from cyclefit.fitness.catalog import (
    ALL_PHASES,
    DEFAULT_DURATION_MINUTES,
    WorkoutCatalogEntry,
    tags_match,
)

_DIGITS = re.compile(r"\d+")

DEFAULT_FREQUENCY = 4

WEEKDAY_NAMES = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class FitnessLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

    def suits_intensity(self, intensity: str) -> bool:
        """Whether a catalog intensity tier is a good fit for this level."""
        if self is FitnessLevel.ADVANCED:
            return True
        if self is FitnessLevel.INTERMEDIATE:
            return intensity in {"low", "mid"}
        return intensity == "low"


class PlanStartChoice(str, Enum):
    TODAY = "today"
    TOMORROW = "tomorrow"


def resolve_plan_start(choice: PlanStartChoice | str | None, today: date) -> date:
    """Turn the user's start choice into the scheduler's start date."""
    if choice is None:
        return today
    if isinstance(choice, str) and not isinstance(choice, PlanStartChoice):
        choice = PlanStartChoice(choice.strip().lower())
    if choice is PlanStartChoice.TOMORROW:
        return today + timedelta(days=1)
    return today


@dataclass(frozen=True)
class Injury:
    """A past or current injury.  ``area`` keys the injury restriction table."""

    area: str
    notes: str = ""


@dataclass(frozen=True)
class CustomWorkout:
    """A user-defined workout that joins the candidate pool after the catalog."""

    name: str
    activity_type: str
    intensity: str = "mid"
    duration_minutes: int = DEFAULT_DURATION_MINUTES

    def to_catalog_entry(self) -> WorkoutCatalogEntry:
        return WorkoutCatalogEntry(
            name=self.name,
            phases=frozenset({ALL_PHASES}),
            types=(self.activity_type,),
            intensity=self.intensity.lower(),
            duration_minutes=self.duration_minutes,
            is_custom=True,
        )


@dataclass(frozen=True)
class UserFitnessPreferences:
    """Snapshot of the user's fitness preferences.

    Attributes:
        workout_frequency:   Desired workouts per week (1-6; the scheduler clamps).
        favorite_workouts:   Favorite workout-type tags.
        disliked_workouts:   Disliked workout-type tags.
        preferred_rest_days: Weekday numbers (Monday=0) the user prefers to rest.
        injuries:            Injuries used to filter unsafe classes.
        custom_workouts:     User-defined workouts.
        fitness_level:       Self-reported level; nudges intensity choice.
        fitness_goal:        Optional goal tag (e.g. "strength").
    """

    workout_frequency: int = DEFAULT_FREQUENCY
    favorite_workouts: tuple[str, ...] = ()
    disliked_workouts: tuple[str, ...] = ()
    preferred_rest_days: tuple[int, ...] = ()
    injuries: tuple[Injury, ...] = ()
    custom_workouts: tuple[CustomWorkout, ...] = field(default_factory=tuple)
    fitness_level: FitnessLevel = FitnessLevel.BEGINNER
    fitness_goal: str | None = None

    def favorite_matches(self, entry: WorkoutCatalogEntry) -> int:
        """Number of favorite tags matching the entry's types."""
        return sum(1 for fav in self.favorite_workouts if entry.has_tag(fav))

    def is_favorite(self, entry: WorkoutCatalogEntry) -> bool:
        return self.favorite_matches(entry) > 0

    def disliked_tag_count(self, entry: WorkoutCatalogEntry) -> int:
        """Number of the entry's type tags that match a disliked tag."""
        return sum(
            1 for tag in entry.types
            if any(tags_match(tag, disliked) for disliked in self.disliked_workouts)
        )

    def dislikes_all(self, entry: WorkoutCatalogEntry) -> bool:
        """True when every type tag of the entry is disliked."""
        if not entry.types or not self.disliked_workouts:
            return False
        return self.disliked_tag_count(entry) == len(entry.types)


def parse_frequency(value: str | int | None, default: int = DEFAULT_FREQUENCY) -> int:
    """Workouts per week from "4 days", "2-3 times" (largest number wins) or 4."""
    if isinstance(value, int):
        return value
    if not value:
        return default
    numbers = [int(n) for n in _DIGITS.findall(value)]
    return max(numbers) if numbers else default


def parse_comma_separated(value: str | None) -> tuple[str, ...]:
    """Split a comma-joined list, dropping blanks."""
    if not value:
        return ()
    return tuple(part.strip() for part in value.split(",") if part.strip())


def parse_weekday(name: str) -> int | None:
    """Weekday number (Monday=0) for "Mon", "monday", "TUE" ...; None if unknown."""
    key = name.strip().lower()
    if len(key) < 3:
        return None
    for index, weekday in enumerate(WEEKDAY_NAMES):
        if weekday.startswith(key):
            return index
    return None


def parse_weekdays(names: str | list[str] | tuple[str, ...] | None) -> tuple[int, ...]:
    """Weekday numbers from names or a comma-joined string; unknown names are dropped."""
    if isinstance(names, str):
        names = parse_comma_separated(names)
    result: list[int] = []
    for name in names or ():
        day = parse_weekday(name)
        if day is not None and day not in result:
            result.append(day)
    return tuple(result)


def parse_fitness_level(value: str | None) -> FitnessLevel:
    """Level from free text such as "Intermediate (1-2 years)"; beginner when unknown."""
    text = (value or "").lower()
    for level in FitnessLevel:
        if level.value in text:
            return level
    return FitnessLevel.BEGINNER
