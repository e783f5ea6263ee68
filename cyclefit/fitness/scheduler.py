"""Fitness plan scheduler: a 14-day, cycle-aware workout plan.

Day types come from ``allocate_day_types``; each workout day then gets one
catalog class chosen for the cycle phase on that date:

1. Candidates are the non-meditation classes for the phase (or "all").  An
   empty pool broadens to every workout class, then to the whole catalog.
2. Classes that conflict with an injury are dropped.  If nothing is left
   the day becomes a rest day.
3. Classes whose every tag is disliked are dropped unless that would empty
   the pool.
4. Classes already used this week (by name or variant group) are dropped
   unless that would empty the pool.
5. Until a favorite has been scheduled this week, favorite classes win.
6. The highest score wins; catalog order breaks ties.

Selection is deterministic: the same inputs and catalog order always give
the same plan.

Usage::

    scheduler = FitnessPlanScheduler()
    entries = scheduler.generate(profile, preferences, date(2026, 3, 2), load_catalog())
    len(entries)   # 14
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Sequence

from cyclefit.cycle.phase_calculator import CycleProfile, PhaseCalculator, as_day
from cyclefit.cycle.phases import CyclePhase
from cyclefit.engine.config_loader import PlanningConfig, SchedulerConfig, get_planning_config
from cyclefit.fitness.catalog import ALL_PHASES, WorkoutCatalogEntry
from cyclefit.fitness.day_allocation import allocate_day_types
from cyclefit.fitness.plan_entry import DayType, PlanEntry
from cyclefit.fitness.preferences import UserFitnessPreferences

logger = logging.getLogger("cyclefit.fitness.scheduler")


@dataclass
class _WeekState:
    """Per-week selection memory, reset at each week boundary."""

    used: set[str] = field(default_factory=set)
    favorite_used: bool = False


def _relax(candidates: list[WorkoutCatalogEntry], kept: list[WorkoutCatalogEntry]) -> list[WorkoutCatalogEntry]:
    return kept if kept else candidates


class FitnessPlanScheduler:
    """Generate the 14-day fitness plan.

    Stateless between calls; a single instance can serve concurrent requests.
    """

    def __init__(
        self,
        config: PlanningConfig | None = None,
        calculator: PhaseCalculator | None = None,
    ) -> None:
        self._config = config or get_planning_config()
        self._calculator = calculator or PhaseCalculator(self._config)

    @property
    def _scheduler_config(self) -> SchedulerConfig:
        return self._config.scheduler

    def generate(
        self,
        profile: CycleProfile,
        preferences: UserFitnessPreferences,
        start_date: date | datetime,
        catalog: Sequence[WorkoutCatalogEntry],
    ) -> list[PlanEntry]:
        """Build one PlanEntry per day of the horizon starting at ``start_date``.

        Args:
            profile:     The user's cycle profile.
            preferences: The user's fitness preferences.
            start_date:  First day of the plan (already resolved by the caller).
            catalog:     Ordered workout catalog; order breaks ties.

        Returns:
            Exactly ``horizon_days`` entries in ascending date order.
        """
        cfg = self._scheduler_config
        start = as_day(start_date)
        days = [start + timedelta(days=offset) for offset in range(cfg.horizon_days)]
        phases = [self._calculator.phase_for_date(day, profile) for day in days]

        pool = tuple(catalog) + tuple(cw.to_catalog_entry() for cw in preferences.custom_workouts)
        if not pool:
            logger.warning("Workout catalog is empty; generating an all-rest plan from %s", start)
            return [PlanEntry.rest(day, phase) for day, phase in zip(days, phases)]

        day_types = allocate_day_types(
            preferences.workout_frequency, preferences.preferred_rest_days, start, cfg
        )

        entries: list[PlanEntry] = []
        week = _WeekState()
        for offset, (day, phase, day_type) in enumerate(zip(days, phases, day_types)):
            if offset and offset % 7 == 0:
                week = _WeekState()

            if day_type is DayType.WORKOUT:
                entry = self._workout_entry(day, phase, pool, preferences, week)
            elif day_type is DayType.MEDITATION:
                entry = self._meditation_entry(day, phase, pool, preferences, week)
            else:
                entry = PlanEntry.rest(day, phase)

            logger.debug(
                "%s %-10s %-15s %s", day, entry.day_type.value, phase.value, entry.title
            )
            entries.append(entry)

        return entries

    # ------------------------------------------------------------------
    # Workout days
    # ------------------------------------------------------------------

    def _workout_entry(
        self,
        day: date,
        phase: CyclePhase,
        pool: tuple[WorkoutCatalogEntry, ...],
        preferences: UserFitnessPreferences,
        week: _WeekState,
    ) -> PlanEntry:
        choice = self.select_workout(phase, pool, preferences, week.used, week.favorite_used)
        if choice is None:
            logger.warning("No safe workout for %s (%s); scheduling rest", day, phase.value)
            return PlanEntry.rest(day, phase)

        week.used.add(choice.duplicate_key)
        if preferences.is_favorite(choice):
            week.favorite_used = True
        return PlanEntry.from_catalog(day, DayType.WORKOUT, choice, phase)

    def select_workout(
        self,
        phase: CyclePhase,
        pool: Sequence[WorkoutCatalogEntry],
        preferences: UserFitnessPreferences,
        used: set[str] | frozenset[str] = frozenset(),
        favorite_used: bool = False,
    ) -> WorkoutCatalogEntry | None:
        """Pick the class for one workout day, or None when nothing is safe."""
        workouts = [e for e in pool if not e.is_meditation] or list(pool)

        candidates = [e for e in workouts if e.applies_to(phase)]
        if not candidates:
            logger.debug("No %s classes in catalog; broadening to all workouts", phase.value)
            candidates = workouts

        candidates = [e for e in candidates if not self._restricted(e, preferences)]
        if not candidates:
            return None

        # Until the week has a favorite, favorites survive the dislike filter
        candidates = _relax(
            candidates,
            [
                e for e in candidates
                if not preferences.dislikes_all(e)
                or (not favorite_used and preferences.is_favorite(e))
            ],
        )

        fresh = [e for e in candidates if e.duplicate_key not in used]
        if not fresh:
            logger.debug("Every %s class already used this week; allowing a repeat", phase.value)
        candidates = _relax(candidates, fresh)

        if not favorite_used:
            candidates = _relax(candidates, [e for e in candidates if preferences.is_favorite(e)])

        # max() keeps the first of equal scores, so catalog order breaks ties
        return max(candidates, key=lambda e: self.score(e, phase, preferences))

    def score(
        self,
        entry: WorkoutCatalogEntry,
        phase: CyclePhase,
        preferences: UserFitnessPreferences,
    ) -> int:
        """Preference score of a workout class for a phase."""
        cfg = self._scheduler_config
        weights = cfg.score_weights

        score = weights.base
        if entry.intensity in phase.info.preferred_intensities:
            score += weights.phase_intensity
        score += weights.favorite * preferences.favorite_matches(entry)
        if preferences.fitness_goal and entry.has_tag(preferences.fitness_goal):
            score += weights.goal
        if preferences.fitness_level.suits_intensity(entry.intensity):
            score += weights.fitness_level
        if entry.duration_minutes <= cfg.short_duration_minutes:
            score += weights.short_duration
        for tag, bonus in cfg.phase_tag_bonuses.get(phase.solar.value, {}).items():
            if entry.has_tag(tag):
                score += bonus
        score += weights.disliked_tag * preferences.disliked_tag_count(entry)
        return score

    def _restricted(self, entry: WorkoutCatalogEntry, preferences: UserFitnessPreferences) -> bool:
        cfg = self._scheduler_config
        for injury in preferences.injuries:
            for movement in cfg.restricted_movements(injury.area):
                if entry.has_tag(movement):
                    return True
        return False

    # ------------------------------------------------------------------
    # Meditation days
    # ------------------------------------------------------------------

    def _meditation_entry(
        self,
        day: date,
        phase: CyclePhase,
        pool: tuple[WorkoutCatalogEntry, ...],
        preferences: UserFitnessPreferences,
        week: _WeekState,
    ) -> PlanEntry:
        choice = self.select_meditation(phase, pool, preferences, week.used)
        if choice is None:
            return PlanEntry.meditation_placeholder(day, phase)
        week.used.add(choice.duplicate_key)
        return PlanEntry.from_catalog(day, DayType.MEDITATION, choice, phase)

    def select_meditation(
        self,
        phase: CyclePhase,
        pool: Sequence[WorkoutCatalogEntry],
        preferences: UserFitnessPreferences,
        used: set[str] | frozenset[str] = frozenset(),
    ) -> WorkoutCatalogEntry | None:
        """Meditation for the phase, then for "all" phases, then any; None if the catalog has none."""
        meditations = [e for e in pool if e.is_meditation]
        if not meditations:
            return None

        candidates = (
            [e for e in meditations if e.is_phase_specific(phase)]
            or [e for e in meditations if ALL_PHASES in e.phases]
            or meditations
        )
        candidates = _relax(candidates, [e for e in candidates if not preferences.dislikes_all(e)])
        candidates = _relax(candidates, [e for e in candidates if e.duplicate_key not in used])
        return max(candidates, key=lambda e: self._meditation_score(e, phase, preferences))

    def _meditation_score(
        self,
        entry: WorkoutCatalogEntry,
        phase: CyclePhase,
        preferences: UserFitnessPreferences,
    ) -> int:
        weights = self._scheduler_config.score_weights
        score = weights.base
        if entry.is_phase_specific(phase):
            score += weights.phase_specific_meditation
        score += sum(
            1 for fav in preferences.favorite_workouts
            if "meditation" in fav.lower() or "yoga" in fav.lower()
        )
        return score
