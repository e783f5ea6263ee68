"""Tests for the 14-day fitness plan scheduler."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from cyclefit.cycle.phase_calculator import CycleProfile, PhaseCalculator
from cyclefit.cycle.phases import CyclePhase
from cyclefit.engine.config_loader import PlanningConfig
from cyclefit.fitness.catalog import WorkoutCatalogEntry, load_catalog
from cyclefit.fitness.plan_entry import DayType, WorkoutStatus, WorkoutType, summarize_plan
from cyclefit.fitness.preferences import CustomWorkout, Injury, UserFitnessPreferences
from cyclefit.fitness.scheduler import FitnessPlanScheduler

MONDAY = date(2026, 3, 2)


def entry(name: str, *types: str, phases=("follicular",), intensity="mid", minutes=30, group=None):
    return WorkoutCatalogEntry(
        name=name,
        phases=frozenset(phases),
        types=types or ("Cardio",),
        intensity=intensity,
        duration_minutes=minutes,
        variant_group=group,
    )


@pytest.fixture
def scheduler(planning_config: PlanningConfig, calculator: PhaseCalculator) -> FitnessPlanScheduler:
    return FitnessPlanScheduler(config=planning_config, calculator=calculator)


@pytest.fixture
def catalog() -> tuple[WorkoutCatalogEntry, ...]:
    return load_catalog()


# ---------------------------------------------------------------------------
# Plan structure
# ---------------------------------------------------------------------------


class TestPlanStructure:
    def test_fourteen_consecutive_suggested_entries(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile, catalog
    ) -> None:
        plan = scheduler.generate(regular_profile, UserFitnessPreferences(), MONDAY, catalog)
        assert len(plan) == 14
        assert [e.date for e in plan] == [MONDAY + timedelta(days=d) for d in range(14)]
        assert all(e.status is WorkoutStatus.SUGGESTED for e in plan)

    @pytest.mark.parametrize("frequency", [1, 2, 3, 4, 5, 6])
    def test_summary_counts(
        self,
        scheduler: FitnessPlanScheduler,
        regular_profile: CycleProfile,
        catalog,
        frequency: int,
    ) -> None:
        prefs = UserFitnessPreferences(workout_frequency=frequency)
        summary = summarize_plan(scheduler.generate(regular_profile, prefs, MONDAY, catalog))
        assert summary == {
            DayType.WORKOUT: 2 * frequency,
            DayType.MEDITATION: 2,
            DayType.REST: 12 - 2 * frequency,
        }

    def test_entry_phase_matches_calculator(
        self,
        scheduler: FitnessPlanScheduler,
        calculator: PhaseCalculator,
        regular_profile: CycleProfile,
        catalog,
    ) -> None:
        for e in scheduler.generate(regular_profile, UserFitnessPreferences(), MONDAY, catalog):
            assert e.phase is calculator.phase_for_date(e.date, regular_profile)

    def test_default_plan(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile, catalog
    ) -> None:
        """28/5 cycle starting Mar 1: menstrual to Mar 5, follicular to Mar 13, then ovulatory."""
        plan = scheduler.generate(regular_profile, UserFitnessPreferences(), MONDAY, catalog)
        assert [e.title for e in plan] == [
            "Gentle Walk & Stretch",
            "Menstrual Body Scan",
            "Mobility Reset",
            "Rest Day",
            "HIIT Cardio Blast",
            "Low Impact Cardio",
            "Rest Day",
            "HIIT Cardio Blast",
            "Follicular Focus Meditation",
            "Low Impact Cardio",
            "Rest Day",
            "Full Body Strength",
            "Rest Day",
            "Dance Cardio Express",
        ]
        assert plan[13].phase is CyclePhase.OVULATORY
        assert plan[3].duration_minutes == 0

    def test_no_repeats_within_a_week(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile, catalog
    ) -> None:
        prefs = UserFitnessPreferences(workout_frequency=6)
        plan = scheduler.generate(regular_profile, prefs, MONDAY, catalog)
        for week in (plan[:7], plan[7:]):
            keys = [e.workout.duplicate_key for e in week if e.workout is not None]
            assert len(keys) == len(set(keys))

    def test_deterministic(
        self,
        scheduler: FitnessPlanScheduler,
        planning_config: PlanningConfig,
        regular_profile: CycleProfile,
        catalog,
    ) -> None:
        prefs = UserFitnessPreferences(favorite_workouts=("Pilates",), preferred_rest_days=(6,))
        first = scheduler.generate(regular_profile, prefs, MONDAY, catalog)
        second = FitnessPlanScheduler(config=planning_config).generate(
            regular_profile, prefs, MONDAY, catalog
        )
        assert first == second


# ---------------------------------------------------------------------------
# Selection rules
# ---------------------------------------------------------------------------


class TestSelection:
    def test_favorite_scheduled_each_week(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile, catalog
    ) -> None:
        prefs = UserFitnessPreferences(favorite_workouts=("Yoga",))
        plan = scheduler.generate(regular_profile, prefs, MONDAY, catalog)
        assert plan[0].title == "Restorative Yoga"
        assert plan[7].title == "Vinyasa Flow"

    def test_variant_group_counts_as_one_class(
        self, scheduler: FitnessPlanScheduler
    ) -> None:
        """No cycle start on record, so every day is follicular."""
        dance_catalog = (
            entry("Dance Party", group="dance"),
            entry("Dance Express", group="dance"),
            entry("Other Class"),
        )
        prefs = UserFitnessPreferences(workout_frequency=3)
        plan = scheduler.generate(CycleProfile(), prefs, MONDAY, dance_catalog)
        week_one = [e.title for e in plan[:7] if e.day_type is DayType.WORKOUT]
        assert week_one == ["Dance Party", "Other Class", "Dance Party"]

    def test_single_class_catalog_repeats(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile
    ) -> None:
        only = (entry("Only Class", phases=("all",)),)
        plan = scheduler.generate(regular_profile, UserFitnessPreferences(), MONDAY, only)
        workouts = [e for e in plan if e.day_type is DayType.WORKOUT]
        assert len(workouts) == 8
        assert {e.title for e in workouts} == {"Only Class"}

    def test_knee_injury_excludes_jumping_and_running(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile, catalog
    ) -> None:
        prefs = UserFitnessPreferences(workout_frequency=6, injuries=(Injury(area="Knee"),))
        plan = scheduler.generate(regular_profile, prefs, MONDAY, catalog)
        titles = {e.title for e in plan}
        assert "HIIT Cardio Blast" not in titles
        assert "Tabata Sprint" not in titles
        assert summarize_plan(plan)[DayType.WORKOUT] == 12

    def test_injury_emptying_pool_schedules_rest(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile
    ) -> None:
        runs_only = (entry("Track Repeats", "Run", phases=("all",)),)
        prefs = UserFitnessPreferences(injuries=(Injury(area="ankle"),))
        plan = scheduler.generate(regular_profile, prefs, MONDAY, runs_only)
        assert summarize_plan(plan) == {
            DayType.WORKOUT: 0,
            DayType.MEDITATION: 2,
            DayType.REST: 12,
        }

    def test_disliked_tag_avoided(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile, catalog
    ) -> None:
        prefs = UserFitnessPreferences(disliked_workouts=("HIIT",))
        plan = scheduler.generate(regular_profile, prefs, MONDAY, catalog)
        assert not any(e.workout is not None and e.workout.has_tag("HIIT") for e in plan)

    def test_fully_disliked_class_used_when_nothing_else(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile
    ) -> None:
        only = (entry("Spin", "Cycling", phases=("all",)),)
        prefs = UserFitnessPreferences(disliked_workouts=("cycling",))
        plan = scheduler.generate(regular_profile, prefs, MONDAY, only)
        assert plan[0].title == "Spin"

    def test_disliked_favorite_still_scheduled_each_week(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile
    ) -> None:
        mixed = (
            entry("Strength Circuit", "Strength", phases=("all",)),
            entry("Cardio Mix", "Cardio", phases=("all",)),
            entry("Dance Night", "Dance", phases=("luteal",)),
        )
        prefs = UserFitnessPreferences(
            workout_frequency=6, favorite_workouts=("dance",), disliked_workouts=("dance",)
        )
        plan = scheduler.generate(regular_profile, prefs, date(2026, 3, 16), mixed)
        for week in (plan[:7], plan[7:]):
            assert [e.title for e in week].count("Dance Night") == 1


# ---------------------------------------------------------------------------
# Fallbacks
# ---------------------------------------------------------------------------


class TestFallbacks:
    def test_empty_catalog_gives_all_rest(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile
    ) -> None:
        plan = scheduler.generate(regular_profile, UserFitnessPreferences(), MONDAY, ())
        assert len(plan) == 14
        assert all(e.day_type is DayType.REST for e in plan)

    def test_custom_workout_fills_empty_catalog(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile
    ) -> None:
        prefs = UserFitnessPreferences(
            custom_workouts=(CustomWorkout(name="Trail Run", activity_type="Run"),)
        )
        plan = scheduler.generate(regular_profile, prefs, MONDAY, ())
        workouts = [e for e in plan if e.day_type is DayType.WORKOUT]
        assert len(workouts) == 8
        assert all(e.title == "Trail Run" and e.workout.is_custom for e in workouts)
        assert workouts[0].workout_type is WorkoutType.CARDIO
        assert workouts[0].description == "Your custom run workout"

    def test_meditation_placeholder_without_meditation_classes(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile
    ) -> None:
        plan = scheduler.generate(
            regular_profile, UserFitnessPreferences(), MONDAY, (entry("Any", phases=("all",)),)
        )
        meditations = [e for e in plan if e.day_type is DayType.MEDITATION]
        assert [e.title for e in meditations] == ["Guided Meditation", "Guided Meditation"]
        assert all(e.workout is None for e in meditations)

    def test_meditation_only_catalog_fills_workout_days(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile
    ) -> None:
        calm = (entry("Calm", "Meditation", phases=("all",), intensity="low", minutes=10),)
        plan = scheduler.generate(regular_profile, UserFitnessPreferences(), MONDAY, calm)
        assert {e.title for e in plan if e.day_type is not DayType.REST} == {"Calm"}

    def test_meditations_are_phase_specific(
        self, scheduler: FitnessPlanScheduler, regular_profile: CycleProfile, catalog
    ) -> None:
        plan = scheduler.generate(regular_profile, UserFitnessPreferences(), MONDAY, catalog)
        for e in plan:
            if e.day_type is DayType.MEDITATION:
                assert e.workout.is_phase_specific(e.phase)


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------


class TestScoring:
    def test_low_intensity_preferred_when_menstrual(
        self, scheduler: FitnessPlanScheduler
    ) -> None:
        prefs = UserFitnessPreferences()
        low = entry("Low", intensity="low", phases=("menstrual",))
        high = entry("High", intensity="high", phases=("menstrual",))
        assert scheduler.score(low, CyclePhase.MENSTRUAL, prefs) > scheduler.score(
            high, CyclePhase.MENSTRUAL, prefs
        )

    @pytest.mark.parametrize("phase", [CyclePhase.OVULATORY, CyclePhase.OVULATORY_MOON])
    def test_dance_bonus_during_ovulation(
        self, scheduler: FitnessPlanScheduler, phase: CyclePhase
    ) -> None:
        prefs = UserFitnessPreferences()
        dance = entry("Dance", "Dance", intensity="high")
        boxing = entry("Boxing", "Boxing", intensity="high")
        assert scheduler.score(dance, phase, prefs) - scheduler.score(boxing, phase, prefs) == 3
        assert scheduler.score(dance, CyclePhase.LUTEAL, prefs) == scheduler.score(
            boxing, CyclePhase.LUTEAL, prefs
        )

    def test_favorites_goal_and_dislikes(self, scheduler: FitnessPlanScheduler) -> None:
        plain = UserFitnessPreferences()
        strength = entry("Lift", "Strength", intensity="mid")
        base = scheduler.score(strength, CyclePhase.LUTEAL, plain)
        assert scheduler.score(
            strength, CyclePhase.LUTEAL, UserFitnessPreferences(favorite_workouts=("strength",))
        ) == base + 2
        assert scheduler.score(
            strength, CyclePhase.LUTEAL, UserFitnessPreferences(fitness_goal="Strength")
        ) == base + 1
        assert scheduler.score(
            strength, CyclePhase.LUTEAL, UserFitnessPreferences(disliked_workouts=("strength",))
        ) == base - 2
