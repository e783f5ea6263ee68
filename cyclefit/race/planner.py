"""Race training plan generator.

Builds a week-by-week plan from the training start to race day:

- ``total_weeks = max(1, days_between // 7)``
- each week gets a training phase from its elapsed fraction (week / total):
  base building, interval workouts, speed & strength, taper
- every 4th week is a down week with ~80% volume and a fixed easy pattern
- day types follow the requested run / cross-train / rest counts in order
- run distances scale from a base distance keyed by race type and runner level

Cycle awareness is advisory only: each day carries adaptation notes for the
cycle phase on that date, but the distances and durations never change.

Usage::

    planner = RaceTrainingPlanner()
    plan = planner.generate(
        race_type="10K",
        race_date=date(2026, 6, 7),
        training_start_date=date(2026, 3, 1),
        runner_level="Beginner",
        run_days=3, cross_train_days=2, rest_days=2,
        goal="Finish strong",
    )
    plan.total_weeks               # 14
    plan.weekly_plans[3].is_down_week   # True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum

from cyclefit.cycle.phase_calculator import CycleProfile, PhaseCalculator, as_day
from cyclefit.cycle.phases import CyclePhase
from cyclefit.engine.config_loader import PlanningConfig, RaceConfig, get_planning_config

logger = logging.getLogger("cyclefit.race.planner")


class TrainingPhase(str, Enum):
    BASE_BUILDING = "base_building"
    INTERVAL_WORKOUTS = "interval_workouts"
    SPEED_STRENGTH = "speed_strength"
    TAPER = "taper"

    @property
    def display_name(self) -> str:
        return _TRAINING_PHASE_TEXT[self][0]

    @property
    def description(self) -> str:
        return _TRAINING_PHASE_TEXT[self][1]


_TRAINING_PHASE_TEXT: dict[TrainingPhase, tuple[str, str]] = {
    TrainingPhase.BASE_BUILDING: (
        "Base Building", "Build aerobic base with easy runs and cross-training"
    ),
    TrainingPhase.INTERVAL_WORKOUTS: (
        "Interval Workouts", "Introduce speed work and tempo runs"
    ),
    TrainingPhase.SPEED_STRENGTH: (
        "Speed & Strength", "Focus on race pace and strength training"
    ),
    TrainingPhase.TAPER: ("Taper", "Reduce volume, maintain intensity for race day"),
}


class RaceWorkoutType(str, Enum):
    EASY_RUN = "easy_run"
    TEMPO_RUN = "tempo_run"
    INTERVAL_RUN = "interval_run"
    LONG_RUN = "long_run"
    CROSS_TRAINING = "cross_training"
    STRENGTH_TRAINING = "strength_training"
    REST = "rest"
    RECOVERY = "recovery"

    @property
    def is_run(self) -> bool:
        return self in _RUN_TYPES


_RUN_TYPES = frozenset({
    RaceWorkoutType.EASY_RUN,
    RaceWorkoutType.TEMPO_RUN,
    RaceWorkoutType.INTERVAL_RUN,
    RaceWorkoutType.LONG_RUN,
})


class WorkoutIntensity(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    HARD = "hard"
    VERY_HARD = "very_hard"


# Down weeks ignore the requested counts and use this fixed pattern
_DOWN_WEEK_PATTERN: tuple[RaceWorkoutType, ...] = (
    RaceWorkoutType.EASY_RUN,
    RaceWorkoutType.CROSS_TRAINING,
    RaceWorkoutType.EASY_RUN,
    RaceWorkoutType.CROSS_TRAINING,
    RaceWorkoutType.EASY_RUN,
    RaceWorkoutType.REST,
    RaceWorkoutType.RECOVERY,
)

_CYCLE_ADAPTATIONS: dict[CyclePhase, tuple[str, ...]] = {
    CyclePhase.MENSTRUAL: (
        "Reduce intensity by 10-20%",
        "Focus on gentle movement and recovery",
        "Increase hydration and iron-rich foods",
    ),
    CyclePhase.FOLLICULAR: (
        "Great time for high-intensity workouts",
        "Focus on building strength and speed",
        "Optimal time for new training challenges",
    ),
    CyclePhase.OVULATORY: (
        "Peak performance phase",
        "Ideal for race pace workouts",
        "Focus on technique and form",
    ),
    CyclePhase.LUTEAL: (
        "Focus on endurance and base building",
        "Increase recovery time between sessions",
    ),
}

_LATE_LUTEAL_ADAPTATIONS: tuple[str, ...] = (
    "Reduce intensity during the last days before your period",
    "Consider an easier session or extra rest if energy is low",
)


@dataclass(frozen=True)
class RaceWorkout:
    """Parameters of one training session.  Distances are in miles."""

    type: RaceWorkoutType
    intensity: WorkoutIntensity
    description: str
    distance_miles: float | None = None
    duration_minutes: int | None = None
    instructions: tuple[str, ...] = ()


@dataclass(frozen=True)
class DailyTrainingPlan:
    date: date
    workout_type: RaceWorkoutType
    workout: RaceWorkout
    cycle_phase: CyclePhase
    cycle_day: int | None = None
    is_late_luteal: bool = False
    cycle_adaptations: tuple[str, ...] = ()


@dataclass(frozen=True)
class WeeklyTrainingPlan:
    week_number: int
    phase: TrainingPhase
    is_down_week: bool
    start_date: date
    daily_plans: tuple[DailyTrainingPlan, ...]


@dataclass(frozen=True)
class RaceTrainingPlan:
    """A complete plan from training start to race day.

    Attributes:
        race_type:           "5K", "10K", "Half Marathon", "Marathon" or custom.
        race_date:           Race day.
        training_start_date: First day of week 1.
        total_weeks:         Number of weekly blocks (at least 1).
        runner_level:        Level used to pick the base distance.
        run_days:            Run days per normal week after clamping.
        cross_train_days:    Cross-training days per normal week after clamping.
        rest_days:           Rest days per normal week after clamping.
        goal:                Free-text race goal.
        weekly_plans:        One block per week.
        warnings:            Adjustments applied to the request.
    """

    race_type: str
    race_date: date
    training_start_date: date
    total_weeks: int
    runner_level: str
    run_days: int
    cross_train_days: int
    rest_days: int
    goal: str
    weekly_plans: tuple[WeeklyTrainingPlan, ...]
    warnings: tuple[str, ...] = field(default_factory=tuple)


def clamp_day_counts(run_days: int, cross_train_days: int, rest_days: int) -> tuple[int, int, int]:
    """Fit the requested counts into 7 days: runs first, then cross-training, then rest."""
    runs = max(0, min(7, run_days))
    cross = max(0, min(7 - runs, cross_train_days))
    rest = max(0, min(7 - runs - cross, rest_days))
    return runs, cross, rest


class RaceTrainingPlanner:
    """Generate structured race training plans.

    Stateless between calls.  The cycle profile is optional; without one the
    planner assumes a regular 28-day cycle starting on the training start date.
    """

    def __init__(
        self,
        config: PlanningConfig | None = None,
        calculator: PhaseCalculator | None = None,
    ) -> None:
        self._config = config or get_planning_config()
        self._calculator = calculator or PhaseCalculator(self._config)

    @property
    def _race_config(self) -> RaceConfig:
        return self._config.race

    def generate(
        self,
        race_type: str,
        race_date: date | datetime,
        training_start_date: date | datetime,
        runner_level: str,
        run_days: int,
        cross_train_days: int,
        rest_days: int,
        goal: str = "",
        profile: CycleProfile | None = None,
    ) -> RaceTrainingPlan:
        """Build the weekly training blocks for a race.

        Args:
            race_type:           Race distance name.
            race_date:           Race day.
            training_start_date: First training day.
            runner_level:        "Beginner", "Intermediate", ...
            run_days:            Requested run days per week.
            cross_train_days:    Requested cross-training days per week.
            rest_days:           Requested rest days per week.
            goal:                Free-text goal, carried through to the plan.
            profile:             Cycle profile for per-day phases.

        Returns:
            RaceTrainingPlan with ``total_weeks`` weekly blocks of 7 days.
        """
        start = as_day(training_start_date)
        race_day = as_day(race_date)
        total_weeks = max(1, (race_day - start).days // 7)
        warnings: list[str] = []

        runs, cross, rest = clamp_day_counts(run_days, cross_train_days, rest_days)
        if (runs, cross, rest) != (run_days, cross_train_days, rest_days):
            message = (
                f"Requested {run_days} run, {cross_train_days} cross-train and {rest_days} rest "
                f"days do not fit in a week; using {runs}/{cross}/{rest}"
            )
            logger.warning(message)
            warnings.append(message)

        if profile is None:
            profile = CycleProfile(
                cycle_length=self._config.cycle.default_cycle_length,
                period_length=self._config.cycle.default_period_length,
                last_cycle_start=start,
            )

        base = self._race_config.base_distance(race_type, runner_level)
        logger.info(
            "Generating %d-week %s plan (%s, base %.1f mi) from %s",
            total_weeks, race_type, runner_level, base, start,
        )

        rotation = 0
        weeks: list[WeeklyTrainingPlan] = []
        for week in range(1, total_weeks + 1):
            phase = self.training_phase(week, total_weeks)
            is_down = self.is_down_week(week)
            week_start = start + timedelta(weeks=week - 1)

            day_types = self.week_day_types(phase, is_down, runs, cross)
            daily: list[DailyTrainingPlan] = []
            for offset, workout_type in enumerate(day_types):
                day = week_start + timedelta(days=offset)
                workout = self._workout(workout_type, phase, is_down, base, rotation)
                if workout_type is RaceWorkoutType.CROSS_TRAINING:
                    rotation += 1
                daily.append(self._daily_plan(day, workout, profile))

            weeks.append(
                WeeklyTrainingPlan(
                    week_number=week,
                    phase=phase,
                    is_down_week=is_down,
                    start_date=week_start,
                    daily_plans=tuple(daily),
                )
            )

        return RaceTrainingPlan(
            race_type=race_type,
            race_date=race_day,
            training_start_date=start,
            total_weeks=total_weeks,
            runner_level=runner_level,
            run_days=runs,
            cross_train_days=cross,
            rest_days=rest,
            goal=goal,
            weekly_plans=tuple(weeks),
            warnings=tuple(warnings),
        )

    def training_phase(self, week: int, total_weeks: int) -> TrainingPhase:
        """Training phase for a 1-indexed week from its elapsed fraction."""
        thresholds = self._race_config.phase_thresholds
        fraction = week / total_weeks
        if fraction < thresholds["base_building"]:
            return TrainingPhase.BASE_BUILDING
        if fraction < thresholds["interval_workouts"]:
            return TrainingPhase.INTERVAL_WORKOUTS
        if fraction < thresholds["speed_strength"]:
            return TrainingPhase.SPEED_STRENGTH
        return TrainingPhase.TAPER

    def is_down_week(self, week: int) -> bool:
        return week % self._race_config.down_week_interval == 0

    def week_day_types(
        self,
        phase: TrainingPhase,
        is_down_week: bool,
        run_days: int,
        cross_train_days: int,
    ) -> list[RaceWorkoutType]:
        """Workout type for each of the 7 days of a week.

        Runs fill the first ``run_days`` days, cross-training the next
        ``cross_train_days`` and rest the remainder.  Run days are typed by
        training phase; in the speed & strength phase the first cross-training
        day becomes strength training.
        """
        if is_down_week:
            return list(_DOWN_WEEK_PATTERN)

        types: list[RaceWorkoutType] = []
        for day in range(7):
            if day < run_days:
                types.append(_run_type(phase, day, run_days))
            elif day < run_days + cross_train_days:
                types.append(RaceWorkoutType.CROSS_TRAINING)
            else:
                types.append(RaceWorkoutType.REST)

        if phase is TrainingPhase.SPEED_STRENGTH and cross_train_days > 0:
            types[run_days] = RaceWorkoutType.STRENGTH_TRAINING
        return types

    # ------------------------------------------------------------------
    # Workout parameters
    # ------------------------------------------------------------------

    def _run_distance(self, factor: float, phase: TrainingPhase, is_down: bool, base: float) -> float:
        cfg = self._race_config
        distance = base * factor * cfg.phase_volume_multipliers.get(phase.value, 1.0)
        if is_down:
            distance *= cfg.down_week_volume_factor
        return round(distance, 2)

    def _workout(
        self,
        workout_type: RaceWorkoutType,
        phase: TrainingPhase,
        is_down: bool,
        base: float,
        rotation: int,
    ) -> RaceWorkout:
        cfg = self._race_config
        volume = "down" if is_down else "normal"
        pace = cfg.minutes_per_mile

        if workout_type is RaceWorkoutType.EASY_RUN:
            distance = self._run_distance(1.0, phase, is_down, base)
            return RaceWorkout(
                type=workout_type,
                intensity=WorkoutIntensity.EASY,
                description="Easy pace run",
                distance_miles=distance,
                duration_minutes=int(distance * pace.get("easy_run", 10)),
                instructions=(
                    "Warm up with 5 minutes of easy jogging",
                    "Maintain conversational pace throughout",
                    "Cool down with 5 minutes of easy jogging",
                ),
            )

        if workout_type is RaceWorkoutType.TEMPO_RUN:
            distance = self._run_distance(cfg.tempo_run_factor, phase, is_down, base)
            return RaceWorkout(
                type=workout_type,
                intensity=WorkoutIntensity.HARD,
                description="Tempo pace run",
                distance_miles=distance,
                duration_minutes=int(distance * pace.get("tempo_run", 8)),
                instructions=(
                    "Warm up with 10 minutes of easy jogging",
                    "Run at comfortably hard pace (80-85% effort)",
                    "Cool down with 10 minutes of easy jogging",
                ),
            )

        if workout_type is RaceWorkoutType.LONG_RUN:
            distance = self._run_distance(cfg.long_run_factor, phase, is_down, base)
            return RaceWorkout(
                type=workout_type,
                intensity=WorkoutIntensity.EASY,
                description="Long endurance run",
                distance_miles=distance,
                duration_minutes=int(distance * pace.get("long_run", 10)),
                instructions=(
                    "Warm up with 10 minutes of easy jogging",
                    "Run at easy, conversational pace",
                    "Cool down with 10 minutes of easy jogging",
                ),
            )

        if workout_type is RaceWorkoutType.INTERVAL_RUN:
            reps = cfg.intervals.get(volume, 6)
            work = cfg.intervals.get("work_minutes", 3)
            rest = cfg.intervals.get("rest_minutes", 2)
            total = reps * work + (reps - 1) * rest + cfg.intervals.get("warmup_cooldown_minutes", 20)
            return RaceWorkout(
                type=workout_type,
                intensity=WorkoutIntensity.VERY_HARD,
                description="Interval training",
                duration_minutes=total,
                instructions=(
                    "Warm up with 10 minutes of easy jogging",
                    f"Run {reps} x {work} minutes at 5K pace",
                    f"Rest {rest} minutes between intervals",
                    "Cool down with 10 minutes of easy jogging",
                ),
            )

        if workout_type is RaceWorkoutType.CROSS_TRAINING:
            activities = cfg.cross_training_activities
            activity = activities[rotation % len(activities)]
            return RaceWorkout(
                type=workout_type,
                intensity=WorkoutIntensity.MODERATE,
                description=f"{activity} cross-training session",
                duration_minutes=cfg.cross_training_minutes.get(volume, 45),
                instructions=(
                    "Warm up with 5 minutes of easy movement",
                    "Maintain moderate intensity throughout",
                    "Cool down with 5 minutes of easy movement",
                ),
            )

        if workout_type is RaceWorkoutType.STRENGTH_TRAINING:
            return RaceWorkout(
                type=workout_type,
                intensity=WorkoutIntensity.MODERATE,
                description="Strength training session",
                duration_minutes=cfg.strength_training_minutes.get(volume, 30),
                instructions=(
                    "Warm up with 5 minutes of dynamic stretching",
                    "Focus on functional movements and core strength",
                    "Cool down with 5 minutes of stretching",
                ),
            )

        if workout_type is RaceWorkoutType.RECOVERY:
            return RaceWorkout(
                type=workout_type,
                intensity=WorkoutIntensity.EASY,
                description="Active recovery day",
                duration_minutes=cfg.recovery_minutes,
                instructions=(
                    "Light movement and stretching",
                    "Gentle yoga or walking if desired",
                ),
            )

        return RaceWorkout(
            type=RaceWorkoutType.REST,
            intensity=WorkoutIntensity.EASY,
            description="Complete rest day",
            instructions=(
                "Take a complete rest from exercise",
                "Focus on recovery and nutrition",
            ),
        )

    # ------------------------------------------------------------------
    # Cycle awareness
    # ------------------------------------------------------------------

    def _daily_plan(self, day: date, workout: RaceWorkout, profile: CycleProfile) -> DailyTrainingPlan:
        phase = self._calculator.phase_for_date(day, profile)
        cycle_day = self._calculator.cycle_day(day, profile)
        late_luteal = self.is_late_luteal(phase, cycle_day, profile)
        return DailyTrainingPlan(
            date=day,
            workout_type=workout.type,
            workout=workout,
            cycle_phase=phase,
            cycle_day=cycle_day,
            is_late_luteal=late_luteal,
            cycle_adaptations=cycle_adaptations(phase, late_luteal),
        )

    def is_late_luteal(self, phase: CyclePhase, cycle_day: int | None, profile: CycleProfile) -> bool:
        """Luteal and within the last ``late_luteal_days`` days of the cycle."""
        if phase is not CyclePhase.LUTEAL or cycle_day is None:
            return False
        length = self._calculator.cycle_length(profile)
        return cycle_day > length - self._race_config.late_luteal_days


def cycle_adaptations(phase: CyclePhase, late_luteal: bool = False) -> tuple[str, ...]:
    """Advisory notes for a training day in ``phase``."""
    notes = _CYCLE_ADAPTATIONS[phase.solar]
    if late_luteal:
        notes = notes + _LATE_LUTEAL_ADAPTATIONS
    return notes


def _run_type(phase: TrainingPhase, index: int, run_days: int) -> RaceWorkoutType:
    """Type of the ``index``-th run day of a normal week.

    The last run day is the long run (except in the taper); the first runs
    carry the phase's quality session.
    """
    is_last = index == run_days - 1 and run_days > 1
    if phase is TrainingPhase.TAPER:
        return RaceWorkoutType.INTERVAL_RUN if index == 0 and run_days > 1 else RaceWorkoutType.EASY_RUN
    if is_last:
        return RaceWorkoutType.LONG_RUN
    if phase is TrainingPhase.INTERVAL_WORKOUTS and index == 0:
        return RaceWorkoutType.INTERVAL_RUN
    if phase is TrainingPhase.SPEED_STRENGTH:
        if index == 0:
            return RaceWorkoutType.TEMPO_RUN
        if index == 1 and run_days > 2:
            return RaceWorkoutType.INTERVAL_RUN
    return RaceWorkoutType.EASY_RUN
