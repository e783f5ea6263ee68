"""Day-type allocation for the fitness plan horizon.

Given a weekly workout frequency ``f`` the horizon (two weeks by default)
gets exactly ``2f`` workout days, one meditation day per week and rest days
for the remainder.  Placement runs in four passes:

1. The user's preferred rest weekdays become non-workout days first, one
   weekday (both of its occurrences) at a time, while the budget allows.
2. Remaining non-workout days go to the week with the most workout days,
   splitting that week's longest run of consecutive workouts at its middle.
   This keeps weeks balanced.
3. If that layout still has a streak longer than ``MAX_WORKOUT_STREAK``, every
   per-week placement of the pass 2 days is tried and the one closest to the
   balanced layout without such a streak wins.  The layout is kept when no
   placement avoids it (six workouts a week, or preferred rest days that
   leave no room).
4. In each week one non-workout day becomes the meditation day, preferring
   a day the user did not ask to rest on.

The result only depends on its arguments.
"""

from __future__ import annotations

import itertools
import logging
from datetime import date, timedelta

from cyclefit.engine.config_loader import SchedulerConfig, get_planning_config
from cyclefit.fitness.plan_entry import DayType

logger = logging.getLogger("cyclefit.fitness.day_allocation")

MAX_WORKOUT_STREAK = 2


def clamp_frequency(frequency: int, config: SchedulerConfig | None = None) -> int:
    """Clamp a weekly frequency to the configured [min, max] range."""
    cfg = config or get_planning_config().scheduler
    clamped = max(cfg.min_frequency, min(cfg.max_frequency, frequency))
    if clamped != frequency:
        logger.warning("Workout frequency %d clamped to %d", frequency, clamped)
    return clamped


def _run_around(workout: list[bool], position: int) -> tuple[int, int]:
    """(start, length) of the consecutive workout run containing ``position``."""
    start = position
    while start > 0 and workout[start - 1]:
        start -= 1
    end = position
    while end + 1 < len(workout) and workout[end + 1]:
        end += 1
    return start, end - start + 1


def _split_point(workout: list[bool], lo: int, hi: int) -> int | None:
    """Workout day in [lo, hi) best placed to break the longest workout run.

    Runs are measured across the whole horizon so streaks spanning a week
    boundary count in full.  Ties go to the position nearest the run's middle,
    then to the earliest position.
    """
    best: tuple[int, int] | None = None
    best_pos: int | None = None
    for pos in range(lo, hi):
        if not workout[pos]:
            continue
        start, length = _run_around(workout, pos)
        middle = start + length // 2
        key = (length, -abs(pos - middle))
        if best is None or key > best:
            best, best_pos = key, pos
    return best_pos


def longest_streak(workout: list[bool]) -> int:
    """Length of the longest run of consecutive workout days."""
    longest = current = 0
    for is_workout in workout:
        current = current + 1 if is_workout else 0
        longest = max(longest, current)
    return longest


def _spread_off_days(
    workout: list[bool], fixed_off: set[int], off_per_week: int, weeks: int
) -> list[bool] | None:
    """Re-place the non-fixed off days so no streak exceeds MAX_WORKOUT_STREAK.

    Each week keeps ``off_per_week`` off days and the ``fixed_off`` days stay
    put.  Among the layouts that qualify, the one moving the fewest off days
    away from ``workout`` wins; ties go to the earliest in enumeration order.
    Returns None when no layout qualifies.
    """
    current_off = {pos for pos, is_workout in enumerate(workout) if not is_workout}
    per_week = []
    for week in range(weeks):
        days = range(week * 7, week * 7 + 7)
        fixed = [pos for pos in days if pos in fixed_off]
        free = [pos for pos in days if pos not in fixed_off]
        per_week.append(itertools.combinations(free, off_per_week - len(fixed)))

    best: list[bool] | None = None
    best_moves = 0
    for choice in itertools.product(*per_week):
        off = fixed_off.union(*choice)
        layout = [pos not in off for pos in range(len(workout))]
        if longest_streak(layout) > MAX_WORKOUT_STREAK:
            continue
        moves = len(off - current_off)
        if best is None or moves < best_moves:
            best, best_moves = layout, moves
    return best


def allocate_day_types(
    frequency: int,
    preferred_rest_weekdays: tuple[int, ...] | list[int],
    start_date: date,
    config: SchedulerConfig | None = None,
) -> list[DayType]:
    """Assign a DayType to every day of the horizon starting at ``start_date``.

    Args:
        frequency:               Desired workouts per week (clamped to [1, 6]).
        preferred_rest_weekdays: Weekday numbers (Monday=0) the user prefers to rest.
        start_date:              First day of the horizon.
        config:                  Scheduler settings (shared config by default).

    Returns:
        One DayType per day, in date order.
    """
    cfg = config or get_planning_config().scheduler
    horizon = cfg.horizon_days
    weeks = cfg.weeks
    freq = clamp_frequency(frequency, cfg)

    off_per_week = 7 - freq
    budget = off_per_week * weeks
    workout = [True] * horizon

    def _week_off(week: int) -> int:
        return sum(1 for pos in range(week * 7, week * 7 + 7) if not workout[pos])

    # Pass 1: preferred rest weekdays, a whole weekday group at a time
    preferred = list(dict.fromkeys(preferred_rest_weekdays))
    fixed_off: set[int] = set()
    for weekday in preferred:
        group = [
            pos for pos in range(horizon)
            if (start_date + timedelta(days=pos)).weekday() == weekday and workout[pos]
        ]
        if not group or budget < len(group):
            continue
        if any(_week_off(pos // 7) >= off_per_week for pos in group):
            continue
        for pos in group:
            workout[pos] = False
        fixed_off.update(group)
        budget -= len(group)

    # Pass 2: balance the weeks, breaking up the longest workout streaks
    while budget > 0:
        week = max(range(weeks), key=lambda w: (7 - _week_off(w), -w))
        pos = _split_point(workout, week * 7, week * 7 + 7)
        if pos is None:
            break
        workout[pos] = False
        budget -= 1

    # Pass 3: re-place pass 2 days if a long streak survived
    if longest_streak(workout) > MAX_WORKOUT_STREAK:
        spread = _spread_off_days(workout, fixed_off, off_per_week, weeks)
        if spread is not None:
            workout = spread
        else:
            logger.debug("No layout at %d/week avoids a %d+ day streak", freq, MAX_WORKOUT_STREAK + 1)

    # Pass 4: one meditation per week on a non-preferred day where possible
    day_types = [DayType.WORKOUT if w else DayType.REST for w in workout]
    for week in range(weeks):
        off_days = [pos for pos in range(week * 7, week * 7 + 7) if not workout[pos]]
        free = [
            pos for pos in off_days
            if (start_date + timedelta(days=pos)).weekday() not in preferred
        ]
        for pos in (free + [p for p in off_days if p not in free])[: cfg.meditations_per_week]:
            day_types[pos] = DayType.MEDITATION

    logger.debug(
        "Allocated %s from %s at %d/week: %s",
        horizon, start_date, freq, "".join(t.value[0].upper() for t in day_types),
    )
    return day_types
