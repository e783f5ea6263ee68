"""Forward cycle predictions and the rolling day-by-day phase table.

For calendar (solar) profiles the next starts are simply
``last_cycle_start + k * cycle_length`` for k = 1..N, each paired with an end
``period_length`` days later.  Irregular profiles also get a widening window:
every date within ±4 days of a predicted start is marked as uncertain.  The
window is advisory only and never changes the phase of a date.

Lunar profiles predict the next N new moons instead and have no widening
window.

``today`` is always passed in by the caller; nothing here reads the clock.
"""

from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from cyclefit.cycle.lunar import upcoming_new_moons
from cyclefit.cycle.phase_calculator import CycleProfile, PhaseCalculator, as_day
from cyclefit.cycle.phases import CyclePhase
from cyclefit.engine.config_loader import PlanningConfig, get_planning_config

logger = logging.getLogger("cyclefit.cycle.predictor")


@dataclass(frozen=True)
class DailyPhase:
    """One row of the daily phase table."""

    date: date
    phase: CyclePhase
    is_widening_window: bool = False


@dataclass(frozen=True)
class CyclePrediction:
    """Prediction for the user's upcoming cycles.

    Attributes:
        predicted_starts:  Next cycle start dates, strictly increasing.
        predicted_ends:    End of the period (or symptoms) for each start.
        widening_window:   Sorted uncertainty dates; empty unless irregular.
        daily_phase_table: One row per day from ``today`` for the horizon.
        model_used:        'calendar' or 'lunar'.
        warnings:          Fallbacks applied while predicting.
    """

    predicted_starts: tuple[date, ...]
    predicted_ends: tuple[date, ...]
    widening_window: tuple[date, ...]
    daily_phase_table: tuple[DailyPhase, ...]
    model_used: str = "calendar"
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def cycle_windows(self) -> list[tuple[date, date]]:
        return list(zip(self.predicted_starts, self.predicted_ends))


def add_months(day: date, months: int) -> date:
    """Add calendar months, clamping to the last day of shorter months."""
    month_index = day.month - 1 + months
    year = day.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


class CyclePredictor:
    """Predict upcoming cycles and build the rolling phase table.

    Pure apart from a single-entry cache of the last prediction, so repeated
    same-day queries for the same profile skip recomputing ~90 phases.

    Usage::

        predictor = CyclePredictor()
        prediction = predictor.predict(profile, today=date(2026, 3, 10))
        prediction.predicted_starts      # 3 dates, cycle_length apart
        prediction.daily_phase_table[0]  # DailyPhase for today
    """

    def __init__(
        self,
        calculator: PhaseCalculator | None = None,
        config: PlanningConfig | None = None,
    ) -> None:
        self._config = config or get_planning_config()
        self._calculator = calculator or PhaseCalculator(self._config)
        self._cache: tuple[tuple, CyclePrediction] | None = None

    @property
    def calculator(self) -> PhaseCalculator:
        return self._calculator

    def predict(
        self,
        profile: CycleProfile,
        today: date | datetime,
        cycles_ahead: int | None = None,
    ) -> CyclePrediction:
        """Predict the next cycles and the daily phase table.

        Args:
            profile:      The user's cycle profile.
            today:        Reference date; the table starts here.
            cycles_ahead: Number of cycles to predict (config default: 3).

        Returns:
            CyclePrediction.
        """
        cfg = self._config.cycle
        count = cycles_ahead if cycles_ahead is not None else cfg.predicted_cycles
        today = as_day(today)

        key = (profile, today, count)
        if self._cache is not None and self._cache[0] == key:
            return self._cache[1]

        warnings: list[str] = []

        if profile.is_lunar:
            starts = self._lunar_starts(today, count, warnings)
            period = cfg.lunar.period_length
            widening: set[date] = set()
            model = "lunar"
        else:
            starts = self.predicted_starts(profile, today, count, warnings)
            period = self._calculator.period_length(profile)
            widening = self.widening_window(profile, starts)
            model = "calendar"

            boundary = self._calculator.boundaries(profile, cycle_start=profile.last_cycle_start or today)
            if boundary.is_degenerate:
                warnings.append(
                    f"Cycle length {boundary.cycle_length} is too short for a "
                    f"{boundary.period_length}-day period; follicular phase collapses"
                )

        ends = [start + timedelta(days=period) for start in starts]
        table = self.phase_table(profile, today, widening)

        prediction = CyclePrediction(
            predicted_starts=tuple(starts),
            predicted_ends=tuple(ends),
            widening_window=tuple(sorted(widening)),
            daily_phase_table=tuple(table),
            model_used=model,
            warnings=tuple(warnings),
        )
        logger.debug(
            "Predicted %d %s cycle(s) from %s: starts=%s widening=%d days",
            len(starts), model, today, [s.isoformat() for s in starts], len(widening),
        )
        self._cache = (key, prediction)
        return prediction

    def predicted_starts(
        self,
        profile: CycleProfile,
        today: date,
        count: int,
        warnings: list[str] | None = None,
    ) -> list[date]:
        """Next ``count`` cycle starts, ``cycle_length`` days apart.

        Profiles without a last start are anchored on ``today``.
        """
        length = self._calculator.cycle_length(profile)
        anchor = profile.last_cycle_start
        if anchor is None:
            anchor = today
            message = "No last cycle start on record; predictions anchored on today"
            logger.warning(message)
            if warnings is not None:
                warnings.append(message)
        anchor = as_day(anchor)
        return [anchor + timedelta(days=length * k) for k in range(1, count + 1)]

    def widening_window(self, profile: CycleProfile, starts: list[date]) -> set[date]:
        """Dates within the widening radius of any predicted start.

        Empty unless the profile is irregular and has a cycle start on record.
        """
        if not profile.irregular or profile.last_cycle_start is None:
            return set()
        radius = self._config.cycle.widening_window_radius_days
        return {
            start + timedelta(days=offset)
            for start in starts
            for offset in range(-radius, radius + 1)
        }

    def phase_table(
        self,
        profile: CycleProfile,
        today: date,
        widening: set[date] | None = None,
        months: int | None = None,
    ) -> list[DailyPhase]:
        """One DailyPhase per day from ``today`` up to (not including) today + months."""
        horizon = months if months is not None else self._config.cycle.prediction_horizon_months
        end = add_months(today, horizon)
        widening = widening or set()

        rows: list[DailyPhase] = []
        current = today
        while current < end:
            rows.append(
                DailyPhase(
                    date=current,
                    phase=self._calculator.phase_for_date(current, profile),
                    is_widening_window=current in widening,
                )
            )
            current += timedelta(days=1)
        return rows

    def _lunar_starts(self, today: date, count: int, warnings: list[str]) -> list[date]:
        lunar = self._config.cycle.lunar
        starts = upcoming_new_moons(
            today, self._calculator.oracle, count, search_days=lunar.search_radius_days
        )
        if len(starts) < count:
            warnings.append(f"Only {len(starts)} of {count} new moons found")
        return starts
