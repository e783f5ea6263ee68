"""Cycle phase calculation for a single calendar date.

Solar cycles are split into four consecutive phases counted from the start
of the cycle:

    menstrual   period (or symptom) length
    follicular  whatever remains after the other three phases
    ovulatory   fixed ovulation window (3 days)
    luteal      step function of cycle length (see planning_config.yaml)

Extreme inputs can make the follicular duration zero or negative.  That is
not corrected: the comparisons below stay total and the affected phase
simply collapses.  ``PhaseBoundary.is_degenerate`` flags the situation.

Lunar profiles ignore cycle length and ask a moon phase oracle instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

from cyclefit.cycle.lunar import LunarPhaseOracle, SynodicMoonOracle, lunar_phase_for_date
from cyclefit.cycle.phases import CyclePhase
from cyclefit.engine.config_loader import CycleConfig, PlanningConfig, get_planning_config

logger = logging.getLogger("cyclefit.cycle.phase_calculator")

# Returned when a non-lunar profile has no cycle start on record
DEFAULT_PHASE = CyclePhase.FOLLICULAR


class CycleMode(str, Enum):
    REGULAR = "regular"
    IRREGULAR = "irregular"
    SYMPTOMATIC = "symptomatic"
    LUNAR = "lunar"


@dataclass(frozen=True)
class CycleProfile:
    """A user's stored cycle parameters.

    Attributes:
        cycle_length:     Average cycle length in days (typically 21–45).
        period_length:    Period length, or symptom length for symptomatic
                          profiles.
        last_cycle_start: First day of the most recent period (or symptoms).
        mode:             How the cycle is tracked.
        is_irregular:     Irregularity flag; enables the widening window.
    """

    cycle_length: int | None = None
    period_length: int | None = None
    last_cycle_start: date | None = None
    mode: CycleMode = CycleMode.REGULAR
    is_irregular: bool = False

    @property
    def irregular(self) -> bool:
        return self.is_irregular or self.mode is CycleMode.IRREGULAR

    @property
    def is_lunar(self) -> bool:
        return self.mode is CycleMode.LUNAR


@dataclass(frozen=True)
class PhaseBoundary:
    """Phase boundaries of one cycle instance.

    End dates are exclusive: ``menstrual_end`` is the first non-menstrual day.
    """

    cycle_start: date
    cycle_length: int
    period_length: int
    follicular_duration: int
    ovulation_duration: int
    luteal_duration: int

    @property
    def menstrual_end(self) -> date:
        return self.cycle_start + timedelta(days=self.period_length)

    @property
    def follicular_end(self) -> date:
        return self.menstrual_end + timedelta(days=self.follicular_duration)

    @property
    def ovulation_end(self) -> date:
        return self.follicular_end + timedelta(days=self.ovulation_duration)

    @property
    def is_degenerate(self) -> bool:
        return self.follicular_duration <= 0

    def phase_for_cycle_day(self, cycle_day: int) -> CyclePhase:
        """Classify a 1-indexed cycle day."""
        if cycle_day <= self.period_length:
            return CyclePhase.MENSTRUAL
        if cycle_day <= self.period_length + self.follicular_duration:
            return CyclePhase.FOLLICULAR
        if cycle_day <= self.period_length + self.follicular_duration + self.ovulation_duration:
            return CyclePhase.OVULATORY
        return CyclePhase.LUTEAL


def as_day(value: date | datetime) -> date:
    """Strip the time of day from a datetime; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def luteal_duration(cycle_length: int, config: CycleConfig | None = None) -> int:
    """Luteal phase length in days for a cycle length."""
    cfg = config or get_planning_config().cycle
    return cfg.luteal_days(cycle_length)


class PhaseCalculator:
    """Compute the cycle phase for any calendar date.

    Stateless apart from its injected config and oracle, so one instance can
    serve many profiles concurrently.

    Usage::

        calc = PhaseCalculator()
        profile = CycleProfile(cycle_length=28, period_length=5,
                               last_cycle_start=date(2026, 3, 1))
        calc.phase_for_date(date(2026, 3, 15), profile)   # CyclePhase.OVULATORY
    """

    def __init__(
        self,
        config: PlanningConfig | None = None,
        oracle: LunarPhaseOracle | None = None,
    ) -> None:
        self._config = config or get_planning_config()
        self._oracle = oracle or SynodicMoonOracle()

    @property
    def _cycle_config(self) -> CycleConfig:
        return self._config.cycle

    @property
    def oracle(self) -> LunarPhaseOracle:
        return self._oracle

    def cycle_length(self, profile: CycleProfile) -> int:
        """Effective cycle length, substituting defaults for missing or invalid values."""
        cfg = self._cycle_config
        if profile.is_lunar:
            return cfg.lunar.cycle_length
        if profile.cycle_length is None or profile.cycle_length <= 0:
            return cfg.default_cycle_length
        return profile.cycle_length

    def period_length(self, profile: CycleProfile) -> int:
        """Effective period (or symptom) length."""
        cfg = self._cycle_config
        if profile.is_lunar:
            return cfg.lunar.period_length
        if profile.period_length is None or profile.period_length <= 0:
            if profile.mode is CycleMode.SYMPTOMATIC:
                return cfg.default_symptom_length
            return cfg.default_period_length
        return profile.period_length

    def boundaries(self, profile: CycleProfile, cycle_start: date | None = None) -> PhaseBoundary:
        """Phase boundaries for the cycle starting at ``cycle_start``.

        Defaults to the profile's last cycle start.

        Raises:
            ValueError: Neither ``cycle_start`` nor a last cycle start is known.
        """
        start = cycle_start or profile.last_cycle_start
        if start is None:
            raise ValueError("cycle_start is required when the profile has no last cycle start")
        boundary = self._phase_boundary(profile, as_day(start))
        if boundary.is_degenerate:
            logger.warning(
                "Degenerate cycle: length=%d period=%d luteal=%d leaves follicular=%d",
                boundary.cycle_length, boundary.period_length,
                boundary.luteal_duration, boundary.follicular_duration,
            )
        return boundary

    def cycle_day(self, day: date | datetime, profile: CycleProfile) -> int | None:
        """1-indexed day within the cycle containing ``day``.

        Returns None for lunar profiles and profiles with no cycle start.
        Dates before the last start wrap into earlier cycles.
        """
        if profile.is_lunar or profile.last_cycle_start is None:
            return None
        days_since_start = (as_day(day) - as_day(profile.last_cycle_start)).days
        return days_since_start % self.cycle_length(profile) + 1

    def phase_for_date(self, day: date | datetime, profile: CycleProfile) -> CyclePhase:
        """Return the cycle phase for ``day``.

        Args:
            day:     Date (or datetime, time is ignored) to classify.
            profile: The user's cycle profile.

        Returns:
            A lunar phase for lunar profiles, otherwise a solar phase.
            Profiles without a cycle start get DEFAULT_PHASE.
        """
        target = as_day(day)

        if profile.is_lunar:
            return lunar_phase_for_date(target, self._oracle, self._cycle_config.lunar)

        cycle_day = self.cycle_day(target, profile)
        if cycle_day is None:
            logger.debug("No cycle start on record; using %s for %s", DEFAULT_PHASE.value, target)
            return DEFAULT_PHASE

        # Durations only depend on the profile, so the last start stands in for any cycle
        boundary = self._phase_boundary(profile, as_day(profile.last_cycle_start))
        return boundary.phase_for_cycle_day(cycle_day)

    def _phase_boundary(self, profile: CycleProfile, cycle_start: date) -> PhaseBoundary:
        cfg = self._cycle_config
        length = self.cycle_length(profile)
        period = self.period_length(profile)
        luteal = cfg.luteal_days(length)
        return PhaseBoundary(
            cycle_start=cycle_start,
            cycle_length=length,
            period_length=period,
            follicular_duration=length - (period + cfg.ovulation_duration + luteal),
            ovulation_duration=cfg.ovulation_duration,
            luteal_duration=luteal,
        )
