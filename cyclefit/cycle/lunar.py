"""Moon-based cycle modelling for profiles without a period.

The lunar calendar stands in for a menstrual cycle:

    New Moon  ±3 days  → menstrual moon
    Full Moon ±3 days  → ovulatory moon
    waxing in between  → follicular moon
    waning in between  → luteal moon

The moon itself is a black box behind ``LunarPhaseOracle``.  The bundled
``SynodicMoonOracle`` uses the mean synodic month, which is accurate to
within a day and keeps the package free of ephemeris data.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime, time, timedelta
from typing import Protocol

from cyclefit.cycle.phases import CyclePhase
from cyclefit.engine.config_loader import LunarConfig

logger = logging.getLogger("cyclefit.cycle.lunar")

NEW_MOON = "New Moon"
FULL_MOON = "Full Moon"

# Mean length of a lunation, in days
SYNODIC_MONTH_DAYS = 29.530588853
# A well-documented new moon used as the epoch (2000-01-06 18:14 UTC)
_REFERENCE_NEW_MOON = datetime(2000, 1, 6, 18, 14)


class LunarPhaseOracle(Protocol):
    """Anything that can name the moon phase for a calendar date."""

    def phase_name(self, day: date) -> str:
        """Return "New Moon", "Full Moon", or another phase name for ``day``."""
        ...


class SynodicMoonOracle:
    """Name moon phases from the mean synodic month.

    Exactly one calendar day per lunation is named "New Moon" (the UTC day
    containing the mean new-moon instant), and likewise for "Full Moon".
    """

    _NAMES = (
        "Waxing Crescent",
        "First Quarter",
        "Waxing Gibbous",
        "Waning Gibbous",
        "Last Quarter",
        "Waning Crescent",
    )

    def age_days(self, day: date) -> float:
        """Moon age (days since the last new moon) at the start of ``day``."""
        return self._days_since_epoch(day) % SYNODIC_MONTH_DAYS

    def phase_name(self, day: date) -> str:
        start = self._days_since_epoch(day)
        end = start + 1.0

        next_new = math.ceil(start / SYNODIC_MONTH_DAYS) * SYNODIC_MONTH_DAYS
        if next_new < end:
            return NEW_MOON

        half = SYNODIC_MONTH_DAYS / 2
        next_full = math.ceil((start - half) / SYNODIC_MONTH_DAYS) * SYNODIC_MONTH_DAYS + half
        if next_full < end:
            return FULL_MOON

        age = start % SYNODIC_MONTH_DAYS
        index = min(int(age / SYNODIC_MONTH_DAYS * len(self._NAMES)), len(self._NAMES) - 1)
        return self._NAMES[index]

    @staticmethod
    def _days_since_epoch(day: date) -> float:
        delta = datetime.combine(day, time()) - _REFERENCE_NEW_MOON
        return delta.total_seconds() / 86400.0


def _nearest(target: date, oracle: LunarPhaseOracle, name: str, radius: int) -> date | None:
    """Find the closest date within ±radius days that the oracle names ``name``.

    Ties resolve to the earlier date.
    """
    best: date | None = None
    for offset in range(-radius, radius + 1):
        candidate = target + timedelta(days=offset)
        if oracle.phase_name(candidate) != name:
            continue
        if best is None or abs((candidate - target).days) < abs((best - target).days):
            best = candidate
    return best


def lunar_phase_for_date(
    target: date,
    oracle: LunarPhaseOracle,
    config: LunarConfig,
) -> CyclePhase:
    """Classify a date into one of the four lunar phases.

    Args:
        target: Calendar date to classify.
        oracle: Moon phase source.
        config: Lunar settings (scan radius and window half-width).

    Returns:
        A lunar CyclePhase.  Falls back to follicular moon when no new or
        full moon is visible inside the scan window.
    """
    radius = config.search_radius_days
    half_width = config.window_half_width_days

    new_moon = _nearest(target, oracle, NEW_MOON, radius)
    full_moon = _nearest(target, oracle, FULL_MOON, radius)
    if new_moon is None or full_moon is None:
        logger.warning(
            "No new/full moon within ±%d days of %s; using follicular moon",
            radius, target,
        )
        return CyclePhase.FOLLICULAR_MOON

    days_from_new = (target - new_moon).days
    days_from_full = (target - full_moon).days

    if abs(days_from_new) <= half_width:
        return CyclePhase.MENSTRUAL_MOON
    if abs(days_from_full) <= half_width:
        return CyclePhase.OVULATORY_MOON
    if days_from_new > half_width and days_from_full < -half_width:
        return CyclePhase.FOLLICULAR_MOON
    return CyclePhase.LUTEAL_MOON


def upcoming_new_moons(
    start: date,
    oracle: LunarPhaseOracle,
    count: int,
    search_days: int = 30,
) -> list[date]:
    """Return up to ``count`` new-moon dates on or after ``start``.

    Each search looks ahead ``search_days`` from the day after the previous
    hit, so a broken oracle yields fewer dates rather than looping forever.
    """
    found: list[date] = []
    cursor = start
    for _ in range(count):
        for offset in range(search_days):
            candidate = cursor + timedelta(days=offset)
            if oracle.phase_name(candidate) == NEW_MOON:
                found.append(candidate)
                cursor = candidate + timedelta(days=1)
                break
        else:
            logger.warning("No new moon within %d days of %s", search_days, cursor)
            break
    return found
