"""Shared fixtures for cyclefit tests."""

from __future__ import annotations

from datetime import date
from typing import Callable, Iterable

import pytest

from cyclefit.cycle.lunar import FULL_MOON, NEW_MOON
from cyclefit.cycle.phase_calculator import CycleProfile, PhaseCalculator
from cyclefit.engine.config_loader import PlanningConfig, load_planning_config

# Canonical test cycle: 28 days, 5-day period, starting on a Sunday
CYCLE_START = date(2026, 3, 1)


class StubMoonOracle:
    """Moon oracle that only knows the dates it is given."""

    def __init__(self, new_moons: Iterable[date], full_moons: Iterable[date]) -> None:
        self.new_moons = set(new_moons)
        self.full_moons = set(full_moons)

    def phase_name(self, day: date) -> str:
        if day in self.new_moons:
            return NEW_MOON
        if day in self.full_moons:
            return FULL_MOON
        return "Waxing Crescent"


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def planning_config() -> PlanningConfig:
    """Load the real planning config for tests."""
    return load_planning_config()


@pytest.fixture
def calculator(planning_config: PlanningConfig) -> PhaseCalculator:
    return PhaseCalculator(planning_config)


# ---------------------------------------------------------------------------
# Cycle fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def regular_profile() -> CycleProfile:
    return CycleProfile(cycle_length=28, period_length=5, last_cycle_start=CYCLE_START)


@pytest.fixture
def make_oracle() -> Callable[..., StubMoonOracle]:
    return StubMoonOracle


@pytest.fixture
def stub_oracle() -> StubMoonOracle:
    """New moons on Mar 1 / Mar 30 / Apr 28 / May 28 2026, full moons in between."""
    return StubMoonOracle(
        new_moons=[date(2026, 3, 1), date(2026, 3, 30), date(2026, 4, 28), date(2026, 5, 28)],
        full_moons=[date(2026, 2, 14), date(2026, 3, 15), date(2026, 4, 14), date(2026, 5, 13)],
    )


@pytest.fixture
def lunar_calculator(planning_config: PlanningConfig, stub_oracle: StubMoonOracle) -> PhaseCalculator:
    return PhaseCalculator(planning_config, oracle=stub_oracle)
