"""Tests for the moon phase oracle and lunar phase classification."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from cyclefit.cycle.lunar import (
    FULL_MOON,
    NEW_MOON,
    SynodicMoonOracle,
    lunar_phase_for_date,
    upcoming_new_moons,
)
from cyclefit.cycle.phases import CyclePhase
from cyclefit.engine.config_loader import LunarConfig, PlanningConfig


@pytest.fixture
def lunar_config(planning_config: PlanningConfig) -> LunarConfig:
    return planning_config.cycle.lunar


class TestLunarPhaseForDate:
    @pytest.mark.parametrize(
        "day, expected",
        [
            (date(2026, 3, 1), CyclePhase.MENSTRUAL_MOON),    # new moon
            (date(2026, 3, 4), CyclePhase.MENSTRUAL_MOON),    # new moon +3
            (date(2026, 3, 5), CyclePhase.FOLLICULAR_MOON),   # waxing
            (date(2026, 3, 8), CyclePhase.FOLLICULAR_MOON),
            (date(2026, 3, 12), CyclePhase.OVULATORY_MOON),   # full moon -3
            (date(2026, 3, 15), CyclePhase.OVULATORY_MOON),   # full moon
            (date(2026, 3, 18), CyclePhase.OVULATORY_MOON),   # full moon +3
            (date(2026, 3, 19), CyclePhase.LUTEAL_MOON),      # waning
            (date(2026, 3, 26), CyclePhase.LUTEAL_MOON),
            (date(2026, 3, 27), CyclePhase.MENSTRUAL_MOON),   # next new moon -3
        ],
    )
    def test_windows_around_new_and_full_moon(
        self, stub_oracle, lunar_config: LunarConfig, day: date, expected: CyclePhase
    ) -> None:
        assert lunar_phase_for_date(day, stub_oracle, lunar_config) is expected

    def test_no_moons_in_range_falls_back_to_follicular_moon(
        self, make_oracle, lunar_config: LunarConfig
    ) -> None:
        blank = make_oracle(new_moons=[], full_moons=[])
        assert lunar_phase_for_date(date(2026, 3, 8), blank, lunar_config) is (
            CyclePhase.FOLLICULAR_MOON
        )

    def test_moon_outside_scan_radius_is_ignored(
        self, make_oracle, lunar_config: LunarConfig
    ) -> None:
        far = make_oracle(new_moons=[date(2026, 1, 1)], full_moons=[date(2026, 3, 9)])
        assert lunar_phase_for_date(date(2026, 3, 8), far, lunar_config) is (
            CyclePhase.FOLLICULAR_MOON
        )


class TestUpcomingNewMoons:
    def test_returns_new_moons_on_or_after_start(self, stub_oracle) -> None:
        assert upcoming_new_moons(date(2026, 3, 1), stub_oracle, 3) == [
            date(2026, 3, 1),
            date(2026, 3, 30),
            date(2026, 4, 28),
        ]

    def test_stops_early_when_oracle_runs_dry(self, stub_oracle) -> None:
        found = upcoming_new_moons(date(2026, 4, 1), stub_oracle, 5)
        assert found == [date(2026, 4, 28), date(2026, 5, 28)]


class TestSynodicMoonOracle:
    def test_reference_new_moon(self) -> None:
        oracle = SynodicMoonOracle()
        assert oracle.phase_name(date(2000, 1, 6)) == NEW_MOON
        assert oracle.phase_name(date(2000, 1, 5)) != NEW_MOON
        assert oracle.phase_name(date(2000, 1, 7)) != NEW_MOON

    def test_full_moon_half_a_lunation_later(self) -> None:
        assert SynodicMoonOracle().phase_name(date(2000, 1, 21)) == FULL_MOON

    def test_one_new_moon_per_lunation(self) -> None:
        oracle = SynodicMoonOracle()
        start = date(2026, 1, 1)
        new_moons = [
            start + timedelta(days=d)
            for d in range(365)
            if oracle.phase_name(start + timedelta(days=d)) == NEW_MOON
        ]
        assert 12 <= len(new_moons) <= 13
        gaps = {(b - a).days for a, b in zip(new_moons, new_moons[1:])}
        assert gaps <= {29, 30}

    def test_age_is_within_a_lunation(self) -> None:
        oracle = SynodicMoonOracle()
        for d in range(60):
            assert 0.0 <= oracle.age_days(date(2026, 3, 1) + timedelta(days=d)) < 29.54
