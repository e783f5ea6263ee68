"""Cycle phase calculation and prediction.

Modules:
    phases: CyclePhase enum and per-phase attribute table
    lunar: Moon phase oracle and lunar phase classification
    phase_calculator: Phase for a date from cycle parameters
    predictor: Upcoming cycle starts, widening window, daily phase table
"""

from cyclefit.cycle.lunar import LunarPhaseOracle, SynodicMoonOracle
from cyclefit.cycle.phase_calculator import (
    CycleMode,
    CycleProfile,
    PhaseBoundary,
    PhaseCalculator,
    luteal_duration,
)
from cyclefit.cycle.phases import PHASE_INFO, CyclePhase
from cyclefit.cycle.predictor import CyclePrediction, CyclePredictor, DailyPhase

__all__ = [
    "CycleMode",
    "CyclePhase",
    "CyclePrediction",
    "CyclePredictor",
    "CycleProfile",
    "DailyPhase",
    "LunarPhaseOracle",
    "PHASE_INFO",
    "PhaseBoundary",
    "PhaseCalculator",
    "SynodicMoonOracle",
    "luteal_duration",
]
