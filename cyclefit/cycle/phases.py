"""Cycle phase enumeration and its per-phase attribute table.

Solar phases (menstrual, follicular, ovulatory, luteal) come from the user's
logged cycle.  Lunar phases are their moon-based analogs, used for profiles
without a period or recurring symptoms.  A profile only ever produces one
family, chosen by its cycle mode.

Everything that differs per phase (intensity tiers, catalog key, display
text) lives in ``PHASE_INFO`` instead of being switched on in each engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CyclePhase(str, Enum):
    MENSTRUAL = "menstrual"
    FOLLICULAR = "follicular"
    OVULATORY = "ovulatory"
    LUTEAL = "luteal"
    MENSTRUAL_MOON = "menstrual_moon"
    FOLLICULAR_MOON = "follicular_moon"
    OVULATORY_MOON = "ovulatory_moon"
    LUTEAL_MOON = "luteal_moon"

    @property
    def info(self) -> PhaseInfo:
        return PHASE_INFO[self]

    @property
    def is_moon_based(self) -> bool:
        return self.info.solar is not self

    @property
    def solar(self) -> CyclePhase:
        """The solar phase this phase is equivalent to (itself for solar phases)."""
        return self.info.solar

    @property
    def catalog_key(self) -> str:
        """Phase name as written in workout catalog ``phase`` lists."""
        return self.info.catalog_key


SOLAR_PHASES: tuple[CyclePhase, ...] = (
    CyclePhase.MENSTRUAL,
    CyclePhase.FOLLICULAR,
    CyclePhase.OVULATORY,
    CyclePhase.LUTEAL,
)

LUNAR_PHASES: tuple[CyclePhase, ...] = (
    CyclePhase.MENSTRUAL_MOON,
    CyclePhase.FOLLICULAR_MOON,
    CyclePhase.OVULATORY_MOON,
    CyclePhase.LUTEAL_MOON,
)


@dataclass(frozen=True)
class PhaseInfo:
    """Static attributes of a cycle phase.

    Attributes:
        display_name:         Human-readable name.
        description:          One-line guidance for the phase.
        fitness_focus:        Suggested activity styles.
        preferred_intensities: Catalog intensity tiers that suit the phase.
        catalog_key:          Key used in catalog phase lists.
        solar:                Solar equivalent (self for solar phases).
    """

    display_name: str
    description: str
    fitness_focus: str
    preferred_intensities: frozenset[str]
    catalog_key: str
    solar: CyclePhase


_MENSTRUAL_TEXT = (
    "Focus on gentle movement and recovery",
    "Gentle yoga, walking, stretching",
    frozenset({"low"}),
)
_FOLLICULAR_TEXT = (
    "Perfect time for building strength and endurance",
    "Strength training, cardio, HIIT",
    frozenset({"mid", "high"}),
)
_OVULATORY_TEXT = (
    "Peak energy for high-intensity workouts",
    "High-intensity workouts, sports, dance",
    frozenset({"high"}),
)
_LUTEAL_TEXT = (
    "Moderate exercise with stress management",
    "Moderate cardio, pilates, mindfulness",
    frozenset({"mid", "low"}),
)


def _info(name: str, text: tuple, key: str, solar: CyclePhase) -> PhaseInfo:
    description, focus, intensities = text
    return PhaseInfo(
        display_name=name,
        description=description,
        fitness_focus=focus,
        preferred_intensities=intensities,
        catalog_key=key,
        solar=solar,
    )


PHASE_INFO: dict[CyclePhase, PhaseInfo] = {
    CyclePhase.MENSTRUAL: _info("Menstrual", _MENSTRUAL_TEXT, "menstrual", CyclePhase.MENSTRUAL),
    CyclePhase.FOLLICULAR: _info("Follicular", _FOLLICULAR_TEXT, "follicular", CyclePhase.FOLLICULAR),
    CyclePhase.OVULATORY: _info("Ovulatory", _OVULATORY_TEXT, "ovulation", CyclePhase.OVULATORY),
    CyclePhase.LUTEAL: _info("Luteal", _LUTEAL_TEXT, "luteal", CyclePhase.LUTEAL),
    CyclePhase.MENSTRUAL_MOON: _info(
        "Menstrual Moon", _MENSTRUAL_TEXT, "menstrual", CyclePhase.MENSTRUAL
    ),
    CyclePhase.FOLLICULAR_MOON: _info(
        "Follicular Moon", _FOLLICULAR_TEXT, "follicular", CyclePhase.FOLLICULAR
    ),
    CyclePhase.OVULATORY_MOON: _info(
        "Ovulatory Moon", _OVULATORY_TEXT, "ovulation", CyclePhase.OVULATORY
    ),
    CyclePhase.LUTEAL_MOON: _info("Luteal Moon", _LUTEAL_TEXT, "luteal", CyclePhase.LUTEAL),
}

# Phase names accepted from catalogs and stored data, normalized to catalog keys
_CATALOG_ALIASES: dict[str, str] = {
    "menstrual": "menstrual",
    "symptomatic": "menstrual",
    "follicular": "follicular",
    "ovulation": "ovulation",
    "ovulatory": "ovulation",
    "luteal": "luteal",
    "all": "all",
}


def normalize_catalog_phase(name: str) -> str | None:
    """Map a catalog phase label to its canonical key, or None if unknown."""
    return _CATALOG_ALIASES.get(name.strip().lower())
