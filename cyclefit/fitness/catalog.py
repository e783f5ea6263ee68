"""Workout catalog: immutable reference data read by the scheduler.

The catalog file keeps the record shape of the legacy class library::

    {
      "__id__": "c-014",
      "Class_Name": "Power Pilates",
      "duration": "25 min",
      "phase": ["follicular", "ovulation"],
      "type": ["Pilates", "Strength"],
      "instructor": "Maya",
      "intensity": "Mid",
      "equipment": ["Mat"],
      "benefits": ["Core strength"]
    }

Order is significant: the scheduler breaks ties in catalog order, so
``load_catalog`` always preserves file order.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from cyclefit.cycle.phases import CyclePhase, normalize_catalog_phase

logger = logging.getLogger("cyclefit.fitness.catalog")

_DEFAULT_CATALOG_PATH = Path(__file__).parent / "data" / "fitness_classes.json"

ALL_PHASES = "all"
DEFAULT_DURATION_MINUTES = 30

_DIGITS = re.compile(r"\d+")


class CatalogLoadError(RuntimeError):
    """Raised when the catalog file is missing or not a JSON list."""


def parse_duration(value: str | int | None) -> int:
    """Minutes from a duration such as "25 min" or 25.  Defaults to 30."""
    if isinstance(value, int):
        return value if value > 0 else DEFAULT_DURATION_MINUTES
    if not value:
        return DEFAULT_DURATION_MINUTES
    match = _DIGITS.search(value)
    return int(match.group()) if match else DEFAULT_DURATION_MINUTES


def tags_match(tag: str, keyword: str) -> bool:
    """Case-insensitive substring match in either direction ("HIIT" ~ "hiit cardio")."""
    a, b = tag.strip().lower(), keyword.strip().lower()
    if not a or not b:
        return False
    return a in b or b in a


@dataclass(frozen=True)
class WorkoutCatalogEntry:
    """One class in the workout catalog.

    Attributes:
        name:             Class name; unique within a catalog.
        phases:           Catalog phase keys, or {"all"}.
        types:            Type tags (e.g. "Strength", "Meditation").
        intensity:        Lower-cased tier: "low", "mid", "high" (or "mid-high").
        instructor:       Instructor name.
        duration_minutes: Class length in minutes.
        equipment:        Required equipment.
        benefits:         Advertised benefits.
        entry_id:         Catalog identifier, if the source has one.
        variant_group:    Entries sharing a group count as one class when
                          avoiding repeats within a week.
        is_custom:        True for user-defined workouts.
    """

    name: str
    phases: frozenset[str]
    types: tuple[str, ...]
    intensity: str = "mid"
    instructor: str = ""
    duration_minutes: int = DEFAULT_DURATION_MINUTES
    equipment: tuple[str, ...] = ()
    benefits: tuple[str, ...] = ()
    entry_id: str | None = None
    variant_group: str | None = None
    is_custom: bool = False

    @property
    def is_meditation(self) -> bool:
        return any("meditation" in t.lower() for t in self.types)

    @property
    def duplicate_key(self) -> str:
        return self.variant_group or self.name

    def is_phase_specific(self, phase: CyclePhase) -> bool:
        return phase.catalog_key in self.phases

    def applies_to(self, phase: CyclePhase) -> bool:
        return self.is_phase_specific(phase) or ALL_PHASES in self.phases

    def has_tag(self, keyword: str) -> bool:
        return any(tags_match(t, keyword) for t in self.types)


class CatalogRecord(BaseModel):
    """Schema of one record in the catalog JSON file."""

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    entry_id: str | None = Field(default=None, alias="__id__")
    class_name: str = Field(alias="Class_Name", min_length=1)
    duration: str | int | None = None
    phase: list[str] = Field(default_factory=list)
    type: list[str] = Field(default_factory=list)
    instructor: str = ""
    intensity: str = "Mid"
    equipment: list[str] | None = None
    benefits: list[str] | None = None
    variant_group: str | None = None

    @field_validator("phase")
    @classmethod
    def _known_phases(cls, value: list[str]) -> list[str]:
        keys = []
        for name in value:
            key = normalize_catalog_phase(name)
            if key is None:
                raise ValueError(f"unknown phase {name!r}")
            keys.append(key)
        if not keys:
            raise ValueError("at least one phase is required")
        return keys

    def to_entry(self) -> WorkoutCatalogEntry:
        return WorkoutCatalogEntry(
            name=self.class_name,
            phases=frozenset(self.phase),
            types=tuple(self.type),
            intensity=self.intensity.lower(),
            instructor=self.instructor,
            duration_minutes=parse_duration(self.duration),
            equipment=tuple(self.equipment or ()),
            benefits=tuple(self.benefits or ()),
            entry_id=self.entry_id,
            variant_group=self.variant_group,
        )


def catalog_from_records(records: Iterable[Any]) -> tuple[WorkoutCatalogEntry, ...]:
    """Build catalog entries from raw records, skipping malformed ones.

    Duplicate class names keep the first occurrence.
    """
    entries: list[WorkoutCatalogEntry] = []
    seen: set[str] = set()
    for index, raw in enumerate(records):
        try:
            entry = CatalogRecord.model_validate(raw).to_entry()
        except ValidationError as exc:
            logger.warning(
                "Skipping malformed catalog record #%d: %s",
                index, exc.errors(include_url=False),
            )
            continue
        if entry.name in seen:
            logger.warning("Skipping duplicate catalog class %r", entry.name)
            continue
        seen.add(entry.name)
        entries.append(entry)
    return tuple(entries)


def load_catalog(path: Path | None = None) -> tuple[WorkoutCatalogEntry, ...]:
    """Load the workout catalog from a JSON file.

    Args:
        path: Override path. Uses the bundled fitness_classes.json by default.

    Returns:
        Catalog entries in file order.

    Raises:
        CatalogLoadError: If the file is missing, unparsable, or not a list.
    """
    target = path or _DEFAULT_CATALOG_PATH
    if not target.exists():
        raise CatalogLoadError(f"Workout catalog not found: {target}")

    try:
        raw = json.loads(target.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CatalogLoadError(f"Invalid JSON in {target}: {exc}") from exc

    if not isinstance(raw, list):
        raise CatalogLoadError(f"{target} must contain a JSON list of classes")

    entries = catalog_from_records(raw)
    logger.info("Loaded %d workout classes from %s", len(entries), target)
    return entries
