"""Load, validate, and hot-reload the Cyclefit planning configuration.

The config lives in ``planning_config.yaml`` alongside this module.  It holds
every lookup table the engines need (luteal buckets, scoring weights, injury
restrictions, race distances) so that none of them repeats a per-phase switch.
Call ``reload_planning_config()`` to re-read from disk, no restart required.

Usage::

    from cyclefit.engine.config_loader import get_planning_config

    config = get_planning_config()
    config.cycle.luteal_days(28)           # 12
    config.race.base_distance("10K", "beginner")  # 3.0
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger("cyclefit.engine.config")

# Path to the YAML file sitting next to this module
_CONFIG_PATH = Path(__file__).parent / "planning_config.yaml"


# ---------------------------------------------------------------------------
# Typed config sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class LutealBucket:
    """Inclusive cycle-length range mapped to a luteal phase length."""

    min_length: int
    max_length: int
    days: int

    def contains(self, cycle_length: int) -> bool:
        return self.min_length <= cycle_length <= self.max_length


@dataclass(frozen=True)
class LunarConfig:
    """Settings for moon-based (lunar) cycle modelling."""

    cycle_length: int = 29
    period_length: int = 3
    search_radius_days: int = 30
    window_half_width_days: int = 3


@dataclass(frozen=True)
class CycleConfig:
    """Phase calculation and prediction settings."""

    default_cycle_length: int = 28
    default_period_length: int = 5
    default_symptom_length: int = 3
    ovulation_duration: int = 3
    widening_window_radius_days: int = 4
    predicted_cycles: int = 3
    prediction_horizon_months: int = 3
    luteal_buckets: tuple[LutealBucket, ...] = ()
    luteal_default_days: int = 14
    lunar: LunarConfig = field(default_factory=LunarConfig)

    def luteal_days(self, cycle_length: int) -> int:
        """Return the luteal phase length for a cycle length.

        Buckets are checked in order; lengths outside every bucket fall back
        to ``luteal_default_days``.
        """
        for bucket in self.luteal_buckets:
            if bucket.contains(cycle_length):
                return bucket.days
        return self.luteal_default_days


@dataclass(frozen=True)
class ScoreWeights:
    """Points added to a candidate workout's score during selection."""

    base: int = 1
    phase_intensity: int = 3
    favorite: int = 2
    goal: int = 1
    fitness_level: int = 1
    short_duration: int = 1
    disliked_tag: int = -2
    phase_specific_meditation: int = 5


@dataclass(frozen=True)
class SchedulerConfig:
    """Fitness plan scheduler settings."""

    horizon_days: int = 14
    meditations_per_week: int = 1
    min_frequency: int = 1
    max_frequency: int = 6
    default_frequency: int = 4
    short_duration_minutes: int = 20
    score_weights: ScoreWeights = field(default_factory=ScoreWeights)
    phase_tag_bonuses: dict[str, dict[str, int]] = field(default_factory=dict)
    injury_restrictions: dict[str, tuple[str, ...]] = field(default_factory=dict)

    @property
    def weeks(self) -> int:
        return self.horizon_days // 7

    def restricted_movements(self, injury: str) -> tuple[str, ...]:
        return self.injury_restrictions.get(injury.strip().lower(), ())


@dataclass(frozen=True)
class RaceConfig:
    """Race training planner settings."""

    default_base_distance_miles: float = 3.0
    base_distances: dict[str, dict[str, float]] = field(default_factory=dict)
    down_week_interval: int = 4
    down_week_volume_factor: float = 0.8
    phase_thresholds: dict[str, float] = field(default_factory=dict)
    phase_volume_multipliers: dict[str, float] = field(default_factory=dict)
    minutes_per_mile: dict[str, float] = field(default_factory=dict)
    long_run_factor: float = 1.5
    tempo_run_factor: float = 0.7
    cross_training_minutes: dict[str, int] = field(default_factory=dict)
    strength_training_minutes: dict[str, int] = field(default_factory=dict)
    recovery_minutes: int = 20
    intervals: dict[str, int] = field(default_factory=dict)
    cross_training_activities: tuple[str, ...] = ("Cycling",)
    late_luteal_days: int = 5

    def base_distance(self, race_type: str, runner_level: str) -> float:
        """Return the easy-run distance (miles) for a race type and runner level.

        Unknown race types use ``default_base_distance_miles``; unknown levels
        use the race type's ``default`` entry.
        """
        levels = self.base_distances.get(race_type)
        if not levels:
            return self.default_base_distance_miles
        level = runner_level.strip().lower()
        return levels.get(level, levels.get("default", self.default_base_distance_miles))


@dataclass(frozen=True)
class PlanningConfig:
    """Complete, validated planning configuration.

    This is the single in-memory representation of planning_config.yaml.
    The phase calculator, predictor, scheduler and race planner all read
    from this object.

    Attributes:
        version:   Config schema version string.
        cycle:     Phase boundary and prediction settings.
        scheduler: Fitness plan scheduling settings.
        race:      Race training plan settings.
    """

    version: str
    cycle: CycleConfig
    scheduler: SchedulerConfig
    race: RaceConfig
    _raw: dict = field(default_factory=dict, repr=False, compare=False, hash=False)


# ---------------------------------------------------------------------------
# Loader / validation
# ---------------------------------------------------------------------------


class ConfigValidationError(ValueError):
    """Raised when planning_config.yaml fails validation."""


def _load_yaml(path: Path) -> dict:
    """Read and parse a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigValidationError: If the YAML is malformed.
    """
    if not path.exists():
        raise FileNotFoundError(f"Planning config not found: {path}")

    with path.open("r", encoding="utf-8") as fh:
        try:
            data = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise ConfigValidationError(f"YAML parse error in {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigValidationError(f"{path} must contain a mapping at the top level")
    return data


def _positive_int(section: dict, key: str, default: int, path: str, errors: list[str]) -> int:
    value = section.get(key, default)
    try:
        number = int(value)
    except (TypeError, ValueError):
        errors.append(f"{path}.{key} must be an integer, got {value!r}")
        return default
    if number <= 0:
        errors.append(f"{path}.{key} must be positive, got {number}")
    return number


def _number(section: dict, key: str, default: float, path: str, errors: list[str]) -> float:
    value = section.get(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        errors.append(f"{path}.{key} must be a number, got {value!r}")
        return default


def _build_cycle(raw: dict, errors: list[str]) -> CycleConfig:
    buckets: list[LutealBucket] = []
    for i, bucket in enumerate(raw.get("luteal_buckets") or []):
        if not isinstance(bucket, dict):
            errors.append(f"cycle.luteal_buckets[{i}] must be a mapping")
            continue
        try:
            lo, hi, days = int(bucket["min"]), int(bucket["max"]), int(bucket["days"])
        except (KeyError, TypeError, ValueError):
            errors.append(f"cycle.luteal_buckets[{i}] needs integer min, max and days")
            continue
        if lo > hi:
            errors.append(f"cycle.luteal_buckets[{i}] has min {lo} > max {hi}")
        buckets.append(LutealBucket(min_length=lo, max_length=hi, days=days))

    lunar_raw = raw.get("lunar") or {}
    lunar = LunarConfig(
        cycle_length=_positive_int(lunar_raw, "cycle_length", 29, "cycle.lunar", errors),
        period_length=_positive_int(lunar_raw, "period_length", 3, "cycle.lunar", errors),
        search_radius_days=_positive_int(lunar_raw, "search_radius_days", 30, "cycle.lunar", errors),
        window_half_width_days=_positive_int(
            lunar_raw, "window_half_width_days", 3, "cycle.lunar", errors
        ),
    )

    return CycleConfig(
        default_cycle_length=_positive_int(raw, "default_cycle_length", 28, "cycle", errors),
        default_period_length=_positive_int(raw, "default_period_length", 5, "cycle", errors),
        default_symptom_length=_positive_int(raw, "default_symptom_length", 3, "cycle", errors),
        ovulation_duration=_positive_int(raw, "ovulation_duration", 3, "cycle", errors),
        widening_window_radius_days=_positive_int(
            raw, "widening_window_radius_days", 4, "cycle", errors
        ),
        predicted_cycles=_positive_int(raw, "predicted_cycles", 3, "cycle", errors),
        prediction_horizon_months=_positive_int(
            raw, "prediction_horizon_months", 3, "cycle", errors
        ),
        luteal_buckets=tuple(buckets),
        luteal_default_days=_positive_int(raw, "luteal_default_days", 14, "cycle", errors),
        lunar=lunar,
    )


def _build_scheduler(raw: dict, errors: list[str]) -> SchedulerConfig:
    horizon = _positive_int(raw, "horizon_days", 14, "scheduler", errors)
    if horizon % 7:
        errors.append(f"scheduler.horizon_days must be a whole number of weeks, got {horizon}")

    min_freq = _positive_int(raw, "min_frequency", 1, "scheduler", errors)
    max_freq = _positive_int(raw, "max_frequency", 6, "scheduler", errors)
    meditations = _positive_int(raw, "meditations_per_week", 1, "scheduler", errors)
    if max_freq + meditations > 7:
        errors.append(
            "scheduler.max_frequency + meditations_per_week must leave room in a 7-day week"
        )
    if min_freq > max_freq:
        errors.append(f"scheduler.min_frequency {min_freq} > max_frequency {max_freq}")

    weights_raw = raw.get("score_weights") or {}
    defaults = ScoreWeights()
    weights = ScoreWeights(
        **{
            name: int(_number(weights_raw, name, getattr(defaults, name), "scheduler.score_weights", errors))
            for name in ScoreWeights.__dataclass_fields__
        }
    )

    bonuses: dict[str, dict[str, int]] = {}
    for phase, tags in (raw.get("phase_tag_bonuses") or {}).items():
        if not isinstance(tags, dict):
            errors.append(f"scheduler.phase_tag_bonuses.{phase} must be a mapping of tag→points")
            continue
        bonuses[str(phase).lower()] = {
            str(tag).lower(): int(_number(tags, tag, 0, f"scheduler.phase_tag_bonuses.{phase}", errors))
            for tag in tags
        }

    restrictions: dict[str, tuple[str, ...]] = {}
    for injury, movements in (raw.get("injury_restrictions") or {}).items():
        if not isinstance(movements, list):
            errors.append(f"scheduler.injury_restrictions.{injury} must be a list")
            continue
        restrictions[str(injury).lower()] = tuple(str(m).lower() for m in movements)

    return SchedulerConfig(
        horizon_days=horizon,
        meditations_per_week=meditations,
        min_frequency=min_freq,
        max_frequency=max_freq,
        default_frequency=_positive_int(raw, "default_frequency", 4, "scheduler", errors),
        short_duration_minutes=_positive_int(raw, "short_duration_minutes", 20, "scheduler", errors),
        score_weights=weights,
        phase_tag_bonuses=bonuses,
        injury_restrictions=restrictions,
    )


def _build_race(raw: dict, errors: list[str]) -> RaceConfig:
    distances: dict[str, dict[str, float]] = {}
    for race_type, levels in (raw.get("base_distances") or {}).items():
        if not isinstance(levels, dict):
            errors.append(f"race.base_distances.{race_type} must be a mapping of level→miles")
            continue
        distances[str(race_type)] = {
            str(level).lower(): _number(levels, level, 0.0, f"race.base_distances.{race_type}", errors)
            for level in levels
        }

    thresholds_raw = raw.get("phase_thresholds") or {}
    thresholds = {
        "base_building": _number(thresholds_raw, "base_building", 0.4, "race.phase_thresholds", errors),
        "interval_workouts": _number(thresholds_raw, "interval_workouts", 0.7, "race.phase_thresholds", errors),
        "speed_strength": _number(thresholds_raw, "speed_strength", 0.9, "race.phase_thresholds", errors),
    }
    if not (0.0 < thresholds["base_building"] <= thresholds["interval_workouts"]
            <= thresholds["speed_strength"] <= 1.0):
        errors.append("race.phase_thresholds must be increasing values in (0.0, 1.0]")

    def _float_map(key: str) -> dict[str, float]:
        return {
            str(k): _number(raw.get(key) or {}, k, 0.0, f"race.{key}", errors)
            for k in (raw.get(key) or {})
        }

    def _int_map(key: str) -> dict[str, int]:
        return {
            str(k): _positive_int(raw.get(key) or {}, k, 1, f"race.{key}", errors)
            for k in (raw.get(key) or {})
        }

    activities = raw.get("cross_training_activities") or ["Cycling"]
    if not isinstance(activities, list):
        errors.append("race.cross_training_activities must be a list")
        activities = ["Cycling"]

    return RaceConfig(
        default_base_distance_miles=_number(raw, "default_base_distance_miles", 3.0, "race", errors),
        base_distances=distances,
        down_week_interval=_positive_int(raw, "down_week_interval", 4, "race", errors),
        down_week_volume_factor=_number(raw, "down_week_volume_factor", 0.8, "race", errors),
        phase_thresholds=thresholds,
        phase_volume_multipliers=_float_map("phase_volume_multipliers"),
        minutes_per_mile=_float_map("minutes_per_mile"),
        long_run_factor=_number(raw, "long_run_factor", 1.5, "race", errors),
        tempo_run_factor=_number(raw, "tempo_run_factor", 0.7, "race", errors),
        cross_training_minutes=_int_map("cross_training_minutes"),
        strength_training_minutes=_int_map("strength_training_minutes"),
        recovery_minutes=_positive_int(raw, "recovery_minutes", 20, "race", errors),
        intervals=_int_map("intervals"),
        cross_training_activities=tuple(str(a) for a in activities),
        late_luteal_days=_positive_int(raw, "late_luteal_days", 5, "race", errors),
    )


def _validate_and_build(raw: dict) -> PlanningConfig:
    """Validate the raw YAML dict and construct a PlanningConfig.

    Missing sections fall back to the dataclass defaults; present values are
    type-checked and every problem is collected before raising.

    Raises:
        ConfigValidationError: If any value is missing or invalid.
    """
    errors: list[str] = []

    def _section(name: str) -> dict[str, Any]:
        section = raw.get(name) or {}
        if not isinstance(section, dict):
            errors.append(f"'{name}' section must be a mapping")
            return {}
        return section

    version = str(raw.get("version", "1.0"))
    cycle = _build_cycle(_section("cycle"), errors)
    scheduler = _build_scheduler(_section("scheduler"), errors)
    race = _build_race(_section("race"), errors)

    if not cycle.luteal_buckets:
        logger.warning(
            "No luteal buckets configured; every cycle length uses %d luteal days",
            cycle.luteal_default_days,
        )

    if errors:
        raise ConfigValidationError(
            f"planning_config.yaml has {len(errors)} validation error(s):\n"
            + "\n".join(f"  • {e}" for e in errors)
        )

    return PlanningConfig(
        version=version,
        cycle=cycle,
        scheduler=scheduler,
        race=race,
        _raw=raw,
    )


def load_planning_config(path: Path | None = None) -> PlanningConfig:
    """Load and validate the planning config from disk.

    Args:
        path: Override path to YAML. Uses the bundled planning_config.yaml by default.

    Returns:
        Validated PlanningConfig instance.
    """
    target = path or _CONFIG_PATH
    raw = _load_yaml(target)
    config = _validate_and_build(raw)
    logger.info("Loaded planning config v%s from %s", config.version, target)
    return config


# ---------------------------------------------------------------------------
# Shared instance with hot-reload support
# ---------------------------------------------------------------------------

_config: PlanningConfig | None = None
_config_lock = threading.Lock()


def get_planning_config() -> PlanningConfig:
    """Return the shared PlanningConfig, loading it on first call.

    Thread-safe.  Use ``reload_planning_config()`` to refresh after YAML changes.
    """
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:  # double-checked locking
                _config = load_planning_config()
    return _config


def reload_planning_config(path: Path | None = None) -> PlanningConfig:
    """Reload the planning config from disk and replace the shared instance.

    If validation fails, the old config is retained and the error is re-raised.

    Raises:
        ConfigValidationError: If the new config is invalid.
        FileNotFoundError:     If the config file is missing.
    """
    global _config
    new_config = load_planning_config(path)  # validate before acquiring lock
    with _config_lock:
        old_version = _config.version if _config else "none"
        _config = new_config
    logger.info("Reloaded planning config: %s → %s", old_version, new_config.version)
    return new_config
