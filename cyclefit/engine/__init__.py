"""Planning configuration shared by the cycle, fitness and race engines."""

from cyclefit.engine.config_loader import (
    ConfigValidationError,
    PlanningConfig,
    get_planning_config,
    load_planning_config,
    reload_planning_config,
)

__all__ = [
    "ConfigValidationError",
    "PlanningConfig",
    "get_planning_config",
    "load_planning_config",
    "reload_planning_config",
]
