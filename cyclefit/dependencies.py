"""Shared FastAPI dependencies injected into route handlers."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends, HTTPException

from cyclefit.config import Settings, get_settings
from cyclefit.engine.config_loader import PlanningConfig, get_planning_config, load_planning_config
from cyclefit.fitness.catalog import CatalogLoadError, WorkoutCatalogEntry, load_catalog

logger = logging.getLogger("cyclefit.dependencies")


@lru_cache(maxsize=4)
def _config_from(path: Path) -> PlanningConfig:
    return load_planning_config(path)


@lru_cache(maxsize=4)
def _catalog_from(path: Path | None) -> tuple[WorkoutCatalogEntry, ...]:
    return load_catalog(path)


def get_config(settings: Annotated[Settings, Depends(get_settings)]) -> PlanningConfig:
    """Planning config: the shared instance unless settings point elsewhere."""
    if settings.planning_config_path is None:
        return get_planning_config()
    return _config_from(settings.planning_config_path)


def get_catalog(
    settings: Annotated[Settings, Depends(get_settings)],
) -> tuple[WorkoutCatalogEntry, ...]:
    """Workout catalog, loaded once per path."""
    try:
        return _catalog_from(settings.catalog_path)
    except CatalogLoadError as exc:
        logger.error("Workout catalog unavailable: %s", exc)
        raise HTTPException(status_code=503, detail="Workout catalog unavailable") from exc


# Annotated shortcuts for route signatures
AppSettings = Annotated[Settings, Depends(get_settings)]
AppConfig = Annotated[PlanningConfig, Depends(get_config)]
Catalog = Annotated[tuple[WorkoutCatalogEntry, ...], Depends(get_catalog)]
