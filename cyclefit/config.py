"""Application configuration loaded from environment variables."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file).

    Tunable planning tables live in planning_config.yaml, not here.
    """

    # --- App ---
    app_name: str = "Cyclefit"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | staging | production

    # --- Data files (bundled defaults when unset) ---
    planning_config_path: Path | None = None
    catalog_path: Path | None = None

    # --- Plan generation ---
    plan_generation_timeout_seconds: float = 5.0

    # --- CORS ---
    cors_origins: list[str] = ["http://localhost:3000"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "env_prefix": "CYCLEFIT_"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
