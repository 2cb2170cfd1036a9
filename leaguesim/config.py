"""
Configuration for the league simulator.

Pydantic settings with environment variable support. Every field can be
overridden with a LEAGUESIM_-prefixed variable, e.g. LEAGUESIM_PREDICTION_TRIALS=5000.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="LEAGUESIM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "League Simulator API"
    app_version: str = "0.1.0"

    # Storage
    database_path: str = Field(default="data/league.db", description="SQLite file path")

    # Simulation
    simulation_seed: Optional[int] = Field(
        default=None, description="Seed for week-by-week match play; None = nondeterministic"
    )
    prediction_seed: Optional[int] = Field(
        default=None, description="Seed for each prediction run; same state => same percentages"
    )
    prediction_trials: int = Field(default=1000, ge=1, le=1_000_000)
    prediction_workers: int = Field(default=1, ge=1, le=64)
    prediction_timeout_seconds: Optional[float] = Field(
        default=None, gt=0, description="Abandon an API prediction after this long; None = no limit"
    )

    # Roster
    seed_default_teams: bool = Field(
        default=True, description="Seed the four default teams when the roster is empty"
    )

    # API
    log_level: str = "INFO"
    cors_allow_origins: list[str] = Field(
        default=[
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ],
    )


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance; call get_settings.cache_clear() after changing env."""
    return Settings()


def configure_logging(level: str | int = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
