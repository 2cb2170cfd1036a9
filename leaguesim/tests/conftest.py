"""
Shared fixtures: a temporary SQLite league per test and a seeded SeasonService.
"""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from leaguesim.config import Settings
from leaguesim.models import Team
from leaguesim.persistence.db import get_connection, init_db, set_db_path
from leaguesim.persistence.repositories import TeamRepository
from leaguesim.services.season_service import SeasonService
from leaguesim.simulation.rng import SeededRNG


@pytest.fixture
def db_path(tmp_path):
    """Temporary DB with schema and the league_state row."""
    path = tmp_path / "league_test.db"
    set_db_path(path)
    init_db(db_path=path)
    return path


@pytest.fixture
def settings():
    return Settings(
        simulation_seed=42,
        prediction_seed=7,
        prediction_trials=300,
        seed_default_teams=False,
    )


@pytest.fixture
def service(db_path, settings):
    return SeasonService(
        connect=lambda: get_connection(db_path),
        settings=settings,
        rng=SeededRNG(settings.simulation_seed),
    )


def add_teams(db_path: Path, teams: list[tuple[str, int]]) -> list[Team]:
    """Insert teams directly, bypassing roster validation."""
    conn = get_connection(db_path)
    repo = TeamRepository()
    try:
        with conn:
            return [repo.create(conn, name, power) for name, power in teams]
    finally:
        conn.close()


@pytest.fixture
def four_equal_teams(db_path):
    return add_teams(db_path, [("Alpha", 70), ("Bravo", 70), ("Charlie", 70), ("Delta", 70)])


@pytest.fixture
def make_teams(db_path):
    """Callable that inserts (name, power) pairs into the test DB."""
    return lambda teams: add_teams(db_path, teams)
