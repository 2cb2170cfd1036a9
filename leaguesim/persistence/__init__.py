"""
Persistence layer for league data.
No business logic, no simulation, only read/write interfaces.
"""
from .db import get_connection, get_db_path, init_db, set_db_path
from .repositories import (
    TeamRepository,
    FixtureRepository,
    LeagueStateRepository,
)

__all__ = [
    "get_connection",
    "get_db_path",
    "init_db",
    "set_db_path",
    "TeamRepository",
    "FixtureRepository",
    "LeagueStateRepository",
]
