"""
Roster management: list, create and delete teams.
The roster is frozen while fixtures exist, since the calendar is built from it.
"""
from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from typing import Callable, Iterator

from leaguesim.models import POWER_MAX, POWER_MIN, Team
from leaguesim.persistence.db import get_connection
from leaguesim.persistence.repositories import LeagueStateRepository, TeamRepository
from leaguesim.services.errors import DuplicateTeamName, InvalidTeam, RosterLocked, UnknownTeam

logger = logging.getLogger(__name__)

# Seeded when the roster is empty
DEFAULT_TEAMS: tuple[tuple[str, int], ...] = (
    ("Chelsea", 85),
    ("Arsenal", 80),
    ("Manchester City", 90),
    ("Liverpool", 82),
)

NAME_MAX_LENGTH = 100


class TeamService:
    """Roster operations. Shares the league lock with SeasonService."""

    def __init__(
        self,
        connect: Callable[[], sqlite3.Connection] = get_connection,
        lock: threading.Lock | None = None,
        seed_defaults: bool = True,
    ) -> None:
        self._connect = connect
        self._lock = lock or threading.Lock()
        self._seed_defaults = seed_defaults
        self._team_repo = TeamRepository()
        self._state_repo = LeagueStateRepository()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _assert_roster_open(self, conn: sqlite3.Connection) -> None:
        if self._state_repo.get(conn).fixtures_created:
            logger.warning("Roster change rejected: fixtures already generated")
            raise RosterLocked()

    # ---------- Reads ----------

    def list_teams(self) -> list[Team]:
        """All teams; seeds the defaults first if the roster is empty and seeding is on."""
        with self._lock, self._transaction() as conn:
            if self._seed_defaults and self._team_repo.count(conn) == 0:
                self._seed(conn)
            return self._team_repo.list_all(conn)

    def get_team(self, team_id: int) -> Team:
        with self._lock, self._transaction() as conn:
            team = self._team_repo.get(conn, team_id)
        if team is None:
            raise UnknownTeam(team_id)
        return team

    # ---------- Writes ----------

    def seed_default_teams(self) -> list[Team]:
        """Insert any missing default team. Roster must be open."""
        with self._lock, self._transaction() as conn:
            self._assert_roster_open(conn)
            self._seed(conn)
            return self._team_repo.list_all(conn)

    def _seed(self, conn: sqlite3.Connection) -> None:
        for name, power in DEFAULT_TEAMS:
            if self._team_repo.get_by_name(conn, name) is None:
                self._team_repo.create(conn, name, power)
        logger.info("Seeded default teams")

    def create_team(self, name: str, power: int) -> Team:
        name = (name or "").strip()
        if not name:
            raise InvalidTeam("Team name is required")
        if len(name) > NAME_MAX_LENGTH:
            raise InvalidTeam(f"Team name must be at most {NAME_MAX_LENGTH} characters")
        if not POWER_MIN <= power <= POWER_MAX:
            raise InvalidTeam(f"Team power must be between {POWER_MIN} and {POWER_MAX}")
        with self._lock, self._transaction() as conn:
            self._assert_roster_open(conn)
            if self._team_repo.get_by_name(conn, name) is not None:
                raise DuplicateTeamName(name)
            team = self._team_repo.create(conn, name, power)
        logger.info("Created team %s (id=%d, power=%d)", team.name, team.id, team.power)
        return team

    def delete_team(self, team_id: int) -> None:
        with self._lock, self._transaction() as conn:
            self._assert_roster_open(conn)
            if not self._team_repo.delete(conn, team_id):
                raise UnknownTeam(team_id)
        logger.info("Deleted team %d", team_id)
