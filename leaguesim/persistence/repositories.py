"""
Repository interfaces for league data.
No business logic, only read/write operations.

Repositories never commit. Services wrap each operation in `with conn:` so a
multi-statement change (fixtures + league state) commits or rolls back whole.
"""
from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Any, Iterable

from leaguesim.models import Fixture, LeagueState, Team


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------- TeamRepository ----------


class TeamRepository:
    """CRUD for the roster."""

    def create(self, conn: sqlite3.Connection, name: str, power: int) -> Team:
        cur = conn.execute(
            "INSERT INTO teams (name, power, created_at) VALUES (?, ?, ?)",
            (name, power, _now()),
        )
        return Team(id=cur.lastrowid, name=name, power=power)

    def get(self, conn: sqlite3.Connection, team_id: int) -> Team | None:
        row = conn.execute(
            "SELECT id, name, power FROM teams WHERE id = ?", (team_id,)
        ).fetchone()
        if row is None:
            return None
        return Team(id=row["id"], name=row["name"], power=row["power"])

    def get_by_name(self, conn: sqlite3.Connection, name: str) -> Team | None:
        row = conn.execute(
            "SELECT id, name, power FROM teams WHERE name = ?", (name,)
        ).fetchone()
        if row is None:
            return None
        return Team(id=row["id"], name=row["name"], power=row["power"])

    def list_all(self, conn: sqlite3.Connection) -> list[Team]:
        """Roster in insertion order; this order drives the schedule."""
        rows = conn.execute("SELECT id, name, power FROM teams ORDER BY id").fetchall()
        return [Team(id=r["id"], name=r["name"], power=r["power"]) for r in rows]

    def count(self, conn: sqlite3.Connection) -> int:
        return conn.execute("SELECT COUNT(*) FROM teams").fetchone()[0]

    def delete(self, conn: sqlite3.Connection, team_id: int) -> bool:
        cur = conn.execute("DELETE FROM teams WHERE id = ?", (team_id,))
        return cur.rowcount > 0


# ---------- FixtureRepository ----------


def _row_to_fixture(r: sqlite3.Row) -> Fixture:
    return Fixture(
        id=r["id"],
        week=r["week"],
        home_team_id=r["home_team_id"],
        away_team_id=r["away_team_id"],
        home_score=r["home_score"],
        away_score=r["away_score"],
    )


_FIXTURE_COLS = "id, week, home_team_id, away_team_id, home_score, away_score"


class FixtureRepository:
    """CRUD for fixtures. Ordered by week, then id."""

    def create_batch(self, conn: sqlite3.Connection, fixtures: Iterable[dict[str, Any]]) -> None:
        now = _now()
        conn.executemany(
            "INSERT INTO fixtures (week, home_team_id, away_team_id, created_at) VALUES (?, ?, ?, ?)",
            [(f["week"], f["home_team_id"], f["away_team_id"], now) for f in fixtures],
        )

    def get(self, conn: sqlite3.Connection, fixture_id: int) -> Fixture | None:
        row = conn.execute(
            f"SELECT {_FIXTURE_COLS} FROM fixtures WHERE id = ?", (fixture_id,)
        ).fetchone()
        return _row_to_fixture(row) if row is not None else None

    def list_all(self, conn: sqlite3.Connection) -> list[Fixture]:
        rows = conn.execute(f"SELECT {_FIXTURE_COLS} FROM fixtures ORDER BY week, id").fetchall()
        return [_row_to_fixture(r) for r in rows]

    def list_by_week(self, conn: sqlite3.Connection, week: int) -> list[Fixture]:
        rows = conn.execute(
            f"SELECT {_FIXTURE_COLS} FROM fixtures WHERE week = ? ORDER BY id", (week,)
        ).fetchall()
        return [_row_to_fixture(r) for r in rows]

    def count(self, conn: sqlite3.Connection) -> int:
        return conn.execute("SELECT COUNT(*) FROM fixtures").fetchone()[0]

    def update_result(
        self, conn: sqlite3.Connection, fixture_id: int, home_score: int, away_score: int
    ) -> None:
        conn.execute(
            "UPDATE fixtures SET home_score = ?, away_score = ?, updated_at = ? WHERE id = ?",
            (home_score, away_score, _now(), fixture_id),
        )

    def delete_all(self, conn: sqlite3.Connection) -> None:
        conn.execute("DELETE FROM fixtures")


# ---------- LeagueStateRepository ----------


class LeagueStateRepository:
    """The single league_state row."""

    def get(self, conn: sqlite3.Connection) -> LeagueState:
        row = conn.execute(
            "SELECT fixtures_created, current_week, total_weeks, started, completed "
            "FROM league_state WHERE id = 1"
        ).fetchone()
        if row is None:
            conn.execute("INSERT OR IGNORE INTO league_state (id) VALUES (1)")
            return LeagueState()
        return LeagueState(
            fixtures_created=bool(row["fixtures_created"]),
            current_week=row["current_week"],
            total_weeks=row["total_weeks"],
            started=bool(row["started"]),
            completed=bool(row["completed"]),
        )

    def update(self, conn: sqlite3.Connection, state: LeagueState) -> None:
        conn.execute(
            "UPDATE league_state SET fixtures_created = ?, current_week = ?, total_weeks = ?, "
            "started = ?, completed = ?, updated_at = ? WHERE id = 1",
            (
                int(state.fixtures_created),
                state.current_week,
                state.total_weeks,
                int(state.started),
                int(state.completed),
                _now(),
            ),
        )

    def reset(self, conn: sqlite3.Connection) -> None:
        self.update(conn, LeagueState())
