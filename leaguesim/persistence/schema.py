"""
SQLite schema for league entities.
Migration-friendly: each table created with IF NOT EXISTS.
"""
from __future__ import annotations


def teams_schema() -> str:
    """Roster. power is the 1-100 strength rating used by the match engine."""
    return """
    CREATE TABLE IF NOT EXISTS teams (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL UNIQUE,
        power INTEGER NOT NULL DEFAULT 50 CHECK (power BETWEEN 1 AND 100),
        created_at TEXT NOT NULL
    );
    """


def fixtures_schema() -> str:
    """Double round-robin calendar. Scores NULL until played."""
    return """
    CREATE TABLE IF NOT EXISTS fixtures (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        week INTEGER NOT NULL,
        home_team_id INTEGER NOT NULL,
        away_team_id INTEGER NOT NULL,
        home_score INTEGER,
        away_score INTEGER,
        created_at TEXT NOT NULL,
        updated_at TEXT,
        FOREIGN KEY (home_team_id) REFERENCES teams(id),
        FOREIGN KEY (away_team_id) REFERENCES teams(id),
        CHECK (home_team_id <> away_team_id)
    );
    CREATE INDEX IF NOT EXISTS ix_fixtures_week ON fixtures(week);
    CREATE UNIQUE INDEX IF NOT EXISTS ix_fixtures_pair ON fixtures(home_team_id, away_team_id);
    """


def league_state_schema() -> str:
    """Single-row season progress (id = 1)."""
    return """
    CREATE TABLE IF NOT EXISTS league_state (
        id INTEGER PRIMARY KEY CHECK (id = 1),
        fixtures_created INTEGER NOT NULL DEFAULT 0,
        current_week INTEGER NOT NULL DEFAULT 0,
        total_weeks INTEGER NOT NULL DEFAULT 0,
        started INTEGER NOT NULL DEFAULT 0,
        completed INTEGER NOT NULL DEFAULT 0,
        updated_at TEXT
    );
    INSERT OR IGNORE INTO league_state (id) VALUES (1);
    """


def all_schema_sql() -> str:
    return teams_schema() + fixtures_schema() + league_state_schema()
