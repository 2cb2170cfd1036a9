"""
Data models for the league simulator.
Domain objects only, no persistence or API logic.

A league has one roster of teams and one season at a time. The season owns a
double round-robin calendar of fixtures; standings and predictions are derived
from fixtures and never stored.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

POWER_MIN = 1
POWER_MAX = 100


# ---------- Season phase (state machine) ----------
class SeasonPhase(str, Enum):
    """Season lifecycle: not_started → fixtures_generated → in_progress → completed."""
    NOT_STARTED = "not_started"
    FIXTURES_GENERATED = "fixtures_generated"  # Calendar exists, no week played
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


# ---------- Team ----------
@dataclass(frozen=True)
class Team:
    """
    A roster entry. Read-only to the simulation core.
    power is an integer strength rating in [POWER_MIN, POWER_MAX].
    """
    id: int
    name: str
    power: int

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "power": self.power}


# ---------- Fixture ----------
@dataclass
class Fixture:
    """
    One scheduled match. week/home/away are fixed once generated;
    scores are None until the fixture is played or manually set.
    """
    id: int
    week: int  # 1-based
    home_team_id: int
    away_team_id: int
    home_score: int | None = None
    away_score: int | None = None

    @property
    def played(self) -> bool:
        return self.home_score is not None and self.away_score is not None

    def to_dict(self, teams: dict[int, Team] | None = None) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "week": self.week,
            "homeTeamId": self.home_team_id,
            "awayTeamId": self.away_team_id,
            "homeScore": self.home_score,
            "awayScore": self.away_score,
            "played": self.played,
        }
        if teams is not None:
            home = teams.get(self.home_team_id)
            away = teams.get(self.away_team_id)
            d["homeTeam"] = home.to_dict() if home else None
            d["awayTeam"] = away.to_dict() if away else None
        return d


# ---------- LeagueState ----------
@dataclass
class LeagueState:
    """
    Singleton season progress record.
    current_week is 0 before any week is played; completed once
    current_week reaches total_weeks.
    """
    fixtures_created: bool = False
    current_week: int = 0
    total_weeks: int = 0
    started: bool = False
    completed: bool = False

    @property
    def phase(self) -> SeasonPhase:
        if not self.fixtures_created:
            return SeasonPhase.NOT_STARTED
        if self.completed:
            return SeasonPhase.COMPLETED
        if self.current_week == 0:
            return SeasonPhase.FIXTURES_GENERATED
        return SeasonPhase.IN_PROGRESS

    @property
    def remaining_weeks(self) -> int:
        return max(self.total_weeks - self.current_week, 0)

    def to_dict(self) -> dict[str, Any]:
        return {
            "currentWeek": self.current_week,
            "totalWeeks": self.total_weeks,
            "fixturesCreated": self.fixtures_created,
            "started": self.started,
            "completed": self.completed,
            "phase": self.phase.value,
        }


# ---------- Standing (derived) ----------
@dataclass
class Standing:
    """One team's aggregated record. Recomputed from played fixtures."""
    team_id: int
    team_name: str
    played: int = 0
    won: int = 0
    drawn: int = 0
    lost: int = 0
    goals_for: int = 0
    goals_against: int = 0
    points: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    def copy(self) -> Standing:
        return Standing(
            team_id=self.team_id,
            team_name=self.team_name,
            played=self.played,
            won=self.won,
            drawn=self.drawn,
            lost=self.lost,
            goals_for=self.goals_for,
            goals_against=self.goals_against,
            points=self.points,
        )

    def to_dict(self, position: int | None = None) -> dict[str, Any]:
        d: dict[str, Any] = {
            "teamId": self.team_id,
            "teamName": self.team_name,
            "played": self.played,
            "won": self.won,
            "drawn": self.drawn,
            "lost": self.lost,
            "goalsFor": self.goals_for,
            "goalsAgainst": self.goals_against,
            "goalDifference": self.goal_difference,
            "points": self.points,
        }
        if position is not None:
            d["position"] = position
        return d


# ---------- Prediction (derived) ----------
@dataclass
class Prediction:
    """Estimated probability (0-100) that a team finishes first."""
    team_id: int
    team_name: str
    percentage: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "teamId": self.team_id,
            "teamName": self.team_name,
            "percentage": round(self.percentage, 2),
        }


# ---------- Match result (display) ----------
@dataclass
class MatchResult:
    """Flattened fixture for week-by-week result listings."""
    fixture_id: int
    week: int
    home_team_name: str
    away_team_name: str
    home_score: int | None
    away_score: int | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.fixture_id,
            "week": self.week,
            "homeTeamName": self.home_team_name,
            "awayTeamName": self.away_team_name,
            "homeScore": self.home_score,
            "awayScore": self.away_score,
        }


# ---------- SimulationState ----------
@dataclass
class SimulationState:
    """Everything a dashboard needs after any simulation step."""
    league_state: LeagueState
    standings: list[Standing]
    current_week_results: list[MatchResult]
    all_matches: dict[int, list[MatchResult]] = field(default_factory=dict)
    predictions: list[Prediction] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "leagueState": self.league_state.to_dict(),
            "standings": [s.to_dict(position=i + 1) for i, s in enumerate(self.standings)],
            "currentWeekResults": [r.to_dict() for r in self.current_week_results],
            "allMatches": {
                str(week): [r.to_dict() for r in results]
                for week, results in sorted(self.all_matches.items())
            },
            "predictions": [p.to_dict() for p in self.predictions],
        }
