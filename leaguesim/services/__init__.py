"""
Service layer: scheduling, standings, predictions, season state machine.
Pure computation lives in scheduling/standings/prediction; season_service and
team_service orchestrate persistence.
"""
from .errors import (
    LeagueError,
    InsufficientTeams,
    AlreadyScheduled,
    NotScheduled,
    SeasonComplete,
    UnknownFixture,
    UnknownTeam,
    DuplicateTeamName,
    RosterLocked,
    InvalidScore,
    InvalidTeam,
    ScheduleIntegrityError,
    PredictionCancelled,
)
from .scheduling import generate_league_schedule, total_weeks_for, validate_schedule
from .standings import compute_standings, ranking_key
from .prediction import PredictionEngine, predictions_to_list
from .season_service import SeasonService, LeagueSnapshot
from .team_service import TeamService, DEFAULT_TEAMS

__all__ = [
    "LeagueError",
    "InsufficientTeams",
    "AlreadyScheduled",
    "NotScheduled",
    "SeasonComplete",
    "UnknownFixture",
    "UnknownTeam",
    "DuplicateTeamName",
    "RosterLocked",
    "InvalidScore",
    "InvalidTeam",
    "ScheduleIntegrityError",
    "PredictionCancelled",
    "generate_league_schedule",
    "total_weeks_for",
    "validate_schedule",
    "compute_standings",
    "ranking_key",
    "PredictionEngine",
    "predictions_to_list",
    "SeasonService",
    "LeagueSnapshot",
    "TeamService",
    "DEFAULT_TEAMS",
]
