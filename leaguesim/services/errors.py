"""
League error taxonomy. Every error is recoverable and carries a message fit
for display; the API maps `status_code` straight onto the HTTP response.
"""
from __future__ import annotations


class LeagueError(ValueError):
    """Base class for rejected league operations."""

    status_code = 400

    @property
    def code(self) -> str:
        return type(self).__name__

    @property
    def message(self) -> str:
        return str(self)


# ---------- Scheduling ----------


class InsufficientTeams(LeagueError):
    """Fewer than two teams on the roster at scheduling time."""

    def __init__(self, team_count: int) -> None:
        self.team_count = team_count
        super().__init__(f"Need at least 2 teams to generate fixtures (have {team_count})")


class AlreadyScheduled(LeagueError):
    """Fixtures already exist for this season."""

    status_code = 409

    def __init__(self) -> None:
        super().__init__("Fixtures already generated; reset the season first")


class ScheduleIntegrityError(LeagueError):
    """Generated calendar violates a round-robin invariant."""

    status_code = 500


# ---------- Season lifecycle ----------


class NotScheduled(LeagueError):
    """Play attempted before fixtures were generated."""

    status_code = 409

    def __init__(self) -> None:
        super().__init__("Fixtures not generated yet")


class SeasonComplete(LeagueError):
    """Play attempted after the last week."""

    status_code = 409

    def __init__(self, total_weeks: int) -> None:
        self.total_weeks = total_weeks
        super().__init__(f"Season already completed (all {total_weeks} weeks played)")


class InvalidScore(LeagueError):
    """Manual result with a negative score."""


class PredictionCancelled(LeagueError):
    """Caller interrupted a prediction between trials."""

    status_code = 503

    def __init__(self, trials_completed: int, trials_requested: int) -> None:
        self.trials_completed = trials_completed
        self.trials_requested = trials_requested
        super().__init__(
            f"Prediction cancelled after {trials_completed} of {trials_requested} trials"
        )


# ---------- References ----------


class UnknownFixture(LeagueError):
    status_code = 404

    def __init__(self, fixture_id: int) -> None:
        self.fixture_id = fixture_id
        super().__init__(f"Fixture not found: {fixture_id}")


class UnknownTeam(LeagueError):
    status_code = 404

    def __init__(self, team_id: int) -> None:
        self.team_id = team_id
        super().__init__(f"Team not found: {team_id}")


# ---------- Roster ----------


class DuplicateTeamName(LeagueError):
    status_code = 409

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"A team named {name!r} already exists")


class InvalidTeam(LeagueError):
    """Team payload out of bounds (empty name, power outside 1-100)."""


class RosterLocked(LeagueError):
    """Cannot modify teams once fixtures exist."""

    status_code = 409

    def __init__(self) -> None:
        super().__init__("Cannot modify teams after fixtures are generated; reset the season first")
