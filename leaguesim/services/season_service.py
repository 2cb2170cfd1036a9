"""
Season controller: state machine, guards, week sequencing.
Generate fixtures: build the double round-robin calendar. Play week: simulate
every pending fixture of the next week and advance. Reset: back to not started.

Concurrency: one lock per league. Every mutation holds it for its whole
transaction. Reads hold it only while loading a snapshot (state, roster,
fixtures) and compute standings/predictions outside it, so a reader never sees
a half-played week and readers do not block each other on computation.
"""
from __future__ import annotations

import logging
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

from leaguesim.config import Settings, get_settings
from leaguesim.models import (
    Fixture,
    LeagueState,
    MatchResult,
    Prediction,
    SimulationState,
    Standing,
    Team,
)
from leaguesim.persistence.db import get_connection
from leaguesim.persistence.repositories import (
    FixtureRepository,
    LeagueStateRepository,
    TeamRepository,
)
from leaguesim.services.errors import (
    AlreadyScheduled,
    InvalidScore,
    NotScheduled,
    SeasonComplete,
    UnknownFixture,
    UnknownTeam,
)
from leaguesim.services.prediction import PredictionEngine, StopCheck, predictions_to_list
from leaguesim.services.scheduling import (
    generate_league_schedule,
    total_weeks_for,
    validate_schedule,
)
from leaguesim.services.standings import compute_standings
from leaguesim.services.team_service import TeamService
from leaguesim.simulation.match_engine import simulate_match
from leaguesim.simulation.rng import SeededRNG

logger = logging.getLogger(__name__)


@dataclass
class LeagueSnapshot:
    """Consistent read of the whole league at one instant."""
    state: LeagueState
    teams: list[Team]
    fixtures: list[Fixture]

    @property
    def teams_by_id(self) -> dict[int, Team]:
        return {t.id: t for t in self.teams}

    @property
    def played(self) -> list[Fixture]:
        return [f for f in self.fixtures if f.played]

    @property
    def remaining(self) -> list[Fixture]:
        return [f for f in self.fixtures if not f.played]


class SeasonService:
    """
    Owns one league: roster (via `teams`), calendar, results and progress.
    All state transitions are serialized on one lock.
    """

    def __init__(
        self,
        connect: Callable[[], sqlite3.Connection] = get_connection,
        settings: Settings | None = None,
        rng: SeededRNG | None = None,
        prediction_engine: PredictionEngine | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._connect = connect
        self._lock = threading.Lock()
        self._rng = rng or SeededRNG(self._settings.simulation_seed)
        self._engine = prediction_engine or PredictionEngine(
            trials=self._settings.prediction_trials,
            workers=self._settings.prediction_workers,
        )
        self._team_repo = TeamRepository()
        self._fixture_repo = FixtureRepository()
        self._state_repo = LeagueStateRepository()
        self.teams = TeamService(
            connect=connect, lock=self._lock, seed_defaults=self._settings.seed_default_teams
        )

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        conn = self._connect()
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    # ---------- State transitions ----------

    def generate_fixtures(self) -> list[Fixture]:
        """
        NotStarted -> FixturesGenerated. Builds the calendar from the roster
        in id order and persists it together with the new league state.
        """
        with self._lock, self._transaction() as conn:
            state = self._state_repo.get(conn)
            if state.fixtures_created or self._fixture_repo.count(conn) > 0:
                logger.warning("Fixture generation rejected: already scheduled")
                raise AlreadyScheduled()
            team_ids = [t.id for t in self._team_repo.list_all(conn)]
            schedule = generate_league_schedule(team_ids)
            validate_schedule(schedule, team_ids)
            self._fixture_repo.create_batch(conn, schedule)
            self._state_repo.update(
                conn,
                LeagueState(fixtures_created=True, total_weeks=total_weeks_for(len(team_ids))),
            )
            fixtures = self._fixture_repo.list_all(conn)
        logger.info(
            "Generated %d fixtures over %d weeks for %d teams",
            len(fixtures), total_weeks_for(len(team_ids)), len(team_ids),
        )
        return fixtures

    def _play_next_week(self, conn: sqlite3.Connection) -> tuple[LeagueState, list[Fixture]]:
        """
        Simulate every unplayed fixture of week current_week + 1 and advance.
        Caller holds the lock and owns the transaction.
        """
        state = self._state_repo.get(conn)
        if not state.fixtures_created:
            logger.warning("Play rejected: fixtures not generated")
            raise NotScheduled()
        if state.remaining_weeks == 0:
            logger.warning("Play rejected: season complete")
            raise SeasonComplete(state.total_weeks)
        week = state.current_week + 1
        teams = {t.id: t for t in self._team_repo.list_all(conn)}
        fixtures = self._fixture_repo.list_by_week(conn, week)
        for f in fixtures:
            if f.played:
                # Manual result entered ahead of time
                continue
            home = teams.get(f.home_team_id)
            if home is None:
                raise UnknownTeam(f.home_team_id)
            away = teams.get(f.away_team_id)
            if away is None:
                raise UnknownTeam(f.away_team_id)
            f.home_score, f.away_score = simulate_match(home, away, self._rng)
            self._fixture_repo.update_result(conn, f.id, f.home_score, f.away_score)
            logger.debug(
                "Week %d: %s %d-%d %s",
                week, home.name, f.home_score, f.away_score, away.name,
            )
        state.current_week = week
        state.started = True
        state.completed = state.remaining_weeks == 0
        self._state_repo.update(conn, state)
        logger.info("Played week %d of %d", week, state.total_weeks)
        return state, fixtures

    def play_week(self) -> list[Fixture]:
        """Play the next week. All of its fixtures commit together or not at all."""
        with self._lock:
            rng_state = self._rng.getstate()
            try:
                with self._transaction() as conn:
                    _, fixtures = self._play_next_week(conn)
            except Exception:
                # Rolled-back weeks must not consume randomness.
                self._rng.setstate(rng_state)
                raise
        return fixtures

    def play_all(self, should_stop: StopCheck | None = None) -> dict[int, list[Fixture]]:
        """
        Play weeks until the season completes, holding the lock throughout.
        Fails like play_week when no week remains. should_stop is checked
        between weeks; when it returns True the weeks already played are
        committed and returned.
        """
        results: dict[int, list[Fixture]] = {}
        with self._lock:
            rng_state = self._rng.getstate()
            try:
                with self._transaction() as conn:
                    while True:
                        state, fixtures = self._play_next_week(conn)
                        results[state.current_week] = fixtures
                        if state.remaining_weeks == 0:
                            break
                        if should_stop is not None and should_stop():
                            logger.info("Play-all interrupted after week %d", state.current_week)
                            break
            except Exception:
                self._rng.setstate(rng_state)
                raise
        return results

    def reset(self) -> None:
        """Delete all fixtures and results; back to NotStarted. Idempotent."""
        with self._lock, self._transaction() as conn:
            self._fixture_repo.delete_all(conn)
            self._state_repo.reset(conn)
        logger.info("Season reset")

    def override_result(self, fixture_id: int, home_score: int, away_score: int) -> Fixture:
        """
        Manually set a fixture's score, played or not. Does not move
        current_week; standings are recomputed on the next read.
        """
        if home_score < 0:
            raise InvalidScore("home score must be non-negative")
        if away_score < 0:
            raise InvalidScore("away score must be non-negative")
        with self._lock, self._transaction() as conn:
            fixture = self._fixture_repo.get(conn, fixture_id)
            if fixture is None:
                raise UnknownFixture(fixture_id)
            self._fixture_repo.update_result(conn, fixture_id, home_score, away_score)
        fixture.home_score, fixture.away_score = home_score, away_score
        logger.info("Result override: fixture %d set to %d-%d", fixture_id, home_score, away_score)
        return fixture

    # ---------- Reads ----------

    def snapshot(self) -> LeagueSnapshot:
        with self._lock, self._transaction() as conn:
            return LeagueSnapshot(
                state=self._state_repo.get(conn),
                teams=self._team_repo.list_all(conn),
                fixtures=self._fixture_repo.list_all(conn),
            )

    def get_league_state(self) -> LeagueState:
        with self._lock, self._transaction() as conn:
            return self._state_repo.get(conn)

    def list_fixtures(self) -> list[Fixture]:
        with self._lock, self._transaction() as conn:
            return self._fixture_repo.list_all(conn)

    def fixtures_for_week(self, week: int) -> list[Fixture]:
        with self._lock, self._transaction() as conn:
            return self._fixture_repo.list_by_week(conn, week)

    def get_standings(self) -> list[Standing]:
        snap = self.snapshot()
        return compute_standings(snap.teams, snap.fixtures)

    def _prediction_rng(self) -> SeededRNG:
        return SeededRNG(self._settings.prediction_seed)

    def predict(
        self,
        snap: LeagueSnapshot,
        trials: int | None = None,
        should_stop: StopCheck | None = None,
    ) -> list[Prediction]:
        if not snap.fixtures:
            # No calendar yet: nothing separates the teams.
            share = 100.0 / len(snap.teams) if snap.teams else 0.0
            return predictions_to_list(snap.teams, {t.id: share for t in snap.teams})
        percentages = self._engine.predict(
            snap.teams,
            snap.played,
            snap.remaining,
            self._prediction_rng(),
            trials=trials,
            should_stop=should_stop,
        )
        standings = compute_standings(snap.teams, snap.fixtures)
        return predictions_to_list(snap.teams, percentages, standings)

    def get_predictions(
        self, trials: int | None = None, should_stop: StopCheck | None = None
    ) -> list[Prediction]:
        return self.predict(self.snapshot(), trials=trials, should_stop=should_stop)

    def get_full_state(self, trials: int | None = None) -> SimulationState:
        """League state, table, latest week's results, all results by week, predictions."""
        snap = self.snapshot()
        names = {t.id: t.name for t in snap.teams}

        def to_result(f: Fixture) -> MatchResult:
            return MatchResult(
                fixture_id=f.id,
                week=f.week,
                home_team_name=names.get(f.home_team_id, str(f.home_team_id)),
                away_team_name=names.get(f.away_team_id, str(f.away_team_id)),
                home_score=f.home_score,
                away_score=f.away_score,
            )

        all_matches: dict[int, list[MatchResult]] = {}
        for f in snap.fixtures:
            all_matches.setdefault(f.week, []).append(to_result(f))
        current = [
            to_result(f)
            for f in snap.fixtures
            if f.week == snap.state.current_week and f.played
        ]
        return SimulationState(
            league_state=snap.state,
            standings=compute_standings(snap.teams, snap.fixtures),
            current_week_results=current,
            all_matches=all_matches,
            predictions=self.predict(snap, trials=trials),
        )
