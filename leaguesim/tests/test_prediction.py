"""
Tests for Monte Carlo title predictions.
"""
from __future__ import annotations

import pytest

from leaguesim.models import Fixture, Team
from leaguesim.services.errors import PredictionCancelled, UnknownTeam
from leaguesim.services.prediction import PredictionEngine, predictions_to_list
from leaguesim.services.scheduling import generate_league_schedule
from leaguesim.services.standings import compute_standings
from leaguesim.simulation.rng import SeededRNG

TEAMS = [
    Team(id=1, name="Chelsea", power=85),
    Team(id=2, name="Arsenal", power=80),
    Team(id=3, name="Manchester City", power=90),
    Team(id=4, name="Liverpool", power=82),
]


def _season_fixtures(teams=TEAMS) -> list[Fixture]:
    schedule = generate_league_schedule([t.id for t in teams])
    return [
        Fixture(id=i, week=row["week"], home_team_id=row["home_team_id"], away_team_id=row["away_team_id"])
        for i, row in enumerate(schedule, start=1)
    ]


def test_percentages_sum_to_100_at_season_start():
    engine = PredictionEngine(trials=400)
    result = engine.predict(TEAMS, [], _season_fixtures(), SeededRNG(1))
    assert set(result) == {t.id for t in TEAMS}
    assert sum(result.values()) == pytest.approx(100.0)
    assert all(0.0 <= p <= 100.0 for p in result.values())


def test_same_seed_same_estimate():
    engine = PredictionEngine(trials=300)
    fixtures = _season_fixtures()
    first = engine.predict(TEAMS, [], fixtures, SeededRNG(123))
    second = engine.predict(TEAMS, [], fixtures, SeededRNG(123))
    assert first == second


def test_worker_count_does_not_change_estimate():
    fixtures = _season_fixtures()
    sequential = PredictionEngine(trials=250, workers=1).predict(TEAMS, [], fixtures, SeededRNG(9))
    parallel = PredictionEngine(trials=250, workers=4).predict(TEAMS, [], fixtures, SeededRNG(9))
    assert sequential == parallel


def test_unassailable_leader_gets_100():
    # Chelsea has 9 points after three wins; rivals can reach at most 6 from two games
    played = [
        Fixture(id=1, week=1, home_team_id=1, away_team_id=2, home_score=3, away_score=0),
        Fixture(id=2, week=2, home_team_id=1, away_team_id=3, home_score=3, away_score=0),
        Fixture(id=3, week=3, home_team_id=1, away_team_id=4, home_score=3, away_score=0),
    ]
    remaining = [
        Fixture(id=4, week=4, home_team_id=2, away_team_id=3),
        Fixture(id=5, week=5, home_team_id=3, away_team_id=4),
    ]
    result = PredictionEngine(trials=200).predict(TEAMS, played, remaining, SeededRNG(5))
    assert result[1] == 100.0
    assert result[2] == result[3] == result[4] == 0.0


def test_no_remaining_fixtures_credits_table_leader():
    played = [
        Fixture(id=1, week=1, home_team_id=2, away_team_id=1, home_score=1, away_score=0),
        Fixture(id=2, week=1, home_team_id=3, away_team_id=4, home_score=0, away_score=0),
    ]
    result = PredictionEngine(trials=50).predict(TEAMS, played, [], SeededRNG(0))
    assert result == {1: 0.0, 2: 100.0, 3: 0.0, 4: 0.0}


def test_empty_roster_returns_empty_mapping():
    assert PredictionEngine(trials=10).predict([], [], [], SeededRNG(0)) == {}


@pytest.mark.parametrize("trials", [0, -5])
def test_trials_must_be_positive(trials):
    with pytest.raises(ValueError):
        PredictionEngine(trials=trials)
    with pytest.raises(ValueError):
        PredictionEngine(trials=10).predict(TEAMS, [], _season_fixtures(), SeededRNG(0), trials=trials)


def test_cancellation_between_trials():
    calls = {"n": 0}

    def stop_after_ten() -> bool:
        calls["n"] += 1
        return calls["n"] > 10

    engine = PredictionEngine(trials=1000)
    with pytest.raises(PredictionCancelled) as exc_info:
        engine.predict(TEAMS, [], _season_fixtures(), SeededRNG(3), should_stop=stop_after_ten)
    assert exc_info.value.trials_completed == 10
    assert exc_info.value.trials_requested == 1000


def test_cancellation_with_workers():
    engine = PredictionEngine(trials=500, workers=3)
    with pytest.raises(PredictionCancelled) as exc_info:
        engine.predict(TEAMS, [], _season_fixtures(), SeededRNG(3), should_stop=lambda: True)
    assert exc_info.value.trials_completed == 0


def test_remaining_fixture_with_unknown_team_raises():
    remaining = [Fixture(id=1, week=1, home_team_id=1, away_team_id=42)]
    with pytest.raises(UnknownTeam):
        PredictionEngine(trials=10).predict(TEAMS, [], remaining, SeededRNG(0))


def test_played_fixtures_in_remaining_are_skipped():
    fixtures = _season_fixtures()
    for f in fixtures[:2]:
        f.home_score, f.away_score = 1, 0
    played = fixtures[:2]
    a = PredictionEngine(trials=200).predict(TEAMS, played, fixtures, SeededRNG(8))
    b = PredictionEngine(trials=200).predict(TEAMS, played, fixtures[2:], SeededRNG(8))
    assert a == b


def test_stronger_team_is_favourite():
    teams = [
        Team(id=1, name="Giants", power=100),
        Team(id=2, name="Minnows", power=10),
        Team(id=3, name="Plodders", power=10),
    ]
    result = PredictionEngine(trials=500).predict(teams, [], _season_fixtures(teams), SeededRNG(4))
    assert result[1] > 80.0


def test_predictions_to_list_orders_by_chance_then_table():
    percentages = {1: 25.0, 2: 50.0, 3: 25.0, 4: 0.0}
    played = [Fixture(id=1, week=1, home_team_id=3, away_team_id=4, home_score=2, away_score=0)]
    standings = compute_standings(TEAMS, played)
    preds = predictions_to_list(TEAMS, percentages, standings)
    assert [p.team_id for p in preds] == [2, 3, 1, 4]
    assert preds[0].to_dict() == {"teamId": 2, "teamName": "Arsenal", "percentage": 50.0}
