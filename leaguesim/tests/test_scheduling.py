"""
Tests for double round-robin schedule generation.
Deterministic; every pair twice with home/away swapped; at most one game per team per week.
"""
from __future__ import annotations

from collections import Counter

import pytest

from leaguesim.services.errors import InsufficientTeams, ScheduleIntegrityError
from leaguesim.services.scheduling import (
    BYE,
    double_round_robin,
    generate_league_schedule,
    round_robin_pairings,
    total_weeks_for,
    validate_schedule,
)


def test_round_robin_two_teams():
    """2 teams: 1 week, 1 match per leg."""
    pairings = round_robin_pairings(["A", "B"])
    assert pairings == [(1, "A", "B")]


def test_double_round_robin_two_teams():
    assert double_round_robin(["A", "B"]) == [(1, "A", "B"), (2, "B", "A")]


def test_round_robin_three_teams_drops_bye():
    """3 teams: BYE pads to 4 slots, 3 weeks, one real match per week."""
    pairings = round_robin_pairings(["A", "B", "C"])
    assert len(pairings) == 3
    assert all(BYE not in (h, a) for _, h, a in pairings)
    pairs = {tuple(sorted([h, a])) for _, h, a in pairings}
    assert pairs == {("A", "B"), ("A", "C"), ("B", "C")}
    assert sorted(w for w, _, _ in pairings) == [1, 2, 3]


def test_round_robin_four_teams_parity_flips_home():
    """Fixed slot 0 is home in odd-numbered weeks and away in even-numbered weeks."""
    pairings = round_robin_pairings(["A", "B", "C", "D"])
    assert len(pairings) == 6
    a_games = [(w, h, a) for w, h, a in pairings if "A" in (h, a)]
    assert [(w, h == "A") for w, h, _ in a_games] == [(1, True), (2, False), (3, True)]


def test_second_leg_mirrors_first_leg():
    ids = ["A", "B", "C", "D", "E", "F"]
    schedule = double_round_robin(ids)
    legs = len(ids) - 1
    by_week: dict[int, set] = {}
    for w, h, a in schedule:
        by_week.setdefault(w, set()).add((h, a))
    for w in range(1, legs + 1):
        assert by_week[w + legs] == {(a, h) for h, a in by_week[w]}


@pytest.mark.parametrize("n", range(2, 21))
def test_schedule_invariants(n):
    ids = list(range(100, 100 + n))
    fixtures = generate_league_schedule(ids)

    assert len(fixtures) == n * (n - 1)
    weeks = sorted({f["week"] for f in fixtures})
    assert weeks == list(range(1, total_weeks_for(n) + 1))

    appearances = Counter()
    home = Counter()
    away = Counter()
    for f in fixtures:
        appearances[f["home_team_id"]] += 1
        appearances[f["away_team_id"]] += 1
        home[f["home_team_id"]] += 1
        away[f["away_team_id"]] += 1
    for tid in ids:
        assert appearances[tid] == 2 * (n - 1)
        assert home[tid] == n - 1
        assert away[tid] == n - 1

    for week in weeks:
        playing = [t for f in fixtures if f["week"] == week for t in (f["home_team_id"], f["away_team_id"])]
        assert len(playing) == len(set(playing))

    pairs = Counter(frozenset((f["home_team_id"], f["away_team_id"])) for f in fixtures)
    assert set(pairs.values()) == {2}
    assert len(pairs) == n * (n - 1) // 2
    ordered = {(f["home_team_id"], f["away_team_id"]) for f in fixtures}
    assert len(ordered) == n * (n - 1)

    validate_schedule(fixtures, ids)


@pytest.mark.parametrize("n", [3, 5, 7, 9])
def test_odd_team_count_each_team_sits_out_once_per_leg(n):
    ids = [f"T{i}" for i in range(n)]
    fixtures = generate_league_schedule(ids)
    total = total_weeks_for(n)
    assert total == 2 * n
    for tid in ids:
        weeks_played = {f["week"] for f in fixtures if tid in (f["home_team_id"], f["away_team_id"])}
        idle = set(range(1, total + 1)) - weeks_played
        assert len(idle) == 2
        first, second = sorted(idle)
        assert second - first == n


def test_schedule_is_deterministic():
    ids = [3, 1, 4, 5, 9, 2]
    assert generate_league_schedule(ids) == generate_league_schedule(ids)


def test_schedule_depends_on_roster_order():
    assert generate_league_schedule([1, 2, 3, 4]) != generate_league_schedule([4, 3, 2, 1])


def test_total_weeks_for():
    assert total_weeks_for(0) == 0
    assert total_weeks_for(1) == 0
    assert total_weeks_for(2) == 2
    assert total_weeks_for(4) == 6
    assert total_weeks_for(5) == 10
    assert total_weeks_for(20) == 38


@pytest.mark.parametrize("ids", [[], ["solo"]])
def test_generate_requires_two_teams(ids):
    with pytest.raises(InsufficientTeams) as exc_info:
        generate_league_schedule(ids)
    assert exc_info.value.team_count == len(ids)


def test_generate_rejects_duplicate_ids():
    with pytest.raises(ScheduleIntegrityError):
        generate_league_schedule([1, 2, 2, 3])


def test_validate_schedule_detects_missing_fixture():
    ids = [1, 2, 3, 4]
    fixtures = generate_league_schedule(ids)
    with pytest.raises(ScheduleIntegrityError):
        validate_schedule(fixtures[:-1], ids)


def test_validate_schedule_detects_double_booking():
    ids = [1, 2, 3, 4]
    fixtures = generate_league_schedule(ids)
    week_two = [f for f in fixtures if f["week"] == 2]
    # Move one week-2 fixture into week 1
    tampered = [dict(f) for f in fixtures]
    for f in tampered:
        if f == week_two[0]:
            f["week"] = 1
            break
    with pytest.raises(ScheduleIntegrityError):
        validate_schedule(tampered, ids)
