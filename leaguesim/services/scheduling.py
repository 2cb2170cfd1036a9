"""
Deterministic double round-robin schedule generation.

Every team plays every other team twice, once at home and once away. The first
leg uses the circle method: slot 0 stays fixed, the other slots rotate one
position each week, and slot i meets slot N-1-i. The second leg replays the
first leg week for week with home and away swapped, so week w + (N-1) mirrors
week w.

BYE handling: when the number of teams is odd, a virtual BYE slot pads the
circle to an even size. Pairings against BYE are dropped, so the team drawn
against it simply sits the week out.

Same team list ordering yields the same schedule.
"""
from __future__ import annotations

from collections import Counter
from typing import Any, Hashable, Sequence

from leaguesim.services.errors import InsufficientTeams, ScheduleIntegrityError

# Sentinel for bye when number of teams is odd
BYE = "BYE"


def padded_team_count(team_count: int) -> int:
    """Circle size: team count rounded up to even."""
    return team_count + (team_count % 2)


def total_weeks_for(team_count: int) -> int:
    """Season length in weeks for a double round-robin over team_count teams."""
    if team_count < 2:
        return 0
    return 2 * (padded_team_count(team_count) - 1)


def round_robin_pairings(team_ids: Sequence[Hashable]) -> list[tuple[int, Any, Any]]:
    """
    Single leg: (week_number, home_team_id, away_team_id), weeks 1..N-1.
    Home side alternates by week parity: even rounds give slot i home,
    odd rounds give slot N-1-i home. Byes are omitted.
    """
    if len(team_ids) < 2:
        return []
    ids: list[Any] = list(team_ids)
    if len(ids) % 2 == 1:
        ids.append(BYE)
    N = len(ids)
    result: list[tuple[int, Any, Any]] = []
    order = list(range(N))
    for week in range(N - 1):
        for i in range(N // 2):
            a, b = ids[order[i]], ids[order[N - 1 - i]]
            if a == BYE or b == BYE:
                continue
            if week % 2 == 0:
                result.append((week + 1, a, b))
            else:
                result.append((week + 1, b, a))
        # Rotate: keep slot 0, last slot moves to position 1
        order = [order[0]] + [order[N - 1]] + order[1 : N - 1]
    return result


def double_round_robin(team_ids: Sequence[Hashable]) -> list[tuple[int, Any, Any]]:
    """Both legs. Second-leg weeks are offset by N-1 and have home/away swapped."""
    first_leg = round_robin_pairings(team_ids)
    offset = padded_team_count(len(team_ids)) - 1
    second_leg = [(week + offset, away, home) for week, home, away in first_leg]
    return first_leg + second_leg


def generate_league_schedule(team_ids: Sequence[Hashable]) -> list[dict[str, Any]]:
    """
    Return list of fixtures: { "week": int, "home_team_id": ..., "away_team_id": ... },
    ordered by week. Raises InsufficientTeams for fewer than two teams.
    """
    if len(team_ids) < 2:
        raise InsufficientTeams(len(team_ids))
    if len(set(team_ids)) != len(team_ids):
        raise ScheduleIntegrityError("Duplicate team ids in roster")
    return [
        {"week": w, "home_team_id": h, "away_team_id": a}
        for w, h, a in double_round_robin(team_ids)
    ]


def validate_schedule(fixtures: Sequence[dict[str, Any]], team_ids: Sequence[Hashable]) -> None:
    """
    Raise ScheduleIntegrityError unless fixtures form a complete double
    round-robin over team_ids: n-1 home and n-1 away games per team, one game
    per team per week, each ordered pair exactly once, contiguous weeks.
    """
    n = len(team_ids)
    expected_weeks = total_weeks_for(n)
    if len(fixtures) != n * (n - 1):
        raise ScheduleIntegrityError(f"Expected {n * (n - 1)} fixtures, got {len(fixtures)}")

    weeks = {f["week"] for f in fixtures}
    if weeks != set(range(1, expected_weeks + 1)):
        raise ScheduleIntegrityError(f"Weeks must be contiguous 1..{expected_weeks}")

    home_count: Counter = Counter()
    away_count: Counter = Counter()
    per_week: Counter = Counter()
    ordered_pairs: Counter = Counter()
    for f in fixtures:
        home, away = f["home_team_id"], f["away_team_id"]
        if home == away:
            raise ScheduleIntegrityError(f"Team {home} scheduled against itself")
        home_count[home] += 1
        away_count[away] += 1
        per_week[(f["week"], home)] += 1
        per_week[(f["week"], away)] += 1
        ordered_pairs[(home, away)] += 1

    for tid in team_ids:
        if home_count[tid] != n - 1 or away_count[tid] != n - 1:
            raise ScheduleIntegrityError(
                f"Team {tid} has {home_count[tid]} home / {away_count[tid]} away fixtures"
            )
    clashes = [key for key, count in per_week.items() if count > 1]
    if clashes:
        week, tid = clashes[0]
        raise ScheduleIntegrityError(f"Team {tid} plays more than once in week {week}")
    if any(count != 1 for count in ordered_pairs.values()) or len(ordered_pairs) != n * (n - 1):
        raise ScheduleIntegrityError("Each ordered pairing must appear exactly once")
