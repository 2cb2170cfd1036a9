"""
League table: a pure fold of played fixtures into ranked standings.
Win 3 points, draw 1, loss 0. Ranking is a strict total order so there is
always exactly one leader.
"""
from __future__ import annotations

from typing import Iterable

from leaguesim.models import Fixture, Standing, Team
from leaguesim.services.errors import UnknownTeam

POINTS_WIN = 3
POINTS_DRAW = 1


def ranking_key(s: Standing) -> tuple:
    """Points desc, goal difference desc, goals for desc, name asc (case-insensitive), id asc."""
    return (-s.points, -s.goal_difference, -s.goals_for, s.team_name.casefold(), s.team_name, s.team_id)


def empty_table(teams: Iterable[Team]) -> dict[int, Standing]:
    return {t.id: Standing(team_id=t.id, team_name=t.name) for t in teams}


def apply_result(
    table: dict[int, Standing],
    home_id: int,
    away_id: int,
    home_score: int,
    away_score: int,
) -> None:
    """Credit one result to both teams in place."""
    home = table.get(home_id)
    if home is None:
        raise UnknownTeam(home_id)
    away = table.get(away_id)
    if away is None:
        raise UnknownTeam(away_id)

    home.played += 1
    away.played += 1
    home.goals_for += home_score
    home.goals_against += away_score
    away.goals_for += away_score
    away.goals_against += home_score

    if home_score > away_score:
        home.won += 1
        home.points += POINTS_WIN
        away.lost += 1
    elif away_score > home_score:
        away.won += 1
        away.points += POINTS_WIN
        home.lost += 1
    else:
        home.drawn += 1
        away.drawn += 1
        home.points += POINTS_DRAW
        away.points += POINTS_DRAW


def build_table(teams: Iterable[Team], fixtures: Iterable[Fixture]) -> dict[int, Standing]:
    """Unsorted table keyed by team id. Unplayed fixtures contribute nothing."""
    table = empty_table(teams)
    for f in fixtures:
        if not f.played:
            continue
        apply_result(table, f.home_team_id, f.away_team_id, f.home_score, f.away_score)
    return table


def rank(table: dict[int, Standing]) -> list[Standing]:
    return sorted(table.values(), key=ranking_key)


def leader(table: dict[int, Standing]) -> Standing:
    """Rank-1 standing under the full tie-break order."""
    return min(table.values(), key=ranking_key)


def compute_standings(teams: Iterable[Team], fixtures: Iterable[Fixture]) -> list[Standing]:
    """Ranked standings for every roster team."""
    return rank(build_table(teams, fixtures))
