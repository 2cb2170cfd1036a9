"""
Match engine: one fixture's score from the two teams' power ratings.

Each side's expected goals is its share of the combined (home-boosted) power,
scaled so an even match averages BASE_EXPECTED_GOALS per team. Goal counts are
independent Poisson draws capped at MAX_GOALS_PER_TEAM. Home goals are always
drawn before away goals, so the same (home, away, rng state) reproduces the
same score.
"""
from __future__ import annotations

import math
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from leaguesim.models import Team

HOME_ADVANTAGE_FACTOR = 1.1
BASE_EXPECTED_GOALS = 1.5
MAX_GOALS_PER_TEAM = 7


class UniformSource(Protocol):
    def random(self) -> float: ...


def expected_goals(home_power: int, away_power: int) -> tuple[float, float]:
    """Expected goals (home, away). Powers must be positive."""
    home = float(home_power) * HOME_ADVANTAGE_FACTOR
    away = float(away_power)
    total = home + away
    if total <= 0:
        raise ValueError("Team powers must be positive")
    return (
        BASE_EXPECTED_GOALS * 2 * (home / total),
        BASE_EXPECTED_GOALS * 2 * (away / total),
    )


def sample_goals(lam: float, rng: UniformSource, cap: int = MAX_GOALS_PER_TEAM) -> int:
    """Poisson(lam) by multiplying uniforms until the product drops below e^-lam."""
    if lam <= 0:
        return 0
    limit = math.exp(-lam)
    k = 0
    p = 1.0
    while p > limit:
        k += 1
        p *= rng.random()
    return min(k - 1, cap)


def simulate_match(home: Team, away: Team, rng: UniformSource) -> tuple[int, int]:
    """Score for home vs away. Pure given rng state."""
    home_xg, away_xg = expected_goals(home.power, away.power)
    home_goals = sample_goals(home_xg, rng)
    away_goals = sample_goals(away_xg, rng)
    return home_goals, away_goals
