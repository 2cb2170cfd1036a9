"""
Match simulation: seeded, replayable score generation from team power.
"""
from .rng import SeededRNG
from .match_engine import (
    HOME_ADVANTAGE_FACTOR,
    BASE_EXPECTED_GOALS,
    MAX_GOALS_PER_TEAM,
    expected_goals,
    sample_goals,
    simulate_match,
)

__all__ = [
    "SeededRNG",
    "HOME_ADVANTAGE_FACTOR",
    "BASE_EXPECTED_GOALS",
    "MAX_GOALS_PER_TEAM",
    "expected_goals",
    "sample_goals",
    "simulate_match",
]
