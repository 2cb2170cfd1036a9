"""
Seeded RNG for deterministic, replayable simulations.
"""
from __future__ import annotations

import random

_SEED_BITS = 63


class SeededRNG:
    """Wrapper around random.Random for reproducible simulations."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)
        self._seed = seed

    @property
    def seed(self) -> int | None:
        return self._seed

    def random(self) -> float:
        return self._rng.random()

    def next_seed(self) -> int:
        """Draw a seed for a child stream."""
        return self._rng.getrandbits(_SEED_BITS)

    def spawn(self) -> SeededRNG:
        """Independent child generator seeded from this stream."""
        return SeededRNG(self.next_seed())

    def getstate(self):
        return self._rng.getstate()

    def setstate(self, state) -> None:
        self._rng.setstate(state)
