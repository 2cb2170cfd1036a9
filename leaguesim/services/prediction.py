"""
Monte Carlo title predictions.

Each trial copies the table built from already-played fixtures, simulates every
remaining fixture in week order and credits the trial to the rank-1 team under
the full tie-break order, so exactly one team wins each trial and percentages
always sum to 100.

Trial seeds are drawn from the caller's generator before any trial runs. Trial
k therefore sees the same substream whether trials run sequentially or on a
thread pool, and the estimate depends only on the caller's seed.
"""
from __future__ import annotations

import logging
import threading
import time
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, Sequence

from leaguesim.models import Fixture, Prediction, Standing, Team
from leaguesim.services.errors import PredictionCancelled, UnknownTeam
from leaguesim.services.standings import apply_result, build_table, leader
from leaguesim.simulation.match_engine import simulate_match
from leaguesim.simulation.rng import SeededRNG

logger = logging.getLogger(__name__)

DEFAULT_TRIALS = 1000

StopCheck = Callable[[], bool]


class PredictionEngine:
    """
    Estimates championship probabilities by simulating season completions.
    `workers` > 1 spreads trials over threads; `should_stop` must then be
    safe to call from several threads (threading.Event.is_set is).
    """

    def __init__(self, trials: int = DEFAULT_TRIALS, workers: int = 1) -> None:
        if trials < 1:
            raise ValueError("trials must be at least 1")
        self.trials = trials
        self.workers = max(1, workers)

    def predict(
        self,
        teams: Sequence[Team],
        played_fixtures: Iterable[Fixture],
        remaining_fixtures: Iterable[Fixture],
        rng: SeededRNG,
        trials: int | None = None,
        should_stop: StopCheck | None = None,
    ) -> dict[int, float]:
        """Map team id -> percentage chance of finishing first."""
        n_trials = self.trials if trials is None else trials
        if n_trials < 1:
            raise ValueError("trials must be at least 1")
        if not teams:
            return {}

        teams_by_id = {t.id: t for t in teams}
        base_table = build_table(teams, played_fixtures)
        remaining = sorted(
            (f for f in remaining_fixtures if not f.played),
            key=lambda f: (f.week, f.id),
        )
        for f in remaining:
            for tid in (f.home_team_id, f.away_team_id):
                if tid not in teams_by_id:
                    raise UnknownTeam(tid)

        if not remaining:
            # Nothing left to play: every trial ends the same way.
            winner = leader(base_table).team_id
            return {t.id: (100.0 if t.id == winner else 0.0) for t in teams}

        seeds = [rng.next_seed() for _ in range(n_trials)]
        started = time.perf_counter()
        if self.workers == 1:
            winners = self._run_trials(seeds, base_table, remaining, teams_by_id, should_stop, None)
        else:
            winners = self._run_parallel(seeds, base_table, remaining, teams_by_id, should_stop)
        if len(winners) < n_trials:
            raise PredictionCancelled(len(winners), n_trials)
        logger.debug(
            "Prediction: %d trials over %d remaining fixtures in %.3fs",
            n_trials, len(remaining), time.perf_counter() - started,
        )

        counts = Counter(winners)
        return {t.id: counts[t.id] * 100.0 / n_trials for t in teams}

    # ---------- Trials ----------

    @staticmethod
    def _run_trial(
        seed: int,
        base_table: dict[int, Standing],
        remaining: Sequence[Fixture],
        teams_by_id: dict[int, Team],
    ) -> int:
        rng = SeededRNG(seed)
        table = {tid: s.copy() for tid, s in base_table.items()}
        for f in remaining:
            home_score, away_score = simulate_match(
                teams_by_id[f.home_team_id], teams_by_id[f.away_team_id], rng
            )
            apply_result(table, f.home_team_id, f.away_team_id, home_score, away_score)
        return leader(table).team_id

    def _run_trials(
        self,
        seeds: Sequence[int],
        base_table: dict[int, Standing],
        remaining: Sequence[Fixture],
        teams_by_id: dict[int, Team],
        should_stop: StopCheck | None,
        stop_event: threading.Event | None,
    ) -> list[int]:
        winners: list[int] = []
        for seed in seeds:
            if stop_event is not None and stop_event.is_set():
                break
            if should_stop is not None and should_stop():
                if stop_event is not None:
                    stop_event.set()
                break
            winners.append(self._run_trial(seed, base_table, remaining, teams_by_id))
        return winners

    def _run_parallel(
        self,
        seeds: Sequence[int],
        base_table: dict[int, Standing],
        remaining: Sequence[Fixture],
        teams_by_id: dict[int, Team],
        should_stop: StopCheck | None,
    ) -> list[int]:
        stop_event = threading.Event()
        chunk = -(-len(seeds) // self.workers)
        chunks = [seeds[i : i + chunk] for i in range(0, len(seeds), chunk)]
        with ThreadPoolExecutor(max_workers=self.workers) as ex:
            futures = [
                ex.submit(
                    self._run_trials, c, base_table, remaining, teams_by_id, should_stop, stop_event
                )
                for c in chunks
            ]
            results = [fut.result() for fut in futures]
        winners: list[int] = []
        for r in results:
            winners.extend(r)
        return winners


def predictions_to_list(
    teams: Sequence[Team],
    percentages: dict[int, float],
    standings: Sequence[Standing] | None = None,
) -> list[Prediction]:
    """Most likely champion first; equal chances keep table order."""
    if standings is not None:
        order = {s.team_id: i for i, s in enumerate(standings)}
    else:
        by_name = sorted(teams, key=lambda t: (t.name.casefold(), t.name, t.id))
        order = {t.id: i for i, t in enumerate(by_name)}
    preds = [
        Prediction(team_id=t.id, team_name=t.name, percentage=percentages.get(t.id, 0.0))
        for t in teams
    ]
    preds.sort(key=lambda p: (-p.percentage, order.get(p.team_id, len(order))))
    return preds


__all__ = ["DEFAULT_TRIALS", "PredictionEngine", "StopCheck", "predictions_to_list"]
