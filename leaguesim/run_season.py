"""
Play a league season in the terminal.
Resets the league, generates fixtures from the current roster (default teams
if empty), plays week by week and prints results, the table and title odds.

Run from project root: python -m leaguesim.run_season --seed 7
"""
from __future__ import annotations

import argparse
from pathlib import Path

from leaguesim.config import configure_logging, get_settings
from leaguesim.models import Fixture, Prediction, Standing, Team
from leaguesim.persistence.db import get_db_path, init_db, set_db_path
from leaguesim.services.prediction import PredictionEngine
from leaguesim.services.season_service import SeasonService
from leaguesim.simulation.rng import SeededRNG


def _print_week(week: int, fixtures: list[Fixture], teams: dict[int, Team]) -> None:
    print(f"\n  Week {week}")
    print("  " + "-" * 44)
    for f in fixtures:
        home = teams[f.home_team_id].name
        away = teams[f.away_team_id].name
        print(f"  {home:>18} {f.home_score} - {f.away_score} {away}")


def _print_table(standings: list[Standing]) -> None:
    print()
    print(f"  {'#':>2} {'Team':<18} {'P':>2} {'W':>2} {'D':>2} {'L':>2} {'GF':>3} {'GA':>3} {'GD':>4} {'Pts':>4}")
    for i, s in enumerate(standings, start=1):
        print(
            f"  {i:>2} {s.team_name:<18} {s.played:>2} {s.won:>2} {s.drawn:>2} {s.lost:>2} "
            f"{s.goals_for:>3} {s.goals_against:>3} {s.goal_difference:>+4} {s.points:>4}"
        )


def _print_predictions(predictions: list[Prediction]) -> None:
    print("\n  Title chances")
    for p in predictions:
        print(f"  {p.team_name:<18} {p.percentage:6.1f}%")


def run(
    seed: int | None = None,
    trials: int | None = None,
    weeks: int | None = None,
    db_path: Path | None = None,
) -> None:
    settings = get_settings()
    if db_path is not None:
        set_db_path(db_path)
    init_db(db_path=get_db_path())
    service = SeasonService(
        settings=settings,
        rng=SeededRNG(seed if seed is not None else settings.simulation_seed),
        prediction_engine=PredictionEngine(
            trials=trials or settings.prediction_trials,
            workers=settings.prediction_workers,
        ),
    )
    service.reset()
    roster = service.teams.list_teams() or service.teams.seed_default_teams()
    teams = {t.id: t for t in roster}
    service.generate_fixtures()
    state = service.get_league_state()
    to_play = state.total_weeks if weeks is None else min(weeks, state.total_weeks)
    print(f"\n  {len(teams)} teams, {state.total_weeks} weeks  [seed={seed}]")
    for _ in range(to_play):
        fixtures = service.play_week()
        _print_week(service.get_league_state().current_week, fixtures, teams)
    _print_table(service.get_standings())
    _print_predictions(service.get_predictions())
    print()


def main():
    parser = argparse.ArgumentParser(description="Simulate a double round-robin league season.")
    parser.add_argument("--seed", type=int, default=None, help="RNG seed for reproducibility")
    parser.add_argument("--trials", type=int, default=None, help="Monte Carlo trials for title odds")
    parser.add_argument("--weeks", type=int, default=None, help="Stop after this many weeks")
    parser.add_argument("--db", type=Path, default=None, help="SQLite database path")
    parser.add_argument("--log-level", default="WARNING", help="Logging level")
    args = parser.parse_args()
    configure_logging(args.log_level)
    run(seed=args.seed, trials=args.trials, weeks=args.weeks, db_path=args.db)


if __name__ == "__main__":
    main()
