"""
REST API for the league simulator.
Thin wrappers around the season and roster services.

Responses use the envelope {"success": true, "data": ...}; rejected operations
return {"error": true, "code": ..., "message": ...} with the error's status.
"""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Any, AsyncGenerator

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from leaguesim.config import configure_logging, get_settings
from leaguesim.models import POWER_MAX, POWER_MIN, Fixture, Team
from leaguesim.persistence.db import get_db_path, init_db
from leaguesim.services.errors import LeagueError
from leaguesim.services.prediction import StopCheck
from leaguesim.services.season_service import SeasonService

logger = logging.getLogger(__name__)


# ---------- Lifespan ----------
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()
    configure_logging(settings.log_level)
    init_db(db_path=get_db_path())
    logger.info("League database ready at %s", get_db_path())
    yield


settings = get_settings()

app = FastAPI(
    title=settings.app_name,
    description="Double round-robin league simulation with Monte Carlo title predictions",
    version=settings.app_version,
    lifespan=lifespan,
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache
def get_season_service() -> SeasonService:
    """Process-wide league owner."""
    return SeasonService()


@app.exception_handler(LeagueError)
async def league_error_handler(request: Request, exc: LeagueError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": True, "code": exc.code, "message": exc.message},
    )


def _ok(data: Any) -> dict[str, Any]:
    return {"success": True, "data": data}


def _fixtures_out(fixtures: list[Fixture], teams: list[Team]) -> list[dict[str, Any]]:
    by_id = {t.id: t for t in teams}
    return [f.to_dict(by_id) for f in fixtures]


def _deadline_check() -> StopCheck | None:
    timeout = get_settings().prediction_timeout_seconds
    if timeout is None:
        return None
    deadline = time.monotonic() + timeout
    return lambda: time.monotonic() > deadline


# ---------- Request models ----------


class CreateTeamRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    power: int = Field(..., ge=POWER_MIN, le=POWER_MAX)


class UpdateMatchResultRequest(BaseModel):
    homeScore: int = Field(..., ge=0)
    awayScore: int = Field(..., ge=0)


# ---------- Health ----------


@app.get("/health")
def health() -> dict[str, Any]:
    return _ok({"status": "ok"})


# ---------- Teams ----------


@app.get("/teams")
def list_teams(service: SeasonService = Depends(get_season_service)) -> dict[str, Any]:
    """All teams. Seeds the default roster when empty."""
    return _ok([t.to_dict() for t in service.teams.list_teams()])


@app.post("/teams", status_code=201)
def create_team(
    req: CreateTeamRequest, service: SeasonService = Depends(get_season_service)
) -> dict[str, Any]:
    team = service.teams.create_team(req.name, req.power)
    return _ok(team.to_dict())


@app.delete("/teams/{team_id}")
def delete_team(team_id: int, service: SeasonService = Depends(get_season_service)) -> dict[str, Any]:
    """Only before fixtures are generated."""
    service.teams.delete_team(team_id)
    return _ok({"message": "Team deleted successfully"})


# ---------- Fixtures ----------


@app.get("/fixtures")
def list_fixtures(service: SeasonService = Depends(get_season_service)) -> dict[str, Any]:
    snap = service.snapshot()
    return _ok(_fixtures_out(snap.fixtures, snap.teams))


@app.get("/fixtures/{week}")
def fixtures_for_week(
    week: int, service: SeasonService = Depends(get_season_service)
) -> dict[str, Any]:
    snap = service.snapshot()
    return _ok(_fixtures_out([f for f in snap.fixtures if f.week == week], snap.teams))


@app.post("/fixtures/generate")
def generate_fixtures(service: SeasonService = Depends(get_season_service)) -> dict[str, Any]:
    fixtures = service.generate_fixtures()
    return _ok(_fixtures_out(fixtures, service.snapshot().teams))


# ---------- Simulation ----------


@app.get("/simulation/state")
def get_state(service: SeasonService = Depends(get_season_service)) -> dict[str, Any]:
    """League state, standings, current week results, all results, predictions."""
    return _ok(service.get_full_state().to_dict())


@app.post("/simulation/play-week")
def play_week(service: SeasonService = Depends(get_season_service)) -> dict[str, Any]:
    service.play_week()
    return _ok(service.get_full_state().to_dict())


@app.post("/simulation/play-all")
def play_all(service: SeasonService = Depends(get_season_service)) -> dict[str, Any]:
    service.play_all()
    return _ok(service.get_full_state().to_dict())


@app.put("/simulation/match/{fixture_id}")
def update_match_result(
    fixture_id: int,
    req: UpdateMatchResultRequest,
    service: SeasonService = Depends(get_season_service),
) -> dict[str, Any]:
    """Manual correction; does not advance the week."""
    service.override_result(fixture_id, req.homeScore, req.awayScore)
    return _ok(service.get_full_state().to_dict())


@app.post("/simulation/reset")
def reset_simulation(service: SeasonService = Depends(get_season_service)) -> dict[str, Any]:
    service.reset()
    return _ok({"message": "Simulation reset successfully"})


# ---------- Standings & predictions ----------


@app.get("/standings")
def get_standings(service: SeasonService = Depends(get_season_service)) -> dict[str, Any]:
    standings = service.get_standings()
    return _ok([s.to_dict(position=i + 1) for i, s in enumerate(standings)])


@app.get("/predictions")
def get_predictions(
    trials: int | None = Query(None, ge=1, le=100_000, description="Monte Carlo trials"),
    service: SeasonService = Depends(get_season_service),
) -> dict[str, Any]:
    predictions = service.get_predictions(trials=trials, should_stop=_deadline_check())
    return _ok([p.to_dict() for p in predictions])
