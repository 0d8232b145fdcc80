# main.py (live match scoring API)
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Response
from pydantic import BaseModel, Field

from cricket_api import match_store
from cricket_api.celebration import play_celebration
from cricket_api.config import LOG_LEVEL, MAX_OVERS, validate_config
from cricket_api.engine import (
    InvalidTransition,
    available_batsmen,
    available_bowlers,
    record_toss,
    reset_match,
    score_delivery,
    select_bowler,
    select_new_batsman,
    select_openers,
    setup_teams,
    start_second_innings,
)
from cricket_api.match_store import MatchNotFound
from cricket_api.models import DeliveryKind, DismissalKind, MatchState
from cricket_api.scorecard import match_scorecard, state_snapshot
from cricket_api.team_setup import ConfigurationError, build_team, validate_match_setup

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("cricket_api.main")

BOUNDARY_KINDS = {DeliveryKind.FOUR, DeliveryKind.SIX}
CELEBRATION_URL = "/api/celebration.wav"

# -----------------------
# App
# -----------------------
app = FastAPI(
    title="Live Cricket Scorer API",
    version="0.1.0",
    description="Ball-by-ball scoring for two-innings limited-overs matches",
)


@app.on_event("startup")
def on_startup():
    validate_config()


@app.get("/health")
def health_check():
    return {"status": "ok", "time": datetime.utcnow().isoformat() + "Z"}


# -----------------------
# Helpers
# -----------------------
def _state_response(match_id: str, state: MatchState) -> Dict[str, Any]:
    return {
        "match_id": match_id,
        "state": state_snapshot(state),
        "available_batsmen": available_batsmen(state),
        "available_bowlers": available_bowlers(state),
    }


def _run_command(match_id: str, command, *args, **kwargs) -> MatchState:
    """
    Apply an engine command to a stored match.

    Rejected commands leave the stored state untouched.
    """
    try:
        return match_store.apply(match_id, command, *args, **kwargs)
    except MatchNotFound:
        raise HTTPException(status_code=404, detail=f"Unknown match: {match_id}")
    except InvalidTransition as e:
        logger.warning("Rejected %s on match %s: %s", command.__name__, match_id, e)
        raise HTTPException(status_code=409, detail=str(e))


# -----------------------
# Match lifecycle
# -----------------------
@app.post("/api/matches", status_code=201)
def create_match():
    match_id, state = match_store.create()
    logger.info("Created match %s", match_id)
    return _state_response(match_id, state)


@app.get("/api/matches/{match_id}")
def get_match(match_id: str):
    try:
        state = match_store.get(match_id)
    except MatchNotFound:
        raise HTTPException(status_code=404, detail=f"Unknown match: {match_id}")
    return _state_response(match_id, state)


@app.delete("/api/matches/{match_id}", status_code=204)
def delete_match(match_id: str):
    if not match_store.delete(match_id):
        raise HTTPException(status_code=404, detail=f"Unknown match: {match_id}")
    return Response(status_code=204)


@app.get("/api/matches/{match_id}/scorecard")
def get_scorecard(match_id: str):
    try:
        state = match_store.get(match_id)
    except MatchNotFound:
        raise HTTPException(status_code=404, detail=f"Unknown match: {match_id}")
    return {"match_id": match_id, "scorecard": match_scorecard(state)}


# -----------------------
# Setup + toss
# -----------------------
class TeamIn(BaseModel):
    name: str = Field(..., description="Team name, e.g. Riverside XI")
    players: List[str] = Field(default_factory=list, description="Batting order")


class SetupTeamsRequest(BaseModel):
    team1: TeamIn
    team2: TeamIn
    overs_per_innings: int = Field(20, ge=1, le=MAX_OVERS)


@app.post("/api/matches/{match_id}/teams")
def post_teams(match_id: str, req: SetupTeamsRequest):
    team1 = build_team(req.team1.name, req.team1.players)
    team2 = build_team(req.team2.name, req.team2.players)
    try:
        validate_match_setup(team1, team2, req.overs_per_innings)
    except ConfigurationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    state = _run_command(match_id, setup_teams, team1, team2, req.overs_per_innings)
    return _state_response(match_id, state)


class TossRequest(BaseModel):
    winner: int = Field(..., ge=0, le=1, description="Index of the team that won the toss")
    elected_to_bat: bool = Field(..., description="True if the toss winner bats first")


@app.post("/api/matches/{match_id}/toss")
def post_toss(match_id: str, req: TossRequest):
    state = _run_command(match_id, record_toss, req.winner, req.elected_to_bat)
    return _state_response(match_id, state)


# -----------------------
# Player selection
# -----------------------
class OpenersRequest(BaseModel):
    striker: int = Field(..., ge=0)
    non_striker: int = Field(..., ge=0)


@app.post("/api/matches/{match_id}/openers")
def post_openers(match_id: str, req: OpenersRequest):
    state = _run_command(match_id, select_openers, (req.striker, req.non_striker))
    return _state_response(match_id, state)


class PlayerRequest(BaseModel):
    player_index: int = Field(..., ge=0)


@app.post("/api/matches/{match_id}/bowler")
def post_bowler(match_id: str, req: PlayerRequest):
    state = _run_command(match_id, select_bowler, req.player_index)
    return _state_response(match_id, state)


@app.post("/api/matches/{match_id}/batsman")
def post_batsman(match_id: str, req: PlayerRequest):
    state = _run_command(match_id, select_new_batsman, req.player_index)
    return _state_response(match_id, state)


# -----------------------
# Scoring
# -----------------------
class DeliveryRequest(BaseModel):
    kind: DeliveryKind
    runs: Optional[int] = Field(None, ge=1, le=4, description="Only for bye / leg-bye")
    dismissal: DismissalKind = Field(DismissalKind.BOWLED, description="Only for wicket")


@app.post("/api/matches/{match_id}/deliveries")
def post_delivery(match_id: str, req: DeliveryRequest):
    state = _run_command(match_id, score_delivery, req.kind, runs=req.runs, dismissal=req.dismissal)
    resp = _state_response(match_id, state)
    # The client plays the tone itself; scoring never waits on audio
    resp["celebrate"] = req.kind in BOUNDARY_KINDS
    if resp["celebrate"]:
        resp["celebration_url"] = CELEBRATION_URL
    return resp


@app.post("/api/matches/{match_id}/second-innings")
def post_second_innings(match_id: str):
    state = _run_command(match_id, start_second_innings)
    return _state_response(match_id, state)


@app.post("/api/matches/{match_id}/reset")
def post_reset(match_id: str):
    state = _run_command(match_id, reset_match)
    return _state_response(match_id, state)


# -----------------------
# Boundary celebration
# -----------------------
@app.get(CELEBRATION_URL)
def get_celebration():
    chunks: List[bytes] = []
    if not play_celebration(chunks.append):
        return Response(status_code=204)
    return Response(content=chunks[0], media_type="audio/wav")
