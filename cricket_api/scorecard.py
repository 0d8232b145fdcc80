# cricket_api/scorecard.py
from __future__ import annotations

from enum import Enum
from dataclasses import fields, is_dataclass
from typing import Any, Dict, List, Optional

from cricket_api.models import InningsData, MatchState
from cricket_api.scoring_math import (
    balls_remaining,
    bowler_figures,
    dismissal_text,
    economy,
    innings_run_rate,
    over_runs,
    overs_str,
    required_run_rate,
    result_text,
    runs_needed,
    strike_rate,
)


def to_jsonable(obj: Any) -> Any:
    """
    Convert engine records to plain JSON types.

    Enums are written as their value (e.g. "no-ball"), tuples as lists.
    """
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: to_jsonable(getattr(obj, f.name)) for f in fields(obj)}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(x) for x in obj]
    return obj


def innings_scorecard(state: MatchState, innings_index: int) -> Optional[Dict[str, Any]]:
    innings: Optional[InningsData] = state.innings[innings_index]
    if innings is None:
        return None

    batting: List[dict] = []
    for b in innings.batsmen:
        batting.append({
            "name": b.name,
            "dismissal": dismissal_text(b),
            "runs": b.runs,
            "balls": b.balls,
            "fours": b.fours,
            "sixes": b.sixes,
            "strike_rate": round(strike_rate(b), 2),
        })

    bowling: List[dict] = []
    for bw in innings.bowlers:
        bowling.append({
            "name": bw.name,
            "figures": bowler_figures(bw),
            "overs": overs_str(bw.total_balls),
            "maidens": bw.maidens,
            "runs": bw.runs_conceded,
            "wickets": bw.wickets,
            "economy": round(economy(bw), 2),
        })

    return {
        "innings": innings_index + 1,
        "team": state.teams[innings.batting_team_index].name,
        "score": innings.score,
        "wickets": innings.wickets,
        "overs": overs_str(innings.total_balls),
        "run_rate": round(innings_run_rate(innings), 2),
        "extras": innings.extras,
        "over_runs": [over_runs(o) for o in innings.overs],
        "batting": batting,
        "bowling": bowling,
    }


def match_scorecard(state: MatchState) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "phase": state.phase.value,
        "teams": [t.name for t in state.teams],
        "overs_per_innings": state.overs_per_innings,
        "target": state.target,
        "innings": [innings_scorecard(state, i) for i in (0, 1) if state.innings[i] is not None],
        "result": result_text(state) or None,
    }

    if state.current_innings == 1 and state.current is not None and state.winner is None:
        rrr = required_run_rate(state)
        out["chase"] = {
            "runs_needed": runs_needed(state),
            "balls_remaining": balls_remaining(state),
            "required_run_rate": round(rrr, 2) if rrr is not None else None,
        }

    return out


def state_snapshot(state: MatchState) -> Dict[str, Any]:
    """Full read-only view of the match for a client to render."""
    data = to_jsonable(state)
    current = state.current
    data["display"] = {
        "overs": overs_str(current.total_balls) if current is not None else None,
        "run_rate": round(innings_run_rate(current), 2) if current is not None else None,
        "result": result_text(state) or None,
    }
    return data
