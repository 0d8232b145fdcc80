# cricket_api/scoring_math.py
from __future__ import annotations

from typing import Iterable, Optional

from cricket_api.models import (
    BALLS_PER_OVER,
    TIE,
    BallEvent,
    BatsmanStats,
    BowlerStats,
    DismissalKind,
    InningsData,
    MatchState,
)


def overs_str(total_balls: int) -> str:
    """
    Cricket overs notation for a count of legal balls.

    Example: 27 balls -> "4.3" (4 overs and 3 balls).
    """
    if total_balls <= 0:
        return "0.0"
    return f"{total_balls // BALLS_PER_OVER}.{total_balls % BALLS_PER_OVER}"


def balls_to_overs_float(balls: int) -> float:
    if balls <= 0:
        return 0.0
    return balls / float(BALLS_PER_OVER)


def run_rate(runs: int, balls: int) -> float:
    overs = balls_to_overs_float(balls)
    if overs == 0.0:
        return 0.0
    return runs / overs


def innings_run_rate(innings: InningsData) -> float:
    return run_rate(innings.score, innings.total_balls)


def over_runs(balls: Iterable[BallEvent]) -> int:
    return sum(b.runs for b in balls)


# -----------------------------
# Chase helpers (second innings only)
# -----------------------------
def runs_needed(state: MatchState) -> Optional[int]:
    innings = state.current
    if state.current_innings != 1 or state.target is None or innings is None:
        return None
    return max(0, state.target - innings.score)


def balls_remaining(state: MatchState) -> Optional[int]:
    innings = state.current
    if state.current_innings != 1 or innings is None:
        return None
    return max(0, state.overs_per_innings * BALLS_PER_OVER - innings.total_balls)


def required_run_rate(state: MatchState) -> Optional[float]:
    """Runs per over still needed; None outside a chase."""
    needed = runs_needed(state)
    remaining = balls_remaining(state)
    if needed is None or remaining is None:
        return None
    return run_rate(needed, remaining)


# -----------------------------
# Player figures
# -----------------------------
def strike_rate(batsman: BatsmanStats) -> float:
    if batsman.balls == 0:
        return 0.0
    return (batsman.runs / batsman.balls) * 100


def economy(bowler: BowlerStats) -> float:
    overs = bowler.overs_bowled + bowler.balls_bowled / float(BALLS_PER_OVER)
    if overs == 0:
        return 0.0
    return bowler.runs_conceded / overs


def bowler_figures(bowler: BowlerStats) -> str:
    """O.B-M-R-W, e.g. "3.2-1-18-2"."""
    return (
        f"{bowler.overs_bowled}.{bowler.balls_bowled}-{bowler.maidens}-"
        f"{bowler.runs_conceded}-{bowler.wickets}"
    )


_DISMISSAL_PREFIX = {
    DismissalKind.BOWLED: "b",
    DismissalKind.CAUGHT: "caught b",
    DismissalKind.LBW: "lbw b",
    DismissalKind.STUMPED: "st b",
    DismissalKind.HIT_WICKET: "hit wicket b",
    DismissalKind.CAUGHT_BEHIND: "c wk b",
}


def dismissal_text(batsman: BatsmanStats) -> str:
    if not batsman.is_out:
        return "not out"
    if batsman.dismissal is None:
        return "out"
    if batsman.dismissal is DismissalKind.RUN_OUT:
        return "run out"
    bowler = batsman.bowler_name or ""
    return f"{_DISMISSAL_PREFIX[batsman.dismissal]} {bowler}".strip()


def result_text(state: MatchState) -> str:
    """
    Human-readable result line.

    - Chasing side wins: by wickets in hand.
    - Side batting first wins: by run margin.
    """
    if state.winner is None:
        return ""
    if state.winner == TIE:
        return "Match tied"

    first, second = state.innings
    winner_name = state.teams[state.winner].name
    if second is not None and state.winner == second.batting_team_index:
        wickets_left = len(state.teams[second.batting_team_index].players) - 1 - second.wickets
        return f"{winner_name} won by {wickets_left} wicket{'s' if wickets_left != 1 else ''}"

    margin = first.score - (second.score if second is not None else 0)
    return f"{winner_name} won by {margin} run{'s' if margin != 1 else ''}"
