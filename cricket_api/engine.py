# cricket_api/engine.py
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from cricket_api.config import DEFAULT_OVERS_PER_INNINGS, NO_BALL_RUNS, WIDE_RUNS
from cricket_api.models import (
    BALLS_PER_OVER,
    TIE,
    BallEvent,
    BatsmanStats,
    BowlerStats,
    DeliveryKind,
    DismissalKind,
    InningsData,
    MatchPhase,
    MatchState,
    TeamInfo,
)

logger = logging.getLogger(__name__)

MAX_BYE_RUNS = 4


class InvalidTransition(Exception):
    """Raised when a command does not fit the current phase or names a bad player."""
    pass


# -----------------------------
# Delivery outcomes
# -----------------------------
class _Outcome(NamedTuple):
    total: int          # added to the team score
    batsman_runs: int   # credited to the striker
    extras: int
    legal: bool
    label: str
    completed_runs: int  # runs physically run, used for strike rotation


# Runs credited to the striker for each scoring stroke
BAT_RUNS: Dict[DeliveryKind, int] = {
    DeliveryKind.DOT: 0,
    DeliveryKind.ONE: 1,
    DeliveryKind.TWO: 2,
    DeliveryKind.THREE: 3,
    DeliveryKind.FOUR: 4,
    DeliveryKind.SIX: 6,
}

DOT_LABEL = "•"


def _delivery_outcome(kind: DeliveryKind, runs: Optional[int]) -> _Outcome:
    if runs is not None and kind not in (DeliveryKind.BYE, DeliveryKind.LEG_BYE):
        raise InvalidTransition(f"runs only apply to bye and leg-bye, not {kind.value}")

    if kind in BAT_RUNS:
        r = BAT_RUNS[kind]
        return _Outcome(r, r, 0, True, DOT_LABEL if r == 0 else str(r), r)

    if kind is DeliveryKind.WIDE:
        return _Outcome(WIDE_RUNS, 0, WIDE_RUNS, False, "WD", 0)

    if kind is DeliveryKind.NO_BALL:
        return _Outcome(NO_BALL_RUNS, 0, NO_BALL_RUNS, False, "NB", 0)

    if kind in (DeliveryKind.BYE, DeliveryKind.LEG_BYE):
        r = 1 if runs is None else int(runs)
        if r < 1 or r > MAX_BYE_RUNS:
            raise InvalidTransition(f"{kind.value} runs must be between 1 and {MAX_BYE_RUNS}")
        suffix = "B" if kind is DeliveryKind.BYE else "LB"
        return _Outcome(r, 0, r, True, f"{r}{suffix}", r)

    if kind is DeliveryKind.WICKET:
        return _Outcome(0, 0, 0, True, "W", 0)

    raise InvalidTransition(f"Unknown delivery kind: {kind}")


# -----------------------------
# Small helpers
# -----------------------------
def _require_phase(state: MatchState, *phases: MatchPhase) -> None:
    if state.phase not in phases:
        allowed = ", ".join(p.value for p in phases)
        raise InvalidTransition(f"Command not valid in phase '{state.phase.value}' (expected {allowed})")


def _require_player(team: TeamInfo, player_index: int) -> None:
    if player_index < 0 or player_index >= len(team.players):
        raise InvalidTransition(f"Player index {player_index} out of range for {team.name or 'team'}")


def _current_innings(state: MatchState) -> InningsData:
    innings = state.current
    if innings is None:
        raise InvalidTransition("No innings in progress")
    return innings


def _replace_at(items: Tuple, idx: int, value) -> Tuple:
    return items[:idx] + (value,) + items[idx + 1:]


def _with_innings(state: MatchState, innings: InningsData) -> Tuple[Optional[InningsData], Optional[InningsData]]:
    pair = list(state.innings)
    pair[state.current_innings] = innings
    return pair[0], pair[1]


def _swap_strike(innings: InningsData) -> InningsData:
    return replace(innings, striker_idx=innings.non_striker_idx, non_striker_idx=innings.striker_idx)


def _legal_count(balls: Sequence[BallEvent]) -> int:
    return sum(1 for b in balls if b.is_legal)


def _close_bowler_over(bowler: BowlerStats, over: Sequence[BallEvent]) -> BowlerStats:
    """Count a finished over in the bowler's figures; a scoreless over is a maiden."""
    return replace(
        bowler,
        overs_bowled=bowler.overs_bowled + 1,
        balls_bowled=0,
        maidens=bowler.maidens + (1 if sum(b.runs for b in over) == 0 else 0),
    )


# -----------------------------
# Setup commands
# -----------------------------
def initial_state(overs_per_innings: int = DEFAULT_OVERS_PER_INNINGS) -> MatchState:
    return MatchState(overs_per_innings=overs_per_innings)


def setup_teams(state: MatchState, team1: TeamInfo, team2: TeamInfo, overs_per_innings: int) -> MatchState:
    """
    Store both sides and the innings length.

    Names and squad sizes are not checked here; callers run
    team_setup.validate_match_setup before this command.
    """
    _require_phase(state, MatchPhase.SETUP)
    return replace(
        state,
        teams=(team1, team2),
        overs_per_innings=int(overs_per_innings),
        phase=MatchPhase.TOSS,
    )


def record_toss(state: MatchState, winner_team_index: int, elected_to_bat: bool) -> MatchState:
    _require_phase(state, MatchPhase.TOSS)
    if winner_team_index not in (0, 1):
        raise InvalidTransition(f"Toss winner must be 0 or 1, got {winner_team_index}")

    batting_first = winner_team_index if elected_to_bat else 1 - winner_team_index
    return replace(
        state,
        toss_winner=winner_team_index,
        elected_to_bat=bool(elected_to_bat),
        batting_first=batting_first,
        current_innings=0,
        phase=MatchPhase.SELECT_BATTING,
    )


def select_openers(state: MatchState, player_indices: Sequence[int]) -> MatchState:
    """
    Open the active innings with two batsmen.

    The first index takes strike, the second starts at the non-striker's end.
    """
    _require_phase(state, MatchPhase.SELECT_BATTING)
    if len(player_indices) != 2:
        raise InvalidTransition("Exactly two openers are required")

    striker, non_striker = int(player_indices[0]), int(player_indices[1])
    if striker == non_striker:
        raise InvalidTransition("Openers must be two different players")

    batting_idx = state.batting_team_index
    team = state.teams[batting_idx]
    _require_player(team, striker)
    _require_player(team, non_striker)

    innings = InningsData(
        batting_team_index=batting_idx,
        batsmen=(
            BatsmanStats(name=team.players[striker], player_index=striker),
            BatsmanStats(name=team.players[non_striker], player_index=non_striker),
        ),
        striker_idx=0,
        non_striker_idx=1,
        current_bowler_idx=-1,
    )
    return replace(state, innings=_with_innings(state, innings), phase=MatchPhase.SELECT_BOWLING)


def select_bowler(state: MatchState, player_index: int) -> MatchState:
    """
    Hand the ball to a bowler.

    A bowler returning for another spell keeps their figures. At an over
    break the bowler who just finished cannot be chosen again.
    """
    _require_phase(state, MatchPhase.SELECT_BOWLING, MatchPhase.NEW_BOWLER)
    innings = _current_innings(state)
    team = state.teams[innings.bowling_team_index]
    _require_player(team, player_index)

    if state.phase is MatchPhase.NEW_BOWLER:
        last = innings.current_bowler
        if last is not None and last.player_index == player_index:
            raise InvalidTransition(f"{last.name} bowled the previous over")

    bowlers = innings.bowlers
    bowler_idx = next((i for i, b in enumerate(bowlers) if b.player_index == player_index), -1)
    if bowler_idx == -1:
        bowlers = bowlers + (BowlerStats(name=team.players[player_index], player_index=player_index),)
        bowler_idx = len(bowlers) - 1

    innings = replace(innings, bowlers=bowlers, current_bowler_idx=bowler_idx)
    return replace(state, innings=_with_innings(state, innings), phase=MatchPhase.PLAYING)


# -----------------------------
# Innings / match endings
# -----------------------------
def _end_innings(state: MatchState, innings: InningsData, last_over: Tuple[BallEvent, ...]) -> MatchState:
    pair = _with_innings(state, innings)

    if state.current_innings == 0:
        target = innings.score + 1
        logger.info(
            "First innings closed at %d/%d; target %d", innings.score, innings.wickets, target
        )
        return replace(
            state,
            innings=pair,
            phase=MatchPhase.INNINGS_BREAK,
            target=target,
            last_completed_over=last_over,
        )

    first_score = state.innings[0].score
    if innings.score > first_score:
        winner = innings.batting_team_index
    elif innings.score < first_score:
        winner = innings.bowling_team_index
    else:
        winner = TIE

    logger.info("Match finished: %d vs %d, winner=%s", first_score, innings.score, winner)
    return replace(
        state,
        innings=pair,
        phase=MatchPhase.RESULT,
        winner=winner,
        last_completed_over=last_over,
    )


def _target_reached(state: MatchState, innings: InningsData) -> bool:
    return state.current_innings == 1 and state.target is not None and innings.score >= state.target


# -----------------------------
# Ball-by-ball scoring
# -----------------------------
def score_delivery(
    state: MatchState,
    kind: DeliveryKind,
    runs: Optional[int] = None,
    dismissal: DismissalKind = DismissalKind.BOWLED,
) -> MatchState:
    """
    Apply one delivery to the active innings.

    Rules:
    - Wides and no-balls are illegal: they add penalty runs but do not count
      towards the over, the striker's balls faced or strike rotation.
    - Byes and leg-byes (runs=1..4) are legal extras; odd byes rotate strike.
    - Every wicket is credited to the current bowler, whatever the dismissal.
    - Six legal balls close the over; batsmen change ends unless the last
      ball took a wicket.
    - All out, overs exhausted or target reached end the innings/match.
    """
    _require_phase(state, MatchPhase.PLAYING)
    try:
        kind = DeliveryKind(kind)
        dismissal = DismissalKind(dismissal)
    except ValueError as e:
        raise InvalidTransition(str(e)) from e
    innings = _current_innings(state)
    if innings.needs_new_batsman:
        raise InvalidTransition("A new batsman must be selected before the next delivery")

    bowler = innings.current_bowler
    if bowler is None:
        raise InvalidTransition("No bowler selected")

    outcome = _delivery_outcome(kind, runs)
    is_wicket = kind is DeliveryKind.WICKET

    # 1) Striker
    striker = innings.batsmen[innings.striker_idx]
    if outcome.legal:
        striker = replace(striker, balls=striker.balls + 1)
    if kind in BAT_RUNS:
        striker = replace(
            striker,
            runs=striker.runs + outcome.batsman_runs,
            fours=striker.fours + (1 if outcome.batsman_runs == 4 else 0),
            sixes=striker.sixes + (1 if outcome.batsman_runs == 6 else 0),
        )
    if is_wicket:
        striker = replace(striker, is_out=True, dismissal=dismissal, bowler_name=bowler.name)

    # 2) Bowler
    bowler = replace(
        bowler,
        balls_bowled=bowler.balls_bowled + (1 if outcome.legal else 0),
        runs_conceded=bowler.runs_conceded + outcome.total,
        wickets=bowler.wickets + (1 if is_wicket else 0),
    )

    # 3) Ball log + team totals
    ball = BallEvent(
        runs=outcome.total,
        is_wide=kind is DeliveryKind.WIDE,
        is_no_ball=kind is DeliveryKind.NO_BALL,
        is_wicket=is_wicket,
        batsman_runs=outcome.batsman_runs,
        extras=outcome.extras,
        label=outcome.label,
        kind=kind,
    )
    innings = replace(
        innings,
        score=innings.score + outcome.total,
        wickets=innings.wickets + (1 if is_wicket else 0),
        total_balls=innings.total_balls + (1 if outcome.legal else 0),
        current_over=innings.current_over + (ball,),
        batsmen=_replace_at(innings.batsmen, innings.striker_idx, striker),
        bowlers=_replace_at(innings.bowlers, innings.current_bowler_idx, bowler),
    )

    # 4) Wicket: all out ends the innings straight away
    if is_wicket:
        players = len(state.teams[innings.batting_team_index].players)
        if innings.wickets >= players - 1:
            if _legal_count(innings.current_over) >= BALLS_PER_OVER:
                innings = replace(
                    innings,
                    bowlers=_replace_at(
                        innings.bowlers,
                        innings.current_bowler_idx,
                        _close_bowler_over(innings.bowlers[innings.current_bowler_idx], innings.current_over),
                    ),
                )
            return _end_innings(state, innings, innings.current_over)
        innings = replace(innings, needs_new_batsman=True)

    # 5) Odd runs: batsmen crossed
    if not is_wicket and outcome.legal and outcome.completed_runs % 2 == 1:
        innings = _swap_strike(innings)

    # 6) Over completion
    completed_over: Optional[Tuple[BallEvent, ...]] = None
    if _legal_count(innings.current_over) >= BALLS_PER_OVER:
        completed_over = innings.current_over
        bowler = _close_bowler_over(innings.bowlers[innings.current_bowler_idx], completed_over)
        innings = replace(
            innings,
            overs=innings.overs + (completed_over,),
            current_over=(),
            bowlers=_replace_at(innings.bowlers, innings.current_bowler_idx, bowler),
        )
        if not is_wicket:
            innings = _swap_strike(innings)

        if len(innings.overs) >= state.overs_per_innings:
            return _end_innings(state, innings, completed_over)

    # 7) Chase complete
    if _target_reached(state, innings):
        logger.info("Target %d reached at %d/%d", state.target, innings.score, innings.wickets)
        return replace(
            state,
            innings=_with_innings(state, innings),
            phase=MatchPhase.RESULT,
            winner=innings.batting_team_index,
            last_completed_over=completed_over if completed_over is not None else innings.current_over,
        )

    if completed_over is not None:
        return replace(
            state,
            innings=_with_innings(state, innings),
            phase=MatchPhase.NEW_BOWLER,
            last_completed_over=completed_over,
        )

    return replace(state, innings=_with_innings(state, innings))


# -----------------------------
# Between-ball commands
# -----------------------------
def select_new_batsman(state: MatchState, player_index: int) -> MatchState:
    """Send in the next batsman on strike after a wicket. Phase is unchanged."""
    _require_phase(state, MatchPhase.PLAYING, MatchPhase.NEW_BOWLER)
    innings = _current_innings(state)
    if not innings.needs_new_batsman:
        raise InvalidTransition("No new batsman is required")

    team = state.teams[innings.batting_team_index]
    _require_player(team, player_index)
    if any(b.player_index == player_index for b in innings.batsmen):
        raise InvalidTransition(f"{team.players[player_index]} has already batted")

    batsmen = innings.batsmen + (BatsmanStats(name=team.players[player_index], player_index=player_index),)
    innings = replace(
        innings,
        batsmen=batsmen,
        striker_idx=len(batsmen) - 1,
        needs_new_batsman=False,
    )
    return replace(state, innings=_with_innings(state, innings))


def start_second_innings(state: MatchState) -> MatchState:
    _require_phase(state, MatchPhase.INNINGS_BREAK)
    return replace(state, current_innings=1, phase=MatchPhase.SELECT_BATTING, last_completed_over=())


def reset_match(state: Optional[MatchState] = None) -> MatchState:
    """Throw the match away; the argument is accepted so every command shares a shape."""
    return initial_state()


# -----------------------------
# Selection queries
# -----------------------------
def available_batsmen(state: MatchState) -> List[int]:
    """Batting-side player indices that have not batted in the active innings."""
    innings = state.current
    team = state.teams[state.batting_team_index]
    used = {b.player_index for b in innings.batsmen} if innings is not None else set()
    return [i for i in range(len(team.players)) if i not in used]


def available_bowlers(state: MatchState) -> List[int]:
    """Bowling-side player indices eligible for the next over."""
    innings = state.current
    team = state.teams[state.bowling_team_index]
    excluded = -1
    if state.phase is MatchPhase.NEW_BOWLER and innings is not None and innings.current_bowler is not None:
        excluded = innings.current_bowler.player_index
    return [i for i in range(len(team.players)) if i != excluded]
