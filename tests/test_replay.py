from __future__ import annotations

from cricket_api import engine
from cricket_api.models import DeliveryKind, MatchPhase
from cricket_api.replay import matches_live_totals, replay_balls, replay_innings
from tests.factories import make_ready_state, play


def _mixed_innings():
    state = make_ready_state(overs=3)
    state = play(state, "one", "wide", "four", "dot", "no-ball", "six", "two", "dot")
    state = engine.select_bowler(state, 1)
    state = engine.score_delivery(state, DeliveryKind.LEG_BYE, runs=3)
    state = play(state, "wicket")
    state = engine.select_new_batsman(state, 2)
    return play(state, "three", "dot")


def test_replay_reproduces_live_totals():
    state = _mixed_innings()
    innings = state.current
    totals = replay_innings(innings)

    assert (totals.score, totals.wickets, totals.total_balls) == (innings.score, innings.wickets, innings.total_balls)
    assert innings.score == sum(b.runs for b in innings.balls)
    assert innings.total_balls == sum(1 for b in innings.balls if b.is_legal)
    assert matches_live_totals(innings)


def test_replay_after_all_out():
    state = play(make_ready_state(team_size=2, overs=1), "four", "dot", "wicket")
    assert state.phase is MatchPhase.INNINGS_BREAK
    totals = replay_innings(state.innings[0])
    assert (totals.score, totals.wickets, totals.total_balls) == (4, 1, 3)


def test_empty_log_replays_to_zero():
    totals = replay_balls([])
    assert (totals.score, totals.wickets, totals.total_balls) == (0, 0, 0)
