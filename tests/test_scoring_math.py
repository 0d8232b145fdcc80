from __future__ import annotations

import pytest

from cricket_api import engine
from cricket_api.models import BatsmanStats, BowlerStats, DismissalKind
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
    run_rate,
    runs_needed,
    strike_rate,
)
from tests.factories import make_ready_state, make_second_innings_state, play


@pytest.mark.parametrize("balls,expected", [(0, "0.0"), (5, "0.5"), (6, "1.0"), (27, "4.3"), (120, "20.0")])
def test_overs_str(balls, expected):
    assert overs_str(balls) == expected


def test_run_rate_is_runs_per_six_balls():
    assert run_rate(30, 18) == pytest.approx(10.0)
    assert run_rate(10, 0) == 0.0


def test_innings_run_rate_ignores_wides_in_ball_count():
    state = play(make_ready_state(), "four", "wide", "two")
    assert innings_run_rate(state.current) == pytest.approx(7 / 2 * 6)
    assert over_runs(state.current.current_over) == 7


def test_strike_rate_and_economy():
    assert strike_rate(BatsmanStats("A", 0, runs=45, balls=30)) == pytest.approx(150.0)
    assert strike_rate(BatsmanStats("A", 0)) == 0.0

    bowler = BowlerStats("B", 0, overs_bowled=3, balls_bowled=3, runs_conceded=28)
    assert economy(bowler) == pytest.approx(8.0)
    assert economy(BowlerStats("B", 0)) == 0.0
    assert bowler_figures(BowlerStats("B", 0, 3, 2, 18, 2, 1)) == "3.2-1-18-2"


def test_dismissal_text():
    assert dismissal_text(BatsmanStats("A", 0)) == "not out"
    bowled = BatsmanStats("A", 0, is_out=True, dismissal=DismissalKind.BOWLED, bowler_name="Khan")
    assert dismissal_text(bowled) == "b Khan"
    lbw = BatsmanStats("A", 0, is_out=True, dismissal=DismissalKind.LBW, bowler_name="Khan")
    assert dismissal_text(lbw) == "lbw b Khan"
    run_out = BatsmanStats("A", 0, is_out=True, dismissal=DismissalKind.RUN_OUT, bowler_name="Khan")
    assert dismissal_text(run_out) == "run out"


def test_chase_helpers_only_apply_to_second_innings():
    first = make_ready_state()
    assert runs_needed(first) is None
    assert balls_remaining(first) is None
    assert required_run_rate(first) is None

    state = play(make_second_innings_state(59), "four", "dot")
    assert state.target == 60
    assert runs_needed(state) == 56
    assert balls_remaining(state) == 118
    assert required_run_rate(state) == pytest.approx(56 / 118 * 6)


def test_result_text_for_each_outcome():
    state = make_second_innings_state(3)
    state = play(state, "four")
    assert result_text(state) == "Beta won by 10 wickets"

    state = play(make_ready_state(team_size=2, overs=1), "six", "dot", "dot", "dot", "dot", "dot")
    state = engine.start_second_innings(state)
    state = engine.select_openers(state, (0, 1))
    state = engine.select_bowler(state, 0)
    state = play(state, "one", "wicket")
    assert result_text(state) == "Alpha won by 5 runs"

    assert result_text(make_ready_state()) == ""
