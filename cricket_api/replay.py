from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from cricket_api.models import InningsData, BallEvent


@dataclass
class InningsTotals:
    """Team totals rebuilt from a ball log."""
    score: int = 0
    wickets: int = 0
    total_balls: int = 0  # legal deliveries only

    def __str__(self) -> str:
        return f"InningsTotals(score={self.score}, wickets={self.wickets}, balls={self.total_balls})"


def apply_ball(totals: InningsTotals, ball: BallEvent) -> InningsTotals:
    """
    Update the given totals in-place from one recorded delivery.

    Returns the same instance (for chaining).
    """
    totals.score += ball.runs
    if ball.is_wicket:
        totals.wickets += 1
    if ball.is_legal:
        totals.total_balls += 1
    return totals


def replay_balls(balls: Iterable[BallEvent]) -> InningsTotals:
    totals = InningsTotals()
    for ball in balls:
        apply_ball(totals, ball)
    return totals


def replay_innings(innings: InningsData) -> InningsTotals:
    """Rebuild totals from every over of the innings, archived and in progress."""
    return replay_balls(innings.balls)


def matches_live_totals(innings: InningsData) -> bool:
    """True when the ball log accounts for the live score, wickets and balls."""
    t = replay_innings(innings)
    return (t.score, t.wickets, t.total_balls) == (innings.score, innings.wickets, innings.total_balls)
