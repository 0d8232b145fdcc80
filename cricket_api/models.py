from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from cricket_api.config import DEFAULT_OVERS_PER_INNINGS

BALLS_PER_OVER = 6

# Winner sentinel for a tied match (team winners are 0 or 1)
TIE = -1


# -----------------------------
# Closed enumerations
# -----------------------------
class MatchPhase(str, Enum):
    SETUP = "setup"
    TOSS = "toss"
    SELECT_BATTING = "select-batting"
    SELECT_BOWLING = "select-bowling"
    PLAYING = "playing"
    NEW_BOWLER = "new-bowler"
    INNINGS_BREAK = "innings-break"
    RESULT = "result"


class DeliveryKind(str, Enum):
    DOT = "dot"
    ONE = "one"
    TWO = "two"
    THREE = "three"
    FOUR = "four"
    SIX = "six"
    WIDE = "wide"
    NO_BALL = "no-ball"
    BYE = "bye"
    LEG_BYE = "leg-bye"
    WICKET = "wicket"


class DismissalKind(str, Enum):
    BOWLED = "bowled"
    CAUGHT = "caught"
    LBW = "lbw"
    RUN_OUT = "run-out"
    STUMPED = "stumped"
    HIT_WICKET = "hit-wicket"
    CAUGHT_BEHIND = "caught-behind"


# -----------------------------
# Records
# -----------------------------
@dataclass(frozen=True)
class TeamInfo:
    name: str
    players: Tuple[str, ...] = ()


@dataclass(frozen=True)
class BallEvent:
    """One delivery as it was scored. Never changed once appended."""
    runs: int
    is_wide: bool
    is_no_ball: bool
    is_wicket: bool
    batsman_runs: int
    extras: int
    label: str
    kind: Optional[DeliveryKind] = None

    @property
    def is_legal(self) -> bool:
        return not (self.is_wide or self.is_no_ball)


@dataclass(frozen=True)
class BatsmanStats:
    name: str
    player_index: int
    runs: int = 0
    balls: int = 0
    fours: int = 0
    sixes: int = 0
    is_out: bool = False
    dismissal: Optional[DismissalKind] = None
    bowler_name: Optional[str] = None


@dataclass(frozen=True)
class BowlerStats:
    name: str
    player_index: int
    overs_bowled: int = 0
    balls_bowled: int = 0  # legal balls in the current (incomplete) over
    runs_conceded: int = 0
    wickets: int = 0
    maidens: int = 0

    @property
    def total_balls(self) -> int:
        return self.overs_bowled * BALLS_PER_OVER + self.balls_bowled


@dataclass(frozen=True)
class InningsData:
    batting_team_index: int
    score: int = 0
    wickets: int = 0
    total_balls: int = 0  # legal deliveries only
    overs: Tuple[Tuple[BallEvent, ...], ...] = ()
    current_over: Tuple[BallEvent, ...] = ()
    batsmen: Tuple[BatsmanStats, ...] = ()
    bowlers: Tuple[BowlerStats, ...] = ()
    striker_idx: int = 0
    non_striker_idx: int = 1
    current_bowler_idx: int = -1
    needs_new_batsman: bool = False

    @property
    def bowling_team_index(self) -> int:
        return 1 - self.batting_team_index

    @property
    def balls(self) -> Tuple[BallEvent, ...]:
        """Every delivery of the innings in the order it was bowled."""
        out: Tuple[BallEvent, ...] = ()
        for over in self.overs:
            out += over
        return out + self.current_over

    @property
    def extras(self) -> int:
        return sum(b.extras for b in self.balls)

    @property
    def striker(self) -> Optional[BatsmanStats]:
        if 0 <= self.striker_idx < len(self.batsmen):
            return self.batsmen[self.striker_idx]
        return None

    @property
    def non_striker(self) -> Optional[BatsmanStats]:
        if 0 <= self.non_striker_idx < len(self.batsmen):
            return self.batsmen[self.non_striker_idx]
        return None

    @property
    def current_bowler(self) -> Optional[BowlerStats]:
        if 0 <= self.current_bowler_idx < len(self.bowlers):
            return self.bowlers[self.current_bowler_idx]
        return None


@dataclass(frozen=True)
class MatchState:
    """
    Whole-match aggregate. Each engine command returns a new instance;
    a state handed out is never modified afterwards.
    """
    phase: MatchPhase = MatchPhase.SETUP
    teams: Tuple[TeamInfo, TeamInfo] = field(
        default_factory=lambda: (TeamInfo(""), TeamInfo(""))
    )
    overs_per_innings: int = DEFAULT_OVERS_PER_INNINGS
    toss_winner: int = 0
    elected_to_bat: bool = True
    batting_first: int = 0
    current_innings: int = 0
    innings: Tuple[Optional[InningsData], Optional[InningsData]] = (None, None)
    last_completed_over: Tuple[BallEvent, ...] = ()
    winner: Optional[int] = None  # team index, TIE, or None while undecided
    target: Optional[int] = None

    @property
    def batting_team_index(self) -> int:
        if self.current_innings == 0:
            return self.batting_first
        return 1 - self.batting_first

    @property
    def bowling_team_index(self) -> int:
        return 1 - self.batting_team_index

    @property
    def current(self) -> Optional[InningsData]:
        return self.innings[self.current_innings]

    @property
    def is_tie(self) -> bool:
        return self.winner == TIE
