# cricket_api/team_setup.py
from __future__ import annotations

from typing import Iterable, Tuple

from cricket_api.config import MAX_OVERS, MAX_PLAYERS, MIN_PLAYERS
from cricket_api.models import TeamInfo


class ConfigurationError(Exception):
    """Raised when a team sheet or match format cannot start a match."""
    pass


def build_team(name: str, players: Iterable[str]) -> TeamInfo:
    """Trim whitespace and drop empty rows left over from a setup form."""
    cleaned = tuple(p.strip() for p in players if p and p.strip())
    return TeamInfo(name=(name or "").strip(), players=cleaned)


def validate_team(team: TeamInfo, label: str = "team") -> None:
    if not team.name:
        raise ConfigurationError(f"{label} name must not be empty")

    if len(team.players) < MIN_PLAYERS:
        raise ConfigurationError(f"{team.name} needs at least {MIN_PLAYERS} players")

    if len(team.players) > MAX_PLAYERS:
        raise ConfigurationError(f"{team.name} cannot have more than {MAX_PLAYERS} players")

    if any(not p.strip() for p in team.players):
        raise ConfigurationError(f"{team.name} has a player with an empty name")


def validate_match_setup(team1: TeamInfo, team2: TeamInfo, overs_per_innings: int) -> Tuple[TeamInfo, TeamInfo, int]:
    """
    Caller-side checks run before engine.setup_teams.

    Returns the inputs unchanged so it can be used inline.
    """
    validate_team(team1, "team1")
    validate_team(team2, "team2")

    if team1.name.lower() == team2.name.lower():
        raise ConfigurationError("team1 and team2 must be different")

    if overs_per_innings < 1 or overs_per_innings > MAX_OVERS:
        raise ConfigurationError(f"overs_per_innings must be between 1 and {MAX_OVERS}")

    return team1, team2, overs_per_innings
