from __future__ import annotations

import pytest

from cricket_api.models import TeamInfo
from cricket_api.team_setup import ConfigurationError, build_team, validate_match_setup, validate_team
from tests.factories import make_team


def test_build_team_trims_and_drops_blank_rows():
    team = build_team("  Alpha ", ["Ann ", "", "  ", "Bo"])
    assert team == TeamInfo("Alpha", ("Ann", "Bo"))


@pytest.mark.parametrize(
    "team",
    [
        TeamInfo("", ("A", "B")),
        TeamInfo("Solo", ("A",)),
        TeamInfo("Crowd", tuple(str(i) for i in range(12))),
        TeamInfo("Blank", ("A", " ")),
    ],
)
def test_invalid_teams_raise_configuration_error(team):
    with pytest.raises(ConfigurationError):
        validate_team(team)


def test_match_setup_checks_overs_and_distinct_names():
    validate_match_setup(make_team("Alpha", 2), make_team("Beta", 11), 20)

    with pytest.raises(ConfigurationError):
        validate_match_setup(make_team("Alpha"), make_team("alpha"), 20)
    with pytest.raises(ConfigurationError):
        validate_match_setup(make_team("Alpha"), make_team("Beta"), 0)
    with pytest.raises(ConfigurationError):
        validate_match_setup(make_team("Alpha"), make_team("Beta"), 51)
