from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from cricket_api import match_store
from main import app


@pytest.fixture
def client():
    match_store.clear()
    with TestClient(app) as c:
        yield c
    match_store.clear()


def _new_match(client, players=11, overs=2):
    match_id = client.post("/api/matches").json()["match_id"]
    body = {
        "team1": {"name": "Alpha", "players": [f"A{i}" for i in range(players)]},
        "team2": {"name": "Beta", "players": [f"B{i}" for i in range(players)]},
        "overs_per_innings": overs,
    }
    r = client.post(f"/api/matches/{match_id}/teams", json=body)
    assert r.status_code == 200
    return match_id


def _start_play(client, match_id):
    client.post(f"/api/matches/{match_id}/toss", json={"winner": 0, "elected_to_bat": True})
    client.post(f"/api/matches/{match_id}/openers", json={"striker": 0, "non_striker": 1})
    return client.post(f"/api/matches/{match_id}/bowler", json={"player_index": 0})


def test_health(client):
    assert client.get("/health").json()["status"] == "ok"


def test_setup_to_playing(client):
    match_id = _new_match(client)
    r = _start_play(client, match_id)
    assert r.status_code == 200
    data = r.json()
    assert data["state"]["phase"] == "playing"
    assert data["available_batsmen"] == list(range(2, 11))


def test_invalid_team_sheet_is_400(client):
    match_id = client.post("/api/matches").json()["match_id"]
    body = {
        "team1": {"name": "Alpha", "players": ["Only"]},
        "team2": {"name": "Beta", "players": ["B1", "B2"]},
        "overs_per_innings": 5,
    }
    r = client.post(f"/api/matches/{match_id}/teams", json=body)
    assert r.status_code == 400
    assert client.get(f"/api/matches/{match_id}").json()["state"]["phase"] == "setup"


def test_out_of_phase_command_is_409_and_state_kept(client):
    match_id = _new_match(client)
    r = client.post(f"/api/matches/{match_id}/deliveries", json={"kind": "four"})
    assert r.status_code == 409
    assert client.get(f"/api/matches/{match_id}").json()["state"]["phase"] == "toss"


def test_runs_on_a_scoring_stroke_is_409_and_state_kept(client):
    match_id = _new_match(client)
    _start_play(client, match_id)
    r = client.post(f"/api/matches/{match_id}/deliveries", json={"kind": "four", "runs": 3})
    assert r.status_code == 409
    assert client.get(f"/api/matches/{match_id}").json()["state"]["innings"][0]["score"] == 0


def test_boundary_asks_client_to_celebrate(client):
    match_id = _new_match(client)
    _start_play(client, match_id)

    r = client.post(f"/api/matches/{match_id}/deliveries", json={"kind": "six"})
    data = r.json()
    assert data["celebrate"] is True
    assert data["celebration_url"] == "/api/celebration.wav"
    assert data["state"]["innings"][0]["score"] == 6

    r = client.post(f"/api/matches/{match_id}/deliveries", json={"kind": "bye", "runs": 3})
    assert r.json()["celebrate"] is False
    assert r.json()["state"]["innings"][0]["score"] == 9


def test_wicket_then_new_batsman(client):
    match_id = _new_match(client)
    _start_play(client, match_id)

    r = client.post(f"/api/matches/{match_id}/deliveries", json={"kind": "wicket", "dismissal": "stumped"})
    innings = r.json()["state"]["innings"][0]
    assert innings["needs_new_batsman"] is True
    assert innings["batsmen"][0]["dismissal"] == "stumped"

    r = client.post(f"/api/matches/{match_id}/batsman", json={"player_index": 1})
    assert r.status_code == 409
    r = client.post(f"/api/matches/{match_id}/batsman", json={"player_index": 7})
    assert r.json()["state"]["innings"][0]["needs_new_batsman"] is False


def test_full_match_and_scorecard(client):
    match_id = _new_match(client, players=2, overs=1)
    _start_play(client, match_id)
    for kind in ("four", "dot", "wicket"):
        r = client.post(f"/api/matches/{match_id}/deliveries", json={"kind": kind})
    state = r.json()["state"]
    assert state["phase"] == "innings-break"
    assert state["target"] == 5

    client.post(f"/api/matches/{match_id}/second-innings")
    client.post(f"/api/matches/{match_id}/openers", json={"striker": 0, "non_striker": 1})
    client.post(f"/api/matches/{match_id}/bowler", json={"player_index": 1})
    r = client.post(f"/api/matches/{match_id}/deliveries", json={"kind": "six"})
    state = r.json()["state"]
    assert state["phase"] == "result"
    assert state["winner"] == 1
    assert state["display"]["result"] == "Beta won by 1 wicket"

    card = client.get(f"/api/matches/{match_id}/scorecard").json()["scorecard"]
    assert [i["score"] for i in card["innings"]] == [4, 6]

    r = client.post(f"/api/matches/{match_id}/reset")
    assert r.json()["state"]["phase"] == "setup"


def test_unknown_match_is_404(client):
    assert client.get("/api/matches/missing").status_code == 404
    assert client.post("/api/matches/missing/second-innings").status_code == 404
    assert client.delete("/api/matches/missing").status_code == 404


def test_celebration_wav(client):
    r = client.get("/api/celebration.wav")
    assert r.status_code == 200
    assert r.headers["content-type"] == "audio/wav"
    assert r.content[:4] == b"RIFF"
