from __future__ import annotations

import pytest

from treechess.config import Config, SearchConfig
from web import create_app


@pytest.fixture
def client():
    config = Config(search=SearchConfig(depth=1, strategy="alphabeta"))
    return create_app(config).test_client()


def test_new_game(client):
    r = client.post("/api/new", json={})
    assert r.status_code == 200
    data = r.get_json()
    assert len(data["legal_moves"]) == 20
    assert data["ai_move"] is None
    assert data["turn"] == "white"


def test_move_gets_ai_reply(client):
    client.post("/api/new", json={})
    r = client.post("/api/move", json={"move": "e2e4", "depth": 2})
    assert r.status_code == 200
    data = r.get_json()
    assert data["ai_move"]
    assert data["evaluated_moves"] > 0
    assert data["turn"] == "white"
    assert data["last_move"] == data["ai_move"]


def test_ai_moves_first_when_player_is_black(client):
    r = client.post("/api/new", json={"color": "black", "strategy": "naive"})
    data = r.get_json()
    assert r.status_code == 200
    assert data["ai_move"]
    assert data["turn"] == "black"
    assert data["pre_fen"].endswith(" w")
    assert data["evaluated_moves"] == 20


def test_illegal_move_rejected(client):
    client.post("/api/new", json={})
    r = client.post("/api/move", json={"move": "e2e5"})
    assert r.status_code == 400
    assert "error" in r.get_json()
    r = client.post("/api/move", json={})
    assert r.status_code == 400


@pytest.mark.parametrize(
    "payload",
    [
        {"fen": "not a fen"},
        {"depth": 0},
        {"strategy": "mcts"},
    ],
)
def test_bad_new_game_rejected(client, payload):
    client.post("/api/new", json={})
    client.post("/api/move", json={"move": "e2e4"})
    r = client.post("/api/new", json=payload)
    assert r.status_code == 400
    # the running game is untouched
    state = client.get("/api/state").get_json()
    assert state["last_move"] is not None


def test_player_delivers_mate(client):
    r = client.post("/api/new", json={"fen": "6k1/5ppp/8/8/8/8/5PPP/R5K1 w - - 0 1"})
    assert r.status_code == 200
    r = client.post("/api/move", json={"move": "a1a8"})
    data = r.get_json()
    assert data["game_over"] is True
    assert data["status"] == "checkmate"
    assert data["result"] == "1-0"
    assert data["ai_move"] is None


def test_state(client):
    client.post("/api/new", json={})
    r = client.get("/api/state")
    assert r.status_code == 200
    assert r.get_json()["status"] == "ongoing"
