from __future__ import annotations

from fastapi.testclient import TestClient

from microgames.catalog import Catalog
from microgames.screens import RecordingScreenLoader
from microgames.session import SessionOrchestrator


def test_info_and_catalog(client_and_redis) -> None:
    client, _ = client_and_redis

    assert client.get("/healthcheck").json() == {"status": "ok"}
    assert client.get("/info").json()["name"] == "microgames"

    ids = [m["id"] for m in client.get("/catalog").json()["microgames"]]
    assert ids == ["alpha", "bravo", "charlie"]


def test_full_round_over_http(client_and_redis) -> None:
    client, _ = client_and_redis

    state = client.get("/session").json()
    assert state["phase"] == "startup"
    assert state["active"] is False

    started = client.post("/session/start").json()
    assert started["phase"] == "command"
    assert started["lives"] == 3
    assert started["score"] == 0
    assert started["current"]["id"] in {"alpha", "bravo", "charlie"}

    playing = client.post("/session/load_next", json={"time_limit": 2.0}).json()
    assert playing["phase"] == "microgame"
    assert playing["time_remaining"] == 2.0

    ticked = client.post("/session/tick", json={"delta": 0.5}).json()
    assert ticked["time_remaining"] == 1.5

    bonus = client.post("/session/bonus_time", json={"seconds": 10}).json()
    assert bonus["time_remaining"] == 4.0

    won = client.post("/session/won").json()
    assert won["score"] == 1
    assert won["phase"] == "command"

    client.post("/session/load_next")
    timed_out = client.post("/session/tick", json={"delta": 30}).json()
    assert timed_out["session"]["lives"] == 2
    assert timed_out["session"]["phase"] == "command"

    quit_ = client.post("/session/quit").json()
    assert quit_["phase"] == "startup"
    assert quit_["current"] is None


def test_game_over_records_high_score(client_and_redis) -> None:
    client, r = client_and_redis

    client.post("/session/restart")
    client.post("/session/won")
    client.post("/session/won")
    for _ in range(3):
        state = client.post("/session/lost").json()
    assert state["phase"] == "game_over"
    assert state["active"] is False

    # Late outcome after the session ended changes nothing.
    assert client.post("/session/won").json()["score"] == 2

    assert client.get("/high_score").json()["high_score"] == 0
    recorded = client.post("/high_score/record").json()
    assert recorded == {"high_score": 2, "is_new": True}
    assert r.get("microgames:high_score") == "2"
    assert client.post("/high_score/record").json() == {"high_score": 2, "is_new": False}


def test_validation_errors(client_and_redis) -> None:
    client, _ = client_and_redis
    assert client.post("/session/tick", json={"delta": -1}).status_code == 422
    assert client.post("/session/load_next", json={"time_limit": 0}).status_code == 422


def test_empty_catalog_start_is_a_conflict(client_and_redis) -> None:
    client, _ = client_and_redis
    app = client.app

    original = app.state.session
    app.state.session = SessionOrchestrator(catalog=Catalog.from_descriptors([]), screens=RecordingScreenLoader())
    try:
        resp = client.post("/session/start")
        assert resp.status_code == 409
        assert "empty" in resp.json()["detail"]
        assert client.get("/session").json()["phase"] == "startup"
    finally:
        app.state.session = original


def test_ws_receives_screen_requests(client_and_redis) -> None:
    client: TestClient = client_and_redis[0]

    client.post("/session/quit")
    with client.websocket_connect("/ws/session") as ws:
        client.post("/session/start")

        msg = ws.receive_json()
        assert msg == {"type": "load_screen", "name": "CommandScene"}

        update = ws.receive_json()
        assert update["type"] == "session_updated"
        assert update["session"]["phase"] == "command"
