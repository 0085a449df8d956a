import time

import pytest
from fastapi.testclient import TestClient

from services.dashboard_service.app import create_app
from services.dashboard_service.runtime import DashboardSettings


def _env(payload: dict) -> dict:
    return {
        "meta": {
            "message_id": "m_test_000000001",
            "timestamp_ms": int(time.time() * 1000),
            "source": "test",
            "type": "dashboard.command",
            "session_id": "s_test",
            "trace": {"trace_id": "trace_test_0001", "span_id": "span_test_0001", "tags": {}},
        },
        "payload": payload,
    }


@pytest.fixture
def client():
    app = create_app(DashboardSettings(autostart=False))
    with TestClient(app) as c:
        yield c


def test_health(client: TestClient) -> None:
    assert client.get("/health").json() == {"ok": True}


def test_state_envelope(client: TestClient) -> None:
    body = client.get("/state").json()
    assert body["meta"]["source"] == "dashboard"
    assert body["meta"]["type"] == "dashboard.state"
    payload = body["payload"]
    assert payload["snapshot"] == {"speed": 0, "rpm": 0, "fuel": 100, "temperature": 0, "distance": 0}
    assert payload["readouts"]["fuel"] == "100%"
    assert payload["ticker"]["running"] is False


def test_action_endpoints(client: TestClient) -> None:
    for _ in range(3):
        body = client.post("/accelerate").json()
    assert body["meta"]["type"] == "dashboard.event"
    assert body["payload"]["event"] == "state_changed"
    assert body["payload"]["state"]["speed"] == 30
    assert body["payload"]["state"]["rpm"] == 1500

    body = client.post("/brake").json()
    assert body["payload"]["state"]["speed"] == 20

    body = client.post("/refuel").json()
    assert body["payload"]["state"] == {"speed": 0, "rpm": 0, "fuel": 100, "temperature": 0, "distance": 0}


def test_command_keeps_session_and_trace(client: TestClient) -> None:
    req = _env({"action": "accelerate"})
    body = client.post("/command", json=req).json()
    assert body["meta"]["session_id"] == "s_test"
    assert body["meta"]["trace"]["trace_id"] == "trace_test_0001"
    assert body["meta"]["trace"]["parent_span_id"] == "span_test_0001"

    body = client.post("/command", json=_env({"action": "tick"})).json()
    assert body["payload"]["action"] == "tick"
    assert body["payload"]["state"]["distance"] == pytest.approx(1.0)
    assert body["payload"]["state"]["temperature"] == 5


def test_unknown_command_is_rejected(client: TestClient) -> None:
    body = client.post("/command", json=_env({"action": "fly"})).json()
    assert body["payload"]["event"] == "command_rejected"
    assert body["payload"]["error"]["code"] == "unknown_command"


def test_malformed_command_is_400(client: TestClient) -> None:
    assert client.post("/command", json=_env({})).status_code == 400
    assert client.post("/command", json=_env({"action": "brake", "args": {"x": 1}})).status_code == 400


def test_malformed_meta_is_400(client: TestClient) -> None:
    assert client.post("/command", json={"meta": "x", "payload": {"action": "brake"}}).status_code == 400
    assert client.post("/command", json={"meta": {"trace": "t"}, "payload": {"action": "brake"}}).status_code == 400
    assert client.post("/command", json={"meta": {"session_id": 7}, "payload": {"action": "brake"}}).status_code == 400
    assert client.post("/command", json={"meta": {}, "payload": "brake"}).status_code == 400
    # no meta at all is still accepted
    body = client.post("/command", json={"payload": {"action": "brake"}}).json()
    assert body["meta"]["session_id"] == "demo"
    assert body["payload"]["event"] == "state_changed"


def test_accelerate_on_empty_tank(client: TestClient) -> None:
    for _ in range(10):
        client.post("/accelerate")
    fuel = 100.0
    while fuel > 0:
        fuel = client.post("/command", json=_env({"action": "tick"})).json()["payload"]["state"]["fuel"]

    body = client.post("/accelerate").json()
    payload = body["payload"]
    assert payload["event"] == "command_rejected"
    assert payload["error"]["code"] == "fuel_empty"
    assert payload["error"]["retryable"] is False
    assert payload["state"]["speed"] == 100


def test_ticker_start_stop(client: TestClient) -> None:
    started = client.post("/ticker/start").json()
    assert started["changed"] is True
    assert started["running"] is True
    assert client.post("/ticker/start").json()["changed"] is False

    stopped = client.post("/ticker/stop").json()
    assert stopped["changed"] is True
    assert stopped["running"] is False
    assert client.get("/ticker").json()["running"] is False


def test_websocket_pushes_frames(client: TestClient) -> None:
    with client.websocket_connect("/ws/dashboard") as ws:
        first = ws.receive_json()
        assert first["meta"]["type"] == "dashboard.state"

        for _ in range(9):
            ws.send_json(_env({"action": "accelerate"}))

        received = [ws.receive_json() for _ in range(18)]
        events = [m for m in received if m["meta"]["type"] == "dashboard.event"]
        frames = [m for m in received if m["meta"]["type"] == "dashboard.update"]
        assert len(events) == 9
        assert len(frames) == 9
        assert events[-1]["payload"]["state"]["speed"] == 90
        assert frames[-1]["payload"]["readouts"]["speed"] == "90 km/h"
        fired = [a["code"] for f in frames for a in f["payload"]["alerts"]]
        assert fired == ["overspeed"]


def test_websocket_rejects_bad_messages(client: TestClient) -> None:
    with client.websocket_connect("/ws/dashboard") as ws:
        ws.receive_json()
        ws.send_text("not json")
        assert ws.receive_json()["ok"] is False
        ws.send_json({"payload": {"action": "brake"}})
        assert ws.receive_json()["ok"] is False
