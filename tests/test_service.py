from __future__ import annotations

import logging

import pytest
from fastapi.testclient import TestClient

from ardublock import __version__
from ardublock.domain.models import BoardId
from ardublock_service.app import create_app


AUTH = {"Authorization": "Bearer token"}

LED_AND_MOTOR = [
    {"id": "1", "type": "led", "pins": "13", "label": "Main LED"},
    {"id": "2", "type": "dc-motor", "pins": "9", "label": "Drive Motor"},
]


@pytest.fixture(autouse=True)
def log_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("ARDUBLOCK_LOG_DIR", str(tmp_path))
    monkeypatch.delenv("ARDUBLOCK_LOG_FILE", raising=False)
    monkeypatch.delenv("ARDUBLOCK_DEBUG", raising=False)
    yield tmp_path
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


@pytest.fixture
def client():
    return TestClient(create_app(auth_token="token"))


def test_health_is_public(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True, "version": __version__, "auth_required": True}


def test_auth_required(client):
    missing = client.get("/boards")
    assert missing.status_code == 401
    assert missing.json()["detail"] == "Missing bearer token"

    wrong = client.get("/boards", headers={"Authorization": "Bearer nope"})
    assert wrong.status_code == 403

    ok = client.get("/boards", headers=AUTH)
    assert ok.status_code == 200
    ids = [board["id"] for board in ok.json()]
    assert ids == ["uno", "mega", "esp32"]


def test_no_token_means_open_access():
    client = TestClient(create_app())
    assert client.get("/components").status_code == 200
    assert client.get("/health").json()["auth_required"] is False


def test_components_and_examples(client):
    comps = {c["type"]: c for c in client.get("/components", headers=AUTH).json()}
    assert comps["ultrasonic"]["pin_labels"] == ["trig", "echo"]
    assert comps["servo"]["pin_types"] == ["pwm"]
    examples = client.get("/examples", headers=AUTH).json()
    assert "blink" in examples


def test_pin_routes(client):
    resp = client.post("/pins/parse", json={"pins": "trig:7, A0, x"}, headers=AUTH)
    assert resp.json() == {"pins": [7, "A0", "x"]}

    counts = client.post(
        "/pins/counts",
        json={"components": [{"type": "led", "pins": "13"}, {"type": "potentiometer", "pins": "A0"}]},
        headers=AUTH,
    )
    assert counts.json() == {"digital": 1, "analog": 1}


def test_validate_reports_conflicts(client):
    body = {"components": [{"type": "led", "pins": "9"}, {"type": "buzzer", "pins": "9"}]}
    report = client.post("/validate", json=body, headers=AUTH).json()
    assert report["status"] == "error"
    assert report["estimatedBlocks"] == "4-8"
    assert report["issues"][-1]["message"] == "Pin 9 is used by multiple components"


def test_validate_unknown_board(client):
    resp = client.post("/validate", json={"components": [], "board": "nano"}, headers=AUTH)
    assert resp.status_code == 400
    body = resp.json()
    assert body["reason"] == "unknown_board"
    assert "nano" in body["detail"]


def test_parse_route(client):
    resp = client.post(
        "/parse",
        json={"prompt": "Repeat 3 times, blink LED on pin 13 for 1 second", "components": LED_AND_MOTOR},
        headers=AUTH,
    )
    assert resp.json() == [
        {
            "type": "repeat",
            "count": 3,
            "actions": [{"type": "set", "component": "led", "pin": 13, "value": "blink", "duration": 1000}],
        }
    ]


def test_pseudocode_route(client):
    resp = client.post(
        "/pseudocode",
        json={"prompt": "spin DC motor on pin 9 for 2 seconds", "components": LED_AND_MOTOR},
        headers=AUTH,
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["report"]["status"] == "success"
    texts = [step["text"] for step in body["steps"]]
    assert texts[0] == "Add Program block"
    assert "Add Set Digital Pin block for pin 9 to HIGH" in texts
    assert body["steps"][-1]["blockType"] == "Set Digital Pin"


def test_pseudocode_blocked(client):
    resp = client.post(
        "/pseudocode",
        json={"prompt": "turn on LED", "components": [{"type": "laser", "pins": "3"}]},
        headers=AUTH,
    )
    assert resp.status_code == 409
    body = resp.json()
    assert body["reason"] == "generation_blocked"
    assert body["report"]["issues"][0]["message"] == "Unknown component type: laser"


def test_empty_prompt_rejected(client):
    resp = client.post("/pseudocode", json={"prompt": "   ", "components": []}, headers=AUTH)
    assert resp.status_code == 422
    assert resp.json()["reason"] == "empty_prompt"


def test_bad_custom_component_is_400(client):
    comp = {"type": "custom", "pins": "3", "customPinCount": 1, "customPinTypes": ["quantum"]}
    resp = client.post("/validate", json={"components": [comp]}, headers=AUTH)
    assert resp.status_code == 400
    assert resp.json()["reason"] == "invalid_request"


def test_sketch_uses_default_board():
    client = TestClient(create_app(default_board=BoardId.MEGA))
    resp = client.post(
        "/sketch",
        json={"prompt": "turn on LED on pin 40", "components": [{"type": "led", "pins": "40", "label": "Status"}]},
    )
    assert resp.status_code == 200
    code = resp.json()["code"]
    assert "#define STATUS_PIN 40" in code
    assert " * Model: Arduino Mega" in code
    assert "digitalWrite(40, HIGH);" in code
