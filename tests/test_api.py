"""HTTP and websocket surface, with the gateway replaced by a mock."""

from __future__ import annotations

import base64
import json
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from academia.errors import MICROPHONE_PERMISSION_MESSAGE
from academia.main import app
from academia.routers.shell import get_client_factory

from conftest import FakeLiveConnection, live_session, make_client, media

QUIZ = [
    {"question": "2+2?", "options": ["3", "4"], "correctAnswer": "4"},
    {"question": "3+3?", "options": ["6", "7"], "correctAnswer": "6"},
]


@pytest.fixture
def gateway():
    return make_client(generate="You are doing great.")


@pytest.fixture
def api(gateway):
    app.dependency_overrides[get_client_factory] = lambda: (lambda: gateway)
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def new_shell(api, view=None):
    r = api.post("/shell", json={"view": view} if view else None)
    assert r.status_code == 200
    return r.json()


def test_info(api):
    r = api.get("/info")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_create_starts_on_dashboard(api):
    state = new_shell(api)
    assert state["current_view"] == "dashboard"
    assert state["panel"]["status"] == "in_flight"
    assert state["chat"]["is_open"] is False
    for _ in range(50):
        panel = api.get(f"/shell/{state['shell_id']}").json()["panel"]
        if panel["status"] != "in_flight":
            break
    assert panel["report"] == "You are doing great."


def test_navigate_and_unknown_shell(api):
    shell_id = new_shell(api)["shell_id"]
    r = api.post(f"/shell/{shell_id}/navigate", json={"view": "writer"})
    assert r.json()["current_view"] == "writer"
    assert api.post(f"/shell/{shell_id}/navigate", json={"view": "nowhere"}).status_code == 422
    assert api.get("/shell/missing").status_code == 404


def test_feature_call_on_wrong_panel_conflicts(api):
    shell_id = new_shell(api)["shell_id"]
    r = api.post(f"/shell/{shell_id}/writer/generate", json={"prompt": "Essay"})
    assert r.status_code == 409


def test_delete_shell(api):
    shell_id = new_shell(api)["shell_id"]
    assert api.delete(f"/shell/{shell_id}").status_code == 200
    assert api.get(f"/shell/{shell_id}").status_code == 404
    assert api.delete(f"/shell/{shell_id}").status_code == 404


def test_writer_generate(api, gateway):
    shell_id = new_shell(api, "writer")["shell_id"]
    gateway.generate.return_value = "An essay."
    r = api.post(f"/shell/{shell_id}/writer/generate", json={"mode": "write", "prompt": "Tides"})
    body = r.json()
    assert body["status"] == "success"
    assert body["result"] == "An essay."


def test_studier_quiz_flow(api, gateway):
    gateway.generate_structured.return_value = json.dumps(QUIZ)
    shell_id = new_shell(api, "studier")["shell_id"]
    base = f"/shell/{shell_id}/studier"
    assert api.post(f"{base}/submit").status_code == 400
    body = api.post(f"{base}/generate", json={"mode": "quiz", "notes": "arithmetic"}).json()
    assert len(body["quiz"]) == 2
    api.post(f"{base}/answer", json={"index": 0, "option": "4"})
    assert api.post(f"{base}/answer", json={"index": 1, "option": "9"}).status_code == 400
    body = api.post(f"{base}/submit").json()
    assert body["score_text"] == "1 out of 2"
    body = api.post(f"{base}/retry").json()
    assert body["quiz"] == []


def test_planner_tasks(api):
    shell_id = new_shell(api, "planner")["shell_id"]
    base = f"/shell/{shell_id}/planner"
    body = api.post(f"{base}/tasks", json={"title": "Revise", "due_date": "2024-11-02"}).json()
    assert body["tasks"][-1]["id"] == 4
    assert api.post(f"{base}/tasks/4/toggle").json()["tasks"][-1]["completed"] is True
    assert api.delete(f"{base}/tasks/99").status_code == 404
    assert api.post(f"{base}/plan", json={"topic": "WWII", "days": 45}).status_code == 422


def test_visualizer_image_download(api, gateway):
    gateway.generate_image.return_value = media("image/jpeg", base64.b64encode(b"jpeg-bytes").decode())
    shell_id = new_shell(api, "visualizer")["shell_id"]
    base = f"/shell/{shell_id}/visualizer"
    assert api.get(f"{base}/image").status_code == 404
    api.post(f"{base}/generate", json={"prompt": "a fox", "aspect_ratio": "4:3"})
    r = api.get(f"{base}/image")
    assert r.content == b"jpeg-bytes"
    assert r.headers["content-type"] == "image/jpeg"
    assert "attachment" in r.headers["content-disposition"]


def test_analyzer_upload(api, gateway):
    gateway.analyze_image.return_value = "A leaf."
    shell_id = new_shell(api, "analyzer")["shell_id"]
    base = f"/shell/{shell_id}/analyzer"
    bad = api.post(f"{base}/image", files={"file": ("notes.txt", b"text", "text/plain")})
    assert bad.status_code == 400
    api.post(f"{base}/image", files={"file": ("leaf.png", b"png", "image/png")})
    body = api.post(f"{base}/analyze", json={}).json()
    assert body["analysis"] == "A leaf."


def test_chat_is_available_on_any_view(api, gateway):
    gateway.chat.return_value = "Hello!"
    shell_id = new_shell(api, "planner")["shell_id"]
    assert api.post(f"/shell/{shell_id}/chat/toggle").json()["is_open"] is True
    body = api.post(f"/shell/{shell_id}/chat/send", json={"message": "Hi"}).json()
    assert [m["role"] for m in body["messages"]] == ["user", "model"]
    assert api.delete(f"/shell/{shell_id}/chat/messages").json()["messages"] == []


def test_speech_audio(api, gateway):
    gateway.generate_speech.return_value = media("audio/L16;rate=24000", base64.b64encode(b"\x00\x01").decode(), 24000)
    shell_id = new_shell(api, "speaker")["shell_id"]
    base = f"/shell/{shell_id}/speaker"
    api.post(f"{base}/speak", json={"text": "Hello"})
    r = api.get(f"{base}/audio")
    assert r.content == b"\x00\x01"
    assert r.headers["content-type"].startswith("audio/L16;rate=24000")


class TestTranscriptionSocket:
    def test_denied_microphone(self, api, gateway):
        shell_id = new_shell(api, "speaker")["shell_id"]
        with api.websocket_connect(f"/shell/{shell_id}/speaker/transcribe") as ws:
            ws.send_json({"type": "denied"})
            assert ws.receive_json() == {"type": "error", "message": MICROPHONE_PERMISSION_MESSAGE}
            assert ws.receive_json() == {"type": "closed", "transcript": ""}
        gateway.open_transcription.assert_not_called()

    def test_fragments_are_forwarded(self, api, gateway):
        conn = FakeLiveConnection()
        gateway.open_transcription = MagicMock(side_effect=lambda **kwargs: live_session(conn))
        shell_id = new_shell(api, "speaker")["shell_id"]
        with api.websocket_connect(f"/shell/{shell_id}/speaker/transcribe") as ws:
            ws.send_json({"type": "start"})
            ws.send_bytes(b"hello world")
            assert ws.receive_json() == {"type": "fragment", "text": "hello world"}
            ws.send_json({"type": "stop"})
            assert ws.receive_json() == {"type": "closed", "transcript": "hello world"}
        assert conn.exited

    def test_requires_mounted_speaker(self, api):
        shell_id = new_shell(api)["shell_id"]
        with pytest.raises(WebSocketDisconnect) as exc:
            with api.websocket_connect(f"/shell/{shell_id}/speaker/transcribe") as ws:
                ws.receive_json()
        assert exc.value.code == 4404
