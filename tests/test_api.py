"""
Tests for the HTTP API
"""

import json

import pytest
from conftest import ScriptedBackend
from fastapi.testclient import TestClient

from src.agents.assistant import AssistantCore, get_assistant
from src.api.app import app
from src.api.routes.chat import relay_team_run
from src.config.settings import settings
from src.memory.session_store import SessionStore
from src.models.domain import AgentRole, RunStatus


@pytest.fixture
def api_backend():
    return ScriptedBackend()


@pytest.fixture
def core(api_backend, monkeypatch):
    monkeypatch.setattr(settings, "auto_title_enabled", False)
    return AssistantCore(backend=api_backend, store=SessionStore())


@pytest.fixture
def client(core):
    app.dependency_overrides[get_assistant] = lambda: core
    yield TestClient(app)
    app.dependency_overrides.clear()


def sse_events(body: str):
    return [json.loads(line[len("data: "):]) for line in body.splitlines() if line.startswith("data: ")]


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["service"] == "magnus-assistant"


class TestSessionEndpoints:

    def test_create_and_get(self, client):
        created = client.post("/api/sessions", json={"personality": "Comedian"})
        assert created.status_code == 201
        body = created.json()
        assert body["personality"] == "Comedian"
        assert body["messages"] == []

        fetched = client.get(f"/api/sessions/{body['id']}")
        assert fetched.json()["id"] == body["id"]

    def test_create_without_body(self, client):
        response = client.post("/api/sessions")
        assert response.status_code == 201
        assert response.json()["personality"] == "Default"

    def test_list(self, client, core):
        session = core.store.create_session()
        listing = client.get("/api/sessions").json()
        assert listing == [{"id": session.id, "title": "New Chat", "personality": "Default", "message_count": 0}]

    def test_unknown_session_is_404(self, client):
        response = client.get("/api/sessions/missing")
        assert response.status_code == 404
        assert "missing" in response.json()["detail"]

    def test_delete(self, client, core):
        session = core.store.create_session()
        assert client.delete(f"/api/sessions/{session.id}").status_code == 204
        assert client.get(f"/api/sessions/{session.id}").status_code == 404

    def test_update_personality(self, client, core):
        session = core.store.create_session()
        response = client.patch(f"/api/sessions/{session.id}/personality", json={"personality": "Coding Wizard"})
        assert response.json()["personality"] == "Coding Wizard"


class TestMessageEndpoint:

    def test_translation_turn(self, client, core, api_backend):
        session = core.store.create_session()
        api_backend.queue({"translation": "おはよう", "phonetic": "ohayou", "languageCode": "ja-JP"})

        response = client.post(f"/api/sessions/{session.id}/messages", json={"message": "Good morning in Japanese"})

        assert response.status_code == 200
        body = response.json()
        assert body["pipeline"] == "translation"
        assert body["pinned_tool"] is None
        assert body["message"]["content"] == "おはよう (ohayou)"
        assert body["message"]["payload"]["kind"] == "translation"
        assert body["message"]["payload"]["sourceText"] == "Good morning"
        assert len(body["session"]["messages"]) == 2

    def test_study_tool_stays_pinned(self, client, core, api_backend):
        session = core.store.create_session()
        api_backend.queue({"response": "Let's begin.", "language": "en-US"})

        response = client.post(
            f"/api/sessions/{session.id}/messages",
            json={"message": "teach me calculus", "pinned_tool": "Study and learn"},
        )
        assert response.json()["pinned_tool"] == "Study and learn"

    def test_empty_message_is_rejected(self, client, core):
        session = core.store.create_session()
        response = client.post(f"/api/sessions/{session.id}/messages", json={"message": "   "})
        assert response.status_code == 422

    def test_missing_backend_is_503(self, client, core):
        session = core.store.create_session()
        core.backend = None

        response = client.post(f"/api/sessions/{session.id}/messages", json={"message": "hello"})

        assert response.status_code == 503
        assert core.store.history(session.id) == ()

    def test_unknown_session_is_404(self, client):
        response = client.post("/api/sessions/missing/messages", json={"message": "hello"})
        assert response.status_code == 404


class TestStudyGuideEndpoint:

    def test_study_guide(self, client, core, api_backend):
        session = core.store.create_session()
        api_backend.queue({
            "topic": "Photosynthesis",
            "summary": "How plants make food.",
            "keyConcepts": [],
            "practiceQuestions": [],
            "furtherReading": [],
        })

        body = client.post(f"/api/sessions/{session.id}/study-guide", json={"topic": "Photosynthesis"}).json()

        assert body["pinned_tool"] == "Study and learn"
        assert body["session"]["title"] == "Study: Photosynthesis"
        assert body["message"]["payload"]["guide"]["summary"] == "How plants make food."


class TestExpertsStream:

    def test_streams_snapshots_then_complete(self, client, core, api_backend):
        session = core.store.create_session()
        api_backend.queue(
            {"plan": "Research then summarize", "tasks": [
                {"role": AgentRole.RESEARCHER.value, "task": "Research"},
                {"role": AgentRole.SYNTHESIZER.value, "task": "Summarize"},
            ]},
            "notes",
            "final answer",
        )

        response = client.post(f"/api/sessions/{session.id}/experts/stream", json={"message": "plan a launch"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")

        events = sse_events(response.text)
        snapshots = [e for e in events if e["event"] == "snapshot"]
        assert snapshots[0]["state"]["originalQuery"] == "plan a launch"
        assert snapshots[-1]["state"]["status"] == "done"
        assert snapshots[-1]["state"]["finalResponse"] == "final answer"
        assert events[-1] == {
            "event": "complete",
            "stats": {"snapshots": len(snapshots), "status": "done", "terminal": True},
        }

        history = core.store.history(session.id)
        assert history[0].content == "plan a launch"
        assert history[1].payload.state.final_response == "final answer"

    def test_failed_run_still_completes_stream(self, client, core, api_backend):
        session = core.store.create_session()
        api_backend.queue("no plan here")

        events = sse_events(client.post(f"/api/sessions/{session.id}/experts/stream", json={"message": "q"}).text)

        assert events[-1]["event"] == "complete"
        assert events[-1]["stats"]["status"] == "failed"
        assert events[-1]["stats"]["terminal"] is True

    async def test_run_finishes_after_client_disconnects(self, core, api_backend):
        session = core.store.create_session()
        api_backend.queue(
            {"plan": "Research then summarize", "tasks": [
                {"role": AgentRole.RESEARCHER.value, "task": "Research"},
                {"role": AgentRole.SYNTHESIZER.value, "task": "Summarize"},
            ]},
            "notes",
            "final answer",
        )
        core.record_user_turn(session.id, "plan a launch")

        relay = relay_team_run(core.start_multi_agent_run("plan a launch", session.id), session.id)
        first = await relay.__anext__()
        await relay.aclose()
        await core.drain_background_tasks()

        assert sse_events(first)[0]["event"] == "snapshot"
        state = core.store.history(session.id)[-1].payload.state
        assert state.status == RunStatus.DONE
        assert state.final_response == "final answer"

    def test_missing_backend_is_503(self, client, core):
        session = core.store.create_session()
        core.backend = None
        response = client.post(f"/api/sessions/{session.id}/experts/stream", json={"message": "q"})
        assert response.status_code == 503


class TestClassifyEndpoint:

    def test_translation(self, client):
        body = client.post("/api/classify", json={"message": "Ohayo in Japanese"}).json()
        assert body["intent"] == "translation"
        assert body["pipeline"] == "translation"
        assert body["translation"] == {"text": "Ohayo", "language": "Japanese"}

    def test_direct_url(self, client):
        body = client.post("/api/classify", json={"message": "https://youtu.be/dQw4w9WgXcQ"}).json()
        assert body["video_id"] == "dQw4w9WgXcQ"
        assert body["pipeline"] == "play_by_id"
