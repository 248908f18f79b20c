"""
Tests for the FastAPI backend.
"""

import asyncio
import json

import pytest
from fastapi.testclient import TestClient

from backend.main import app, orchestrator


@pytest.fixture
def client():
    orchestrator.scaler.reset_tiers()
    yield TestClient(app)
    orchestrator.scaler.reset_tiers()


def sse_messages(body: str):
    return [
        json.loads(line[len("data: "):])
        for line in body.splitlines()
        if line.startswith("data: ")
    ]


class TestStatus:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}


class TestEvents:

    def test_generate_events(self, client):
        response = client.post("/events", json={"context": {"gold": 10, "level": 1}, "count": 3})
        assert response.status_code == 200
        events = response.json()["events"]
        assert len(events) == 3
        for event in events:
            assert event["title"]
            assert event["difficulty"] == "easy"
            assert 2 <= len(event["choices"]) <= 4

    def test_default_request(self, client):
        response = client.post("/events", json={})
        assert len(response.json()["events"]) == 1

    @pytest.mark.parametrize("count", [0, 51])
    def test_count_is_bounded(self, client, count):
        assert client.post("/events", json={"count": count}).status_code == 422

    def test_stream(self, client):
        response = client.post("/events/stream", json={"context": {"gold": 10}, "count": 2})
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.text.startswith(": stream-start")

        messages = sse_messages(response.text)
        assert [m["type"] for m in messages] == ["event", "event", "done"]
        assert [m["index"] for m in messages[:2]] == [0, 1]
        assert messages[0]["event"]["title"]
        assert messages[-1]["count"] == 2

    @pytest.mark.parametrize("path", ["/events", "/events/stream"])
    def test_generation_runs_off_the_event_loop(self, client, monkeypatch, path):
        threads = []
        generate_event = orchestrator.generate_event

        def recording(context=None):
            try:
                asyncio.get_running_loop()
                threads.append("loop")
            except RuntimeError:
                threads.append("worker")
            return generate_event(context)

        monkeypatch.setattr(orchestrator, "generate_event", recording)
        response = client.post(path, json={"context": {"gold": 10}, "count": 2})
        assert response.status_code == 200
        assert threads == ["worker", "worker"]


class TestContextAndCorpus:

    def test_analyze_context(self, client):
        response = client.post("/context/analyze", json={"gold": 5, "age": 70, "reputation": 500})
        data = response.json()
        assert data["analysis"]["wealth_tier"] == "poor"
        assert data["analysis"]["life_stage"] == "elder"
        assert "POLITICAL" in data["modifiers"]["event_type_preferences"]
        assert data["validation"]["is_valid"] is False

    def test_add_corpus(self, client):
        response = client.post("/corpus", json={
            "sentences": ["The harbor bells ring through the fog at dawn."],
            "theme": "HARBOR",
        })
        data = response.json()
        assert data["added"] == 1
        assert "HARBOR" in data["stats"]["themes"]


class TestTiers:

    def test_list_tiers(self, client):
        tiers = client.get("/tiers").json()
        assert [tier["name"] for tier in tiers] == ["easy", "normal", "hard", "legendary"]
        assert tiers[0]["powerRange"] == [0, 39]

    def test_add_tier(self, client):
        response = client.post("/tiers", json={"name": "mythic", "powerRange": [101, 150]})
        assert response.status_code == 200
        assert response.json()["name"] == "mythic"
        assert "mythic" in [tier["name"] for tier in client.get("/tiers").json()]

    def test_add_invalid_tier(self, client):
        response = client.post("/tiers", json={"name": "broken"})
        assert response.status_code == 400
        assert response.json()["detail"]["errors"]

    def test_remove_tier(self, client):
        assert client.delete("/tiers/hard").json() == {"removed": "hard"}
        assert client.delete("/tiers/hard").status_code == 404

    def test_stats(self, client):
        data = client.get("/stats").json()
        assert data["difficulty"]["tier_count"] == 4
        assert data["engine"]["state_count"] > 0
