"""
Tests for the optional AI narrative enhancer.

The OpenAI client is replaced with a fake that mimics the shape of
``client.chat.completions.parse`` responses.
"""

from types import SimpleNamespace

import pytest

from event_generators.ai_enhancer import AIEnhancer
from event_generators.event_orchestrator import EventOrchestrator
from event_generators.models import AIEnhancementOptions, EnhancedNarrative, GeneratorOptions


class FakeCompletions:
    def __init__(self, parsed=None, error=None):
        self.parsed = parsed
        self.error = error
        self.calls = []

    def parse(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        message = SimpleNamespace(parsed=self.parsed)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeClient:
    def __init__(self, parsed=None, error=None):
        self.completions = FakeCompletions(parsed, error)
        self.chat = SimpleNamespace(completions=self.completions)


ENABLED = AIEnhancementOptions(enabled=True, model="test-model", temperature=0.3)
NARRATIVE = EnhancedNarrative(
    title="The Bandit King's Toll",
    description="A masked rider bars the road, demanding the bandit king's toll.",
)


@pytest.fixture
def event():
    orchestrator = EventOrchestrator(GeneratorOptions(seed=11))
    return orchestrator.generate_event({"gold": 50})


class TestEnhance:
    """Tests for enhance()."""

    def test_replaces_title_and_description(self, event):
        client = FakeClient(parsed=NARRATIVE)
        enhanced = AIEnhancer(ENABLED, client=client).enhance(event)

        assert enhanced.title == NARRATIVE.title
        assert enhanced.description == NARRATIVE.description
        assert "ai-enhanced" in enhanced.tags
        assert enhanced.id == event.id
        assert enhanced.choices == event.choices

    def test_request_uses_configured_model(self, event):
        client = FakeClient(parsed=NARRATIVE)
        AIEnhancer(ENABLED, client=client).enhance(event)

        call = client.completions.calls[0]
        assert call["model"] == "test-model"
        assert call["temperature"] == 0.3
        assert call["response_format"] is EnhancedNarrative
        assert event.title in call["messages"][1]["content"]

    def test_failure_keeps_original(self, event, caplog):
        client = FakeClient(error=RuntimeError("rate limited"))
        with caplog.at_level("WARNING", logger="event_generators.ai_enhancer"):
            result = AIEnhancer(ENABLED, client=client).enhance(event)
        assert result is event
        assert "AI enhancement failed" in caplog.text

    def test_empty_result_keeps_original(self, event):
        client = FakeClient(parsed=EnhancedNarrative(title=" ", description=""))
        assert AIEnhancer(ENABLED, client=client).enhance(event) is event

    def test_missing_result_keeps_original(self, event):
        assert AIEnhancer(ENABLED, client=FakeClient(parsed=None)).enhance(event) is event

    def test_disabled_enhancer_does_nothing(self, event):
        client = FakeClient(parsed=NARRATIVE)
        enhancer = AIEnhancer(AIEnhancementOptions(enabled=False), client=client)
        assert not enhancer.is_enabled()
        assert enhancer.enhance(event) is event
        assert client.completions.calls == []


class TestAvailability:

    def test_unavailable_without_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert not AIEnhancer(AIEnhancementOptions(enabled=True)).is_available()

    def test_available_with_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        assert AIEnhancer(AIEnhancementOptions(enabled=True, api_key="sk-test")).is_available()

    def test_available_with_env_key(self, monkeypatch):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        assert AIEnhancer(AIEnhancementOptions(enabled=True)).is_available()


class TestOrchestratorIntegration:

    def test_orchestrator_applies_enhancer(self):
        enhancer = AIEnhancer(ENABLED, client=FakeClient(parsed=NARRATIVE))
        orchestrator = EventOrchestrator(GeneratorOptions(seed=2), enhancer=enhancer)
        event = orchestrator.generate_event()
        assert event.title == NARRATIVE.title
        assert "ai-enhanced" in event.tags
        assert orchestrator.get_stats()["ai_enhancement"] is True

    def test_options_from_env(self, monkeypatch):
        monkeypatch.setenv("RPG_EVENTS_AI_ENABLED", "true")
        monkeypatch.setenv("RPG_EVENTS_AI_MODEL", "gpt-test")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("RPG_EVENTS_SEED", "5")
        options = GeneratorOptions.from_env(state_size=3)
        assert options.seed == 5
        assert options.state_size == 3
        assert options.ai_enhancement.enabled
        assert options.ai_enhancement.model == "gpt-test"
        assert options.ai_enhancement.api_key == "sk-env"
