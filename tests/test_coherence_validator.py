"""
Tests for the coherence rules and event structure checks.
"""

import pytest

from event_generators.coherence_validator import (
    CoherenceValidator,
    EventValidator,
    ValidationSeverity,
    has_errors,
)


@pytest.fixture
def validator():
    return CoherenceValidator()


def rules(issues):
    return {issue.rule for issue in issues}


class TestCoherenceRules:
    """Tests for title/description coherence."""

    def test_coherent_pair(self, validator):
        assert validator.is_coherent(
            "The Cursed Forest",
            "Twisted roots crawl across the path as the forest closes in.",
        )

    def test_no_shared_content_words(self, validator):
        issues = validator.validate(
            "The Cursed Forest",
            "Merchants argue loudly about the price of grain.",
        )
        assert rules(issues) == {"shared_vocabulary"}
        assert has_errors(issues)

    def test_short_words_do_not_count(self, validator):
        """Words under four letters are ignored on both sides."""
        issues = validator.validate("Old Inn Night Watch", "An old inn keeps its secrets well enough.")
        assert "shared_vocabulary" in rules(issues)

    def test_punctuation_and_case_are_ignored(self, validator):
        assert validator.is_coherent("Dragon's Hoard", "Gold spills from the HOARD, glittering in the dark.")

    def test_single_word_title_skips_vocabulary_rule(self, validator):
        issues = validator.validate("Ambush!", "Arrows rain down from the ridge above the road.")
        assert issues == []

    def test_generic_phrase_is_rejected(self, validator):
        issues = validator.validate("Strange Place", "you find yourself in a strange place.")
        assert "generic_phrase" in rules(issues)
        assert not validator.is_coherent("Strange Place", "You find yourself in a strange place.")

    def test_description_too_short(self, validator):
        issues = validator.validate("Storm", "Thunder rolls.")
        assert rules(issues) == {"min_length"}
        assert issues[0].severity == ValidationSeverity.ERROR
        assert issues[0].field == "description"

    def test_empty_description(self, validator):
        assert not validator.is_coherent("Storm", "")

    def test_custom_generic_phrases(self):
        validator = CoherenceValidator(generic_phrases=["Nothing of note happens here today."])
        assert not validator.is_coherent("Quiet Day", "Nothing of note happens here today.")

    def test_issue_string(self, validator):
        issue = validator.validate("Storm", "Thunder rolls.")[0]
        assert str(issue).startswith("[error] description:")


class TestEventValidator:
    """Tests for structural event checks."""

    @pytest.fixture
    def event(self):
        return {
            "title": "The Bandit King",
            "description": "A masked rider blocks the road ahead.",
            "choices": [
                {"text": "Fight", "effect": {"health": -10}},
                {"text": "Pay the toll", "effect": {"gold": -20}},
            ],
        }

    def test_valid_event(self, event):
        assert EventValidator().validate_event(event) == []

    def test_missing_title(self, event):
        del event["title"]
        issues = EventValidator().validate_event(event)
        assert rules(issues) == {"required"}

    def test_title_too_short(self, event):
        event["title"] = "Hi"
        assert rules(EventValidator().validate_event(event)) == {"length"}

    def test_too_few_choices(self, event):
        event["choices"] = event["choices"][:1]
        assert "choice_count" in rules(EventValidator().validate_event(event))

    def test_choice_without_text(self, event):
        event["choices"].append({"text": "  ", "effect": {}})
        assert "choice_text" in rules(EventValidator().validate_event(event))

    def test_empty_effect_is_a_warning(self, event):
        event["choices"][0]["effect"] = {}
        issues = EventValidator().validate_event(event)
        assert [issue.severity for issue in issues] == [ValidationSeverity.WARNING]
        assert not has_errors(issues)

    def test_non_mapping_effect_is_an_error(self, event):
        event["choices"][0]["effect"] = "lose health"
        assert has_errors(EventValidator().validate_event(event))

    def test_non_mapping_event(self):
        assert has_errors(EventValidator().validate_event("not an event"))
