"""
Tests for the custom attribute heuristics dispatch table.
"""

import pytest

from event_generators.attribute_heuristics import AttributeHeuristics
from event_generators.models import AttributeValue


def tagged(raw):
    """Classify a plain dict the way PlayerContext.extras does."""
    return {key: AttributeValue.classify(value) for key, value in raw.items()}


@pytest.fixture
def heuristics():
    return AttributeHeuristics()


class TestKeywordRules:
    """Each rule fires on its keywords and value kinds."""

    def test_magic_attributes_prefer_magic_events(self, heuristics):
        modifiers = heuristics.evaluate(tagged({"mana": 50}))
        assert modifiers.event_type_preferences == ["MAGIC", "SPELLCASTING"]

    def test_stealth_reduces_difficulty_proportionally(self, heuristics):
        assert heuristics.evaluate(tagged({"stealth": 50})).difficulty_modifier == pytest.approx(-0.1)
        assert heuristics.evaluate(tagged({"agility": 500})).difficulty_modifier == pytest.approx(-0.2)
        assert heuristics.evaluate(tagged({"stealth": 0})).difficulty_modifier == 0

    def test_fame_sign_picks_preference(self, heuristics):
        assert heuristics.evaluate(tagged({"fame": 30})).event_type_preferences == ["POLITICAL"]
        assert heuristics.evaluate(tagged({"fame": -30})).event_type_preferences == ["UNDERWORLD"]
        assert heuristics.evaluate(tagged({"fame": 0})).event_type_preferences == []

    def test_curse_raises_difficulty(self, heuristics):
        modifiers = heuristics.evaluate(tagged({"curse": "lycanthropy"}))
        assert "SUPERNATURAL" in modifiers.event_type_preferences
        assert modifiers.difficulty_modifier > 0

    def test_bounty_marks_player_as_wanted(self, heuristics):
        modifiers = heuristics.evaluate(tagged({"bounty": 500}))
        assert modifiers.event_type_preferences == ["UNDERWORLD", "COMBAT"]
        assert "wanted" in modifiers.custom_tags

    def test_allies_make_events_easier(self, heuristics):
        modifiers = heuristics.evaluate(tagged({"allies": ["Bran", "Mira"]}))
        assert modifiers.event_type_preferences == ["SOCIAL"]
        assert modifiers.difficulty_modifier == pytest.approx(-0.1)

    def test_ally_reduction_is_capped(self, heuristics):
        modifiers = heuristics.evaluate(tagged({"companions": 12}))
        assert modifiers.difficulty_modifier == pytest.approx(-0.2)

    def test_faction_string_becomes_tag(self, heuristics):
        assert heuristics.evaluate(tagged({"guild": "Iron Fist"})).custom_tags == ["iron-fist"]

    def test_traits_become_tags(self, heuristics):
        modifiers = heuristics.evaluate(tagged({"traits": ["Brave", "Hot Tempered", 3]}))
        assert modifiers.custom_tags == ["brave", "hot-tempered"]

    def test_unknown_attribute_has_no_effect(self, heuristics):
        modifiers = heuristics.evaluate(tagged({"shoe_size": 42}))
        assert modifiers.difficulty_modifier == 0
        assert modifiers.event_type_preferences == []
        assert modifiers.custom_tags == []

    def test_kind_mismatch_falls_through(self, heuristics):
        """A numeric guild rank is not an affiliation name."""
        assert heuristics.evaluate(tagged({"guild": 3})).custom_tags == []

    def test_first_matching_rule_wins(self, heuristics):
        rule = heuristics.rule_for("wanted_mage", AttributeValue.classify(10))
        assert rule.name == "hunted"


class TestDispatch:
    """Tests for object flattening and deterministic ordering."""

    def test_objects_are_flattened_one_level(self, heuristics):
        modifiers = heuristics.evaluate(tagged({"affinities": {"arcane": 40}}))
        assert "MAGIC" in modifiers.event_type_preferences

    def test_deeper_nesting_is_ignored(self, heuristics):
        modifiers = heuristics.evaluate(tagged({"meta": {"inner": {"magic": 5}}}))
        assert modifiers.event_type_preferences == []

    def test_result_does_not_depend_on_key_order(self, heuristics):
        first = heuristics.evaluate(tagged({"guild": "Red Hand", "faction": "Blue Order", "mana": 5}))
        second = heuristics.evaluate(tagged({"mana": 5, "faction": "Blue Order", "guild": "Red Hand"}))
        assert first == second
        assert first.custom_tags == ["blue-order", "red-hand"]

    def test_contributions_accumulate(self, heuristics):
        modifiers = heuristics.evaluate(tagged({"stealth": 100, "curse": 10}))
        assert modifiers.difficulty_modifier == pytest.approx(-0.1)
