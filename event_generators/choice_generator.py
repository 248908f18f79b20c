"""
Choice Generator

Picks two to four choice texts for an event type and gives each one an
effect drawn from the type's effect profile. Positive values are boosted
by the context's reward modifier; tier scaling happens afterwards in the
DifficultyScaler.
"""

from typing import Any, Dict, List, Union

from .base_generator import BaseGenerator, round_half_up
from .content_library import CHOICE_TEMPLATES, EFFECT_PROFILES, EffectRule
from .models import Choice


class ChoiceGenerator(BaseGenerator):
    """Generates choices and their unscaled effects."""

    MIN_CHOICES = 2
    MAX_CHOICES = 4

    def __init__(self, engine, rng=None):
        super().__init__(engine, rng)
        self.custom_choices: Dict[str, List[Choice]] = {}

    def add_custom_choices(self, event_type: str, choices: List[Union[str, Dict[str, Any], Choice]]) -> None:
        parsed = []
        for choice in choices:
            if isinstance(choice, str):
                if choice.strip():
                    parsed.append(Choice(text=choice.strip()))
            elif isinstance(choice, Choice):
                parsed.append(choice)
            else:
                parsed.append(Choice.model_validate(choice))
        if not parsed:
            return
        key = event_type.upper()
        updated = dict(self.custom_choices)
        updated[key] = updated.get(key, []) + parsed
        self.custom_choices = updated

    def generate(self, event_type: str, reward_modifier: float = 1.0) -> List[Choice]:
        event_type = event_type.upper()
        templates = self.custom_choices.get(event_type, []) + [
            Choice(text=text) for text in self.table_for(CHOICE_TEMPLATES, event_type)
        ]
        count = self.rng.randint(self.MIN_CHOICES, min(self.MAX_CHOICES, len(templates)))
        picked = self.rng.sample(templates, count)

        profile = self.table_for(EFFECT_PROFILES, event_type)
        choices = []
        for template in picked:
            effect = dict(template.effect) if template.effect else self.build_effect(profile, reward_modifier)
            choices.append(Choice(text=template.text, effect=effect))
        return choices

    def build_effect(self, profile: List[EffectRule], reward_modifier: float = 1.0) -> Dict[str, Any]:
        """The first rule always applies; the others apply by their likelihood."""
        effect: Dict[str, Any] = {}
        for index, rule in enumerate(profile):
            if index > 0 and not self.chance(rule.likelihood):
                continue
            if rule.as_range:
                bounds = sorted((self.rng.randint(rule.low, rule.high), self.rng.randint(rule.low, rule.high)))
                effect[rule.stat] = [self._boost(v, reward_modifier) for v in bounds]
            else:
                effect[rule.stat] = self._boost(self.rng.randint(rule.low, rule.high), reward_modifier)
        return effect

    @staticmethod
    def _boost(value: int, reward_modifier: float) -> int:
        if value > 0:
            return round_half_up(value * reward_modifier)
        return value
