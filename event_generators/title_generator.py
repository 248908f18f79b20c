"""
Title Generator

Builds event titles from an adjective/noun pair. The pair comes from
Markov text when the engine produces two usable words, otherwise from the
static tables, biased by the player's wealth tier and life stage.
"""

import logging
from typing import Dict, List, Optional, Tuple

from .base_generator import BaseGenerator, content_words
from .content_library import (
    LIFE_STAGE_ADJECTIVES,
    TITLE_ADJECTIVES,
    TITLE_FORMATS,
    TITLE_NOUNS,
    TITLE_SUFFIXES,
    WEALTH_ADJECTIVES,
)
from .models import AnalyzedContext, AttributeKind, GeneratedTitle

logger = logging.getLogger(__name__)


class TitleGenerator(BaseGenerator):
    """Generates event titles."""

    MAX_LITERAL_LENGTH = 30
    CUSTOM_TITLE_LIKELIHOOD = 0.5

    def __init__(
        self,
        engine,
        rng=None,
        literal_likelihood: float = 0.15,
        suffix_likelihood: float = 0.2
    ):
        super().__init__(engine, rng)
        self.literal_likelihood = literal_likelihood
        self.suffix_likelihood = suffix_likelihood
        self.custom_titles: Dict[str, List[str]] = {}

    def add_custom_titles(self, event_type: str, titles: List[str]) -> None:
        cleaned = [t.strip() for t in titles if isinstance(t, str) and t.strip()]
        if not cleaned:
            return
        key = event_type.upper()
        updated = dict(self.custom_titles)
        updated[key] = updated.get(key, []) + cleaned
        self.custom_titles = updated

    def generate(self, event_type: str, analyzed: AnalyzedContext) -> GeneratedTitle:
        event_type = event_type.upper()

        custom = self.custom_titles.get(event_type)
        if custom and self.chance(self.CUSTOM_TITLE_LIKELIHOOD):
            return self._from_custom(self.pick(custom))

        pair = self._model_words(event_type, analyzed)
        if pair is None:
            pair = self._static_words(event_type, analyzed)
        adjective, noun = pair

        text = self.pick(TITLE_FORMATS).format(adjective=adjective, noun=noun)

        literal = self._literal_value(analyzed)
        if literal and self.chance(self.literal_likelihood):
            text = f"{text} of {literal}"
        elif self.chance(self.suffix_likelihood):
            text = f"{text} {self.pick(self.table_for(TITLE_SUFFIXES, event_type))}"

        return GeneratedTitle(text=text, adjective=adjective, noun=noun)

    def _model_words(self, event_type: str, analyzed: AnalyzedContext) -> Optional[Tuple[str, str]]:
        """First two usable words of contextual Markov text, or None."""
        if not self.engine.has_transitions():
            return None
        text = self.engine.generate_contextual(
            {"power_level": analyzed.power_level, "complexity": analyzed.complexity},
            theme=event_type,
        )
        words = content_words(text)
        if len(words) < 2:
            logger.debug("Model text %r gave too few title words; using static tables", text)
            return None
        return words[0].capitalize(), words[1].capitalize()

    def _static_words(self, event_type: str, analyzed: AnalyzedContext) -> Tuple[str, str]:
        adjectives = list(self.table_for(TITLE_ADJECTIVES, event_type))
        adjectives += WEALTH_ADJECTIVES.get(analyzed.wealth_tier.value, [])
        adjectives += LIFE_STAGE_ADJECTIVES.get(analyzed.life_stage.value, [])
        nouns = self.table_for(TITLE_NOUNS, event_type)
        return self.pick(adjectives), self.pick(nouns)

    def _literal_value(self, analyzed: AnalyzedContext) -> Optional[str]:
        """A short string value from one of the player's custom attributes."""
        values = [
            analyzed.extras[key].value.strip()
            for key in sorted(analyzed.extras)
            if analyzed.extras[key].kind == AttributeKind.STRING
        ]
        values = [v for v in values if v and len(v) <= self.MAX_LITERAL_LENGTH]
        return self.pick(values)

    def _from_custom(self, title: str) -> GeneratedTitle:
        words = content_words(title)
        if len(words) >= 2:
            adjective, noun = words[0], words[1]
        else:
            adjective, noun = "", (words[0] if words else "event")
        return GeneratedTitle(text=title, adjective=adjective.capitalize(), noun=noun.capitalize())
