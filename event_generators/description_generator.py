"""
Description Generator

Writes an event description from a sentence frame built around the title's
adjective and noun, optionally extended with Markov text and one sentence
tailored to the player's circumstances.
"""

from typing import Dict, List, Optional

from .base_generator import BaseGenerator
from .content_library import CONTEXTUAL_SENTENCES, DESCRIPTION_FRAMES, VERB_PHRASES
from .models import AnalyzedContext, GeneratedTitle, LifeStage, WealthTier


class DescriptionGenerator(BaseGenerator):
    """Generates event descriptions."""

    MIN_CONTINUATION_LENGTH = 20
    SKILL_THRESHOLD = 70
    CUSTOM_DESCRIPTION_LIKELIHOOD = 0.5

    def __init__(
        self,
        engine,
        rng=None,
        continuation_likelihood: float = 0.5,
        contextual_sentence_likelihood: float = 0.4
    ):
        super().__init__(engine, rng)
        self.continuation_likelihood = continuation_likelihood
        self.contextual_sentence_likelihood = contextual_sentence_likelihood
        self.custom_descriptions: Dict[str, List[str]] = {}

    def add_custom_descriptions(self, event_type: str, descriptions: List[str]) -> None:
        cleaned = [d.strip() for d in descriptions if isinstance(d, str) and d.strip()]
        if not cleaned:
            return
        key = event_type.upper()
        updated = dict(self.custom_descriptions)
        updated[key] = updated.get(key, []) + cleaned
        self.custom_descriptions = updated

    def generate(self, event_type: str, title: GeneratedTitle, analyzed: AnalyzedContext) -> str:
        event_type = event_type.upper()
        parts = []

        custom = self.custom_descriptions.get(event_type)
        if custom and self.chance(self.CUSTOM_DESCRIPTION_LIKELIHOOD):
            parts.append(self.sentence(self.pick(custom)))
        else:
            parts.append(self._framed_sentence(event_type, title))

            if self.engine.has_transitions() and self.chance(self.continuation_likelihood):
                continuation = self.engine.generate_contextual(
                    {"power_level": analyzed.power_level, "complexity": analyzed.complexity},
                    theme=event_type,
                )
                if len(continuation) >= self.MIN_CONTINUATION_LENGTH:
                    parts.append(continuation)

        if self.chance(self.contextual_sentence_likelihood):
            extra = self.contextual_sentence(analyzed)
            if extra:
                parts.append(extra)

        return " ".join(parts)

    def _framed_sentence(self, event_type: str, title: GeneratedTitle) -> str:
        subject = " ".join(w.lower() for w in (title.adjective, title.noun) if w) or "event"
        article = "An" if subject[0] in "aeiou" else "A"
        frame = self.pick(DESCRIPTION_FRAMES)
        return frame.format(
            article=article,
            article_lower=article.lower(),
            subject=subject,
            verb_phrase=self.pick(self.table_for(VERB_PHRASES, event_type)),
        )

    def contextual_sentence(self, analyzed: AnalyzedContext) -> Optional[str]:
        """One sentence keyed on wealth tier, life stage or a strong skill, if any apply."""
        candidates = []
        if analyzed.wealth_tier != WealthTier.MODERATE:
            candidates += CONTEXTUAL_SENTENCES["wealth"].get(analyzed.wealth_tier.value, [])
        if analyzed.life_stage != LifeStage.ADULT:
            candidates += CONTEXTUAL_SENTENCES["life_stage"].get(analyzed.life_stage.value, [])
        for skill, level in analyzed.skill_profile.as_dict().items():
            if level >= self.SKILL_THRESHOLD:
                candidates += CONTEXTUAL_SENTENCES["skill"].get(skill, [])
        return self.pick(candidates)
