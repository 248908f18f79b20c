"""
Event Orchestrator

Coordinates the context analyzer, difficulty scaler, Markov engine and the
content generators to produce complete events:

1. Analyze the player context and collect modifiers
2. Pick an event type (preferred types are over-represented)
3. Pick a difficulty tier from the power level and difficulty modifier
4-6. Generate title and description, regenerating until they are coherent
7. Generate choices and scale their effects for the tier
8. Assemble tags and the final Event
"""

import logging
import random
import uuid
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .ai_enhancer import AIEnhancer
from .base_generator import clamp, round_half_up
from .choice_generator import ChoiceGenerator
from .coherence_validator import CoherenceValidator, has_errors
from .content_library import DEFAULT_CORPUS, EVENT_TYPES, THEMATIC_TAGS
from .context_analyzer import ContextAnalyzer, ContextHandler, raw_view
from .description_generator import DescriptionGenerator
from .difficulty_scaler import DifficultyScaler, TierInput
from .markov_engine import MarkovEngine
from .models import (
    AnalyzedContext,
    ContextModifiers,
    ContextValidationResult,
    DifficultyAnalysis,
    DifficultyTier,
    Event,
    GeneratedTitle,
    GeneratorOptions,
    LifeStage,
    PlayerContext,
    ScaledChoice,
    TierValidationResult,
    WealthTier,
)
from .title_generator import TitleGenerator

logger = logging.getLogger(__name__)


class EventOrchestrator:
    """Single entry point for event generation and generator administration."""

    # A difficulty modifier of 1.0 shifts the power level by this many points
    DIFFICULTY_MODIFIER_SCALE = 25

    def __init__(
        self,
        options: Optional[GeneratorOptions] = None,
        rng: Optional[random.Random] = None,
        engine: Optional[MarkovEngine] = None,
        analyzer: Optional[ContextAnalyzer] = None,
        scaler: Optional[DifficultyScaler] = None,
        title_generator: Optional[TitleGenerator] = None,
        description_generator: Optional[DescriptionGenerator] = None,
        choice_generator: Optional[ChoiceGenerator] = None,
        enhancer: Optional[AIEnhancer] = None,
    ):
        self.options = options or GeneratorOptions()
        self.rng = rng or random.Random(self.options.seed)

        self.analyzer = analyzer or ContextAnalyzer()
        self.scaler = scaler or DifficultyScaler(analyzer=self.analyzer)
        self.engine = engine or MarkovEngine(state_size=self.options.state_size, rng=self.rng)
        self.validator = CoherenceValidator()

        self.title_generator = title_generator or TitleGenerator(
            self.engine,
            self.rng,
            literal_likelihood=self.options.title_literal_likelihood,
            suffix_likelihood=self.options.title_suffix_likelihood,
        )
        self.description_generator = description_generator or DescriptionGenerator(
            self.engine,
            self.rng,
            continuation_likelihood=self.options.continuation_likelihood,
            contextual_sentence_likelihood=self.options.contextual_sentence_likelihood,
        )
        self.choice_generator = choice_generator or ChoiceGenerator(self.engine, self.rng)

        if enhancer is None and self.options.ai_enhancement.enabled:
            enhancer = AIEnhancer(self.options.ai_enhancement)
        self.enhancer = enhancer

        if self.options.load_default_corpus:
            for theme, sentences in DEFAULT_CORPUS.items():
                self.engine.add_corpus(sentences, theme=theme)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate_event(self, context: Any = None) -> Event:
        """Generate one event for a player context (a dict, a PlayerContext or None)."""
        player = PlayerContext.coerce(context)
        analyzed = self.analyzer.analyze_context(player)
        modifiers = self.analyzer.get_context_modifiers(context, analyzed)

        event_type = self.select_event_type(modifiers)
        tier = self.tier_for_context(analyzed, modifiers)

        title, description = self.generate_narrative(event_type, analyzed)

        choices = self.choice_generator.generate(event_type, modifiers.reward_modifier)
        scaled = self.scaler.scale_effects(choices, tier=tier)

        event = Event(
            id=str(uuid.UUID(int=self.rng.getrandbits(128), version=4)),
            title=title.text,
            description=description,
            type=event_type,
            difficulty=tier.name,
            choices=scaled,
            tags=self.build_tags(event_type, analyzed, modifiers),
            context=raw_view(context),
        )

        if self.enhancer is not None:
            event = self.enhancer.enhance(event)
        return event

    def generate_events(self, context: Any = None, count: int = 1) -> List[Event]:
        return [self.generate_event(context) for _ in range(max(count, 0))]

    def select_event_type(self, modifiers: ContextModifiers) -> str:
        """Uniform draw from the preferred types followed by every known type."""
        preferences = [
            p.strip().upper() for p in modifiers.event_type_preferences
            if isinstance(p, str) and p.strip()
        ]
        return self.rng.choice(preferences + list(EVENT_TYPES))

    def tier_for_context(self, analyzed: AnalyzedContext, modifiers: ContextModifiers) -> DifficultyTier:
        shift = round_half_up(modifiers.difficulty_modifier * self.DIFFICULTY_MODIFIER_SCALE)
        adjusted = int(clamp(analyzed.power_level + shift, 0, 100))
        return self.scaler.tier_for(adjusted)

    def generate_narrative(self, event_type: str, analyzed: AnalyzedContext) -> Tuple[GeneratedTitle, str]:
        """
        Generate a title and description, retrying while the pair fails the
        coherence rules. The final attempt is kept even if it still fails.
        """
        attempts = self.options.max_coherence_attempts
        title = None
        description = ""
        for attempt in range(1, attempts + 1):
            title = self.title_generator.generate(event_type, analyzed)
            description = self.description_generator.generate(event_type, title, analyzed)
            issues = self.validator.validate(title.text, description)
            if not has_errors(issues):
                break
            logger.debug("Incoherent narrative on attempt %d/%d: %s",
                         attempt, attempts, "; ".join(str(issue) for issue in issues))
        return title, description

    def build_tags(
        self,
        event_type: str,
        analyzed: AnalyzedContext,
        modifiers: ContextModifiers
    ) -> List[str]:
        tags = [event_type.lower()]
        if analyzed.wealth_tier != WealthTier.MODERATE:
            tags.append(analyzed.wealth_tier.value)
        if analyzed.life_stage != LifeStage.ADULT:
            tags.append(analyzed.life_stage.value)
        if analyzed.career_path != ContextAnalyzer.DEFAULT_CAREER:
            tags.append(analyzed.career_path)
        if self._chance(self.options.thematic_tag_likelihood):
            tags.append(self.rng.choice(THEMATIC_TAGS.get(event_type, THEMATIC_TAGS["GENERIC"])))
        tags.extend(modifiers.custom_tags)
        return list(dict.fromkeys(tag for tag in tags if tag))

    def _chance(self, likelihood: float) -> bool:
        return likelihood > 0 and self.rng.random() < likelihood

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    def analyze_context(self, context: Any = None) -> AnalyzedContext:
        return self.analyzer.analyze_context(context)

    def get_context_modifiers(self, context: Any = None) -> ContextModifiers:
        return self.analyzer.get_context_modifiers(context)

    def validate_context(self, context: Any = None) -> ContextValidationResult:
        return self.analyzer.validate_context(context)

    def register_context_handler(self, name: str, handler: ContextHandler) -> None:
        self.analyzer.register_context_handler(name, handler)

    def unregister_context_handler(self, name: str) -> bool:
        return self.analyzer.unregister_context_handler(name)

    # ------------------------------------------------------------------
    # Difficulty
    # ------------------------------------------------------------------

    def calculate_power_level(self, context: Any = None) -> int:
        return self.scaler.power_level(context)

    def calculate_difficulty_tier(self, power_level: float) -> DifficultyTier:
        return self.scaler.tier_for(power_level)

    def add_difficulty_tier(self, tier: TierInput) -> DifficultyTier:
        return self.scaler.add_tier(tier)

    def try_add_difficulty_tier(self, tier: TierInput) -> TierValidationResult:
        return self.scaler.try_add_tier(tier)

    def remove_difficulty_tier(self, name: str) -> bool:
        return self.scaler.remove_tier(name)

    def scale_effects_for_difficulty(self, choices: Sequence[Any], context: Any = None) -> List[ScaledChoice]:
        return self.scaler.scale_effects(choices, context)

    def adjust_event_weights(self, base_weights: Dict[str, float], context: Any = None) -> Dict[str, float]:
        return self.scaler.adjust_weights(base_weights, context)

    def analyze_difficulty(self, context: Any = None) -> DifficultyAnalysis:
        return self.scaler.analyze_difficulty(context)

    # ------------------------------------------------------------------
    # Training data
    # ------------------------------------------------------------------

    def add_corpus(self, sentences: Sequence[str], theme: Optional[str] = None) -> int:
        return self.engine.add_corpus(sentences, theme=theme)

    def add_training_data(
        self,
        event_type: Optional[str] = None,
        titles: Optional[List[str]] = None,
        descriptions: Optional[List[str]] = None,
        choices: Optional[List[Any]] = None,
        texts: Optional[List[str]] = None,
    ) -> None:
        """
        Add hand-written content for an event type. Titles, descriptions and
        choices are mixed in with the built-in tables. Texts and descriptions
        also train the Markov engine under the event type's theme.
        """
        key = event_type.upper() if event_type else None
        if key:
            if titles:
                self.title_generator.add_custom_titles(key, titles)
            if descriptions:
                self.description_generator.add_custom_descriptions(key, descriptions)
            if choices:
                self.choice_generator.add_custom_choices(key, choices)

        corpus = list(texts or []) + list(descriptions or [])
        if corpus:
            self.engine.add_corpus(corpus, theme=key)

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def get_stats(self) -> Dict[str, Any]:
        return {
            "engine": self.engine.stats().model_dump(),
            "difficulty": self.scaler.stats(),
            "context_handlers": self.analyzer.handler_names,
            "event_types": list(EVENT_TYPES),
            "ai_enhancement": bool(self.enhancer and self.enhancer.is_available()),
        }
