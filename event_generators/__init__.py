"""RPG Event Generators Package"""

from .base_generator import BaseGenerator
from .context_analyzer import ContextAnalyzer
from .attribute_heuristics import AttributeHeuristics, HeuristicRule
from .difficulty_scaler import DifficultyScaler
from .markov_engine import MarkovEngine
from .title_generator import TitleGenerator
from .description_generator import DescriptionGenerator
from .choice_generator import ChoiceGenerator
from .coherence_validator import (
    CoherenceValidator,
    EventValidator,
    ValidationSeverity,
    ValidationIssue,
)
from .ai_enhancer import AIEnhancer
from .corpus_loader import CorpusLoader
from .event_orchestrator import EventOrchestrator
from .content_library import EVENT_TYPES
from .exceptions import ConfigurationError

# Pydantic models
from .models import (
    # Context models
    PlayerContext,
    AttributeKind,
    AttributeValue,
    AnalyzedContext,
    WealthTier,
    InfluenceTier,
    LifeStage,
    SkillProfile,
    Personality,
    ContextModifiers,
    ContextValidationResult,
    # Difficulty models
    DifficultyTier,
    TierValidationResult,
    ScalingFactors,
    DifficultyAnalysis,
    # Event models
    Choice,
    ScaledChoice,
    GeneratedTitle,
    Event,
    EnhancedNarrative,
    # Engine models
    EngineStats,
    PatternAnalysis,
    # Options
    GeneratorOptions,
    AIEnhancementOptions,
)

__all__ = [
    # Generators
    'BaseGenerator',
    'ContextAnalyzer',
    'AttributeHeuristics',
    'HeuristicRule',
    'DifficultyScaler',
    'MarkovEngine',
    'TitleGenerator',
    'DescriptionGenerator',
    'ChoiceGenerator',
    'CoherenceValidator',
    'EventValidator',
    'ValidationSeverity',
    'ValidationIssue',
    'AIEnhancer',
    'CorpusLoader',
    'EventOrchestrator',
    'EVENT_TYPES',
    'ConfigurationError',
    # Context models
    'PlayerContext',
    'AttributeKind',
    'AttributeValue',
    'AnalyzedContext',
    'WealthTier',
    'InfluenceTier',
    'LifeStage',
    'SkillProfile',
    'Personality',
    'ContextModifiers',
    'ContextValidationResult',
    # Difficulty models
    'DifficultyTier',
    'TierValidationResult',
    'ScalingFactors',
    'DifficultyAnalysis',
    # Event models
    'Choice',
    'ScaledChoice',
    'GeneratedTitle',
    'Event',
    'EnhancedNarrative',
    # Engine models
    'EngineStats',
    'PatternAnalysis',
    # Options
    'GeneratorOptions',
    'AIEnhancementOptions',
]
