"""
Pydantic Models for the RPG Event Generator

Defines the data structures exchanged between the context analyzer,
difficulty scaler, text engine and the event orchestrator.
"""

import math
import os
import sys
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class WealthTier(str, Enum):
    POOR = "poor"
    MODERATE = "moderate"
    WEALTHY = "wealthy"
    RICH = "rich"


class InfluenceTier(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    ELITE = "elite"


class LifeStage(str, Enum):
    YOUTH = "youth"
    ADULT = "adult"
    EXPERIENCED = "experienced"
    ELDER = "elder"


class AttributeKind(str, Enum):
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def _lenient_number(value: Any) -> Optional[float]:
    """
    Numbers pass through; anything else (including NaN and bools) is treated
    as absent. Integers too large for a float are clamped to the float range.
    """
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        as_float = float(value)
    except OverflowError:
        return sys.float_info.max if value > 0 else -sys.float_info.max
    if math.isnan(as_float) or math.isinf(as_float):
        return None
    return value


# ============================================================================
# Player Context Models
# ============================================================================

class AttributeValue(BaseModel):
    """A custom player attribute tagged with the kind of value it holds."""
    kind: AttributeKind
    value: Any

    @classmethod
    def classify(cls, value: Any) -> Optional["AttributeValue"]:
        number = _lenient_number(value)
        if number is not None:
            return cls(kind=AttributeKind.NUMBER, value=number)
        if isinstance(value, str):
            return cls(kind=AttributeKind.STRING, value=value)
        if isinstance(value, (list, tuple)):
            return cls(kind=AttributeKind.ARRAY, value=list(value))
        if isinstance(value, dict):
            return cls(kind=AttributeKind.OBJECT, value=value)
        return None


class PlayerContext(BaseModel):
    """Sparse player state. Every attribute is optional; unknown keys are kept as extras."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    age: Optional[float] = None
    gold: Optional[float] = None
    influence: Optional[float] = None
    health: Optional[float] = None
    level: Optional[float] = None
    reputation: Optional[float] = None
    career: Optional[str] = None
    skills: Dict[str, float] = {}
    power_level: Optional[float] = Field(default=None, alias="powerLevel")
    complexity: Optional[float] = None

    @field_validator(
        "age", "gold", "influence", "health", "level",
        "reputation", "power_level", "complexity",
        mode="before",
    )
    @classmethod
    def _numbers_or_absent(cls, value):
        return _lenient_number(value)

    @field_validator("career", mode="before")
    @classmethod
    def _career_text(cls, value):
        return value if isinstance(value, str) and value.strip() else None

    @field_validator("skills", mode="before")
    @classmethod
    def _numeric_skills(cls, value):
        if not isinstance(value, dict):
            return {}
        levels = {str(name): _lenient_number(level) for name, level in value.items()}
        return {name: level for name, level in levels.items() if level is not None}

    @classmethod
    def coerce(cls, raw: Any = None) -> "PlayerContext":
        """Build a context from a dict, an existing context or nothing at all."""
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, dict):
            return cls()
        return cls.model_validate(raw)

    @property
    def extras(self) -> Dict[str, AttributeValue]:
        tagged = {}
        for key, value in (self.model_extra or {}).items():
            attribute = AttributeValue.classify(value)
            if attribute is not None:
                tagged[key] = attribute
        return tagged

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class SkillProfile(BaseModel):
    model_config = ConfigDict(frozen=True)

    combat: int = 10
    social: int = 10
    magic: int = 10
    technical: int = 10

    def as_dict(self) -> Dict[str, int]:
        return self.model_dump()


class Personality(BaseModel):
    model_config = ConfigDict(frozen=True)

    risk_tolerance: float = 0.5
    social_preference: float = 0.5
    ambition_level: float = 0.5


class AnalyzedContext(BaseModel):
    """Read-only profile derived from a PlayerContext for a single generation call."""
    model_config = ConfigDict(frozen=True)

    power_level: int
    wealth_tier: WealthTier
    influence_tier: InfluenceTier
    life_stage: LifeStage
    skill_profile: SkillProfile
    personality: Personality
    career_path: str = "adventurer"
    age: float
    gold: float
    influence: float
    health: float
    level: float
    reputation: float
    complexity: Optional[float] = None
    extras: Dict[str, AttributeValue] = {}


class ContextModifiers(BaseModel):
    """Adjustments derived from a context; also the shape a context handler returns."""
    model_config = ConfigDict(populate_by_name=True)

    difficulty_modifier: float = Field(default=0.0, alias="difficultyModifier")
    reward_modifier: float = Field(default=1.0, alias="rewardModifier")
    event_type_preferences: List[str] = Field(default_factory=list, alias="eventTypePreferences")
    custom_tags: List[str] = Field(default_factory=list, alias="customTags")

    def merged_with(self, other: "ContextModifiers") -> "ContextModifiers":
        """Difficulty adds, reward multiplies, preferences and tags concatenate."""
        return ContextModifiers(
            difficulty_modifier=self.difficulty_modifier + other.difficulty_modifier,
            reward_modifier=self.reward_modifier * other.reward_modifier,
            event_type_preferences=self.event_type_preferences + other.event_type_preferences,
            custom_tags=self.custom_tags + other.custom_tags,
        )


class ContextValidationResult(BaseModel):
    """Result of checking a raw context for out-of-range values."""
    is_valid: bool
    errors: List[str] = []
    warnings: List[str] = []


# ============================================================================
# Difficulty Models
# ============================================================================

class DifficultyTier(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    name: str = Field(min_length=1)
    power_range: Tuple[float, float] = Field(alias="powerRange")
    reward_multiplier: float = Field(default=1.0, alias="rewardMultiplier")
    penalty_multiplier: float = Field(default=1.0, alias="penaltyMultiplier")
    description: str = ""

    @property
    def midpoint(self) -> float:
        return (self.power_range[0] + self.power_range[1]) / 2

    def contains(self, power_level: float) -> bool:
        low, high = self.power_range
        return low <= power_level <= high


class TierValidationResult(BaseModel):
    """Result of validating a difficulty tier before it is added."""
    is_valid: bool
    tier: Optional[DifficultyTier] = None
    errors: List[str] = []
    warnings: List[str] = []


class ScalingFactors(BaseModel):
    reward_multiplier: float
    penalty_multiplier: float
    difficulty_tier: str


class DifficultyAnalysis(BaseModel):
    power_level: int
    recommended_tier: DifficultyTier
    reward_multiplier: float
    penalty_multiplier: float
    challenge_multiplier: float
    suggestions: List[str] = []


# ============================================================================
# Event Models
# ============================================================================

class Choice(BaseModel):
    text: str
    effect: Dict[str, Any] = {}


class ScaledChoice(Choice):
    """A choice whose effect has been scaled for a difficulty tier."""
    original_effect: Dict[str, Any] = {}
    scaling_factors: ScalingFactors


class GeneratedTitle(BaseModel):
    text: str
    adjective: str
    noun: str


class Event(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    description: str
    type: str
    difficulty: str
    choices: List[ScaledChoice]
    tags: List[str] = []
    context: Dict[str, Any] = {}


class EnhancedNarrative(BaseModel):
    """Structured output requested from the language model when enhancing an event."""
    title: str
    description: str


# ============================================================================
# Text Engine Models
# ============================================================================

class EngineStats(BaseModel):
    state_count: int
    total_transitions: int
    average_transitions: float
    corpus_size: int = 0
    themes: List[str] = []


class WordCount(BaseModel):
    word: str
    count: int


class PatternAnalysis(BaseModel):
    average_length: float
    common_words: List[WordCount] = []
    themes: List[str] = []
    quality: float


# ============================================================================
# Options
# ============================================================================

class AIEnhancementOptions(BaseModel):
    enabled: bool = False
    model: str = "gpt-4o-mini"
    api_key: Optional[str] = None
    temperature: float = 0.8


class GeneratorOptions(BaseModel):
    """Runtime options for an EventOrchestrator."""
    seed: Optional[int] = None
    state_size: int = Field(default=2, ge=1)
    load_default_corpus: bool = True
    title_literal_likelihood: float = Field(default=0.15, ge=0, le=1)
    title_suffix_likelihood: float = Field(default=0.2, ge=0, le=1)
    continuation_likelihood: float = Field(default=0.5, ge=0, le=1)
    contextual_sentence_likelihood: float = Field(default=0.4, ge=0, le=1)
    thematic_tag_likelihood: float = Field(default=0.3, ge=0, le=1)
    max_coherence_attempts: int = Field(default=3, ge=1)
    ai_enhancement: AIEnhancementOptions = Field(default_factory=AIEnhancementOptions)

    @classmethod
    def from_env(cls, **overrides) -> "GeneratorOptions":
        """Build options from RPG_EVENTS_* environment variables, then apply overrides."""
        values: Dict[str, Any] = {}
        seed = os.getenv("RPG_EVENTS_SEED")
        if seed:
            values["seed"] = int(seed)
        state_size = os.getenv("RPG_EVENTS_STATE_SIZE")
        if state_size:
            values["state_size"] = int(state_size)

        ai = {}
        if os.getenv("RPG_EVENTS_AI_ENABLED", "").lower() in ("1", "true", "yes"):
            ai["enabled"] = True
        if os.getenv("RPG_EVENTS_AI_MODEL"):
            ai["model"] = os.getenv("RPG_EVENTS_AI_MODEL")
        if os.getenv("OPENAI_API_KEY"):
            ai["api_key"] = os.getenv("OPENAI_API_KEY")
        if ai:
            values["ai_enhancement"] = ai

        values.update(overrides)
        return cls.model_validate(values)
