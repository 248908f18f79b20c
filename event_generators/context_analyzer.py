"""
Context Analyzer

Normalizes raw player attributes into an AnalyzedContext (power level,
tiers, skill profile, personality) and derives the modifiers that steer
event selection. Custom attributes go through the attribute heuristics,
and callers can register handlers that contribute additional modifiers.
"""

import logging
import math
import threading
from typing import Any, Callable, Dict, Optional, Tuple, Union

from .attribute_heuristics import AttributeHeuristics
from .base_generator import clamp, round_half_up
from .models import (
    AnalyzedContext,
    ContextModifiers,
    ContextValidationResult,
    InfluenceTier,
    LifeStage,
    Personality,
    PlayerContext,
    SkillProfile,
    WealthTier,
)

logger = logging.getLogger(__name__)

ContextHandler = Callable[
    [Dict[str, Any], AnalyzedContext],
    Union[ContextModifiers, Dict[str, Any], None]
]


def raw_view(raw: Any) -> Dict[str, Any]:
    """Shallow copy of the caller's context, keys as strings. Non-mappings give {}."""
    if isinstance(raw, PlayerContext):
        return raw.to_dict()
    if isinstance(raw, dict):
        return {str(key): value for key, value in raw.items()}
    return {}


class ContextAnalyzer:
    """Derives player profiles and event modifiers from raw context."""

    DEFAULT_CONTEXT = {
        "age": 16,
        "gold": 0,
        "influence": 0,
        "reputation": 0,
        "health": 100,
        "level": 1,
    }
    DEFAULT_CAREER = "adventurer"
    DEFAULT_SKILL = 10

    # Upper bounds are exclusive; values past the last bound take the final tier
    WEALTH_TIERS: Tuple[Tuple[float, WealthTier], ...] = (
        (100, WealthTier.POOR),
        (1000, WealthTier.MODERATE),
        (10000, WealthTier.WEALTHY),
    )
    INFLUENCE_TIERS: Tuple[Tuple[float, InfluenceTier], ...] = (
        (10, InfluenceTier.LOW),
        (50, InfluenceTier.MEDIUM),
        (100, InfluenceTier.HIGH),
    )
    LIFE_STAGES: Tuple[Tuple[float, LifeStage], ...] = (
        (18, LifeStage.YOUTH),
        (35, LifeStage.ADULT),
        (60, LifeStage.EXPERIENCED),
    )

    SKILL_ALIASES = {
        "combat": ("combat", "fighting", "weaponry"),
        "social": ("diplomacy", "social", "charisma"),
        "magic": ("magic", "spellcasting", "sorcery"),
        "technical": ("technical", "engineering", "crafting"),
    }

    # (minimum, maximum) accepted by validate_context; None means unbounded
    VALID_RANGES = {
        "age": (0, 200),
        "gold": (0, None),
        "influence": (0, 200),
        "health": (0, 200),
        "reputation": (-100, 100),
    }

    def __init__(self, heuristics: Optional[AttributeHeuristics] = None):
        self.heuristics = heuristics or AttributeHeuristics()
        self._handlers: Dict[str, ContextHandler] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def analyze_context(self, raw: Any = None) -> AnalyzedContext:
        """Build a fresh AnalyzedContext. Missing or non-numeric fields take defaults."""
        context = PlayerContext.coerce(raw)

        age = self._value(context.age, "age")
        gold = self._value(context.gold, "gold")
        influence = self._value(context.influence, "influence")
        health = self._value(context.health, "health")
        level = self._value(context.level, "level")
        reputation = self._value(context.reputation, "reputation")
        career = (context.career or self.DEFAULT_CAREER).strip().lower()

        return AnalyzedContext(
            power_level=self.calculate_power_level(level, gold, influence, health),
            wealth_tier=self._tier(gold, self.WEALTH_TIERS, WealthTier.RICH),
            influence_tier=self._tier(influence, self.INFLUENCE_TIERS, InfluenceTier.ELITE),
            life_stage=self._tier(age, self.LIFE_STAGES, LifeStage.ELDER),
            skill_profile=self.build_skill_profile(context.skills),
            personality=self.infer_personality(gold, influence, age, career),
            career_path=career,
            age=age,
            gold=gold,
            influence=influence,
            health=health,
            level=level,
            reputation=reputation,
            complexity=context.complexity,
            extras=context.extras,
        )

    def _value(self, value: Optional[float], name: str) -> float:
        return self.DEFAULT_CONTEXT[name] if value is None else value

    @staticmethod
    def _tier(value: float, bands, top):
        for upper, tier in bands:
            if value < upper:
                return tier
        return top

    @staticmethod
    def calculate_power_level(
        level: float = 1,
        gold: float = 0,
        influence: float = 0,
        health: float = 100
    ) -> int:
        """
        Sum of four sub-scores, each worth at most 25 points:
        level (saturates at 20), gold (log10, saturates near 1,000,000),
        influence (saturates at 100) and health (saturates at 100).
        """
        level_score = clamp(level / 20, 0, 1) * 25
        gold_score = clamp(math.log10(max(gold, 0) + 1) / 6, 0, 1) * 25
        influence_score = clamp(influence / 100, 0, 1) * 25
        health_score = clamp(health / 100, 0, 1) * 25
        total = level_score + gold_score + influence_score + health_score
        return int(clamp(round_half_up(total), 0, 100))

    def build_skill_profile(self, skills: Dict[str, float]) -> SkillProfile:
        profile = {}
        for category, aliases in self.SKILL_ALIASES.items():
            value = self.DEFAULT_SKILL
            for alias in aliases:
                if alias in skills:
                    value = skills[alias]
                    break
            profile[category] = int(clamp(round_half_up(value), 0, 100))
        return SkillProfile(**profile)

    @staticmethod
    def infer_personality(gold: float, influence: float, age: float, career: str) -> Personality:
        risk = 0.5
        social = 0.5
        ambition = 0.5

        if gold > 5000:
            risk += 0.2
        if "warrior" in career or "thief" in career:
            risk += 0.2
        if "priest" in career or "scholar" in career:
            risk -= 0.2

        if influence > 50:
            social += 0.3
        if "noble" in career or "merchant" in career:
            social += 0.2
        if "hermit" in career or "warrior" in career:
            social -= 0.2

        if influence > 30:
            ambition += 0.2
        if gold > 2000:
            ambition += 0.2
        if age > 50:
            ambition -= 0.1

        return Personality(
            risk_tolerance=round(clamp(risk, 0, 1), 3),
            social_preference=round(clamp(social, 0, 1), 3),
            ambition_level=round(clamp(ambition, 0, 1), 3),
        )

    # ------------------------------------------------------------------
    # Modifiers
    # ------------------------------------------------------------------

    def get_context_modifiers(
        self,
        raw: Any = None,
        analyzed: Optional[AnalyzedContext] = None
    ) -> ContextModifiers:
        """
        Combine the built-in tier modifiers, the custom attribute heuristics
        and every registered handler. Each handler gets its own copy of the
        caller's mapping. A failing handler is logged and skipped.
        """
        context = PlayerContext.coerce(raw)
        if analyzed is None:
            analyzed = self.analyze_context(context)

        modifiers = self._base_modifiers(analyzed)
        modifiers = modifiers.merged_with(self.heuristics.evaluate(analyzed.extras))

        view = raw_view(raw)
        for name, handler in self._handlers.items():
            try:
                contribution = handler(dict(view), analyzed)
                if contribution is None:
                    continue
                if not isinstance(contribution, ContextModifiers):
                    contribution = ContextModifiers.model_validate(contribution)
            except Exception:
                logger.warning("Context handler '%s' failed; skipping it", name, exc_info=True)
                continue
            modifiers = modifiers.merged_with(contribution)

        return modifiers

    @staticmethod
    def _base_modifiers(analyzed: AnalyzedContext) -> ContextModifiers:
        difficulty = 0.0
        reward = 1.0
        preferences = []

        if analyzed.wealth_tier == WealthTier.POOR:
            difficulty += 0.2
            reward *= 1.3
            preferences += ["ECONOMIC", "QUEST"]
        elif analyzed.wealth_tier == WealthTier.RICH:
            difficulty -= 0.1
            preferences += ["POLITICAL", "SOCIAL"]

        if analyzed.influence_tier == InfluenceTier.ELITE:
            preferences += ["POLITICAL"]
        elif analyzed.influence_tier == InfluenceTier.LOW:
            preferences += ["GUILD", "UNDERWORLD"]

        if analyzed.life_stage == LifeStage.YOUTH:
            difficulty -= 0.1
            preferences += ["ADVENTURE", "EXPLORATION"]
        elif analyzed.life_stage == LifeStage.ELDER:
            difficulty += 0.1
            preferences += ["POLITICAL", "QUEST"]

        if analyzed.personality.risk_tolerance > 0.7:
            preferences += ["COMBAT", "ADVENTURE"]
        if analyzed.personality.social_preference > 0.7:
            preferences += ["SOCIAL", "POLITICAL"]

        if analyzed.reputation > 50:
            preferences += ["POLITICAL"]
        elif analyzed.reputation < -50:
            preferences += ["UNDERWORLD"]

        return ContextModifiers(
            difficulty_modifier=difficulty,
            reward_modifier=reward,
            event_type_preferences=preferences,
        )

    def register_context_handler(self, name: str, handler: ContextHandler) -> None:
        """Register (or replace) a named modifier handler."""
        if not callable(handler):
            raise TypeError(f"Context handler '{name}' must be callable")
        with self._lock:
            handlers = dict(self._handlers)
            handlers[name] = handler
            self._handlers = handlers

    def unregister_context_handler(self, name: str) -> bool:
        with self._lock:
            if name not in self._handlers:
                return False
            handlers = dict(self._handlers)
            del handlers[name]
            self._handlers = handlers
            return True

    @property
    def handler_names(self):
        return list(self._handlers)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate_context(self, raw: Any = None) -> ContextValidationResult:
        """
        Report out-of-range values. Advisory only: analysis and generation
        accept any context.
        """
        errors = []
        warnings = []
        raw_dict = raw.to_dict() if isinstance(raw, PlayerContext) else raw
        if raw_dict is None:
            raw_dict = {}
        if not isinstance(raw_dict, dict):
            return ContextValidationResult(is_valid=False, errors=["Context must be a mapping"])

        for name, (minimum, maximum) in self.VALID_RANGES.items():
            if name not in raw_dict:
                continue
            value = raw_dict[name]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                warnings.append(f"{name} is not a number and will be ignored")
                continue
            if minimum is not None and value < minimum:
                errors.append(f"{name} must be at least {minimum} (got {value})")
            if maximum is not None and value > maximum:
                errors.append(f"{name} must be at most {maximum} (got {value})")

        for name in ("level", "complexity"):
            value = raw_dict.get(name)
            if value is not None and (isinstance(value, bool) or not isinstance(value, (int, float))):
                warnings.append(f"{name} is not a number and will be ignored")

        skills = raw_dict.get("skills")
        if skills is not None and not isinstance(skills, dict):
            warnings.append("skills must be a mapping of skill name to level")

        return ContextValidationResult(is_valid=not errors, errors=errors, warnings=warnings)
