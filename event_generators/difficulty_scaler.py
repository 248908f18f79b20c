"""
Difficulty Scaler

Maps power levels to difficulty tiers, scales choice effects by a tier's
reward and penalty multipliers, and adjusts event-type weights by the
challenge rating of each event type.
"""

import logging
import threading
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from .base_generator import clamp, round_half_up
from .context_analyzer import ContextAnalyzer
from .exceptions import ConfigurationError
from .models import (
    AnalyzedContext,
    Choice,
    DifficultyAnalysis,
    DifficultyTier,
    PlayerContext,
    ScaledChoice,
    ScalingFactors,
    TierValidationResult,
)

logger = logging.getLogger(__name__)

TierInput = Union[DifficultyTier, Dict[str, Any]]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class DifficultyScaler:
    """Owns the difficulty tier list and applies tier scaling."""

    DEFAULT_TIERS: Tuple[DifficultyTier, ...] = (
        DifficultyTier(
            name="easy", power_range=(0, 39),
            reward_multiplier=1.5, penalty_multiplier=0.7,
            description="Forgiving events for new or struggling characters",
        ),
        DifficultyTier(
            name="normal", power_range=(40, 79),
            reward_multiplier=1.0, penalty_multiplier=1.0,
            description="Balanced events",
        ),
        DifficultyTier(
            name="hard", power_range=(80, 94),
            reward_multiplier=0.8, penalty_multiplier=1.3,
            description="Dangerous events with harsher consequences",
        ),
        DifficultyTier(
            name="legendary", power_range=(95, 100),
            reward_multiplier=0.6, penalty_multiplier=1.6,
            description="Events worthy of legends",
        ),
    )
    FALLBACK_TIER = DEFAULT_TIERS[1]

    # Event type -> challenge rating (1-10)
    CHALLENGE_RATINGS = {
        "ADVENTURE": 5,
        "COMBAT": 8,
        "ECONOMIC": 3,
        "EXPLORATION": 4,
        "GUILD": 4,
        "MAGIC": 6,
        "MYSTERY": 5,
        "POLITICAL": 7,
        "QUEST": 6,
        "SOCIAL": 2,
        "SPELLCASTING": 5,
        "SUPERNATURAL": 9,
        "TECHNOLOGICAL": 3,
        "UNDERWORLD": 7,
    }
    DEFAULT_CHALLENGE_RATING = 5

    def __init__(
        self,
        tiers: Optional[Sequence[TierInput]] = None,
        analyzer: Optional[ContextAnalyzer] = None
    ):
        self.analyzer = analyzer or ContextAnalyzer()
        self._lock = threading.Lock()
        self._tiers: Tuple[DifficultyTier, ...] = ()
        if tiers is None:
            self._tiers = self.DEFAULT_TIERS
        else:
            self._tiers = self._sorted([self._coerce_tier(tier) for tier in tiers])

    @property
    def tiers(self) -> List[DifficultyTier]:
        return list(self._tiers)

    # ------------------------------------------------------------------
    # Power level and tier lookup
    # ------------------------------------------------------------------

    def power_level(self, context: Any = None) -> int:
        """
        Power level of a raw context or an already analyzed one. A power level
        supplied on the context is used as given (clamped to 0-100).
        """
        if isinstance(context, AnalyzedContext):
            return context.power_level
        player = PlayerContext.coerce(context)
        if player.power_level is not None:
            return int(clamp(round_half_up(player.power_level), 0, 100))
        return self.analyzer.analyze_context(player).power_level

    def tier_for(self, power_level: float) -> DifficultyTier:
        """
        Find the tier for a power level.

        When several tiers contain the level, the one with the greatest lower
        bound wins. When none does, the tier with the nearest range midpoint
        is used. Ties go to the earlier tier in the list.
        """
        tiers = self._tiers
        if not tiers:
            return self.FALLBACK_TIER

        best = None
        for tier in tiers:
            if tier.contains(power_level):
                if best is None or tier.power_range[0] > best.power_range[0]:
                    best = tier
        if best is not None:
            return best

        closest = tiers[0]
        closest_distance = abs(closest.midpoint - power_level)
        for tier in tiers[1:]:
            distance = abs(tier.midpoint - power_level)
            if distance < closest_distance:
                closest = tier
                closest_distance = distance
        return closest

    def get_tier(self, name: str) -> Optional[DifficultyTier]:
        for tier in self._tiers:
            if tier.name == name:
                return tier
        return None

    # ------------------------------------------------------------------
    # Effect scaling
    # ------------------------------------------------------------------

    def scale_effects(
        self,
        choices: Sequence[Union[Choice, Dict[str, Any]]],
        context: Any = None,
        tier: Optional[DifficultyTier] = None
    ) -> List[ScaledChoice]:
        """
        Scale every choice's effect for the context's tier (or an explicit one).
        The unscaled effect is kept on each result as ``original_effect``.
        """
        if tier is None:
            tier = self.tier_for(self.power_level(context))
        factors = ScalingFactors(
            reward_multiplier=tier.reward_multiplier,
            penalty_multiplier=tier.penalty_multiplier,
            difficulty_tier=tier.name,
        )

        scaled = []
        for choice in choices:
            if isinstance(choice, dict):
                choice = Choice.model_validate(choice)
            original = dict(choice.effect)
            scaled.append(ScaledChoice(
                text=choice.text,
                effect=self.scale_effect(original, tier),
                original_effect=original,
                scaling_factors=factors,
            ))
        return scaled

    def scale_effect(self, effect: Dict[str, Any], tier: DifficultyTier) -> Dict[str, Any]:
        scaled = {}
        for stat, value in effect.items():
            if _is_number(value):
                scaled[stat] = self.scale_value(value, tier)
            elif (
                isinstance(value, (list, tuple))
                and len(value) == 2
                and all(_is_number(bound) for bound in value)
            ):
                scaled[stat] = [self.scale_value(bound, tier) for bound in value]
            else:
                scaled[stat] = value
        return scaled

    @staticmethod
    def scale_value(value: float, tier: DifficultyTier) -> int:
        """Zero and positive values are rewards; negative values are penalties."""
        multiplier = tier.reward_multiplier if value >= 0 else tier.penalty_multiplier
        return round_half_up(value * multiplier)

    # ------------------------------------------------------------------
    # Event weights
    # ------------------------------------------------------------------

    def challenge_rating(self, event_type: str) -> int:
        return self.CHALLENGE_RATINGS.get(event_type.upper(), self.DEFAULT_CHALLENGE_RATING)

    def adjust_weights(
        self,
        base_weights: Dict[str, float],
        context: Any = None
    ) -> Dict[str, float]:
        """Damp hard events for easy-tier players and trivial events for legendary ones."""
        tier = self.tier_for(self.power_level(context))
        adjusted = {}
        for event_type, weight in base_weights.items():
            rating = self.challenge_rating(event_type)
            if tier.name == "easy" and rating > 6:
                weight *= 0.3
            elif tier.name == "legendary" and rating < 4:
                weight *= 0.5
            adjusted[event_type] = max(0.0, weight)
        return adjusted

    # ------------------------------------------------------------------
    # Tier list administration
    # ------------------------------------------------------------------

    def validate_tier(self, tier: TierInput) -> TierValidationResult:
        """Check a tier without adding it."""
        if isinstance(tier, DifficultyTier):
            parsed = tier
        else:
            if not isinstance(tier, dict):
                return TierValidationResult(is_valid=False, errors=["Tier must be a mapping"])
            errors = []
            if not tier.get("name"):
                errors.append("Tier requires a non-empty name")
            power_range = tier.get("power_range", tier.get("powerRange"))
            if not isinstance(power_range, (list, tuple)) or len(power_range) != 2:
                errors.append("Tier power range must be a two-element [min, max] array")
            if errors:
                return TierValidationResult(is_valid=False, errors=errors)
            try:
                parsed = DifficultyTier.model_validate(tier)
            except ValidationError as e:
                return TierValidationResult(
                    is_valid=False,
                    errors=[
                        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}"
                        for err in e.errors()
                    ],
                )

        warnings = []
        low, high = parsed.power_range
        if low > high:
            warnings.append(f"Tier '{parsed.name}' has an inverted power range [{low}, {high}]")
        for existing in self._tiers:
            if existing.name == parsed.name:
                warnings.append(f"Tier '{parsed.name}' replaces an existing tier")
            elif existing.power_range[0] <= high and low <= existing.power_range[1]:
                warnings.append(f"Tier '{parsed.name}' overlaps tier '{existing.name}'")

        return TierValidationResult(is_valid=True, tier=parsed, warnings=warnings)

    def try_add_tier(self, tier: TierInput) -> TierValidationResult:
        """Add a tier if it is valid; never raises for bad input."""
        result = self.validate_tier(tier)
        if result.is_valid:
            self._store(result.tier)
        return result

    def add_tier(self, tier: TierInput) -> DifficultyTier:
        """Add or replace a tier. Raises ConfigurationError for a malformed tier."""
        result = self.validate_tier(tier)
        if not result.is_valid:
            raise ConfigurationError("; ".join(result.errors), errors=result.errors)
        for warning in result.warnings:
            logger.debug(warning)
        self._store(result.tier)
        return result.tier

    def remove_tier(self, name: str) -> bool:
        with self._lock:
            remaining = [tier for tier in self._tiers if tier.name != name]
            if len(remaining) == len(self._tiers):
                return False
            self._tiers = tuple(remaining)
            return True

    def reset_tiers(self) -> None:
        with self._lock:
            self._tiers = self.DEFAULT_TIERS

    def _store(self, tier: DifficultyTier) -> None:
        with self._lock:
            tiers = [existing for existing in self._tiers if existing.name != tier.name]
            tiers.append(tier)
            self._tiers = self._sorted(tiers)

    @staticmethod
    def _sorted(tiers: List[DifficultyTier]) -> Tuple[DifficultyTier, ...]:
        return tuple(sorted(tiers, key=lambda tier: tier.power_range[0]))

    def _coerce_tier(self, tier: TierInput) -> DifficultyTier:
        result = self.validate_tier(tier)
        if not result.is_valid:
            raise ConfigurationError("; ".join(result.errors), errors=result.errors)
        return result.tier

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------

    def analyze_difficulty(self, context: Any = None) -> DifficultyAnalysis:
        power_level = self.power_level(context)
        tier = self.tier_for(power_level)
        return DifficultyAnalysis(
            power_level=power_level,
            recommended_tier=tier,
            reward_multiplier=tier.reward_multiplier,
            penalty_multiplier=tier.penalty_multiplier,
            challenge_multiplier=round(1 / tier.reward_multiplier, 3) if tier.reward_multiplier else 0.0,
            suggestions=self.suggestions_for(power_level),
        )

    @staticmethod
    def suggestions_for(power_level: int) -> List[str]:
        if power_level < 20:
            return [
                "Favor low-risk events with generous rewards",
                "Offer guidance toward early progression",
            ]
        if power_level < 50:
            return ["Mix routine events with occasional challenges"]
        if power_level < 80:
            return [
                "Introduce complex multi-step situations",
                "Raise the stakes of failure",
            ]
        return [
            "Present legendary threats and world-changing decisions",
            "Keep rewards scarce relative to risk",
        ]

    def stats(self) -> Dict[str, Any]:
        tiers = self._tiers
        return {
            "tier_count": len(tiers),
            "tiers": [
                {"name": tier.name, "power_range": list(tier.power_range)}
                for tier in tiers
            ],
        }
