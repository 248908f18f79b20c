"""
Attribute Heuristics

Turns custom player attributes (anything outside the known context fields)
into event preferences, tags and difficulty adjustments. Rules are matched
by attribute-name substring and value kind through an explicit dispatch
table, and attributes are visited in sorted order so the outcome depends
only on the input.
"""

from dataclasses import dataclass
from typing import Callable, Dict, FrozenSet, Optional, Tuple

from .base_generator import slugify
from .models import AttributeKind, AttributeValue, ContextModifiers

NUMBER = AttributeKind.NUMBER
STRING = AttributeKind.STRING
ARRAY = AttributeKind.ARRAY
OBJECT = AttributeKind.OBJECT


def _is_present(attribute: AttributeValue) -> bool:
    """Positive numbers, non-blank strings and non-empty arrays count as present."""
    if attribute.kind == NUMBER:
        return attribute.value > 0
    if attribute.kind == STRING:
        return bool(attribute.value.strip())
    return bool(attribute.value)


def _magnitude(attribute: AttributeValue) -> float:
    """Attribute strength on a 0..1 scale (numbers are read out of 100)."""
    if attribute.kind == NUMBER:
        return min(max(attribute.value, 0), 100) / 100
    return 1.0 if _is_present(attribute) else 0.0


def _magic_affinity(key: str, attribute: AttributeValue) -> Optional[ContextModifiers]:
    if not _is_present(attribute):
        return None
    return ContextModifiers(event_type_preferences=["MAGIC", "SPELLCASTING"])


def _evasion(key: str, attribute: AttributeValue) -> Optional[ContextModifiers]:
    reduction = _magnitude(attribute) * 0.2
    if reduction <= 0:
        return None
    return ContextModifiers(difficulty_modifier=-reduction)


def _standing(key: str, attribute: AttributeValue) -> Optional[ContextModifiers]:
    if attribute.value > 0:
        return ContextModifiers(event_type_preferences=["POLITICAL"])
    if attribute.value < 0:
        return ContextModifiers(event_type_preferences=["UNDERWORLD"])
    return None


def _corruption(key: str, attribute: AttributeValue) -> Optional[ContextModifiers]:
    if not _is_present(attribute):
        return None
    return ContextModifiers(
        event_type_preferences=["SUPERNATURAL"],
        difficulty_modifier=0.1,
        custom_tags=["cursed"],
    )


def _devotion(key: str, attribute: AttributeValue) -> Optional[ContextModifiers]:
    if not _is_present(attribute):
        return None
    return ContextModifiers(event_type_preferences=["SUPERNATURAL"], custom_tags=["devout"])


def _ingenuity(key: str, attribute: AttributeValue) -> Optional[ContextModifiers]:
    if not _is_present(attribute):
        return None
    return ContextModifiers(event_type_preferences=["TECHNOLOGICAL"])


def _hunted(key: str, attribute: AttributeValue) -> Optional[ContextModifiers]:
    if not _is_present(attribute):
        return None
    return ContextModifiers(
        event_type_preferences=["UNDERWORLD", "COMBAT"],
        difficulty_modifier=0.1,
        custom_tags=["wanted"],
    )


def _companions(key: str, attribute: AttributeValue) -> Optional[ContextModifiers]:
    if attribute.kind == ARRAY:
        count = len(attribute.value)
    else:
        count = int(max(attribute.value, 0))
    if count == 0:
        return None
    return ContextModifiers(
        event_type_preferences=["SOCIAL"],
        difficulty_modifier=-min(0.05 * count, 0.2),
    )


def _hostility(key: str, attribute: AttributeValue) -> Optional[ContextModifiers]:
    if not _is_present(attribute):
        return None
    return ContextModifiers(event_type_preferences=["COMBAT"])


def _affiliation(key: str, attribute: AttributeValue) -> Optional[ContextModifiers]:
    tag = slugify(attribute.value)
    if not tag:
        return None
    return ContextModifiers(custom_tags=[tag])


def _traits(key: str, attribute: AttributeValue) -> Optional[ContextModifiers]:
    tags = [slugify(item) for item in attribute.value if isinstance(item, str)]
    tags = [tag for tag in tags if tag]
    if not tags:
        return None
    return ContextModifiers(custom_tags=tags)


@dataclass(frozen=True)
class HeuristicRule:
    name: str
    keywords: Tuple[str, ...]
    kinds: FrozenSet[AttributeKind]
    apply: Callable[[str, AttributeValue], Optional[ContextModifiers]]

    def matches(self, key: str, attribute: AttributeValue) -> bool:
        if attribute.kind not in self.kinds:
            return False
        lowered = key.lower()
        return any(keyword in lowered for keyword in self.keywords)


class AttributeHeuristics:
    """
    Dispatches custom attributes to the first rule whose keywords and value
    kinds match. Object values are flattened one level into ``outer_inner``
    keys before dispatch.
    """

    RULES: Tuple[HeuristicRule, ...] = (
        HeuristicRule("hunted", ("wanted", "bounty", "notoriety"),
                      frozenset({NUMBER, STRING, ARRAY}), _hunted),
        HeuristicRule("magic", ("magic", "mana", "arcane", "spell"),
                      frozenset({NUMBER, STRING, ARRAY}), _magic_affinity),
        HeuristicRule("evasion", ("stealth", "agility", "dexterity"),
                      frozenset({NUMBER}), _evasion),
        HeuristicRule("standing", ("reputation", "fame", "renown", "infamy"),
                      frozenset({NUMBER}), _standing),
        HeuristicRule("corruption", ("curse", "corruption", "taint"),
                      frozenset({NUMBER, STRING, ARRAY}), _corruption),
        HeuristicRule("devotion", ("faith", "piety", "devotion"),
                      frozenset({NUMBER, STRING}), _devotion),
        HeuristicRule("ingenuity", ("tech", "engineering", "invent"),
                      frozenset({NUMBER, STRING, ARRAY}), _ingenuity),
        HeuristicRule("companions", ("allies", "ally", "companion", "follower"),
                      frozenset({NUMBER, ARRAY}), _companions),
        HeuristicRule("hostility", ("enemies", "enemy", "rival", "nemesis"),
                      frozenset({NUMBER, STRING, ARRAY}), _hostility),
        HeuristicRule("affiliation", ("faction", "guild", "allegiance", "title"),
                      frozenset({STRING}), _affiliation),
        HeuristicRule("traits", ("trait", "quirk"),
                      frozenset({ARRAY}), _traits),
    )

    def __init__(self, rules: Optional[Tuple[HeuristicRule, ...]] = None):
        self.rules = tuple(rules) if rules is not None else self.RULES

    def evaluate(self, extras: Dict[str, AttributeValue]) -> ContextModifiers:
        """Combine the contributions of every custom attribute."""
        combined = ContextModifiers()
        for key in sorted(extras):
            attribute = extras[key]
            if attribute.kind == OBJECT:
                for inner_key in sorted(attribute.value, key=str):
                    inner = AttributeValue.classify(attribute.value[inner_key])
                    # One level only
                    if inner is None or inner.kind == OBJECT:
                        continue
                    combined = self._dispatch(f"{key}_{inner_key}", inner, combined)
            else:
                combined = self._dispatch(key, attribute, combined)
        return combined

    def rule_for(self, key: str, attribute: AttributeValue) -> Optional[HeuristicRule]:
        for rule in self.rules:
            if rule.matches(key, attribute):
                return rule
        return None

    def _dispatch(
        self,
        key: str,
        attribute: AttributeValue,
        combined: ContextModifiers
    ) -> ContextModifiers:
        rule = self.rule_for(key, attribute)
        if rule is None:
            return combined
        contribution = rule.apply(key, attribute)
        if contribution is None:
            return combined
        return combined.merged_with(contribution)
