"""
Base Generator Class

Provides the shared random source and text helpers used by the title,
description and choice generators.
"""

import math
import random
import re
from typing import Any, List, Optional, Sequence, TypeVar

from .markov_engine import MarkovEngine

T = TypeVar('T')

_WORD_CHARS = re.compile(r"[^A-Za-z]")


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(value + 0.5))


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def content_words(text: str, min_length: int = 4) -> List[str]:
    """Lowercased alphabetic words of at least ``min_length`` characters, in order."""
    words = []
    for token in (text or "").split():
        word = _WORD_CHARS.sub("", token).lower()
        if len(word) >= min_length:
            words.append(word)
    return words


def slugify(text: Any) -> str:
    """Convert text to a lowercase, hyphen separated tag."""
    if not isinstance(text, str):
        text = str(text)

    slug = text.lower().strip()
    slug = re.sub(r'[^a-z0-9]+', '-', slug)
    slug = re.sub(r'-+', '-', slug)  # Collapse repeated separators
    slug = slug.strip('-')
    return slug[:30]


class BaseGenerator:
    """Base class for the content generators with shared randomness and text helpers."""

    def __init__(
        self,
        engine: MarkovEngine,
        rng: Optional[random.Random] = None
    ):
        self.engine = engine
        self.rng = rng or random.Random()

    def chance(self, likelihood: float) -> bool:
        """Return True with the given probability."""
        if likelihood <= 0:
            return False
        if likelihood >= 1:
            return True
        return self.rng.random() < likelihood

    def pick(self, options: Sequence[T], default: Optional[T] = None) -> Optional[T]:
        """Pick one option uniformly, or ``default`` when there are none."""
        if not options:
            return default
        return self.rng.choice(list(options))

    def table_for(self, tables: dict, event_type: str, fallback_key: str = "GENERIC") -> Any:
        """Look up a table keyed by event type, falling back to the generic entry."""
        return tables.get(event_type.upper(), tables[fallback_key])

    @staticmethod
    def sentence(text: str) -> str:
        """Capitalize and terminate a fragment so it reads as a sentence."""
        text = text.strip()
        if not text:
            return text
        text = text[0].upper() + text[1:]
        if text[-1] not in ".!?":
            text = text.rstrip(",;:") + "."
        return text
