"""
Markov Text Engine

Learns word-transition statistics from a themed sentence corpus and
generates bounded-length text by random walk, falling back to stitching
raw corpus sentences together when no walk produces usable text.

The corpus and its transition table are rebuilt together on every
corpus change and swapped in as one snapshot, so generation always reads
a consistent, unchanging view.
"""

import logging
import random
import threading
from collections import Counter
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .models import EngineStats, PatternAnalysis, WordCount

logger = logging.getLogger(__name__)


class TransitionTable:
    """Successor bags keyed by space-joined windows of ``state_size`` tokens."""

    def __init__(self, sentences: Sequence[str], state_size: int):
        self.state_size = state_size
        transitions: Dict[str, List[str]] = {}
        for sentence in sentences:
            tokens = sentence.split()
            if len(tokens) < state_size:
                continue
            for i in range(len(tokens) - state_size + 1):
                state = " ".join(tokens[i:i + state_size])
                bag = transitions.setdefault(state, [])
                if i + state_size < len(tokens):
                    bag.append(tokens[i + state_size])

        self.transitions: Dict[str, Tuple[str, ...]] = {
            state: tuple(bag) for state, bag in transitions.items()
        }
        self.states: Tuple[str, ...] = tuple(self.transitions)

        by_first: Dict[str, List[str]] = {}
        for state in self.states:
            by_first.setdefault(state.split(" ", 1)[0], []).append(state)
        self.states_by_first_token = {token: tuple(states) for token, states in by_first.items()}

    def __len__(self):
        return len(self.states)

    @property
    def total_transitions(self) -> int:
        return sum(len(bag) for bag in self.transitions.values())


class CorpusSnapshot:
    """An immutable corpus with its theme index and transition table."""

    def __init__(
        self,
        entries: Tuple[str, ...],
        theme_index: Dict[str, Tuple[int, ...]],
        state_size: int
    ):
        self.entries = entries
        self.theme_index = theme_index
        self.state_size = state_size
        self.table = TransitionTable(entries, state_size)
        # Tables for filtered working sets, keyed by (theme, long_entries_only)
        self.filtered_tables: Dict[Tuple[Optional[str], bool], Tuple[Tuple[str, ...], TransitionTable]] = {}


class MarkovEngine:
    """Word-level Markov chain text generator."""

    GENERATION_DEFAULTS = {
        "MIN_LENGTH": 20,
        "MAX_LENGTH": 100,
        "MAX_TRIES": 10,
        "STATE_SIZE": 2,
        "MAX_STEPS": 100,
    }
    TERMINATORS = ".!?"
    WEIGHTY_ENTRY_LENGTH = 20
    WEIGHTY_POWER_LEVEL = 50

    def __init__(self, state_size: int = 2, rng: Optional[random.Random] = None):
        if state_size < 1:
            raise ValueError("state_size must be at least 1")
        self.state_size = state_size
        self.rng = rng or random.Random()
        self._lock = threading.Lock()
        self._snapshot = CorpusSnapshot((), {}, state_size)

    # ------------------------------------------------------------------
    # Corpus administration
    # ------------------------------------------------------------------

    def add_corpus(self, sentences: Sequence[str], theme: Optional[str] = None) -> int:
        """
        Add sentences (optionally under a theme) and rebuild the transition
        table. Returns the number of sentences added.
        """
        if isinstance(sentences, str):
            sentences = [sentences]
        cleaned = [s.strip() for s in sentences if isinstance(s, str) and s.strip()]
        if not cleaned:
            return 0

        with self._lock:
            current = self._snapshot
            start = len(current.entries)
            entries = current.entries + tuple(cleaned)
            theme_index = dict(current.theme_index)
            if theme:
                positions = tuple(range(start, start + len(cleaned)))
                theme_index[theme] = theme_index.get(theme, ()) + positions
            self._snapshot = CorpusSnapshot(entries, theme_index, self.state_size)

        logger.debug("Added %d sentences (theme=%s); corpus now %d entries",
                     len(cleaned), theme, len(entries))
        return len(cleaned)

    def clear(self) -> None:
        with self._lock:
            self._snapshot = CorpusSnapshot((), {}, self.state_size)

    @property
    def corpus(self) -> Tuple[str, ...]:
        return self._snapshot.entries

    @property
    def themes(self) -> List[str]:
        return list(self._snapshot.theme_index)

    def has_transitions(self) -> bool:
        return len(self._snapshot.table) > 0

    def entries_for_theme(self, theme: str) -> List[str]:
        snapshot = self._snapshot
        return [snapshot.entries[i] for i in snapshot.theme_index.get(theme, ())]

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate(
        self,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
        max_tries: Optional[int] = None
    ) -> str:
        """
        Generate text whose length lies within [min_length, max_length].

        Falls back to joining two or three raw corpus sentences once
        ``max_tries`` walks have been rejected. Returns "" for an empty corpus.
        """
        snapshot = self._snapshot
        return self._generate_from(
            snapshot.entries,
            snapshot.table,
            self.GENERATION_DEFAULTS["MIN_LENGTH"] if min_length is None else min_length,
            self.GENERATION_DEFAULTS["MAX_LENGTH"] if max_length is None else max_length,
            self.GENERATION_DEFAULTS["MAX_TRIES"] if max_tries is None else max_tries,
        )

    def generate_contextual(self, context: Any = None, theme: Optional[str] = None) -> str:
        """
        Generate text from a working corpus chosen for the caller: entries of
        ``theme`` when it has any, and only longer entries when the context's
        power level is above 50. Length bounds follow the context's complexity.
        """
        snapshot = self._snapshot
        power_level = _context_number(context, "power_level", "powerLevel")
        complexity = _context_number(context, "complexity")

        long_only = power_level is not None and power_level > self.WEIGHTY_POWER_LEVEL
        entries, table = self._working_set(snapshot, theme, long_only)

        min_length = max(15, complexity if complexity else 10)
        max_length = min(100, (complexity if complexity else 30) * 2)
        if min_length > max_length:
            min_length = max_length

        return self._generate_from(
            entries,
            table,
            int(min_length),
            int(max_length),
            self.GENERATION_DEFAULTS["MAX_TRIES"],
        )

    def _working_set(
        self,
        snapshot: CorpusSnapshot,
        theme: Optional[str],
        long_only: bool
    ) -> Tuple[Tuple[str, ...], TransitionTable]:
        """
        Entries and table for a theme and length filter, cached on the snapshot.
        Tables are built outside the lock; the first one stored wins.
        """
        theme_key = theme if theme in snapshot.theme_index else None
        if theme_key is None and not long_only:
            return snapshot.entries, snapshot.table

        key = (theme_key, long_only)
        cached = snapshot.filtered_tables.get(key)
        if cached is not None:
            return cached

        if theme_key is not None:
            entries = tuple(snapshot.entries[i] for i in snapshot.theme_index[theme_key])
        else:
            entries = snapshot.entries
        if long_only:
            weighty = tuple(e for e in entries if len(e) > self.WEIGHTY_ENTRY_LENGTH)
            entries = weighty or entries
        if not entries:
            entries = snapshot.entries

        working = (entries, TransitionTable(entries, snapshot.state_size))
        with self._lock:
            return snapshot.filtered_tables.setdefault(key, working)

    def _generate_from(
        self,
        entries: Tuple[str, ...],
        table: TransitionTable,
        min_length: int,
        max_length: int,
        max_tries: int
    ) -> str:
        if len(table) > 0:
            for _ in range(max(max_tries, 0)):
                candidate = self._walk(table, max_length)
                if candidate and min_length <= len(candidate) <= max_length:
                    return candidate
        logger.debug("No walk within [%d, %d] after %d tries; using corpus fallback",
                     min_length, max_length, max_tries)
        return self._fallback(entries)

    def _walk(self, table: TransitionTable, max_length: int) -> str:
        state = self.rng.choice(table.states)
        words = state.split(" ")
        steps = 0

        while len(" ".join(words)) < max_length and steps < self.GENERATION_DEFAULTS["MAX_STEPS"]:
            steps += 1
            bag = table.transitions.get(state)
            if bag:
                words.append(self.rng.choice(bag))
            else:
                # Dead end: continue from another state that starts with the last word
                candidates = [
                    s for s in table.states_by_first_token.get(words[-1], ())
                    if s != state
                ]
                if not candidates:
                    break
                jump = self.rng.choice(candidates)
                words.extend(jump.split(" ")[1:])
            state = " ".join(words[-table.state_size:])

        return self._finish(" ".join(words))

    def _finish(self, text: str) -> str:
        text = text.strip()
        if not text:
            return text
        text = text[0].upper() + text[1:]
        if text[-1] not in self.TERMINATORS:
            text = text.rstrip(",;:-") + "."
        return text

    def _fallback(self, entries: Tuple[str, ...]) -> str:
        distinct = list(dict.fromkeys(entries))
        if not distinct:
            return ""
        count = min(self.rng.randint(2, 3), len(distinct))
        picked = [s.rstrip(".") for s in self.rng.sample(distinct, count)]
        text = ". ".join(picked)
        if text and text[-1] not in self.TERMINATORS:
            text += "."
        return text

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------

    def stats(self) -> EngineStats:
        snapshot = self._snapshot
        state_count = len(snapshot.table)
        total = snapshot.table.total_transitions
        return EngineStats(
            state_count=state_count,
            total_transitions=total,
            average_transitions=total / state_count if state_count else 0.0,
            corpus_size=len(snapshot.entries),
            themes=list(snapshot.theme_index),
        )

    def analyze_patterns(self) -> PatternAnalysis:
        """Corpus-level summary: average length, common words, themes, quality."""
        snapshot = self._snapshot
        entries = snapshot.entries
        if not entries:
            return PatternAnalysis(average_length=0, quality=0)

        average_length = sum(len(e) for e in entries) / len(entries)
        counts = Counter(
            word for entry in entries for word in entry.lower().split() if len(word) > 2
        )
        unique_words = {word for entry in entries for word in entry.lower().split()}
        quality = min(100.0, (len(unique_words) / len(entries)) * 10 + average_length / 2)

        return PatternAnalysis(
            average_length=average_length,
            common_words=[WordCount(word=w, count=c) for w, c in counts.most_common(10)],
            themes=list(snapshot.theme_index),
            quality=quality,
        )

    @staticmethod
    def is_interesting_text(text: str) -> bool:
        """At least five words, more than 60% of them distinct."""
        words = (text or "").split()
        if len(words) < 5:
            return False
        unique = {w.lower() for w in words}
        return len(unique) / len(words) > 0.6


def _context_number(context: Any, *names: str) -> Optional[float]:
    """Read a numeric attribute from a mapping or an object, trying each name."""
    if context is None:
        return None
    for name in names:
        if isinstance(context, dict):
            value = context.get(name)
        else:
            value = getattr(context, name, None)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return value
    return None
