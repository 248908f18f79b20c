"""
Tests for the Markov text engine.
"""

import random
import threading

import pytest

from event_generators.markov_engine import MarkovEngine


class FirstChoiceRandom(random.Random):
    """Always takes the first option, so walks are predictable."""

    def choice(self, seq):
        return seq[0]


@pytest.fixture
def engine():
    return MarkovEngine(rng=random.Random(1234))


def words_of(text):
    return {word.strip(".!?").lower() for word in text.split()}


class TestTransitionTable:
    """Tests for corpus ingestion and statistics."""

    def test_empty_engine_stats(self, engine):
        stats = engine.stats()
        assert stats.state_count == 0
        assert stats.total_transitions == 0
        assert stats.average_transitions == 0

    def test_states_include_terminal_window(self, engine):
        engine.add_corpus(["the cat sat on the mat"])
        stats = engine.stats()
        assert stats.state_count == 5
        assert stats.total_transitions == 4
        assert stats.average_transitions == pytest.approx(0.8)

    def test_duplicates_are_preserved(self, engine):
        engine.add_corpus(["a b c", "a b c"])
        stats = engine.stats()
        assert stats.state_count == 2
        assert stats.total_transitions == 2

    def test_rebuild_on_every_addition(self, engine):
        engine.add_corpus(["the cat sat"])
        engine.add_corpus(["the dog ran"], theme="DOGS")
        stats = engine.stats()
        assert stats.corpus_size == 2
        assert stats.state_count == 4
        assert stats.themes == ["DOGS"]
        assert engine.entries_for_theme("DOGS") == ["the dog ran"]

    def test_blank_sentences_are_ignored(self, engine):
        assert engine.add_corpus(["", "   ", None]) == 0
        assert engine.corpus == ()

    def test_clear(self, engine):
        engine.add_corpus(["the cat sat on the mat"], theme="CATS")
        engine.clear()
        assert engine.stats().state_count == 0
        assert engine.themes == []

    def test_state_size_must_be_positive(self):
        with pytest.raises(ValueError):
            MarkovEngine(state_size=0)


class TestGenerate:
    """Tests for random-walk generation and its fallback."""

    def test_empty_corpus_returns_empty_string(self, engine):
        assert engine.generate() == ""
        assert engine.generate(5, 10) == ""
        assert engine.generate_contextual({"power_level": 90}, theme="COMBAT") == ""

    def test_output_stays_within_bounds(self, engine):
        engine.add_corpus(["Rain fell.", "Fog rose."])
        for _ in range(20):
            text = engine.generate(min_length=5, max_length=10)
            assert 5 <= len(text) <= 10

    def test_output_is_capitalized_and_terminated(self, engine):
        engine.add_corpus(["the quiet river flows"])
        for _ in range(10):
            text = engine.generate(min_length=1, max_length=100)
            assert text[0].isupper()
            assert text[-1] in ".!?"

    def test_dead_end_jumps_to_matching_state(self):
        engine = MarkovEngine(rng=FirstChoiceRandom())
        engine.add_corpus(["alpha beta gamma", "gamma delta epsilon"])
        assert engine.generate(min_length=1, max_length=100) == "Alpha beta gamma delta epsilon."

    def test_fallback_joins_raw_sentences(self, engine):
        sentences = [
            "The ancient fortress looms over the valley",
            "Merchants crowd the gates at dawn",
            "A cold wind sweeps down from the peaks",
        ]
        engine.add_corpus(sentences)
        text = engine.generate(min_length=1, max_length=5)
        parts = text.rstrip(".").split(". ")
        assert 2 <= len(parts) <= 3
        assert len(set(parts)) == len(parts)
        assert all(part in sentences for part in parts)
        assert text.endswith(".")

    def test_fallback_with_single_sentence(self, engine):
        engine.add_corpus(["A lone sentence with many words in it"])
        assert engine.generate(min_length=1, max_length=3) == "A lone sentence with many words in it."


class TestGenerateContextual:
    """Tests for themed and power-biased generation."""

    def test_theme_restricts_vocabulary(self, engine):
        engine.add_corpus(["the cat sat on the mat"])
        engine.add_corpus(["zebra yak xylophone wombat"], theme="ODD")
        for _ in range(10):
            text = engine.generate_contextual(theme="ODD")
            assert words_of(text) <= {"zebra", "yak", "xylophone", "wombat"}

    def test_unknown_theme_uses_full_corpus(self, engine):
        engine.add_corpus(["the cat sat on the mat quietly"])
        assert engine.generate_contextual(theme="NOPE")

    def test_powerful_context_prefers_long_entries(self, engine):
        long_sentence = "This sentence is definitely longer than twenty characters."
        engine.add_corpus(["Short one.", long_sentence])
        allowed = words_of(long_sentence)
        for _ in range(10):
            text = engine.generate_contextual({"powerLevel": 80})
            assert words_of(text) <= allowed

    def test_complexity_sets_length_bounds(self, engine):
        engine.add_corpus(["Rain fell.", "Fog rose."])
        # bounds are [15, 16], so both walks are too short and the fallback is used
        text = engine.generate_contextual({"complexity": 8})
        assert text.count(".") >= 2

    def test_inverted_bounds_are_clamped(self, engine):
        engine.add_corpus(["Rain fell."])
        # complexity 5 gives [15, 10]; the minimum drops to 10
        assert engine.generate_contextual({"complexity": 5}) == "Rain fell."

    def test_cache_is_invalidated_by_new_corpus(self, engine):
        engine.add_corpus(["zebra yak xylophone wombat"], theme="ODD")
        engine.generate_contextual(theme="ODD")
        engine.add_corpus(["quokka ibis narwhal okapi"], theme="ODD")
        seen = set()
        for _ in range(30):
            seen |= words_of(engine.generate_contextual(theme="ODD"))
        assert seen & {"quokka", "ibis", "narwhal", "okapi"}

    def test_working_set_is_built_once_per_snapshot(self, engine):
        engine.add_corpus(["zebra yak xylophone wombat"], theme="ODD")
        snapshot = engine._snapshot
        first = engine._working_set(snapshot, "ODD", False)
        assert engine._working_set(snapshot, "ODD", False) is first
        assert list(snapshot.filtered_tables) == [("ODD", False)]

    def test_concurrent_generation_shares_one_table(self, engine):
        engine.add_corpus(["zebra yak xylophone wombat", "a much longer sentence about the wombat"], theme="ODD")
        snapshot = engine._snapshot
        results = []

        def build():
            results.append(engine._working_set(snapshot, "ODD", True))

        threads = [threading.Thread(target=build) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert all(result is results[0] for result in results)
        assert list(snapshot.filtered_tables) == [("ODD", True)]


class TestAnalysis:
    """Tests for corpus analytics."""

    def test_empty_patterns(self, engine):
        patterns = engine.analyze_patterns()
        assert patterns.average_length == 0
        assert patterns.quality == 0

    def test_patterns(self, engine):
        engine.add_corpus(["the dragon sleeps", "the dragon wakes"], theme="DRAGONS")
        patterns = engine.analyze_patterns()
        assert patterns.themes == ["DRAGONS"]
        assert patterns.common_words[0].count == 2
        assert {w.word for w in patterns.common_words[:2]} == {"the", "dragon"}
        assert 0 < patterns.quality <= 100

    @pytest.mark.parametrize("text,expected", [
        ("a quick brown fox jumps", True),
        ("the the the the the", False),
        ("too short", False),
        ("", False),
    ])
    def test_is_interesting_text(self, text, expected):
        assert MarkovEngine.is_interesting_text(text) is expected
