"""
Tests for loading training corpora from disk.
"""

import pytest

from event_generators.corpus_loader import CorpusLoader
from event_generators.markov_engine import MarkovEngine


@pytest.fixture
def corpus_dir(tmp_path):
    (tmp_path / "combat.txt").write_text(
        "Steel rings in the courtyard. The captain falls back!\n\n"
        "Smoke drifts over the walls.\nOk.\n",
        encoding="utf-8",
    )
    (tmp_path / "lore.md").write_text(
        "# Old Legends\n\n"
        "- The first king slept beneath the mountain.\n"
        "1. His crown was never found.\n",
        encoding="utf-8",
    )
    (tmp_path / "notes.json").write_text('{"ignored": true}', encoding="utf-8")
    return tmp_path


class TestCorpusLoader:

    def test_each_file_is_a_theme(self, corpus_dir):
        themes = CorpusLoader(corpus_dir).load()
        assert set(themes) == {"COMBAT", "LORE"}

    def test_sentences_are_split(self, corpus_dir):
        themes = CorpusLoader(corpus_dir).load()
        assert themes["COMBAT"] == [
            "Steel rings in the courtyard.",
            "The captain falls back!",
            "Smoke drifts over the walls.",
        ]

    def test_markdown_markup_is_dropped(self, corpus_dir):
        themes = CorpusLoader(corpus_dir).load()
        assert themes["LORE"] == [
            "The first king slept beneath the mountain.",
            "His crown was never found.",
        ]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CorpusLoader(tmp_path / "missing").load()

    def test_load_into_engine(self, corpus_dir):
        engine = MarkovEngine()
        assert CorpusLoader(corpus_dir).load_into(engine) == 5
        assert engine.entries_for_theme("LORE")[1] == "His crown was never found."
        assert engine.has_transitions()
