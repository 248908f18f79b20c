"""
Corpus Loader

Reads training sentences for the Markov engine from a directory of text
and markdown files. Each file becomes one theme, named after the file stem
in upper case, so ``combat.txt`` feeds the COMBAT theme.
"""

import logging
import re
from pathlib import Path
from typing import Dict, List

logger = logging.getLogger(__name__)


class CorpusLoader:
    """Loads themed sentences from a directory tree."""

    SUPPORTED_EXTENSIONS = {'.txt', '.md'}
    SENTENCE_BOUNDARY = re.compile(r'(?<=[.!?])\s+')
    MIN_SENTENCE_LENGTH = 8

    def __init__(self, corpus_path: Path):
        self.corpus_path = Path(corpus_path)

    def _read_file(self, file_path: Path) -> str:
        """Read content from a file, dropping markdown headings and list markers."""
        with open(file_path, 'r', encoding='utf-8') as f:
            lines = f.read().splitlines()

        kept = []
        for line in lines:
            line = line.strip()
            if file_path.suffix.lower() == '.md':
                if line.startswith('#'):
                    continue
                line = re.sub(r'^([-*+]|\d+\.)\s+', '', line)
            kept.append(line)
        return "\n".join(kept)

    def split_sentences(self, text: str) -> List[str]:
        sentences = []
        for paragraph in re.split(r'\n\s*\n', text):
            paragraph = " ".join(paragraph.split())
            for sentence in self.SENTENCE_BOUNDARY.split(paragraph):
                sentence = sentence.strip()
                if len(sentence) >= self.MIN_SENTENCE_LENGTH:
                    sentences.append(sentence)
        return sentences

    def load(self) -> Dict[str, List[str]]:
        """Map each theme to its sentences. Raises FileNotFoundError for a missing directory."""
        if not self.corpus_path.is_dir():
            raise FileNotFoundError(f"Corpus directory not found: {self.corpus_path}")

        themes: Dict[str, List[str]] = {}
        for file_path in sorted(self.corpus_path.rglob("*")):
            if file_path.is_file() and file_path.suffix.lower() in self.SUPPORTED_EXTENSIONS:
                sentences = self.split_sentences(self._read_file(file_path))
                if not sentences:
                    continue
                logger.info("Loaded %d sentences from %s", len(sentences), file_path.name)
                themes.setdefault(file_path.stem.upper(), []).extend(sentences)
        return themes

    def load_into(self, target) -> int:
        """Feed every theme into anything with ``add_corpus(sentences, theme)``."""
        total = 0
        for theme, sentences in self.load().items():
            target.add_corpus(sentences, theme=theme)
            total += len(sentences)
        return total
