"""Word count, reading time and highlight extraction for story bodies."""

from __future__ import annotations

import math
import re
from typing import List, Sequence

WORDS_PER_MINUTE = 200
MAX_HIGHLIGHTS = 5
MIN_SENTENCE_LENGTH = 10
MAX_HIGHLIGHT_LENGTH = 150

HIGHLIGHT_WORDS = (
    "magnifique",
    "incroyable",
    "extraordinaire",
    "merveilleux",
    "merveilleuse",
    "inoubliable",
    "fascinant",
    "fascinante",
    "impressionnant",
    "impressionnante",
    "spectaculaire",
    "amazing",
    "incredible",
    "extraordinary",
    "wonderful",
    "unforgettable",
    "fascinating",
    "impressive",
    "spectacular",
    "breathtaking",
    "magnificent",
)

_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def _build_vocabulary_re(words: Sequence[str]) -> re.Pattern:
    alternatives = "|".join(re.escape(word) for word in words)
    return re.compile(rf"\b(?:{alternatives})s?\b", re.IGNORECASE)


_HIGHLIGHT_RE = _build_vocabulary_re(HIGHLIGHT_WORDS)


def count_words(text: str) -> int:
    """Number of whitespace-delimited tokens; 0 for empty text."""
    if not text:
        return 0
    return len(text.split())


def estimate_reading_time(word_count: int) -> int:
    """Reading time in minutes at 200 words per minute, rounded up."""
    if word_count <= 0:
        return 0
    return math.ceil(word_count / WORDS_PER_MINUTE)


def split_sentences(text: str) -> List[str]:
    """Split on sentence punctuation, dropping fragments under 10 characters."""
    if not text:
        return []
    parts = [part.strip() for part in _SENTENCE_SPLIT_RE.split(text)]
    return [part for part in parts if len(part) >= MIN_SENTENCE_LENGTH]


def extract_highlights(
    text: str,
    vocabulary: Sequence[str] = HIGHLIGHT_WORDS,
    limit: int = MAX_HIGHLIGHTS,
) -> List[str]:
    """Pick short, emotionally charged sentences from a story body

    Args:
        text: Story body
        vocabulary: Words that mark a sentence as a highlight (case-insensitive)
        limit: Maximum number of highlights

    Returns:
        Up to `limit` sentences, in body order
    """
    if not vocabulary or limit <= 0:
        return []
    pattern = _HIGHLIGHT_RE if vocabulary is HIGHLIGHT_WORDS else _build_vocabulary_re(vocabulary)

    highlights = []
    for sentence in split_sentences(text):
        if len(sentence) < MAX_HIGHLIGHT_LENGTH and pattern.search(sentence):
            highlights.append(sentence)
            if len(highlights) >= limit:
                break
    return highlights
