"""Writing statistics: word count and a rough readability score."""

from __future__ import annotations

import re
from dataclasses import dataclass

_SENTENCE_SPLIT = re.compile(r"[.!?]+")
_VOWELS = frozenset("aeiouAEIOU")

READABILITY_LABELS: list[tuple[float, str]] = [
    (90, "Very Easy"),
    (80, "Easy"),
    (70, "Fairly Easy"),
    (60, "Standard"),
    (50, "Fairly Difficult"),
    (30, "Difficult"),
]


@dataclass
class WritingStats:
    """Summary numbers shown alongside the editor."""
    word_count: int
    sentence_count: int
    syllable_estimate: int
    readability_score: float  # 0.0 - 100.0, Flesch reading ease
    readability_label: str
    writing_minutes: int = 0


def count_words(text: str) -> int:
    return len(text.split())


def readability_label(score: float) -> str:
    for threshold, label in READABILITY_LABELS:
        if score >= threshold:
            return label
    return "Very Difficult"


def compute_writing_stats(text: str, writing_minutes: int = 0) -> WritingStats:
    """Compute word count and a Flesch reading-ease approximation.

    Syllables are estimated by counting vowels, so the score is only a
    coarse indicator. Empty text scores 0.
    """
    words = count_words(text)
    sentences = len([s for s in _SENTENCE_SPLIT.split(text) if s.strip()])
    syllables = sum(1 for ch in text if ch in _VOWELS)

    score = 0.0
    if words and sentences:
        raw = (
            206.835
            - 1.015 * (words / sentences)
            - 84.6 * (syllables / words)
        )
        score = max(0.0, min(100.0, round(raw, 1)))

    return WritingStats(
        word_count=words,
        sentence_count=sentences,
        syllable_estimate=syllables,
        readability_score=score,
        readability_label=readability_label(score),
        writing_minutes=writing_minutes,
    )
