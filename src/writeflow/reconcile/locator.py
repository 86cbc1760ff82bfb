"""Span locator: find word-bounded occurrences of a phrase near a hinted offset."""

from __future__ import annotations

import re

from writeflow.models.suggestion import Match


def normalize_phrase(text: str) -> str:
    """Trim- and case-insensitive comparison key."""
    return text.strip().casefold()


def phrases_match(a: str, b: str) -> bool:
    return normalize_phrase(a) == normalize_phrase(b)


def _boundary_pattern(word: str) -> re.Pattern[str]:
    # Lookarounds instead of \b so phrases that start or end with
    # punctuation ("Mr.", ", and") still need a non-word neighbour.
    return re.compile(rf"(?<!\w){re.escape(word)}(?!\w)", re.IGNORECASE)


def locate(text: str, word: str, hint_start: int = 0) -> list[Match]:
    """Return every word-bounded occurrence of ``word`` in ``text``.

    Matching is case-insensitive and literal. Results are ordered by
    distance from ``hint_start``, ties broken by the smaller start offset.
    ``matched_text`` keeps the casing found in ``text``.

    Returns an empty list when nothing matches; callers treat that as
    "cannot relocate".
    """
    needle = word.strip()
    if not needle or not text:
        return []

    matches = [
        Match(start=m.start(), end=m.end(), matched_text=m.group(0))
        for m in _boundary_pattern(needle).finditer(text)
    ]
    matches.sort(key=lambda m: (abs(m.start - hint_start), m.start))
    return matches


def closest_match(text: str, word: str, hint_start: int = 0) -> Match | None:
    """The occurrence nearest ``hint_start``, or None."""
    matches = locate(text, word, hint_start)
    return matches[0] if matches else None
