"""Reconciler: decide whether a suggestion's span still points at its text."""

from __future__ import annotations

import logging

from writeflow.models.suggestion import Span, Suggestion
from writeflow.reconcile.locator import closest_match, phrases_match

logger = logging.getLogger(__name__)


def reconcile(text: str, suggestion: Suggestion) -> Span | None:
    """Return the span to replace in ``text``, or None if the phrase is gone.

    Tiers, in order:
    1. the stated span holds ``original`` exactly;
    2. it holds ``original`` up to case and surrounding whitespace;
    3. otherwise relocate ``original`` with the span locator, taking the
       word-bounded occurrence closest to the stated start.

    A stated span that no longer fits ``text`` is never trusted as-is.
    """
    span = suggestion.span
    if span.within(len(text)):
        actual = text[span.start : span.end]
        if actual == suggestion.original or phrases_match(actual, suggestion.original):
            return span

    match = closest_match(text, suggestion.original, span.start)
    if match is None:
        logger.debug("Could not locate %r near %d", suggestion.original, span.start)
        return None

    if match.start != span.start:
        logger.debug(
            "Relocated %r from %d-%d to %d-%d",
            suggestion.original, span.start, span.end, match.start, match.end,
        )
    return match.span
