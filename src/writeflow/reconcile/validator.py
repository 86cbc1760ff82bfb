"""Suggestion validator: turn a raw remote batch into clean, sorted suggestions."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from writeflow.models.suggestion import Span, Suggestion
from writeflow.reconcile.locator import phrases_match

logger = logging.getLogger(__name__)


def validate(raw_suggestions: Any, text_length: int) -> list[Suggestion]:
    """Filter raw suggestions down to well-formed, in-bounds, unique ones.

    ``raw_suggestions`` may hold wire dicts (``type``, ``position``,
    ``original``, ``correction``, ``explanation``) or ``Suggestion`` objects.
    Wire dicts always receive a fresh id; existing ``Suggestion`` objects keep
    theirs, so running ``validate`` on its own output changes nothing.

    Out-of-range offsets are clamped to ``[0, text_length]`` before the
    ``start < end`` check. The result is sorted by start offset. Malformed
    input is dropped silently; a non-list input yields an empty list.
    """
    if not isinstance(raw_suggestions, (list, tuple)):
        logger.debug("Ignoring non-list suggestion payload: %s", type(raw_suggestions).__name__)
        return []

    limit = max(0, text_length)
    kept: list[Suggestion] = []
    seen: set[tuple[int, int, str]] = set()

    for item in raw_suggestions:
        suggestion = _parse(item)
        if suggestion is None:
            continue

        span = _clamp(suggestion.span, limit)
        if span.start >= span.end:
            logger.debug("Dropping empty span %s for %r", span, suggestion.original)
            continue

        if phrases_match(suggestion.original, suggestion.correction):
            continue

        key = (span.start, span.end, suggestion.original)
        if key in seen:
            continue
        seen.add(key)

        if span != suggestion.span:
            suggestion = suggestion.model_copy(update={"span": span})
        kept.append(suggestion)

    kept.sort(key=lambda s: s.span.start)
    if len(kept) != len(raw_suggestions):
        logger.debug("Validated %d of %d suggestions", len(kept), len(raw_suggestions))
    return kept


def _parse(item: Any) -> Suggestion | None:
    if isinstance(item, Suggestion):
        return item
    if not isinstance(item, dict):
        return None
    # Ids are ours to assign, never the remote's.
    payload = {k: v for k, v in item.items() if k != "id"}
    try:
        return Suggestion.model_validate(payload)
    except ValidationError:
        return None


def _clamp(span: Span, limit: int) -> Span:
    start = min(max(span.start, 0), limit)
    end = min(max(span.end, 0), limit)
    if (start, end) == (span.start, span.end):
        return span
    return Span(start=start, end=end)
