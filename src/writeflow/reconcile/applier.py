"""Batch applier: splice reconciled corrections into text."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from writeflow.models.suggestion import Span, Suggestion
from writeflow.reconcile.reconciler import reconcile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppliedEdit:
    """Result of applying a single suggestion."""

    new_text: str
    cursor_offset: int  # caret position just after the inserted correction
    span: Span  # span that was replaced, in the pre-edit text


@dataclass
class BatchResult:
    """Result of applying a batch of suggestions."""

    new_text: str
    applied_count: int = 0
    applied_ids: list[str] = field(default_factory=list)
    skipped_ids: list[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        """Non-empty batch where nothing applied: the set is likely stale."""
        return self.applied_count == 0 and bool(self.skipped_ids)


def splice(text: str, span: Span, replacement: str) -> str:
    return text[: span.start] + replacement + text[span.end :]


def apply_one(text: str, suggestion: Suggestion) -> AppliedEdit | None:
    """Apply one suggestion, or return None if its phrase cannot be found."""
    span = reconcile(text, suggestion)
    if span is None:
        return None
    return AppliedEdit(
        new_text=splice(text, span, suggestion.correction),
        cursor_offset=span.start + len(suggestion.correction),
        span=span,
    )


def apply_all(text: str, suggestions: Iterable[Suggestion]) -> BatchResult:
    """Apply suggestions right to left against progressively edited text.

    Suggestions are ordered by descending stated start (then descending end,
    then input order) and each one is reconciled against the current text.
    Unlocatable suggestions are skipped. When two reconciled spans overlap,
    the one applied first wins and the later one is skipped; regions already
    written by this batch are never rewritten.
    """
    ordered = sorted(
        enumerate(suggestions),
        key=lambda pair: (-pair[1].span.start, -pair[1].span.end, pair[0]),
    )

    result = BatchResult(new_text=text)
    written: list[Span] = []

    for _, suggestion in ordered:
        span = reconcile(result.new_text, suggestion)
        if span is None:
            result.skipped_ids.append(suggestion.id)
            continue
        if any(span.overlaps(region) for region in written):
            logger.debug("Skipping %s: overlaps an edit already applied", suggestion.id)
            result.skipped_ids.append(suggestion.id)
            continue

        result.new_text = splice(result.new_text, span, suggestion.correction)
        delta = len(suggestion.correction) - span.length
        written = [_shift(region, span, delta) for region in written]
        written.append(Span(start=span.start, end=span.start + len(suggestion.correction)))
        result.applied_ids.append(suggestion.id)
        result.applied_count += 1

    logger.debug(
        "Applied %d of %d suggestions", result.applied_count, len(ordered),
    )
    return result


def _shift(region: Span, edited: Span, delta: int) -> Span:
    # Regions never overlap an applied edit, so they sit wholly left or right of it.
    if delta == 0 or region.start < edited.end:
        return region
    return Span(start=region.start + delta, end=region.end + delta)
