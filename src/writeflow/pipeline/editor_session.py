"""Editor session: live text for one document plus accept/reject actions."""

from __future__ import annotations

import logging

from writeflow.models.notice import Notice, NoticeKind
from writeflow.pipeline.scheduler import AnalysisScheduler
from writeflow.reconcile.applier import apply_all, apply_one
from writeflow.store.suggestion_store import StoreBusyError, SuggestionStore

logger = logging.getLogger(__name__)

BUSY_NOTICE = Notice(
    kind=NoticeKind.INFO,
    title="Please wait",
    description="Suggestions are already being applied.",
)
STALE_NOTICE = Notice(
    kind=NoticeKind.STALE_SUGGESTION,
    title="Error",
    description="Cannot apply suggestion - text has changed. Please refresh suggestions.",
)


class EditorSession:
    """Owns the document text and caret offset and applies suggestions to them.

    The session is the only writer of ``text``. Every mutating action runs
    under the store's processing flag, so an analysis result cannot be merged
    while the text is being rewritten.
    """

    def __init__(
        self,
        store: SuggestionStore,
        text: str = "",
        *,
        scheduler: AnalysisScheduler | None = None,
    ):
        self.store = store
        self.text = text
        self.cursor_offset: int | None = None
        self.scheduler = scheduler

    def update_text(self, text: str) -> None:
        """Record a user edit and schedule re-analysis."""
        self.text = text
        self.store.note_text_change(text)
        if self.scheduler is not None:
            self.scheduler.schedule(text)

    def accept(self, suggestion_id: str) -> Notice:
        suggestion = self.store.get(suggestion_id)
        if suggestion is None:
            return Notice(
                kind=NoticeKind.GENERIC_ERROR,
                title="Error",
                description="Suggestion no longer exists.",
            )

        try:
            with self.store.processing():
                edit = apply_one(self.text, suggestion)
                # Stale or applied, the suggestion is consumed either way.
                self.store.remove(suggestion.id)
                if edit is None:
                    logger.warning("Could not locate %r, suggestion discarded", suggestion.original)
                    return STALE_NOTICE
                self.text = edit.new_text
                self.cursor_offset = edit.cursor_offset
        except StoreBusyError:
            return BUSY_NOTICE

        # Checked after the flag is released so only word drift counts.
        self.store.note_text_change(self.text)
        return Notice(
            kind=NoticeKind.SUCCESS,
            title="Suggestion applied",
            description=f'Changed "{suggestion.original}" to "{suggestion.correction}"',
        )

    def reject(self, suggestion_id: str) -> Notice:
        self.store.remove(suggestion_id)
        return Notice(
            kind=NoticeKind.INFO,
            title="Suggestion rejected",
            description="The suggestion has been dismissed",
        )

    def accept_all(self) -> Notice | None:
        """Apply every current suggestion. Returns None when there is nothing to apply."""
        suggestions = self.store.suggestions
        if not suggestions:
            return None

        try:
            with self.store.processing():
                result = apply_all(self.text, suggestions)
                if result.failed:
                    self.store.mark_stale()
                else:
                    self.text = result.new_text
                    self.cursor_offset = None
                    # The corrected text gets analyzed afresh.
                    self.store.clear()
        except StoreBusyError:
            return BUSY_NOTICE

        if result.failed:
            return Notice(
                kind=NoticeKind.STALE_SUGGESTION,
                title="No suggestions applied",
                description="Text may have changed. Please refresh suggestions.",
            )
        if self.scheduler is not None:
            self.scheduler.schedule(self.text)
        return Notice(
            kind=NoticeKind.SUCCESS,
            title="All suggestions applied",
            description=f"Applied {result.applied_count} suggestions successfully",
        )
