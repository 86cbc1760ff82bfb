"""In-memory suggestion store with analysis-freshness state machine."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator

from writeflow.config import AnalysisConfig
from writeflow.models.stats import count_words
from writeflow.models.suggestion import Suggestion
from writeflow.reconcile.validator import validate

logger = logging.getLogger(__name__)


class AnalysisState(str, Enum):
    IDLE = "idle"
    ANALYZING = "analyzing"
    COMPLETED = "completed"
    STALE = "stale"


class StoreBusyError(RuntimeError):
    """Raised when a second suggestion application starts while one is running."""


class SuggestionStore:
    """Holds the current suggestion set for one document.

    Transitions:
        IDLE -> ANALYZING        begin_analysis() on qualifying text
        ANALYZING -> COMPLETED   complete_analysis() for the in-flight snapshot
        ANALYZING/COMPLETED -> STALE
                                 note_text_change() past the word tolerance,
                                 or a text change while an application runs
        STALE -> IDLE            tick(), which clears the suggestions
    """

    def __init__(
        self,
        *,
        min_chars: int = 20,
        min_words: int = 5,
        stale_word_tolerance: int = 3,
    ):
        self.min_chars = min_chars
        self.min_words = min_words
        self.stale_word_tolerance = stale_word_tolerance
        self.state = AnalysisState.IDLE
        self._suggestions: list[Suggestion] = []
        self._snapshot: str | None = None
        self._snapshot_words = 0
        self._processing = False

    @classmethod
    def from_config(cls, config: AnalysisConfig) -> SuggestionStore:
        return cls(
            min_chars=config.min_chars,
            min_words=config.min_words,
            stale_word_tolerance=config.stale_word_tolerance,
        )

    # --- queries ---

    @property
    def suggestions(self) -> list[Suggestion]:
        return list(self._suggestions)

    @property
    def snapshot(self) -> str | None:
        """Text of the analysis in flight or last completed."""
        return self._snapshot

    @property
    def is_processing(self) -> bool:
        return self._processing

    def __len__(self) -> int:
        return len(self._suggestions)

    def get(self, suggestion_id: str) -> Suggestion | None:
        for s in self._suggestions:
            if s.id == suggestion_id:
                return s
        return None

    def qualifies(self, text: str) -> bool:
        """True if ``text`` is longer than ``min_chars`` with at least ``min_words`` words."""
        return (
            len(text.strip()) > self.min_chars
            and count_words(text) >= self.min_words
        )

    def has_completed_analysis(self, text: str | None = None) -> bool:
        if self.state is not AnalysisState.COMPLETED:
            return False
        return text is None or text == self._snapshot

    # --- suggestion set ---

    def add_batch(self, raw: Any, text: str) -> int:
        """Validate ``raw`` against ``text`` and merge it into the current set.

        Returns the number of suggestions added.
        """
        incoming = raw if isinstance(raw, (list, tuple)) else []
        before = len(self._suggestions)
        self._suggestions = validate([*self._suggestions, *incoming], len(text))
        return len(self._suggestions) - before

    def remove(self, suggestion_id: str) -> bool:
        before = len(self._suggestions)
        self._suggestions = [s for s in self._suggestions if s.id != suggestion_id]
        return len(self._suggestions) != before

    def clear(self) -> None:
        """Drop all suggestions and forget the analyzed snapshot."""
        self._suggestions = []
        self._snapshot = None
        self._snapshot_words = 0
        self.state = AnalysisState.IDLE

    # --- analysis lifecycle ---

    def begin_analysis(self, text: str) -> bool:
        """Move IDLE -> ANALYZING for ``text`` if an analysis may start."""
        if self.state is not AnalysisState.IDLE:
            return False
        if self._processing or not self.qualifies(text):
            return False
        self._snapshot = text
        self._snapshot_words = count_words(text)
        self.state = AnalysisState.ANALYZING
        logger.debug("Analysis started (%d words)", self._snapshot_words)
        return True

    def complete_analysis(self, snapshot: str, raw: Any) -> bool:
        """Replace the suggestion set with results for ``snapshot``.

        Results are discarded when they belong to a superseded snapshot or
        arrive while an application is in progress.
        """
        if self.state is not AnalysisState.ANALYZING or snapshot != self._snapshot:
            logger.info("Discarding analysis result for a superseded snapshot")
            return False
        if self._processing:
            logger.info("Discarding analysis result received during suggestion application")
            self.state = AnalysisState.STALE
            return False

        self._suggestions = validate(raw, len(snapshot))
        self.state = AnalysisState.COMPLETED
        logger.debug("Analysis completed with %d suggestions", len(self._suggestions))
        return True

    def fail_analysis(self, snapshot: str) -> bool:
        """Clear suggestions after a failed analysis of ``snapshot``."""
        if self.state is not AnalysisState.ANALYZING or snapshot != self._snapshot:
            return False
        self.clear()
        return True

    def note_text_change(self, text: str) -> AnalysisState:
        """Mark the set stale on word-count drift or on a change made while processing."""
        if self.state not in (AnalysisState.ANALYZING, AnalysisState.COMPLETED):
            return self.state

        drift = abs(count_words(text) - self._snapshot_words)
        if drift > self.stale_word_tolerance:
            logger.debug("Word count drifted by %d, suggestions are stale", drift)
            self.state = AnalysisState.STALE
        elif self._processing:
            self.state = AnalysisState.STALE
        return self.state

    def mark_stale(self) -> None:
        if self.state in (AnalysisState.ANALYZING, AnalysisState.COMPLETED):
            self.state = AnalysisState.STALE

    def tick(self) -> AnalysisState:
        """Resolve a pending STALE state by clearing and returning to IDLE."""
        if self.state is AnalysisState.STALE:
            self.clear()
        return self.state

    # --- single-flight guard ---

    @contextmanager
    def processing(self) -> Iterator[SuggestionStore]:
        """Hold the processing flag for one suggestion application."""
        if self._processing:
            raise StoreBusyError("A suggestion application is already in progress")
        self._processing = True
        try:
            yield self
        finally:
            self._processing = False
