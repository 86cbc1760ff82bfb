"""Suggestion store."""

from writeflow.store.suggestion_store import (
    AnalysisState,
    StoreBusyError,
    SuggestionStore,
)

__all__ = ["AnalysisState", "StoreBusyError", "SuggestionStore"]
