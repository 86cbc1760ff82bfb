"""Data models for the writing assistant."""

from writeflow.models.notice import Notice, NoticeKind
from writeflow.models.request import AnalysisOutcome, AnalysisRequest
from writeflow.models.stats import WritingStats, compute_writing_stats
from writeflow.models.suggestion import (
    Match,
    Span,
    Suggestion,
    SuggestionCategory,
)

__all__ = [
    "AnalysisOutcome",
    "AnalysisRequest",
    "Match",
    "Notice",
    "NoticeKind",
    "Span",
    "Suggestion",
    "SuggestionCategory",
    "WritingStats",
    "compute_writing_stats",
]
