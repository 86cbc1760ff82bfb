"""Shared test fixtures."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from writeflow.clients.llm_client import LLMClient, LLMResponse
from writeflow.models.suggestion import Span, Suggestion, SuggestionCategory
from writeflow.store.suggestion_store import SuggestionStore


def _make_suggestion(
    original: str,
    correction: str,
    start: int,
    end: int | None = None,
    category: SuggestionCategory = SuggestionCategory.SPELLING,
    explanation: str = "Fix it",
    suggestion_id: str | None = None,
) -> Suggestion:
    """Build a Suggestion without going through the validator."""
    kwargs = {}
    if suggestion_id is not None:
        kwargs["id"] = suggestion_id
    return Suggestion(
        category=category,
        span=Span(start=start, end=start + len(original) if end is None else end),
        original=original,
        correction=correction,
        explanation=explanation,
        **kwargs,
    )


def _raw_suggestion(
    original: str,
    correction: str,
    start: int,
    end: int | None = None,
    type_: str = "spelling",
    explanation: str = "Fix it",
) -> dict:
    """Build a wire-format suggestion dict as the checker returns it."""
    return {
        "type": type_,
        "position": {"start": start, "end": start + len(original) if end is None else end},
        "original": original,
        "correction": correction,
        "explanation": explanation,
    }


@pytest.fixture
def sample_text() -> str:
    return "Yesterday I goed to the store and buyed some apples for mines family."


@pytest.fixture
def sample_raw_suggestions(sample_text) -> list[dict]:
    return [
        _raw_suggestion("goed", "went", sample_text.index("goed"), type_="grammar",
                        explanation="Past tense of 'go' is 'went'"),
        _raw_suggestion("buyed", "bought", sample_text.index("buyed"), type_="grammar",
                        explanation="Past tense of 'buy' is 'bought'"),
        _raw_suggestion("mines", "my", sample_text.index("mines"), type_="style",
                        explanation="Use the possessive 'my'"),
    ]


@pytest.fixture
def make_suggestion():
    return _make_suggestion


@pytest.fixture
def raw_suggestion():
    return _raw_suggestion


@pytest.fixture
def store() -> SuggestionStore:
    return SuggestionStore(min_chars=20, min_words=5, stale_word_tolerance=3)


@pytest.fixture
def mock_llm_client() -> LLMClient:
    """Create a mock LLM client."""
    client = AsyncMock(spec=LLMClient)
    client.generate = AsyncMock(
        return_value=LLMResponse(text="[]", input_tokens=100, output_tokens=50)
    )
    return client
