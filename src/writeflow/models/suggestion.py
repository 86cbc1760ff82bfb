"""Pydantic models for grammar suggestions and the spans they point at."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field, StrictInt, field_validator


class SuggestionCategory(str, Enum):
    GRAMMAR = "grammar"
    SPELLING = "spelling"
    STYLE = "style"
    PUNCTUATION = "punctuation"


class Span(BaseModel):
    """Half-open character interval [start, end) into one text snapshot."""

    start: StrictInt
    end: StrictInt

    model_config = {"frozen": True}

    @property
    def length(self) -> int:
        return self.end - self.start

    def within(self, text_length: int) -> bool:
        """True if the span is non-empty and fits a text of ``text_length``."""
        return 0 <= self.start < self.end <= text_length

    def overlaps(self, other: Span) -> bool:
        # Touching spans (self.end == other.start) do not overlap.
        return self.start < other.end and other.start < self.end


def _new_suggestion_id() -> str:
    return f"suggestion-{uuid.uuid4().hex}"


class Suggestion(BaseModel):
    """A proposed replacement of ``original`` at ``span`` with ``correction``.

    Field aliases follow the wire format returned by the text checker
    (``type`` and ``position``), so raw payloads validate directly.
    """

    id: str = Field(default_factory=_new_suggestion_id)
    category: SuggestionCategory = Field(alias="type")
    span: Span = Field(alias="position")
    original: str = Field(min_length=1)
    correction: str = Field(min_length=1)
    explanation: str = Field(min_length=1)

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value

    def to_wire(self) -> dict:
        """Dump using the wire field names (``type``, ``position``)."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class Match:
    """One word-bounded occurrence found by the span locator."""

    start: int
    end: int
    matched_text: str

    @property
    def span(self) -> Span:
        return Span(start=self.start, end=self.end)
