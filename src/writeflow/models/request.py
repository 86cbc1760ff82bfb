"""Pydantic models for the remote analysis request/response boundary."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from writeflow.models.notice import Notice


class AnalysisRequest(BaseModel):
    text: str
    document_id: str | None = None
    user_id: str | None = None


class AnalysisOutcome(BaseModel):
    """Raw suggestion payloads plus an optional notice when the call degraded."""

    raw: list[Any] = []
    notice: Notice | None = None

    @property
    def ok(self) -> bool:
        return self.notice is None
