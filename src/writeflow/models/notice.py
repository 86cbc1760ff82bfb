"""User-facing notices produced by analysis and suggestion application."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class NoticeKind(str, Enum):
    SUCCESS = "success"
    INFO = "info"
    STALE_SUGGESTION = "stale_suggestion"
    CONFIGURATION_ERROR = "configuration_error"
    TRANSIENT_ERROR = "transient_error"
    GENERIC_ERROR = "generic_error"


_ERROR_KINDS = frozenset({
    NoticeKind.STALE_SUGGESTION,
    NoticeKind.CONFIGURATION_ERROR,
    NoticeKind.TRANSIENT_ERROR,
    NoticeKind.GENERIC_ERROR,
})


class Notice(BaseModel):
    """A short, non-fatal message for the editor surface to display."""

    kind: NoticeKind
    title: str
    description: str = ""

    @property
    def is_error(self) -> bool:
        return self.kind in _ERROR_KINDS
