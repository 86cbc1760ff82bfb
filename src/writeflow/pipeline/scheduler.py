"""Debounced analysis scheduler: one in-flight check per document."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from writeflow.models.notice import Notice
from writeflow.models.request import AnalysisRequest
from writeflow.pipeline.text_checker import TextChecker
from writeflow.store.suggestion_store import SuggestionStore

logger = logging.getLogger(__name__)


class AnalysisScheduler:
    """Run a text check after the user stops typing.

    Each ``schedule`` call cancels the pending quiet-period wait and starts a
    new one. At most one check runs at a time; a wait that ends while a check
    is in flight waits for it before trying to start its own. Results are
    merged through the store, which drops them if the text moved on.
    """

    def __init__(
        self,
        store: SuggestionStore,
        checker: TextChecker,
        *,
        debounce_seconds: float = 1.5,
        document_id: str | None = None,
        user_id: str | None = None,
        on_notice: Callable[[Notice], None] | None = None,
    ):
        self.store = store
        self.checker = checker
        self.debounce_seconds = debounce_seconds
        self.document_id = document_id
        self.user_id = user_id
        self.on_notice = on_notice
        self._pending: asyncio.Task | None = None
        self._inflight: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    @property
    def in_flight(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    def schedule(self, text: str) -> asyncio.Task:
        """(Re)start the quiet-period timer for ``text``."""
        self.cancel()
        self._pending = asyncio.create_task(self._debounced(text))
        return self._pending

    def cancel(self) -> None:
        """Cancel the pending wait. An in-flight check is left to finish."""
        if self._pending is not None and not self._pending.done():
            self._pending.cancel()
        self._pending = None

    async def drain(self) -> None:
        """Wait for the pending wait and any in-flight check to finish."""
        for task in (self._pending, self._inflight):
            if task is not None:
                try:
                    await task
                except asyncio.CancelledError:
                    pass

    async def _debounced(self, text: str) -> None:
        await asyncio.sleep(self.debounce_seconds)
        if self.in_flight:
            await asyncio.shield(self._inflight)
        self.store.tick()
        if not self.store.begin_analysis(text):
            return
        self._inflight = asyncio.create_task(self._run(text))
        await asyncio.shield(self._inflight)

    async def _run(self, text: str) -> None:
        request = AnalysisRequest(
            text=text,
            document_id=self.document_id,
            user_id=self.user_id,
        )
        outcome = await self.checker.check(request)
        if outcome.notice is not None:
            self.store.fail_analysis(text)
            self._notify(outcome.notice)
            return
        if not self.store.complete_analysis(text, outcome.raw):
            logger.debug("Analysis result for stale snapshot discarded")

    def _notify(self, notice: Notice) -> None:
        logger.info("%s: %s", notice.title, notice.description)
        if self.on_notice is not None:
            self.on_notice(notice)
