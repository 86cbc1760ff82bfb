"""Claude API wrapper with async support and retry logic."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import anthropic
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "claude-haiku-4-5-20251001"

# Errors worth retrying; auth and bad-request errors are not.
TRANSIENT_ERRORS: tuple[type[Exception], ...] = (
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)


@dataclass
class LLMResponse:
    """Response from the LLM including usage metadata."""

    text: str
    input_tokens: int
    output_tokens: int


@dataclass(frozen=True)
class TokenUsage:
    model: str
    input_tokens: int
    output_tokens: int


class LLMClient:
    """Async Claude client for the text checker.

    Transient failures (connection errors, rate limits, 5xx) are retried with
    exponential backoff up to ``max_retries`` attempts and then re-raised.
    Everything else propagates on the first attempt.
    """

    def __init__(
        self,
        api_key: str | None = None,
        timeout: float | None = None,
        max_retries: int = 3,
    ):
        client_kwargs: dict = {}
        if api_key is not None:
            client_kwargs["api_key"] = api_key
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**client_kwargs)
        self.max_retries = max_retries
        self._usage: list[TokenUsage] = []

    async def _create(self, request: dict) -> anthropic.types.Message:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(min=1, max=10),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return await retrying(self.client.messages.create, **request)

    async def generate(
        self,
        prompt: str,
        system: str = "",
        model: str = DEFAULT_MODEL,
        temperature: float = 0.0,
        max_tokens: int = 2000,
    ) -> LLMResponse:
        """Send one user message and return the first text block.

        A response without content blocks yields empty text.
        """
        request: dict = {
            "model": model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system:
            request["system"] = system

        logger.debug("LLM call: model=%s, prompt=%d chars", model, len(prompt))
        try:
            message = await self._create(request)
        except Exception:
            logger.error("LLM call failed", exc_info=True)
            raise

        usage = TokenUsage(model, message.usage.input_tokens, message.usage.output_tokens)
        self._usage.append(usage)
        logger.debug("LLM usage: %d in / %d out", usage.input_tokens, usage.output_tokens)
        return LLMResponse(
            text=message.content[0].text if message.content else "",
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
        )

    def get_token_summary(self) -> dict:
        """Totals and per-model breakdown since the last call, then reset."""
        by_model: dict[str, dict[str, int]] = {}
        for u in self._usage:
            entry = by_model.setdefault(u.model, {"input": 0, "output": 0})
            entry["input"] += u.input_tokens
            entry["output"] += u.output_tokens
        summary = {
            "input": sum(u.input_tokens for u in self._usage),
            "output": sum(u.output_tokens for u in self._usage),
            "calls": len(self._usage),
            "by_model": by_model,
        }
        self._usage.clear()
        return summary
