"""Tests for the text checker agent."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import anthropic
import pytest

from writeflow.clients.llm_client import LLMResponse
from writeflow.models.notice import NoticeKind
from writeflow.models.request import AnalysisRequest
from writeflow.pipeline.text_checker import (
    CONFIGURATION_NOTICE,
    GENERIC_NOTICE,
    TRANSIENT_NOTICE,
    TextChecker,
    classify_error,
    classify_error_message,
)


def _respond(client, text: str) -> None:
    client.generate = AsyncMock(
        return_value=LLMResponse(text=text, input_tokens=100, output_tokens=50)
    )


@pytest.fixture
def checker(mock_llm_client):
    return TextChecker(mock_llm_client, model="test-model", temperature=0.2, max_tokens=800)


class TestTextCheckerCheck:
    async def test_returns_raw_items(self, checker, mock_llm_client, sample_text, sample_raw_suggestions):
        _respond(mock_llm_client, json.dumps(sample_raw_suggestions))
        outcome = await checker.check(AnalysisRequest(text=sample_text))
        assert outcome.ok
        assert outcome.raw == sample_raw_suggestions

    async def test_prompt_carries_text_and_settings(self, checker, mock_llm_client, sample_text):
        await checker.check(AnalysisRequest(text=sample_text, document_id="doc-1"))
        kwargs = mock_llm_client.generate.call_args.kwargs
        assert sample_text in kwargs["prompt"]
        assert kwargs["model"] == "test-model"
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 800
        assert kwargs["system"]

    async def test_empty_text_is_an_error(self, checker, mock_llm_client):
        outcome = await checker.check(AnalysisRequest(text="   "))
        assert outcome.notice.kind is NoticeKind.GENERIC_ERROR
        assert outcome.notice.description == "Text is required"
        mock_llm_client.generate.assert_not_called()

    async def test_short_text_skips_call(self, checker, mock_llm_client):
        outcome = await checker.check(AnalysisRequest(text="Hi there"))
        assert outcome.ok
        assert outcome.raw == []
        mock_llm_client.generate.assert_not_called()

    async def test_wrapped_payload_unwrapped(self, checker, mock_llm_client, sample_text, sample_raw_suggestions):
        _respond(mock_llm_client, json.dumps({"suggestions": sample_raw_suggestions}))
        outcome = await checker.check(AnalysisRequest(text=sample_text))
        assert len(outcome.raw) == 3

    async def test_fenced_payload(self, checker, mock_llm_client, sample_text):
        _respond(mock_llm_client, "Here you go:\n```json\n[]\n```")
        outcome = await checker.check(AnalysisRequest(text=sample_text))
        assert outcome.ok
        assert outcome.raw == []

    async def test_empty_response(self, checker, mock_llm_client, sample_text):
        _respond(mock_llm_client, "  ")
        outcome = await checker.check(AnalysisRequest(text=sample_text))
        assert outcome.ok
        assert outcome.raw == []

    async def test_unparseable_response(self, checker, mock_llm_client, sample_text):
        _respond(mock_llm_client, "I could not find any issues, sorry.")
        outcome = await checker.check(AnalysisRequest(text=sample_text))
        assert outcome.notice == GENERIC_NOTICE
        assert outcome.raw == []

    async def test_non_array_response(self, checker, mock_llm_client, sample_text):
        _respond(mock_llm_client, '{"result": "fine"}')
        outcome = await checker.check(AnalysisRequest(text=sample_text))
        assert outcome.notice == GENERIC_NOTICE

    async def test_error_payload_about_api_key(self, checker, mock_llm_client, sample_text):
        _respond(mock_llm_client, '{"error": "API key not configured"}')
        outcome = await checker.check(AnalysisRequest(text=sample_text))
        assert outcome.notice == CONFIGURATION_NOTICE

    async def test_transient_failure(self, checker, mock_llm_client, sample_text):
        mock_llm_client.generate = AsyncMock(
            side_effect=anthropic.APIConnectionError(request=MagicMock())
        )
        outcome = await checker.check(AnalysisRequest(text=sample_text))
        assert outcome.notice == TRANSIENT_NOTICE
        assert outcome.raw == []

    async def test_unexpected_failure(self, checker, mock_llm_client, sample_text):
        mock_llm_client.generate = AsyncMock(side_effect=RuntimeError("boom"))
        outcome = await checker.check(AnalysisRequest(text=sample_text))
        assert outcome.notice == GENERIC_NOTICE


class TestClassifyError:
    def test_authentication(self):
        response = MagicMock()
        response.status_code = 401
        exc = anthropic.AuthenticationError(message="bad key", response=response, body=None)
        assert classify_error(exc) == CONFIGURATION_NOTICE

    def test_rate_limit(self):
        response = MagicMock()
        response.status_code = 429
        exc = anthropic.RateLimitError(message="slow down", response=response, body=None)
        assert classify_error(exc) == TRANSIENT_NOTICE

    def test_missing_credentials(self):
        exc = TypeError("Could not resolve authentication method. Expected the api_key to be set")
        assert classify_error(exc) == CONFIGURATION_NOTICE

    def test_other(self):
        assert classify_error(ValueError("x")) == GENERIC_NOTICE

    def test_message(self):
        assert classify_error_message("Invalid API key") == CONFIGURATION_NOTICE
        assert classify_error_message("quota exceeded") == GENERIC_NOTICE
