"""Text checker agent: asks the LLM for grammar, spelling, punctuation and style fixes."""

from __future__ import annotations

import logging

import anthropic

from writeflow.clients.llm_client import DEFAULT_MODEL, TRANSIENT_ERRORS, LLMClient
from writeflow.models.notice import Notice, NoticeKind
from writeflow.models.request import AnalysisOutcome, AnalysisRequest
from writeflow.utils.json_parser import extract_json, unwrap_list

logger = logging.getLogger(__name__)

MIN_CHECK_CHARS = 10

SYSTEM_PROMPT = """\
You are a thorough proofreader. Find grammatical errors, spelling mistakes,
punctuation issues and word choice problems. Be comprehensive and accurate.
Return valid JSON only."""

CHECK_PROMPT = """\
Analyze this text and find ALL grammatical errors, spelling mistakes,
punctuation issues and word choice problems.

TEXT TO ANALYZE: "{text}"

Find and correct these types of errors:
1. GRAMMAR: verb tense, subject-verb agreement, wrong verb forms, pronouns
2. SPELLING: misspelled words
3. PUNCTUATION: missing or incorrect punctuation, capitalization
4. STYLE: awkward phrasing, clarity issues, wrong word choice

Rules:
- Give EXACT character positions in the original text (count every character, including spaces)
- Only suggest corrections that are definitely needed
- "original" must be the exact text to replace, "correction" its replacement

Return ONLY a JSON array in this format:
[
  {{
    "type": "grammar",
    "position": {{"start": 13, "end": 17}},
    "original": "goed",
    "correction": "went",
    "explanation": "Past tense of 'go' is 'went', not 'goed'"
  }}
]

Types to use: "grammar", "spelling", "punctuation", "style".
Return an empty array [] only if there are no errors at all."""

CONFIGURATION_NOTICE = Notice(
    kind=NoticeKind.CONFIGURATION_ERROR,
    title="Configuration Error",
    description="The language model API key is missing or invalid. Please contact support.",
)
TRANSIENT_NOTICE = Notice(
    kind=NoticeKind.TRANSIENT_ERROR,
    title="Grammar Check Error",
    description="Unable to check grammar. Please try again.",
)
GENERIC_NOTICE = Notice(
    kind=NoticeKind.GENERIC_ERROR,
    title="Error",
    description="Failed to check grammar. Please try again.",
)


def classify_error(exc: BaseException) -> Notice:
    """Map an exception from the analysis call to a categorized notice."""
    if isinstance(exc, (anthropic.AuthenticationError, anthropic.PermissionDeniedError)):
        return CONFIGURATION_NOTICE
    if isinstance(exc, TRANSIENT_ERRORS):
        return TRANSIENT_NOTICE
    if isinstance(exc, TypeError) and "api_key" in str(exc).lower():
        # The SDK raises TypeError when no credentials can be resolved.
        return CONFIGURATION_NOTICE
    return GENERIC_NOTICE


def classify_error_message(message: str) -> Notice:
    """Map an ``{"error": ...}`` payload to a categorized notice."""
    if "api key" in message.lower():
        return CONFIGURATION_NOTICE
    return GENERIC_NOTICE


class TextChecker:
    """Request suggestions for a document snapshot.

    ``check`` never raises: every failure degrades to an empty suggestion
    list plus a notice.
    """

    def __init__(
        self,
        llm: LLMClient,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.1,
        max_tokens: int = 2000,
    ):
        self.llm = llm
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def check(self, request: AnalysisRequest) -> AnalysisOutcome:
        text = request.text
        if not text or not text.strip():
            return AnalysisOutcome(notice=Notice(
                kind=NoticeKind.GENERIC_ERROR,
                title="Error",
                description="Text is required",
            ))

        # Very short texts are not worth a model call.
        if len(text.strip()) < MIN_CHECK_CHARS:
            return AnalysisOutcome()

        logger.info("Checking text (%d chars, document=%s)", len(text), request.document_id)
        try:
            response = await self.llm.generate(
                prompt=CHECK_PROMPT.format(text=text),
                system=SYSTEM_PROMPT,
                model=self.model,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except Exception as exc:
            logger.exception("Grammar check LLM call failed")
            return AnalysisOutcome(notice=classify_error(exc))

        return self._parse_response(response.text)

    @staticmethod
    def _parse_response(content: str) -> AnalysisOutcome:
        """Turn the model's text into raw suggestion payloads."""
        if not content or not content.strip():
            logger.info("Empty response from grammar check")
            return AnalysisOutcome()

        try:
            data = extract_json(content)
        except ValueError:
            logger.warning("Could not parse grammar check response: %s", content[:200])
            return AnalysisOutcome(notice=GENERIC_NOTICE)

        if isinstance(data, dict) and "error" in data:
            message = str(data.get("error") or "")
            logger.warning("Grammar check returned an error: %s", message)
            return AnalysisOutcome(notice=classify_error_message(message))

        items = unwrap_list(data)
        if items is None:
            logger.warning("Grammar check response is not an array: %s", type(data).__name__)
            return AnalysisOutcome(notice=GENERIC_NOTICE)

        logger.info("Grammar check returned %d raw suggestions", len(items))
        return AnalysisOutcome(raw=items)
