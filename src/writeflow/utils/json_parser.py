"""Utility to extract JSON from LLM responses."""

from __future__ import annotations

import json
from typing import Any

WRAPPER_KEYS = ("suggestions", "corrections", "items")


def extract_json(text: str) -> dict | list:
    """Extract JSON from LLM response, handling ```json blocks.

    Tries in order:
    1. Direct json.loads on the full text
    2. Strip fenced code block markers and parse
    3. First '[' to last ']' (the checker answers with an array)
    4. Repair an array cut off mid-stream by dropping the partial tail
    5. First '{' to last '}'
    """
    text = text.strip()

    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        pass

    stripped = _strip_code_fences(text)
    if stripped != text:
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass
        text = stripped

    result = _extract_between(text, "[", "]")
    if result is not None:
        return result

    first_bracket = text.find("[")
    first_brace = text.find("{")
    if first_bracket != -1 and (first_brace == -1 or first_bracket < first_brace):
        result = _repair_truncated_array(text)
        if result is not None:
            return result

    result = _extract_between(text, "{", "}")
    if result is not None:
        return result

    raise ValueError(f"Could not extract JSON from text: {text[:200]}...")


def unwrap_list(data: Any) -> list | None:
    """Return the suggestion list from ``data``.

    Accepts a bare list or a single-level wrapper such as
    ``{"suggestions": [...]}``. Anything else gives None.
    """
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        for key in WRAPPER_KEYS:
            if isinstance(data.get(key), list):
                return data[key]
    return None


def _strip_code_fences(text: str) -> str:
    """Remove markdown code fence markers, keeping only the fenced body."""
    start = text.find("```")
    if start == -1:
        return text
    body_start = text.find("\n", start)
    if body_start == -1:
        return text
    end = text.find("```", body_start)
    body = text[body_start + 1 : end] if end != -1 else text[body_start + 1 :]
    return body.strip()


def _extract_between(text: str, open_char: str, close_char: str) -> dict | list | None:
    start = text.find(open_char)
    end = text.rfind(close_char)
    if start != -1 and end != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass
    return None


def _repair_truncated_array(text: str) -> list | None:
    """Close a JSON array after its last complete object."""
    start = text.find("[")
    if start == -1:
        return None

    candidate = text[start:]
    cut = candidate.rfind("}")
    while cut > 0:
        repaired = candidate[: cut + 1].rstrip().rstrip(",") + "]"
        try:
            data = json.loads(repaired)
        except json.JSONDecodeError:
            cut = candidate.rfind("}", 0, cut)
            continue
        return data if isinstance(data, list) else None
    return None
