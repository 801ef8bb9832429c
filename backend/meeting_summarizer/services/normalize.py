"""
Turn a raw LLM completion into a slide deck payload.

Instruction-following models do not always honour "JSON only", so the text is
cleaned up first:

  1. surrounding whitespace is trimmed
  2. if the text opens with a code fence, every fence marker is removed
  3. the greedy ``{ ... }`` span is kept, dropping commentary around it

The result must parse as JSON and have a truthy ``summary`` plus a list
``slides``. Individual slides are not inspected.
"""

from __future__ import annotations

import json
import re
from typing import Any

from meeting_summarizer.core.errors import ResponseParseError, ResponseShapeError

_FENCE_RE = re.compile(r"```[\w+-]*\n?")
_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


def strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        return _FENCE_RE.sub("", text)
    return text


def extract_json_object(text: str) -> str:
    match = _OBJECT_RE.search(text)
    return match.group(0) if match else text


def validate_deck_shape(parsed: Any, *, provider: str = "provider") -> dict[str, Any]:
    if not isinstance(parsed, dict):
        raise ResponseShapeError(f"Invalid response format from {provider}", provider=provider)
    if not parsed.get("summary") or not isinstance(parsed.get("slides"), list):
        raise ResponseShapeError(f"Invalid response format from {provider}", provider=provider)
    return parsed


def normalize_response(raw_text: str, *, provider: str = "provider") -> dict[str, Any]:
    candidate = extract_json_object(strip_code_fences(raw_text))
    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as exc:
        raise ResponseParseError(
            f"Invalid JSON in {provider} response: {exc.msg}", provider=provider
        ) from exc
    return validate_deck_shape(parsed, provider=provider)
