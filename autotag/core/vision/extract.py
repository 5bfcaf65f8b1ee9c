# autotag/core/vision/extract.py
"""
Tolerant extraction of the alt/tags object from free-form model text.

Models wrap the JSON in prose or ``` fences. We take the span from the first
"{" to the last "}" inclusive and parse that. This is a brace-span heuristic,
not a balanced-brace parser: it is correct only when the reply holds exactly one
top-level JSON object and no stray braces sit before or after it.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from autotag.core.vision.config import ALT_TEXT_PROPERTY, TAGS_PROPERTY
from autotag.core.vision.result import StepResult
from autotag.schemas.models import TaggingResult


def completion_text(response: Mapping[str, Any]) -> StepResult[str]:
    """Pull `choices[0].message.content` out of a chat-completions response."""
    try:
        content = response["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        return StepResult.failure(f"unexpected completion shape: {type(e).__name__}: {e}")
    if not isinstance(content, str) or not content.strip():
        return StepResult.failure("completion has no text content")
    return StepResult.success(content)


def extract_json_object(text: str) -> StepResult[dict[str, Any]]:
    if not isinstance(text, str):
        return StepResult.failure("model output is not a string")

    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        return StepResult.failure("no JSON object found in model output")

    try:
        loaded = json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        return StepResult.failure(f"invalid JSON in model output: {e}")

    if not isinstance(loaded, dict):
        return StepResult.failure("model output JSON is not an object")
    return StepResult.success(loaded)


def tagging_result_from_dict(obj: Mapping[str, Any]) -> StepResult[TaggingResult]:
    alt = obj.get(ALT_TEXT_PROPERTY)
    tags = obj.get(TAGS_PROPERTY)
    if not isinstance(alt, str):
        return StepResult.failure(f"missing string property '{ALT_TEXT_PROPERTY}'")
    if not isinstance(tags, list):
        return StepResult.failure(f"missing array property '{TAGS_PROPERTY}'")

    clean: list[str] = []
    for t in tags:
        # non-string items (numbers, nested objects) are not tags
        if not isinstance(t, str):
            continue
        s = t.strip()
        if s:
            clean.append(s)
    return StepResult.success(TaggingResult(alt_text=alt.strip(), tags=tuple(clean)))


def parse_tagging_result(text: str) -> StepResult[TaggingResult]:
    return extract_json_object(text).then(tagging_result_from_dict)


__all__ = [
    "completion_text",
    "extract_json_object",
    "tagging_result_from_dict",
    "parse_tagging_result",
]
