# autotag/tools/vision/mock_provider.py
"""
Mock Vision Client

Purpose
-------
A deterministic, zero-network `VisionClient` for tests, local dev and the CLI's
`--client mock` mode. It returns a chat-completions-shaped response whose text
wraps the JSON in prose, like real models tend to do.

Design
------
- The reply is derived from nothing but a fixed alt/tags pair (or a raw text
  override), so results are stable across runs.
- Counts calls and keeps the payloads it received, so tests can assert
  "exactly one external call".
- `fail_with` makes every call raise, to exercise the no-result path.
"""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Mapping, Sequence
from typing import Any

from autotag.core.vision.config import ALT_TEXT_PROPERTY, TAGS_PROPERTY


class MockVisionClient:
    def __init__(
        self,
        *,
        alt_text: str = "A placeholder description.",
        tags: Sequence[str] = ("mock", "test"),
        raw_text: str | None = None,
        fail_with: Exception | None = None,
        delay_s: float = 0.0,
    ) -> None:
        self.alt_text = alt_text
        self.tags = list(tags)
        self.raw_text = raw_text
        self.fail_with = fail_with
        self.delay_s = delay_s
        self.calls = 0
        self.payloads: list[dict[str, Any]] = []
        self.api_keys: list[str | None] = []
        self._lock = threading.Lock()

    def reply_text(self) -> str:
        if self.raw_text is not None:
            return self.raw_text
        body = json.dumps({ALT_TEXT_PROPERTY: self.alt_text, TAGS_PROPERTY: self.tags})
        return f"Sure! Here is the JSON you asked for:\n```json\n{body}\n```"

    def complete(self, payload: dict[str, Any], *, api_key: str | None) -> Mapping[str, Any]:
        with self._lock:
            self.calls += 1
            self.payloads.append(payload)
            self.api_keys.append(api_key)
        if self.delay_s:
            time.sleep(self.delay_s)
        if self.fail_with is not None:
            raise self.fail_with
        return {
            "id": "chatcmpl-mock",
            "object": "chat.completion",
            "model": payload.get("model", "mock"),
            "choices": [
                {
                    "index": 0,
                    "message": {"role": "assistant", "content": self.reply_text()},
                    "finish_reason": "stop",
                }
            ],
        }
