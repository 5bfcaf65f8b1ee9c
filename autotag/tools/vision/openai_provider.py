# autotag/tools/vision/openai_provider.py
"""
OpenAI Vision Clients

Purpose
-------
Production `VisionClient`s for the chat-completions endpoint:

- `OpenAIVisionClient`: official SDK (`openai>=1.0`), one client per API key.
- `HttpVisionClient`: plain `requests.post` against any OpenAI-compatible
  `/chat/completions` URL (proxies, gateways, self-hosted models).

Both send the rendered request as-is and return the raw response dict.
Credentials come from the tenant's secrets; OPENAI_API_KEY is the fallback.

Environment
-----------
OPENAI_API_KEY            : fallback credential when the tenant has none
AUTOTAG_API_BASE_URL      : default "https://api.openai.com/v1"
AUTOTAG_VISION_TIMEOUT_S  : default unset
"""

from __future__ import annotations

import os
import threading
from collections.abc import Mapping
from typing import Any

import requests

from autotag.core.logging import get_logger
from autotag.core.vision.errors import VisionCallError, vision_call_guard

logger = get_logger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"


def _resolve_key(api_key: str | None) -> str:
    key = api_key or os.getenv("OPENAI_API_KEY")
    if not key:
        raise VisionCallError("No API key for the vision call (tenant secret or OPENAI_API_KEY).")
    return key


class OpenAIVisionClient:
    def __init__(self, *, base_url: str | None = None, timeout_s: float | None = None) -> None:
        try:
            from openai import OpenAI  # type: ignore
        except Exception as e:
            raise RuntimeError("OpenAI SDK not available. Install `openai>=1.0`.") from e

        self._factory = OpenAI
        self._base_url = base_url or DEFAULT_BASE_URL
        self._timeout_s = timeout_s
        self._clients: dict[str, Any] = {}
        self._lock = threading.Lock()

    def _client_for(self, key: str) -> Any:
        with self._lock:
            client = self._clients.get(key)
            if client is None:
                kwargs: dict[str, Any] = {"api_key": key, "base_url": self._base_url, "max_retries": 0}
                if self._timeout_s is not None:
                    kwargs["timeout"] = self._timeout_s
                client = self._factory(**kwargs)
                self._clients[key] = client
            return client

    def complete(self, payload: dict[str, Any], *, api_key: str | None) -> Mapping[str, Any]:
        key = _resolve_key(api_key)
        with vision_call_guard():
            resp = self._client_for(key).chat.completions.create(**payload)
            # SDK objects are pydantic models; fall back to dict-like responses
            dump = getattr(resp, "model_dump", None)
            return dump() if callable(dump) else dict(resp)


class HttpVisionClient:
    def __init__(
        self,
        *,
        base_url: str | None = None,
        timeout_s: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._url = (base_url or DEFAULT_BASE_URL).rstrip("/") + "/chat/completions"
        self._timeout_s = timeout_s
        self._session = session

    def complete(self, payload: dict[str, Any], *, api_key: str | None) -> Mapping[str, Any]:
        key = _resolve_key(api_key)
        headers = {"Authorization": f"Bearer {key}", "Content-Type": "application/json"}
        post = self._session.post if self._session is not None else requests.post
        with vision_call_guard():
            resp = post(self._url, json=payload, headers=headers, timeout=self._timeout_s)
            resp.raise_for_status()
            data = resp.json()
        if not isinstance(data, dict):
            raise VisionCallError(f"completions endpoint returned {type(data).__name__}, expected an object")
        logger.debug("completion from %s: status=%s", self._url, resp.status_code)
        return data
