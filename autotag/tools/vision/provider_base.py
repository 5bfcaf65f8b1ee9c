# autotag/tools/vision/provider_base.py
"""
Vision Client Interface

Purpose
-------
Define a minimal, provider-agnostic contract for the completions call and a
factory to pick an implementation by name.

Design
------
- Protocol `VisionClient.complete(payload, api_key=...)` takes the rendered
  chat-completions request and returns the raw response as a mapping.
- Implementations raise `VisionCallError` (via `vision_call_guard`) on
  transport/API failures; they do not parse the model text.
- No retries here; a failed call is "no result" for that invocation.

Public API
----------
class VisionClient(Protocol):
    def complete(self, payload: dict, *, api_key: str | None) -> Mapping[str, Any]

def get_vision_client(name: str, settings: PipelineSettings | None = None) -> VisionClient
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable

from autotag.core.settings import PipelineSettings


@runtime_checkable
class VisionClient(Protocol):
    def complete(self, payload: dict[str, Any], *, api_key: str | None) -> Mapping[str, Any]: ...


def get_vision_client(name: str | None = None, settings: PipelineSettings | None = None) -> VisionClient:
    """Return a vision client by name. Imports are lazy so the SDK loads only when asked for."""
    settings = settings or PipelineSettings.from_env()
    name = (name or settings.client).lower()
    if name == "mock":
        from .mock_provider import MockVisionClient

        return MockVisionClient()
    if name == "openai":
        from .openai_provider import OpenAIVisionClient

        return OpenAIVisionClient(base_url=settings.api_base_url, timeout_s=settings.timeout_s)
    if name == "http":
        from .openai_provider import HttpVisionClient

        return HttpVisionClient(base_url=settings.api_base_url, timeout_s=settings.timeout_s)
    raise ValueError(f"Unknown vision client: {name}")
