"""
Vision tools package

Re-exports the client interface and implementations, so callers can do:

    from autotag.tools.vision import (
        VisionClient,
        MockVisionClient,
        OpenAIVisionClient,
        HttpVisionClient,
        get_vision_client,
    )
"""

from __future__ import annotations

# Concrete clients
from .mock_provider import MockVisionClient
from .openai_provider import HttpVisionClient, OpenAIVisionClient

# Client protocol / factory
from .provider_base import VisionClient, get_vision_client

__all__ = [
    "VisionClient",
    "MockVisionClient",
    "OpenAIVisionClient",
    "HttpVisionClient",
    "get_vision_client",
]
