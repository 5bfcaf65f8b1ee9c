# autotag/core/vision/errors.py
"""
Typed errors + utilities for the vision tagging pipeline.

Exports
-------
- VisionTaggingError, VisionCallError, ExtractionError, TagPersistenceError
- classify_vision_error(exc)
- vision_call_guard()

Taxonomy
--------
- configuration-absent  → not an error; the item is simply ineligible
- transient (VisionCallError / ExtractionError) → "no result", logged, not cached
- persistence (TagPersistenceError) → fatal for the current item, surfaced to caller
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from contextlib import contextmanager

# =========================
# Exception types
# =========================


class VisionTaggingError(RuntimeError):
    """Base class for vision tagging failures."""


class VisionCallError(VisionTaggingError):
    """HTTP/transport/API failure while calling the completions endpoint."""


class ExtractionError(VisionTaggingError):
    """Model output did not contain the expected JSON object."""


class TagPersistenceError(VisionTaggingError):
    """A tag insertion failed; tags inserted before it are not rolled back."""


# Rate limiting / quota hints that show up in API error messages
_RATE_LIMIT_PATTERN = re.compile(r"(rate.?limit|too many requests|quota|\b429\b)", re.IGNORECASE)

# =========================
# Classification helpers
# =========================


def classify_vision_error(exc: Exception) -> VisionTaggingError:
    """
    Map arbitrary exceptions raised by a vision client to a typed error.

    Heuristics:
      - Any VisionTaggingError subclass → passed through
      - requests.* errors → VisionCallError
      - openai.* errors (APIError, APIConnectionError, ...) → VisionCallError
      - ValueError / KeyError / TypeError from response decoding → ExtractionError
      - Fallback → VisionCallError
    """
    if isinstance(exc, VisionTaggingError):
        return exc

    try:
        import requests

        if isinstance(exc, requests.RequestException):
            return VisionCallError(f"{type(exc).__name__}: {exc}")
    except ImportError:  # pragma: no cover
        pass

    try:
        import openai

        if isinstance(exc, openai.OpenAIError):
            msg = f"{type(exc).__name__}: {exc}"
            if _RATE_LIMIT_PATTERN.search(msg):
                return VisionCallError(f"rate limited: {msg}")
            return VisionCallError(msg)
    except ImportError:  # pragma: no cover
        pass

    if isinstance(exc, (ValueError, KeyError, TypeError)):
        return ExtractionError(f"{type(exc).__name__}: {exc}")

    return VisionCallError(f"{type(exc).__name__}: {exc}")


@contextmanager
def vision_call_guard() -> Iterator[None]:
    """Context manager to normalise unexpected exceptions from client internals."""
    try:
        yield
    except VisionTaggingError:
        raise
    except Exception as exc:  # noqa: BLE001
        raise classify_vision_error(exc) from exc


__all__ = [
    "VisionTaggingError",
    "VisionCallError",
    "ExtractionError",
    "TagPersistenceError",
    "classify_vision_error",
    "vision_call_guard",
]
