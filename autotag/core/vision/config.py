# autotag/core/vision/config.py
"""
Tenant vision settings: secret store first, compiled-in defaults second.

`ConfigResolver.resolve(host_id)` never raises. A missing, blank, or failing
lookup for any key degrades to the default for that key.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from pydantic import SecretStr

from autotag.core.content.base import SecretProvider
from autotag.core.logging import get_logger, register_secret
from autotag.schemas.models import VisionConfig

logger = get_logger(__name__)

# Secret keys
AI_VISION_MODEL = "aiVisionModel"
AI_VISION_MAX_TOKENS = "aiVisionMaxTokens"
AI_VISION_PROMPT = "aiVisionPrompt"
AI_VISION_ALT_TEXT_FIELDS = "aiVisionAltTextFields"
AI_VISION_AUTOTAG_CONTENT_TYPES = "aiVisionAutotagContentTypes"
API_KEY = "apiKey"

# JSON property names the model is asked to return
ALT_TEXT_PROPERTY = "alt"
TAGS_PROPERTY = "tags"

# Defaults
DEFAULT_MODEL = "gpt-4o"
DEFAULT_MAX_TOKENS = 500
DEFAULT_ALT_TEXT_FIELD = "altText"
DEFAULT_ALT_TEXT_FIELDS: tuple[str, ...] = (DEFAULT_ALT_TEXT_FIELD, "alt", "description")
DEFAULT_PROMPT = (
    "Generate appropriate alt text and keywords that describe this image.  "
    "Return your response as a valid json object with the properties "
    f"`{ALT_TEXT_PROPERTY}` and `{TAGS_PROPERTY}` where `{TAGS_PROPERTY}` is an array of the keywords."
)

_CONTENT_TYPE_SPLIT = re.compile(r"[\s,]+")


class ConfigResolver:
    def __init__(self, secrets: SecretProvider) -> None:
        self._secrets = secrets

    def secrets_for(self, host_id: str) -> Mapping[str, str]:
        if not host_id:
            return {}
        try:
            found = self._secrets.get_secrets(host_id)
        except Exception as e:  # noqa: BLE001 - store failures mean "not configured"
            logger.debug("secret lookup failed for host %s: %s", host_id, e)
            return {}
        return found or {}

    def has_credentials(self, host_id: str) -> bool:
        return bool(self.secrets_for(host_id))

    def resolve(self, host_id: str) -> VisionConfig:
        secrets = self.secrets_for(host_id)
        api_key = _lookup(secrets, API_KEY)
        register_secret(api_key)
        return VisionConfig(
            model=_lookup(secrets, AI_VISION_MODEL) or DEFAULT_MODEL,
            max_tokens=_max_tokens(secrets, host_id),
            prompt=_lookup(secrets, AI_VISION_PROMPT) or DEFAULT_PROMPT,
            alt_text_fields=_alt_text_fields(secrets),
            autotag_content_types=_content_types(secrets),
            api_key=SecretStr(api_key) if api_key else None,
        )


def _lookup(secrets: Mapping[str, str], key: str) -> str | None:
    val = secrets.get(key)
    if val is None:
        return None
    val = str(val)
    return val if val.strip() else None


def _max_tokens(secrets: Mapping[str, str], host_id: str) -> int:
    raw = _lookup(secrets, AI_VISION_MAX_TOKENS)
    if raw is None:
        return DEFAULT_MAX_TOKENS
    try:
        val = int(raw.strip())
    except ValueError:
        logger.warning("ignoring non-numeric %s=%r for host %s", AI_VISION_MAX_TOKENS, raw, host_id)
        return DEFAULT_MAX_TOKENS
    if val <= 0:
        logger.warning("ignoring non-positive %s=%r for host %s", AI_VISION_MAX_TOKENS, raw, host_id)
        return DEFAULT_MAX_TOKENS
    return val


def _alt_text_fields(secrets: Mapping[str, str]) -> tuple[str, ...]:
    raw = _lookup(secrets, AI_VISION_ALT_TEXT_FIELDS)
    if raw is None:
        return DEFAULT_ALT_TEXT_FIELDS
    fields = tuple(f.strip() for f in raw.split(",") if f.strip())
    return fields or DEFAULT_ALT_TEXT_FIELDS


def _content_types(secrets: Mapping[str, str]) -> tuple[str, ...]:
    raw = _lookup(secrets, AI_VISION_AUTOTAG_CONTENT_TYPES)
    if raw is None:
        return ()
    return tuple(t for t in _CONTENT_TYPE_SPLIT.split(raw.lower()) if t)
