from __future__ import annotations

from autotag.core.content.memory import InMemorySecretProvider
from autotag.core.vision.config import (
    AI_VISION_ALT_TEXT_FIELDS,
    AI_VISION_AUTOTAG_CONTENT_TYPES,
    AI_VISION_MAX_TOKENS,
    AI_VISION_MODEL,
    AI_VISION_PROMPT,
    API_KEY,
    DEFAULT_ALT_TEXT_FIELDS,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_PROMPT,
    ConfigResolver,
)


class _BrokenStore:
    def get_secrets(self, host_id: str):
        raise ConnectionError("secret store unreachable")


def _resolver(**secrets: str) -> ConfigResolver:
    return ConfigResolver(InMemorySecretProvider({"h": secrets}))


def test_defaults_without_overrides():
    cfg = _resolver(**{API_KEY: "k"}).resolve("h")
    assert cfg.model == DEFAULT_MODEL == "gpt-4o"
    assert cfg.max_tokens == DEFAULT_MAX_TOKENS == 500
    assert cfg.prompt == DEFAULT_PROMPT
    assert "`alt`" in cfg.prompt and "`tags`" in cfg.prompt
    assert cfg.alt_text_fields == DEFAULT_ALT_TEXT_FIELDS
    assert cfg.autotag_content_types == ()


def test_overrides_are_used_verbatim():
    cfg = _resolver(
        **{
            AI_VISION_MODEL: "gpt-4o-mini",
            AI_VISION_MAX_TOKENS: "1000",
            AI_VISION_PROMPT: "Describe it.",
        }
    ).resolve("h")
    assert cfg.model == "gpt-4o-mini"
    assert cfg.max_tokens == 1000
    assert cfg.prompt == "Describe it."


def test_blank_values_fall_back():
    cfg = _resolver(**{AI_VISION_MODEL: "   ", AI_VISION_PROMPT: ""}).resolve("h")
    assert cfg.model == DEFAULT_MODEL
    assert cfg.prompt == DEFAULT_PROMPT


def test_bad_max_tokens_falls_back():
    assert _resolver(**{AI_VISION_MAX_TOKENS: "lots"}).resolve("h").max_tokens == 500
    assert _resolver(**{AI_VISION_MAX_TOKENS: "-5"}).resolve("h").max_tokens == 500


def test_store_failure_degrades_to_defaults():
    resolver = ConfigResolver(_BrokenStore())
    cfg = resolver.resolve("h")
    assert cfg.model == DEFAULT_MODEL
    assert cfg.api_key is None
    assert resolver.has_credentials("h") is False
    assert resolver.secrets_for("h") == {}


def test_unknown_host_and_blank_host():
    resolver = _resolver(**{API_KEY: "k"})
    assert resolver.has_credentials("other") is False
    assert resolver.has_credentials("") is False
    assert resolver.has_credentials("h") is True


def test_alt_text_field_override_list():
    cfg = _resolver(**{AI_VISION_ALT_TEXT_FIELDS: " caption , altTag,, "}).resolve("h")
    assert cfg.alt_text_fields == ("caption", "altTag")


def test_autotag_content_types_split_and_lowercased():
    cfg = _resolver(**{AI_VISION_AUTOTAG_CONTENT_TYPES: "Photo, fileAsset\nBanner"}).resolve("h")
    assert cfg.autotag_content_types == ("photo", "fileasset", "banner")


def test_api_key_is_secret():
    cfg = _resolver(**{API_KEY: "sk-very-secret"}).resolve("h")
    assert cfg.api_key is not None
    assert cfg.api_key.get_secret_value() == "sk-very-secret"
    assert "sk-very-secret" not in repr(cfg)
