# autotag/core/settings.py
"""
Process-level knobs for the tagging pipeline.

Tenant settings (model, prompt, ...) come from the secret store through
`ConfigResolver`; this model only covers how the pipeline itself behaves.

Environment
-----------
AUTOTAG_CACHE_TTL_S        : default "60"
AUTOTAG_CACHE_MAX_ENTRIES  : default "100"
AUTOTAG_MIN_IMAGE_BYTES    : default "100"
AUTOTAG_VISION_CLIENT      : default "openai"   (openai | http | mock)
AUTOTAG_API_BASE_URL       : default "https://api.openai.com/v1"
AUTOTAG_VISION_TIMEOUT_S   : default unset (no client timeout)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ClientName = Literal["openai", "http", "mock"]


class PipelineSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    cache_ttl_s: float = Field(60.0, gt=0, description="Seconds a cached vision result stays valid after insertion.")
    cache_max_entries: int = Field(100, ge=1, description="Max cached results; least-recently-used evicted first.")
    min_image_bytes: int = Field(
        100, ge=0, description="Files smaller than this are treated as placeholders, not real images."
    )
    resize_max_w: int = Field(500, ge=1, description="Max width of the image sent to the model.")
    resize_max_h: int = Field(500, ge=1, description="Max height of the image sent to the model.")
    webp_quality: int = Field(85, ge=1, le=100, description="WEBP quality used when re-encoding the image.")
    client: ClientName = Field("openai", description="Vision client implementation.")
    api_base_url: str = Field("https://api.openai.com/v1", description="Base URL for the HTTP client.")
    timeout_s: float | None = Field(
        None, gt=0, description="Optional per-request timeout for the vision call. None leaves it to the client."
    )

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> PipelineSettings:
        env = os.environ if env is None else env
        data: dict[str, object] = {}
        mapping = {
            "AUTOTAG_CACHE_TTL_S": "cache_ttl_s",
            "AUTOTAG_CACHE_MAX_ENTRIES": "cache_max_entries",
            "AUTOTAG_MIN_IMAGE_BYTES": "min_image_bytes",
            "AUTOTAG_VISION_CLIENT": "client",
            "AUTOTAG_API_BASE_URL": "api_base_url",
            "AUTOTAG_VISION_TIMEOUT_S": "timeout_s",
        }
        for key, attr in mapping.items():
            val = env.get(key, "").strip()
            if val:
                data[attr] = val.lower() if attr == "client" else val
        return cls.model_validate(data)
