# autotag/core/vision/prompt.py
"""
Request assembly for the vision call.

1) Shrink the image to fit the resize box and re-encode it as WEBP (Pillow).
2) Base64 it for inline embedding as a data URI.
3) Render the fixed chat-completions request template with `string.Template`.
   Text values are JSON-escaped before substitution and the result is parsed
   back with `json.loads`, so a prompt with quotes or newlines cannot break
   the document.
"""

from __future__ import annotations

import base64
import json
from io import BytesIO
from string import Template
from typing import Any

from PIL import Image, UnidentifiedImageError

from autotag.core.logging import get_logger
from autotag.core.settings import PipelineSettings
from autotag.core.vision.result import StepResult
from autotag.schemas.models import ImageAsset, VisionConfig

logger = get_logger(__name__)

TAG_AND_ALT_PROMPT_TEMPLATE = Template(
    """{
  "model": "${visionModel}",
  "messages": [
    {
      "role": "user",
      "content": [
        {
          "type": "text",
          "text": "${visionPrompt}"
        },
        {
          "type": "image_url",
          "image_url": {
            "url": "data:image/webp;base64,${base64Image}"
          }
        }
      ]
    }
  ],
  "max_tokens": ${maxTokens}
}"""
)


def _json_escape(s: str) -> str:
    # json.dumps gives a quoted literal; the template supplies the quotes
    return json.dumps(s, ensure_ascii=False)[1:-1]


class PromptBuilder:
    def __init__(self, settings: PipelineSettings | None = None) -> None:
        self._settings = settings or PipelineSettings()

    def encode_image(self, asset: ImageAsset) -> StepResult[str]:
        s = self._settings
        try:
            with Image.open(asset.path) as src:
                img = src.convert("RGBA") if src.mode in ("P", "LA", "RGBA") else src.convert("RGB")
                img.thumbnail((s.resize_max_w, s.resize_max_h))
                buf = BytesIO()
                img.save(buf, format="WEBP", quality=s.webp_quality)
        except (FileNotFoundError, UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
            return StepResult.failure(f"could not prepare image {asset.filename}: {type(e).__name__}: {e}")

        data = buf.getvalue()
        logger.debug("prepared %s: %d bytes -> %d bytes webp %s", asset.filename, asset.bytes_size, len(data), img.size)
        return StepResult.success(base64.b64encode(data).decode("ascii"))

    def render(self, config: VisionConfig, image_b64: str) -> StepResult[dict[str, Any]]:
        try:
            raw = TAG_AND_ALT_PROMPT_TEMPLATE.substitute(
                visionModel=_json_escape(config.model),
                visionPrompt=_json_escape(config.prompt),
                maxTokens=int(config.max_tokens),
                base64Image=image_b64,
            )
            payload = json.loads(raw)
        except (KeyError, ValueError) as e:
            return StepResult.failure(f"request template did not render to valid JSON: {e}")
        return StepResult.success(payload)

    def build(self, config: VisionConfig, asset: ImageAsset) -> StepResult[dict[str, Any]]:
        return self.encode_image(asset).then(lambda b64: self.render(config, b64))


def describe_payload(payload: dict[str, Any]) -> str:
    """Payload as JSON text with the inline image elided, for debug logs."""
    slim = json.loads(json.dumps(payload))
    for msg in slim.get("messages", []):
        for part in msg.get("content", []) if isinstance(msg.get("content"), list) else []:
            url = part.get("image_url", {}).get("url") if isinstance(part, dict) else None
            if isinstance(url, str) and "," in url:
                head, body = url.split(",", 1)
                part["image_url"]["url"] = f"{head},<{len(body)} chars>"
    return json.dumps(slim, ensure_ascii=False)
