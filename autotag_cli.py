# autotag_cli.py

from __future__ import annotations

import argparse
import json
import os
from pathlib import Path

from autotag.core.content.memory import InMemoryContentRepository, InMemorySecretProvider
from autotag.core.logging import setup_logging
from autotag.core.settings import PipelineSettings
from autotag.core.vision.config import (
    AI_VISION_MAX_TOKENS,
    AI_VISION_MODEL,
    AI_VISION_PROMPT,
    API_KEY,
    DEFAULT_ALT_TEXT_FIELD,
)
from autotag.core.vision.eligibility import ALT_FIELD_MARKER
from autotag.orchestrators.autotag_trigger import AutoTagTrigger
from autotag.orchestrators.vision_tagging import VisionTaggingPipeline
from autotag.schemas.models import ContentField, ContentItem, ContentType, ImageAsset
from autotag.tools.vision.provider_base import get_vision_client

_HOST = "cli-host"


def _build_item(image: Path) -> ContentItem:
    ctype = ContentType(
        variable="image",
        name="Image",
        fields=[
            ContentField(variable="asset", name="Asset", field_type="binary"),
            ContentField(variable="tags", name="Tags", field_type="tag"),
            ContentField(variable=DEFAULT_ALT_TEXT_FIELD, name="Alt Text", field_type="text", field_variables={ALT_FIELD_MARKER: "true"}),
        ],
    )
    return ContentItem(
        identifier=image.stem,
        inode=image.stem,
        host=_HOST,
        title=image.name,
        content_type=ctype,
        binaries={"asset": ImageAsset.from_path(image, "asset")},
    )


def main() -> int:
    p = argparse.ArgumentParser(description="Tag one image with AI alt text and keywords")
    p.add_argument("image", type=str, help="Path to a local image file")
    p.add_argument("--client", type=str, choices=("openai", "http", "mock"), default=None)
    p.add_argument("--model", type=str, default=None)
    p.add_argument("--max-tokens", type=int, default=None)
    p.add_argument("--prompt", type=str, default=None)
    p.add_argument("--api-key", type=str, default=None, help="Defaults to OPENAI_API_KEY")
    p.add_argument("--json", type=int, choices=(0, 1), default=0, help="Print the result as JSON")

    args = p.parse_args()
    setup_logging()

    image = Path(args.image)
    if not image.is_file():
        p.error(f"image not found: {image}")

    settings = PipelineSettings.from_env()
    client_name = args.client or settings.client

    secrets: dict[str, str] = {}
    key = args.api_key or os.getenv("OPENAI_API_KEY") or ("mock" if client_name == "mock" else "")
    if key:
        secrets[API_KEY] = key
    if args.model:
        secrets[AI_VISION_MODEL] = args.model
    if args.max_tokens:
        secrets[AI_VISION_MAX_TOKENS] = str(args.max_tokens)
    if args.prompt:
        secrets[AI_VISION_PROMPT] = args.prompt

    repository = InMemoryContentRepository()
    pipeline = VisionTaggingPipeline(
        secrets=InMemorySecretProvider({_HOST: secrets}),
        repository=repository,
        client=get_vision_client(client_name, settings),
        settings=settings,
    )

    item = _build_item(image)
    outcome = AutoTagTrigger(pipeline, repository).on_publish(item)

    alt = item.get_string_property(DEFAULT_ALT_TEXT_FIELD)
    tags = item.tag_values("tags")
    if args.json:
        print(json.dumps({"alt": alt, "tags": tags, "error": outcome.error}, ensure_ascii=False, indent=2))
    else:
        print(f"alt:  {alt or '-'}")
        print(f"tags: {', '.join(tags) or '-'}")
        if outcome.error:
            print(f"error: {outcome.error}")

    return 0 if (outcome.tagged or outcome.alt_text_saved) else 1


if __name__ == "__main__":
    raise SystemExit(main())
