# tests/utils.py
"""
Single source of truth for test data, factories, and canonical payloads.
Update values here to cascade across the test suite.
"""

from __future__ import annotations

from io import BytesIO
from pathlib import Path
from typing import Any

from PIL import Image

from autotag.core.vision.config import API_KEY, DEFAULT_ALT_TEXT_FIELD
from autotag.core.vision.eligibility import ALT_FIELD_MARKER, TAG_FIELD_MARKER
from autotag.schemas.models import ContentField, ContentItem, ContentType, ImageAsset

# -----------------------------
# Global defaults (edit once)
# -----------------------------

DEFAULT_HOST = "host-1"
DEFAULT_API_KEY = "sk-test-0000"
DEFAULT_SECRETS: dict[str, str] = {API_KEY: DEFAULT_API_KEY}

IMAGE_FIELD = "asset"
TAG_FIELD = "tags"
ALT_FIELD = DEFAULT_ALT_TEXT_FIELD

DOG_REPLY = 'Sure! {"alt":"a dog","tags":["dog","park"]} thanks'


# -----------------------------
# Images
# -----------------------------


def gradient_image(size: tuple[int, int] = (640, 480), delta: int = 0) -> Image.Image:
    base = Image.linear_gradient("L").resize(size)
    r = base.point(lambda v: (v + delta) % 256)
    return Image.merge("RGB", (r, base, base.rotate(90).resize(size)))


def write_jpeg(path: Path, size: tuple[int, int] = (640, 480), delta: int = 0) -> Path:
    gradient_image(size, delta).save(path, format="JPEG", quality=90)
    return path


def png_bytes(w: int, h: int) -> bytes:
    buf = BytesIO()
    gradient_image((w, h)).save(buf, format="PNG", compress_level=0)
    return buf.getvalue()


def write_placeholder(path: Path, size: int = 60) -> Path:
    """A file that claims to be an image but is below the minimum size."""
    path.write_bytes(b"\xff\xd8\xff\xe0" + b"\x00" * (size - 4))
    return path


# -----------------------------
# Content
# -----------------------------


def make_content_type(
    *,
    variable: str = "photo",
    with_tag_field: bool = True,
    with_alt_field: bool = True,
    alt_variable: str = ALT_FIELD,
    alt_marker: bool = True,
    tag_marker: bool = False,
) -> ContentType:
    fields = [ContentField(variable=IMAGE_FIELD, name="Asset", field_type="binary")]
    if with_tag_field:
        fields.append(
            ContentField(
                variable=TAG_FIELD,
                name="Tags",
                field_type="tag",
                field_variables={TAG_FIELD_MARKER: "true"} if tag_marker else {},
            )
        )
    if with_alt_field:
        fields.append(
            ContentField(
                variable=alt_variable,
                name="Alt Text",
                field_type="text",
                field_variables={ALT_FIELD_MARKER: "true"} if alt_marker else {},
            )
        )
    fields.append(ContentField(variable="title", name="Title", field_type="text"))
    return ContentType(variable=variable, name=variable.title(), fields=fields)


def make_item(
    image_path: Path | None,
    *,
    identifier: str = "item-1",
    host: str = DEFAULT_HOST,
    content_type: ContentType | None = None,
    properties: dict[str, Any] | None = None,
    asset: ImageAsset | None = None,
) -> ContentItem:
    binaries: dict[str, ImageAsset] = {}
    if asset is not None:
        binaries[IMAGE_FIELD] = asset
    elif image_path is not None:
        binaries[IMAGE_FIELD] = ImageAsset.from_path(image_path, IMAGE_FIELD)
    return ContentItem(
        identifier=identifier,
        inode=f"{identifier}-inode",
        host=host,
        title=f"Item {identifier}",
        content_type=content_type or make_content_type(),
        properties=dict(properties or {}),
        binaries=binaries,
    )


def completion(text: str) -> dict[str, Any]:
    return {"choices": [{"index": 0, "message": {"role": "assistant", "content": text}}]}
