# autotag/core/vision/eligibility.py
"""
Per-item decisions: should we tag, add alt text, or auto-tag at all?

All predicates are cheap and run before any external call. A tenant without
secrets is "not configured", which makes the item ineligible; it is not an error.
"""

from __future__ import annotations

from autotag.core.settings import PipelineSettings
from autotag.core.vision.config import ConfigResolver
from autotag.schemas.models import ContentField, ContentItem, VisionConfig

# Marker stored among tag values once this pipeline has tagged an item
MARKER_TAG = "dot:taggedByDotAI"

# Field-variable keys that opt a content type into auto tagging
ALT_FIELD_MARKER = "aiAltText"
TAG_FIELD_MARKER = "aiTags"

IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".webp", ".gif", ".bmp", ".tif", ".tiff"}


class EligibilityEvaluator:
    def __init__(self, resolver: ConfigResolver, settings: PipelineSettings | None = None) -> None:
        self._resolver = resolver
        self._settings = settings or PipelineSettings()

    # ---------- field lookup ----------
    @staticmethod
    def image_field(item: ContentItem) -> ContentField | None:
        return item.content_type.first_field_of_type("binary")

    @staticmethod
    def tag_field(item: ContentItem) -> ContentField | None:
        return item.content_type.first_field_of_type("tag")

    @staticmethod
    def alt_text_field(item: ContentItem, config: VisionConfig) -> ContentField | None:
        fmap = item.content_type.field_map()
        for var in config.alt_text_fields:
            if var in fmap:
                return fmap[var]
        return None

    # ---------- checks ----------
    def usable_image(self, item: ContentItem, image_field: ContentField) -> bool:
        asset = item.binary(image_field.variable)
        if asset is None:
            return False
        if not asset.path.is_file():
            return False
        if asset.bytes_size < self._settings.min_image_bytes:
            return False
        return asset.path.suffix.lower() in IMAGE_EXTS

    def already_tagged(self, item: ContentItem, tag_field: ContentField) -> bool:
        return MARKER_TAG in item.tag_values(tag_field.variable)

    # ---------- predicates ----------
    def should_tag(self, item: ContentItem, image_field: ContentField) -> bool:
        tag_field = self.tag_field(item)
        if tag_field is None:
            return False
        if self.already_tagged(item, tag_field):
            return False
        if not self.usable_image(item, image_field):
            return False
        return self._resolver.has_credentials(item.host)

    def should_add_alt_text(self, item: ContentItem, image_field: ContentField, alt_field: ContentField) -> bool:
        current = item.get_string_property(alt_field.variable)
        if current is not None and current.strip():
            return False
        if not self.usable_image(item, image_field):
            return False
        return self._resolver.has_credentials(item.host)

    def should_auto_tag(self, item: ContentItem) -> bool:
        if not self._resolver.has_credentials(item.host):
            return False
        config = self._resolver.resolve(item.host)
        if item.content_type.variable.lower() in config.autotag_content_types:
            return True
        ct = item.content_type
        return bool(ct.fields_with_variable(ALT_FIELD_MARKER) or ct.fields_with_variable(TAG_FIELD_MARKER))
