# autotag/core/vision/persistence.py
"""
Writes vision results back onto a content item.

- Tags go through the repository one insertion at a time, marker first. The
  first failure aborts with TagPersistenceError. Tags already inserted stay in
  place; there is no rollback.
- Alt text is only set in memory. The item is handed back so the caller can
  commit it inside its own transaction.
"""

from __future__ import annotations

from collections.abc import Sequence

from autotag.core.content.base import ContentRepository
from autotag.core.logging import get_logger
from autotag.core.vision.eligibility import MARKER_TAG
from autotag.core.vision.errors import TagPersistenceError
from autotag.schemas.models import ContentField, ContentItem

logger = get_logger(__name__)


class PersistenceCoordinator:
    def __init__(self, repository: ContentRepository) -> None:
        self._repository = repository

    def save_tags(self, item: ContentItem, tags: Sequence[str]) -> int:
        tag_field = item.content_type.first_field_of_type("tag")
        if tag_field is None:
            return 0

        written = 0
        for tag in (MARKER_TAG, *tags):
            try:
                self._repository.add_tag(item, tag, tag_field.variable)
            except Exception as e:
                raise TagPersistenceError(
                    f"failed to add tag {tag!r} to {item.identifier} after {written} insertions: {e}"
                ) from e
            written += 1

        logger.info("tagged %s (%s) with %d tags", item.identifier, tag_field.variable, written - 1)
        return written

    def set_alt_text(self, item: ContentItem, alt_field: ContentField, text: str | None) -> ContentItem | None:
        if not text or not text.strip():
            return None
        current = item.get_string_property(alt_field.variable)
        if current is not None and current.strip():
            return None
        item.set_string_property(alt_field.variable, text)
        return item
