# autotag/orchestrators/autotag_trigger.py
"""
Publish hook: the explicit call a CMS event subscriber makes per item.

    trigger = AutoTagTrigger(pipeline, repository)
    outcome = trigger.on_publish(item, is_publish=event.is_publish)

Tags are written first; then, if alt text was set in memory, the item is saved
through the repository. Any error is logged and recorded on the outcome
rather than raised, so one bad item never breaks the event loop. Retrying is up
to whoever owns the event.
"""

from __future__ import annotations

from dataclasses import dataclass

from autotag.core.content.base import ContentRepository
from autotag.core.logging import get_logger
from autotag.orchestrators.vision_tagging import VisionTaggingPipeline
from autotag.schemas.models import ContentItem

logger = get_logger(__name__)


@dataclass
class PublishOutcome:
    identifier: str
    eligible: bool = False
    tagged: bool = False
    alt_text_saved: bool = False
    error: str | None = None


class AutoTagTrigger:
    def __init__(self, pipeline: VisionTaggingPipeline, repository: ContentRepository) -> None:
        self._pipeline = pipeline
        self._repository = repository

    def on_publish(self, item: ContentItem, *, is_publish: bool = True) -> PublishOutcome:
        outcome = PublishOutcome(identifier=item.identifier)
        if not self._pipeline.should_auto_tag(item):
            return outcome
        outcome.eligible = True

        if not is_publish:
            logger.info("onPublish - PublishEvent:false for content: %s id:%s", item.title, item.identifier)
            return outcome

        try:
            outcome.tagged = self._pipeline.tag_image_if_needed(item)
            if self._pipeline.add_alt_text_if_needed(item):
                self._repository.save(item)
                outcome.alt_text_saved = True
        except Exception as e:  # noqa: BLE001
            logger.error("Error tagging content %s", item.identifier, exc_info=True)
            outcome.error = f"{type(e).__name__}: {e}"

        logger.info("onPublish - PublishEvent:true for content: %s id:%s", item.title, item.identifier)
        return outcome
