# autotag/orchestrators/vision_tagging.py
"""
Vision Tagging Pipeline

Purpose
-------
The one door from the trigger layer into tagging:

    tag_image_if_needed(item)            -> True if the tag field was written
    add_alt_text_if_needed(item)         -> True if the caller must save the item
    read_tags_and_description(item, f)   -> TaggingResult | None

Design
------
- All collaborators are injected (secrets, repository, client, cache); no
  module-level state, so two pipelines never share a cache by accident.
- The expensive path runs inside `DedupCache.get_or_compute`, keyed by the
  image sha256: one external call per image while the entry is live, and
  concurrent publishes of the same image share that call.
- Each step returns a StepResult. Anything short of a parsed TaggingResult is
  logged and becomes "no result"; it is never cached.
- Only tag persistence raises (TagPersistenceError). Everything else degrades.
"""

from __future__ import annotations

from autotag.core.content.base import ContentRepository, SecretProvider
from autotag.core.logging import get_logger, preview
from autotag.core.settings import PipelineSettings
from autotag.core.vision.cache import DedupCache
from autotag.core.vision.config import ConfigResolver
from autotag.core.vision.eligibility import EligibilityEvaluator
from autotag.core.vision.errors import VisionTaggingError, vision_call_guard
from autotag.core.vision.extract import completion_text, parse_tagging_result
from autotag.core.vision.persistence import PersistenceCoordinator
from autotag.core.vision.prompt import PromptBuilder, describe_payload
from autotag.core.vision.result import StepResult
from autotag.schemas.models import ContentField, ContentItem, ImageAsset, TaggingResult
from autotag.tools.vision.provider_base import VisionClient

logger = get_logger(__name__)


class VisionTaggingPipeline:
    def __init__(
        self,
        *,
        secrets: SecretProvider,
        repository: ContentRepository,
        client: VisionClient,
        cache: DedupCache | None = None,
        settings: PipelineSettings | None = None,
    ) -> None:
        self.settings = settings or PipelineSettings()
        self.resolver = ConfigResolver(secrets)
        self.evaluator = EligibilityEvaluator(self.resolver, self.settings)
        self.prompts = PromptBuilder(self.settings)
        self.persistence = PersistenceCoordinator(repository)
        self.client = client
        self.cache = cache or DedupCache(self.settings.cache_ttl_s, self.settings.cache_max_entries)

    # ---------- gating ----------
    def should_auto_tag(self, item: ContentItem) -> bool:
        return self.evaluator.should_auto_tag(item)

    # ---------- tags ----------
    def tag_image_if_needed(self, item: ContentItem, image_field: ContentField | None = None) -> bool:
        image_field = image_field or self.evaluator.image_field(item)
        if image_field is None:
            return False
        if not self.evaluator.should_tag(item, image_field):
            return False

        result = self.read_tags_and_description(item, image_field)
        if result is None:
            return False

        self.persistence.save_tags(item, result.tags)
        return True

    # ---------- alt text ----------
    def add_alt_text_if_needed(
        self,
        item: ContentItem,
        image_field: ContentField | None = None,
        alt_field: ContentField | None = None,
    ) -> bool:
        image_field = image_field or self.evaluator.image_field(item)
        if alt_field is None:
            alt_field = self.evaluator.alt_text_field(item, self.resolver.resolve(item.host))
        if image_field is None or alt_field is None:
            return False
        if not self.evaluator.should_add_alt_text(item, image_field, alt_field):
            return False

        result = self.read_tags_and_description(item, image_field)
        if result is None:
            return False

        return self.persistence.set_alt_text(item, alt_field, result.alt_text) is not None

    # ---------- shared read ----------
    def read_tags_and_description(self, item: ContentItem, image_field: ContentField) -> TaggingResult | None:
        asset = item.binary(image_field.variable)
        if asset is None:
            return None
        if not asset.sha256:
            logger.debug("no sha256 for %s.%s; not cacheable", item.identifier, image_field.variable)
            return None
        if not self.evaluator.usable_image(item, image_field):
            return None

        outcome = self.cache.get_or_compute(asset.sha256, lambda: self._compute(item, asset))
        if not outcome.ok:
            logger.warning(
                "no vision result for %s (%s): %s", item.identifier, asset.filename, outcome.reason or outcome.status
            )
            return None
        return outcome.value

    def _compute(self, item: ContentItem, asset: ImageAsset) -> StepResult[TaggingResult]:
        config = self.resolver.resolve(item.host)
        built = self.prompts.build(config, asset)
        if not built.ok:
            return StepResult(built.status, None, built.reason)
        payload = built.value
        assert payload is not None
        logger.debug("vision request: %s", preview(describe_payload(payload)))

        key = config.api_key.get_secret_value() if config.api_key is not None else None
        try:
            with vision_call_guard():
                response = self.client.complete(payload, api_key=key)
        except VisionTaggingError as e:
            return StepResult.failure(f"vision call failed: {type(e).__name__}: {e}")

        logger.debug("vision response: %s", preview(str(response)))
        return completion_text(response).then(parse_tagging_result)
