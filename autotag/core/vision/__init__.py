# autotag/core/vision/__init__.py
from .cache import DedupCache
from .config import ConfigResolver
from .eligibility import ALT_FIELD_MARKER, MARKER_TAG, TAG_FIELD_MARKER, EligibilityEvaluator
from .errors import (
    ExtractionError,
    TagPersistenceError,
    VisionCallError,
    VisionTaggingError,
    classify_vision_error,
    vision_call_guard,
)
from .extract import completion_text, extract_json_object, parse_tagging_result
from .persistence import PersistenceCoordinator
from .prompt import PromptBuilder
from .result import StepResult

__all__ = [
    "DedupCache",
    "ConfigResolver",
    "EligibilityEvaluator",
    "PersistenceCoordinator",
    "PromptBuilder",
    "StepResult",
    "MARKER_TAG",
    "ALT_FIELD_MARKER",
    "TAG_FIELD_MARKER",
    "VisionTaggingError",
    "VisionCallError",
    "ExtractionError",
    "TagPersistenceError",
    "classify_vision_error",
    "vision_call_guard",
    "completion_text",
    "extract_json_object",
    "parse_tagging_result",
]
