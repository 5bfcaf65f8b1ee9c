"""
AI image auto-tagging: vision alt text and keyword tags for published content.

Entry points:
  - autotag.orchestrators.vision_tagging.VisionTaggingPipeline
  - autotag.orchestrators.autotag_trigger.AutoTagTrigger
"""

__version__ = "0.3.0"
