"""
Intent routing - normalizer, classifiers and router
"""

from src.agents.router.normalizer import normalize_text
from src.agents.router.classifiers import (
    Intent,
    IntentClassification,
    TranslationIntent,
    classify_intent,
    detect_translation_intent,
    extract_video_id,
    is_media_playback_intent,
    is_music_generation_intent,
    is_video_search_intent,
)
from src.agents.router.routing import PipelineId, route

__all__ = [
    "normalize_text",
    "Intent",
    "IntentClassification",
    "TranslationIntent",
    "classify_intent",
    "detect_translation_intent",
    "extract_video_id",
    "is_media_playback_intent",
    "is_music_generation_intent",
    "is_video_search_intent",
    "PipelineId",
    "route",
]
