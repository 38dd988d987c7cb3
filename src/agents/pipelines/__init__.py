"""
Handler pipelines - one async handler per routed pipeline
"""

from typing import Dict

from src.agents.router.routing import PipelineId
from src.agents.pipelines.base import (
    PipelineContext,
    PipelineHandler,
    build_backend_history,
    critical_error_message,
    malformed_response_message,
)
from src.agents.pipelines.general import run_default
from src.agents.pipelines.location import run_location
from src.agents.pipelines.media import run_play_by_id, run_video_search
from src.agents.pipelines.music import run_music_concept
from src.agents.pipelines.study_guide import run_study_guide, study_request_text, study_session_title
from src.agents.pipelines.title import generate_title
from src.agents.pipelines.translation import run_translation
from src.agents.pipelines.web_search import run_web_search

# Team of Experts streams snapshots and is driven by the assistant facade instead
PIPELINE_HANDLERS: Dict[PipelineId, PipelineHandler] = {
    PipelineId.PLAY_BY_ID: run_play_by_id,
    PipelineId.VIDEO_SEARCH: run_video_search,
    PipelineId.TRANSLATION: run_translation,
    PipelineId.WEB_SEARCH: run_web_search,
    PipelineId.MUSIC_CONCEPT: run_music_concept,
    PipelineId.LOCATION: run_location,
    PipelineId.DEFAULT: run_default,
}

__all__ = [
    "PIPELINE_HANDLERS",
    "PipelineContext",
    "PipelineHandler",
    "build_backend_history",
    "critical_error_message",
    "malformed_response_message",
    "generate_title",
    "run_study_guide",
    "study_request_text",
    "study_session_title",
]
