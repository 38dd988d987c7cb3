"""
Intent router - picks exactly one pipeline per message

Precedence (first match wins):
1. Team of Experts pinned            -> multi-agent
2. direct video URL, nothing pinned  -> play by id
3. playback/video search, nothing pinned -> video search results
4. translation, nothing pinned       -> translation
5. Web Search pinned                 -> web search
6. Music pinned or music heuristic   -> music concept
7. Map pinned                        -> location
8. anything else                     -> default
"""

import enum
from typing import Optional

from loguru import logger

from src.models.domain import Tool
from src.agents.router.classifiers import IntentClassification, classify_intent


class PipelineId(str, enum.Enum):
    MULTI_AGENT = "multi_agent"
    PLAY_BY_ID = "play_by_id"
    VIDEO_SEARCH = "video_search"
    TRANSLATION = "translation"
    WEB_SEARCH = "web_search"
    MUSIC_CONCEPT = "music_concept"
    LOCATION = "location"
    DEFAULT = "default"


def route(
    text: str,
    pinned_tool: Optional[Tool] = None,
    classification: Optional[IntentClassification] = None,
) -> PipelineId:
    """Select the handler pipeline for a message.

    Args:
        text: Raw message text
        pinned_tool: Tool the user selected manually, if any
        classification: Precomputed classifier results (computed when omitted)

    Returns:
        The pipeline to run
    """
    if classification is None:
        classification = classify_intent(text)

    if pinned_tool == Tool.TEAM_OF_EXPERTS:
        pipeline = PipelineId.MULTI_AGENT
    elif classification.video_id and pinned_tool is None:
        pipeline = PipelineId.PLAY_BY_ID
    elif (classification.media_playback or classification.video_search) and pinned_tool is None:
        pipeline = PipelineId.VIDEO_SEARCH
    elif classification.translation and pinned_tool is None:
        pipeline = PipelineId.TRANSLATION
    elif pinned_tool == Tool.WEB_SEARCH:
        pipeline = PipelineId.WEB_SEARCH
    elif pinned_tool == Tool.MUSIC or classification.music_generation:
        pipeline = PipelineId.MUSIC_CONCEPT
    elif pinned_tool == Tool.MAP:
        pipeline = PipelineId.LOCATION
    else:
        pipeline = PipelineId.DEFAULT

    logger.info(
        f"Routed message to {pipeline.value.upper()} "
        f"(pinned={pinned_tool.value if pinned_tool else 'none'}, intent={classification.primary.value})"
    )
    return pipeline
