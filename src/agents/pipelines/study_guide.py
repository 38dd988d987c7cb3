"""
Study guide pipeline
"""

from src.agents.pipelines.base import (
    PipelineContext,
    assistant_message,
    generate_structured_from_prompt,
    handler_pipeline,
)
from src.models.domain import Message, StudyGuide, StudyGuidePayload

STUDY_GUIDE_PROMPT = (
    'Generate a comprehensive study guide on the topic: "{topic}". The study guide should include a summary '
    "of the topic, a list of key concepts with their explanations, a few practice questions to test "
    "understanding, and a list of links or resources for further reading."
)


def study_request_text(topic: str) -> str:
    """User turn recorded for a study guide request."""
    return f"Create a study guide for: {topic}"


def study_session_title(topic: str) -> str:
    return f"Study: {topic}"


@handler_pipeline("study_guide", "Sorry, I couldn't generate the study guide. Error: {error}")
async def run_study_guide(ctx: PipelineContext, topic: str) -> Message:
    guide = await generate_structured_from_prompt(
        ctx.backend, StudyGuide, STUDY_GUIDE_PROMPT.format(topic=topic)
    )
    return assistant_message(suffix="studyguide", payload=StudyGuidePayload(guide=guide))
