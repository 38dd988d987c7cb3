"""
Chat request/response models for the HTTP API
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from src.agents.router import PipelineId
from src.models.domain import (
    Attachment,
    ChatSession,
    Message,
    MultiAgentRunState,
    Tool,
    UserProfile,
)


class SendMessageRequest(BaseModel):
    """One user turn"""
    message: str = Field(
        default="",
        max_length=8000,
        description="The user's message (may be empty when files are attached)",
    )
    pinned_tool: Optional[Tool] = Field(default=None, description="Tool the user selected manually")
    attachments: List[Attachment] = Field(default_factory=list, description="Files staged with this turn")
    profile: Optional[UserProfile] = Field(default=None, description="Optional user profile for personalization")

    @model_validator(mode="after")
    def _has_content(self) -> "SendMessageRequest":
        if not self.message.strip() and not self.attachments:
            raise ValueError("A message needs text or at least one attachment")
        return self

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Ohayo in Japanese"},
                {"message": "Plan a product launch", "pinned_tool": "Team of Experts"},
            ]
        }
    }


class ChatTurnResponse(BaseModel):
    """Result of a user turn"""
    pipeline: PipelineId
    message: Message
    pinned_tool: Optional[Tool] = Field(default=None, description="Tool that stays pinned for the next turn")
    session: ChatSession


class StudyGuideRequest(BaseModel):
    topic: str = Field(..., min_length=1, max_length=500, description="Topic to study")


class ExpertsRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=8000, description="Query for the Team of Experts")


class ClassifyRequest(BaseModel):
    message: str = Field(..., description="Text to classify")


class TranslationMatch(BaseModel):
    text: str
    language: str


class ClassifyResponse(BaseModel):
    """Informational classifier output"""
    intent: str
    video_search: bool
    music_generation: bool
    media_playback: bool
    translation: Optional[TranslationMatch] = None
    video_id: Optional[str] = None
    pipeline: PipelineId


class StreamEvent(BaseModel):
    """
    Event emitted while a Team-of-Experts run is streaming

    Event types:
    - snapshot: New immutable run state (plan, tasks, final response)
    - complete: Run reached a terminal state
    - error: Stream could not continue
    """
    event: Literal["snapshot", "complete", "error"]

    state: Optional[MultiAgentRunState] = None
    stats: Optional[Dict[str, Any]] = None
    error: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"event": "snapshot", "state": {"originalQuery": "...", "plan": "...", "tasks": []}},
                {"event": "complete", "stats": {"snapshots": 5, "status": "done", "terminal": True}},
                {"event": "error", "error": "message"},
            ]
        }
    }

    def to_sse(self) -> str:
        return f"data: {self.model_dump_json(by_alias=True, exclude_none=True)}\n\n"


class HealthResponse(BaseModel):
    """
    Health check response

    Attributes:
        status: Service health status
        service: Service name
        version: API version
        backend_configured: Whether a generation backend is available
    """
    status: str = Field(..., description="Health status")
    service: str = Field(..., description="Service name")
    version: str = Field(..., description="API version")
    backend_configured: bool = Field(..., description="Whether a generation backend is configured")
