"""
API schemas for request/response models
"""

from src.api.schemas.chat import (
    ChatTurnResponse,
    ClassifyRequest,
    ClassifyResponse,
    ExpertsRequest,
    HealthResponse,
    SendMessageRequest,
    StreamEvent,
    StudyGuideRequest,
    TranslationMatch,
)
from src.api.schemas.session import CreateSessionRequest, SessionSummary, UpdatePersonalityRequest

__all__ = [
    "ChatTurnResponse",
    "ClassifyRequest",
    "ClassifyResponse",
    "ExpertsRequest",
    "HealthResponse",
    "SendMessageRequest",
    "StreamEvent",
    "StudyGuideRequest",
    "TranslationMatch",
    "CreateSessionRequest",
    "SessionSummary",
    "UpdatePersonalityRequest",
]
