"""
Session management models for the HTTP API
"""

from pydantic import BaseModel, Field

from src.models.domain import ChatSession, Personality


class CreateSessionRequest(BaseModel):
    personality: Personality = Field(default=Personality.DEFAULT, description="Tone preset for the session")


class UpdatePersonalityRequest(BaseModel):
    personality: Personality


class SessionSummary(BaseModel):
    """Session listing entry (no message bodies)"""
    id: str
    title: str
    personality: Personality
    message_count: int

    @classmethod
    def from_session(cls, session: ChatSession) -> "SessionSummary":
        return cls(
            id=session.id,
            title=session.title,
            personality=session.personality,
            message_count=len(session.messages),
        )
