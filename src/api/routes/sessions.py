"""
Session management endpoints
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, status
from loguru import logger

from src.agents.assistant import AssistantCore, get_assistant
from src.api.schemas import CreateSessionRequest, SessionSummary, UpdatePersonalityRequest
from src.models.domain import ChatSession

router = APIRouter(prefix="/api/sessions", tags=["sessions"])


@router.post("", response_model=ChatSession, status_code=status.HTTP_201_CREATED)
async def create_session(
    request: Optional[CreateSessionRequest] = None,
    assistant: AssistantCore = Depends(get_assistant),
):
    """Create an empty session with the given personality."""
    request = request or CreateSessionRequest()
    return assistant.store.create_session(personality=request.personality)


@router.get("", response_model=List[SessionSummary])
async def list_sessions(assistant: AssistantCore = Depends(get_assistant)):
    return [SessionSummary.from_session(s) for s in assistant.store.list_sessions()]


@router.get("/{session_id}", response_model=ChatSession)
async def get_session(session_id: str, assistant: AssistantCore = Depends(get_assistant)):
    return assistant.store.get(session_id)


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: str, assistant: AssistantCore = Depends(get_assistant)):
    """Delete a whole session (messages are never deleted individually)."""
    assistant.store.delete_session(session_id)


@router.patch("/{session_id}/personality", response_model=ChatSession)
async def update_personality(
    session_id: str,
    request: UpdatePersonalityRequest,
    assistant: AssistantCore = Depends(get_assistant),
):
    logger.info(f"Session {session_id} personality -> {request.personality.value}")
    return assistant.store.set_personality(session_id, request.personality)
