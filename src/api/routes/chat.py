"""
Chat endpoints

- POST /api/sessions/{id}/messages        one routed user turn (JSON)
- POST /api/sessions/{id}/study-guide     study guide for a topic (JSON)
- POST /api/sessions/{id}/experts/stream  Team-of-Experts run (Server-Sent Events)
- POST /api/classify                      informational intent classification
"""

import asyncio
from typing import AsyncGenerator

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from loguru import logger

from src.agents.assistant import AssistantCore, get_assistant
from src.api.schemas import (
    ChatTurnResponse,
    ClassifyRequest,
    ClassifyResponse,
    ExpertsRequest,
    SendMessageRequest,
    StreamEvent,
    StudyGuideRequest,
    TranslationMatch,
)

router = APIRouter(prefix="/api", tags=["chat"])


@router.post("/sessions/{session_id}/messages", response_model=ChatTurnResponse)
async def send_message(
    session_id: str,
    request: SendMessageRequest,
    assistant: AssistantCore = Depends(get_assistant),
):
    """
    Route one user turn to its pipeline and return the appended Message.

    `pinned_tool` in the response is the tool that stays selected for the
    next turn (only "Study and learn" survives a turn).
    """
    logger.info(
        f"Message request - session={session_id}, pinned={request.pinned_tool.value if request.pinned_tool else 'none'}, "
        f"attachments={len(request.attachments)}"
    )
    result = await assistant.send_message(
        session_id,
        request.message,
        pinned_tool=request.pinned_tool,
        attachments=request.attachments,
        profile=request.profile,
    )
    return ChatTurnResponse(
        pipeline=result.pipeline,
        message=result.message,
        pinned_tool=result.pinned_tool,
        session=result.session,
    )


@router.post("/sessions/{session_id}/study-guide", response_model=ChatTurnResponse)
async def create_study_guide(
    session_id: str,
    request: StudyGuideRequest,
    assistant: AssistantCore = Depends(get_assistant),
):
    result = await assistant.run_study_guide(session_id, request.topic)
    return ChatTurnResponse(
        pipeline=result.pipeline,
        message=result.message,
        pinned_tool=result.pinned_tool,
        session=result.session,
    )


async def relay_team_run(queue: asyncio.Queue, session_id: str) -> AsyncGenerator[str, None]:
    """
    Relay Team-of-Experts snapshots as SSE events

    The run itself is detached from the request, so a client that disconnects
    stops only this relay.

    Yields:
        SSE-formatted strings: one `snapshot` per state change, then `complete`
    """
    snapshots = 0
    final_status = None
    try:
        while True:
            item = await queue.get()
            if item is None:
                break
            if isinstance(item, Exception):
                raise item
            snapshots += 1
            final_status = item.status
            yield StreamEvent(event="snapshot", state=item).to_sse()

        logger.info(f"Team stream completed - session={session_id}, snapshots={snapshots}")
        complete = StreamEvent(
            event="complete",
            stats={
                "snapshots": snapshots,
                "status": final_status.value if final_status else None,
                "terminal": bool(final_status and final_status.is_terminal),
            },
        )
        yield complete.to_sse()
    except Exception as e:
        logger.exception("Team stream error occurred")
        yield StreamEvent(event="error", error=str(e) or type(e).__name__).to_sse()


@router.post("/sessions/{session_id}/experts/stream")
async def experts_stream(
    session_id: str,
    request: ExpertsRequest,
    assistant: AssistantCore = Depends(get_assistant),
):
    """
    Run the Team of Experts and stream each run-state snapshot

    **Response:** SSE stream

    1. **snapshot** - new run state
    ```json
    {"event": "snapshot", "state": {"originalQuery": "...", "plan": "...", "tasks": [...], "status": "executing"}}
    ```

    2. **complete** - terminal state reached
    ```json
    {"event": "complete", "stats": {"snapshots": 6, "status": "done", "terminal": true}}
    ```

    3. **error** - stream aborted
    ```json
    {"event": "error", "error": "message"}
    ```
    """
    assistant.require_backend()
    assistant.record_user_turn(session_id, request.message)
    queue = assistant.start_multi_agent_run(request.message, session_id)

    return StreamingResponse(
        relay_team_run(queue, session_id),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )


@router.post("/classify", response_model=ClassifyResponse)
async def classify(request: ClassifyRequest, assistant: AssistantCore = Depends(get_assistant)):
    """Classifier results and the pipeline an unpinned message would take."""
    result = assistant.classify_intent(request.message)
    translation = None
    if result.translation is not None:
        translation = TranslationMatch(text=result.translation.text, language=result.translation.language)

    return ClassifyResponse(
        intent=result.primary.value,
        video_search=result.video_search,
        music_generation=result.music_generation,
        media_playback=result.media_playback,
        translation=translation,
        video_id=result.video_id,
        pipeline=assistant.route(request.message, None, result),
    )
