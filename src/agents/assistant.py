"""
Assistant core - caller-facing facade

Workflow per user turn:
    config check → append user turn → (first turn) detached auto-title →
    classify → route → pipeline or Team of Experts → append result

Every pipeline converts its own failures into a Message; dispatch is also
wrapped in a last-resort guard so the session history always records what
happened.
"""

import asyncio
from contextlib import aclosing
from dataclasses import dataclass
from typing import AsyncIterator, Optional, Sequence, Set

from loguru import logger

from src.agents.experts import ExpertTeam, failed_run_state, initial_run_state
from src.agents.pipelines import (
    PIPELINE_HANDLERS,
    PipelineContext,
    critical_error_message,
    generate_title,
    run_study_guide,
    study_request_text,
    study_session_title,
)
from src.agents.router import IntentClassification, PipelineId, classify_intent, route
from src.config.settings import settings
from src.llm.backend import GenerationBackend, create_backend
from src.memory.session_store import SessionStore, get_session_store
from src.models.domain import (
    Attachment,
    ChatSession,
    Message,
    MessageRole,
    MultiAgentPayload,
    MultiAgentRunState,
    Tool,
    UserProfile,
    new_message_id,
)
from src.utils.errors import ConfigurationError, SessionNotFoundError

# Tools that stay pinned after the turn that used them
STICKY_TOOLS = (Tool.STUDY,)

RUN_INTERRUPTED = "the run was interrupted before it finished"


@dataclass(frozen=True)
class ChatTurnResult:
    """Outcome of one send_message call."""
    session: ChatSession
    message: Message
    pipeline: PipelineId
    pinned_tool: Optional[Tool]


def pinned_tool_after_turn(pinned_tool: Optional[Tool]) -> Optional[Tool]:
    return pinned_tool if pinned_tool in STICKY_TOOLS else None


class AssistantCore:
    """
    Routes user turns to handler pipelines and records results per session.

    One in-flight turn per session is assumed; different sessions may run
    concurrently.
    """

    def __init__(
        self,
        backend: Optional[GenerationBackend] = None,
        store: Optional[SessionStore] = None,
    ):
        self.backend = backend if backend is not None else create_backend()
        self.store = store if store is not None else get_session_store()
        self._background_tasks: Set[asyncio.Task] = set()

        if self.backend is None:
            logger.warning("⚠️ No generation backend configured - messages will be rejected until one is set up")
        else:
            logger.info(f"Initialized AssistantCore ({type(self.backend).__name__})")

    # ------------------------------------------------------------------
    # Classification and routing
    # ------------------------------------------------------------------

    def classify_intent(self, text: str) -> IntentClassification:
        return classify_intent(text)

    def route(
        self,
        text: str,
        pinned_tool: Optional[Tool] = None,
        classification: Optional[IntentClassification] = None,
    ) -> PipelineId:
        return route(text, pinned_tool, classification)

    def require_backend(self) -> GenerationBackend:
        if self.backend is None:
            raise ConfigurationError(
                "No generation backend is configured. Set OPENAI_API_KEY (or LLM_PROVIDER=ollama) and restart."
            )
        return self.backend

    # ------------------------------------------------------------------
    # Pipelines
    # ------------------------------------------------------------------

    async def run_pipeline(
        self,
        pipeline: PipelineId,
        session: ChatSession,
        text: str,
        attachments: Sequence[Attachment] = (),
        pinned_tool: Optional[Tool] = None,
        profile: Optional[UserProfile] = None,
        classification: Optional[IntentClassification] = None,
    ) -> Message:
        """
        Run one single-shot pipeline and return its Message (not appended).

        `session` must already end with the user's turn.
        """
        if pipeline == PipelineId.MULTI_AGENT:
            raise ValueError("The Team of Experts pipeline streams snapshots; use run_multi_agent_pipeline")

        ctx = PipelineContext(
            backend=self.require_backend(),
            session=session,
            text=text,
            attachments=tuple(attachments),
            pinned_tool=pinned_tool,
            profile=profile,
            classification=classification if classification is not None else classify_intent(text),
        )
        return await PIPELINE_HANDLERS[pipeline](ctx)

    async def run_multi_agent_pipeline(self, query: str, session_id: str) -> AsyncIterator[MultiAgentRunState]:
        """
        Run the Team of Experts for `query` inside `session_id`.

        A placeholder Message is appended first and replaced with every
        snapshot; it is released once the run is terminal. Yields each
        snapshot, the last one being done or failed. Closing the iterator
        early records the run as failed.
        """
        team = ExpertTeam(self.require_backend())
        placeholder = self._open_team_placeholder(session_id, query)
        async with aclosing(self._stream_team(team, session_id, placeholder, query)) as snapshots:
            async for snapshot in snapshots:
                yield snapshot

    def start_multi_agent_run(self, query: str, session_id: str) -> asyncio.Queue:
        """
        Start a Team-of-Experts run that no caller owns.

        The run keeps writing snapshots into the session until it is terminal,
        whether or not anyone reads the returned queue. The queue receives
        every snapshot, then None (or the exception that stopped the run).
        """
        self.require_backend()
        self.store.get(session_id)
        queue: asyncio.Queue = asyncio.Queue()

        async def drive() -> None:
            try:
                async for snapshot in self.run_multi_agent_pipeline(query, session_id):
                    queue.put_nowait(snapshot)
            except Exception as e:
                logger.exception(f"Team run in session {session_id} stopped")
                queue.put_nowait(e)
            else:
                queue.put_nowait(None)

        self._track(asyncio.create_task(drive()))
        return queue

    def _open_team_placeholder(self, session_id: str, query: str) -> Message:
        placeholder = Message(
            id=new_message_id("multiagent"),
            role=MessageRole.ASSISTANT,
            payload=MultiAgentPayload(state=initial_run_state(query)),
        )
        self.store.open_placeholder(session_id, placeholder)
        return placeholder

    def _publish_snapshot(self, session_id: str, placeholder: Message, snapshot: MultiAgentRunState) -> None:
        self.store.update_placeholder(
            session_id,
            placeholder.model_copy(update={"payload": MultiAgentPayload(state=snapshot)}),
        )

    async def _stream_team(
        self,
        team: ExpertTeam,
        session_id: str,
        placeholder: Message,
        query: str,
    ) -> AsyncIterator[MultiAgentRunState]:
        latest = placeholder.payload.state
        try:
            async with aclosing(team.stream(query)) as snapshots:
                async for snapshot in snapshots:
                    latest = snapshot
                    self._publish_snapshot(session_id, placeholder, snapshot)
                    yield snapshot
        finally:
            if not latest.status.is_terminal and self.store.is_placeholder_open(session_id, placeholder.id):
                logger.warning(f"⚠️ Team run in session {session_id} stopped in status '{latest.status.value}'")
                self._publish_snapshot(session_id, placeholder, failed_run_state(latest, RUN_INTERRUPTED))
            self.store.release_placeholder(session_id, placeholder.id)

    # ------------------------------------------------------------------
    # Chat turns
    # ------------------------------------------------------------------

    async def send_message(
        self,
        session_id: str,
        text: str,
        pinned_tool: Optional[Tool] = None,
        attachments: Sequence[Attachment] = (),
        profile: Optional[UserProfile] = None,
    ) -> ChatTurnResult:
        """
        Handle one user turn end to end.

        Raises:
            ConfigurationError: no backend configured (nothing is appended)
            SessionNotFoundError: unknown session id
        """
        self.require_backend()
        session = self.record_user_turn(session_id, text, attachments)

        classification = classify_intent(text)
        pipeline = route(text, pinned_tool, classification)

        try:
            if pipeline == PipelineId.MULTI_AGENT:
                message = await self._run_team_turn(text, session_id)
            else:
                message = await self.run_pipeline(
                    pipeline,
                    session,
                    text,
                    attachments=attachments,
                    pinned_tool=pinned_tool,
                    profile=profile,
                    classification=classification,
                )
                self.store.append_message(session_id, message)
        except SessionNotFoundError:
            raise
        except Exception:
            logger.exception("Main message pipeline error")
            message = critical_error_message()
            self.store.append_message(session_id, message)

        return ChatTurnResult(
            session=self.store.get(session_id),
            message=message,
            pipeline=pipeline,
            pinned_tool=pinned_tool_after_turn(pinned_tool),
        )

    def record_user_turn(
        self,
        session_id: str,
        text: str,
        attachments: Sequence[Attachment] = (),
    ) -> ChatSession:
        """Append the user's turn; the first turn of a session also starts auto-titling."""
        is_first_turn = not self.store.get(session_id).messages

        user_message = Message(role=MessageRole.USER, content=text or None, attachments=tuple(attachments))
        session = self.store.append_message(session_id, user_message)

        if is_first_turn and text and settings.auto_title_enabled:
            self._schedule_title(session_id, text)
        return session

    async def _run_team_turn(self, query: str, session_id: str) -> Message:
        team = ExpertTeam(self.require_backend())
        placeholder = self._open_team_placeholder(session_id, query)
        async with aclosing(self._stream_team(team, session_id, placeholder, query)) as snapshots:
            async for _ in snapshots:
                pass
        return next(m for m in self.store.history(session_id) if m.id == placeholder.id)

    async def run_study_guide(
        self,
        session_id: str,
        topic: str,
        profile: Optional[UserProfile] = None,
    ) -> ChatTurnResult:
        """Append a study-guide request and its result; retitle a default-titled session."""
        backend = self.require_backend()
        self.store.get(session_id)

        user_message = Message(role=MessageRole.USER, content=study_request_text(topic))
        session = self.store.append_message(session_id, user_message)

        ctx = PipelineContext(backend=backend, session=session, text=user_message.content, profile=profile)
        message = await run_study_guide(ctx, topic)
        session = self.store.append_message(session_id, message)

        if message.payload is not None and session.title == settings.default_session_title:
            session = self.store.set_title(session_id, study_session_title(topic))

        return ChatTurnResult(session=session, message=message, pipeline=PipelineId.DEFAULT, pinned_tool=Tool.STUDY)

    # ------------------------------------------------------------------
    # Background tasks
    # ------------------------------------------------------------------

    def _schedule_title(self, session_id: str, prompt: str) -> None:
        self._track(asyncio.create_task(self._auto_title(session_id, prompt)))

    def _track(self, task: asyncio.Task) -> None:
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    async def _auto_title(self, session_id: str, prompt: str) -> None:
        try:
            title = await generate_title(self.backend, prompt)
            if title:
                self.store.set_title(session_id, title)
                logger.info(f"Session {session_id} titled '{title}'")
        except Exception as e:
            logger.error(f"Title generation failed: {e}")

    async def drain_background_tasks(self) -> None:
        """Wait for pending auto-title tasks and detached team runs."""
        if self._background_tasks:
            await asyncio.gather(*list(self._background_tasks), return_exceptions=True)


# Global instance (singleton pattern)
_assistant: Optional[AssistantCore] = None


def get_assistant() -> AssistantCore:
    """Get shared assistant instance (singleton)."""
    global _assistant
    if _assistant is None:
        _assistant = AssistantCore()
    return _assistant
