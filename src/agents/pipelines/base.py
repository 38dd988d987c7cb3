"""
Shared pipeline plumbing

Every handler pipeline is an async function `handler(ctx) -> Message`.
The `handler_pipeline` decorator turns any failure inside a handler into a
normal assistant Message, so errors never travel past the pipeline boundary:

- StructuredResponseError -> fixed "couldn't format the response" apology
- anything else           -> the pipeline's own apology with the error text
"""

import functools
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Sequence, Type, TypeVar

from loguru import logger

from src.agents.router.classifiers import IntentClassification
from src.llm.backend import BackendTurn, GenerationBackend, GenerationRequest
from src.llm.response_utils import json_schema_for, parse_structured_response
from src.memory.session_store import window_messages
from src.models.domain import (
    Attachment,
    ChatSession,
    Message,
    MessageRole,
    Personality,
    Tool,
    UserProfile,
    new_message_id,
)
from src.utils.errors import StructuredResponseError

T = TypeVar("T")

DEFAULT_LANGUAGE = "en-US"

MALFORMED_RESPONSE_TEXT = (
    "I'm sorry, I encountered an issue and couldn't format the response correctly. "
    "This can sometimes happen with requests that involve external tools. "
    "Please try rephrasing your query, or use a specific tool like 'Web Search' if applicable."
)

CRITICAL_ERROR_TEXT = (
    "A critical error occurred while trying to generate a response. "
    "Please check the logs for details."
)


def _local_now() -> datetime:
    return datetime.now().astimezone()


@dataclass
class PipelineContext:
    """
    Everything a handler needs for one user turn.

    `session` already ends with the user's turn; `text` is that turn's raw
    (original-case) text and `attachments` the files staged with it.
    """
    backend: GenerationBackend
    session: ChatSession
    text: str
    attachments: Sequence[Attachment] = ()
    pinned_tool: Optional[Tool] = None
    profile: Optional[UserProfile] = None
    classification: Optional[IntentClassification] = None
    now: datetime = field(default_factory=_local_now)

    @property
    def personality(self) -> Personality:
        return self.session.personality

    @property
    def timezone(self) -> str:
        return self.now.tzname() or "UTC"

    def history(self, include_staged: bool = True) -> List[BackendTurn]:
        """Backend turns for the session window (optionally with staged files)."""
        staged = self.attachments if include_staged else ()
        return build_backend_history(self.session.messages, staged)


def build_backend_history(
    messages: Sequence[Message],
    staged: Sequence[Attachment] = (),
    max_messages: Optional[int] = None,
) -> List[BackendTurn]:
    """
    Convert session messages into backend turns.

    Messages with neither text nor attachments (payload-only results) are
    skipped, the window is cut to the most recent messages, and staged files
    are added to the final user turn when it does not already carry them.

    Args:
        messages: Session history, oldest first
        staged: Attachments staged with the current turn
        max_messages: Window size (defaults to settings.max_conversation_messages)

    Returns:
        Ordered list of BackendTurn
    """
    usable = [m for m in messages if m.has_text or m.attachments]

    windowed = window_messages(usable, max_messages)
    if len(windowed) < len(usable):
        logger.debug(f"Truncating backend history from {len(usable)} to {len(windowed)} messages")
    usable = windowed

    turns = [
        BackendTurn(
            role="user" if m.role == MessageRole.USER else "assistant",
            text=m.content or "",
            attachments=tuple(m.attachments),
        )
        for m in usable
    ]

    if staged and turns and turns[-1].role == "user":
        last = turns[-1]
        present = {a.data_url for a in last.attachments}
        extra = tuple(a for a in staged if a.data_url not in present)
        if extra:
            turns[-1] = BackendTurn(role="user", text=last.text, attachments=tuple(last.attachments) + extra)

    return turns


async def generate_structured(
    backend: GenerationBackend,
    schema_type: Type[T],
    history: Sequence[BackendTurn],
    system_instruction: Optional[str] = None,
) -> T:
    """Issue one schema-constrained backend call and validate the reply."""
    request = GenerationRequest(
        history=history,
        system_instruction=system_instruction,
        response_schema=json_schema_for(schema_type),
    )
    response = await backend.generate(request)
    return parse_structured_response(response.text, schema_type)


async def generate_structured_from_prompt(
    backend: GenerationBackend,
    schema_type: Type[T],
    prompt: str,
    system_instruction: Optional[str] = None,
) -> T:
    """Structured call restricted to a single user prompt (no history)."""
    history = [BackendTurn(role="user", text=prompt)]
    return await generate_structured(backend, schema_type, history, system_instruction)


def assistant_message(content: Optional[str] = None, suffix: str = "", **fields) -> Message:
    return Message(
        id=new_message_id(suffix),
        role=MessageRole.ASSISTANT,
        content=content,
        **fields,
    )


def error_message(template: str, error: BaseException) -> Message:
    reason = str(error) or type(error).__name__
    return assistant_message(template.format(error=reason), suffix="error", language=DEFAULT_LANGUAGE)


def malformed_response_message() -> Message:
    return assistant_message(MALFORMED_RESPONSE_TEXT, suffix="error", language=DEFAULT_LANGUAGE)


def critical_error_message() -> Message:
    return assistant_message(CRITICAL_ERROR_TEXT, suffix="error-critical", language=DEFAULT_LANGUAGE)


PipelineHandler = Callable[..., Awaitable[Message]]


def handler_pipeline(name: str, failure_template: str) -> Callable[[PipelineHandler], PipelineHandler]:
    """
    Decorate a handler so it always returns a Message.

    Args:
        name: Pipeline name used in logs
        failure_template: Apology text with an `{error}` placeholder
    """

    def decorator(func: PipelineHandler) -> PipelineHandler:
        @functools.wraps(func)
        async def wrapper(ctx: PipelineContext, *args, **kwargs) -> Message:
            logger.debug(f"Running {name} pipeline for session {ctx.session.id}")
            try:
                return await func(ctx, *args, **kwargs)
            except StructuredResponseError as e:
                logger.warning(f"⚠️ {name} pipeline got a malformed structured response: {e}")
                logger.warning(f"Raw response: {e.raw_text!r}")
                return malformed_response_message()
            except Exception as e:
                logger.error(f"{name} pipeline error: {e}")
                return error_message(failure_template, e)

        return wrapper

    return decorator
