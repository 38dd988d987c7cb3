"""
Shared fixtures for the assistant core tests
"""

import json
import os
from collections import deque
from typing import Any, List

os.environ.setdefault("LOG_TO_FILE", "false")

import pytest

from src.agents.assistant import AssistantCore
from src.agents.pipelines.base import PipelineContext
from src.llm.backend import GenerationBackend, GenerationRequest, GenerationResponse
from src.memory.session_store import SessionStore
from src.models.domain import ChatSession, Message, MessageRole

TITLE_PROMPT_PREFIX = "Create a very short, concise title"


def request_text(request: GenerationRequest) -> str:
    """Text of the last turn of a request."""
    return request.history[-1].text if request.history else ""


class ScriptedBackend(GenerationBackend):
    """
    Fake generation backend.

    Replays queued replies in order (str, dict/list -> JSON text,
    GenerationResponse, or an exception to raise) and records every request.
    Title requests are answered separately so detached auto-titling never
    consumes a scripted reply.
    """

    def __init__(self, *replies: Any, title: Any = "Test Title"):
        self.replies = deque(replies)
        self.requests: List[GenerationRequest] = []
        self.title_requests: List[GenerationRequest] = []
        self.title = title

    def queue(self, *replies: Any) -> "ScriptedBackend":
        self.replies.extend(replies)
        return self

    @staticmethod
    def _respond(reply: Any) -> GenerationResponse:
        if isinstance(reply, BaseException):
            raise reply
        if isinstance(reply, GenerationResponse):
            return reply
        if isinstance(reply, (dict, list)):
            return GenerationResponse(text=json.dumps(reply))
        return GenerationResponse(text=reply)

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        if request_text(request).startswith(TITLE_PROMPT_PREFIX):
            self.title_requests.append(request)
            return self._respond(self.title)

        self.requests.append(request)
        if not self.replies:
            raise AssertionError(f"Unexpected backend call: {request_text(request)[:80]!r}")
        return self._respond(self.replies.popleft())


@pytest.fixture
def backend():
    return ScriptedBackend()


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
async def assistant(backend, store):
    core = AssistantCore(backend=backend, store=store)
    yield core
    await core.drain_background_tasks()


@pytest.fixture
def session(store) -> ChatSession:
    return store.create_session()


def make_context(backend: GenerationBackend, text: str, history: List[Message] = (), **kwargs) -> PipelineContext:
    """Pipeline context whose session ends with `text` as the user's turn."""
    messages = tuple(history) + (Message(role=MessageRole.USER, content=text),)
    session = ChatSession(messages=messages)
    return PipelineContext(backend=backend, session=session, text=text, **kwargs)
