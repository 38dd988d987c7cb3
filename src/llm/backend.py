"""
Generation backend contract

The assistant core only depends on this request/response shape:
an ordered history of user/assistant turns (text and inline attachments),
an optional system instruction, an optional output schema, and a web-search
flag. The backend returns free text (plus any grounding sources); when a
schema was supplied the caller parses that text itself.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage
from loguru import logger

from src.config.settings import settings, is_backend_configured
from src.llm.client import create_llm
from src.llm.response_utils import extract_sources_from_response, extract_text_from_response
from src.models.domain import Attachment, GroundingSource
from src.utils.errors import BackendError


@dataclass(frozen=True)
class BackendTurn:
    """One turn of history as the backend sees it."""
    role: Literal["user", "assistant"]
    text: str = ""
    attachments: Sequence[Attachment] = ()


@dataclass(frozen=True)
class GenerationRequest:
    history: Sequence[BackendTurn]
    system_instruction: Optional[str] = None
    response_schema: Optional[Dict[str, Any]] = None
    web_search: bool = False

    @classmethod
    def single_prompt(cls, prompt: str, **kwargs) -> "GenerationRequest":
        """Request restricted to one user turn (no conversation history)."""
        return cls(history=[BackendTurn(role="user", text=prompt)], **kwargs)


@dataclass(frozen=True)
class GenerationResponse:
    text: str
    sources: List[GroundingSource] = field(default_factory=list)


class GenerationBackend(ABC):
    """Anything that can turn a GenerationRequest into a GenerationResponse."""

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        ...


def _attachment_block(attachment: Attachment) -> Dict[str, Any]:
    if attachment.mime_type.startswith("image/"):
        return {
            "type": "image_url",
            "image_url": {"url": f"data:{attachment.mime_type};base64,{attachment.base64_data}"},
        }
    return {
        "type": "file",
        "source_type": "base64",
        "mime_type": attachment.mime_type,
        "data": attachment.base64_data,
        "filename": attachment.name,
    }


def _to_langchain_message(turn: BackendTurn) -> BaseMessage:
    if turn.role == "assistant":
        return AIMessage(content=turn.text)
    if not turn.attachments:
        return HumanMessage(content=turn.text)
    blocks: List[Dict[str, Any]] = []
    if turn.text:
        blocks.append({"type": "text", "text": turn.text})
    blocks.extend(_attachment_block(a) for a in turn.attachments)
    return HumanMessage(content=blocks)


def _schema_directive(schema: Dict[str, Any]) -> str:
    return (
        "Respond ONLY with a JSON value that conforms to the following JSON schema. "
        "Do not wrap it in markdown and do not add commentary.\n"
        f"{json.dumps(schema, indent=2)}"
    )


class LangChainBackend(GenerationBackend):
    """
    Generation backend backed by a LangChain chat model.

    Structured output is requested by appending the schema to the system
    instruction; the reply text is returned as-is for the caller to parse.
    """

    def __init__(self, llm: Optional[BaseChatModel] = None, web_search_tool_type: Optional[str] = None):
        self.llm = llm or create_llm()
        self.web_search_tool_type = (
            web_search_tool_type if web_search_tool_type is not None else settings.web_search_tool_type
        )
        logger.info(f"Initialized LangChainBackend ({type(self.llm).__name__})")

    def build_messages(self, request: GenerationRequest) -> List[BaseMessage]:
        system_parts = []
        if request.system_instruction:
            system_parts.append(request.system_instruction)
        if request.response_schema is not None:
            system_parts.append(_schema_directive(request.response_schema))

        messages: List[BaseMessage] = []
        if system_parts:
            messages.append(SystemMessage(content="\n\n".join(system_parts)))
        messages.extend(_to_langchain_message(turn) for turn in request.history)
        return messages

    def _model_for(self, request: GenerationRequest):
        if request.web_search and self.web_search_tool_type:
            return self.llm.bind_tools([{"type": self.web_search_tool_type}])
        return self.llm

    async def generate(self, request: GenerationRequest) -> GenerationResponse:
        messages = self.build_messages(request)
        logger.debug(
            f"Backend call: {len(request.history)} turns, schema={'yes' if request.response_schema else 'no'}, "
            f"web_search={request.web_search}"
        )
        try:
            response = await self._model_for(request).ainvoke(messages)
        except Exception as e:
            raise BackendError(str(e) or type(e).__name__) from e

        return GenerationResponse(
            text=extract_text_from_response(response),
            sources=extract_sources_from_response(response),
        )


def create_backend() -> Optional[GenerationBackend]:
    """Build the configured backend, or None when no provider is configured."""
    if not is_backend_configured():
        return None
    return LangChainBackend()
