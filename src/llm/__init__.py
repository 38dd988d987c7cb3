"""
LLM layer - Client factory, generation backend contract, response utilities
"""

from src.llm.client import create_llm
from src.llm.backend import (
    BackendTurn,
    GenerationBackend,
    GenerationRequest,
    GenerationResponse,
    LangChainBackend,
    create_backend,
)
from src.llm.response_utils import (
    extract_text_from_response,
    extract_sources_from_response,
    parse_structured_response,
    json_schema_for,
)

__all__ = [
    "create_llm",
    "BackendTurn",
    "GenerationBackend",
    "GenerationRequest",
    "GenerationResponse",
    "LangChainBackend",
    "create_backend",
    "extract_text_from_response",
    "extract_sources_from_response",
    "parse_structured_response",
    "json_schema_for",
]
