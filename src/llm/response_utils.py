"""
LLM response utilities for handling multi-format model outputs.

Supports:
- Simple string responses
- Structured content blocks (reasoning + text, annotated web-search output)
- JSON replies, optionally wrapped in markdown code fences
"""

import json
import re
from typing import Any, List, Type, TypeVar

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from src.models.domain import GroundingSource
from src.utils.errors import StructuredResponseError

T = TypeVar("T")

_CODE_FENCE = re.compile(r"^```(?:json|JSON)?\s*\n?(.*?)\n?```$", re.DOTALL)


def extract_text_from_response(response: Any) -> str:
    """
    Extract text content from LLM response (handles all formats).

    Supports:
    - Simple string: "text here"
    - Structured blocks: [{'type': 'reasoning', ...}, {'type': 'text', 'text': '...'}]
    - LangChain AIMessage with content attribute

    Args:
        response: LLM response (AIMessage, dict, str, or list)

    Returns:
        Extracted text content as string
    """
    content = response.content if hasattr(response, "content") else response

    if not content:
        return ""

    if isinstance(content, str):
        return content

    if isinstance(content, list):
        text_parts = []
        for block in content:
            if isinstance(block, dict):
                if block.get("type") == "text" and "text" in block:
                    text_parts.append(block["text"])
                elif "text" in block and block.get("type") != "reasoning":
                    text_parts.append(block["text"])
            elif isinstance(block, str):
                text_parts.append(block)

        result = "".join(text_parts)
        if result:
            return result

        content_preview = str(content)[:200]
        logger.warning(f"No text blocks found in structured response: {content_preview}")
        return ""

    return str(content)


def extract_sources_from_response(response: Any) -> List[GroundingSource]:
    """
    Collect web citations from annotated text blocks.

    Providers with a web-search tool attach `annotations` (url citations) to
    the text blocks they return; plain string content yields no sources.
    """
    content = response.content if hasattr(response, "content") else response
    if not isinstance(content, list):
        return []

    sources: List[GroundingSource] = []
    seen = set()
    for block in content:
        if not isinstance(block, dict):
            continue
        for annotation in block.get("annotations") or []:
            if not isinstance(annotation, dict):
                continue
            url = annotation.get("url") or annotation.get("uri")
            if not url or url in seen:
                continue
            seen.add(url)
            sources.append(GroundingSource(uri=url, title=annotation.get("title")))
    return sources


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence if present."""
    stripped = text.strip()
    match = _CODE_FENCE.match(stripped)
    return match.group(1).strip() if match else stripped


def parse_structured_response(text: str, schema_type: Type[T]) -> T:
    """
    Parse backend text as JSON and validate it against a schema type.

    Args:
        text: Raw backend reply
        schema_type: Pydantic model or typing construct (e.g. List[Model])

    Returns:
        Validated value

    Raises:
        StructuredResponseError: text is not JSON or does not match the schema
    """
    cleaned = strip_code_fences(text or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise StructuredResponseError(f"Response is not valid JSON: {e}", raw_text=text) from e

    try:
        return TypeAdapter(schema_type).validate_python(data)
    except ValidationError as e:
        raise StructuredResponseError(
            f"Response does not match the expected schema ({e.error_count()} errors)",
            raw_text=text,
        ) from e


def json_schema_for(schema_type: Any) -> dict:
    """JSON schema (camelCase aliases) used to declare a structured output."""
    return TypeAdapter(schema_type).json_schema(by_alias=True)
