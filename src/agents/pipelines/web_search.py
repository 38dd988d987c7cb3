"""
Web search pipeline - grounded answer plus best-effort language detection
"""

from loguru import logger

from src.agents.pipelines.base import DEFAULT_LANGUAGE, PipelineContext, assistant_message, handler_pipeline
from src.llm.backend import GenerationBackend, GenerationRequest
from src.models.domain import Message, WebSearchPayload

LANGUAGE_DETECTION_PROMPT = (
    'Detect the BCP-47 language code for the following text. Respond with only the code, e.g., "en-US".'
    '\n\nText: "{text}"'
)


async def detect_language(backend: GenerationBackend, text: str) -> str:
    """BCP-47 code of `text`; falls back to en-US on any failure."""
    try:
        response = await backend.generate(
            GenerationRequest.single_prompt(LANGUAGE_DETECTION_PROMPT.format(text=text))
        )
    except Exception as e:
        logger.error(f"Language detection failed, falling back to {DEFAULT_LANGUAGE}: {e}")
        return DEFAULT_LANGUAGE

    code = response.text.strip().strip('"').strip()
    return code or DEFAULT_LANGUAGE


@handler_pipeline("web_search", "I'm sorry, I encountered an error during the web search. Error: {error}")
async def run_web_search(ctx: PipelineContext) -> Message:
    response = await ctx.backend.generate(GenerationRequest(history=ctx.history(), web_search=True))

    language = DEFAULT_LANGUAGE
    if response.text:
        language = await detect_language(ctx.backend, response.text)

    logger.info(f"Web search returned {len(response.sources)} source(s), language={language}")
    return assistant_message(
        response.text or None,
        suffix="model",
        language=language,
        payload=WebSearchPayload(sources=tuple(response.sources)),
    )
