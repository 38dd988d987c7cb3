"""
Translation pipeline
"""

from typing import Optional

from src.agents.pipelines.base import (
    PipelineContext,
    assistant_message,
    generate_structured_from_prompt,
    handler_pipeline,
)
from src.agents.pipelines.schemas import TranslationReply
from src.agents.router.classifiers import TranslationIntent, detect_translation_intent
from src.models.domain import Message, TranslationPayload

TRANSLATION_PROMPT = (
    'Translate "{text}" into {language}. Also provide the phonetic transcription in English letters '
    "(like Romaji for Japanese or Pinyin for Chinese)."
)


def _intent_for(ctx: PipelineContext) -> Optional[TranslationIntent]:
    if ctx.classification is not None and ctx.classification.translation is not None:
        return ctx.classification.translation
    return detect_translation_intent(ctx.text)


@handler_pipeline("translation", "I'm sorry, I couldn't process the translation request. Error: {error}")
async def run_translation(ctx: PipelineContext) -> Message:
    intent = _intent_for(ctx)
    if intent is None:
        raise ValueError("No text and target language could be extracted from the message")

    prompt = TRANSLATION_PROMPT.format(text=intent.text, language=intent.language)
    reply = await generate_structured_from_prompt(ctx.backend, TranslationReply, prompt)

    payload = TranslationPayload(
        source_text=intent.text,
        target_language=intent.language,
        translation=reply.translation,
        phonetic=reply.phonetic,
        language_code=reply.language_code,
    )
    return assistant_message(
        f"{reply.translation} ({reply.phonetic})",
        suffix="model",
        language=reply.language_code,
        payload=payload,
    )
