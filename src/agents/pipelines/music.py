"""
Music concept pipeline

The backend cannot render audio, so it is asked for a song concept (title,
artist, mood, tempo) plus real reference tracks.
"""

from src.agents.pipelines.base import (
    PipelineContext,
    assistant_message,
    generate_structured_from_prompt,
    handler_pipeline,
)
from src.config.settings import settings
from src.models.domain import Message, MusicConcept, MusicConceptPayload, MusicMood

MUSIC_PROMPT = """The user wants you to create music based on this prompt: "{prompt}".

You are a creative music AI. Since you cannot generate audio directly, your task is to generate a detailed CONCEPT for a song that a developer can use to programmatically generate a simple audio loop. This concept must include:
1. A creative and fitting song title.
2. An artist name (be creative, e.g., '{assistant} & The Agents', 'Silicon Symphony', 'Ghost in the Machine').
3. A detailed description of the song's mood, style, instrumentation, and overall feel.
4. A tempo in BPM (beats per minute), as a number.
5. A single mood keyword from the following list: {moods}.
6. Crucially, you must also find exactly 3 real, existing songs on YouTube that closely match the user's request. For each song, provide its title and its full, correct YouTube URL."""


def build_music_prompt(prompt: str) -> str:
    moods = ", ".join(f"'{mood.value}'" for mood in MusicMood)
    return MUSIC_PROMPT.format(prompt=prompt, assistant=settings.assistant_name, moods=moods)


@handler_pipeline("music", "I'm sorry, I encountered an error creating the music concept. Error: {error}")
async def run_music_concept(ctx: PipelineContext) -> Message:
    concept = await generate_structured_from_prompt(ctx.backend, MusicConcept, build_music_prompt(ctx.text))
    return assistant_message(suffix="music", payload=MusicConceptPayload(music=concept))
