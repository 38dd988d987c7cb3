"""
Session auto-titling
"""

from typing import Optional

from src.config.settings import settings
from src.llm.backend import GenerationBackend, GenerationRequest

TITLE_PROMPT = 'Create a very short, concise title ({max_words} words max) for the following user query: "{prompt}"'


def clean_title(raw: str, max_words: Optional[int] = None) -> str:
    """Drop double quotes, trim, and cap the word count."""
    limit = max_words or settings.auto_title_max_words
    words = raw.replace('"', "").split()
    return " ".join(words[:limit])


async def generate_title(backend: GenerationBackend, prompt: str) -> Optional[str]:
    """Short title for a conversation opened with `prompt` (None when the reply is blank)."""
    request = GenerationRequest.single_prompt(
        TITLE_PROMPT.format(max_words=settings.auto_title_max_words, prompt=prompt)
    )
    response = await backend.generate(request)
    return clean_title(response.text) or None
