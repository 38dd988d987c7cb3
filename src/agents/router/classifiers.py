"""
Intent classifiers - rule-based predicates, one per intent category

Each classifier is pure and independent: all of them run on every message and
none short-circuits another (media playback consults the video-search
predicate, but only as a pure function call). Heuristics are conservative;
an unmatched message simply falls through to the default pipeline.
"""

import enum
import re
from dataclasses import dataclass
from typing import Optional

from src.config.constants import (
    MUSIC_CREATION_PREFIXES,
    MUSIC_CREATION_VERBS,
    MUSIC_NOUNS,
    MUSIC_QUESTION_PREFIXES,
    PLAYBACK_PREFIXES,
    PLAYBACK_QUESTION_PREFIXES,
    SUPPORTED_LANGUAGES,
    TRANSLATION_QUESTION_PREFIXES,
    VIDEO_ID_LENGTH,
    VIDEO_NOUN_LINKERS,
    VIDEO_NOUNS,
    VIDEO_SEARCH_QUESTION_PREFIXES,
    VIDEO_SEARCH_VERBS,
    YOUTUBE_MARKERS,
)
from src.agents.router.normalizer import normalize_text


class Intent(str, enum.Enum):
    VIDEO_SEARCH = "video_search"
    MUSIC_GENERATION = "music_generation"
    MEDIA_PLAYBACK = "media_playback"
    TRANSLATION = "translation"
    DIRECT_MEDIA_URL = "direct_media_url"
    NONE = "none"


@dataclass(frozen=True)
class TranslationIntent:
    text: str
    language: str


@dataclass(frozen=True)
class IntentClassification:
    """Outcome of every classifier for one message."""
    video_search: bool = False
    music_generation: bool = False
    media_playback: bool = False
    translation: Optional[TranslationIntent] = None
    video_id: Optional[str] = None

    @property
    def primary(self) -> Intent:
        """Single most specific intent (same precedence the router applies without a pinned tool)."""
        if self.video_id:
            return Intent.DIRECT_MEDIA_URL
        if self.media_playback:
            return Intent.MEDIA_PLAYBACK
        if self.video_search:
            return Intent.VIDEO_SEARCH
        if self.translation:
            return Intent.TRANSLATION
        if self.music_generation:
            return Intent.MUSIC_GENERATION
        return Intent.NONE


_LANGUAGE_ALTERNATION = "|".join(SUPPORTED_LANGUAGES)

# "<text> in <language>"
_TEXT_IN_LANGUAGE = re.compile(rf"^(.*?)\s+in\s+({_LANGUAGE_ALTERNATION})$", re.IGNORECASE)

# "translate|say|how to say '<text>' to|in <language>"
_TRANSLATE_COMMAND = re.compile(
    rf"^(?:translate|say|how\s+to\s+say)\s+['\"]?(.*?)['\"]?\s+(?:to|in)\s+({_LANGUAGE_ALTERNATION})$",
    re.IGNORECASE,
)

# youtu.be/ID, /v/ID, /u/x/ID, /embed/ID, watch?v=ID, &v=ID
_VIDEO_URL = re.compile(r"^.*(youtu.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")


def _contains_any(text: str, needles) -> bool:
    return any(needle in text for needle in needles)


def is_video_search_intent(text: str) -> bool:
    """Request to search for videos ("find trailers for Dune", "Dune trailer")."""
    p = normalize_text(text)
    if p.startswith(VIDEO_SEARCH_QUESTION_PREFIXES):
        return False

    if _contains_any(p, VIDEO_SEARCH_VERBS) and _contains_any(p, VIDEO_NOUNS):
        return True

    if "youtube" in p and ("search" in p or "find" in p):
        return True

    if any(p.startswith(f"{noun} {linker}") for noun in VIDEO_NOUNS for linker in VIDEO_NOUN_LINKERS):
        return True

    return p.endswith("trailer")


def is_music_generation_intent(text: str) -> bool:
    """Request to compose a piece of music."""
    p = normalize_text(text)
    if p.startswith(MUSIC_QUESTION_PREFIXES):
        return False
    if p.startswith(MUSIC_CREATION_PREFIXES):
        return True
    return _contains_any(p, MUSIC_CREATION_VERBS) and _contains_any(p, MUSIC_NOUNS)


def is_media_playback_intent(text: str) -> bool:
    """Request to play a specific song or video."""
    p = normalize_text(text)

    if p.startswith(PLAYBACK_PREFIXES):
        if p.startswith("create a song"):
            return False
        return not is_video_search_intent(p)

    if _contains_any(p, YOUTUBE_MARKERS):
        return not p.startswith(PLAYBACK_QUESTION_PREFIXES) and not is_video_search_intent(p)

    return False


def detect_translation_intent(text: str) -> Optional[TranslationIntent]:
    """
    Extract the text to translate and the target language.

    Captures keep the user's casing ("Ohayo in Japanese" -> Ohayo / Japanese).
    Returns None when neither form matches.
    """
    stripped = (text or "").strip()

    match = _TEXT_IN_LANGUAGE.match(stripped)
    if match and match.group(1) and match.group(2):
        source = match.group(1)
        if not source.lower().startswith(TRANSLATION_QUESTION_PREFIXES):
            return TranslationIntent(text=source.strip(), language=match.group(2).strip())

    match = _TRANSLATE_COMMAND.match(stripped)
    if match and match.group(1) and match.group(2):
        return TranslationIntent(text=match.group(1).strip(), language=match.group(2).strip())

    return None


def extract_video_id(text: str) -> Optional[str]:
    """11-character video id from a known URL shape, else None.

    Matching is done on the trimmed original text since ids are case sensitive.
    """
    match = _VIDEO_URL.match((text or "").strip())
    if match and len(match.group(2)) == VIDEO_ID_LENGTH:
        return match.group(2)
    return None


def classify_intent(text: str) -> IntentClassification:
    """Run every classifier on the message."""
    return IntentClassification(
        video_search=is_video_search_intent(text),
        music_generation=is_music_generation_intent(text),
        media_playback=is_media_playback_intent(text),
        translation=detect_translation_intent(text),
        video_id=extract_video_id(text),
    )
