"""
Application constants

Keyword tables used by the intent classifiers. Matching is done on
normalized (trimmed, lower-cased) text.
"""

from typing import Tuple

# ============================================================================
# Video search
# ============================================================================

VIDEO_SEARCH_QUESTION_PREFIXES: Tuple[str, ...] = ("how", "what is")

VIDEO_SEARCH_VERBS: Tuple[str, ...] = ("search for", "find", "show me", "search")

VIDEO_NOUNS: Tuple[str, ...] = (
    "video", "videos", "clip", "clips", "trailer",
    "movie trailer", "youtube videos", "youtube clips",
)

VIDEO_NOUN_LINKERS: Tuple[str, ...] = ("of", "about", "for")


# ============================================================================
# Music generation
# ============================================================================

MUSIC_QUESTION_PREFIXES: Tuple[str, ...] = ("how do you", "what is the", "can you explain")

MUSIC_CREATION_PREFIXES: Tuple[str, ...] = (
    "create a song", "make a song", "generate a song", "compose a piece",
    "write a song", "a song about", "music that sounds like", "a melody for",
    "a track for", "an instrumental of",
)

MUSIC_CREATION_VERBS: Tuple[str, ...] = (
    "create", "generate", "make", "design", "produce", "compose", "write",
)

MUSIC_NOUNS: Tuple[str, ...] = (
    "music", "song", "track", "melody", "instrumental", "beat", "jingle", "tune",
)


# ============================================================================
# Media playback
# ============================================================================

PLAYBACK_PREFIXES: Tuple[str, ...] = ("play", "listen to", "put on", "stream", "find me the song")

YOUTUBE_MARKERS: Tuple[str, ...] = ("on youtube", "youtube")

PLAYBACK_QUESTION_PREFIXES: Tuple[str, ...] = ("how", "what", "can you")


# ============================================================================
# Translation
# ============================================================================

SUPPORTED_LANGUAGES: Tuple[str, ...] = (
    "japanese", "chinese", "french", "spanish", "german", "korean", "italian",
    "portuguese", "russian", "arabic", "hindi", "dutch", "swedish", "turkish", "polish",
)

TRANSLATION_QUESTION_PREFIXES: Tuple[str, ...] = (
    "what", "who", "where", "when", "why", "how", "which", "is there",
)


# ============================================================================
# Direct media URLs
# ============================================================================

VIDEO_ID_LENGTH = 11
