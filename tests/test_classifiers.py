"""
Tests for the text normalizer and intent classifiers
"""

import pytest

from src.agents.router import (
    Intent,
    TranslationIntent,
    classify_intent,
    detect_translation_intent,
    extract_video_id,
    is_media_playback_intent,
    is_music_generation_intent,
    is_video_search_intent,
    normalize_text,
)


def test_normalize_text_trims_and_lowercases():
    assert normalize_text("  Play SOMETHING \n") == "play something"


class TestVideoSearch:

    @pytest.mark.parametrize("text", [
        "find videos of cats",
        "Show me clips from the match",
        "search youtube for lofi",
        "videos about black holes",
        "Dune trailer",
    ])
    def test_accepts_search_requests(self, text):
        assert is_video_search_intent(text)

    @pytest.mark.parametrize("text", [
        "how to find videos of cats",
        "What is a trailer",
        "tell me a joke",
    ])
    def test_rejects_questions_and_unrelated_text(self, text):
        assert not is_video_search_intent(text)

    @pytest.mark.parametrize("text", [
        "how to find videos of cats",
        "what is the best trailer",
        "How do I search for video clips",
        "What is youtube search",
        "find videos of cats",
        "Dune trailer",
    ])
    def test_question_prefixed_text_is_never_a_search(self, text):
        if normalize_text(text).startswith(("how", "what is")):
            assert not is_video_search_intent(text)
        else:
            assert is_video_search_intent(text)


class TestMusicGeneration:

    @pytest.mark.parametrize("text", [
        "create a song about summer rain",
        "A song about my dog",
        "compose a melody for my game",
        "please generate some chill music",
    ])
    def test_accepts_creation_requests(self, text):
        assert is_music_generation_intent(text)

    @pytest.mark.parametrize("text", [
        "how do you make a song",
        "what is the best song of 1999",
        "write a poem about autumn",
    ])
    def test_rejects_questions_and_non_music(self, text):
        assert not is_music_generation_intent(text)


class TestMediaPlayback:

    def test_accepts_playback_verbs(self):
        assert is_media_playback_intent("play Despacito")
        assert is_media_playback_intent("listen to some jazz")

    def test_accepts_youtube_mentions(self):
        assert is_media_playback_intent("Bohemian Rhapsody youtube")

    def test_playback_yields_to_video_search(self):
        """'play the trailer' is a video search, not playback."""
        assert is_video_search_intent("play the trailer")
        assert not is_media_playback_intent("play the trailer")

    def test_rejects_questions_about_youtube(self):
        assert not is_media_playback_intent("what is youtube")
        assert not is_media_playback_intent("can you explain youtube premium")


class TestTranslation:

    def test_text_in_language_keeps_original_case(self):
        assert detect_translation_intent("Ohayo in Japanese") == TranslationIntent(text="Ohayo", language="Japanese")

    def test_question_guard(self):
        assert detect_translation_intent("What is the population in Japan") is None
        assert detect_translation_intent("what is hello in japanese") is None

    def test_translate_command(self):
        result = detect_translation_intent("translate 'good morning' to French")
        assert result == TranslationIntent(text="good morning", language="French")

    def test_how_to_say_command(self):
        result = detect_translation_intent("how to say thank you in korean")
        assert result == TranslationIntent(text="thank you", language="korean")

    def test_unsupported_language(self):
        assert detect_translation_intent("hello in klingon") is None


class TestDirectMediaUrl:

    @pytest.mark.parametrize("url", [
        "https://youtu.be/dQw4w9WgXcQ",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
        "https://www.youtube.com/watch?v=dQw4w9WgXcQ&t=42s",
        "https://www.youtube.com/embed/dQw4w9WgXcQ",
        "check this out https://youtu.be/dQw4w9WgXcQ",
    ])
    def test_extracts_eleven_character_id(self, url):
        assert extract_video_id(url) == "dQw4w9WgXcQ"

    def test_rejects_short_id(self):
        assert extract_video_id("https://youtu.be/short") is None

    def test_rejects_plain_text(self):
        assert extract_video_id("play something nice") is None


class TestClassifyIntent:

    def test_runs_every_classifier(self):
        result = classify_intent("play Bohemian Rhapsody on youtube")
        assert result.media_playback
        assert not result.video_search
        assert result.translation is None
        assert result.video_id is None
        assert result.primary == Intent.MEDIA_PLAYBACK

    def test_translation_primary(self):
        result = classify_intent("Ohayo in Japanese")
        assert result.primary == Intent.TRANSLATION
        assert result.translation.language == "Japanese"

    def test_direct_url_primary(self):
        assert classify_intent("https://youtu.be/dQw4w9WgXcQ").primary == Intent.DIRECT_MEDIA_URL

    def test_no_intent(self):
        assert classify_intent("tell me about photosynthesis").primary == Intent.NONE

    @pytest.mark.parametrize("text", [
        "play Bohemian Rhapsody on youtube",
        "Ohayo in Japanese",
        "create a song about summer",
        "https://youtu.be/dQw4w9WgXcQ",
    ])
    def test_is_deterministic(self, text):
        assert classify_intent(text) == classify_intent(text)
