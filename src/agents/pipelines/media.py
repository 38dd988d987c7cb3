"""
Video pipelines

- video search: up to five embeddable results for a free-text query
- play by id: title/artist lookup for a video id pulled out of a pasted URL
"""

from typing import List, Optional

from loguru import logger

from src.agents.pipelines.base import (
    DEFAULT_LANGUAGE,
    PipelineContext,
    assistant_message,
    generate_structured_from_prompt,
    handler_pipeline,
)
from src.agents.pipelines.schemas import PlaybackReply
from src.agents.router.classifiers import extract_video_id
from src.models.domain import Message, VideoPlaybackPayload, VideoSearchPayload, VideoSearchResult

MAX_VIDEO_RESULTS = 5

VIDEO_SEARCH_PROMPT = """A user is searching for a video to play in an app based on the query: "{query}".
Your goal is to find up to {limit} relevant, playable videos from YouTube.
The most critical rule is that the videos **must be embeddable**. If a video has embedding disabled, it will show an error to the user. Your primary goal is to avoid this error.
To achieve this:
1. **Prioritize Official Sources that Allow Embedding:** Favor official artist channels, movie studio channels, and trusted media outlets that have a history of allowing embedding.
2. **Be Cautious with Major Labels:** Some major music labels restrict embedding on their newest or most popular videos. Older videos or official lyric videos are often safer bets than official music videos.
3. **No Private or Restricted Content:** Do not include videos that are private, deleted, age restricted, or blocked in some regions.
4. **Validate Output:** For each video, provide its official title, a brief (1-2 sentence) description, its full YouTube URL, and its 11-character video ID.

Return a JSON array of the video objects. If you cannot find any embeddable videos, return an empty array."""

PLAY_BY_ID_PROMPT = """The user has provided a YouTube video ID: "{video_id}".
Your task is to find the official song title and artist name for this video ID.
If it's not a song, use the video title and the channel name as the 'artist'.
Respond with a JSON object containing the YouTube Video ID, the video's title, and the artist/channel name."""


@handler_pipeline(
    "video_search",
    "I'm sorry, I couldn't complete the video search. There might be an issue with the search service. "
    "Please try again later.\n\n**Error:** {error}",
)
async def run_video_search(ctx: PipelineContext) -> Message:
    prompt = VIDEO_SEARCH_PROMPT.format(query=ctx.text, limit=MAX_VIDEO_RESULTS)
    results = await generate_structured_from_prompt(ctx.backend, List[VideoSearchResult], prompt)

    if len(results) > MAX_VIDEO_RESULTS:
        logger.debug(f"Trimming {len(results)} video results to {MAX_VIDEO_RESULTS}")
        results = results[:MAX_VIDEO_RESULTS]

    logger.info(f"Video search for '{ctx.text}' returned {len(results)} result(s)")
    return assistant_message(
        suffix="yt-search",
        language=DEFAULT_LANGUAGE,
        payload=VideoSearchPayload(query=ctx.text, results=tuple(results)),
    )


def _video_id_for(ctx: PipelineContext) -> Optional[str]:
    if ctx.classification is not None and ctx.classification.video_id:
        return ctx.classification.video_id
    return extract_video_id(ctx.text)


@handler_pipeline("play_by_id", "I'm sorry, I couldn't get the details for that YouTube link. Error: {error}")
async def run_play_by_id(ctx: PipelineContext) -> Message:
    video_id = _video_id_for(ctx)
    if not video_id:
        raise ValueError("No video id found in the message")

    reply = await generate_structured_from_prompt(
        ctx.backend, PlaybackReply, PLAY_BY_ID_PROMPT.format(video_id=video_id)
    )
    if reply.video_id != video_id:
        logger.debug(f"Backend echoed video id {reply.video_id!r}, keeping {video_id!r} from the URL")

    return assistant_message(
        "Now playing the video you linked. Click the card to play.",
        suffix="youtube",
        language=DEFAULT_LANGUAGE,
        payload=VideoPlaybackPayload(video_id=video_id, title=reply.song_title, artist=reply.artist_name),
    )
