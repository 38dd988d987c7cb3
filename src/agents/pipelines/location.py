"""
Location pipeline - identify one real-world place and describe it
"""

from src.agents.pipelines.base import PipelineContext, assistant_message, generate_structured, handler_pipeline
from src.agents.pipelines.schemas import LocationReply
from src.models.domain import LocationPayload, Message

LOCATION_INSTRUCTION = """You are a location-finding specialist. The user's request is a query to find a location.
Your primary task is to identify this specific real-world location from the user's message.
You MUST generate a helpful text description about that location.
You MUST also provide the precise location details (name, address, latitude, and longitude) in the JSON response.
Failure to provide the 'location' object is a failure of your primary function."""


@handler_pipeline(
    "location",
    "I'm sorry, I couldn't find that location. The mapping service might be unavailable or the location "
    "could not be determined. Please try being more specific.\n\n**Error:** {error}",
)
async def run_location(ctx: PipelineContext) -> Message:
    reply = await generate_structured(
        ctx.backend,
        LocationReply,
        ctx.history(include_staged=False),
        LOCATION_INSTRUCTION,
    )
    return assistant_message(
        reply.response,
        suffix="map",
        language=reply.language,
        payload=LocationPayload(location=reply.location),
    )
