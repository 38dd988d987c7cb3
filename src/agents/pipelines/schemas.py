"""
Wire schemas for structured backend replies

Each model is both the declared output schema (via its JSON schema) and the
validator applied to the reply. Unknown fields are ignored; a missing required
field is a parse error.
"""

from typing import List, Optional

from pydantic import Field

from src.models.domain import Action, AgentRole, CamelModel, CompilerInfo, LocationInfo


class GeneralReply(CamelModel):
    response: str = Field(description="The assistant's response to the user.")
    language: str = Field(description="The BCP-47 language code of the response (e.g., 'en-US', 'fr-FR').")
    location: Optional[LocationInfo] = Field(
        default=None,
        description="If the query is about a mappable location, provide its details here. Omit otherwise.",
    )
    code_block: Optional[CompilerInfo] = Field(
        default=None,
        description="If the user's request is to write code, provide the details here. Omit otherwise.",
    )
    actions: List[Action] = Field(
        default_factory=list,
        description="A list of automated tasks the AI can perform. Omit if no actions are possible.",
    )


class AgenticReply(CamelModel):
    perceive: str
    reason: str
    act: str
    learn: str


class TranslationReply(CamelModel):
    translation: str = Field(description="The translated text in the target language.")
    phonetic: str = Field(description="The phonetic spelling of the translation.")
    language_code: str = Field(
        description="The BCP-47 language code for the translation (e.g., 'ja-JP', 'zh-CN')."
    )


class LocationReply(CamelModel):
    response: str = Field(description="A helpful description of the location.")
    language: str = Field(description="BCP-47 language code of the response.")
    location: LocationInfo = Field(description="The precise details of the identified location.")


class PlaybackReply(CamelModel):
    video_id: str = Field(description="The YouTube video ID provided.")
    song_title: str = Field(description="The title of the video found.")
    artist_name: str = Field(description="The main artist or channel of the video found.")


class PlannedTask(CamelModel):
    role: AgentRole
    task: str = Field(description="The specific task for this agent.")


class PlanReply(CamelModel):
    plan: str = Field(description="A high-level plan for the team.")
    tasks: List[PlannedTask] = Field(description="The list of tasks for the agents.")
