"""
Domain models for the assistant core.

Pydantic models for conversation messages, sessions, structured result
payloads and the multi-agent run state. Payload field names are camelCase on
the wire (the shape the generation backend is asked to return) and snake_case
in Python.
"""

import enum
import itertools
import time
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class MessageRole(str, enum.Enum):
    """Author of a conversation turn."""
    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class Tool(str, enum.Enum):
    """Tools a user can pin manually."""
    STUDY = "Study and learn"
    MUSIC = "Create music"
    THINK_LONGER = "Think longer"
    DEEP_RESEARCH = "Deep research"
    WEB_SEARCH = "Web search"
    MAP = "Find on map"
    TEAM_OF_EXPERTS = "Team of Experts"
    AUTOMATED_TASKS = "Automated Tasks"


class Personality(str, enum.Enum):
    """Tone presets a session can carry."""
    DEFAULT = "Default"
    FORMAL_ADVISOR = "Formal Advisor"
    FRIENDLY_MENTOR = "Friendly Mentor"
    CODING_WIZARD = "Coding Wizard"
    COMEDIAN = "Comedian"


class AgentRole(str, enum.Enum):
    """Closed set of roles in the Team of Experts."""
    PLANNER = "Planner"
    RESEARCHER = "Researcher"
    CODER = "Coder"
    DESIGNER = "Designer"
    SYNTHESIZER = "Synthesizer"


class RunStatus(str, enum.Enum):
    """Lifecycle of a multi-agent run."""
    PLANNING = "planning"
    EXECUTING = "executing"
    SYNTHESIZING = "synthesizing"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RunStatus.DONE, RunStatus.FAILED)


class CamelModel(BaseModel):
    """Base for wire-facing models: camelCase aliases, extra fields ignored."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )


_message_seq = itertools.count()


def new_message_id(suffix: str = "") -> str:
    """Creation-ordered message id (millisecond clock + process-wide sequence)."""
    base = f"msg-{int(time.time() * 1000)}-{next(_message_seq):06d}"
    return f"{base}-{suffix}" if suffix else base


def new_session_id() -> str:
    return f"session-{int(time.time() * 1000)}-{next(_message_seq):06d}"


# ============================================================================
# Attachments
# ============================================================================

class Attachment(CamelModel):
    """Binary file reference staged with a user turn (payload is a data URL)."""
    name: str
    mime_type: str
    size: int = 0
    data_url: str

    @property
    def base64_data(self) -> str:
        """Base64 body of the data URL."""
        _, _, data = self.data_url.partition(",")
        return data or self.data_url


# ============================================================================
# Structured payload building blocks
# ============================================================================

class LocationInfo(CamelModel):
    name: str
    address: str
    latitude: float
    longitude: float


class CompilerInfo(CamelModel):
    """Code produced for the user together with a simulated run."""
    language: str
    code: str
    explanation: str
    simulated_output: str


class ActionType(str, enum.Enum):
    SEND_EMAIL = "send_email"
    SCHEDULE_MEETING = "schedule_meeting"
    FETCH_REPORT = "fetch_report"


class ActionParameters(BaseModel):
    """Parameters of a proposed action (snake_case on the wire too)."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    to: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None
    summary: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    attendees: List[str] = Field(default_factory=list)


class Action(CamelModel):
    type: ActionType
    description: str
    parameters: ActionParameters = Field(default_factory=ActionParameters)


class YouTubeLink(CamelModel):
    title: str
    url: str


class MusicMood(str, enum.Enum):
    UPBEAT = "upbeat"
    SOMBER = "somber"
    ETHEREAL = "ethereal"
    DRIVING = "driving"
    MELLOW = "mellow"


class MusicConcept(CamelModel):
    title: str
    artist: str
    description: str
    tempo: int = Field(description="The tempo in beats per minute.")
    mood: MusicMood
    youtube_links: List[YouTubeLink]


class VideoSearchResult(CamelModel):
    title: str
    description: str = Field(description="A brief, 1-2 sentence description of the video.")
    url: str = Field(description="The full YouTube URL.")
    video_id: str = Field(description="The 11-character YouTube video ID.")


class GroundingSource(CamelModel):
    uri: str
    title: Optional[str] = None


class KeyConcept(CamelModel):
    concept: str
    explanation: str


class StudyGuide(CamelModel):
    topic: str
    summary: str
    key_concepts: List[KeyConcept]
    practice_questions: List[str]
    further_reading: List[str]


class WorkflowStep(CamelModel):
    active: bool = False
    done: bool = True
    content: str = ""


class AgentTask(CamelModel):
    """One role-scoped unit of work in a multi-agent run."""
    role: AgentRole
    instruction: str
    output: str = ""
    is_complete: bool = False


class MultiAgentRunState(CamelModel):
    """Immutable snapshot of a Team-of-Experts run."""
    original_query: str
    plan: str = ""
    tasks: Tuple[AgentTask, ...] = ()
    final_response: str = ""
    status: RunStatus = RunStatus.PLANNING

    def completed_tasks(self) -> List[AgentTask]:
        return [task for task in self.tasks if task.is_complete]

    def with_task(self, index: int, task: AgentTask) -> "MultiAgentRunState":
        tasks = list(self.tasks)
        tasks[index] = task
        return self.model_copy(update={"tasks": tuple(tasks)})


# ============================================================================
# Structured payloads (tagged union, at most one per message)
# ============================================================================

class AssistantReplyPayload(CamelModel):
    """Extras returned by the default pipeline alongside its text."""
    kind: Literal["assistant_reply"] = "assistant_reply"
    location: Optional[LocationInfo] = None
    code: Optional[CompilerInfo] = None
    actions: Tuple[Action, ...] = ()


class TranslationPayload(CamelModel):
    kind: Literal["translation"] = "translation"
    source_text: str
    target_language: str
    translation: str
    phonetic: str
    language_code: str


class LocationPayload(CamelModel):
    kind: Literal["location"] = "location"
    location: LocationInfo


class MusicConceptPayload(CamelModel):
    kind: Literal["music_concept"] = "music_concept"
    music: MusicConcept


class VideoSearchPayload(CamelModel):
    kind: Literal["video_search"] = "video_search"
    query: str
    results: Tuple[VideoSearchResult, ...] = ()


class VideoPlaybackPayload(CamelModel):
    kind: Literal["video_playback"] = "video_playback"
    video_id: str
    title: str
    artist: str


class WebSearchPayload(CamelModel):
    kind: Literal["web_search"] = "web_search"
    sources: Tuple[GroundingSource, ...] = ()


class AgenticWorkflowPayload(CamelModel):
    """Perceive / reason / act / learn trace of the agentic sub-mode."""
    kind: Literal["agentic_workflow"] = "agentic_workflow"
    perceive: WorkflowStep
    reason: WorkflowStep
    act: WorkflowStep
    learn: WorkflowStep


class StudyGuidePayload(CamelModel):
    kind: Literal["study_guide"] = "study_guide"
    guide: StudyGuide


class MultiAgentPayload(CamelModel):
    kind: Literal["multi_agent"] = "multi_agent"
    state: MultiAgentRunState


StructuredPayload = Annotated[
    Union[
        AssistantReplyPayload,
        TranslationPayload,
        LocationPayload,
        MusicConceptPayload,
        VideoSearchPayload,
        VideoPlaybackPayload,
        WebSearchPayload,
        AgenticWorkflowPayload,
        StudyGuidePayload,
        MultiAgentPayload,
    ],
    Field(discriminator="kind"),
]


# ============================================================================
# Messages and sessions
# ============================================================================

class Message(CamelModel):
    """One turn in a conversation."""
    id: str = Field(default_factory=new_message_id)
    role: MessageRole
    content: Optional[str] = None
    language: Optional[str] = None
    attachments: Tuple[Attachment, ...] = ()
    payload: Optional[StructuredPayload] = None

    @model_validator(mode="after")
    def _not_empty(self) -> "Message":
        if not (self.content and self.content.strip()) and not self.attachments and self.payload is None:
            raise ValueError("A message needs text, attachments or a structured payload")
        return self

    @property
    def has_text(self) -> bool:
        return bool(self.content and self.content.strip())


class ChatSession(CamelModel):
    """Ordered message history plus the session's tone configuration."""
    id: str = Field(default_factory=new_session_id)
    title: str = "New Chat"
    messages: Tuple[Message, ...] = ()
    personality: Personality = Personality.DEFAULT


# ============================================================================
# User profile (feeds the system instruction)
# ============================================================================

class UserGoal(CamelModel):
    description: str
    completed: bool = False


class UserProfile(CamelModel):
    name: Optional[str] = None
    nickname: str = ""
    profession: str = ""
    traits: str = ""
    interests: str = ""
    long_term_memory: str = ""
    goals: Tuple[UserGoal, ...] = ()

    def active_goals(self) -> List[UserGoal]:
        return [goal for goal in self.goals if not goal.completed]


