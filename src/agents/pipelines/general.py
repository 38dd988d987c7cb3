"""
Default pipeline

Three sub-modes, picked in this order:
1. multimodal - any file in the session or staged: plain call, reply text only
2. agentic    - Think Longer / Deep Research pinned: perceive/reason/act/learn
3. standard   - JSON reply with optional location, code block and actions
"""

from src.agents.pipelines.actions import validate_actions
from src.agents.pipelines.base import (
    PipelineContext,
    assistant_message,
    generate_structured,
    handler_pipeline,
)
from src.agents.pipelines.persona import build_system_instruction, is_agentic_tool
from src.agents.pipelines.schemas import AgenticReply, GeneralReply
from src.llm.backend import GenerationRequest
from src.models.domain import (
    AgenticWorkflowPayload,
    AssistantReplyPayload,
    Message,
    WorkflowStep,
)
from src.utils.errors import BackendError, StructuredResponseError


def _has_files(ctx: PipelineContext) -> bool:
    return bool(ctx.attachments) or any(m.attachments for m in ctx.session.messages)


@handler_pipeline("multimodal", "I'm sorry, I couldn't process your request. Error: {error}")
async def run_multimodal(ctx: PipelineContext) -> Message:
    response = await ctx.backend.generate(GenerationRequest(history=ctx.history()))
    if not response.text.strip():
        raise BackendError("The model returned an empty response")
    return assistant_message(response.text, suffix="model")


@handler_pipeline(
    "agentic",
    "I'm sorry, I encountered an error trying to process your request with the agentic workflow. Error: {error}",
)
async def run_agentic(ctx: PipelineContext) -> Message:
    instruction = build_system_instruction(ctx.personality, ctx.profile, ctx.pinned_tool, ctx.now, ctx.timezone)
    reply = await generate_structured(ctx.backend, AgenticReply, ctx.history(), instruction)

    payload = AgenticWorkflowPayload(
        perceive=WorkflowStep(content=reply.perceive),
        reason=WorkflowStep(content=reply.reason),
        act=WorkflowStep(content=reply.act),
        learn=WorkflowStep(content=reply.learn),
    )
    return assistant_message(suffix="workflow", payload=payload)


@handler_pipeline("standard", "I'm sorry, I couldn't process your request. Error: {error}")
async def run_standard(ctx: PipelineContext) -> Message:
    instruction = build_system_instruction(ctx.personality, ctx.profile, None, ctx.now, ctx.timezone)
    reply = await generate_structured(ctx.backend, GeneralReply, ctx.history(), instruction)

    actions = validate_actions(reply.actions)
    payload = None
    if reply.location or reply.code_block or actions:
        payload = AssistantReplyPayload(location=reply.location, code=reply.code_block, actions=tuple(actions))

    if not reply.response.strip() and payload is None:
        raise StructuredResponseError("Reply has neither response text nor extras")

    return assistant_message(reply.response or None, suffix="model", language=reply.language, payload=payload)


async def run_default(ctx: PipelineContext) -> Message:
    """Dispatch to the multimodal, agentic or standard sub-mode."""
    if _has_files(ctx):
        return await run_multimodal(ctx)
    if is_agentic_tool(ctx.pinned_tool):
        return await run_agentic(ctx)
    return await run_standard(ctx)
