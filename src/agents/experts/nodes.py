"""
Team-of-Experts workflow nodes

plan -> execute_task (once per task, strictly in order) -> synthesize.
Any failure marks the run as failed and records the error as the final
response; completed tasks keep their outputs.
"""

from dataclasses import dataclass
from typing import Union

from loguru import logger

from src.agents.experts.prompts import (
    COLLABORATION_ERROR,
    agent_system_instruction,
    agent_user_turn,
    planner_prompt,
)
from src.agents.experts.state import ExpertTeamState
from src.agents.pipelines.base import generate_structured_from_prompt
from src.agents.pipelines.schemas import PlanReply
from src.llm.backend import GenerationBackend, GenerationRequest
from src.models.domain import AgentRole, AgentTask, MultiAgentRunState, RunStatus
from src.utils.errors import PlanningError


@dataclass
class ExpertTeamContext:
    """Dependencies passed to workflow nodes"""
    backend: GenerationBackend
    max_tasks: int


def failed_run_state(run: MultiAgentRunState, error: Union[BaseException, str]) -> MultiAgentRunState:
    """Terminal copy of `run` carrying the collaboration error as its final response."""
    reason = error if isinstance(error, str) else (str(error) or type(error).__name__)
    return run.model_copy(update={
        "status": RunStatus.FAILED,
        "final_response": COLLABORATION_ERROR.format(error=reason),
    })


async def plan_node(state: ExpertTeamState, ctx: ExpertTeamContext) -> dict:
    """Ask the planner for a strategy and an ordered task list."""
    run = state["run"]
    logger.info(f"Planning team run for: '{run.original_query}'")

    try:
        reply = await generate_structured_from_prompt(ctx.backend, PlanReply, planner_prompt(run.original_query))
        if not reply.tasks:
            raise PlanningError("The planner returned no tasks")
        if len(reply.tasks) > ctx.max_tasks:
            raise PlanningError(f"The planner returned {len(reply.tasks)} tasks (limit is {ctx.max_tasks})")
    except Exception as e:
        logger.error(f"Planning failed: {e}")
        return {"run": failed_run_state(run, e)}

    tasks = tuple(AgentTask(role=t.role, instruction=t.task) for t in reply.tasks)
    if tasks[-1].role != AgentRole.SYNTHESIZER:
        logger.warning(f"⚠️ Plan does not end with a Synthesizer (last role: {tasks[-1].role.value})")

    logger.info(f"Plan ready: {len(tasks)} task(s) -> {[t.role.value for t in tasks]}")
    run = run.model_copy(update={"plan": reply.plan, "tasks": tasks, "status": RunStatus.EXECUTING})
    return {"run": run, "next_index": 0}


async def execute_task_node(state: ExpertTeamState, ctx: ExpertTeamContext) -> dict:
    """Run one task with every earlier output chained in as context."""
    run = state["run"]
    index = state["next_index"]
    task = run.tasks[index]
    completed = run.tasks[:index]

    logger.info(f"Executing task {index + 1}/{len(run.tasks)} ({task.role.value}): {task.instruction}")
    request = GenerationRequest.single_prompt(
        agent_user_turn(run.original_query),
        system_instruction=agent_system_instruction(task, completed),
    )

    try:
        response = await ctx.backend.generate(request)
    except Exception as e:
        logger.error(f"Task {index + 1} ({task.role.value}) failed: {e}")
        return {"run": failed_run_state(run, e)}

    run = run.with_task(index, task.model_copy(update={"output": response.text, "is_complete": True}))
    next_index = index + 1
    if next_index >= len(run.tasks):
        run = run.model_copy(update={"status": RunStatus.SYNTHESIZING})
    return {"run": run, "next_index": next_index}


async def synthesize_node(state: ExpertTeamState, ctx: ExpertTeamContext) -> dict:
    """Final response = first Synthesizer output, else the last task's output."""
    run = state["run"]
    synthesized = next((t for t in run.tasks if t.role == AgentRole.SYNTHESIZER), None)
    if synthesized is None:
        logger.warning("⚠️ No Synthesizer task in plan, using the last task's output")
        synthesized = run.tasks[-1]

    logger.info("✅ Team run complete")
    return {"run": run.model_copy(update={"final_response": synthesized.output, "status": RunStatus.DONE})}
