"""
Team of Experts - LangGraph multi-agent workflow

Workflow: START → plan → execute_task (loops per task) → synthesize → END
A failed plan or task routes straight to END with status "failed".
"""

from contextlib import aclosing
from typing import AsyncIterator, Optional

from langgraph.graph import END, StateGraph
from loguru import logger

from src.agents.experts.nodes import (
    ExpertTeamContext,
    execute_task_node,
    failed_run_state,
    plan_node,
    synthesize_node,
)
from src.agents.experts.prompts import PLANNING_PLACEHOLDER
from src.agents.experts.state import ExpertTeamState
from src.config.settings import settings
from src.llm.backend import GenerationBackend
from src.models.domain import MultiAgentRunState, RunStatus


def _route_after_plan(state: ExpertTeamState) -> str:
    if state["run"].status.is_terminal:
        return END
    return "execute_task"


def _route_after_task(state: ExpertTeamState) -> str:
    run = state["run"]
    if run.status.is_terminal:
        return END
    if state["next_index"] < len(run.tasks):
        return "execute_task"
    return "synthesize"


def initial_run_state(query: str) -> MultiAgentRunState:
    return MultiAgentRunState(original_query=query, plan=PLANNING_PLACEHOLDER, status=RunStatus.PLANNING)


class ExpertTeam:
    """
    Plans a task list, runs the role agents one at a time with chained
    context, and picks the synthesized answer.
    """

    def __init__(self, backend: GenerationBackend, max_tasks: Optional[int] = None):
        self.ctx = ExpertTeamContext(
            backend=backend,
            max_tasks=max_tasks if max_tasks is not None else settings.experts_max_tasks,
        )
        self.workflow = self._build_workflow()
        logger.info(f"Initialized ExpertTeam (max tasks: {self.ctx.max_tasks})")

    def _build_workflow(self):
        """Build the LangGraph workflow."""
        ctx = self.ctx
        workflow = StateGraph(ExpertTeamState)

        async def plan(state: ExpertTeamState) -> dict:
            return await plan_node(state, ctx)

        async def execute_task(state: ExpertTeamState) -> dict:
            return await execute_task_node(state, ctx)

        async def synthesize(state: ExpertTeamState) -> dict:
            return await synthesize_node(state, ctx)

        workflow.add_node("plan", plan)
        workflow.add_node("execute_task", execute_task)
        workflow.add_node("synthesize", synthesize)

        workflow.set_entry_point("plan")
        workflow.add_conditional_edges(
            "plan",
            _route_after_plan,
            {"execute_task": "execute_task", END: END},
        )
        workflow.add_conditional_edges(
            "execute_task",
            _route_after_task,
            {"execute_task": "execute_task", "synthesize": "synthesize", END: END},
        )
        workflow.add_edge("synthesize", END)

        return workflow.compile()

    def _config(self) -> dict:
        # plan + one step per task + synthesize, with headroom
        return {"recursion_limit": self.ctx.max_tasks + 5}

    async def stream(self, query: str) -> AsyncIterator[MultiAgentRunState]:
        """
        Yield an immutable snapshot after every workflow step.

        The first snapshot is the planning placeholder; the last one is
        terminal (done or failed). Consecutive duplicates are suppressed.
        """
        logger.info(f"\n{'='*80}\nTEAM OF EXPERTS QUERY: {query}\n{'='*80}")
        initial: ExpertTeamState = {"run": initial_run_state(query), "next_index": 0}

        last: Optional[MultiAgentRunState] = None
        try:
            steps = self.workflow.astream(initial, config=self._config(), stream_mode="values")
            async with aclosing(steps):
                async for values in steps:
                    run = values["run"]
                    if run != last:
                        last = run
                        yield run
        except Exception as e:
            logger.exception("Team workflow error")
            yield failed_run_state(last or initial["run"], e)

    async def run(self, query: str) -> MultiAgentRunState:
        """Run to completion and return the terminal snapshot."""
        final = initial_run_state(query)
        async for snapshot in self.stream(query):
            final = snapshot
        return final
