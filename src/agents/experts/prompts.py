"""
Prompts for the planner and the role agents
"""

from typing import Sequence

from src.models.domain import AgentRole, AgentTask

PLANNING_PLACEHOLDER = "The team is assessing the query and creating a plan..."

COLLABORATION_ERROR = "An error occurred during the collaboration: {error}"


def planner_prompt(query: str) -> str:
    roles = ", ".join(role.value for role in AgentRole)
    return f"""User query: "{query}".
You are a project manager. Your job is to break down the user's query into a sequence of tasks for a team of expert AI agents.
The available agent roles are: {roles}.
Provide a high-level plan and then a list of tasks with the most appropriate agent for each. The final agent must be a {AgentRole.SYNTHESIZER.value}."""


def render_prior_outputs(completed: Sequence[AgentTask]) -> str:
    """Every earlier task's role and output, oldest first."""
    return "\n".join(f"- {task.role.value}'s output: {task.output}" for task in completed)


def agent_system_instruction(task: AgentTask, completed: Sequence[AgentTask]) -> str:
    context = render_prior_outputs(completed) or "(no previous agents yet)"
    return f"""You are the {task.role.value}, an expert in your field.
Your current task is: "{task.instruction}".
Here are the results from previous agents you can use as context:
{context}

Focus ONLY on your assigned task and provide a concise, expert response."""


def agent_user_turn(query: str) -> str:
    return f'Original user query for context: "{query}"\nExecute your task.'
