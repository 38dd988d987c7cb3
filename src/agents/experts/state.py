"""
Team-of-Experts workflow state
"""

from typing import TypedDict

from src.models.domain import MultiAgentRunState


class ExpertTeamState(TypedDict):
    """State for the Team-of-Experts workflow"""
    run: MultiAgentRunState  # Immutable snapshot published after every step
    next_index: int  # Index of the next task to execute
