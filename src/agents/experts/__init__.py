"""
Team of Experts - multi-agent orchestrator
"""

from src.agents.experts.nodes import failed_run_state
from src.agents.experts.prompts import COLLABORATION_ERROR, PLANNING_PLACEHOLDER
from src.agents.experts.team import ExpertTeam, initial_run_state

__all__ = [
    "ExpertTeam",
    "failed_run_state",
    "initial_run_state",
    "COLLABORATION_ERROR",
    "PLANNING_PLACEHOLDER",
]
