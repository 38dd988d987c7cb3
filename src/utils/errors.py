"""
Custom error classes for the assistant core
"""

from typing import Optional


class AgentError(Exception):
    """Base exception for agent errors"""
    pass


class ConfigurationError(AgentError):
    """No generation backend is configured"""
    pass


class BackendError(AgentError):
    """Transport or quota failure while calling the generation backend"""
    pass


class StructuredResponseError(AgentError):
    """Backend text could not be parsed into the declared schema"""

    def __init__(self, message: str, raw_text: Optional[str] = None):
        super().__init__(message)
        self.raw_text = raw_text


class PlanningError(AgentError):
    """Planner returned a plan the team cannot execute"""
    pass


class ActionValidationError(AgentError):
    """A proposed action has invalid parameters"""
    pass


class SessionNotFoundError(AgentError):
    """Unknown session id"""
    pass
