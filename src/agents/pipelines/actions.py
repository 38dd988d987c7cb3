"""
Client-side checks for backend-proposed actions

An action that fails validation is dropped before it reaches the user, so no
broken "send" or "schedule" affordance is ever exposed.
"""

import re
from datetime import datetime
from typing import Iterable, List, Optional

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from src.models.domain import Action, ActionType
from src.utils.errors import ActionValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_DATETIME = TypeAdapter(datetime)


def is_valid_email(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(EMAIL_PATTERN.match(value))


def _parse_iso(value: Optional[str], field_name: str) -> datetime:
    if not value:
        raise ActionValidationError(f"Missing {field_name}")
    try:
        return _DATETIME.validate_python(value.strip())
    except ValidationError:
        raise ActionValidationError(f"{field_name} is not ISO 8601: {value!r}") from None


def validate_action(action: Action) -> Action:
    """
    Raise ActionValidationError when an action cannot be executed as proposed.

    - send_email: valid `to` address and a non-empty subject
    - schedule_meeting: ISO 8601 start/end, end after start, valid attendees
    - fetch_report: no parameter requirements
    """
    params = action.parameters

    if action.type == ActionType.SEND_EMAIL:
        if not is_valid_email(params.to):
            raise ActionValidationError(f"Invalid recipient address: {params.to!r}")
        if not (params.subject and params.subject.strip()):
            raise ActionValidationError("Email subject is required")

    elif action.type == ActionType.SCHEDULE_MEETING:
        start = _parse_iso(params.start_time, "start_time")
        end = _parse_iso(params.end_time, "end_time")
        try:
            ordered = end > start
        except TypeError:
            raise ActionValidationError("start_time and end_time mix naive and offset-aware values") from None
        if not ordered:
            raise ActionValidationError("end_time must be after start_time")

    invalid = [a for a in params.attendees if not is_valid_email(a)]
    if invalid:
        raise ActionValidationError(f"Invalid attendee address(es): {', '.join(invalid)}")

    return action


def validate_actions(actions: Iterable[Action]) -> List[Action]:
    """Keep only the actions that pass validation (drops are logged)."""
    valid = []
    for action in actions:
        try:
            valid.append(validate_action(action))
        except ActionValidationError as e:
            logger.warning(f"⚠️ Dropping {action.type.value} action: {e}")
    return valid
