"""
Tests for validation of backend-proposed actions
"""

import pytest

from src.agents.pipelines.actions import is_valid_email, validate_action, validate_actions
from src.models.domain import Action, ActionParameters, ActionType
from src.utils.errors import ActionValidationError


def email(to="alex@example.com", subject="Quarterly report", **extra):
    return Action(
        type=ActionType.SEND_EMAIL,
        description="Send the report",
        parameters=ActionParameters(to=to, subject=subject, **extra),
    )


def meeting(start="2025-08-08T11:00:00-07:00", end="2025-08-08T11:30:00-07:00", attendees=()):
    return Action(
        type=ActionType.SCHEDULE_MEETING,
        description="Sync",
        parameters=ActionParameters(start_time=start, end_time=end, attendees=list(attendees)),
    )


@pytest.mark.parametrize("value,expected", [
    ("alex@example.com", True),
    ("a.b@sub.example.org", True),
    ("alex@example", False),
    ("alex example@x.com", False),
    ("", False),
    (None, False),
])
def test_is_valid_email(value, expected):
    assert is_valid_email(value) is expected


class TestSendEmail:

    def test_valid(self):
        action = email()
        assert validate_action(action) is action

    def test_invalid_recipient(self):
        with pytest.raises(ActionValidationError):
            validate_action(email(to="not-an-address"))

    def test_blank_subject(self):
        with pytest.raises(ActionValidationError):
            validate_action(email(subject="   "))


class TestScheduleMeeting:

    def test_valid(self):
        validate_action(meeting(attendees=["a@example.com", "b@example.com"]))

    def test_utc_designator(self):
        action = meeting(start="2025-08-08T11:00:00Z", end="2025-08-08T11:30:00Z")
        assert validate_actions([action]) == [action]

    def test_utc_designator_compares_with_offsets(self):
        with pytest.raises(ActionValidationError, match="after"):
            validate_action(meeting(start="2025-08-08T18:00:00Z", end="2025-08-08T10:30:00-07:00"))

    def test_end_before_start(self):
        with pytest.raises(ActionValidationError, match="after"):
            validate_action(meeting(end="2025-08-08T10:00:00-07:00"))

    def test_equal_times_rejected(self):
        with pytest.raises(ActionValidationError):
            validate_action(meeting(end="2025-08-08T11:00:00-07:00"))

    def test_non_iso_time(self):
        with pytest.raises(ActionValidationError, match="ISO"):
            validate_action(meeting(start="tomorrow at 11"))

    def test_missing_time(self):
        with pytest.raises(ActionValidationError, match="Missing"):
            validate_action(meeting(end=None))

    def test_mixed_naive_and_aware(self):
        with pytest.raises(ActionValidationError):
            validate_action(meeting(start="2025-08-08T11:00:00"))

    def test_invalid_attendee(self):
        with pytest.raises(ActionValidationError, match="bogus"):
            validate_action(meeting(attendees=["a@example.com", "bogus"]))


def test_fetch_report_has_no_requirements():
    action = Action(type=ActionType.FETCH_REPORT, description="Pull the sales report")
    assert validate_action(action) is action


def test_validate_actions_drops_only_invalid_ones():
    good_email = email()
    good_meeting = meeting()
    result = validate_actions([good_email, email(to="nope"), good_meeting, meeting(end="2020-01-01T00:00:00-07:00")])
    assert result == [good_email, good_meeting]
