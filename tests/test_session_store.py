"""
Tests for the in-memory session store
"""

import pytest

from src.memory.session_store import SessionStore, window_messages
from src.models.domain import Message, MessageRole, MultiAgentPayload, MultiAgentRunState, Personality, RunStatus
from src.utils.errors import SessionNotFoundError


def user(text):
    return Message(role=MessageRole.USER, content=text)


def team_message(status=RunStatus.PLANNING, message_id="msg-1-multiagent"):
    state = MultiAgentRunState(original_query="q", status=status)
    return Message(id=message_id, role=MessageRole.ASSISTANT, payload=MultiAgentPayload(state=state))


class TestSessions:

    def test_create_defaults(self, store):
        session = store.create_session()
        assert session.title == "New Chat"
        assert session.personality == Personality.DEFAULT
        assert session.messages == ()
        assert store.get(session.id) == session

    def test_unknown_session(self, store):
        with pytest.raises(SessionNotFoundError):
            store.get("missing")
        with pytest.raises(SessionNotFoundError):
            store.append_message("missing", user("hi"))

    def test_delete(self, store, session):
        store.delete_session(session.id)
        assert store.list_sessions() == []
        with pytest.raises(SessionNotFoundError):
            store.delete_session(session.id)

    def test_title_and_personality(self, store, session):
        store.set_title(session.id, "Trip")
        updated = store.set_personality(session.id, Personality.COMEDIAN)
        assert updated.title == "Trip"
        assert updated.personality == Personality.COMEDIAN


class TestMessages:

    def test_append_keeps_order(self, store, session):
        store.append_message(session.id, user("one"))
        store.append_message(session.id, user("two"))
        store.append_message(session.id, user("three"))
        assert [m.content for m in store.history(session.id)] == ["one", "two", "three"]

    def test_old_session_values_are_not_mutated(self, store, session):
        before = store.get(session.id)
        store.append_message(session.id, user("one"))
        assert before.messages == ()
        assert len(store.get(session.id).messages) == 1


class TestPlaceholders:

    def test_update_in_place(self, store, session):
        store.append_message(session.id, user("plan it"))
        placeholder = team_message()
        store.open_placeholder(session.id, placeholder)
        store.append_message(session.id, user("meanwhile"))

        done = team_message(status=RunStatus.DONE)
        store.update_placeholder(session.id, done)

        history = store.history(session.id)
        assert len(history) == 3
        assert history[1].payload.state.status == RunStatus.DONE
        assert history[2].content == "meanwhile"

    def test_released_placeholder_is_frozen(self, store, session):
        placeholder = team_message()
        store.open_placeholder(session.id, placeholder)
        assert store.is_placeholder_open(session.id, placeholder.id)

        store.release_placeholder(session.id, placeholder.id)
        assert not store.is_placeholder_open(session.id, placeholder.id)
        with pytest.raises(ValueError):
            store.update_placeholder(session.id, team_message(status=RunStatus.DONE))

    def test_deleted_session_placeholder(self, store, session):
        placeholder = team_message()
        store.open_placeholder(session.id, placeholder)
        store.delete_session(session.id)

        assert not store.is_placeholder_open(session.id, placeholder.id)
        with pytest.raises(SessionNotFoundError):
            store.update_placeholder(session.id, placeholder)

    def test_ordinary_messages_cannot_be_updated(self, store, session):
        message = user("hi")
        store.append_message(session.id, message)
        with pytest.raises(ValueError):
            store.update_placeholder(session.id, message.model_copy(update={"content": "edited"}))


class TestWindow:

    def test_short_history_is_kept(self):
        messages = [user("a"), user("b")]
        assert window_messages(messages, 5) == messages

    def test_keeps_most_recent(self):
        messages = [user(str(n)) for n in range(10)]
        assert [m.content for m in window_messages(messages, 3)] == ["7", "8", "9"]

    def test_empty(self):
        assert window_messages([], 3) == []
