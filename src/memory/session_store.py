"""
Session history store

Holds every conversation and its ordered message list. Sessions are immutable
pydantic models; each mutation swaps in a new session value (whole-value
replacement) so readers never observe a half-applied change.

The only message that may be rewritten after it is appended is the
placeholder owned by an in-flight multi-agent run; it is registered with
`open_placeholder` and released once the run is terminal.
"""

from typing import Dict, List, Optional, Sequence, Set, Tuple

from loguru import logger

from src.config.settings import settings
from src.models.domain import ChatSession, Message, Personality
from src.utils.errors import SessionNotFoundError


class SessionStore:
    """In-memory key-value store of chat sessions"""

    def __init__(self):
        self._sessions: Dict[str, ChatSession] = {}
        self._placeholders: Dict[str, Set[str]] = {}

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    def create_session(
        self,
        personality: Personality = Personality.DEFAULT,
        title: Optional[str] = None,
    ) -> ChatSession:
        session = ChatSession(
            title=title or settings.default_session_title,
            personality=personality,
        )
        self._sessions[session.id] = session
        logger.info(f"Created session {session.id} ({personality.value})")
        return session

    def get(self, session_id: str) -> ChatSession:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(f"Session not found: {session_id}") from None

    def list_sessions(self) -> List[ChatSession]:
        return list(self._sessions.values())

    def delete_session(self, session_id: str) -> None:
        self.get(session_id)
        del self._sessions[session_id]
        self._placeholders.pop(session_id, None)
        logger.info(f"Deleted session {session_id}")

    def set_title(self, session_id: str, title: str) -> ChatSession:
        return self._replace(self.get(session_id).model_copy(update={"title": title}))

    def set_personality(self, session_id: str, personality: Personality) -> ChatSession:
        return self._replace(self.get(session_id).model_copy(update={"personality": personality}))

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def append_message(self, session_id: str, message: Message) -> ChatSession:
        session = self.get(session_id)
        updated = session.model_copy(update={"messages": session.messages + (message,)})
        return self._replace(updated)

    def history(self, session_id: str) -> Tuple[Message, ...]:
        return self.get(session_id).messages

    def open_placeholder(self, session_id: str, message: Message) -> ChatSession:
        """Append a message that may be updated in place until released."""
        session = self.append_message(session_id, message)
        self._placeholders.setdefault(session_id, set()).add(message.id)
        return session

    def update_placeholder(self, session_id: str, message: Message) -> ChatSession:
        """Swap in a new version of a registered placeholder (matched by id)."""
        session = self.get(session_id)
        if message.id not in self._placeholders.get(session_id, set()):
            raise ValueError(f"Message {message.id} is not an open placeholder of session {session_id}")

        messages = tuple(message if m.id == message.id else m for m in session.messages)
        return self._replace(session.model_copy(update={"messages": messages}))

    def release_placeholder(self, session_id: str, message_id: str) -> None:
        self._placeholders.get(session_id, set()).discard(message_id)

    def is_placeholder_open(self, session_id: str, message_id: str) -> bool:
        return message_id in self._placeholders.get(session_id, set())

    def _replace(self, session: ChatSession) -> ChatSession:
        self._sessions[session.id] = session
        return session


def window_messages(messages: Sequence[Message], max_messages: Optional[int] = None) -> List[Message]:
    """
    Most recent messages that fit the backend context window.

    Args:
        messages: Full session history
        max_messages: Window size (defaults to settings.max_conversation_messages)

    Returns:
        The last N messages (all of them when the history is shorter)
    """
    if not messages:
        return []
    limit = max_messages if max_messages is not None else settings.max_conversation_messages
    if limit <= 0 or len(messages) <= limit:
        return list(messages)
    return list(messages[-limit:])


# Global instance (singleton pattern)
_session_store: Optional[SessionStore] = None


def get_session_store() -> SessionStore:
    """Get global session store instance (singleton)"""
    global _session_store
    if _session_store is None:
        _session_store = SessionStore()
    return _session_store
