"""
Memory layer - Session history store
"""

from src.memory.session_store import SessionStore, get_session_store, window_messages

__all__ = [
    "SessionStore",
    "get_session_store",
    "window_messages",
]
