"""Storage for in-flight organizer conversations."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from photo_events.domain.conversations import ConversationSession


class ConversationStore(Protocol):
    """Keyed storage for conversation sessions."""

    def get(self, user_id: str) -> ConversationSession | None:
        """Return the session for a user, if present."""

    def save(self, session: ConversationSession) -> None:
        """Store a session, replacing any previous one for the same user."""

    def delete(self, user_id: str) -> None:
        """Discard the session for a user."""


@dataclass
class InMemoryConversationStore(ConversationStore):
    """In-process session map with optional idle expiry."""

    ttl_seconds: int | None = None
    _sessions: dict[str, ConversationSession] = field(
        default_factory=dict, repr=False
    )

    def get(self, user_id: str) -> ConversationSession | None:
        """Return the session unless it has been idle past the TTL."""
        session = self._sessions.get(user_id)
        if session is None:
            return None
        if self.ttl_seconds is not None:
            expires_at = session.updated_at + timedelta(seconds=self.ttl_seconds)
            if datetime.now(tz=UTC) >= expires_at:
                self._sessions.pop(user_id, None)
                return None
        return session

    def save(self, session: ConversationSession) -> None:
        """Store the session keyed by its user id."""
        self._sessions[session.user_id] = session

    def delete(self, user_id: str) -> None:
        """Drop the session if present."""
        self._sessions.pop(user_id, None)
