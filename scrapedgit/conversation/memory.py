"""Guest chat sessions kept in a TTL store between HTTP turns."""

from __future__ import annotations

import asyncio
from functools import lru_cache
from uuid import uuid4

from pydantic import Field

from ..cache import TTLStore
from ..config import settings
from ..schemas import CamelModel
from .contracts import AccumulatedQuery, ConversationTurn

_MAX_STORED_TURNS = 20


class ChatSession(CamelModel):
    """Accumulated query and transcript for one guest session."""

    query: AccumulatedQuery | None = None
    history: list[ConversationTurn] = Field(default_factory=list)

    def record_exchange(self, user_message: str, assistant_message: str) -> None:
        """Append a user/assistant pair, keeping only the latest turns."""

        self.history.append(ConversationTurn(role="user", content=user_message))
        self.history.append(ConversationTurn(role="assistant", content=assistant_message))
        if len(self.history) > _MAX_STORED_TURNS:
            del self.history[: len(self.history) - _MAX_STORED_TURNS]


def new_session_id() -> str:
    """Return a fresh guest session identifier."""

    return f"guest_{uuid4().hex}"


class SessionStore:
    """Async-safe wrapper that copies sessions in and out of a :class:`TTLStore`."""

    def __init__(self, store: TTLStore[ChatSession] | None = None) -> None:
        if store is None:
            store = TTLStore(
                maxsize=settings.session_max_entries,
                default_ttl=float(settings.session_ttl_seconds),
            )
        self._store: TTLStore[ChatSession] = store
        self._lock = asyncio.Lock()

    async def load(self, session_id: str) -> ChatSession | None:
        """Return a deep copy of the stored session, if it has not expired."""

        async with self._lock:
            session = self._store.get(session_id)
            return session.model_copy(deep=True) if session is not None else None

    async def save(self, session_id: str, session: ChatSession) -> None:
        """Persist a copy of ``session`` and restart its time-to-live."""

        async with self._lock:
            self._store.set(session_id, session.model_copy(deep=True))

    async def discard(self, session_id: str) -> None:
        """Forget the session, if any."""

        async with self._lock:
            self._store.delete(session_id)


@lru_cache(maxsize=1)
def get_session_store() -> SessionStore:
    """Return the process-wide guest session store."""

    return SessionStore()


__all__ = ["ChatSession", "SessionStore", "get_session_store", "new_session_id"]
