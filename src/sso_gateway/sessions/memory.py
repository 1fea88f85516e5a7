"""
sso_gateway.sessions.memory

In-process Session Store (default backend).

Responsibilities:
- Keep sessions in a dict guarded by an asyncio lock.
- Expire sessions a fixed lifetime after creation.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from sso_gateway.auth.models import Principal, Session
from sso_gateway.sessions.base import new_session_id


def _now() -> datetime:
    return datetime.now(tz=UTC)


class InMemorySessionStore:
    def __init__(
        self,
        *,
        ttl: timedelta,
        clock: Callable[[], datetime] = _now,
    ) -> None:
        self._ttl = ttl
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._lock = asyncio.Lock()

    def _expired(self, session: Session, now: datetime) -> bool:
        return now - session.created_at >= self._ttl

    async def create(self, principal: Principal) -> Session:
        session = Session(
            session_id=new_session_id(),
            principal=principal,
            created_at=self._clock(),
        )
        async with self._lock:
            self._sessions[session.session_id] = session
        return session

    async def get(self, session_id: str) -> Session | None:
        async with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            if self._expired(session, self._clock()):
                del self._sessions[session_id]
                return None
            return session

    async def invalidate(self, session_id: str) -> None:
        async with self._lock:
            self._sessions.pop(session_id, None)

    async def purge_expired(self) -> int:
        now = self._clock()
        async with self._lock:
            stale = [sid for sid, s in self._sessions.items() if self._expired(s, now)]
            for sid in stale:
                del self._sessions[sid]
        return len(stale)

    def __len__(self) -> int:
        return len(self._sessions)


# --- Module Notes -----------------------------------------------------------
# Sessions live only as long as the process; use the database backend when the
# gateway runs as more than one worker.
