from __future__ import annotations

from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sso_gateway.sessions.base import SessionStore
from sso_gateway.sessions.database import DatabaseSessionStore
from sso_gateway.sessions.memory import InMemorySessionStore
from sso_gateway.settings import Settings


def build_session_store(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
) -> SessionStore:
    ttl = timedelta(seconds=settings.session_ttl_seconds)
    if settings.session_backend == "database":
        return DatabaseSessionStore(session_factory=session_factory, ttl=ttl)
    return InMemorySessionStore(ttl=ttl)
