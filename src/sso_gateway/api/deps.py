"""
sso_gateway.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions and gateway components.
- Encapsulate app.state access patterns (populated by the app lifespan).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sso_gateway.auth.authenticator import Authenticator
from sso_gateway.sessions.base import SessionStore
from sso_gateway.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The app factory receives an explicit Settings instance; tests rely on that.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


def session_store_dep(request: Request) -> SessionStore:
    return request.app.state.session_store  # type: ignore[attr-defined]


def authenticator_dep(request: Request) -> Authenticator:
    return request.app.state.authenticator  # type: ignore[attr-defined]
