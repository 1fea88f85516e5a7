"""
sso_gateway.auth.deps

Session resolution for the gateway middleware and FastAPI handlers.

Responsibilities:
- Turn the session cookie into a `Session` (or None) via the Session Store.
- Expose that as a dependency so handlers receive the session as an argument.
"""

from __future__ import annotations

from fastapi import Depends, Request

from sso_gateway.api.deps import session_store_dep, settings_dep
from sso_gateway.auth.models import Session
from sso_gateway.errors import InternalError, SessionStoreError
from sso_gateway.observability.logging import get_logger
from sso_gateway.sessions.base import SessionStore
from sso_gateway.settings import Settings

log = get_logger(__name__)


async def resolve_session(
    request: Request, *, store: SessionStore, cookie_name: str
) -> Session | None:
    session_id = request.cookies.get(cookie_name)
    if not session_id:
        return None
    try:
        return await store.get(session_id)
    except SessionStoreError as e:
        log.error("session_lookup_failed", error=str(e))
        raise InternalError() from e


async def current_session(
    request: Request,
    store: SessionStore = Depends(session_store_dep),
    settings: Settings = Depends(settings_dep),
) -> Session | None:
    # Absence is not an error here; each handler decides what a missing session means.
    return await resolve_session(request, store=store, cookie_name=settings.session_cookie_name)


async def current_session_for_logout(
    request: Request,
    store: SessionStore = Depends(session_store_dep),
    settings: Settings = Depends(settings_dep),
) -> Session | None:
    # Logout must clear the cookie even when the store cannot be read.
    try:
        return await current_session(request, store=store, settings=settings)
    except InternalError:
        return None
