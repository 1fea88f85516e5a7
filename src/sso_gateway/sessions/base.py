"""
sso_gateway.sessions.base

Session Store interface and helpers shared by implementations.
"""

from __future__ import annotations

import secrets
from typing import Protocol

from sso_gateway.auth.models import Principal, Session


def new_session_id() -> str:
    # 256 bits of entropy, cookie-safe alphabet.
    return secrets.token_urlsafe(32)


class SessionStore(Protocol):
    """
    Atomic key-value service keyed by opaque session id.

    Implementations synchronize internally and raise `SessionStoreError` on
    storage failures. `get` returns None for unknown or expired sessions.
    """

    async def create(self, principal: Principal) -> Session: ...

    async def get(self, session_id: str) -> Session | None: ...

    async def invalidate(self, session_id: str) -> None: ...

    async def purge_expired(self) -> int: ...
