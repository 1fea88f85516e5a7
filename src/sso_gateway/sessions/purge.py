"""
sso_gateway.sessions.purge

Background removal of expired sessions.

Responsibilities:
- Call `SessionStore.purge_expired` on a fixed interval for the app's lifetime.
- Keep running through store failures; they are logged and retried next tick.
"""

from __future__ import annotations

import asyncio

from sso_gateway.errors import SessionStoreError
from sso_gateway.observability.logging import get_logger
from sso_gateway.sessions.base import SessionStore

log = get_logger(__name__)


async def purge_expired_sessions(store: SessionStore, *, interval_seconds: float) -> None:
    """
    Runs until cancelled (see `api.app` lifespan).
    """

    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = await store.purge_expired()
        except SessionStoreError as e:
            log.warning("session_purge_failed", error=str(e))
            continue
        if removed:
            log.info("sessions_purged", removed=removed)
