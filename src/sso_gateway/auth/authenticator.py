"""
sso_gateway.auth.authenticator

Login orchestration over the User Directory and the Session Store.

Responsibilities:
- Validate credentials and open a session on success.
- Close sessions (idempotently) and answer "who is this session" / "is it valid".
- Keep credential failures indistinguishable to callers; log the real cause.
"""

from __future__ import annotations

from sso_gateway.auth.models import PrincipalView, Session, SessionSummary
from sso_gateway.directory.base import UserDirectory
from sso_gateway.errors import (
    AccountDisabled,
    InternalError,
    InvalidCredentials,
    SessionStoreError,
    Unauthenticated,
    UserDirectoryError,
)
from sso_gateway.observability.logging import get_logger
from sso_gateway.sessions.base import SessionStore

log = get_logger(__name__)


class Authenticator:
    def __init__(self, *, directory: UserDirectory, sessions: SessionStore) -> None:
        self._directory = directory
        self._sessions = sessions

    async def login(self, username: str, password: str) -> SessionSummary:
        try:
            principal = await self._directory.find_by_username(username)
            # Always verify, even for unknown users, so timing does not reveal existence.
            valid = await self._directory.verify_credentials(username, password)
        except UserDirectoryError as e:
            log.error("login_directory_failure", username=username, error=str(e))
            raise InternalError() from e

        if principal is None or not valid:
            cause = "unknown_user" if principal is None else "bad_password"
            log.info("login_failed", username=username, cause=cause)
            raise InvalidCredentials()
        if not principal.enabled:
            log.info("login_failed", username=username, cause="account_disabled")
            raise AccountDisabled()

        try:
            session = await self._sessions.create(principal)
        except SessionStoreError as e:
            log.error("login_session_store_failure", username=username, error=str(e))
            raise InternalError() from e

        log.info("login_succeeded", username=username, session_ref=session.ref)
        return SessionSummary(
            session_id=session.session_id,
            username=principal.username,
            email=principal.email,
            role=principal.role,
        )

    async def logout(self, session: Session | None) -> None:
        if session is None:
            return
        try:
            await self._sessions.invalidate(session.session_id)
        except SessionStoreError as e:
            # Logout always succeeds for the caller; the row expires on its own.
            log.error("logout_session_store_failure", session_ref=session.ref, error=str(e))
            return
        log.info("logout", username=session.principal.username, session_ref=session.ref)

    async def current_user(self, session: Session | None) -> PrincipalView:
        if session is None:
            raise Unauthenticated()
        try:
            # Re-read so a directory-side change to `enabled` is visible immediately.
            principal = await self._directory.find_by_username(session.principal.username)
        except UserDirectoryError as e:
            log.error("current_user_directory_failure", session_ref=session.ref, error=str(e))
            raise InternalError() from e
        if principal is None:
            raise Unauthenticated()
        return PrincipalView.of(principal)

    async def check_session(self, session: Session | None) -> bool:
        if session is None:
            return False
        try:
            return await self._sessions.get(session.session_id) is not None
        except SessionStoreError as e:
            log.error("check_session_store_failure", session_ref=session.ref, error=str(e))
            raise InternalError() from e
