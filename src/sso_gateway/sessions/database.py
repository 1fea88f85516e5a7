"""
sso_gateway.sessions.database

SQL-backed Session Store.

Responsibilities:
- Persist sessions in `login_sessions` so several gateway workers share them.
- Rebuild the principal from the current `users` row on every lookup.
- Translate SQLAlchemy failures into `SessionStoreError`.
"""

from __future__ import annotations

from datetime import UTC, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sso_gateway.auth.models import Principal, Session
from sso_gateway.db.models import utcnow
from sso_gateway.db.repositories.login_sessions import LoginSessionRepo
from sso_gateway.directory.database import to_principal
from sso_gateway.errors import SessionStoreError
from sso_gateway.sessions.base import new_session_id


class DatabaseSessionStore:
    def __init__(
        self,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        ttl: timedelta,
    ) -> None:
        self._session_factory = session_factory
        self._ttl = ttl

    async def create(self, principal: Principal) -> Session:
        session_id = new_session_id()
        created_at = utcnow()
        try:
            async with self._session_factory() as db:
                await LoginSessionRepo(db).add(
                    session_id=session_id, user_id=principal.id, created_at=created_at
                )
                await db.commit()
        except SQLAlchemyError as e:
            raise SessionStoreError("could not create session") from e
        return Session(
            session_id=session_id,
            principal=principal,
            created_at=created_at.replace(tzinfo=UTC),
        )

    async def get(self, session_id: str) -> Session | None:
        try:
            async with self._session_factory() as db:
                repo = LoginSessionRepo(db)
                row = await repo.get(session_id)
                if row is None:
                    return None
                if utcnow() - row.created_at >= self._ttl:
                    await repo.delete(session_id)
                    await db.commit()
                    return None
                return Session(
                    session_id=row.id,
                    principal=to_principal(row.user),
                    created_at=row.created_at.replace(tzinfo=UTC),
                )
        except SQLAlchemyError as e:
            raise SessionStoreError("session lookup failed") from e

    async def invalidate(self, session_id: str) -> None:
        try:
            async with self._session_factory() as db:
                await LoginSessionRepo(db).delete(session_id)
                await db.commit()
        except SQLAlchemyError as e:
            raise SessionStoreError("could not invalidate session") from e

    async def purge_expired(self) -> int:
        try:
            async with self._session_factory() as db:
                removed = await LoginSessionRepo(db).delete_created_before(utcnow() - self._ttl)
                await db.commit()
        except SQLAlchemyError as e:
            raise SessionStoreError("could not purge sessions") from e
        return removed
