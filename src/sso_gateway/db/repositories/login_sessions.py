"""
sso_gateway.db.repositories.login_sessions

Repository for `LoginSessionRecord` rows.

Responsibilities:
- Insert, fetch (with the owning user), and delete session rows.
- Bulk-delete rows created before a cutoff.
"""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from sso_gateway.db.models import LoginSessionRecord


class LoginSessionRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, *, session_id: str, user_id: int, created_at: datetime) -> LoginSessionRecord:
        row = LoginSessionRecord(id=session_id, user_id=user_id, created_at=created_at)
        self._session.add(row)
        await self._session.flush()
        return row

    async def get(self, session_id: str) -> LoginSessionRecord | None:
        # `user` is loaded eagerly (lazy="joined") so the principal is current.
        return await self._session.get(LoginSessionRecord, session_id)

    async def delete(self, session_id: str) -> None:
        await self._session.execute(
            delete(LoginSessionRecord).where(LoginSessionRecord.id == session_id)
        )

    async def delete_created_before(self, cutoff: datetime) -> int:
        result = await self._session.execute(
            delete(LoginSessionRecord).where(LoginSessionRecord.created_at < cutoff)
        )
        return result.rowcount or 0
