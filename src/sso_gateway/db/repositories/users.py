from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from sso_gateway.db.models import UserRecord


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_username(self, username: str) -> UserRecord | None:
        stmt = select(UserRecord).where(UserRecord.username == username)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def exists(self, username: str) -> bool:
        stmt = select(func.count()).select_from(UserRecord).where(UserRecord.username == username)
        return (await self._session.execute(stmt)).scalar_one() > 0

    async def create(
        self,
        *,
        username: str,
        email: str,
        password_hash: str,
        role: str,
        enabled: bool = True,
    ) -> UserRecord:
        user = UserRecord(
            username=username,
            email=email,
            password_hash=password_hash,
            role=role,
            enabled=enabled,
        )
        self._session.add(user)
        await self._session.flush()
        return user
