"""
sso_gateway.directory.database

SQL-backed User Directory.

Responsibilities:
- Map `users` rows to `Principal` values.
- Verify plaintext credentials against bcrypt hashes off the event loop.
- Translate SQLAlchemy failures into `UserDirectoryError`.
"""

from __future__ import annotations

import asyncio

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sso_gateway.auth.models import Principal
from sso_gateway.auth.passwords import PasswordHasher
from sso_gateway.db.models import UserRecord
from sso_gateway.db.repositories.users import UserRepo
from sso_gateway.errors import UserAlreadyExists, UserDirectoryError


def to_principal(user: UserRecord) -> Principal:
    return Principal(
        id=user.id,
        username=user.username,
        email=user.email,
        role=user.role,
        enabled=user.enabled,
    )


class DatabaseUserDirectory:
    def __init__(
        self,
        *,
        session_factory: async_sessionmaker[AsyncSession],
        hasher: PasswordHasher,
    ) -> None:
        self._session_factory = session_factory
        self._hasher = hasher

    async def find_by_username(self, username: str) -> Principal | None:
        try:
            async with self._session_factory() as session:
                user = await UserRepo(session).get_by_username(username)
        except SQLAlchemyError as e:
            raise UserDirectoryError(f"lookup failed for {username!r}") from e
        return to_principal(user) if user is not None else None

    async def verify_credentials(self, username: str, password: str) -> bool:
        try:
            async with self._session_factory() as session:
                user = await UserRepo(session).get_by_username(username)
        except SQLAlchemyError as e:
            raise UserDirectoryError(f"lookup failed for {username!r}") from e

        # bcrypt is CPU-bound; keep it off the event loop so other requests proceed.
        stored = user.password_hash if user is not None else None
        return await asyncio.to_thread(self._hasher.verify, password, stored)

    async def user_exists(self, username: str) -> bool:
        try:
            async with self._session_factory() as session:
                return await UserRepo(session).exists(username)
        except SQLAlchemyError as e:
            raise UserDirectoryError(f"lookup failed for {username!r}") from e

    async def create_user(
        self,
        username: str,
        password: str,
        email: str,
        *,
        role: str = "USER",
        enabled: bool = True,
    ) -> Principal:
        password_hash = await asyncio.to_thread(self._hasher.hash, password)
        try:
            async with self._session_factory() as session:
                user = await UserRepo(session).create(
                    username=username,
                    email=email,
                    password_hash=password_hash,
                    role=role,
                    enabled=enabled,
                )
                await session.commit()
        except IntegrityError as e:
            raise UserAlreadyExists(f"user {username!r} already exists") from e
        except SQLAlchemyError as e:
            raise UserDirectoryError(f"could not create {username!r}") from e
        return to_principal(user)

    async def set_enabled(self, username: str, enabled: bool) -> None:
        try:
            async with self._session_factory() as session:
                user = await UserRepo(session).get_by_username(username)
                if user is None:
                    raise UserDirectoryError(f"unknown user {username!r}")
                user.enabled = enabled
                await session.commit()
        except SQLAlchemyError as e:
            raise UserDirectoryError(f"could not update {username!r}") from e
