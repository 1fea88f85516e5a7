"""
tests.test_authenticator

Authenticator behavior over the SQL directory and the in-memory session store.
"""

from __future__ import annotations

from datetime import timedelta

import pytest

from sso_gateway.auth.authenticator import Authenticator
from sso_gateway.auth.models import PrincipalView
from sso_gateway.errors import (
    AccountDisabled,
    InternalError,
    InvalidCredentials,
    SessionStoreError,
    Unauthenticated,
    UserAlreadyExists,
    UserDirectoryError,
)
from sso_gateway.sessions.memory import InMemorySessionStore


@pytest.fixture
def store() -> InMemorySessionStore:
    return InMemorySessionStore(ttl=timedelta(minutes=30))


@pytest.fixture
def authenticator(directory, store) -> Authenticator:
    return Authenticator(directory=directory, sessions=store)


@pytest.mark.asyncio
async def test_login_round_trip(authenticator: Authenticator, store, directory) -> None:
    summary = await authenticator.login("admin", "password")
    assert summary.username == "admin"
    assert summary.email == "admin@example.com"
    assert summary.role == "ADMIN"

    session = await store.get(summary.session_id)
    assert session is not None
    assert await authenticator.check_session(session)

    admin = await directory.find_by_username("admin")
    assert await authenticator.current_user(session) == PrincipalView.of(admin)


@pytest.mark.asyncio
async def test_each_login_opens_a_new_session(authenticator: Authenticator, store) -> None:
    first = await authenticator.login("user", "password")
    second = await authenticator.login("user", "password")
    assert first.session_id != second.session_id
    assert len(store) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("username", "password"),
    [("admin", "wrong"), ("nobody", "password"), ("admin", ""), ("admin", "p" * 100)],
)
async def test_bad_credentials(authenticator: Authenticator, store, username, password) -> None:
    with pytest.raises(InvalidCredentials) as exc:
        await authenticator.login(username, password)
    assert type(exc.value) is InvalidCredentials
    assert len(store) == 0


@pytest.mark.asyncio
async def test_disabled_account(authenticator: Authenticator, directory, store) -> None:
    await directory.set_enabled("user", False)
    with pytest.raises(AccountDisabled) as exc:
        await authenticator.login("user", "password")
    # Same public shape as any other credential failure.
    assert exc.value.status_code == InvalidCredentials.status_code
    assert exc.value.reason == InvalidCredentials.reason
    assert exc.value.message == InvalidCredentials().message
    assert len(store) == 0


@pytest.mark.asyncio
async def test_disabled_account_with_wrong_password_is_plain_invalid(
    authenticator: Authenticator, directory
) -> None:
    await directory.set_enabled("user", False)
    with pytest.raises(InvalidCredentials) as exc:
        await authenticator.login("user", "nope")
    assert type(exc.value) is InvalidCredentials


@pytest.mark.asyncio
async def test_logout_is_idempotent(authenticator: Authenticator, store) -> None:
    summary = await authenticator.login("admin", "password")
    session = await store.get(summary.session_id)

    await authenticator.logout(session)
    await authenticator.logout(session)
    await authenticator.logout(None)

    assert not await authenticator.check_session(session)


@pytest.mark.asyncio
async def test_current_user_requires_session(authenticator: Authenticator) -> None:
    with pytest.raises(Unauthenticated):
        await authenticator.current_user(None)
    assert not await authenticator.check_session(None)


@pytest.mark.asyncio
async def test_current_user_sees_enabled_flag_changes(
    authenticator: Authenticator, directory, store
) -> None:
    summary = await authenticator.login("user", "password")
    session = await store.get(summary.session_id)

    await directory.set_enabled("user", False)
    view = await authenticator.current_user(session)
    assert view.enabled is False


@pytest.mark.asyncio
async def test_create_duplicate_user(directory) -> None:
    with pytest.raises(UserAlreadyExists):
        await directory.create_user("admin", "other", "x@example.com")


class _BrokenDirectory:
    async def find_by_username(self, username):
        raise UserDirectoryError("database is down")

    async def verify_credentials(self, username, password):
        raise UserDirectoryError("database is down")


class _BrokenStore:
    async def create(self, principal):
        raise SessionStoreError("store is down")

    async def get(self, session_id):
        raise SessionStoreError("store is down")

    async def invalidate(self, session_id):
        raise SessionStoreError("store is down")


@pytest.mark.asyncio
async def test_directory_failure_is_internal_error(store) -> None:
    authenticator = Authenticator(directory=_BrokenDirectory(), sessions=store)
    with pytest.raises(InternalError):
        await authenticator.login("admin", "password")


@pytest.mark.asyncio
async def test_session_store_failure_is_internal_error(directory, store) -> None:
    summary = await Authenticator(directory=directory, sessions=store).login("admin", "password")
    session = await store.get(summary.session_id)

    broken = Authenticator(directory=directory, sessions=_BrokenStore())
    with pytest.raises(InternalError):
        await broken.login("admin", "password")
    with pytest.raises(InternalError):
        await broken.check_session(session)


@pytest.mark.asyncio
async def test_logout_survives_session_store_failure(directory, store) -> None:
    summary = await Authenticator(directory=directory, sessions=store).login("admin", "password")
    session = await store.get(summary.session_id)

    # Logout never fails for the caller.
    await Authenticator(directory=directory, sessions=_BrokenStore()).logout(session)
