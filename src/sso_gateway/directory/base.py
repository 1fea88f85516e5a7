"""
sso_gateway.directory.base

User Directory interface.

Responsibilities:
- Describe the operations the gateway needs from a credential store.
"""

from __future__ import annotations

from typing import Protocol

from sso_gateway.auth.models import Principal


class UserDirectory(Protocol):
    """
    Implementations raise `UserDirectoryError` for storage failures.
    """

    async def find_by_username(self, username: str) -> Principal | None: ...

    async def verify_credentials(self, username: str, password: str) -> bool: ...

    async def user_exists(self, username: str) -> bool: ...

    async def create_user(
        self,
        username: str,
        password: str,
        email: str,
        *,
        role: str = "USER",
        enabled: bool = True,
    ) -> Principal: ...

    async def set_enabled(self, username: str, enabled: bool) -> None: ...
