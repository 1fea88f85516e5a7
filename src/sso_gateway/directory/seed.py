"""
sso_gateway.directory.seed

Demo account bootstrap for dev/test environments.
"""

from __future__ import annotations

from sso_gateway.directory.base import UserDirectory
from sso_gateway.observability.logging import get_logger

log = get_logger(__name__)

# (username, password, email, role)
DEMO_USERS: tuple[tuple[str, str, str, str], ...] = (
    ("admin", "password", "admin@example.com", "ADMIN"),
    ("user", "password", "user@example.com", "USER"),
)


async def seed_demo_users(directory: UserDirectory) -> list[str]:
    """
    Create the demo accounts that are missing; returns the usernames created.
    """

    created: list[str] = []
    for username, password, email, role in DEMO_USERS:
        if await directory.user_exists(username):
            continue
        await directory.create_user(username, password, email, role=role)
        created.append(username)
        log.info("demo_user_created", username=username, role=role)
    return created
