"""
sso_gateway.auth.passwords

bcrypt password hashing.

Responsibilities:
- Hash new passwords and verify candidates against stored hashes.
- Provide a constant-cost verification for unknown usernames.
"""

from __future__ import annotations

import bcrypt

# bcrypt only looks at the first 72 bytes; longer inputs are refused outright.
MAX_PASSWORD_BYTES = 72


class PasswordHasher:
    def __init__(self, *, rounds: int = 12) -> None:
        self._rounds = rounds
        # Verified against when the username is unknown so both paths cost one bcrypt check.
        self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=rounds))

    def hash(self, password: str) -> str:
        raw = password.encode("utf-8")
        if not raw:
            raise ValueError("password must not be blank")
        if len(raw) > MAX_PASSWORD_BYTES:
            raise ValueError(f"password exceeds {MAX_PASSWORD_BYTES} bytes")
        return bcrypt.hashpw(raw, bcrypt.gensalt(rounds=self._rounds)).decode("ascii")

    def verify(self, password: str, password_hash: str | None) -> bool:
        raw = password.encode("utf-8")
        if password_hash is None:
            bcrypt.checkpw(b"dummy-password", self._dummy_hash)
            return False
        if not raw or len(raw) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(raw, password_hash.encode("ascii"))
        except ValueError:
            # Malformed stored hash.
            return False
