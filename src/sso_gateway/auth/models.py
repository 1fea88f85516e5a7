"""
sso_gateway.auth.models

Auth domain models.

Responsibilities:
- `Principal`: the read-only user view owned by the User Directory.
- `Session`: a server-side login bound to a principal.
- Result shapes returned by the Authenticator.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated identity record.
    """

    id: int
    username: str
    email: str
    role: str
    enabled: bool = True

    def template_values(self) -> dict[str, Any]:
        # Values available to trust-header templates (see routing.rules).
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
        }


@dataclass(frozen=True, slots=True)
class Session:
    session_id: str
    principal: Principal
    created_at: datetime

    @property
    def ref(self) -> str:
        # Short, non-replayable reference for logs.
        return self.session_id[:8]


@dataclass(frozen=True, slots=True)
class SessionSummary:
    session_id: str
    username: str
    email: str
    role: str


@dataclass(frozen=True, slots=True)
class PrincipalView:
    id: int
    username: str
    email: str
    role: str
    enabled: bool

    @classmethod
    def of(cls, principal: Principal) -> PrincipalView:
        return cls(
            id=principal.id,
            username=principal.username,
            email=principal.email,
            role=principal.role,
            enabled=principal.enabled,
        )
