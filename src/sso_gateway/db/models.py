"""
sso_gateway.db.models

Persistence schema for the gateway.

Responsibilities:
- UserRecord: directory entry with bcrypt password hash and role.
- LoginSessionRecord: a server-side session row (database session backend only).
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from sso_gateway.db.base import Base


def utcnow() -> datetime:
    # Naive UTC timestamps; SQLite does not keep tzinfo.
    return datetime.now(UTC).replace(tzinfo=None)


class UserRecord(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)
    email: Mapped[str] = mapped_column(String(256), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    role: Mapped[str] = mapped_column(String(64), nullable=False, default="USER")
    enabled: Mapped[bool] = mapped_column(nullable=False, default=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    sessions: Mapped[list[LoginSessionRecord]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )


class LoginSessionRecord(Base):
    __tablename__ = "login_sessions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    user: Mapped[UserRecord] = relationship(back_populates="sessions", lazy="joined")

    __table_args__ = (Index("ix_login_sessions_created", "created_at"),)
