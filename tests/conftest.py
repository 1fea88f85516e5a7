"""
tests.conftest

Shared fixtures: temporary SQLite databases and asset roots, and a factory that
boots the gateway app (lifespan included) behind an httpx ASGI client.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import create_async_engine

from sso_gateway.api.app import create_app
from sso_gateway.auth.passwords import PasswordHasher
from sso_gateway.db.init_db import init_db
from sso_gateway.db.session import create_sessionmaker
from sso_gateway.directory.database import DatabaseUserDirectory
from sso_gateway.settings import Settings

SHELL_HTML = "<!doctype html><html><body><app-root></app-root></body></html>"


@pytest.fixture
def static_root(tmp_path: Path) -> Path:
    root = tmp_path / "static"
    (root / "assets").mkdir(parents=True)
    (root / "index.html").write_text(SHELL_HTML)
    (root / "assets" / "app.js").write_text("console.log('app');")
    (root / "favicon.ico").write_bytes(b"\x00\x00\x01\x00")
    return root


@pytest.fixture
def settings(tmp_path: Path, static_root: Path) -> Settings:
    return Settings(
        env="test",
        log_level="WARNING",
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'gateway.db'}",
        static_root=static_root,
        bcrypt_rounds=4,
    )


@pytest.fixture
def gateway(settings: Settings):
    """
    Usage: `async with gateway(routes=[...], proxy_transport=...) as (app, client):`
    Keyword arguments other than `proxy_transport` override Settings fields.
    """

    @asynccontextmanager
    async def _open(
        proxy_transport: httpx.AsyncBaseTransport | None = None, **overrides
    ) -> AsyncIterator[tuple[FastAPI, httpx.AsyncClient]]:
        app = create_app(
            settings=settings.model_copy(update=overrides),
            proxy_transport=proxy_transport,
        )
        # httpx ASGITransport does not manage lifespan; drive it explicitly.
        async with app.router.lifespan_context(app):
            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                yield app, client

    return _open


@pytest_asyncio.fixture
async def sessionmaker(tmp_path: Path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'directory.db'}")
    await init_db(engine)
    try:
        yield create_sessionmaker(engine)
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def directory(sessionmaker) -> DatabaseUserDirectory:
    d = DatabaseUserDirectory(session_factory=sessionmaker, hasher=PasswordHasher(rounds=4))
    await d.create_user("admin", "password", "admin@example.com", role="ADMIN")
    await d.create_user("user", "password", "user@example.com")
    return d
