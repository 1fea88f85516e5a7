"""
sso_gateway.api.app

FastAPI app factory for the SSO gateway.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Build the Route Table and classifier from settings (fails fast on bad rules).
- Initialize and dispose shared infrastructure (DB engine, session store, proxy client).
- Run the expired-session purge task for the lifetime of the app.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress
from http.cookiejar import CookieJar, DefaultCookiePolicy

import httpx
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from sso_gateway import __version__
from sso_gateway.api.errors import register_exception_handlers
from sso_gateway.api.routers.auth import router as auth_router
from sso_gateway.api.routers.health import router as health_router
from sso_gateway.auth.authenticator import Authenticator
from sso_gateway.auth.passwords import PasswordHasher
from sso_gateway.db.init_db import init_db
from sso_gateway.db.session import create_engine, create_sessionmaker
from sso_gateway.directory.database import DatabaseUserDirectory
from sso_gateway.directory.seed import seed_demo_users
from sso_gateway.observability.logging import configure_logging, get_logger
from sso_gateway.observability.middleware import RequestContextMiddleware
from sso_gateway.proxy.forwarder import ProxyForwarder
from sso_gateway.routing.classifier import AssetResolver, RouteClassifier
from sso_gateway.routing.middleware import GatewayMiddleware
from sso_gateway.routing.rules import RouteTable
from sso_gateway.sessions.factory import build_session_store
from sso_gateway.sessions.purge import purge_expired_sessions
from sso_gateway.settings import Settings

log = get_logger(__name__)


def _no_cookie_jar() -> CookieJar:
    # The proxy client is shared by all callers; it must never remember backend cookies.
    return CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))


def create_app(
    *,
    settings: Settings,
    proxy_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    routes = RouteTable(settings.routes, api_prefix=settings.api_prefix)
    classifier = RouteClassifier(
        routes=routes,
        assets=AssetResolver(settings.static_root, index_document=settings.index_document),
        api_prefix=settings.api_prefix,
        operational_prefixes=settings.operational_prefixes,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env, routes=[rule.name for rule in routes])
        engine = create_engine(settings)
        sessionmaker = create_sessionmaker(engine)
        # create_all is a no-op for existing tables.
        await init_db(engine)

        directory = DatabaseUserDirectory(
            session_factory=sessionmaker,
            hasher=PasswordHasher(rounds=settings.bcrypt_rounds),
        )
        if settings.env in ("dev", "test") and settings.seed_demo_users:
            await seed_demo_users(directory)

        session_store = build_session_store(settings, sessionmaker)
        http = httpx.AsyncClient(
            transport=proxy_transport,
            cookies=_no_cookie_jar(),
            follow_redirects=False,
            timeout=settings.proxy_timeout_seconds,
        )

        app.state.engine = engine
        app.state.sessionmaker = sessionmaker
        app.state.directory = directory
        app.state.session_store = session_store
        app.state.authenticator = Authenticator(directory=directory, sessions=session_store)
        app.state.forwarder = ProxyForwarder(
            http=http,
            session_cookie_name=settings.session_cookie_name,
            timeout_seconds=settings.proxy_timeout_seconds,
        )
        purge_task = asyncio.create_task(
            purge_expired_sessions(
                session_store, interval_seconds=settings.session_purge_interval_seconds
            )
        )
        try:
            yield
        finally:
            purge_task.cancel()
            with suppress(asyncio.CancelledError):
                await purge_task
            await http.aclose()
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="SSO Gateway",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.classifier = classifier

    # Last added runs first: CORS -> request context -> gateway dispatch -> routers.
    app.add_middleware(GatewayMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router, prefix=settings.auth_prefix)

    log.info("route_rules_loaded", count=len(routes), api_prefix=settings.api_prefix)
    return app


# --- Module Notes -----------------------------------------------------------
# This file is the composition root; request-path decisions live in `routing`,
# credential checks in `auth`.
