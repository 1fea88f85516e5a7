"""
sso_gateway.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for all layers.
- Carry the Route Rule table (the only configurable routing behavior).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from sso_gateway.routing.rules import RouteRule


class Settings(BaseSettings):
    """
    Every field can be set from the environment as `SSO_GATEWAY_<FIELD>`.
    Defaults run the gateway locally against SQLite with an empty Route Table.
    """

    model_config = SettingsConfigDict(env_prefix="SSO_GATEWAY_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables and demo accounts.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "sso-gateway"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Persistence (user directory + optional session table)
    database_url: str = "sqlite+aiosqlite:///./sso_gateway.db"

    # SPA
    static_root: Path = Path("static")
    index_document: str = "index.html"

    # Routing
    api_prefix: str = "/api/"
    operational_prefixes: list[str] = Field(
        default_factory=lambda: ["/healthz", "/readyz", "/docs", "/openapi.json"]
    )
    routes: list[RouteRule] = Field(default_factory=list)
    proxy_timeout_seconds: float = Field(default=30.0, gt=0)

    # Sessions
    session_backend: Literal["memory", "database"] = "memory"
    session_cookie_name: str = "SESSION"
    session_cookie_secure: bool = False
    session_cookie_samesite: Literal["lax", "strict", "none"] = "lax"
    session_ttl_seconds: int = Field(default=1800, gt=0)
    # How often expired sessions are swept out of the store.
    session_purge_interval_seconds: float = Field(default=60.0, gt=0)

    # Credentials
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)
    seed_demo_users: bool = True

    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:4200", "http://localhost:8080"]
    )

    @property
    def auth_prefix(self) -> str:
        return f"{self.api_prefix.rstrip('/')}/auth"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each request dependency.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# `routes` is parsed from JSON when provided through the environment, e.g.
# SSO_GATEWAY_ROUTES='[{"name": "users", "path_pattern": "/svc/users/**", ...}]'.
