"""
tests.test_smoke

Minimal smoke tests to validate the gateway can boot and serve its health checks.
"""

from __future__ import annotations

import pytest


@pytest.mark.asyncio
async def test_health_endpoints(gateway) -> None:
    async with gateway() as (_, client):
        r = await client.get("/healthz")
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

        r = await client.get("/readyz")
        assert r.status_code == 200
        assert r.json()["status"] == "ready"


@pytest.mark.asyncio
async def test_request_id_is_propagated(gateway) -> None:
    async with gateway() as (_, client):
        r = await client.get("/healthz", headers={"x-request-id": "req-123"})
        assert r.headers["x-request-id"] == "req-123"

        r = await client.get("/dashboard")
        assert r.headers["x-request-id"]


@pytest.mark.asyncio
async def test_demo_users_seeded_in_test_env(gateway) -> None:
    async with gateway() as (app, _):
        assert await app.state.directory.user_exists("admin")
        assert await app.state.directory.user_exists("user")


@pytest.mark.asyncio
async def test_demo_users_not_seeded_when_disabled(gateway) -> None:
    async with gateway(seed_demo_users=False) as (app, _):
        assert not await app.state.directory.user_exists("admin")
