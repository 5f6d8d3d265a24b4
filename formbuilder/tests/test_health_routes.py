"""Tests for health and readiness endpoints."""

from __future__ import annotations

import pytest


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "formbuilder"}


@pytest.mark.asyncio
async def test_ready_reports_active_forms(client):
    await client.post("/api/forms", json={"name": "Open"})
    await client.post("/api/forms", json={"name": "Closed", "is_active": False})

    response = await client.get("/ready")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ready"
    assert body["active_forms"] == 1
    assert body["route_prefix"] == "/forms"
    assert body["store_submissions"] is True


@pytest.mark.asyncio
async def test_ready_is_503_without_schema(client, engine):
    from formbuilder.models.base import Base

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    response = await client.get("/ready")
    assert response.status_code == 503
    assert response.json()["status"] == "not_ready"
