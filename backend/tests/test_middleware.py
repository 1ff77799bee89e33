"""
Tests for the request middlewares and the service routes.

Rate limiting is exercised on a small standalone app so the limit can be
kept low without affecting the other test modules.
"""

import pytest
from fastapi import FastAPI
from httpx import AsyncClient, ASGITransport

import backend.app.core.redis_client as redis_client_module
from backend.app.core.rate_limit import RateLimitMiddleware


@pytest.fixture
def limited_app():
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, limit=2, window_seconds=60, path_prefix="/api")

    @app.get("/api/ping")
    async def ping():
        return {"pong": True}

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


@pytest.mark.asyncio
async def test_rate_limit_blocks_after_limit(limited_app, redis_client_session):
    async with AsyncClient(transport=ASGITransport(app=limited_app), base_url="http://test") as ac:
        first = await ac.get("/api/ping")
        second = await ac.get("/api/ping")
        third = await ac.get("/api/ping")

    assert first.status_code == 200
    assert first.headers["X-RateLimit-Remaining"] == "1"
    assert second.headers["X-RateLimit-Remaining"] == "0"
    assert third.status_code == 429
    assert third.json()["message"].startswith("Too many requests")
    assert redis_client_session.ttls["ratelimit:127.0.0.1"] == 60


@pytest.mark.asyncio
async def test_rate_limit_window_expiry_set_with_counter(limited_app, redis_client_session):
    async with AsyncClient(transport=ASGITransport(app=limited_app), base_url="http://test") as ac:
        await ac.get("/api/ping")
        await ac.get("/api/ping")

    assert redis_client_session.store["ratelimit:127.0.0.1"] == 2
    assert redis_client_session.ttls["ratelimit:127.0.0.1"] == 60
    assert [pipe.transaction for pipe in redis_client_session.pipelines] == [True, True]


@pytest.mark.asyncio
async def test_rate_limit_ignores_paths_outside_prefix(limited_app):
    async with AsyncClient(transport=ASGITransport(app=limited_app), base_url="http://test") as ac:
        responses = [await ac.get("/health") for _ in range(5)]
    assert all(r.status_code == 200 for r in responses)


class BrokenRedis:
    def pipeline(self, transaction=True):
        raise ConnectionError("redis down")


@pytest.mark.asyncio
async def test_rate_limit_fails_open(limited_app, monkeypatch):
    monkeypatch.setattr(redis_client_module, "redis_client", BrokenRedis())
    async with AsyncClient(transport=ASGITransport(app=limited_app), base_url="http://test") as ac:
        responses = [await ac.get("/api/ping") for _ in range(4)]
    assert all(r.status_code == 200 for r in responses)


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "req-42"})
    assert response.status_code == 200
    assert response.headers["X-Correlation-ID"] == "req-42"
    assert response.json()["redis"] == "connected"
    assert float(response.headers["X-Process-Time"]) >= 0


@pytest.mark.asyncio
async def test_correlation_id_is_generated(client):
    response = await client.get("/")
    assert response.json()["message"] == "Welcome to Carsawa API"
    assert response.headers["X-Correlation-ID"]


@pytest.mark.asyncio
async def test_unknown_route_uses_error_format(client):
    response = await client.get("/api/nowhere")
    assert response.status_code == 404
    assert response.json()["error_code"] == "ERR_NOT_FOUND"
