"""
Centralized Test Configuration.
"""

import pytest
from pathlib import PurePath
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool, StaticPool

from backend.app.main import app
from backend.app.db.session import get_db, Base
from backend.app.services.image_host import UploadedImage, get_image_host
from backend.tests.factories import dealer_payload, car_payload, auth_header
import backend.app.core.redis_client as redis_client_module

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


# In-process Redis covering the commands the rate limiter and health check use
class MockPipeline:
    def __init__(self, redis, transaction):
        self.redis = redis
        self.transaction = transaction
        self.commands = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.commands = []

    def set(self, key, value, ex=None, nx=False):
        self.commands.append((self.redis.set, (key, value), {"ex": ex, "nx": nx}))
        return self

    def incr(self, key):
        self.commands.append((self.redis.incr, (key,), {}))
        return self

    async def execute(self):
        return [await command(*args, **kwargs) for command, args, kwargs in self.commands]


class MockRedis:
    def __init__(self):
        self.store = {}
        self.ttls = {}
        self.pipelines = []

    async def ping(self):
        return True

    async def set(self, key, value, ex=None, nx=False):
        if nx and key in self.store:
            return None
        self.store[key] = value
        if ex:
            self.ttls[key] = ex
        return True

    async def incr(self, key):
        self.store[key] = int(self.store.get(key, 0)) + 1
        return self.store[key]

    def pipeline(self, transaction=True):
        pipe = MockPipeline(self, transaction)
        self.pipelines.append(pipe)
        return pipe

    async def flushdb(self):
        self.store = {}
        self.ttls = {}
        self.pipelines = []


class FakeImageHost:
    """In-process stand-in for the Cloudinary client."""

    def __init__(self):
        self.images = {}
        self.destroyed = []

    async def upload(self, content, filename, content_type):
        public_id = f"carsawa/{len(self.images) + 1}-{PurePath(filename).stem}"
        url = f"http://res.cloudinary.test/image/upload/{public_id}{PurePath(filename).suffix}"
        self.images[public_id] = content
        return UploadedImage(
            public_id=public_id,
            url=url,
            secure_url=url.replace("http://", "https://"),
            size=len(content),
        )

    async def destroy(self, public_id):
        self.destroyed.append(public_id)
        return self.images.pop(public_id, None) is not None


# Redis Fixture (Session Scope)
@pytest.fixture(scope="session")
def redis_client_session():
    return MockRedis()


@pytest.fixture
def image_host():
    host = FakeImageHost()
    app.dependency_overrides[get_image_host] = lambda: host
    yield host
    app.dependency_overrides.pop(get_image_host, None)


@pytest.fixture(scope="session", autouse=True)
def apply_overrides(redis_client_session):
    """Apply overrides once for the session.
    Global override is safer here than per-test override to avoid app state flux.
    """

    # Patch the global redis client used by the rate limiting middleware
    original_client = redis_client_module.redis_client
    redis_client_module.redis_client = redis_client_session

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield

    # Restore and clear
    app.dependency_overrides = {}
    redis_client_module.redis_client = original_client


@pytest.fixture(autouse=True)
async def setup_database(redis_client_session):
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    await redis_client_session.flushdb()

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
async def dealer(client):
    """Register a dealer and return (token, dealer_id)."""
    response = await client.post("/api/auth/register", json=dealer_payload())
    assert response.status_code == 201
    return response.json()["token"], response.json()["id"]


@pytest.fixture
async def other_dealer(client):
    """Second dealer for cross-tenant tests."""
    response = await client.post(
        "/api/auth/register",
        json=dealer_payload(email="rival@test.com", name="Rival Autos"),
    )
    assert response.status_code == 201
    return response.json()["token"], response.json()["id"]


@pytest.fixture
def create_car(client):
    """Factory creating a listing as the given dealer token."""
    async def _create(token, **overrides):
        response = await client.post("/api/cars", json=car_payload(**overrides), headers=auth_header(token))
        assert response.status_code == 201, response.text
        return response.json()
    return _create
