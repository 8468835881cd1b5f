"""
Pytest configuration for the application
"""
import os

# Must be set before any ``src`` import builds settings or the engine.
os.environ["ENV"] = "test"
os.environ["DATABASE_URI"] = "sqlite+aiosqlite://"
os.environ["SHOPIFY_API_KEY"] = "test-api-key"
os.environ["SHOPIFY_API_SECRET"] = "test-api-secret-0123456789abcdefghij"
os.environ["TRANSLATION_PROVIDER"] = "placeholder"

import datetime as dt
import re
import time
from typing import Any, AsyncGenerator, Dict, List, Optional, Tuple
from uuid import uuid4

import httpx
import jwt
import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from main import create_application
import src.db.models  # noqa: F401  registers every table on Base.metadata
from src.api.deps import get_admin_client
from src.core.config import settings
from src.db.base import Base
from src.db.models.language import Language
from src.db.models.subscription import Subscription
from src.db.session import get_db
from src.services import limits as limits_service

SHOP = "test-shop.myshopify.com"
API_PREFIX = f"{settings.API_PREFIX}/v1"


class FakeRedis:
    """Minimal async Redis stub for rate limiting and idempotency tests."""

    def __init__(self) -> None:
        self.store: Dict[str, Any] = {}

    async def incr(self, key: str) -> int:
        current = int(self.store.get(key, 0)) + 1
        self.store[key] = current
        return current

    async def expire(self, key: str, seconds: int) -> None:
        self.store.setdefault(f"{key}:ttl", seconds)

    async def set(self, key: str, value: str, ex: int | None = None, nx: bool = False) -> bool:
        if nx and key in self.store:
            return False
        self.store[key] = value
        if ex is not None:
            self.store[f"{key}:ttl"] = ex
        return True

    async def aclose(self) -> None:
        return None


class FakeAdmin:
    """Records Admin GraphQL calls and answers them by operation name."""

    def __init__(self, shop: str = SHOP) -> None:
        self.shop = shop
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.responses: Dict[str, Dict[str, Any]] = {}
        self.error: Optional[Exception] = None

    @staticmethod
    def operation_name(query: str) -> str:
        match = re.search(r"(?:query|mutation)\s+(\w+)", query)
        return match.group(1) if match else ""

    async def graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        name = self.operation_name(query)
        self.calls.append((name, variables or {}))
        if self.error is not None:
            raise self.error
        return self.responses.get(name, {})

    def calls_to(self, name: str) -> List[Dict[str, Any]]:
        return [variables for op, variables in self.calls if op == name]


def session_token(shop: str = SHOP, **overrides: Any) -> str:
    now = int(time.time())
    claims = {
        "iss": f"https://{shop}/admin",
        "dest": f"https://{shop}",
        "aud": settings.SHOPIFY_API_KEY,
        "sub": "42",
        "exp": now + 60,
        "nbf": now - 5,
        "iat": now,
        "jti": uuid4().hex,
        "sid": uuid4().hex,
    }
    claims.update(overrides)
    return jwt.encode(claims, settings.SHOPIFY_API_SECRET, algorithm="HS256")


def auth_headers(shop: str = SHOP, **overrides: Any) -> Dict[str, str]:
    return {"Authorization": f"Bearer {session_token(shop, **overrides)}"}


async def seed_subscription(
    session: AsyncSession,
    *,
    shop: str = SHOP,
    plan_id: str = "basic",
    status: str = "active",
    shopify_subscription_id: Optional[str] = "gid://shopify/AppSubscription/1",
) -> Subscription:
    now = dt.datetime.now(dt.timezone.utc)
    subscription = Subscription(
        shop=shop,
        plan_id=plan_id,
        plan_name=plan_id.title(),
        status=status,
        shopify_subscription_id=shopify_subscription_id,
        current_period_start=now,
        current_period_end=now + dt.timedelta(days=30),
    )
    session.add(subscription)
    await session.flush()
    return subscription


async def seed_language(
    session: AsyncSession, code: str, *, shop: str = SHOP, is_default: bool = False
) -> Language:
    language = Language(shop=shop, code=code, name=code.upper(), is_default=is_default)
    session.add(language)
    await session.flush()
    return language


@pytest_asyncio.fixture
async def test_db_engine():
    """
    In-memory SQLite engine shared by every connection of one test.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def test_db(test_db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Session used both by the test body and by the app under test.
    """
    session_factory = async_sessionmaker(test_db_engine, expire_on_commit=False)
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture(autouse=True)
def fake_redis(monkeypatch) -> FakeRedis:
    """Patch the limits module to use an in-memory Redis stub."""

    fake = FakeRedis()
    monkeypatch.setattr(limits_service, "_redis_client", fake, raising=False)
    yield fake
    monkeypatch.setattr(limits_service, "_redis_client", None, raising=False)


@pytest.fixture
def fake_admin() -> FakeAdmin:
    return FakeAdmin()


@pytest_asyncio.fixture
async def test_app(test_db: AsyncSession, fake_admin: FakeAdmin) -> AsyncGenerator[FastAPI, None]:
    """
    Create a FastAPI test application bound to the test session.
    """
    app = create_application()

    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield test_db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_admin_client] = lambda: fake_admin
    async with LifespanManager(app):
        yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(test_app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    """
    Create an async HTTP client for testing.
    """
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as async_client:
        yield async_client
