"""
Pytest configuration and fixtures for the HoodsGoods API tests.
"""
import os
from datetime import datetime, timedelta
from decimal import Decimal
from typing import AsyncGenerator, Callable

import pytest

# Set test environment before importing app modules
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["AUTH_JWT_SECRET"] = "test-secret-key-for-unit-tests-only"
os.environ["LOG_LEVEL"] = "WARNING"

from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hoodsgoods.db.init_db import init_db
from hoodsgoods.db.session import get_db_session
from hoodsgoods.main import app
from hoodsgoods.models import ExpressTime, Product, StandardTime, Store, User, UserRole

TEST_SECRET = os.environ["AUTH_JWT_SECRET"]


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def _session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def make_token(sub: str, email: str | None = None, name: str | None = None, expires_in: int = 3600) -> str:
    claims = {"sub": sub, "exp": datetime.utcnow() + timedelta(seconds=expires_in)}
    if email:
        claims["email"] = email
    if name:
        claims["name"] = name
    return jwt.encode(claims, TEST_SECRET, algorithm="HS256")


@pytest.fixture
def auth() -> Callable[..., dict]:
    """Build an Authorization header for a subject."""
    def _auth(sub: str, **claims) -> dict:
        return {"Authorization": f"Bearer {make_token(sub, **claims)}"}
    return _auth


class Seeder:
    """Writes fixture rows through their own committed sessions."""

    def __init__(self, factory: async_sessionmaker[AsyncSession]) -> None:
        self.factory = factory

    async def _save(self, obj):
        async with self.factory() as session:
            session.add(obj)
            await session.commit()
        return obj

    async def user(self, user_id: str, role: UserRole = UserRole.BUYER, is_active: bool = True) -> User:
        return await self._save(User(id=user_id, email=f"{user_id}@example.com", role=role, is_active=is_active))

    async def store(
        self,
        owner_id: str,
        name: str = "Corner Shop",
        active: bool = True,
        standard_price: str = "50.00",
        express_price: str = "120.00",
    ) -> Store:
        return await self._save(Store(
            user_id=owner_id,
            store_name=name,
            standard_price=Decimal(standard_price),
            standard_time=StandardTime.DAYS_3_5,
            express_price=Decimal(express_price),
            express_time=ExpressTime.DAYS_1_2,
            is_active=active,
        ))

    async def product(
        self,
        store: Store,
        name: str = "Beaded Bracelet",
        category: str = "Jewellery",
        price: str = "100.00",
        quantity: int = 10,
        active: bool = True,
        description: str | None = None,
    ) -> Product:
        return await self._save(Product(
            name=name,
            description=description,
            category=category,
            price=Decimal(price),
            quantity=quantity,
            user_id=store.user_id,
            store_id=store.id,
            store_name=store.store_name,
            is_active=active,
        ))


@pytest.fixture
def seed(session_factory) -> Seeder:
    return Seeder(session_factory)
