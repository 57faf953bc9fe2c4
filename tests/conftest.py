"""
Test configuration and fixtures.

Provides:
- In-memory SQLite database, schema created and dropped per test
- Buyer/seller/service/package fixtures
- Bearer token minting for authenticated tests
- HTTPX AsyncClient bound to the app with get_db overridden
"""
import os
import uuid
from decimal import Decimal
from typing import AsyncGenerator, Generator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.orm import Session

# Must be set before the app (and its engine/limiter) is imported
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["TESTING"] = "1"
os.environ["ENV"] = "test"

from gigmarket.main import app
from gigmarket.core.deps import get_db
from gigmarket.core.security import create_access_token
from gigmarket.core.websocket import InMemoryPresenceRegistry
from gigmarket.db.base import Base
from gigmarket.db.enums import Role
from gigmarket.db.models import Package, Service, User
from gigmarket.db.session import SessionLocal, engine


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """
    Fresh schema per test.

    Services commit through their unit of work, so isolation comes from
    recreating the tables rather than from an outer rollback.
    """
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(autouse=True)
def presence() -> InMemoryPresenceRegistry:
    """Fresh presence registry per test."""
    registry = InMemoryPresenceRegistry()
    app.state.presence = registry
    return registry


def _create_user(db: Session, role: Role = Role.BUYER, name: str | None = None) -> User:
    suffix = uuid.uuid4().hex[:8]
    user = User(
        id=uuid.uuid4(),
        external_id=f"auth|{suffix}",
        email=f"{role.value}-{suffix}@test.com",
        name=name or f"Test {role.value.title()}",
        role=role.value,
    )
    db.add(user)
    db.commit()
    return user


def _auth_headers(user: User) -> dict[str, str]:
    token = create_access_token(user.external_id, email=user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def make_user(db: Session):
    """Factory: make_user(role=Role.SELLER) -> committed User."""
    def _make(role: Role = Role.BUYER, name: str | None = None) -> User:
        return _create_user(db, role, name)
    return _make


@pytest.fixture
def auth_headers():
    """Factory: auth_headers(user) -> Authorization header with a fresh token."""
    return _auth_headers


@pytest.fixture(scope="function")
def buyer(db: Session) -> User:
    return _create_user(db, Role.BUYER, "Test Buyer")


@pytest.fixture(scope="function")
def seller(db: Session) -> User:
    return _create_user(db, Role.SELLER, "Test Seller")


@pytest.fixture(scope="function")
def service(db: Session, seller: User) -> Service:
    """A seller's listing with one package."""
    service = Service(
        id=uuid.uuid4(),
        user_id=seller.id,
        title="Logo Design",
        description="Three concepts, two revisions",
    )
    db.add(service)
    db.flush()
    db.add(
        Package(
            id=uuid.uuid4(),
            service_id=service.id,
            name="Basic",
            description="One concept",
            price=Decimal("50.00"),
            delivery_time=3,
            features=["1 concept", "PNG export"],
        )
    )
    db.commit()
    return service


@pytest.fixture(scope="function")
def package(service: Service) -> Package:
    return service.packages[0]


# =============================================================================
# Client Fixtures
# =============================================================================

@pytest.fixture(scope="function")
async def client(db: Session) -> AsyncGenerator[AsyncClient, None]:
    """
    AsyncClient bound to the app. Pass auth_headers(user) per request.
    """
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as c:
        yield c

    app.dependency_overrides.clear()
