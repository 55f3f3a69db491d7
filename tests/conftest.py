"""Pytest configuration and fixtures."""

import os
import sys
from collections.abc import AsyncGenerator
from pathlib import Path

# Disable rate limiting in tests
os.environ["RATE_LIMIT_ENABLED"] = "false"
# Keep the module-level engine off any real database
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.services.profile_service import ProfileService
from infrastructure.auth.provider import IdentityUser
from infrastructure.database.models import Base
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork
from core.exceptions import UpstreamAuthError

# Test database URL (SQLite in memory)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeIdentityProvider:
    """In-memory identity provider keyed by email."""

    def __init__(self) -> None:
        self.accounts: dict[str, tuple[str, str]] = {}

    async def create_user(self, email: str, password: str) -> IdentityUser:
        if email in self.accounts:
            raise UpstreamAuthError(
                "A user with this email address has already been registered"
            )
        uid = f"uid-{len(self.accounts) + 1}"
        self.accounts[email] = (uid, password)
        return IdentityUser(
            uid=uid,
            email=email,
            verification_link=f"https://auth.test/verify?uid={uid}",
        )

    async def sign_in(self, email: str, password: str) -> IdentityUser:
        account = self.accounts.get(email)
        if account is None or account[1] != password:
            raise UpstreamAuthError("Invalid login credentials")
        return IdentityUser(uid=account[0], email=email)


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a fresh in-memory database with the documents table."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create session factory."""
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest.fixture
def profile_service(session_factory: async_sessionmaker[AsyncSession]) -> ProfileService:
    """ProfileService wired to the in-memory database."""
    return ProfileService(lambda: SQLAlchemyUnitOfWork(session_factory))


@pytest.fixture
def identity_provider() -> FakeIdentityProvider:
    return FakeIdentityProvider()


@pytest.fixture
async def client(
    profile_service: ProfileService,
    identity_provider: FakeIdentityProvider,
) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async test client.

    This client:
    - Uses an in-memory SQLite database for the document store
    - Overrides the identity provider with an in-memory fake
    """
    from api.v1.dependencies import get_identity_provider, get_profile_service
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_profile_service] = lambda: profile_service
    app.dependency_overrides[get_identity_provider] = lambda: identity_provider

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c

    app.dependency_overrides.clear()
