"""Pytest configuration for all tests."""

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from greyn.core.config import Settings
from greyn.domain.entities import AccountStatus, UserRole
from greyn.infrastructure.auth import SessionTokenCodec, hash_password
from greyn.infrastructure.persistence.database import Base
from greyn.infrastructure.persistence.models import (
    AccountModel,
    AdminModel,
    CarbonUserModel,
    CorporateModel,
    NGOModel,
    SimpleUserModel,
)

TEST_ADMIN_CODE = "test-admin-code-1234"
TEST_PASSWORD = "password123"


@pytest.fixture
def test_settings() -> Settings:
    """Settings for tests, independent of the environment."""
    return Settings(
        environment="testing",
        admin_code=TEST_ADMIN_CODE,
        jwt_secret="test-secret-key-that-is-at-least-32-characters",
        database_url="sqlite+aiosqlite:///:memory:",
    )


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture
async def client(db_session: AsyncSession, test_settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database and settings dependencies."""
    from greyn.core.config import get_settings
    from greyn.infrastructure.api.app import app
    from greyn.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session
    app.dependency_overrides[get_settings] = lambda: test_settings

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides = {}


_DEFAULT_PROFILES = {
    UserRole.SIMPLE_USER: (SimpleUserModel, {"name": "Sam Investor"}),
    UserRole.NGO: (
        NGOModel,
        {
            "organization_name": "Green Earth",
            "registration_number": "NGO-001",
            "contact_person": "Robin Green",
            "verified": True,
        },
    ),
    UserRole.CORPORATE: (
        CorporateModel,
        {
            "company_name": "Acme Corp",
            "tax_id": "TAX-001",
            "contact_person": "Alex Acme",
            "verified": True,
        },
    ),
    UserRole.CARBON: (CarbonUserModel, {"name": "Casey Carbon", "verified": False}),
    UserRole.ADMIN: (AdminModel, {"name": "Ada Admin"}),
}


@pytest.fixture
def make_account(db_session: AsyncSession):
    """Factory that stores an account of the given role and returns it."""

    async def _make(
        role: UserRole,
        email: str | None = None,
        password: str = TEST_PASSWORD,
        status: AccountStatus = AccountStatus.ACTIVE,
        **overrides,
    ) -> AccountModel:
        model, defaults = _DEFAULT_PROFILES[role]
        values = {**defaults, **overrides}
        account = model(
            email=email or f"{role.value}@example.com",
            password_hash=hash_password(password),
            status=status.value,
            **values,
        )
        db_session.add(account)
        await db_session.commit()
        await db_session.refresh(account)
        return account

    return _make


@pytest.fixture
def auth_headers(test_settings: Settings):
    """Build a Bearer header for an account, signed with the test settings."""
    codec = SessionTokenCodec.from_settings(test_settings)

    def _headers(account: AccountModel) -> dict[str, str]:
        token = codec.issue(account.id, account.role)
        return {"Authorization": f"Bearer {token}"}

    return _headers
