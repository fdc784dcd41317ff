"""
Pytest fixtures for testing.

Provides:
- Async database session with rollback
- Factory fixtures for creating roles
- Seeded admin/editor/viewer roles
- Role services wired to the test session
"""

from dataclasses import dataclass
from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from rolegate.core.config import Settings, RoleSettings
from rolegate.models.base import Base
from rolegate.models.role import Role
from rolegate.repositories.membership import MembershipRepository
from rolegate.repositories.role import RoleRepository
from rolegate.services.evaluator import AuthorizationEvaluator
from rolegate.services.gate import RoleGate
from rolegate.services.membership import MembershipManager


# Test database URL (SQLite in-memory for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """
    Create database session with automatic rollback.

    Each test gets a fresh transaction that's rolled back after.
    """
    session_factory = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()


# ============ Principals ============


@dataclass
class FakeUser:
    """Minimal principal: anything with an id."""
    id: str


@pytest.fixture
def user() -> FakeUser:
    return FakeUser(id=str(uuid4()))


@pytest.fixture
def other_user() -> FakeUser:
    return FakeUser(id=str(uuid4()))


# ============ Factory Fixtures ============


class RoleFactory:
    """Factory for creating test roles."""

    def __init__(self, db: AsyncSession):
        self.repo = RoleRepository(db)

    async def create(
        self,
        slug: str | None = None,
        level: int = 1,
        name: str | None = None,
        description: str | None = None,
    ) -> Role:
        """Create a role in the database."""
        slug = slug or f"role-{uuid4().hex[:8]}"
        return await self.repo.create(
            name=name or slug.title(),
            slug=slug,
            level=level,
            description=description,
        )


@pytest_asyncio.fixture
async def role_factory(db: AsyncSession) -> RoleFactory:
    """Fixture that provides RoleFactory."""
    return RoleFactory(db)


@pytest_asyncio.fixture
async def roles(role_factory: RoleFactory) -> dict[str, Role]:
    """admin(10), editor(5), viewer(1)."""
    return {
        "admin": await role_factory.create("admin", level=10),
        "editor": await role_factory.create("editor", level=5),
        "viewer": await role_factory.create("viewer", level=1),
    }


# ============ Services ============


@pytest.fixture
def manager(db: AsyncSession) -> MembershipManager:
    return MembershipManager(RoleRepository(db), MembershipRepository(db))


@pytest.fixture
def evaluator(manager: MembershipManager) -> AuthorizationEvaluator:
    return AuthorizationEvaluator(manager)


@pytest.fixture
def settings() -> Settings:
    return Settings(environment="testing", roles=RoleSettings())


@pytest.fixture
def gate(db: AsyncSession, settings: Settings) -> RoleGate:
    return RoleGate(db, settings=settings)
