"""Integration test fixtures.

These fixtures require a reachable PostgreSQL database (``DATABASE_URL``).
Tables are created from the SQLModel metadata; each fixture deletes the rows
it created. Tests are skipped when the database cannot be reached.
"""

from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.pool import NullPool
from sqlmodel import SQLModel

from src.lynkskill.core import db
from src.lynkskill.core.config import get_settings
from src.lynkskill.models import Company, User
from tests.factories import CompanyFactory, UserFactory


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine]:
    """Create test database engine and make sure the tables exist."""
    await db.dispose_engine()

    test_engine = create_async_engine(get_settings().database_url, poolclass=NullPool)
    try:
        async with test_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
    except (OSError, SQLAlchemyError) as e:
        await test_engine.dispose()
        pytest.skip(f"PostgreSQL not available: {e}")

    yield test_engine
    await test_engine.dispose()


@pytest.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Session for arranging test data. Tests must commit explicitly."""
    async with AsyncSession(engine, expire_on_commit=False) as session:
        yield session


@pytest.fixture
async def owner(engine: AsyncEngine, db_session: AsyncSession) -> AsyncGenerator[User]:
    user = UserFactory.company_owner()
    db_session.add(user)
    await db_session.commit()

    yield user

    async with engine.connect() as conn:
        await conn.execute(text("DELETE FROM users WHERE id = :id"), {"id": user.id})
        await conn.commit()


@pytest.fixture
async def company(
    engine: AsyncEngine, db_session: AsyncSession, owner: User
) -> AsyncGenerator[Company]:
    """A company whose rows (members, invitations) are removed afterwards."""
    company = CompanyFactory.build(owner_id=owner.id)
    db_session.add(company)
    await db_session.commit()

    yield company

    async with engine.connect() as conn:
        params = {"id": company.id}
        await conn.execute(text("DELETE FROM company_members WHERE company_id = :id"), params)
        await conn.execute(text("DELETE FROM company_invitations WHERE company_id = :id"), params)
        await conn.execute(text("DELETE FROM companies WHERE id = :id"), params)
        await conn.commit()


@pytest.fixture
async def make_user(
    engine: AsyncEngine, db_session: AsyncSession
) -> AsyncGenerator[Callable[..., Awaitable[User]]]:
    """Create committed users; they are deleted after the company fixture cleans up."""
    created: list[User] = []

    async def _make(**kwargs) -> User:
        user = UserFactory.build(**kwargs)
        db_session.add(user)
        await db_session.commit()
        created.append(user)
        return user

    yield _make

    async with engine.connect() as conn:
        for user in created:
            await conn.execute(
                text("DELETE FROM company_members WHERE user_id = :id"), {"id": user.id}
            )
            await conn.execute(text("DELETE FROM users WHERE id = :id"), {"id": user.id})
        await conn.commit()
