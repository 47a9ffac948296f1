"""
Pytest fixtures for infrastructure persistence tests.

Each test gets a fresh SQLite in-memory database. Set TEST_DATABASE_URL to
run against another database.
"""

import os

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from bankster.infrastructure.persistence.sqlalchemy.database import create_tables
from bankster.infrastructure.persistence.sqlalchemy.models.base import Base
from bankster.infrastructure.security import FernetEncryptionService

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture
def async_engine():
    """Create an async engine for the test database."""
    if TEST_DATABASE_URL.startswith("sqlite"):
        # One shared connection so the in-memory database survives
        return create_async_engine(
            TEST_DATABASE_URL,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    return create_async_engine(TEST_DATABASE_URL, echo=False)


@pytest_asyncio.fixture
async def async_session(async_engine):
    """
    Create a fresh database session for each test.

    Tables are created before and dropped after the test.
    """
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await create_tables(async_engine)

    async_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await async_engine.dispose()


@pytest.fixture
def encryption_service():
    return FernetEncryptionService(FernetEncryptionService.generate_key())
