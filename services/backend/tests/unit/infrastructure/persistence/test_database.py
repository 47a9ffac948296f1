"""Tests for the engine and session helpers."""

import pytest
import pytest_asyncio

from bankster.infrastructure.persistence.sqlalchemy import database
from bankster.infrastructure.persistence.sqlalchemy.repositories import (
    AuthRecordRepositorySQLAlchemy,
)
from bankster_config.settings import clear_settings_cache
from tests.shared.fixtures import NOW, make_record


@pytest_asyncio.fixture
async def file_database(tmp_path, monkeypatch):
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'bankster.db'}")
    clear_settings_cache()
    database.get_engine.cache_clear()
    database.get_session_maker.cache_clear()

    await database.create_tables()
    yield

    await database.get_engine().dispose()
    database.get_engine.cache_clear()
    database.get_session_maker.cache_clear()
    clear_settings_cache()


class TestSessionScope:
    @pytest.mark.asyncio
    async def test_commits_on_success(self, file_database, encryption_service):
        async with database.session_scope() as session:
            repo = AuthRecordRepositorySQLAlchemy(session, encryption_service)
            await repo.save(make_record(now=NOW))

        async with database.session_scope() as session:
            repo = AuthRecordRepositorySQLAlchemy(session, encryption_service)
            assert await repo.find_by_account("giro-1") is not None

    @pytest.mark.asyncio
    async def test_rolls_back_on_error(self, file_database, encryption_service):
        with pytest.raises(RuntimeError):
            async with database.session_scope() as session:
                repo = AuthRecordRepositorySQLAlchemy(session, encryption_service)
                await repo.save(make_record(now=NOW))
                msg = "boom"
                raise RuntimeError(msg)

        async with database.session_scope() as session:
            repo = AuthRecordRepositorySQLAlchemy(session, encryption_service)
            assert await repo.find_by_account("giro-1") is None

    @pytest.mark.asyncio
    async def test_create_tables_is_idempotent(self, file_database):
        await database.create_tables()
