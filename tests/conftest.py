"""Shared pytest fixtures for API and service tests."""

import asyncio
import os
import tempfile
from collections.abc import AsyncIterator, Iterator

# Keep the module-level engine away from ./data.db
os.environ.setdefault(
    "DATABASE_URL",
    f"sqlite+aiosqlite:///{os.path.join(tempfile.gettempdir(), 'permission-manager-tests.db')}",
)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine, func, select  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402

from app.core.database.base import Base  # noqa: E402
from app.core.database.engine import build_engine, get_db  # noqa: E402
from app.main import app  # noqa: E402


@pytest.fixture()
def db_engine(tmp_path) -> Iterator[AsyncEngine]:
    """A fresh file-backed SQLite database with all tables created."""

    path = tmp_path / "test.db"
    schema_engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(schema_engine)
    schema_engine.dispose()

    engine = build_engine(f"sqlite+aiosqlite:///{path}")
    yield engine
    engine.sync_engine.dispose()


@pytest.fixture()
def session_factory(db_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest.fixture()
def client(session_factory: async_sessionmaker[AsyncSession]) -> Iterator[TestClient]:
    """Test client whose requests run against the per-test database."""

    async def _get_test_db() -> AsyncIterator[AsyncSession]:
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    yield TestClient(app)
    app.dependency_overrides.pop(get_db, None)


@pytest_asyncio.fixture()
async def session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncIterator[AsyncSession]:
    async with session_factory() as db:
        yield db


@pytest.fixture()
def count_rows(session_factory: async_sessionmaker[AsyncSession]):
    """Count rows of ``model`` matching optional ``where`` clauses, from sync tests."""

    async def _count(model, *where) -> int:
        async with session_factory() as db:
            stmt = select(func.count()).select_from(model)
            for clause in where:
                stmt = stmt.where(clause)
            return (await db.execute(stmt)).scalar_one()

    def count(model, *where) -> int:
        return asyncio.run(_count(model, *where))

    return count
