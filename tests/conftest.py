"""Shared pytest fixtures for the NNA Registry test suite.

Provides:
- taxonomy_engine: engine built from the curated v1.3 catalog and overrides
- db_engine: in-memory SQLite async engine with all tables
- db_session: SAVEPOINT-isolated async session (app commits don't leak)
- client: AsyncClient with dependency overrides for DB-backed testing
"""

from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from nna_registry.db.session import Base, get_async_session
import nna_registry.db.tables  # noqa: F401  register ORM models on Base.metadata
from nna_registry.taxonomy.engine import (
    TaxonomyEngine,
    TaxonomyRegistry,
    get_engine,
    get_registry,
)

DATA_DIR = Path(__file__).resolve().parent.parent / "data" / "curated"
CATALOG_PATH = DATA_DIR / "nna_taxonomy_v1.3.json"
OVERRIDES_PATH = DATA_DIR / "nna_taxonomy_overrides_v1.3.json"


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(scope="session")
def taxonomy_engine() -> TaxonomyEngine:
    """Engine over the curated catalog. Immutable, so shared by all tests."""
    return TaxonomyEngine.from_files(CATALOG_PATH, OVERRIDES_PATH)


@pytest.fixture
async def db_engine():
    """Create an in-memory SQLite async engine with all tables."""
    eng = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
async def db_session(db_engine):
    """Provide a SAVEPOINT-isolated session.

    The outer transaction is never committed; it rolls back at teardown.
    Application code calling session.commit() triggers a SAVEPOINT release,
    which is then restarted so subsequent operations stay in the same
    outer transaction.
    """
    async with db_engine.connect() as conn:
        trans = await conn.begin()
        session = AsyncSession(bind=conn, expire_on_commit=False)

        # Start a nested SAVEPOINT
        nested = await conn.begin_nested()

        @event.listens_for(session.sync_session, "after_transaction_end")
        def restart_savepoint(sync_session, transaction):  # noqa: ARG001
            nonlocal nested
            if transaction.nested and not transaction._parent.nested:
                nested = conn.sync_connection.begin_nested()

        yield session

        await session.close()
        await trans.rollback()


@pytest.fixture
async def client(db_session, taxonomy_engine):
    """AsyncClient with the DB session and taxonomy engine pinned for the test."""
    from nna_registry.api.main import app

    async def _override_session():
        yield db_session

    registry = TaxonomyRegistry(CATALOG_PATH, OVERRIDES_PATH)
    registry.set(taxonomy_engine)

    app.dependency_overrides[get_async_session] = _override_session
    app.dependency_overrides[get_engine] = lambda: taxonomy_engine
    app.dependency_overrides[get_registry] = lambda: registry

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()
