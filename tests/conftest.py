"""Pytest configuration and fixtures for searchsync.

Service and repository tests run against fakes.FakeSearchClient. db_session
gives an in-memory SQLite (aiosqlite) session with the sample models'
tables created; it is rolled back after each test.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from fakes import INDEX_NAME, FakeSearchClient
from searchsync.application.services import BulkIndexer, SearchSyncService
from searchsync.core.config import get_settings
from searchsync.infrastructure.persistence.database import Base
from searchsync.infrastructure.search.document_mapper import DocumentMapper


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Each test sees settings built from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def fake_client() -> FakeSearchClient:
    return FakeSearchClient()


@pytest.fixture
def mapper() -> DocumentMapper:
    return DocumentMapper()


@pytest.fixture
def sync_service(fake_client: FakeSearchClient, mapper: DocumentMapper) -> SearchSyncService:
    return SearchSyncService(fake_client, mapper, INDEX_NAME)


@pytest.fixture
def indexer(fake_client: FakeSearchClient, mapper: DocumentMapper) -> BulkIndexer:
    return BulkIndexer(fake_client, mapper, INDEX_NAME)


@pytest.fixture
async def db_session() -> AsyncSession:
    """In-memory SQLite session with all sample tables. Rolls back after test.

    Use @pytest.mark.requires_db on tests that need this fixture; run
    without them via: pytest -m 'not requires_db'.
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
        await session.rollback()
    await engine.dispose()
