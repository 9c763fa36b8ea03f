"""Wiring: builds the search sync services from settings and tears them down.

Single place for startup/shutdown logic. No business logic here, only
construction of the adapter, mapper and services, and closing of the
search transport and SQL engine.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from searchsync.core.config import Settings, get_settings

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from searchsync.application.interfaces.search_client import ISearchClient
    from searchsync.application.services import (
        BulkIndexer,
        IndexAdminService,
        ModelSearch,
        SearchSyncService,
    )
    from searchsync.infrastructure.persistence.repositories import SearchableRepository
    from searchsync.infrastructure.search.document_mapper import DocumentMapper

logger = logging.getLogger(__name__)


@dataclass
class SearchSync:
    """Services sharing one search client, mapper and index name."""

    settings: Settings
    client: ISearchClient
    mapper: DocumentMapper
    sync: SearchSyncService
    indexer: BulkIndexer
    admin: IndexAdminService

    def search_for(self, record_type: type) -> ModelSearch:
        """Search entry point scoped to record_type."""
        from searchsync.application.services import ModelSearch

        return ModelSearch(
            record_type,
            self.client,
            self.mapper,
            self.settings.search_index_name,
            default_size=self.settings.search_default_size,
        )

    def repository(
        self, db: AsyncSession, model: type[Any], *, auto_sync: bool = True
    ) -> SearchableRepository:
        """Repository for model; auto_sync subscribes the sync service to its hooks."""
        from searchsync.infrastructure.persistence.repositories import SearchableRepository

        return SearchableRepository(
            db, model, self.indexer, self.sync if auto_sync else None
        )

    async def close(self) -> None:
        await self.client.close()


def build_search_sync(
    settings: Settings | None = None,
    *,
    client: ISearchClient | None = None,
    exclude: tuple[str, ...] = (),
) -> SearchSync:
    """Construct SearchSync; client defaults to SearchClientFactory.create_search_client."""
    from searchsync.application.services import (
        BulkIndexer,
        IndexAdminService,
        SearchSyncService,
    )
    from searchsync.infrastructure.search.factory import SearchClientFactory

    s = settings or get_settings()
    client = client or SearchClientFactory.create_search_client(s)
    mapper = SearchClientFactory.create_document_mapper(s, exclude)
    index_name = s.search_index_name
    return SearchSync(
        settings=s,
        client=client,
        mapper=mapper,
        sync=SearchSyncService(client, mapper, index_name),
        indexer=BulkIndexer(client, mapper, index_name),
        admin=IndexAdminService(client, mapper, index_name),
    )


@asynccontextmanager
async def search_sync_lifespan(
    settings: Settings | None = None,
    *,
    client: ISearchClient | None = None,
) -> AsyncIterator[SearchSync]:
    """Yield a SearchSync; on exit close the search client and dispose the SQL engine."""
    services = build_search_sync(settings, client=client)
    logger.info(
        "Search sync started (index %s, hosts %s)",
        services.settings.search_index_name,
        ",".join(services.settings.search_host_list),
    )
    try:
        yield services
    finally:
        await services.close()
        from searchsync.infrastructure.persistence import database

        if database.engine is not None:
            await database.engine.dispose()
            logger.info("SQL engine disposed")
        logger.info("Search sync stopped")
