"""Repository for searchable models: lifecycle sync plus collection operations."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any, TypeVar

from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession

from searchsync.application.services.bulk_indexer import BulkIndexer, SearchableCollection
from searchsync.infrastructure.persistence.database import Base
from searchsync.infrastructure.persistence.repositories.base import BaseRepository

if TYPE_CHECKING:
    from searchsync.application.services.sync_service import SearchSyncService

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class SearchableRepository(BaseRepository[ModelType]):
    """Repository whose create/update/delete keep the search index in step.

    Passing sync_service registers it on this repository's hooks. Without
    one the repository behaves like BaseRepository and only the explicit
    collection operations touch the index.
    """

    def __init__(
        self,
        db: AsyncSession,
        model: type[ModelType],
        indexer: BulkIndexer,
        sync_service: SearchSyncService | None = None,
    ) -> None:
        super().__init__(db, model)
        self.indexer = indexer
        self.sync_service = sync_service
        if sync_service is not None:
            sync_service.register(self)

    def collect(self, records: Iterable[ModelType]) -> SearchableCollection:
        """Wrap records so they can be indexed, updated or removed in one bulk call."""
        return SearchableCollection(records, indexer=self.indexer)

    async def get_all_searchable(
        self, skip: int = 0, limit: int = 100
    ) -> SearchableCollection:
        return self.collect(await self.get_all(skip=skip, limit=limit))

    async def reindex_all(self, batch_size: int = 500) -> int:
        """Index every row of the table, batch_size rows per bulk call.

        Returns the number of records sent. A BulkSyncError from one batch
        stops the run; earlier batches stay indexed.
        """
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        pk = sa_inspect(self.model).primary_key[0]
        sent = 0
        offset = 0
        while True:
            result = await self.db.execute(
                select(self.model).order_by(pk).offset(offset).limit(batch_size)
            )
            batch: list[Any] = list(result.scalars().all())
            if not batch:
                break
            await self.indexer.index_all(batch)
            sent += len(batch)
            offset += batch_size
            logger.info("Re-indexed %d %s record(s)", sent, self.model.__name__)
        return sent
