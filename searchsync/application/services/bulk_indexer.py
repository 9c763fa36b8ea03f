"""Bulk indexer: one bulk request per collection-level sync operation.

Every item is attempted. Failures are gathered and raised once, as a
BulkSyncError listing each failed id with its EngineError, after the whole
batch has been sent. Batch sizing is left to the caller.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from searchsync.application.dtos.search import BulkItemResult, IndexReference
from searchsync.domain.exceptions import BulkSyncError, DocumentNotFoundError, EngineError
from searchsync.shared.enums import BulkOperation

if TYPE_CHECKING:
    from searchsync.application.interfaces.document_mapper import IDocumentMapper
    from searchsync.application.interfaces.search_client import ISearchClient

logger = logging.getLogger(__name__)


def _item_error(item: BulkItemResult) -> EngineError:
    reason = item.reason or f"bulk item failed with status {item.status}"
    error_cls = DocumentNotFoundError if item.not_found else EngineError
    return error_cls(
        reason, status=item.status, error_type=item.error_type, document_id=item.ref.id
    )


def _raise_on_failures(operation: BulkOperation, results: list[BulkItemResult]) -> None:
    failures = [(r.ref.id, _item_error(r)) for r in results if not r.ok]
    if failures:
        succeeded = [r.ref.id for r in results if r.ok]
        logger.warning(
            "Bulk %s: %d of %d document(s) failed",
            operation.value,
            len(failures),
            len(results),
        )
        raise BulkSyncError(operation.value, failures, succeeded)


class BulkIndexer:
    """Index, update and remove many records' documents with one bulk call each."""

    def __init__(
        self,
        client: ISearchClient,
        mapper: IDocumentMapper,
        index_name: str,
    ) -> None:
        self.client = client
        self.mapper = mapper
        self.index_name = index_name

    def _entries(
        self,
        records: Iterable[Any],
        overrides: Mapping[str, Any] | None = None,
    ) -> list[tuple[IndexReference, dict[str, Any]]]:
        return [
            (
                self.mapper.reference_for(record, self.index_name),
                self.mapper.to_document(record, overrides),
            )
            for record in records
        ]

    async def index_all(self, records: Iterable[Any]) -> list[BulkItemResult]:
        """Index every record. Raises BulkSyncError if any item failed."""
        entries = self._entries(records)
        if not entries:
            return []
        results = await self.client.bulk_index(entries)
        _raise_on_failures(BulkOperation.INDEX, results)
        return results

    async def update_all_indexes(
        self,
        records: Iterable[Any],
        overrides: Mapping[str, Any] | None = None,
    ) -> list[BulkItemResult]:
        """Update every record's document; documents that are missing get indexed.

        Missing documents are re-sent in one follow-up bulk index call and
        their outcome there replaces the not-found outcome. overrides apply
        to every document and are not persisted.
        """
        entries = self._entries(records, overrides)
        if not entries:
            return []
        results = await self.client.bulk_update(entries)
        missing = [i for i, r in enumerate(results) if r.not_found]
        if missing:
            logger.warning(
                "Bulk update: %d document(s) missing; indexing them instead", len(missing)
            )
            healed = await self.client.bulk_index([entries[i] for i in missing])
            for position, outcome in zip(missing, healed, strict=True):
                results[position] = outcome
        _raise_on_failures(BulkOperation.UPDATE, results)
        return results

    async def remove_all_indexes(self, records: Iterable[Any]) -> list[BulkItemResult]:
        """Delete every record's document; already-absent documents count as removed."""
        refs = [self.mapper.reference_for(record, self.index_name) for record in records]
        if not refs:
            return []
        results = await self.client.bulk_delete(refs)
        results = [
            BulkItemResult(ref=r.ref, ok=True, status=r.status) if r.not_found else r
            for r in results
        ]
        _raise_on_failures(BulkOperation.DELETE, results)
        return results

    async def reindex(self, records: Sequence[Any]) -> list[BulkItemResult]:
        """Remove then re-index every record (fresh documents, no partial merges)."""
        await self.remove_all_indexes(records)
        return await self.index_all(records)


class SearchableCollection(list):
    """Ordered list of records with collection-level search sync operations.

    index() is the bulk index coroutine and shadows list.index; use
    position(record) for the element lookup. Everything else behaves as a
    list, and slicing returns plain lists.
    """

    def __init__(self, records: Iterable[Any] = (), *, indexer: BulkIndexer) -> None:
        super().__init__(records)
        self.indexer = indexer

    def position(self, record: Any, start: int = 0, stop: int = sys.maxsize) -> int:
        """list.index(record, start, stop); raises ValueError when absent."""
        return list.index(self, record, start, stop)

    async def index(self) -> list[BulkItemResult]:
        return await self.indexer.index_all(self)

    async def update_index(
        self, overrides: Mapping[str, Any] | None = None
    ) -> list[BulkItemResult]:
        return await self.indexer.update_all_indexes(self, overrides)

    async def remove_index(self) -> list[BulkItemResult]:
        return await self.indexer.remove_all_indexes(self)

    async def reindex(self) -> list[BulkItemResult]:
        return await self.indexer.reindex(self)
