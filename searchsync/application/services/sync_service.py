"""Search sync controller: keeps one record's document in step with its row.

Runs inside the repository call that mutated the record (after flush), so a
failure surfaces to the caller of create/update/delete. Only two failures
are absorbed: update of a missing document re-indexes it, and delete of a
missing document counts as done.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from searchsync.domain.exceptions import DocumentNotFoundError
from searchsync.shared.enums import LifecycleEvent

if TYPE_CHECKING:
    from searchsync.application.interfaces.document_mapper import IDocumentMapper
    from searchsync.application.interfaces.search_client import ISearchClient
    from searchsync.infrastructure.persistence.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class SearchSyncService:
    """Index, update and delete single documents for searchable records."""

    def __init__(
        self,
        client: ISearchClient,
        mapper: IDocumentMapper,
        index_name: str,
    ) -> None:
        self.client = client
        self.mapper = mapper
        self.index_name = index_name

    def _handlers(self) -> dict[LifecycleEvent, Any]:
        return {
            LifecycleEvent.AFTER_CREATE: self.on_create,
            LifecycleEvent.AFTER_UPDATE: self.on_update,
            LifecycleEvent.AFTER_DELETE: self.on_delete,
        }

    def register(self, repository: BaseRepository) -> None:
        """Subscribe on_create/on_update/on_delete to the repository's lifecycle hooks."""
        for event, handler in self._handlers().items():
            repository.hooks.subscribe(event, handler)
        logger.debug(
            "Search sync registered for %s (index %s)",
            repository.model.__name__,
            self.index_name,
        )

    def unregister(self, repository: BaseRepository) -> None:
        """Remove this service's handlers from the repository's lifecycle hooks."""
        for event, handler in self._handlers().items():
            repository.hooks.unsubscribe(event, handler)

    async def on_create(self, record: Any) -> None:
        """Index a newly created record. Errors propagate; no retry."""
        await self.index(record)

    async def on_update(self, record: Any) -> None:
        """Update the record's document, re-indexing it when it is missing."""
        await self.update_index(record)

    async def on_delete(self, record: Any) -> None:
        """Delete the record's document; a missing document is not an error."""
        await self.remove_index(record)

    async def index(self, record: Any) -> None:
        ref = self.mapper.reference_for(record, self.index_name)
        await self.client.index_one(ref, self.mapper.to_document(record))

    async def update_index(
        self, record: Any, overrides: Mapping[str, Any] | None = None
    ) -> None:
        """Push the record's current state (plus overrides) to its document.

        overrides change only the document, never the row: the index and the
        database diverge on those fields until the next real update.
        """
        ref = self.mapper.reference_for(record, self.index_name)
        document = self.mapper.to_document(record, overrides)
        try:
            await self.client.update_one(ref, document)
        except DocumentNotFoundError:
            logger.warning(
                "Document %s/%s missing on update; indexing it instead",
                ref.doc_type,
                ref.id,
            )
            await self.client.index_one(ref, document)

    async def remove_index(self, record: Any) -> None:
        ref = self.mapper.reference_for(record, self.index_name)
        try:
            await self.client.delete_one(ref)
        except DocumentNotFoundError:
            logger.debug("Document %s/%s already absent on delete", ref.doc_type, ref.id)

    async def get_indexed_document(self, record: Any) -> dict[str, Any]:
        """Raw stored document for record. Raises DocumentNotFoundError when absent."""
        ref = self.mapper.reference_for(record, self.index_name)
        return await self.client.get_one(ref)
