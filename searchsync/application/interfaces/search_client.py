"""Search client interface (port) consumed by the sync and search services.

Implementations translate client-library failures into TransportError,
EngineError and DocumentNotFoundError from searchsync.domain.exceptions.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from searchsync.application.dtos.search import BulkItemResult, IndexReference


class ISearchClient(Protocol):
    """Protocol for the search engine adapter. All calls await the round-trip."""

    async def index_one(self, ref: IndexReference, document: Mapping[str, Any]) -> None:
        """Create or replace the document at ref."""

    async def update_one(self, ref: IndexReference, document: Mapping[str, Any]) -> None:
        """Partially update the document at ref. Raises DocumentNotFoundError if missing."""

    async def delete_one(self, ref: IndexReference) -> None:
        """Delete the document at ref. Raises DocumentNotFoundError if missing."""

    async def get_one(self, ref: IndexReference) -> dict[str, Any]:
        """Return the raw stored document (with _source). Raises DocumentNotFoundError."""

    async def bulk_index(
        self, entries: Sequence[tuple[IndexReference, Mapping[str, Any]]]
    ) -> list[BulkItemResult]:
        """Index many documents in one request; outcomes aligned with entries."""

    async def bulk_update(
        self, entries: Sequence[tuple[IndexReference, Mapping[str, Any]]]
    ) -> list[BulkItemResult]:
        """Partially update many documents in one request; outcomes aligned with entries."""

    async def bulk_delete(self, refs: Sequence[IndexReference]) -> list[BulkItemResult]:
        """Delete many documents in one request; outcomes aligned with refs."""

    async def search(
        self, index: str, doc_type: str, params: Mapping[str, Any]
    ) -> dict[str, Any]:
        """Run a search with request body params; return the raw response."""

    async def create_index(
        self,
        index: str,
        doc_type: str,
        settings: Mapping[str, Any] | None = None,
        mappings: Mapping[str, Any] | None = None,
    ) -> None:
        """Create the index for doc_type with optional settings and mapping properties."""

    async def delete_index(self, index: str, doc_type: str) -> None:
        """Delete the index for doc_type. Raises DocumentNotFoundError if missing."""

    async def index_exists(self, index: str, doc_type: str) -> bool:
        """Return True if the index for doc_type exists."""

    async def put_mapping(
        self, index: str, doc_type: str, properties: Mapping[str, Any]
    ) -> None:
        """Add or update mapping properties on the index for doc_type."""

    async def get_mapping(self, index: str, doc_type: str) -> dict[str, Any]:
        """Return the mapping properties of the index for doc_type."""

    async def refresh(self, index: str, doc_type: str) -> None:
        """Make recent writes on the index for doc_type visible to search."""

    async def close(self) -> None:
        """Release transport resources."""
