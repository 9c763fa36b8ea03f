"""Document mapper interface (port): record <-> search document conversion."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from searchsync.application.dtos.search import IndexReference, MappedResult, SearchHit


class IDocumentMapper(Protocol):
    """Protocol for converting records into documents and hits into records."""

    def document_type(self, record_type: type) -> str:
        """Search document type of record_type."""

    def reference_for(self, record: Any, index: str) -> IndexReference:
        """Address of record's document in index. Raises MappingError without a key."""

    def to_document(
        self, record: Any, overrides: Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Deterministic document body for record, with optional unpersisted overrides."""

    def from_hit(self, hit: SearchHit, record_type: type) -> MappedResult:
        """Rebuild a record_type instance from hit. Raises MappingError on bad hits."""
