"""Application DTOs (no dependency on ORM or the search client library)."""

from searchsync.application.dtos.search import (
    BulkItemResult,
    IndexReference,
    MappedResult,
    SearchHit,
)

__all__ = ["BulkItemResult", "IndexReference", "MappedResult", "SearchHit"]
