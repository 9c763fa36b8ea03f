"""DTOs for search sync: document addresses, raw hits, mapped results, bulk outcomes."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from searchsync.core.constants import SCORE_ATTRIBUTE, VERSION_ATTRIBUTE
from searchsync.domain.exceptions import MappingError


@dataclass(frozen=True)
class IndexReference:
    """Address of one search document: (index name, document type, document id).

    id is always the string form of the record primary key and doc_type the
    record's search type, for the lifetime of a synced record.
    """

    index: str
    doc_type: str
    id: str


@dataclass(frozen=True)
class SearchHit:
    """One entry of hits.hits in a search response (read-only view)."""

    id: str | None
    source: Mapping[str, Any]
    score: float | None = None
    highlight: Mapping[str, list[str]] | None = None
    version: int | None = None
    fields: Mapping[str, Any] | None = None
    index: str | None = None

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> SearchHit:
        """Parse a raw hit mapping. Raises MappingError when it is not a hit."""
        if not isinstance(raw, Mapping):
            raise MappingError(f"Search hit must be a mapping, got {type(raw).__name__}")
        source = raw.get("_source")
        if source is None:
            source = {}
        if not isinstance(source, Mapping):
            raise MappingError(
                f"Search hit _source must be a mapping, got {type(source).__name__}"
            )
        for key in ("highlight", "fields"):
            value = raw.get(key)
            if value is not None and not isinstance(value, Mapping):
                raise MappingError(
                    f"Search hit {key} must be a mapping, got {type(value).__name__}"
                )
        hit_id = raw.get("_id")
        return cls(
            id=str(hit_id) if hit_id is not None else None,
            source=source,
            score=raw.get("_score"),
            highlight=raw.get("highlight"),
            version=raw.get("_version"),
            fields=raw.get("fields"),
            index=raw.get("_index"),
        )


@dataclass
class MappedResult:
    """A record rebuilt from a search hit plus derived, non-persistent attributes.

    derived holds _score, _version (when the hit has one) and one
    highlighted<Field> entry per highlighted field. Attribute access falls
    through to the record, item access reads derived:

        result.title                   # record column
        result["highlightedTitle"]     # highlight fragments
    """

    record: Any
    derived: dict[str, Any] = field(default_factory=dict)
    source: Mapping[str, Any] = field(default_factory=dict)

    @property
    def score(self) -> float | None:
        return self.derived.get(SCORE_ATTRIBUTE)

    @property
    def version(self) -> int | None:
        return self.derived.get(VERSION_ATTRIBUTE)

    def __getattr__(self, name: str) -> Any:
        # Only called when normal lookup fails; never for record/derived/source.
        if name.startswith("__") or name in ("record", "derived", "source"):
            raise AttributeError(name)
        return getattr(self.record, name)

    def __getitem__(self, key: str) -> Any:
        return self.derived[key]

    def __contains__(self, key: object) -> bool:
        return key in self.derived

    def get(self, key: str, default: Any = None) -> Any:
        """Return a derived attribute or default."""
        return self.derived.get(key, default)


@dataclass(frozen=True)
class BulkItemResult:
    """Outcome of one item of a bulk call, aligned by position with the request."""

    ref: IndexReference
    ok: bool
    status: int | None = None
    error_type: str | None = None
    reason: str | None = None

    @property
    def not_found(self) -> bool:
        """True when the engine reported the document (or its index) missing."""
        return self.status == 404
