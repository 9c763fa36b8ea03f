"""Result set over one search response: lazy hit mapping, limit and pagination.

Nothing here talks to the engine. Every view (limit, take, pages) slices the
hits already fetched by the single search call that produced the response.
"""

from __future__ import annotations

import math
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, overload

from searchsync.application.dtos.search import MappedResult, SearchHit
from searchsync.core.constants import DEFAULT_PER_PAGE
from searchsync.domain.exceptions import MappingError, ValidationException

if TYPE_CHECKING:
    from searchsync.application.interfaces.document_mapper import IDocumentMapper


def _parse_total(hits: Mapping[str, Any], fetched: int) -> tuple[int, str]:
    """hits.total as (value, relation); accepts the int and the object form."""
    total = hits.get("total")
    if total is None:
        return fetched, "eq"
    if isinstance(total, Mapping):
        return int(total.get("value", fetched)), str(total.get("relation", "eq"))
    return int(total), "eq"


class ResultSet(Sequence[MappedResult]):
    """Ordered, restartable sequence of MappedResult plus response metadata.

    Hits are mapped to records on first access and cached, so iterating
    twice maps (and searches) once.
    """

    def __init__(
        self,
        hits: Sequence[SearchHit],
        record_type: type,
        mapper: IDocumentMapper,
        *,
        total: int,
        total_relation: str = "eq",
        max_score: float | None = None,
        took: int | None = None,
        timed_out: bool = False,
        shards: Mapping[str, Any] | None = None,
        aggregations: Mapping[str, Any] | None = None,
    ) -> None:
        self._hits = list(hits)
        self.record_type = record_type
        self.mapper = mapper
        self.total = total
        self.total_relation = total_relation
        self.max_score = max_score
        self.took = took
        self.timed_out = timed_out
        self.shards = dict(shards or {})
        self.aggregations = dict(aggregations or {})
        self._mapped: list[MappedResult] | None = None

    @classmethod
    def from_response(
        cls,
        response: Mapping[str, Any],
        record_type: type,
        mapper: IDocumentMapper,
    ) -> ResultSet:
        """Wrap a raw search response. Raises MappingError when it has no hits section."""
        hits_section = response.get("hits")
        if not isinstance(hits_section, Mapping):
            raise MappingError(
                "Search response has no 'hits' section", record_type=record_type.__name__
            )
        raw_hits = hits_section.get("hits") or []
        hits = [SearchHit.from_raw(raw) for raw in raw_hits]
        total, relation = _parse_total(hits_section, len(hits))
        return cls(
            hits,
            record_type,
            mapper,
            total=total,
            total_relation=relation,
            max_score=hits_section.get("max_score"),
            took=response.get("took"),
            timed_out=bool(response.get("timed_out", False)),
            shards=response.get("_shards"),
            aggregations=response.get("aggregations"),
        )

    @property
    def hits(self) -> list[SearchHit]:
        return list(self._hits)

    def _results(self) -> list[MappedResult]:
        if self._mapped is None:
            self._mapped = [
                self.mapper.from_hit(hit, self.record_type) for hit in self._hits
            ]
        return self._mapped

    def __iter__(self) -> Iterator[MappedResult]:
        return iter(self._results())

    def __len__(self) -> int:
        return len(self._hits)

    @overload
    def __getitem__(self, index: int) -> MappedResult: ...

    @overload
    def __getitem__(self, index: slice) -> list[MappedResult]: ...

    def __getitem__(self, index: int | slice) -> MappedResult | list[MappedResult]:
        return self._results()[index]

    def __repr__(self) -> str:
        return (
            f"<ResultSet {self.record_type.__name__} fetched={len(self)} "
            f"total={self.total}>"
        )

    def first(self) -> MappedResult | None:
        return self[0] if self._hits else None

    def records(self) -> list[Any]:
        """Plain records, without derived metadata."""
        return [r.record for r in self]

    def _view(self, hits: Sequence[SearchHit]) -> ResultSet:
        view = ResultSet(
            hits,
            self.record_type,
            self.mapper,
            total=self.total,
            total_relation=self.total_relation,
            max_score=self.max_score,
            took=self.took,
            timed_out=self.timed_out,
            shards=self.shards,
            aggregations=self.aggregations,
        )
        if self._mapped is not None:
            view._mapped = self._mapped[: len(hits)]
        return view

    def limit(self, n: int) -> ResultSet:
        """View over the first n fetched results; total and other metadata unchanged."""
        if n < 0:
            raise ValidationException("limit must be >= 0", field="limit")
        return self._view(self._hits[:n])

    take = limit

    def paginate(self, per_page: int = DEFAULT_PER_PAGE) -> Paginator:
        """Page-at-a-time view over the fetched results (see Paginator)."""
        return Paginator(self, per_page)


@dataclass(frozen=True)
class Page:
    """One page of results, shaped for offset/limit pagination."""

    items: list[MappedResult]
    number: int
    per_page: int
    total: int
    last_page: int

    @property
    def offset(self) -> int:
        return (self.number - 1) * self.per_page

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.last_page

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[MappedResult]:
        return iter(self.items)


class Paginator:
    """Splits a ResultSet into pages of per_page results.

    total and last_page follow the response total, which can exceed the hits
    actually fetched (bounded by the request size). Pages past the fetched
    hits exist and are empty; they are never fetched from the engine.
    """

    def __init__(self, results: ResultSet, per_page: int = DEFAULT_PER_PAGE) -> None:
        if per_page < 1:
            raise ValidationException("per_page must be >= 1", field="per_page")
        self.results = results
        self.per_page = per_page

    @property
    def total(self) -> int:
        return self.results.total

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))

    def page(self, number: int = 1) -> Page:
        if number < 1:
            raise ValidationException("page must be >= 1", field="page")
        start = (number - 1) * self.per_page
        items = list(self.results[start : start + self.per_page])
        return Page(
            items=items,
            number=number,
            per_page=self.per_page,
            total=self.total,
            last_page=self.last_page,
        )

    def __iter__(self) -> Iterator[Page]:
        for number in range(1, self.last_page + 1):
            yield self.page(number)

    def __len__(self) -> int:
        return self.last_page
