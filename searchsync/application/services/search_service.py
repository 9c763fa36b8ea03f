"""Record-type-scoped search: raw bodies, shorthand queries, typed result sets."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from searchsync.application.services import query_builder
from searchsync.application.services.result_set import ResultSet
from searchsync.core.constants import (
    DEFAULT_FUZZINESS,
    DEFAULT_GEOSHAPE_TYPE,
    DEFAULT_MLT_MIN_TERM_FREQ,
    DEFAULT_MLT_MIN_WORD_LENGTH,
    DEFAULT_MLT_PERCENT_TERMS_TO_MATCH,
    RESERVED_SEARCH_PARAMS,
)
from searchsync.domain.exceptions import ValidationException

if TYPE_CHECKING:
    from searchsync.application.interfaces.document_mapper import IDocumentMapper
    from searchsync.application.interfaces.search_client import ISearchClient

logger = logging.getLogger(__name__)


class ModelSearch:
    """Search documents of one record type and map hits back to that type.

    The index name comes from configuration and the document type from the
    model; callers only supply the request body.

    Args:
        record_type: Searchable model class.
        client: Search adapter.
        mapper: Document mapper (hit -> record).
        index_name: Configured index name.
        default_size: size applied when a body has none (None = engine default).
    """

    def __init__(
        self,
        record_type: type,
        client: ISearchClient,
        mapper: IDocumentMapper,
        index_name: str,
        default_size: int | None = None,
    ) -> None:
        self.record_type = record_type
        self.client = client
        self.mapper = mapper
        self.index_name = index_name
        self.default_size = default_size

    @property
    def doc_type(self) -> str:
        return self.mapper.document_type(self.record_type)

    async def search(self, params: Mapping[str, Any] | None = None) -> ResultSet:
        """Run a search with the given request body.

        Raises ValidationException when params carry 'index' or 'type'.
        """
        body = dict(params or {})
        reserved = RESERVED_SEARCH_PARAMS.intersection(body)
        if reserved:
            raise ValidationException(
                f"Search params must not set {', '.join(sorted(reserved))}; "
                "index and type come from configuration and the model",
                field=sorted(reserved)[0],
            )
        if self.default_size is not None and "size" not in body:
            body["size"] = self.default_size
        response = await self.client.search(self.index_name, self.doc_type, body)
        results = ResultSet.from_response(response, self.record_type, self.mapper)
        logger.debug(
            "Search on %s/%s returned %d of %d hit(s)",
            self.index_name,
            self.doc_type,
            len(results),
            results.total,
        )
        return results

    async def search_by_query(
        self,
        query: Mapping[str, Any] | None = None,
        aggregations: Mapping[str, Any] | None = None,
        source_fields: Sequence[str] | None = None,
        limit: int | None = None,
        offset: int | None = None,
        sort: Sequence[Any] | Mapping[str, Any] | None = None,
        highlight: Sequence[str] | Mapping[str, Any] | None = None,
    ) -> ResultSet:
        """Search with a query clause and common options, without hand-writing the body."""
        body = query_builder.build_search_body(
            query,
            size=limit,
            offset=offset,
            sort=sort,
            highlight=highlight,
            source=source_fields,
            aggregations=aggregations,
        )
        return await self.search(body)

    async def _shorthand(self, query: dict[str, Any], options: dict[str, Any]) -> ResultSet:
        return await self.search(query_builder.build_search_body(query, **options))

    async def match(self, field: str, query: Any, **options: Any) -> ResultSet:
        return await self._shorthand(query_builder.match_query(field, query), options)

    async def multi_match(
        self, fields: Sequence[str], query: Any, **options: Any
    ) -> ResultSet:
        return await self._shorthand(
            query_builder.multi_match_query(fields, query), options
        )

    async def fuzzy(
        self,
        field: str,
        value: Any,
        fuzziness: str | int = DEFAULT_FUZZINESS,
        **options: Any,
    ) -> ResultSet:
        return await self._shorthand(
            query_builder.fuzzy_query(field, value, fuzziness), options
        )

    async def geoshape(
        self,
        field: str,
        coordinates: Sequence[Any],
        shape_type: str = DEFAULT_GEOSHAPE_TYPE,
        **options: Any,
    ) -> ResultSet:
        return await self._shorthand(
            query_builder.geoshape_query(field, coordinates, shape_type), options
        )

    async def ids(self, values: Sequence[Any], **options: Any) -> ResultSet:
        return await self._shorthand(query_builder.ids_query(values), options)

    async def more_like_this(
        self,
        fields: Sequence[str],
        ids: Sequence[Any],
        min_term_freq: int = DEFAULT_MLT_MIN_TERM_FREQ,
        percent_terms_to_match: float = DEFAULT_MLT_PERCENT_TERMS_TO_MATCH,
        min_word_length: int = DEFAULT_MLT_MIN_WORD_LENGTH,
        **options: Any,
    ) -> ResultSet:
        return await self._shorthand(
            query_builder.more_like_this_query(
                fields, ids, min_term_freq, percent_terms_to_match, min_word_length
            ),
            options,
        )
