"""Request-body builders for common query shapes.

Each *_query function returns a complete search body ({"query": {...}})
equivalent to what a caller would write by hand. build_search_body adds the
request options (size, from, sort, highlight, _source, aggs). Index name and
document type never appear in a body: the search service resolves them.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from searchsync.core.constants import (
    DEFAULT_FUZZINESS,
    DEFAULT_GEOSHAPE_TYPE,
    DEFAULT_MLT_MIN_TERM_FREQ,
    DEFAULT_MLT_MIN_WORD_LENGTH,
    DEFAULT_MLT_PERCENT_TERMS_TO_MATCH,
)
from searchsync.domain.exceptions import ValidationException


def _require_field(field: str, name: str = "field") -> None:
    if not isinstance(field, str) or not field.strip():
        raise ValidationException(f"{name} must be a non-empty string", field=name)


def _require_fields(fields: Sequence[str], name: str = "fields") -> list[str]:
    if isinstance(fields, str) or not fields:
        raise ValidationException(f"{name} must be a non-empty list of field names", field=name)
    for f in fields:
        _require_field(f, name)
    return list(fields)


def _require_values(values: Sequence[Any], name: str) -> list[Any]:
    if isinstance(values, str) or not values:
        raise ValidationException(f"{name} must be a non-empty list", field=name)
    return list(values)


def match_query(field: str, query: Any) -> dict[str, Any]:
    _require_field(field)
    return {"query": {"match": {field: query}}}


def multi_match_query(fields: Sequence[str], query: Any) -> dict[str, Any]:
    return {
        "query": {"multi_match": {"fields": _require_fields(fields), "query": query}}
    }


def fuzzy_query(
    field: str, value: Any, fuzziness: str | int = DEFAULT_FUZZINESS
) -> dict[str, Any]:
    _require_field(field)
    return {"query": {"fuzzy": {field: {"value": value, "fuzziness": fuzziness}}}}


def geoshape_query(
    field: str,
    coordinates: Sequence[Any],
    shape_type: str = DEFAULT_GEOSHAPE_TYPE,
) -> dict[str, Any]:
    """geo_shape query; coordinates follow GeoJSON order ([lon, lat] pairs)."""
    _require_field(field)
    coords = _require_values(coordinates, "coordinates")
    return {
        "query": {
            "geo_shape": {
                field: {"shape": {"type": shape_type, "coordinates": coords}}
            }
        }
    }


def ids_query(values: Sequence[Any]) -> dict[str, Any]:
    ids = [str(v) for v in _require_values(values, "values")]
    return {"query": {"ids": {"values": ids}}}


def _whole_percent(fraction: float) -> str:
    # minimum_should_match takes whole percentages; round down like the engine.
    # round() first so 0.29 * 100 == 28.999... still reads as 29.
    return f"{int(round(fraction * 100, 6))}%"


def more_like_this_query(
    fields: Sequence[str],
    ids: Sequence[Any],
    min_term_freq: int = DEFAULT_MLT_MIN_TERM_FREQ,
    percent_terms_to_match: float = DEFAULT_MLT_PERCENT_TERMS_TO_MATCH,
    min_word_length: int = DEFAULT_MLT_MIN_WORD_LENGTH,
) -> dict[str, Any]:
    """more_like_this over documents ids (of the same index/type).

    percent_terms_to_match is a fraction in [0, 1], sent as the
    minimum_should_match percentage ("50%" for 0.5).
    """
    if min_term_freq < 0:
        raise ValidationException("min_term_freq must be >= 0", field="min_term_freq")
    if min_word_length < 0:
        raise ValidationException("min_word_length must be >= 0", field="min_word_length")
    if not 0 <= percent_terms_to_match <= 1:
        raise ValidationException(
            "percent_terms_to_match must be between 0 and 1",
            field="percent_terms_to_match",
        )
    return {
        "query": {
            "more_like_this": {
                "fields": _require_fields(fields),
                "ids": [str(i) for i in _require_values(ids, "ids")],
                "min_term_freq": min_term_freq,
                "minimum_should_match": _whole_percent(percent_terms_to_match),
                "min_word_length": min_word_length,
            }
        }
    }


def _highlight_body(highlight: Sequence[str] | Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(highlight, Mapping):
        return dict(highlight)
    return {"fields": {f: {} for f in _require_fields(highlight, "highlight")}}


def build_search_body(
    query: Mapping[str, Any] | None = None,
    *,
    size: int | None = None,
    offset: int | None = None,
    sort: Sequence[Any] | Mapping[str, Any] | None = None,
    highlight: Sequence[str] | Mapping[str, Any] | None = None,
    source: bool | Sequence[str] | None = None,
    aggregations: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Assemble a search body.

    query may be a bare query clause ({"match": {...}}) or a body already
    holding "query" (as returned by the *_query builders).
    """
    body: dict[str, Any] = {}
    if query:
        body.update(query if "query" in query else {"query": dict(query)})
    if size is not None:
        if size < 0:
            raise ValidationException("size must be >= 0", field="size")
        body["size"] = size
    if offset is not None:
        if offset < 0:
            raise ValidationException("offset must be >= 0", field="offset")
        body["from"] = offset
    if sort:
        body["sort"] = sort if isinstance(sort, Mapping) else list(sort)
    if highlight:
        body["highlight"] = _highlight_body(highlight)
    if source is not None:
        body["_source"] = source if isinstance(source, bool) else list(source)
    if aggregations:
        body["aggs"] = dict(aggregations)
    return body
