"""Mapping between searchable ORM records and search documents / hits.

to_document projects a record's column attributes (never relationships) into
a JSON-serializable body. from_hit rebuilds a transient record of the given
model from a hit's _source (scalar "fields" entries unwrapped and merged over
it) and attaches score, version and highlight fragments in a side mapping.
"""

from __future__ import annotations

import base64
import enum
import logging
import re
import uuid
from collections.abc import Iterable, Mapping
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

from sqlalchemy import ARRAY, JSON, Date, DateTime, Integer, Numeric, Time
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import ColumnProperty, Mapper

from searchsync.application.dtos.search import IndexReference, MappedResult, SearchHit
from searchsync.core.constants import SCORE_ATTRIBUTE, VERSION_ATTRIBUTE
from searchsync.domain.exceptions import MappingError
from searchsync.shared.utils.naming import highlight_attribute_name

logger = logging.getLogger(__name__)

# Characters not allowed in an index name, and forbidden leading characters
_INVALID_TYPE_CHARS = re.compile(r'[\\/*?"<>|,#:\s]|^[-_+]')


def _mapper_for(record_type: type) -> Mapper:
    try:
        return sa_inspect(record_type)
    except NoInspectionAvailable as e:
        raise MappingError(
            f"{record_type.__name__} is not a mapped SQLAlchemy model",
            record_type=record_type.__name__,
        ) from e


def _primary_key_property(mapper: Mapper) -> ColumnProperty:
    if len(mapper.primary_key) != 1:
        raise MappingError(
            f"{mapper.class_.__name__} must have exactly one primary key column to be searchable",
            record_type=mapper.class_.__name__,
        )
    return mapper.get_property_by_column(mapper.primary_key[0])


def serialize_value(value: Any) -> Any:
    """Convert a column value into its JSON document form (deterministic)."""
    # Enum first: str/int enums would otherwise pass through as members
    if isinstance(value, enum.Enum):
        return serialize_value(value.value)
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return base64.b64encode(bytes(value)).decode("ascii")
    if isinstance(value, Mapping):
        return {str(k): serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [serialize_value(v) for v in value]
        if isinstance(value, (set, frozenset)):
            items.sort(key=repr)
        return items
    raise MappingError(f"Cannot serialize value of type {type(value).__name__}")


def _coerce_for_column(prop: ColumnProperty, value: Any) -> Any:
    """Parse a document value back into the Python type of the column."""
    if value is None:
        return None
    column_type = prop.columns[0].type
    if isinstance(value, str):
        if isinstance(column_type, DateTime):
            return datetime.fromisoformat(value)
        if isinstance(column_type, Date):
            return date.fromisoformat(value)
        if isinstance(column_type, Time):
            return time.fromisoformat(value)
        if isinstance(column_type, Numeric) and column_type.asdecimal:
            return Decimal(value)
        if isinstance(column_type, Integer):
            return int(value)
    enum_class = getattr(column_type, "enum_class", None)
    if enum_class is not None and not isinstance(value, enum_class):
        return enum_class(value)
    return value


def _unwrap_field_value(prop: ColumnProperty, values: Any) -> Any:
    """Reduce a hit "fields" entry (always an array on the wire) to a column value.

    ARRAY and JSON columns keep the list. Scalar columns take the single
    element; an empty list reads as None and several values raise ValueError.
    """
    if not isinstance(values, list) or isinstance(prop.columns[0].type, (ARRAY, JSON)):
        return values
    if not values:
        return None
    if len(values) > 1:
        raise ValueError(f"expected one value, got {len(values)}")
    return values[0]


class DocumentMapper:
    """Converts records to search documents and search hits back to records.

    Args:
        exclude: Column names never sent to the index, for every model
            (in addition to each model's __search_exclude__).
        flatten_single_highlight: When True, a highlighted field with exactly
            one fragment is exposed as that fragment instead of a list.
    """

    def __init__(
        self,
        exclude: Iterable[str] = (),
        *,
        flatten_single_highlight: bool = False,
    ) -> None:
        self.exclude = frozenset(exclude)
        self.flatten_single_highlight = flatten_single_highlight

    def excluded_fields(self, record_type: type) -> frozenset[str]:
        search_exclude = getattr(record_type, "search_exclude", None)
        if callable(search_exclude):
            return self.exclude | search_exclude()
        return self.exclude

    def document_type(self, record_type: type) -> str:
        """Search type of record_type; part of the physical index name.

        Raises MappingError when it is not a valid lowercase index name part.
        """
        search_type = getattr(record_type, "search_type", None)
        if callable(search_type):
            doc_type = search_type()
        else:
            doc_type = _mapper_for(record_type).local_table.name
        if not doc_type or doc_type != doc_type.lower() or _INVALID_TYPE_CHARS.search(doc_type):
            raise MappingError(
                f"Search type of {record_type.__name__} must be a lowercase index name "
                f"part, got: {doc_type!r}",
                record_type=record_type.__name__,
            )
        return doc_type

    def record_id(self, record: Any) -> str:
        """String form of the record primary key. Raises MappingError when unset."""
        mapper = _mapper_for(type(record))
        pk = _primary_key_property(mapper)
        value = getattr(record, pk.key)
        if value is None:
            raise MappingError(
                f"{type(record).__name__} has no primary key value; flush it before syncing",
                record_type=type(record).__name__,
            )
        return str(value)

    def reference_for(self, record: Any, index: str) -> IndexReference:
        return IndexReference(
            index=index,
            doc_type=self.document_type(type(record)),
            id=self.record_id(record),
        )

    def to_document(
        self,
        record: Any,
        overrides: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Project the record's persisted columns into a document body.

        overrides are merged last (serialized the same way) and are never
        written back to the record.
        """
        record_type = type(record)
        mapper = _mapper_for(record_type)
        excluded = self.excluded_fields(record_type)
        document: dict[str, Any] = {}
        for prop in mapper.column_attrs:
            if prop.key in excluded:
                continue
            document[prop.key] = serialize_value(getattr(record, prop.key))
        if overrides:
            for key, value in overrides.items():
                document[key] = serialize_value(value)
        return document

    def from_hit(self, hit: SearchHit, record_type: type) -> MappedResult:
        """Rebuild a transient record_type instance from hit plus derived metadata.

        Raises MappingError when no identifier is available (neither the
        source primary key nor the hit _id) or a value does not fit its column.
        """
        mapper = _mapper_for(record_type)
        pk = _primary_key_property(mapper)
        attributes: dict[str, Any] = dict(hit.source)
        fields = hit.fields or {}
        if attributes.get(pk.key) is None and fields.get(pk.key) is None:
            if hit.id is None:
                raise MappingError(
                    f"Search hit for {record_type.__name__} has no '{pk.key}' and no _id",
                    record_type=record_type.__name__,
                )
            attributes[pk.key] = hit.id

        kwargs: dict[str, Any] = {}
        for prop in mapper.column_attrs:
            if prop.key not in attributes and prop.key not in fields:
                continue
            try:
                if prop.key in fields:
                    value = _unwrap_field_value(prop, fields[prop.key])
                else:
                    value = attributes[prop.key]
                kwargs[prop.key] = _coerce_for_column(prop, value)
            except (TypeError, ValueError, InvalidOperation) as e:
                raise MappingError(
                    f"Field '{prop.key}' of {record_type.__name__} cannot be read from "
                    f"search document: {e}",
                    record_type=record_type.__name__,
                ) from e
        record = record_type(**kwargs)

        derived: dict[str, Any] = {SCORE_ATTRIBUTE: hit.score}
        if hit.version is not None:
            derived[VERSION_ATTRIBUTE] = hit.version
        if hit.highlight:
            for field_name, fragments in hit.highlight.items():
                derived[highlight_attribute_name(field_name)] = self._highlight_value(
                    fragments
                )
        return MappedResult(record=record, derived=derived, source=hit.source)

    def _highlight_value(self, fragments: Any) -> Any:
        if (
            self.flatten_single_highlight
            and isinstance(fragments, list)
            and len(fragments) == 1
        ):
            return fragments[0]
        return fragments
