"""SQLAlchemy mixins for searchable models.

Provides: CuidMixin, TimestampMixin, SearchableMixin and the combined
SearchableModel.
"""

from datetime import datetime
from typing import Any, ClassVar

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from searchsync.shared.utils.generators import generate_cuid


class CuidMixin:
    """Mixin for models using CUID as primary key. Provides id with default generate_cuid."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_cuid)


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class SearchableMixin:
    """Per-model search configuration read by the mapper and index admin.

    Class attributes (all optional):
        __search_type__: document type; defaults to __tablename__.
        __search_exclude__: column attribute names never sent to the index.
        __search_mapping__: mapping properties used when creating the index.
        __search_settings__: index settings used when creating the index.
    """

    __search_type__: ClassVar[str | None] = None
    __search_exclude__: ClassVar[tuple[str, ...]] = ()
    __search_mapping__: ClassVar[dict[str, Any] | None] = None
    __search_settings__: ClassVar[dict[str, Any] | None] = None

    @classmethod
    def search_type(cls) -> str:
        """Document type for this model."""
        return cls.__search_type__ or getattr(cls, "__tablename__")

    @classmethod
    def search_exclude(cls) -> frozenset[str]:
        return frozenset(cls.__search_exclude__)


class SearchableModel(CuidMixin, TimestampMixin, SearchableMixin):
    """Combined mixin: CUID + created_at/updated_at + search configuration."""

    __abstract__ = True
