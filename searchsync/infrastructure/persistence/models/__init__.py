"""ORM mixins for searchable models. Application models live in the host project."""

from searchsync.infrastructure.persistence.models.mixins import (
    CuidMixin,
    SearchableMixin,
    SearchableModel,
    TimestampMixin,
)

__all__ = ["CuidMixin", "SearchableMixin", "SearchableModel", "TimestampMixin"]
