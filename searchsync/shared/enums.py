"""Shared enumerations for searchsync.

Cross-cutting enums used by application and infrastructure (record
lifecycle events, bulk operation kinds).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class LifecycleEvent(_ValuesMixin, str, Enum):
    """Record lifecycle points a repository emits after the row is flushed."""

    AFTER_CREATE = "after_create"
    AFTER_UPDATE = "after_update"
    AFTER_DELETE = "after_delete"


class BulkOperation(_ValuesMixin, str, Enum):
    """Bulk action kinds (also the action key in the bulk request and response)."""

    INDEX = "index"
    UPDATE = "update"
    DELETE = "delete"
