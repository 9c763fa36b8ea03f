"""Domain exceptions for searchsync.

Defines the error taxonomy shared by the mapper, the sync controller, the
bulk indexer and the search adapter. The adapter translates client-library
errors into these so callers never handle Elasticsearch exception types.
"""

from __future__ import annotations

from typing import Any


class SearchSyncException(Exception):
    """Base exception for all searchsync errors.

    All custom exceptions inherit from this class to allow consistent
    error handling and logging.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. index, document id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(SearchSyncException):
    """Raised when input validation fails (e.g. empty field list or reserved param)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or parameter that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(SearchSyncException):
    """Raised when a requested relational row is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (usually the model class name).
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class SqlNotConfiguredException(SearchSyncException):
    """Raised when an operation requires a SQL database but DATABASE_URL is empty."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SQL_NOT_CONFIGURED",
        )


class TransportError(SearchSyncException):
    """Network or timeout failure talking to the search engine. Never retried internally."""

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Search transport failed during {operation}: {reason}",
            "SEARCH_TRANSPORT_ERROR",
            {"operation": operation, "reason": reason},
        )


class EngineError(SearchSyncException):
    """The search engine rejected the operation (version conflict, mapping mismatch, ...).

    Attributes:
        status: HTTP status reported by the engine, when known.
        error_type: Engine error type (e.g. 'version_conflict_engine_exception').
        reason: Engine-provided reason text.
        document_id: Document the error refers to, when known.
    """

    error_code_default = "SEARCH_ENGINE_ERROR"

    def __init__(
        self,
        reason: str,
        *,
        status: int | None = None,
        error_type: str | None = None,
        document_id: str | None = None,
    ) -> None:
        self.status = status
        self.error_type = error_type
        self.reason = reason
        self.document_id = document_id
        details: dict[str, Any] = {"reason": reason}
        if status is not None:
            details["status"] = status
        if error_type:
            details["error_type"] = error_type
        if document_id is not None:
            details["document_id"] = document_id
        label = f"{error_type}: {reason}" if error_type else reason
        super().__init__(
            f"Search engine rejected operation: {label}",
            self.error_code_default,
            details,
        )

    @property
    def is_not_found(self) -> bool:
        """True when the engine classified the failure as a missing document or index."""
        return False


class DocumentNotFoundError(EngineError):
    """Engine reported 404 for the addressed document (or its index)."""

    error_code_default = "SEARCH_DOCUMENT_NOT_FOUND"

    @property
    def is_not_found(self) -> bool:
        return True


class MappingError(SearchSyncException):
    """Malformed hit or record during conversion (record schema vs stored document mismatch)."""

    def __init__(self, message: str, record_type: str | None = None) -> None:
        details = {"record_type": record_type} if record_type else {}
        super().__init__(message, "SEARCH_MAPPING_ERROR", details)


class BulkSyncError(SearchSyncException):
    """Aggregate failure of a bulk operation, raised after every item was attempted.

    Attributes:
        operation: 'index', 'update' or 'delete'.
        failures: (document id, underlying EngineError) per failed item, in input order.
        succeeded_ids: Ids of items that were applied.
    """

    def __init__(
        self,
        operation: str,
        failures: list[tuple[str, EngineError]],
        succeeded_ids: list[str] | None = None,
    ) -> None:
        self.operation = operation
        self.failures = failures
        self.succeeded_ids = succeeded_ids or []
        super().__init__(
            f"Bulk {operation} failed for {len(failures)} document(s)",
            "SEARCH_BULK_SYNC_ERROR",
            {
                "operation": operation,
                "failed": [
                    {"id": doc_id, "reason": err.reason, "error_type": err.error_type}
                    for doc_id, err in failures
                ],
                "succeeded_ids": list(self.succeeded_ids),
            },
        )

    @property
    def failed_ids(self) -> list[str]:
        """Ids of the failed items, in input order."""
        return [doc_id for doc_id, _ in self.failures]
