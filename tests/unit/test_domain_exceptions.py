"""Tests for domain exceptions (error_code, message, details)."""

from searchsync.domain.exceptions import (
    BulkSyncError,
    DocumentNotFoundError,
    EngineError,
    MappingError,
    ResourceNotFoundException,
    SearchSyncException,
    SqlNotConfiguredException,
    TransportError,
    ValidationException,
)


def test_base_exception_default_error_code() -> None:
    """Base SearchSyncException uses class name as error_code when not provided."""
    exc = SearchSyncException("Something failed")
    assert exc.message == "Something failed"
    assert exc.error_code == "SearchSyncException"
    assert exc.details == {}
    assert str(exc) == "Something failed"


def test_base_exception_custom_error_code_and_details() -> None:
    exc = SearchSyncException("Oops", error_code="CUSTOM", details={"key": "value"})
    assert exc.error_code == "CUSTOM"
    assert exc.details == {"key": "value"}


def test_validation_exception() -> None:
    """ValidationException sets VALIDATION_ERROR and optional field in details."""
    exc = ValidationException("Invalid size", field="size")
    assert exc.error_code == "VALIDATION_ERROR"
    assert exc.details == {"field": "size"}
    assert ValidationException("Invalid").details == {}


def test_resource_not_found_exception() -> None:
    exc = ResourceNotFoundException("Product", "p1")
    assert exc.message == "Product not found: p1"
    assert exc.error_code == "RESOURCE_NOT_FOUND"
    assert exc.details == {"resource_type": "Product", "resource_id": "p1"}


def test_sql_not_configured_exception() -> None:
    assert SqlNotConfiguredException().error_code == "SQL_NOT_CONFIGURED"


def test_transport_error() -> None:
    exc = TransportError("bulk_index", "timed out after 10s")
    assert exc.error_code == "SEARCH_TRANSPORT_ERROR"
    assert exc.message == "Search transport failed during bulk_index: timed out after 10s"
    assert exc.details == {"operation": "bulk_index", "reason": "timed out after 10s"}


def test_engine_error_keeps_engine_fields() -> None:
    exc = EngineError(
        "version conflict", status=409, error_type="version_conflict_engine_exception", document_id="p1"
    )
    assert exc.error_code == "SEARCH_ENGINE_ERROR"
    assert exc.message == "Search engine rejected operation: version_conflict_engine_exception: version conflict"
    assert exc.details == {
        "reason": "version conflict",
        "status": 409,
        "error_type": "version_conflict_engine_exception",
        "document_id": "p1",
    }
    assert not exc.is_not_found


def test_document_not_found_is_engine_error() -> None:
    exc = DocumentNotFoundError("missing", status=404)
    assert isinstance(exc, EngineError)
    assert exc.error_code == "SEARCH_DOCUMENT_NOT_FOUND"
    assert exc.is_not_found
    assert exc.message == "Search engine rejected operation: missing"


def test_mapping_error() -> None:
    exc = MappingError("bad hit", record_type="Product")
    assert exc.error_code == "SEARCH_MAPPING_ERROR"
    assert exc.details == {"record_type": "Product"}


def test_bulk_sync_error_lists_failures_and_successes() -> None:
    cause = EngineError("bad price", status=400, error_type="mapper_parsing_exception")
    exc = BulkSyncError("index", [("b", cause)], ["a", "c"])
    assert exc.error_code == "SEARCH_BULK_SYNC_ERROR"
    assert exc.message == "Bulk index failed for 1 document(s)"
    assert exc.failed_ids == ["b"]
    assert exc.succeeded_ids == ["a", "c"]
    assert exc.details["failed"] == [
        {"id": "b", "reason": "bad price", "error_type": "mapper_parsing_exception"}
    ]
    assert isinstance(exc, SearchSyncException)
