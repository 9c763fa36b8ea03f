"""Domain layer: exceptions.

No dependencies on infrastructure. Used by application and
infrastructure layers.
"""

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

__all__ = [
    "BulkSyncError",
    "DocumentNotFoundError",
    "EngineError",
    "MappingError",
    "ResourceNotFoundException",
    "SearchSyncException",
    "SqlNotConfiguredException",
    "TransportError",
    "ValidationException",
]
