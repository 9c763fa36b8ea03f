"""Search infrastructure: Elasticsearch adapter, document mapper, factory."""

from searchsync.infrastructure.search.document_mapper import DocumentMapper
from searchsync.infrastructure.search.elasticsearch_client import (
    ElasticsearchClient,
    physical_index,
)
from searchsync.infrastructure.search.factory import SearchClientFactory

__all__ = [
    "DocumentMapper",
    "ElasticsearchClient",
    "SearchClientFactory",
    "physical_index",
]
