"""Application services: sync controller, bulk indexer, search, index admin."""

from searchsync.application.services.bulk_indexer import BulkIndexer, SearchableCollection
from searchsync.application.services.index_admin import IndexAdminService
from searchsync.application.services.result_set import Page, Paginator, ResultSet
from searchsync.application.services.search_service import ModelSearch
from searchsync.application.services.sync_service import SearchSyncService

__all__ = [
    "BulkIndexer",
    "IndexAdminService",
    "ModelSearch",
    "Page",
    "Paginator",
    "ResultSet",
    "SearchSyncService",
    "SearchableCollection",
]
