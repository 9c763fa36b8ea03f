"""Search client factory: builds the Elasticsearch adapter from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from elasticsearch import AsyncElasticsearch

from searchsync.application.interfaces.search_client import ISearchClient
from searchsync.infrastructure.search.document_mapper import DocumentMapper
from searchsync.infrastructure.search.elasticsearch_client import ElasticsearchClient

if TYPE_CHECKING:
    from searchsync.core.config import Settings


class SearchClientFactory:
    """Factory for search adapter and mapper instances based on configuration."""

    @staticmethod
    def create_search_client(settings: "Settings | None" = None) -> ISearchClient:
        """Create the Elasticsearch adapter from settings.

        Args:
            settings: Settings; if None, uses get_settings().

        Returns:
            ElasticsearchClient wrapping a new AsyncElasticsearch.
        """
        from searchsync.core.config import get_settings

        s = settings or get_settings()
        kwargs: dict[str, Any] = {
            "hosts": s.search_host_list,
            "request_timeout": s.search_request_timeout,
            "verify_certs": s.search_verify_certs,
        }
        if s.search_api_key is not None:
            kwargs["api_key"] = s.search_api_key.get_secret_value()
        elif s.search_username and s.search_password is not None:
            kwargs["basic_auth"] = (
                s.search_username,
                s.search_password.get_secret_value(),
            )
        return ElasticsearchClient(AsyncElasticsearch(**kwargs), refresh=s.search_refresh)

    @staticmethod
    def create_document_mapper(
        settings: "Settings | None" = None, exclude: tuple[str, ...] = ()
    ) -> DocumentMapper:
        """Create a DocumentMapper honouring search_flatten_single_highlight."""
        from searchsync.core.config import get_settings

        s = settings or get_settings()
        return DocumentMapper(
            exclude, flatten_single_highlight=s.search_flatten_single_highlight
        )
