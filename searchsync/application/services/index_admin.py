"""Index administration per record type: create, drop, mappings."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from searchsync.domain.exceptions import DocumentNotFoundError, ValidationException

if TYPE_CHECKING:
    from searchsync.application.interfaces.document_mapper import IDocumentMapper
    from searchsync.application.interfaces.search_client import ISearchClient

logger = logging.getLogger(__name__)


class IndexAdminService:
    """Creates and maintains the index of each searchable record type.

    Index settings and mapping properties come from the model's
    __search_settings__ and __search_mapping__ unless passed explicitly.
    """

    def __init__(
        self,
        client: ISearchClient,
        mapper: IDocumentMapper,
        index_name: str,
    ) -> None:
        self.client = client
        self.mapper = mapper
        self.index_name = index_name

    def _doc_type(self, record_type: type) -> str:
        return self.mapper.document_type(record_type)

    async def create_index(
        self,
        record_type: type,
        settings: Mapping[str, Any] | None = None,
        mappings: Mapping[str, Any] | None = None,
    ) -> None:
        await self.client.create_index(
            self.index_name,
            self._doc_type(record_type),
            settings if settings is not None else getattr(record_type, "__search_settings__", None),
            mappings if mappings is not None else getattr(record_type, "__search_mapping__", None),
        )

    async def delete_index(self, record_type: type, *, missing_ok: bool = False) -> None:
        try:
            await self.client.delete_index(self.index_name, self._doc_type(record_type))
        except DocumentNotFoundError:
            if not missing_ok:
                raise
            logger.debug("Index for %s already absent", record_type.__name__)

    async def index_exists(self, record_type: type) -> bool:
        return await self.client.index_exists(self.index_name, self._doc_type(record_type))

    async def put_mapping(
        self, record_type: type, properties: Mapping[str, Any] | None = None
    ) -> None:
        properties = properties if properties is not None else getattr(
            record_type, "__search_mapping__", None
        )
        if not properties:
            raise ValidationException(
                f"{record_type.__name__} has no mapping properties to put",
                field="properties",
            )
        await self.client.put_mapping(
            self.index_name, self._doc_type(record_type), properties
        )

    async def get_mapping(self, record_type: type) -> dict[str, Any]:
        return await self.client.get_mapping(self.index_name, self._doc_type(record_type))

    async def rebuild_mapping(self, record_type: type) -> None:
        """Drop and recreate the index with the model's settings and mapping.

        All documents of record_type are lost; re-index afterwards
        (SearchableRepository.reindex_all).
        """
        await self.delete_index(record_type, missing_ok=True)
        await self.create_index(record_type)
        logger.info("Rebuilt index mapping for %s", record_type.__name__)

    async def refresh(self, record_type: type) -> None:
        await self.client.refresh(self.index_name, self._doc_type(record_type))
