"""Elasticsearch adapter implementing ISearchClient over AsyncElasticsearch.

Elasticsearch 7+ has no mapping types, so each (index, doc_type) pair is
stored in its own physical index named "{index}-{doc_type}". Client-library
errors never leave this module: NotFoundError becomes DocumentNotFoundError,
any other ApiError becomes EngineError, and connection/timeout failures
become TransportError.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping, Sequence
from contextlib import asynccontextmanager
from typing import Any

from elasticsearch import ApiError, AsyncElasticsearch, NotFoundError
from elasticsearch import TransportError as ESTransportError

from searchsync.application.dtos.search import BulkItemResult, IndexReference
from searchsync.core.constants import INDEX_TYPE_SEP
from searchsync.domain.exceptions import (
    DocumentNotFoundError,
    EngineError,
    TransportError,
)
from searchsync.shared.enums import BulkOperation
from searchsync.shared.telemetry.tracing import TracedOperation, traced

logger = logging.getLogger(__name__)


def physical_index(index: str, doc_type: str) -> str:
    """Name of the concrete Elasticsearch index holding doc_type documents."""
    return f"{index}{INDEX_TYPE_SEP}{doc_type}"


def _error_parts(e: ApiError) -> tuple[str | None, str]:
    """Extract (error type, reason) from an ApiError body."""
    body = e.body if isinstance(e.body, Mapping) else {}
    error = body.get("error")
    if isinstance(error, Mapping):
        return error.get("type"), str(error.get("reason") or e.message)
    if isinstance(error, str):
        return None, error
    if body.get("result") == "not_found" or body.get("found") is False:
        return None, "document not found"
    return None, str(e.message)


@asynccontextmanager
async def _translate_errors(
    operation: str, document_id: str | None = None
) -> AsyncIterator[None]:
    try:
        yield
    except NotFoundError as e:
        error_type, reason = _error_parts(e)
        raise DocumentNotFoundError(
            reason, status=404, error_type=error_type, document_id=document_id
        ) from e
    except ApiError as e:
        error_type, reason = _error_parts(e)
        raise EngineError(
            reason,
            status=e.status_code,
            error_type=error_type,
            document_id=document_id,
        ) from e
    except ESTransportError as e:
        logger.warning("Search transport failure during %s: %s", operation, e)
        raise TransportError(operation, str(e)) from e


class ElasticsearchClient:
    """Async Elasticsearch adapter for the sync and search services.

    Args:
        client: A configured AsyncElasticsearch (see SearchClientFactory).
        refresh: Value of refresh= sent with every write ("true", "false",
            "wait_for"); "false" omits the parameter.
    """

    def __init__(self, client: AsyncElasticsearch, refresh: str = "false") -> None:
        self.client = client
        self.refresh = refresh

    def _write_params(self) -> dict[str, Any]:
        return {} if self.refresh == "false" else {"refresh": self.refresh}

    @traced("search.index_one")
    async def index_one(self, ref: IndexReference, document: Mapping[str, Any]) -> None:
        async with _translate_errors("index", ref.id):
            await self.client.index(
                index=physical_index(ref.index, ref.doc_type),
                id=ref.id,
                document=dict(document),
                **self._write_params(),
            )
        logger.debug("Indexed %s/%s", ref.doc_type, ref.id)

    @traced("search.update_one")
    async def update_one(self, ref: IndexReference, document: Mapping[str, Any]) -> None:
        async with _translate_errors("update", ref.id):
            await self.client.update(
                index=physical_index(ref.index, ref.doc_type),
                id=ref.id,
                doc=dict(document),
                **self._write_params(),
            )
        logger.debug("Updated %s/%s", ref.doc_type, ref.id)

    @traced("search.delete_one")
    async def delete_one(self, ref: IndexReference) -> None:
        async with _translate_errors("delete", ref.id):
            await self.client.delete(
                index=physical_index(ref.index, ref.doc_type),
                id=ref.id,
                **self._write_params(),
            )
        logger.debug("Deleted %s/%s", ref.doc_type, ref.id)

    @traced("search.get_one")
    async def get_one(self, ref: IndexReference) -> dict[str, Any]:
        async with _translate_errors("get", ref.id):
            response = await self.client.get(
                index=physical_index(ref.index, ref.doc_type), id=ref.id
            )
        return dict(response.body)

    async def bulk_index(
        self, entries: Sequence[tuple[IndexReference, Mapping[str, Any]]]
    ) -> list[BulkItemResult]:
        operations: list[dict[str, Any]] = []
        for ref, document in entries:
            operations.append(self._action(BulkOperation.INDEX, ref))
            operations.append(dict(document))
        return await self._bulk(BulkOperation.INDEX, [r for r, _ in entries], operations)

    async def bulk_update(
        self, entries: Sequence[tuple[IndexReference, Mapping[str, Any]]]
    ) -> list[BulkItemResult]:
        operations: list[dict[str, Any]] = []
        for ref, document in entries:
            operations.append(self._action(BulkOperation.UPDATE, ref))
            operations.append({"doc": dict(document)})
        return await self._bulk(BulkOperation.UPDATE, [r for r, _ in entries], operations)

    async def bulk_delete(self, refs: Sequence[IndexReference]) -> list[BulkItemResult]:
        operations = [self._action(BulkOperation.DELETE, ref) for ref in refs]
        return await self._bulk(BulkOperation.DELETE, list(refs), operations)

    @staticmethod
    def _action(operation: BulkOperation, ref: IndexReference) -> dict[str, Any]:
        return {
            operation.value: {
                "_index": physical_index(ref.index, ref.doc_type),
                "_id": ref.id,
            }
        }

    async def _bulk(
        self,
        operation: BulkOperation,
        refs: list[IndexReference],
        operations: list[dict[str, Any]],
    ) -> list[BulkItemResult]:
        """Send one bulk request and align per-item outcomes with refs."""
        if not refs:
            return []
        async with TracedOperation(
            f"search.bulk_{operation.value}", {"search.count": len(refs)}
        ):
            async with _translate_errors(f"bulk_{operation.value}"):
                response = await self.client.bulk(
                    operations=operations, **self._write_params()
                )
        items = response.body.get("items") or []
        if len(items) != len(refs):
            raise EngineError(
                f"bulk response has {len(items)} item(s) for {len(refs)} request(s)",
                error_type="bulk_response_mismatch",
            )
        results = []
        for ref, item in zip(refs, items, strict=True):
            outcome = item.get(operation.value) or next(iter(item.values()), {})
            status = outcome.get("status")
            error = outcome.get("error")
            error_type: str | None = None
            reason: str | None = None
            if isinstance(error, Mapping):
                error_type = error.get("type")
                reason = error.get("reason")
            elif error is not None:
                reason = str(error)
            elif status == 404:
                reason = "document not found"
            ok = error is None and status is not None and status < 300
            results.append(
                BulkItemResult(
                    ref=ref, ok=ok, status=status, error_type=error_type, reason=reason
                )
            )
        failed = sum(1 for r in results if not r.ok)
        logger.info(
            "Bulk %s of %d document(s): %d failed", operation.value, len(results), failed
        )
        return results

    @traced("search.search")
    async def search(
        self, index: str, doc_type: str, params: Mapping[str, Any]
    ) -> dict[str, Any]:
        async with _translate_errors("search"):
            response = await self.client.search(
                index=physical_index(index, doc_type), body=dict(params)
            )
        return dict(response.body)

    @traced("search.create_index")
    async def create_index(
        self,
        index: str,
        doc_type: str,
        settings: Mapping[str, Any] | None = None,
        mappings: Mapping[str, Any] | None = None,
    ) -> None:
        kwargs: dict[str, Any] = {}
        if settings:
            kwargs["settings"] = dict(settings)
        if mappings:
            kwargs["mappings"] = {"properties": dict(mappings)}
        async with _translate_errors("create_index"):
            await self.client.indices.create(index=physical_index(index, doc_type), **kwargs)
        logger.info("Created index %s", physical_index(index, doc_type))

    @traced("search.delete_index")
    async def delete_index(self, index: str, doc_type: str) -> None:
        async with _translate_errors("delete_index"):
            await self.client.indices.delete(index=physical_index(index, doc_type))
        logger.info("Deleted index %s", physical_index(index, doc_type))

    async def index_exists(self, index: str, doc_type: str) -> bool:
        async with _translate_errors("index_exists"):
            response = await self.client.indices.exists(
                index=physical_index(index, doc_type)
            )
        return bool(response)

    @traced("search.put_mapping")
    async def put_mapping(
        self, index: str, doc_type: str, properties: Mapping[str, Any]
    ) -> None:
        async with _translate_errors("put_mapping"):
            await self.client.indices.put_mapping(
                index=physical_index(index, doc_type), properties=dict(properties)
            )

    async def get_mapping(self, index: str, doc_type: str) -> dict[str, Any]:
        name = physical_index(index, doc_type)
        async with _translate_errors("get_mapping"):
            response = await self.client.indices.get_mapping(index=name)
        body = dict(response.body)
        return dict(body.get(name, {}).get("mappings", {}).get("properties", {}))

    async def refresh(self, index: str, doc_type: str) -> None:
        async with _translate_errors("refresh"):
            await self.client.indices.refresh(index=physical_index(index, doc_type))

    async def close(self) -> None:
        await self.client.close()
