"""Test doubles shared by the suite.

FakeSearchClient is an in-memory ISearchClient; make_product builds a
transient Product with every column set.
"""

from collections import Counter
from collections.abc import Mapping, Sequence
from datetime import datetime
from decimal import Decimal
from typing import Any

from sample_models import Product, ProductStatus
from searchsync.application.dtos.search import BulkItemResult, IndexReference
from searchsync.domain.exceptions import DocumentNotFoundError, EngineError, TransportError

INDEX_NAME = "test"


class FakeSearchClient:
    """In-memory search adapter.

    Documents live in self.documents keyed by (index, doc_type, id).
    Ids listed in reject_ids fail every write with a 400 EngineError (or a
    failed bulk item); transport_down makes every call raise TransportError.
    """

    def __init__(self) -> None:
        self.documents: dict[tuple[str, str, str], dict[str, Any]] = {}
        self.indices: dict[tuple[str, str], dict[str, Any]] = {}
        self.reject_ids: set[str] = set()
        self.transport_down = False
        self.search_response: dict[str, Any] | None = None
        self.search_requests: list[tuple[str, str, dict[str, Any]]] = []
        self.calls: Counter[str] = Counter()
        self.closed = False

    @staticmethod
    def _key(ref: IndexReference) -> tuple[str, str, str]:
        return (ref.index, ref.doc_type, ref.id)

    def _call(self, name: str) -> None:
        self.calls[name] += 1
        if self.transport_down:
            raise TransportError(name, "connection refused")

    def _check_rejected(self, ref: IndexReference) -> None:
        if ref.id in self.reject_ids:
            raise EngineError(
                "failed to parse field [offer_price]",
                status=400,
                error_type="mapper_parsing_exception",
                document_id=ref.id,
            )

    def document(self, doc_type: str, doc_id: str) -> dict[str, Any] | None:
        return self.documents.get((INDEX_NAME, doc_type, doc_id))

    async def index_one(self, ref: IndexReference, document: Mapping[str, Any]) -> None:
        self._call("index_one")
        self._check_rejected(ref)
        self.documents[self._key(ref)] = dict(document)

    async def update_one(self, ref: IndexReference, document: Mapping[str, Any]) -> None:
        self._call("update_one")
        self._check_rejected(ref)
        if self._key(ref) not in self.documents:
            raise DocumentNotFoundError("document missing", status=404, document_id=ref.id)
        self.documents[self._key(ref)].update(document)

    async def delete_one(self, ref: IndexReference) -> None:
        self._call("delete_one")
        if self.documents.pop(self._key(ref), None) is None:
            raise DocumentNotFoundError("not_found", status=404, document_id=ref.id)

    async def get_one(self, ref: IndexReference) -> dict[str, Any]:
        self._call("get_one")
        document = self.documents.get(self._key(ref))
        if document is None:
            raise DocumentNotFoundError("not_found", status=404, document_id=ref.id)
        return {"_id": ref.id, "found": True, "_source": dict(document)}

    def _rejected_item(self, ref: IndexReference) -> BulkItemResult:
        return BulkItemResult(
            ref=ref,
            ok=False,
            status=400,
            error_type="mapper_parsing_exception",
            reason="failed to parse field [offer_price]",
        )

    async def bulk_index(
        self, entries: Sequence[tuple[IndexReference, Mapping[str, Any]]]
    ) -> list[BulkItemResult]:
        self._call("bulk_index")
        results = []
        for ref, document in entries:
            if ref.id in self.reject_ids:
                results.append(self._rejected_item(ref))
                continue
            created = self._key(ref) not in self.documents
            self.documents[self._key(ref)] = dict(document)
            results.append(BulkItemResult(ref=ref, ok=True, status=201 if created else 200))
        return results

    async def bulk_update(
        self, entries: Sequence[tuple[IndexReference, Mapping[str, Any]]]
    ) -> list[BulkItemResult]:
        self._call("bulk_update")
        results = []
        for ref, document in entries:
            if ref.id in self.reject_ids:
                results.append(self._rejected_item(ref))
            elif self._key(ref) not in self.documents:
                results.append(
                    BulkItemResult(
                        ref=ref,
                        ok=False,
                        status=404,
                        error_type="document_missing_exception",
                        reason="document missing",
                    )
                )
            else:
                self.documents[self._key(ref)].update(document)
                results.append(BulkItemResult(ref=ref, ok=True, status=200))
        return results

    async def bulk_delete(self, refs: Sequence[IndexReference]) -> list[BulkItemResult]:
        self._call("bulk_delete")
        results = []
        for ref in refs:
            if self.documents.pop(self._key(ref), None) is None:
                results.append(BulkItemResult(ref=ref, ok=False, status=404))
            else:
                results.append(BulkItemResult(ref=ref, ok=True, status=200))
        return results

    async def search(
        self, index: str, doc_type: str, params: Mapping[str, Any]
    ) -> dict[str, Any]:
        self._call("search")
        self.search_requests.append((index, doc_type, dict(params)))
        if self.search_response is not None:
            return self.search_response
        hits = [
            {"_index": f"{i}-{t}", "_id": doc_id, "_score": 1.0, "_source": dict(doc)}
            for (i, t, doc_id), doc in self.documents.items()
            if i == index and t == doc_type
        ]
        size = params.get("size")
        fetched = hits if size is None else hits[:size]
        return {
            "took": 1,
            "timed_out": False,
            "hits": {
                "total": {"value": len(hits), "relation": "eq"},
                "max_score": 1.0 if hits else None,
                "hits": fetched,
            },
        }

    async def create_index(
        self,
        index: str,
        doc_type: str,
        settings: Mapping[str, Any] | None = None,
        mappings: Mapping[str, Any] | None = None,
    ) -> None:
        self._call("create_index")
        self.indices[(index, doc_type)] = {
            "settings": dict(settings or {}),
            "properties": dict(mappings or {}),
        }

    async def delete_index(self, index: str, doc_type: str) -> None:
        self._call("delete_index")
        if self.indices.pop((index, doc_type), None) is None:
            raise DocumentNotFoundError("no such index", status=404, error_type="index_not_found_exception")

    async def index_exists(self, index: str, doc_type: str) -> bool:
        self._call("index_exists")
        return (index, doc_type) in self.indices

    async def put_mapping(
        self, index: str, doc_type: str, properties: Mapping[str, Any]
    ) -> None:
        self._call("put_mapping")
        self.indices.setdefault((index, doc_type), {"settings": {}, "properties": {}})[
            "properties"
        ].update(properties)

    async def get_mapping(self, index: str, doc_type: str) -> dict[str, Any]:
        self._call("get_mapping")
        return dict(self.indices.get((index, doc_type), {}).get("properties", {}))

    async def refresh(self, index: str, doc_type: str) -> None:
        self._call("refresh")

    async def close(self) -> None:
        self.closed = True


def make_product(doc_id: str = "p1", **overrides: Any) -> Product:
    """Transient Product with every column set (no session needed)."""
    values: dict[str, Any] = {
        "id": doc_id,
        "title": "Standing desk",
        "offer_price": Decimal("249.90"),
        "status": "active",
        "released_on": None,
        "internal_notes": "supplier margin 40%",
        "created_at": datetime(2025, 1, 15, 12, 0, 0),
        "updated_at": datetime(2025, 1, 15, 12, 0, 0),
    }
    values.update(overrides)
    if isinstance(values["status"], str):
        values["status"] = ProductStatus(values["status"])
    return Product(**values)

