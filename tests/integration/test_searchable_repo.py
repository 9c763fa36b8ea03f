"""SearchableRepository integration tests.

Rows live in in-memory SQLite (aiosqlite); the index is the in-memory fake
client. The session is rolled back after each test.
"""

from decimal import Decimal

import pytest
from sqlalchemy import select

from fakes import INDEX_NAME
from sample_models import Article, Product
from searchsync.domain.exceptions import (
    EngineError,
    ResourceNotFoundException,
    TransportError,
)
from searchsync.infrastructure.persistence.repositories import SearchableRepository
from searchsync.shared.enums import LifecycleEvent


@pytest.fixture
def product_repo(db_session, indexer, sync_service) -> SearchableRepository[Product]:
    return SearchableRepository(db_session, Product, indexer, sync_service)


async def _create(repo, title: str, price: str = "10.00", **kwargs) -> Product:
    return await repo.create(Product(title=title, offer_price=Decimal(price), **kwargs))


@pytest.mark.requires_db
async def test_create_indexes_document(product_repo, fake_client) -> None:
    product = await _create(product_repo, "Oak desk", internal_notes="do not index")
    assert product.id
    doc = fake_client.document("products", product.id)
    assert doc is not None
    assert doc["title"] == "Oak desk"
    assert doc["offer_price"] == "10.00"
    assert doc["status"] == "active"
    assert doc["created_at"]
    assert "internal_notes" not in doc


@pytest.mark.requires_db
async def test_update_pushes_new_state(product_repo, fake_client) -> None:
    product = await _create(product_repo, "Oak desk")
    product.title = "Walnut desk"
    await product_repo.update(product)
    assert fake_client.document("products", product.id)["title"] == "Walnut desk"
    assert fake_client.calls["update_one"] == 1


@pytest.mark.requires_db
async def test_update_of_never_indexed_row_indexes_it(
    db_session, indexer, sync_service, fake_client
) -> None:
    unsynced = SearchableRepository(db_session, Product, indexer)
    product = await _create(unsynced, "Pine shelf")
    assert fake_client.document("products", product.id) is None

    synced = SearchableRepository(db_session, Product, indexer, sync_service)
    product.title = "Pine shelf XL"
    await synced.update(product)
    assert fake_client.document("products", product.id)["title"] == "Pine shelf XL"


@pytest.mark.requires_db
async def test_update_of_missing_row_raises(product_repo) -> None:
    ghost = Product(id="ghost", title="Gone")
    with pytest.raises(ResourceNotFoundException):
        await product_repo.update(ghost)


@pytest.mark.requires_db
async def test_delete_removes_document(product_repo, fake_client) -> None:
    product = await _create(product_repo, "Oak desk")
    await product_repo.delete(product)
    assert fake_client.document("products", product.id) is None
    assert await product_repo.get_by_id(product.id) is None


@pytest.mark.requires_db
async def test_delete_of_never_indexed_row_succeeds(
    db_session, indexer, sync_service, fake_client
) -> None:
    product = await _create(SearchableRepository(db_session, Product, indexer), "Stool")
    synced = SearchableRepository(db_session, Product, indexer, sync_service)
    await synced.delete(product)
    assert fake_client.calls["delete_one"] == 1


@pytest.mark.requires_db
async def test_index_failure_surfaces_to_caller(product_repo, fake_client) -> None:
    fake_client.transport_down = True
    with pytest.raises(TransportError):
        await _create(product_repo, "Oak desk")


@pytest.mark.requires_db
async def test_engine_rejection_on_update_surfaces(product_repo, fake_client) -> None:
    product = await _create(product_repo, "Oak desk")
    fake_client.reject_ids.add(product.id)
    product.title = "Rejected"
    with pytest.raises(EngineError):
        await product_repo.update(product)


@pytest.mark.requires_db
async def test_set_based_mutations_are_not_synced(product_repo, fake_client) -> None:
    """update_where/delete_where bypass hooks; collection operations re-sync."""
    a = await _create(product_repo, "Desk A")
    b = await _create(product_repo, "Desk B")

    updated = await product_repo.update_where(
        {"title": "Bulk renamed"}, Product.id.in_([a.id, b.id])
    )
    assert updated == 2
    assert fake_client.document("products", a.id)["title"] == "Desk A"

    result = await product_repo.db.execute(
        select(Product).where(Product.id.in_([a.id, b.id])).execution_options(populate_existing=True)
    )
    await product_repo.collect(result.scalars().all()).update_index()
    assert fake_client.document("products", a.id)["title"] == "Bulk renamed"
    assert fake_client.document("products", b.id)["title"] == "Bulk renamed"

    deleted = await product_repo.delete_where(Product.id == a.id)
    assert deleted == 1
    assert fake_client.document("products", a.id) is not None


@pytest.mark.requires_db
async def test_hooks_run_in_subscription_order(product_repo) -> None:
    seen: list[str] = []

    async def audit(record) -> None:
        seen.append(f"audit:{record.title}")

    product_repo.hooks.subscribe(LifecycleEvent.AFTER_CREATE, audit)
    await _create(product_repo, "Lamp")
    assert seen == ["audit:Lamp"]
    assert product_repo.hooks.handlers(LifecycleEvent.AFTER_CREATE)[-1] is audit


@pytest.mark.requires_db
async def test_get_all_searchable_and_bulk_reindex(product_repo, fake_client) -> None:
    for title in ("A", "B", "C"):
        await _create(product_repo, title)
    fake_client.documents.clear()

    collection = await product_repo.get_all_searchable(limit=2)
    assert len(collection) == 2
    await collection.index()
    assert len(fake_client.documents) == 2


@pytest.mark.requires_db
async def test_reindex_all_in_batches(db_session, indexer, fake_client) -> None:
    repo = SearchableRepository(db_session, Article, indexer)
    for i in range(5):
        await repo.create(Article(headline=f"Story {i}"))
    assert fake_client.documents == {}

    sent = await repo.reindex_all(batch_size=2)

    assert sent == 5
    assert fake_client.calls["bulk_index"] == 3
    ids = sorted(int(doc_id) for (_, _, doc_id) in fake_client.documents)
    assert ids == [1, 2, 3, 4, 5]
    assert all(index == INDEX_NAME and doc_type == "post" for (index, doc_type, _) in fake_client.documents)


@pytest.mark.requires_db
async def test_reindex_all_rejects_bad_batch_size(product_repo) -> None:
    with pytest.raises(ValueError):
        await product_repo.reindex_all(batch_size=0)
