"""IndexAdminService tests: per-record-type index lifecycle."""

import pytest

from fakes import INDEX_NAME
from sample_models import Article, Product
from searchsync.application.services import IndexAdminService
from searchsync.domain.exceptions import DocumentNotFoundError, ValidationException


@pytest.fixture
def admin(fake_client, mapper) -> IndexAdminService:
    return IndexAdminService(fake_client, mapper, INDEX_NAME)


async def test_create_index_uses_model_settings_and_mapping(admin, fake_client) -> None:
    await admin.create_index(Product)
    assert fake_client.indices[(INDEX_NAME, "products")] == {
        "settings": {"number_of_shards": 1},
        "properties": Product.__search_mapping__,
    }
    assert await admin.index_exists(Product)
    assert not await admin.index_exists(Article)


async def test_create_index_explicit_arguments_win(admin, fake_client) -> None:
    await admin.create_index(Product, settings={"number_of_replicas": 0}, mappings={"title": {"type": "keyword"}})
    assert fake_client.indices[(INDEX_NAME, "products")] == {
        "settings": {"number_of_replicas": 0},
        "properties": {"title": {"type": "keyword"}},
    }


async def test_delete_index_missing(admin) -> None:
    with pytest.raises(DocumentNotFoundError):
        await admin.delete_index(Article)
    await admin.delete_index(Article, missing_ok=True)


async def test_put_and_get_mapping(admin) -> None:
    await admin.create_index(Article)
    await admin.put_mapping(Article, {"headline": {"type": "text"}})
    assert await admin.get_mapping(Article) == {"headline": {"type": "text"}}


async def test_put_mapping_without_properties_raises(admin, fake_client) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await admin.put_mapping(Article)
    assert exc_info.value.details == {"field": "properties"}
    assert fake_client.calls["put_mapping"] == 0


async def test_rebuild_mapping_drops_and_recreates(admin, fake_client) -> None:
    await admin.rebuild_mapping(Product)
    assert fake_client.calls["delete_index"] == 1
    assert fake_client.calls["create_index"] == 1
    await admin.put_mapping(Product, {"extra": {"type": "keyword"}})

    await admin.rebuild_mapping(Product)
    assert await admin.get_mapping(Product) == Product.__search_mapping__


async def test_refresh(admin, fake_client) -> None:
    await admin.refresh(Product)
    assert fake_client.calls["refresh"] == 1
