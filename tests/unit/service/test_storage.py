"""Unit tests for the in-memory asset store and the store factory."""

import pytest

from asset_assistant.domain.domain_type import AssetCondition, AssetType, RoadSurfaceType, StoreBackend, TrafficVolume
from asset_assistant.domain.domain_value import AssetId, Road
from asset_assistant.domain.store import AssetStore
from asset_assistant.service.storage import (
    InMemoryAssetStore,
    MemoryStoreConfig,
    RedisAssetStore,
    create_asset_store,
)

ELM = {
    "name": "Elm",
    "condition": AssetCondition.GOOD,
    "surface_type": RoadSurfaceType.GRAVEL,
    "traffic_volume": TrafficVolume.LOW,
}


@pytest.mark.asyncio
async def test_create_and_find_by_id(store: InMemoryAssetStore):
    asset_id = await store.create(AssetType.ROAD, ELM)

    record = await store.find_by_id(AssetType.ROAD, asset_id)

    assert isinstance(record, Road)
    assert record.id == asset_id
    assert record.synced is False


@pytest.mark.asyncio
async def test_ids_scoped_by_type(store: InMemoryAssetStore):
    asset_id = await store.create(AssetType.ROAD, ELM)

    assert await store.find_by_id(AssetType.VEHICLE, asset_id) is None


@pytest.mark.asyncio
async def test_update_merges_and_touches(store: InMemoryAssetStore):
    asset_id = await store.create(AssetType.ROAD, ELM)
    before = await store.find_by_id(AssetType.ROAD, asset_id)

    assert await store.update_by_id(AssetType.ROAD, asset_id, {"condition": AssetCondition.POOR, "lanes": 2})

    after = await store.find_by_id(AssetType.ROAD, asset_id)
    assert after.condition is AssetCondition.POOR
    assert after.lanes == 2
    assert after.name == "Elm"
    assert after.created_at == before.created_at
    assert after.updated_at >= before.updated_at


@pytest.mark.asyncio
async def test_update_unknown_id(store: InMemoryAssetStore):
    assert not await store.update_by_id(AssetType.ROAD, AssetId(), {"lanes": 2})


@pytest.mark.asyncio
async def test_delete(store: InMemoryAssetStore):
    asset_id = await store.create(AssetType.ROAD, ELM)

    assert await store.delete_by_id(AssetType.ROAD, asset_id)
    assert not await store.delete_by_id(AssetType.ROAD, asset_id)
    assert await store.find_all(AssetType.ROAD) == []


@pytest.mark.asyncio
async def test_find_by_exact_preserves_insertion_order(store: InMemoryAssetStore):
    await store.create(AssetType.ROAD, ELM)
    await store.create(AssetType.ROAD, {**ELM, "qr_tag_id": "ROA-1"})
    await store.create(AssetType.ROAD, {**ELM, "name": "Oak"})

    matches = await store.find_by_exact(AssetType.ROAD, "name", "Elm")

    assert [record.qr_tag_id for record in matches] == [None, "ROA-1"]


def test_factory_selects_backend():
    config = MemoryStoreConfig(url="redis://localhost:6379/15")

    assert isinstance(create_asset_store(StoreBackend.MEMORY), InMemoryAssetStore)
    assert isinstance(create_asset_store(StoreBackend.REDIS, config), RedisAssetStore)
    assert isinstance(create_asset_store(StoreBackend.MEMORY), AssetStore)


def test_redis_backend_needs_config():
    with pytest.raises(ValueError):
        create_asset_store(StoreBackend.REDIS)
