"""Storage service - asset store backends behind the ``AssetStore`` protocol."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from redis.exceptions import RedisError, WatchError

from ..domain.domain_type import AssetType, StoreBackend
from ..domain.domain_value import RECORD_TYPES, AssetId, Road, Vehicle
from ..domain.store import AssetStore, StoreError

if TYPE_CHECKING:
    from redis.asyncio import Redis


class MemoryStoreConfig(BaseModel):
    """Redis connection configuration."""

    url: str
    key_prefix: str = "asset"

    model_config = ConfigDict(frozen=True)


def _touched(record: Road | Vehicle, fields: Mapping[str, Any]) -> Road | Vehicle:
    """Record with ``fields`` merged over it, revalidated and marked unsynced."""
    data = record.model_dump()
    data.update(fields)
    data.update(updated_at=datetime.now(UTC), synced=False)
    return type(record).model_validate(data)


class InMemoryAssetStore:
    """
    Process-local store, insertion ordered.

    Used by tests and by the ``memory`` backend; records vanish with the process.
    """

    def __init__(self) -> None:
        self._records: dict[AssetType, dict[UUID, Road | Vehicle]] = {asset_type: {} for asset_type in AssetType}

    async def create(self, asset_type: AssetType, fields: Mapping[str, Any]) -> AssetId:
        record = RECORD_TYPES[asset_type].model_validate(dict(fields))
        self._records[asset_type][record.id.root] = record
        return record.id

    async def find_by_exact(self, asset_type: AssetType, field: str, value: Any) -> Sequence[Road | Vehicle]:
        return [record for record in self._records[asset_type].values() if getattr(record, field, None) == value]

    async def find_all(self, asset_type: AssetType) -> Sequence[Road | Vehicle]:
        return list(self._records[asset_type].values())

    async def find_by_id(self, asset_type: AssetType, asset_id: AssetId) -> Road | Vehicle | None:
        return self._records[asset_type].get(asset_id.root)

    async def update_by_id(self, asset_type: AssetType, asset_id: AssetId, fields: Mapping[str, Any]) -> bool:
        existing = self._records[asset_type].get(asset_id.root)
        if existing is None:
            return False
        self._records[asset_type][asset_id.root] = _touched(existing, fields)
        return True

    async def delete_by_id(self, asset_type: AssetType, asset_id: AssetId) -> bool:
        return self._records[asset_type].pop(asset_id.root, None) is not None


class RedisAssetStore:
    """
    Redis-backed store - one JSON document per record.

    Key format: {prefix}:{type}:{hex id}
    Values are the camelCase wire form, so other clients can read them as-is.
    Redis failures surface as ``StoreError``.
    """

    def __init__(self, config: MemoryStoreConfig, client: Redis | None = None):
        self.config = config
        self._client = client

    def get_client(self) -> Redis:
        """Get or create Redis client (lazy)."""
        if self._client is None:
            from redis.asyncio import Redis

            self._client = Redis.from_url(self.config.url)
        return self._client

    def _key(self, asset_type: AssetType, asset_id: AssetId) -> str:
        return f"{self.config.key_prefix}:{asset_type.value}:{asset_id.hex}"

    async def _save(self, record: Road | Vehicle) -> None:
        try:
            await self.get_client().set(self._key(record.type, record.id), record.model_dump_json(by_alias=True))
        except RedisError as exc:
            raise StoreError(f"Redis write failed: {exc}") from exc

    async def create(self, asset_type: AssetType, fields: Mapping[str, Any]) -> AssetId:
        record = RECORD_TYPES[asset_type].model_validate(dict(fields))
        await self._save(record)
        return record.id

    async def find_by_id(self, asset_type: AssetType, asset_id: AssetId) -> Road | Vehicle | None:
        try:
            raw = await self.get_client().get(self._key(asset_type, asset_id))
        except RedisError as exc:
            raise StoreError(f"Redis read failed: {exc}") from exc
        if raw is None:
            return None
        return RECORD_TYPES[asset_type].model_validate_json(raw)

    async def find_all(self, asset_type: AssetType) -> Sequence[Road | Vehicle]:
        client = self.get_client()
        pattern = f"{self.config.key_prefix}:{asset_type.value}:*"
        try:
            keys = [key async for key in client.scan_iter(match=pattern)]
            payloads = await client.mget(keys) if keys else []
        except RedisError as exc:
            raise StoreError(f"Redis read failed: {exc}") from exc
        records = [RECORD_TYPES[asset_type].model_validate_json(raw) for raw in payloads if raw is not None]
        # Keys come back in hash order; creation order is what callers expect
        return sorted(records, key=lambda record: record.created_at)

    async def find_by_exact(self, asset_type: AssetType, field: str, value: Any) -> Sequence[Road | Vehicle]:
        return [record for record in await self.find_all(asset_type) if getattr(record, field, None) == value]

    async def update_by_id(self, asset_type: AssetType, asset_id: AssetId, fields: Mapping[str, Any]) -> bool:
        """Read-modify-write under WATCH; a concurrent write or delete restarts the read."""
        key = self._key(asset_type, asset_id)
        try:
            async with self.get_client().pipeline(transaction=True) as pipe:
                while True:
                    try:
                        await pipe.watch(key)
                        raw = await pipe.get(key)
                        if raw is None:
                            return False
                        updated = _touched(RECORD_TYPES[asset_type].model_validate_json(raw), fields)
                        pipe.multi()
                        pipe.set(key, updated.model_dump_json(by_alias=True), xx=True)
                        await pipe.execute()
                        return True
                    except WatchError:
                        continue
        except RedisError as exc:
            raise StoreError(f"Redis write failed: {exc}") from exc

    async def delete_by_id(self, asset_type: AssetType, asset_id: AssetId) -> bool:
        try:
            deleted = await self.get_client().delete(self._key(asset_type, asset_id))
        except RedisError as exc:
            raise StoreError(f"Redis delete failed: {exc}") from exc
        return bool(deleted)


def create_asset_store(backend: StoreBackend, memory_config: MemoryStoreConfig | None = None) -> AssetStore:
    """Factory from the configured backend."""
    if backend == StoreBackend.REDIS:
        if memory_config is None:
            raise ValueError("Redis backend requires a memory store config")
        return RedisAssetStore(memory_config)
    return InMemoryAssetStore()


__all__ = ["InMemoryAssetStore", "MemoryStoreConfig", "RedisAssetStore", "create_asset_store"]
