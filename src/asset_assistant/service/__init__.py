from .assistant import AssistantService, SessionNotFoundError, create_assistant_service
from .storage import InMemoryAssetStore, MemoryStoreConfig, RedisAssetStore, create_asset_store

__all__ = [
    "AssistantService",
    "InMemoryAssetStore",
    "MemoryStoreConfig",
    "RedisAssetStore",
    "SessionNotFoundError",
    "create_asset_store",
    "create_assistant_service",
]
