"""API dependency wiring."""

from functools import lru_cache

from ..config import settings
from ..domain.store import AssetStore
from ..service import AssistantService, create_assistant_service
from ..service.storage import MemoryStoreConfig, create_asset_store


@lru_cache(maxsize=1)
def get_asset_store() -> AssetStore:
    """Create asset store from config (cached singleton)."""
    return create_asset_store(
        backend=settings.asset_store_backend,
        memory_config=MemoryStoreConfig(url=settings.redis_url, key_prefix=settings.redis_key_prefix),
    )


@lru_cache(maxsize=1)
def get_assistant_service() -> AssistantService:
    """
    Create assistant service (cached singleton).

    Service factory handles all construction logic - deps.py is just thin DI glue.
    """
    return create_assistant_service(
        store=get_asset_store(),
        model=settings.assistant_model,
        timeout=settings.assistant_timeout,
        history_turns=settings.assistant_history_turns,
        api_key=settings.openai_api_key,
    )
