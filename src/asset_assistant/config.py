"""Application Configuration

Type-safe configuration using Pydantic Settings for environment variable handling.

Groups:
- Application identity and API server
- Asset store backend (in-memory or Redis)
- Assistant model, timeout and history window
- Observability (Logfire)
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings

from .domain.domain_type import StoreBackend


class Settings(BaseSettings):
    """Application settings from environment variables"""

    # =============================================================================
    # APPLICATION
    # =============================================================================

    app_name: str = Field(default="Asset Assistant", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    app_description: str = Field(
        default="Conversational tool-calling assistant for road and vehicle assets",
        alias="APP_DESCRIPTION",
    )
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # =============================================================================
    # API CONFIGURATION
    # =============================================================================

    api_host: str = Field(default="0.0.0.0", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")
    log_level: str = Field(default="info", alias="LOG_LEVEL")

    # CORS Settings
    cors_origins: str = Field(default="", alias="CORS_ORIGINS")
    cors_credentials: bool = Field(default=False, alias="CORS_CREDENTIALS")
    cors_methods: str = Field(default="*", alias="CORS_METHODS")
    cors_headers: str = Field(default="*", alias="CORS_HEADERS")

    # =============================================================================
    # ASSET STORE
    # =============================================================================

    asset_store_backend: StoreBackend = Field(default=StoreBackend.MEMORY, alias="ASSET_STORE_BACKEND")

    # Redis - used when ASSET_STORE_BACKEND=redis
    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")
    redis_key_prefix: str = Field(default="asset", alias="REDIS_KEY_PREFIX")

    # =============================================================================
    # ASSISTANT MODEL
    # =============================================================================

    # pydantic-ai model name in 'provider:model' format
    assistant_model: str = Field(default="openai:gpt-4.1-mini", alias="ASSISTANT_MODEL")
    openai_api_key: str | None = Field(default=None, alias="OPENAI_API_KEY")
    assistant_timeout: float = Field(default=20.0, gt=0, alias="ASSISTANT_TIMEOUT")
    assistant_history_turns: int = Field(default=8, ge=0, alias="ASSISTANT_HISTORY_TURNS")

    # =============================================================================
    # OBSERVABILITY
    # =============================================================================

    logfire_token: str | None = Field(default=None, alias="LOGFIRE_TOKEN")

    model_config = {"env_file": ".env", "case_sensitive": False, "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.model_validate({})


settings = get_settings()
