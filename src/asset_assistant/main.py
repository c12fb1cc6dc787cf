"""Asset Assistant

FastAPI application exposing a conversational, tool-calling assistant that
creates, finds, updates and deletes road and vehicle assets on confirmation.
"""

import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import logfire
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from .api.routers import assistant_router, health_router
from .config import settings


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan - startup and shutdown logic"""
    logfire.configure(
        send_to_logfire="if-token-present",
        token=settings.logfire_token or None,
        service_name="asset-assistant",
        service_version=settings.app_version,
        environment=settings.environment,
    )
    # pydantic-ai providers read the key from the process environment
    if settings.openai_api_key:
        os.environ.setdefault("OPENAI_API_KEY", settings.openai_api_key)
    logfire.info(
        "Starting {app_name} v{app_version}",
        app_name=settings.app_name,
        app_version=settings.app_version,
        store_backend=settings.asset_store_backend.value,
    )
    yield
    logfire.info("Shutting down {app_name}", app_name=settings.app_name)


# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description=settings.app_description,
    version=settings.app_version,
    debug=settings.environment == "development",
    lifespan=lifespan,
)

# Add CORS middleware
if settings.cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins.split(","),
        allow_credentials=settings.cors_credentials,
        allow_methods=settings.cors_methods.split(","),
        allow_headers=settings.cors_headers.split(","),
    )

# Import and include routers
app.include_router(health_router)
app.include_router(assistant_router)


@app.get("/")
async def root() -> RedirectResponse:
    """Redirect root to API docs"""
    return RedirectResponse(url="/docs")
