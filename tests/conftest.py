"""
Shared test fixtures and configuration.

Environment strategy:
- Unit tests: Use .env.test (in-memory store, scripted model, no infra needed)
- Integration tests: Use .env (live Redis for the store backend tests)
"""

import sys
from pathlib import Path

import pytest
from dotenv import load_dotenv

if "integration" in " ".join(sys.argv):
    ENV_FILE = Path(__file__).parent.parent / ".env"
else:
    # Default to .env.test for unit tests
    ENV_FILE = Path(__file__).parent.parent / ".env.test"

load_dotenv(ENV_FILE, override=True)

import logfire

from asset_assistant.domain.assistant import AssistantSession
from asset_assistant.domain.executor import ToolExecutor
from asset_assistant.service.storage import InMemoryAssetStore

from .fakes import ScriptedGateway

# Spans and logs stay local during tests
logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def store() -> InMemoryAssetStore:
    """Fresh, empty in-memory asset store."""
    return InMemoryAssetStore()


@pytest.fixture
def executor(store: InMemoryAssetStore) -> ToolExecutor:
    """Executor bound to the test store."""
    return ToolExecutor(store)


@pytest.fixture
def gateway() -> ScriptedGateway:
    """Gateway with no scripted replies; tests queue what they need."""
    return ScriptedGateway()


@pytest.fixture
def session(gateway: ScriptedGateway, executor: ToolExecutor) -> AssistantSession:
    """Idle assistant session over the scripted gateway and test store."""
    return AssistantSession(gateway=gateway, executor=executor)


@pytest.fixture
def main_street() -> dict:
    """Complete create_road arguments in wire form."""
    return {
        "name": "Main Street",
        "condition": "good",
        "surfaceType": "asphalt",
        "trafficVolume": "high",
        "location": "Downtown",
    }
