"""Unit tests for session ownership in AssistantService."""

from uuid import uuid4

import pytest

from asset_assistant.service.assistant import AssistantService, SessionNotFoundError
from asset_assistant.service.storage import InMemoryAssetStore

from tests.fakes import ScriptedGateway, text_reply


@pytest.fixture
def service() -> AssistantService:
    return AssistantService(store=InMemoryAssetStore(), gateway=ScriptedGateway())


def test_sessions_share_executor(service: AssistantService):
    first = service.start_session()
    second = service.start_session()

    assert first.id != second.id
    assert first.executor is second.executor is service.executor


def test_lookup_by_uuid_or_string(service: AssistantService):
    session = service.start_session()

    assert service.get_session(session.id.root) is session
    assert service.get_session(str(session.id.root)) is session


@pytest.mark.parametrize("session_id", [uuid4(), "not-a-uuid"])
def test_unknown_session(service: AssistantService, session_id):
    with pytest.raises(SessionNotFoundError):
        service.get_session(session_id)


def test_get_or_start(service: AssistantService):
    session = service.get_or_start(None)

    assert service.get_or_start(session.id.root) is session


def test_end_session(service: AssistantService):
    session = service.start_session()

    service.end_session(session.id)

    with pytest.raises(SessionNotFoundError):
        service.get_session(session.id.root)


@pytest.mark.asyncio
async def test_sessions_keep_separate_history(service: AssistantService):
    service.gateway.queue(text_reply("a"), text_reply("b"))
    first = service.start_session()
    second = service.start_session()

    await first.send("hello from one")
    await second.send("hello from two")

    assert [turn.content for turn in first.history] == ["hello from one", "a"]
    assert [turn.content for turn in second.history] == ["hello from two", "b"]
