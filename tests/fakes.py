"""Test doubles for the model gateway and the asset store."""

import asyncio
from collections.abc import Sequence

from asset_assistant.domain.domain_value import ConversationTurn
from asset_assistant.domain.gateway import ModelReply
from asset_assistant.domain.tool_catalog import ToolCall, parse_arguments
from asset_assistant.domain.store import StoreError
from asset_assistant.service.storage import InMemoryAssetStore


def text_reply(*lines: str) -> ModelReply:
    return ModelReply(text_messages=list(lines))


def tool_reply(*calls: tuple[str, object], text: Sequence[str] = ()) -> ModelReply:
    return ModelReply(
        text_messages=list(text),
        tool_calls=[ToolCall(name=name, arguments=parse_arguments(arguments)) for name, arguments in calls],
    )


class ScriptedGateway:
    """Gateway that replays queued replies (or raises queued exceptions) in order."""

    def __init__(self, *replies: ModelReply | Exception):
        self.replies: list[ModelReply | Exception] = list(replies)
        self.calls: list[tuple[str, list[ConversationTurn]]] = []
        self.release: asyncio.Event | None = None

    def queue(self, *replies: ModelReply | Exception) -> None:
        self.replies.extend(replies)

    async def send_conversation(self, prompt: str, history: Sequence[ConversationTurn]) -> ModelReply:
        self.calls.append((prompt, list(history)))
        if self.release is not None:
            await self.release.wait()
        reply = self.replies.pop(0) if self.replies else ModelReply()
        if isinstance(reply, Exception):
            raise reply
        return reply


class FailingStore(InMemoryAssetStore):
    """In-memory store whose writes fail."""

    async def create(self, asset_type, fields):
        raise StoreError("disk full")

    async def update_by_id(self, asset_type, asset_id, fields):
        raise StoreError("disk full")

    async def delete_by_id(self, asset_type, asset_id):
        raise StoreError("disk full")
