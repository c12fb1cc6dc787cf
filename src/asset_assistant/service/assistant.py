"""Thin orchestration service - owns sessions, delegates to the domain."""

from __future__ import annotations

from uuid import UUID

from ..domain.assistant import AssistantSession
from ..domain.domain_value import SessionId
from ..domain.executor import ToolExecutor
from ..domain.gateway import DEFAULT_HISTORY_TURNS, ModelGateway, PydanticAIGateway
from ..domain.store import AssetStore


class SessionNotFoundError(KeyError):
    """No session with the requested id."""


class AssistantService:
    """
    Pure infrastructure orchestrator - zero business logic.

    Service responsibilities:
    1. Own the store, executor and gateway shared by every session
    2. Create and look up sessions by id
    3. Delegate everything else to AssistantSession

    Sessions live in process memory; a restart starts every user over.
    """

    def __init__(self, store: AssetStore, gateway: ModelGateway):
        self.store = store
        self.gateway = gateway
        self.executor = ToolExecutor(store)
        self._sessions: dict[UUID, AssistantSession] = {}

    def start_session(self) -> AssistantSession:
        session = AssistantSession(gateway=self.gateway, executor=self.executor)
        self._sessions[session.id.root] = session
        return session

    def get_session(self, session_id: UUID | str) -> AssistantSession:
        """
        Look up a live session.

        Raises:
            SessionNotFoundError: Unknown or malformed id
        """
        try:
            key = session_id if isinstance(session_id, UUID) else UUID(str(session_id))
        except ValueError as exc:
            raise SessionNotFoundError(str(session_id)) from exc
        session = self._sessions.get(key)
        if session is None:
            raise SessionNotFoundError(str(session_id))
        return session

    def get_or_start(self, session_id: UUID | str | None) -> AssistantSession:
        return self.get_session(session_id) if session_id else self.start_session()

    def end_session(self, session_id: SessionId) -> None:
        self._sessions.pop(session_id.root, None)


def create_assistant_service(
    store: AssetStore,
    model: str,
    timeout: float = 20.0,
    history_turns: int = DEFAULT_HISTORY_TURNS,
    api_key: str | None = None,
) -> AssistantService:
    """
    Factory function for creating AssistantService.

    Service owns its own construction logic - deps.py just calls this.

    Args:
        store: Asset store backend
        model: pydantic-ai model name, e.g. 'openai:gpt-4.1-mini'
        timeout: Per-request model timeout in seconds
        history_turns: Conversation turns sent with each prompt
        api_key: Provider key for OpenAI models; None reads OPENAI_API_KEY

    Returns:
        Configured AssistantService ready for use
    """
    gateway = PydanticAIGateway(model=model, timeout=timeout, history_turns=history_turns, api_key=api_key)
    return AssistantService(store=store, gateway=gateway)


__all__ = ["AssistantService", "SessionNotFoundError", "create_assistant_service"]
