# src/asset_assistant/api/contracts/assistant.py
"""Assistant API contracts - thin views over domain state."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from ...domain.assistant import AssistantSession, ToolProposal
from ...domain.domain_type import AssistantState, ToolErrorKind
from ...domain.draft import DraftState, validate_for_create
from ...domain.executor import ToolResult
from ...domain.tool_catalog import ToolDefinition


class SendPromptRequest(BaseModel):
    """Request to send one utterance to the assistant."""

    text: str = Field(
        max_length=10_000,
        description="What the user said",
        examples=["Update Main Street condition to poor"],
    )
    session_id: UUID | None = Field(
        default=None,
        description="Existing session to continue, or None to start a new one",
        examples=["3fa85f64-5717-4562-b3fc-2c963f66afa6"],
    )


class DraftUpdateRequest(BaseModel):
    """Form edits to merge into the session draft."""

    fields: dict[str, Any] = Field(
        default_factory=dict,
        description="Field values keyed by camelCase name; blanks are ignored",
        examples=[{"name": "Main Street", "condition": "good"}],
    )
    asset_type: str | None = Field(default=None, examples=["Road"])
    intent: str | None = Field(default=None, examples=["create"])


class ToolResponse(BaseModel):
    """One catalogue entry."""

    name: str
    description: str | None
    parameters: dict[str, Any]

    @classmethod
    def from_definition(cls, tool: ToolDefinition) -> ToolResponse:
        return cls(name=tool.name.value, description=tool.description, parameters=tool.parameters)


class ProposalResponse(BaseModel):
    """Tool call awaiting confirmation."""

    summary: str
    tool_name: str
    arguments: Any = None
    auto: bool = False

    @classmethod
    def from_proposal(cls, proposal: ToolProposal) -> ProposalResponse:
        arguments = proposal.call.arguments
        if isinstance(arguments, BaseModel):
            arguments = arguments.model_dump(mode="json")
        return cls(
            summary=proposal.summary,
            tool_name=proposal.call.name,
            arguments=arguments,
            auto=proposal.auto,
        )


class DraftResponse(BaseModel):
    """Draft fields plus create-readiness."""

    intent: str | None
    asset_type: str | None
    fields: dict[str, Any]
    is_valid: bool
    errors: dict[str, str]

    @classmethod
    def from_draft(cls, draft: DraftState) -> DraftResponse:
        validation = validate_for_create(draft)
        return cls(
            intent=draft.intent.value if draft.intent else None,
            asset_type=draft.asset_type.value if draft.asset_type else None,
            fields=dict(draft.fields),
            is_valid=validation.is_valid,
            errors=dict(validation.errors),
        )


class SessionResponse(BaseModel):
    """Everything a client needs to render the assistant panel."""

    session_id: UUID = Field(description="Session ID for subsequent requests")
    state: AssistantState
    busy: bool
    messages: list[str]
    proposal: ProposalResponse | None
    draft: DraftResponse
    results: list[dict[str, Any]] = Field(description="Records returned by the last applied tool")

    @classmethod
    def from_session(cls, session: AssistantSession) -> SessionResponse:
        return cls(
            session_id=session.id.root,
            state=session.state,
            busy=session.busy,
            messages=list(session.messages),
            proposal=ProposalResponse.from_proposal(session.proposal) if session.proposal else None,
            draft=DraftResponse.from_draft(session.draft),
            results=list(session.last_results),
        )


class ToolResultResponse(BaseModel):
    """Outcome of an applied tool call."""

    success: bool
    message: str
    data: Any = None
    error_kind: ToolErrorKind | None = None

    @classmethod
    def from_result(cls, result: ToolResult) -> ToolResultResponse:
        return cls(success=result.success, message=result.message, data=result.data, error_kind=result.error_kind)


class ApplyResponse(BaseModel):
    """Result of applying the pending proposal, with the session afterwards."""

    result: ToolResultResponse
    session: SessionResponse
