"""Assistant API Router - thin HTTP layer over the session state machine."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from ...domain.assistant import (
    AssistantBusyError,
    AssistantSession,
    EmptyUtteranceError,
    NoActiveProposalError,
)
from ...domain.tool_catalog import list_tools
from ...service import AssistantService, SessionNotFoundError
from ..contracts import (
    ApplyResponse,
    DraftUpdateRequest,
    SendPromptRequest,
    SessionResponse,
    ToolResponse,
    ToolResultResponse,
)
from ..deps import get_assistant_service

router = APIRouter(prefix="/assistant", tags=["assistant"])


def _session_or_404(service: AssistantService, session_id: UUID) -> AssistantSession:
    try:
        return service.get_session(session_id)
    except SessionNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Session not found") from exc


@router.get("/tools", response_model=list[ToolResponse])
async def list_assistant_tools() -> list[ToolResponse]:
    """List the tools offered to the model, in the order it sees them."""
    return [ToolResponse.from_definition(tool) for tool in list_tools()]


@router.post("/", response_model=SessionResponse)
async def send_prompt(
    request: SendPromptRequest,
    service: Annotated[AssistantService, Depends(get_assistant_service)],
) -> SessionResponse:
    """
    Send an utterance and get the assistant's reply.

    Thin orchestration layer:
    1. Continue the given session or start a new one
    2. Call session.send() (domain owns the state machine)
    3. Map to API contract
    """
    if not request.text.strip():
        raise HTTPException(status_code=400, detail="Empty prompt")

    session = _session_or_404(service, request.session_id) if request.session_id else service.start_session()

    try:
        await session.send(request.text)
    except EmptyUtteranceError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except AssistantBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    return SessionResponse.from_session(session)


@router.get("/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: UUID,
    service: Annotated[AssistantService, Depends(get_assistant_service)],
) -> SessionResponse:
    """Get the current state of a session."""
    return SessionResponse.from_session(_session_or_404(service, session_id))


@router.post("/{session_id}/apply", response_model=ApplyResponse)
async def apply_proposal(
    session_id: UUID,
    service: Annotated[AssistantService, Depends(get_assistant_service)],
) -> ApplyResponse:
    """Confirm and run the pending tool proposal."""
    session = _session_or_404(service, session_id)
    try:
        result = await session.apply()
    except NoActiveProposalError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except AssistantBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    return ApplyResponse(
        result=ToolResultResponse.from_result(result),
        session=SessionResponse.from_session(session),
    )


@router.post("/{session_id}/draft", response_model=SessionResponse)
async def update_draft(
    session_id: UUID,
    request: DraftUpdateRequest,
    service: Annotated[AssistantService, Depends(get_assistant_service)],
) -> SessionResponse:
    """Merge form edits into the session draft."""
    session = _session_or_404(service, session_id)
    session.update_draft(request.fields, asset_type=request.asset_type, intent=request.intent)
    return SessionResponse.from_session(session)


@router.post("/{session_id}/reset", response_model=SessionResponse)
async def reset_session(
    session_id: UUID,
    service: Annotated[AssistantService, Depends(get_assistant_service)],
) -> SessionResponse:
    """Clear draft, proposal, messages and history."""
    session = _session_or_404(service, session_id)
    try:
        session.reset()
    except AssistantBusyError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    return SessionResponse.from_session(session)
