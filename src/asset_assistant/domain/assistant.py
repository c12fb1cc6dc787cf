"""Assistant Session - Conversation Orchestrator.

One ``AssistantSession`` is one user's conversation with the assistant. It
sends utterances through a ``ModelGateway``, turns replies into either
display text plus draft updates or a single tool proposal, and applies an
accepted proposal through the ``ToolExecutor``.

State Machine:
    idle -> sending -> awaiting_model_reply -> text_received | tool_proposed
    tool_proposed -> applying -> applied | apply_failed
    any failure reaching the model -> idle (with fallback text)

    ``busy`` is true while sending, awaiting a reply or applying; a second
    ``send`` or ``apply`` in that window is rejected. The flag is set before
    the first await, so overlapping calls on one event loop cannot both pass.

Proposals:
    Only the first tool call of a reply becomes the proposal; the rest are
    logged and dropped. A road draft that becomes complete after a text reply
    (or a form edit) yields an automatic ``create_road`` proposal.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import logfire
from pydantic import BaseModel, ConfigDict

from .domain_type import AssetType, AssistantState, ToolErrorKind, ToolName
from .domain_value import ConversationTurn, SessionId
from .draft import (
    DraftState,
    apply_hint,
    build_create_args,
    clean_messages,
    extract_draft_hint,
    infer_asset_type,
    merge_fields,
)
from .executor import ToolExecutor, ToolResult
from .gateway import GatewayError, ModelGateway, ModelReply
from .tool_catalog import ToolCall

FALLBACK_TEXT = "Failed to contact assistant."
EMPTY_REPLY_TEXT = "I received your request but didn't get a response. Please try again."
AUTO_PROPOSAL_SUMMARY = "Auto-generated create_road proposal"


class EmptyUtteranceError(ValueError):
    """Raised when ``send`` is given nothing but whitespace."""


class AssistantBusyError(RuntimeError):
    """Raised when the session is already sending or applying."""


class NoActiveProposalError(ValueError):
    """Raised when ``apply`` is called with nothing proposed."""


class ToolProposal(BaseModel):
    """A tool call waiting for the user's confirmation.

    Attributes:
        summary: One line shown to the user describing the action
        call: The tool call to run on apply
        auto: True when built from a complete draft rather than by the model
    """

    summary: str
    call: ToolCall
    auto: bool = False

    model_config = ConfigDict(frozen=True)


def default_summary(tool_name: str) -> str:
    return f"I'll {tool_name.replace('_', ' ') or 'action'} for you."


class AssistantSession:
    """Mutable conversation state around immutable drafts and proposals.

    Attributes:
        id: Session identity
        state: Current position in the state machine
        draft: Fields gathered so far
        proposal: Tool call awaiting confirmation, if any
        messages: Lines to show the user for the latest step
        history: Every user and assistant turn, in order
        last_results: Records returned by the last applied tool, if a list
        last_result: Full result of the last applied tool
    """

    def __init__(
        self,
        gateway: ModelGateway,
        executor: ToolExecutor,
        session_id: SessionId | None = None,
    ) -> None:
        self.id = session_id or SessionId()
        self.gateway = gateway
        self.executor = executor
        self.state = AssistantState.IDLE
        self.draft = DraftState()
        self.proposal: ToolProposal | None = None
        self.messages: list[str] = []
        self.history: list[ConversationTurn] = []
        self.last_results: list[dict[str, Any]] = []
        self.last_result: ToolResult | None = None

    @property
    def busy(self) -> bool:
        return self.state.is_busy

    def _require_idle(self) -> None:
        if self.busy:
            raise AssistantBusyError(f"Assistant is busy ({self.state.value})")

    async def send(self, utterance: str) -> None:
        """Send one user utterance and absorb the model's reply.

        Raises:
            EmptyUtteranceError: ``utterance`` is blank
            AssistantBusyError: A send or apply is already in flight
        """
        text = (utterance or "").strip()
        if not text:
            raise EmptyUtteranceError("Empty prompt")
        self._require_idle()

        self.state = AssistantState.SENDING
        self.proposal = None
        self.last_results = []
        prior = list(self.history)
        self.history.append(ConversationTurn(role="user", content=text))

        with logfire.span("assistant_send", session_id=str(self.id.root)):
            try:
                self.state = AssistantState.AWAITING_MODEL_REPLY
                reply = await self.gateway.send_conversation(text, prior)
                if reply.tool_calls:
                    self._receive_tool_call(reply)
                else:
                    self._receive_text(reply, text)
            except GatewayError as exc:
                logfire.warn("Assistant unreachable", error=str(exc))
                self._fall_back()
            except Exception:
                logfire.exception("Assistant send failed")
                self._fall_back()

    def _fall_back(self) -> None:
        self.messages = [FALLBACK_TEXT]
        self.state = AssistantState.IDLE

    def _absorb_hint(self, lines: list[str], *fallback_sources: str | None) -> None:
        hint = extract_draft_hint(lines)
        if hint is None:
            return
        merged = apply_hint(self.draft, hint)
        if merged.asset_type is None:
            inferred = next(
                (found for found in map(infer_asset_type, fallback_sources) if found is not None),
                None,
            )
            merged = merged.model_copy(update={"asset_type": inferred})
        self.draft = merged

    def _receive_text(self, reply: ModelReply, prompt: str) -> None:
        self.messages = [EMPTY_REPLY_TEXT] if reply.is_empty else clean_messages(reply.text_messages)
        self._absorb_hint(reply.text_messages, prompt, " ".join(reply.text_messages))
        if reply.text_messages:
            self.history.append(ConversationTurn(role="assistant", content="\n".join(reply.text_messages)))
        self.state = AssistantState.TEXT_RECEIVED
        self._propose_from_draft()

    def _receive_tool_call(self, reply: ModelReply) -> None:
        first, *extra = reply.tool_calls
        if extra:
            logfire.info(
                "Discarding {count} extra tool calls",
                count=len(extra),
                kept=first.name,
                discarded=[call.name for call in extra],
            )
        summary = reply.text_messages[0] if reply.text_messages else default_summary(first.name)
        self.proposal = ToolProposal(summary=summary, call=first)
        self.messages = clean_messages([summary])
        self._absorb_hint([summary], summary)
        self.history.append(ConversationTurn(role="assistant", content=summary))
        self.state = AssistantState.TOOL_PROPOSED

    def _propose_from_draft(self) -> None:
        if self.proposal is not None or self.draft.asset_type != AssetType.ROAD:
            return
        args = build_create_args(self.draft)
        if args is None:
            return
        self.proposal = ToolProposal(
            summary=AUTO_PROPOSAL_SUMMARY,
            call=ToolCall(name=ToolName.CREATE_ROAD.value, arguments=args.to_wire()),
            auto=True,
        )
        self.state = AssistantState.TOOL_PROPOSED

    def update_draft(
        self,
        fields: Mapping[str, Any],
        asset_type: AssetType | str | None = None,
        intent: str | None = None,
    ) -> DraftState:
        """Merge the user's own edits into the draft, with the same rules as model hints."""
        merged = merge_fields(self.draft, fields)
        self.draft = DraftState(
            intent=intent or merged.intent,
            asset_type=asset_type or merged.asset_type,
            fields=merged.fields,
        )
        if not self.busy:
            self._propose_from_draft()
        return self.draft

    async def apply(self) -> ToolResult:
        """Run the pending proposal; the proposal is cleared whatever the outcome.

        Raises:
            AssistantBusyError: A send or apply is already in flight
            NoActiveProposalError: Nothing is waiting to be applied
        """
        self._require_idle()
        if self.proposal is None:
            raise NoActiveProposalError("No tool proposal to apply")

        proposal = self.proposal
        self.state = AssistantState.APPLYING
        try:
            result = await self.executor.execute(proposal.call)
        except Exception as exc:
            logfire.exception("Tool execution raised for {tool}", tool=proposal.call.name)
            result = ToolResult.fail(ToolErrorKind.STORE_FAILURE, str(exc) or type(exc).__name__)
        finally:
            self.proposal = None

        line = ("Success: " if result.success else "Error: ") + result.message
        self.messages = [line]
        self.last_results = result.candidates
        self.last_result = result
        self.history.append(ConversationTurn(role="assistant", content=line))
        if result.success and proposal.call.name == ToolName.CREATE_ROAD.value:
            self.draft = DraftState()
        self.state = AssistantState.APPLIED if result.success else AssistantState.APPLY_FAILED
        return result

    def reset(self) -> None:
        """Forget everything but the session identity.

        Raises:
            AssistantBusyError: A send or apply is still in flight
        """
        self._require_idle()
        self.state = AssistantState.IDLE
        self.draft = DraftState()
        self.proposal = None
        self.messages = []
        self.history = []
        self.last_results = []
        self.last_result = None


__all__ = [
    "AUTO_PROPOSAL_SUMMARY",
    "EMPTY_REPLY_TEXT",
    "FALLBACK_TEXT",
    "AssistantBusyError",
    "AssistantSession",
    "EmptyUtteranceError",
    "NoActiveProposalError",
    "ToolProposal",
    "default_summary",
]
