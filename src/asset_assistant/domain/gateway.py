"""Model Gateway - One Round Trip to the Language Model.

The orchestrator never talks to a provider directly. It hands a prompt and
the recent conversation to a ``ModelGateway`` and gets back a ``ModelReply``:
the text lines the model wrote and the tool calls it proposed.

``PydanticAIGateway`` is the production adapter. It sends the tool catalogue
as function tools through ``pydantic_ai.direct.model_request`` (no agent
loop: tools are proposed, never run here) and retries a failed transport
exactly once before raising ``GatewayError``.

Guidance:
    The system prompt asks the model to gather missing fields one short
    question at a time, to propose a single tool call when ready, and to
    append a ``DRAFT_JSON:`` line describing what it has learned so far.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

import logfire
from openai import AsyncOpenAI, OpenAIError
from pydantic import BaseModel, ConfigDict, Field
from pydantic_ai.direct import model_request
from pydantic_ai.exceptions import ModelAPIError
from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    SystemPromptPart,
    TextPart,
    ToolCallPart,
    UserPromptPart,
)
from pydantic_ai.models import Model, ModelRequestParameters
from pydantic_ai.models.openai import OpenAIChatModel, OpenAIResponsesModel
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings

from .domain_value import ConversationTurn
from .draft import DRAFT_MARKER
from .tool_catalog import ToolCall, ToolDefinition, list_tools, parse_arguments

DEFAULT_HISTORY_TURNS = 8

GUIDANCE = f"""You help field crews manage road and vehicle assets.
- When the user wants to create a road, collect name, condition, surface type and traffic volume.
  Ask one short follow-up question at a time for whatever is still missing.
- When you have what a tool needs, propose exactly one tool call. Do not describe several options.
- Prefer the selector tools (update_road_by, delete_road_by) over asking the user for an id.
- After every text reply, append one line starting with {DRAFT_MARKER} followed by a JSON object
  like {{"intent": "create", "assetType": "Road", "fields": {{"name": "Main Street"}}}}
  holding every field you have learned so far."""

_OPENAI_MODELS: dict[str, type[OpenAIChatModel] | type[OpenAIResponsesModel]] = {
    "openai": OpenAIResponsesModel,
    "openai-responses": OpenAIResponsesModel,
    "openai-chat": OpenAIChatModel,
}


class GatewayError(RuntimeError):
    """The model could not be reached, even after a retry."""


class ModelReply(BaseModel):
    """What the model sent back for one prompt.

    Attributes:
        text_messages: Text parts in order, unmodified
        tool_calls: Proposed tool calls in order, arguments already parsed
    """

    text_messages: list[str] = Field(default_factory=list)
    tool_calls: list[ToolCall] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not self.text_messages and not self.tool_calls


class ModelGateway(Protocol):
    async def send_conversation(self, prompt: str, history: Sequence[ConversationTurn]) -> ModelReply: ...


def build_messages(
    prompt: str,
    history: Sequence[ConversationTurn],
    history_turns: int = DEFAULT_HISTORY_TURNS,
    instructions: str = GUIDANCE,
) -> list[ModelMessage]:
    """Guidance, the last ``history_turns`` turns, then the new prompt."""
    messages: list[ModelMessage] = [ModelRequest(parts=[SystemPromptPart(content=instructions)])]
    recent = list(history)[-history_turns:] if history_turns > 0 else []
    for turn in recent:
        if turn.role == "user":
            messages.append(ModelRequest(parts=[UserPromptPart(content=turn.content)]))
        else:
            messages.append(ModelResponse(parts=[TextPart(content=turn.content)]))
    messages.append(ModelRequest(parts=[UserPromptPart(content=prompt)]))
    return messages


def reply_from_response(response: ModelResponse) -> ModelReply:
    text_messages: list[str] = []
    tool_calls: list[ToolCall] = []
    for part in response.parts:
        if isinstance(part, TextPart):
            if part.content:
                text_messages.append(part.content)
        elif isinstance(part, ToolCallPart):
            tool_calls.append(ToolCall(name=part.tool_name, arguments=parse_arguments(part.args)))
    return ModelReply(text_messages=text_messages, tool_calls=tool_calls)


def build_model(name: str, api_key: str | None = None) -> Model | str:
    """Resolve a ``provider:model`` name for ``model_request``.

    OpenAI models get an SDK client with ``max_retries=0``: the gateway owns
    the single retry, so one failed turn is at most two HTTP requests. Other
    names pass through for pydantic-ai to infer.

    Raises:
        GatewayError: The OpenAI client could not be built (no API key)
    """
    provider_name, _, model_name = name.partition(":")
    model_class = _OPENAI_MODELS.get(provider_name)
    if model_class is None or not model_name:
        return name
    try:
        client = AsyncOpenAI(api_key=api_key, max_retries=0)
    except OpenAIError as exc:
        raise GatewayError(f"Assistant model is not configured: {exc}") from exc
    return model_class(model_name, provider=OpenAIProvider(openai_client=client))


class PydanticAIGateway:
    """Gateway backed by any pydantic-ai model (``"openai:gpt-4.1-mini"`` etc.).

    The model is resolved on first use, so the app starts without an API key
    and reports the missing key as a failed turn.

    Example:
        >>> gateway = PydanticAIGateway("openai:gpt-4.1-mini", timeout=20)
        >>> reply = await gateway.send_conversation("Add a road called Main Street", history=[])
        >>> reply.text_messages
        ['What condition is Main Street in?', 'DRAFT_JSON: {...}']
    """

    def __init__(
        self,
        model: str,
        tools: Sequence[ToolDefinition] | None = None,
        history_turns: int = DEFAULT_HISTORY_TURNS,
        timeout: float = 20.0,
        api_key: str | None = None,
    ) -> None:
        self.model = model
        self.tools = tuple(tools) if tools is not None else list_tools()
        self.history_turns = history_turns
        self.timeout = timeout
        self.api_key = api_key
        self._resolved: Model | str | None = None

    def get_model(self) -> Model | str:
        """Get or build the pydantic-ai model (lazy)."""
        if self._resolved is None:
            self._resolved = build_model(self.model, self.api_key)
        return self._resolved

    async def send_conversation(self, prompt: str, history: Sequence[ConversationTurn]) -> ModelReply:
        messages = build_messages(prompt, history, self.history_turns)
        parameters = ModelRequestParameters(function_tools=[tool.to_agent_tool() for tool in self.tools])
        settings = ModelSettings(timeout=self.timeout)

        with logfire.span("model_request {model}", model=self.model, history_turns=len(messages) - 2):
            model = self.get_model()
            for attempt in (1, 2):
                try:
                    response = await model_request(
                        model,
                        messages,
                        model_settings=settings,
                        model_request_parameters=parameters,
                    )
                except ModelAPIError as exc:
                    if attempt == 2:
                        raise GatewayError(f"Network error contacting assistant: {exc}") from exc
                    logfire.warn("Model request failed, retrying once", error=str(exc))
                    continue
                return reply_from_response(response)

        raise GatewayError("Network error contacting assistant")


__all__ = [
    "DEFAULT_HISTORY_TURNS",
    "GUIDANCE",
    "GatewayError",
    "ModelGateway",
    "ModelReply",
    "PydanticAIGateway",
    "build_messages",
    "build_model",
    "reply_from_response",
]
