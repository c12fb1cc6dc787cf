"""Domain Layer - Tool-Calling Resolution for Field Assets.

Turns a conversation with a language model into safe, confirmed changes to a
store of road and vehicle records.

Key Components:
    - Tool Catalogue: the fixed set of tools the model may propose
    - Draft Accumulator: gathers create fields across turns
    - Selector Resolver: finds records by name, QR tag or free text
    - ToolExecutor: runs a validated call and reports the outcome as a value
    - AssistantSession: the per-user conversation state machine

Design Principles:
    - Immutable by Default: records, drafts, calls and results are frozen
    - Errors as Values: nothing below the session raises on bad model output
    - Explicit Dependencies: the store and the model are passed in, never global
"""

from .assistant import (
    AssistantBusyError,
    AssistantSession,
    EmptyUtteranceError,
    NoActiveProposalError,
    ToolProposal,
)
from .domain_type import (
    AssetCondition,
    AssetType,
    AssistantState,
    DraftIntent,
    RoadSurfaceType,
    SelectorStrategy,
    StoreBackend,
    ToolErrorKind,
    ToolName,
    TrafficVolume,
    VehiclePriority,
)
from .domain_value import Asset, AssetId, ConversationTurn, Road, SessionId, Vehicle
from .draft import (
    DraftState,
    DraftValidation,
    build_create_args,
    merge_fields,
    normalize_field,
    validate_for_create,
)
from .executor import ToolExecutor, ToolResult
from .gateway import GatewayError, ModelGateway, ModelReply, PydanticAIGateway
from .selector import SelectorSpec, resolve_selector
from .store import AssetStore, StoreError
from .tool_catalog import ArgumentParseError, ToolCall, ToolDefinition, list_tools, parse_arguments

__all__ = [
    "ArgumentParseError",
    "Asset",
    "AssetCondition",
    "AssetId",
    "AssetStore",
    "AssetType",
    "AssistantBusyError",
    "AssistantSession",
    "AssistantState",
    "ConversationTurn",
    "DraftIntent",
    "DraftState",
    "DraftValidation",
    "EmptyUtteranceError",
    "GatewayError",
    "ModelGateway",
    "ModelReply",
    "NoActiveProposalError",
    "PydanticAIGateway",
    "Road",
    "RoadSurfaceType",
    "SelectorSpec",
    "SelectorStrategy",
    "SessionId",
    "StoreBackend",
    "StoreError",
    "ToolCall",
    "ToolDefinition",
    "ToolErrorKind",
    "ToolExecutor",
    "ToolName",
    "ToolProposal",
    "ToolResult",
    "TrafficVolume",
    "Vehicle",
    "VehiclePriority",
    "build_create_args",
    "list_tools",
    "merge_fields",
    "normalize_field",
    "parse_arguments",
    "resolve_selector",
    "validate_for_create",
]
