"""Tool Catalogue - Tools the Language Model May Request.

Defines the fixed, ordered set of tools the assistant exposes to the model on
every turn, and the boundary where raw model output becomes a ``ToolCall``.

Catalogue Rules:
    - Order is stable; the model sees the same list every turn
    - Enum values in schemas come straight from the domain enums
    - Validating arguments against a schema is the executor's job, not ours

Argument Parsing:
    Models emit arguments either as objects or as JSON-encoded strings.
    ``parse_arguments`` decodes strings and hands back an
    ``ArgumentParseError`` value on malformed JSON instead of raising, so a bad
    reply never escapes as an exception.

Example:
    >>> [tool.name for tool in list_tools()][:2]
    ['create_road', 'update_road']
    >>> parse_arguments('{"by": "name", "value": "Main Street"}')
    {'by': 'name', 'value': 'Main Street'}
    >>> isinstance(parse_arguments("{not json"), ArgumentParseError)
    True
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, ConfigDict

from .domain_type import (
    AssetCondition,
    AssetType,
    RoadSurfaceType,
    SelectorStrategy,
    ToolName,
    TrafficVolume,
)

if TYPE_CHECKING:
    from pydantic_ai.tools import ToolDefinition as AgentToolDefinition


class ArgumentParseError(BaseModel):
    """Tagged error value for tool arguments that were not valid JSON.

    Never an empty dict, never an exception: callers check with isinstance.
    """

    kind: Literal["parse_error"] = "parse_error"
    raw: str
    error: str = "Failed to parse tool arguments JSON"

    model_config = ConfigDict(frozen=True)


class ToolCall(BaseModel):
    """A tool the model asked for, with arguments as received (or parsed)."""

    name: str
    arguments: Any = None

    model_config = ConfigDict(frozen=True)


class ToolDefinition(BaseModel):
    """Immutable descriptor of one tool exposed to the model.

    Attributes:
        name: Unique tool name
        parameters: JSON schema for the arguments object
        description: Natural-language hint the model reads when choosing tools
    """

    name: ToolName
    parameters: dict[str, Any]
    description: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(self.parameters.get("required", ()))

    def to_agent_tool(self) -> AgentToolDefinition:
        """Convert to pydantic-ai's tool definition for a direct model request."""
        from pydantic_ai.tools import ToolDefinition as AgentToolDefinition

        return AgentToolDefinition(
            name=self.name.value,
            description=self.description,
            parameters_json_schema=self.parameters,
        )


def parse_arguments(raw: Any) -> Any:
    """Decode JSON-string arguments; pass structured values through unchanged."""
    if isinstance(raw, str):
        try:
            return json.loads(raw)
        except ValueError:
            return ArgumentParseError(raw=raw)
    return raw


def _enum_property(enum: type[Any], description: str | None = None) -> dict[str, Any]:
    prop: dict[str, Any] = {"type": "string", "enum": [member.value for member in enum]}
    if description:
        prop["description"] = description
    return prop


def _road_properties() -> dict[str, Any]:
    return {
        "name": {"type": "string"},
        "location": {"type": "string"},
        "condition": _enum_property(AssetCondition),
        "notes": {"type": "string"},
        "qrTagId": {"type": "string"},
        "surfaceType": _enum_property(RoadSurfaceType),
        "trafficVolume": _enum_property(TrafficVolume),
        "length": {"type": "number"},
        "width": {"type": "number"},
        "lanes": {"type": "integer"},
        "speedLimit": {"type": "integer"},
    }


def _road_fields_schema() -> dict[str, Any]:
    return {
        "type": "object",
        "minProperties": 1,
        "properties": _road_properties(),
        "additionalProperties": False,
    }


def _selector_properties(action: str) -> dict[str, Any]:
    return {
        "by": _enum_property(
            SelectorStrategy,
            "How to select the road. Use 'search' for most natural language queries. "
            "Use 'qrTagId' when the user provides a QR tag. Use 'name' for exact match "
            "and 'nameContains' for partial match.",
        ),
        "value": {
            "type": "string",
            "description": (
                "Selector value. For 'search', this can be any free-text term (or empty string "
                f"to list all roads, though {action} will fail if multiple matches)."
            ),
        },
        "limit": {
            "type": "number",
            "description": (
                "Optional: limit candidates when selector is broad (e.g., by='search'). "
                "Use 1 when you're confident it should match a single road."
            ),
        },
    }


TOOL_CATALOG: tuple[ToolDefinition, ...] = (
    ToolDefinition(
        name=ToolName.CREATE_ROAD,
        description="Create a new road once name, condition, surface type and traffic volume are known.",
        parameters={
            "type": "object",
            "required": ["name", "condition", "surfaceType", "trafficVolume"],
            "properties": _road_properties(),
        },
    ),
    ToolDefinition(
        name=ToolName.UPDATE_ROAD,
        description="Update a road by its hex id.",
        parameters={
            "type": "object",
            "required": ["id", "fields"],
            "properties": {
                "id": {"type": "string", "description": "Hex string id of the road"},
                "fields": _road_fields_schema(),
            },
        },
    ),
    ToolDefinition(
        name=ToolName.UPDATE_ROAD_BY,
        description=(
            "Update a road by selector (name/qrTagId/search) without requiring the user to provide an id. "
            "Use this when the user says things like 'Update Main Street condition to poor' or "
            "'Change the road with QR ROA-123 to fair'. If multiple roads match, this tool will return "
            "candidates so the user can pick one."
        ),
        parameters={
            "type": "object",
            "required": ["by", "value", "fields"],
            "properties": {**_selector_properties("update"), "fields": _road_fields_schema()},
            "additionalProperties": False,
        },
    ),
    ToolDefinition(
        name=ToolName.DELETE_ASSET,
        description="Delete an asset by its hex id and type.",
        parameters={
            "type": "object",
            "required": ["id", "type"],
            "properties": {
                "id": {"type": "string", "description": "Hex string id of the asset"},
                "type": _enum_property(AssetType),
            },
        },
    ),
    ToolDefinition(
        name=ToolName.DELETE_ROAD_BY,
        description=(
            "Delete a road by selector (name/qrTagId/search) without requiring the user to provide an id. "
            "Prefer this when the user says 'Delete Main Street' or 'Remove the road with QR ROA-123'. "
            "If multiple roads match, this tool will return candidates so the user can pick one."
        ),
        parameters={
            "type": "object",
            "required": ["by", "value"],
            "properties": _selector_properties("delete"),
            "additionalProperties": False,
        },
    ),
    ToolDefinition(
        name=ToolName.FIND_ASSET,
        description=(
            "Search for assets by any field. Use this tool when the user wants to find, search, list, show, "
            "get, or retrieve assets. Use 'search' for general queries; it matches across name, location, "
            "condition, notes, identifier and the other fields. For 'any road', 'all roads' or similar "
            "generic requests use by='search' with value='' and type='Road'. If the user asks for 'one' "
            "or 'a single' asset, set limit=1."
        ),
        parameters={
            "type": "object",
            "required": ["by", "value"],
            "properties": {
                "by": _enum_property(
                    SelectorStrategy,
                    "Use 'search' for most queries. Use 'id' for exact id, 'name' for exact name match, "
                    "'nameContains' for partial name only, 'qrTagId' for QR tag lookup.",
                ),
                "value": {
                    "type": "string",
                    "description": "The search term. Use '' when the user asks for 'any', 'all' or 'one'.",
                },
                "type": _enum_property(
                    AssetType, "Optional: filter by asset type. If omitted, searches all asset types."
                ),
                "limit": {
                    "type": "number",
                    "description": "Optional: maximum number of results to return.",
                },
            },
        },
    ),
)

_BY_NAME: dict[str, ToolDefinition] = {tool.name.value: tool for tool in TOOL_CATALOG}


def list_tools() -> tuple[ToolDefinition, ...]:
    """The full catalogue, in the order the model sees it."""
    return TOOL_CATALOG


def get_tool(name: str) -> ToolDefinition | None:
    return _BY_NAME.get(name)


__all__ = [
    "TOOL_CATALOG",
    "ArgumentParseError",
    "ToolCall",
    "ToolDefinition",
    "get_tool",
    "list_tools",
    "parse_arguments",
]
