"""Typed Tool Arguments - the untyped -> typed boundary.

Every tool in the catalogue has its own argument record. ``bind_tool_call``
is the single place an untyped ``ToolCall`` is turned into one of them: it
dispatches on the tool name through a discriminated union and converts every
failure into a ``ToolRejection`` value.

Wire Conventions:
    - Keys are camelCase (``qrTagId``, ``surfaceType``); snake_case also accepted
    - Unknown keys are dropped, never stored
    - Blank strings and nulls inside ``fields`` are treated as absent
    - Enum fields accept the same synonyms the draft accumulator does
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from .domain_type import (
    AssetCondition,
    AssetType,
    RoadSurfaceType,
    SelectorStrategy,
    ToolErrorKind,
    TrafficVolume,
)
from .tool_catalog import ArgumentParseError, ToolCall, get_tool, parse_arguments

_WIRE_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
    str_strip_whitespace=True,
)


def _synonym(parser: Any, value: Any) -> Any:
    # Leave unrecognized input alone so enum validation reports it
    return parser(value) or value


class RoadFields(BaseModel):
    """Partial set of road properties, as used by the update tools."""

    name: str | None = None
    location: str | None = None
    condition: AssetCondition | None = None
    notes: str | None = None
    qr_tag_id: str | None = None
    surface_type: RoadSurfaceType | None = None
    traffic_volume: TrafficVolume | None = None
    length: float | None = None
    width: float | None = None
    lanes: int | None = None
    speed_limit: int | None = None

    model_config = _WIRE_CONFIG

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {
                key: value
                for key, value in data.items()
                if value is not None and not (isinstance(value, str) and not value.strip())
            }
        return data

    @field_validator("condition", mode="before")
    @classmethod
    def condition_synonyms(cls, value: Any) -> Any:
        return _synonym(AssetCondition.parse, value)

    @field_validator("surface_type", mode="before")
    @classmethod
    def surface_synonyms(cls, value: Any) -> Any:
        return _synonym(RoadSurfaceType.parse, value)

    @field_validator("traffic_volume", mode="before")
    @classmethod
    def traffic_synonyms(cls, value: Any) -> Any:
        return _synonym(TrafficVolume.parse, value)

    def to_store_fields(self) -> dict[str, Any]:
        """Attribute-name keyed values that were actually supplied."""
        return self.model_dump(exclude_none=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class CreateRoadArgs(RoadFields):
    """Arguments for ``create_road``: the four required fields plus optionals."""

    name: str = Field(min_length=1)
    condition: AssetCondition
    surface_type: RoadSurfaceType
    traffic_volume: TrafficVolume


class _SelectorArgs(BaseModel):
    by: SelectorStrategy
    value: str
    limit: int | None = None

    model_config = _WIRE_CONFIG


class UpdateRoadArgs(BaseModel):
    id: str = Field(min_length=1, validation_alias=AliasChoices("id", "_id"))
    fields: RoadFields

    model_config = _WIRE_CONFIG

    @field_validator("fields")
    @classmethod
    def require_fields(cls, value: RoadFields) -> RoadFields:
        if not value.to_store_fields():
            raise ValueError("No update fields provided")
        return value


class UpdateRoadByArgs(_SelectorArgs):
    fields: RoadFields

    @field_validator("fields")
    @classmethod
    def require_fields(cls, value: RoadFields) -> RoadFields:
        if not value.to_store_fields():
            raise ValueError("No update fields provided")
        return value


class DeleteRoadByArgs(_SelectorArgs):
    pass


class DeleteAssetArgs(BaseModel):
    id: str = Field(min_length=1, validation_alias=AliasChoices("id", "_id"))
    type: AssetType

    model_config = _WIRE_CONFIG

    @field_validator("type", mode="before")
    @classmethod
    def any_case_type(cls, value: Any) -> Any:
        return AssetType(value) if isinstance(value, str) else value


class FindAssetArgs(_SelectorArgs):
    type: AssetType | None = None

    @field_validator("type", mode="before")
    @classmethod
    def any_case_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            return AssetType(value) if value.strip() else None
        return value


class CreateRoadCall(BaseModel):
    name: Literal["create_road"]
    arguments: CreateRoadArgs


class UpdateRoadCall(BaseModel):
    name: Literal["update_road"]
    arguments: UpdateRoadArgs


class UpdateRoadByCall(BaseModel):
    name: Literal["update_road_by"]
    arguments: UpdateRoadByArgs


class DeleteAssetCall(BaseModel):
    name: Literal["delete_asset"]
    arguments: DeleteAssetArgs


class DeleteRoadByCall(BaseModel):
    name: Literal["delete_road_by"]
    arguments: DeleteRoadByArgs


class FindAssetCall(BaseModel):
    name: Literal["find_asset"]
    arguments: FindAssetArgs


# Tagged union over tool names: the name picks the argument record
ToolInvocation = Annotated[
    CreateRoadCall | UpdateRoadCall | UpdateRoadByCall | DeleteAssetCall | DeleteRoadByCall | FindAssetCall,
    Field(discriminator="name"),
]

_INVOCATION = TypeAdapter(ToolInvocation)


class ToolRejection(BaseModel):
    """Why a tool call could not be bound to typed arguments."""

    kind: ToolErrorKind
    message: str

    model_config = ConfigDict(frozen=True)


def _describe(tool_name: str, exc: ValidationError) -> str:
    problems: list[str] = []
    for error in exc.errors(include_url=False):
        # loc is ("arguments", <tool tag>?, field, ...); keep the field path only
        loc = [str(part) for part in error["loc"] if part not in ("arguments", tool_name)]
        field = ".".join(loc) or "arguments"
        if error["type"] == "missing":
            problems.append(f"missing required field '{field}'")
        else:
            problems.append(f"{field}: {error['msg']}")
    return f"Invalid arguments for {tool_name}: " + "; ".join(problems)


def bind_tool_call(call: ToolCall) -> ToolInvocation | ToolRejection:
    """Turn an untyped tool call into its typed invocation, or say why not."""
    if get_tool(call.name) is None:
        return ToolRejection(kind=ToolErrorKind.UNSUPPORTED_TOOL, message=f"Unsupported tool: {call.name}")

    arguments = parse_arguments(call.arguments)
    if isinstance(arguments, ArgumentParseError):
        return ToolRejection(kind=ToolErrorKind.PARSE_ERROR, message=arguments.error)
    if not isinstance(arguments, dict):
        return ToolRejection(
            kind=ToolErrorKind.INVALID_ARGUMENTS,
            message=f"Invalid arguments for {call.name}: expected an object",
        )

    try:
        return _INVOCATION.validate_python({"name": call.name, "arguments": arguments})
    except ValidationError as exc:
        return ToolRejection(kind=ToolErrorKind.INVALID_ARGUMENTS, message=_describe(call.name, exc))


__all__ = [
    "CreateRoadArgs",
    "CreateRoadCall",
    "DeleteAssetArgs",
    "DeleteAssetCall",
    "DeleteRoadByArgs",
    "DeleteRoadByCall",
    "FindAssetArgs",
    "FindAssetCall",
    "RoadFields",
    "ToolInvocation",
    "ToolRejection",
    "UpdateRoadArgs",
    "UpdateRoadByArgs",
    "UpdateRoadByCall",
    "UpdateRoadCall",
    "bind_tool_call",
]
