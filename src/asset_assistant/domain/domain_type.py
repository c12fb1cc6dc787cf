"""Domain Type System - Core Enumerations.

Defines type-safe constants using Python's StrEnum for domain concepts.
Using StrEnum instead of plain Enum provides automatic string coercion
and better JSON serialization without custom encoders.

Free-text synonyms for the enums a user (or the model) is likely to phrase
loosely live right next to the enum they map into, so each table is the single
source of truth for what that enum accepts.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, TypeVar


E = TypeVar("E", bound=StrEnum)


def _lookup(table: dict[str, E], value: Any) -> E | None:
    """Case-insensitive synonym lookup; None for anything unrecognized."""
    if value is None or isinstance(value, bool):
        return None
    key = str(value).strip().lower()
    if not key:
        return None
    return table.get(key)


class AssetType(StrEnum):
    """Entity types the assistant can act on.

    Values match the store's entity names ("Road", "Vehicle"). Lookups are
    case-insensitive so a model emitting "road" still resolves.
    """

    ROAD = "Road"
    VEHICLE = "Vehicle"

    @classmethod
    def _missing_(cls, value: object) -> AssetType | None:
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.strip().lower():
                    return member
        return None


class AssetCondition(StrEnum):
    """Condition tier shared by every asset."""

    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    @classmethod
    def parse(cls, value: Any) -> AssetCondition | None:
        return _lookup(CONDITION_SYNONYMS, value)


CONDITION_SYNONYMS: dict[str, AssetCondition] = {
    "good": AssetCondition.GOOD,
    "great": AssetCondition.GOOD,
    "excellent": AssetCondition.GOOD,
    "fair": AssetCondition.FAIR,
    "ok": AssetCondition.FAIR,
    "okay": AssetCondition.FAIR,
    "average": AssetCondition.FAIR,
    "poor": AssetCondition.POOR,
    "bad": AssetCondition.POOR,
    "terrible": AssetCondition.POOR,
}


class RoadSurfaceType(StrEnum):
    """Road surface material."""

    ASPHALT = "asphalt"
    CONCRETE = "concrete"
    GRAVEL = "gravel"
    DIRT = "dirt"
    PAVER = "paver"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Any) -> RoadSurfaceType | None:
        return _lookup(SURFACE_TYPE_SYNONYMS, value)


SURFACE_TYPE_SYNONYMS: dict[str, RoadSurfaceType] = {
    "asphalt": RoadSurfaceType.ASPHALT,
    "bitumen": RoadSurfaceType.ASPHALT,
    "concrete": RoadSurfaceType.CONCRETE,
    "gravel": RoadSurfaceType.GRAVEL,
    "chipseal": RoadSurfaceType.GRAVEL,
    "chip seal": RoadSurfaceType.GRAVEL,
    "dirt": RoadSurfaceType.DIRT,
    "earth": RoadSurfaceType.DIRT,
    "paver": RoadSurfaceType.PAVER,
    "pavers": RoadSurfaceType.PAVER,
    "other": RoadSurfaceType.OTHER,
}


class TrafficVolume(StrEnum):
    """Typical traffic load on a road."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    VERY_HIGH = "very_high"

    @classmethod
    def parse(cls, value: Any) -> TrafficVolume | None:
        return _lookup(TRAFFIC_VOLUME_SYNONYMS, value)


TRAFFIC_VOLUME_SYNONYMS: dict[str, TrafficVolume] = {
    "low": TrafficVolume.LOW,
    "medium": TrafficVolume.MEDIUM,
    "med": TrafficVolume.MEDIUM,
    "high": TrafficVolume.HIGH,
    "very_high": TrafficVolume.VERY_HIGH,
    "very high": TrafficVolume.VERY_HIGH,
    "veryhigh": TrafficVolume.VERY_HIGH,
}


class VehiclePriority(StrEnum):
    """Service priority for fleet vehicles."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: Any) -> VehiclePriority | None:
        return _lookup(PRIORITY_SYNONYMS, value)


PRIORITY_SYNONYMS: dict[str, VehiclePriority] = {
    "low": VehiclePriority.LOW,
    "medium": VehiclePriority.MEDIUM,
    "med": VehiclePriority.MEDIUM,
    "high": VehiclePriority.HIGH,
}


class SelectorStrategy(StrEnum):
    """How a selector locates records when no identifier is given.

    Strategies:
        ID: Exact identifier lookup (invalid identifiers match nothing)
        NAME: Exact name equality
        NAME_CONTAINS: Case-insensitive substring on name
        QR_TAG_ID: Exact QR tag equality
        SEARCH: Case-insensitive substring across every searchable field
    """

    ID = "id"
    NAME = "name"
    NAME_CONTAINS = "nameContains"
    QR_TAG_ID = "qrTagId"
    SEARCH = "search"


class ToolName(StrEnum):
    """Names of the tools exposed to the language model."""

    CREATE_ROAD = "create_road"
    UPDATE_ROAD = "update_road"
    UPDATE_ROAD_BY = "update_road_by"
    DELETE_ASSET = "delete_asset"
    DELETE_ROAD_BY = "delete_road_by"
    FIND_ASSET = "find_asset"


class DraftIntent(StrEnum):
    """What the user is trying to do with the draft they are building."""

    CREATE = "create"
    FIND = "find"
    UPDATE = "update"
    DELETE = "delete"


class ToolErrorKind(StrEnum):
    """Classification of tool failures.

    Enables Logfire to group failed tool calls by type.
    """

    PARSE_ERROR = "parse_error"
    INVALID_ARGUMENTS = "invalid_arguments"
    NOT_FOUND = "not_found"
    AMBIGUOUS = "ambiguous"
    STORE_FAILURE = "store_failure"
    UNSUPPORTED_TOOL = "unsupported_tool"


class AssistantState(StrEnum):
    """Assistant Session Lifecycle States.

    States:
        IDLE: Nothing in flight, no reply pending
        SENDING: Utterance accepted, request being built
        AWAITING_MODEL_REPLY: Request sent to the model gateway
        TEXT_RECEIVED: Model answered with plain text
        TOOL_PROPOSED: Model proposed a tool call awaiting confirmation
        APPLYING: Confirmed proposal is being executed
        APPLIED: Proposal executed successfully
        APPLY_FAILED: Proposal execution reported a failure
    """

    IDLE = "idle"
    SENDING = "sending"
    AWAITING_MODEL_REPLY = "awaiting_model_reply"
    TEXT_RECEIVED = "text_received"
    TOOL_PROPOSED = "tool_proposed"
    APPLYING = "applying"
    APPLIED = "applied"
    APPLY_FAILED = "apply_failed"

    @property
    def is_busy(self) -> bool:
        return self in _BUSY_STATES


_BUSY_STATES = frozenset(
    {AssistantState.SENDING, AssistantState.AWAITING_MODEL_REPLY, AssistantState.APPLYING}
)


class StoreBackend(StrEnum):
    """Asset store implementations selectable from configuration."""

    MEMORY = "memory"
    REDIS = "redis"


__all__ = [
    "CONDITION_SYNONYMS",
    "PRIORITY_SYNONYMS",
    "SURFACE_TYPE_SYNONYMS",
    "TRAFFIC_VOLUME_SYNONYMS",
    "AssetCondition",
    "AssetType",
    "AssistantState",
    "DraftIntent",
    "RoadSurfaceType",
    "SelectorStrategy",
    "StoreBackend",
    "ToolErrorKind",
    "ToolName",
    "TrafficVolume",
    "VehiclePriority",
]
