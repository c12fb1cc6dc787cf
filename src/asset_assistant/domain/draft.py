"""Draft Accumulator - Building a Create Call Across Turns.

Users rarely give every required field in one message. The draft collects
whatever each turn supplies (from the model's ``DRAFT_JSON:`` hint line or
from the user's own form edits) until a complete ``create_road`` call can be
built.

Merge Rules:
    - Later values overwrite earlier ones, field by field
    - None and blank strings are dropped; they never erase a known value
    - Unrecognized values are kept raw in the draft but never reach the
      built arguments (normalization happens at build time)

Readiness:
    ``build_create_args`` returns arguments exactly when
    ``validate_for_create`` reports the draft valid.

Example:
    >>> draft = merge_fields(DraftState(), {"condition": "great"})
    >>> draft = merge_fields(draft, {"name": "Main Street", "surfaceType": "bitumen"})
    >>> build_create_args(draft) is None  # traffic volume still missing
    True
    >>> draft = merge_fields(draft, {"trafficVolume": "very high"})
    >>> build_create_args(draft).traffic_volume
    <TrafficVolume.VERY_HIGH: 'very_high'>
"""

from __future__ import annotations

import json
import math
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .domain_type import (
    AssetCondition,
    AssetType,
    DraftIntent,
    RoadSurfaceType,
    TrafficVolume,
    VehiclePriority,
)
from .tool_args import CreateRoadArgs, RoadFields

DRAFT_MARKER = "DRAFT_JSON:"

REQUIRED_CREATE_FIELDS: dict[str, str] = {
    "name": "Road name is required",
    "condition": "Select a valid condition",
    "surfaceType": "Select a valid surface type",
    "trafficVolume": "Select a valid traffic volume",
}

OPTIONAL_ROAD_FIELDS: tuple[str, ...] = (
    "location",
    "notes",
    "qrTagId",
    "length",
    "width",
    "lanes",
    "speedLimit",
)

UPDATABLE_ROAD_FIELDS: tuple[str, ...] = (
    "name",
    "location",
    "condition",
    "notes",
    "qrTagId",
    "surfaceType",
    "trafficVolume",
    "length",
    "width",
    "lanes",
    "speedLimit",
)


def normalize_string(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def normalize_number(value: Any) -> float | int | None:
    """Numbers and numeric strings; anything non-finite or empty is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        try:
            finite = math.isfinite(value)
        except OverflowError:
            # int too large for a float
            return None
        return value if finite else None
    text = normalize_string(value)
    if text is None:
        return None
    try:
        parsed = float(text)
    except ValueError:
        return None
    return parsed if math.isfinite(parsed) else None


def normalize_integer(value: Any) -> int | None:
    number = normalize_number(value)
    if number is None or not float(number).is_integer():
        return None
    return int(number)


_NORMALIZERS: dict[str, Callable[[Any], Any]] = {
    "condition": AssetCondition.parse,
    "surfaceType": RoadSurfaceType.parse,
    "trafficVolume": TrafficVolume.parse,
    "priority": VehiclePriority.parse,
    "length": normalize_number,
    "width": normalize_number,
    "mileage": normalize_number,
    "hours": normalize_number,
    "lanes": normalize_integer,
    "speedLimit": normalize_integer,
}


def normalize_field(kind: str, value: Any) -> Any:
    """Typed value for a draft field, or None when it cannot be understood.

    Enum-like kinds go through their synonym tables, numeric kinds are parsed,
    and every other kind is treated as free text.
    """
    normalizer = _NORMALIZERS.get(kind, normalize_string)
    return normalizer(value)


def _field_key(key: str) -> str:
    return to_camel(key) if "_" in key else key


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class DraftState(BaseModel):
    """Conversation-scoped accumulator of partially specified fields.

    Attributes:
        intent: What the user wants to do, once known
        asset_type: Which kind of asset the draft describes
        fields: Raw field values keyed by camelCase wire name
    """

    intent: DraftIntent | None = None
    asset_type: AssetType | None = None
    fields: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @field_validator("intent", mode="before")
    @classmethod
    def lenient_intent(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return DraftIntent(value.strip().lower())
            except ValueError:
                return None
        return value

    @field_validator("asset_type", mode="before")
    @classmethod
    def lenient_asset_type(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return AssetType(value)
            except ValueError:
                return None
        return value

    @property
    def is_empty(self) -> bool:
        return not self.fields and self.intent is None and self.asset_type is None


class DraftValidation(BaseModel):
    """Create-readiness of a draft, one message per failing field."""

    is_valid: bool
    errors: dict[str, str] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)


def merge_fields(draft: DraftState, incoming: Mapping[str, Any]) -> DraftState:
    """New draft with ``incoming`` laid over the existing fields."""
    merged = dict(draft.fields)
    for key, value in incoming.items():
        if _is_blank(value):
            continue
        merged[_field_key(key)] = value
    return draft.model_copy(update={"fields": merged})


def validate_for_create(draft: DraftState) -> DraftValidation:
    errors = {
        field: message
        for field, message in REQUIRED_CREATE_FIELDS.items()
        if normalize_field(field, draft.fields.get(field)) is None
    }
    return DraftValidation(is_valid=not errors, errors=errors)


def _normalized(draft: DraftState, keys: Iterable[str]) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for key in keys:
        raw = draft.fields.get(key)
        if _is_blank(raw):
            continue
        value = normalize_field(key, raw)
        if value is not None:
            out[key] = value
    return out


def build_create_args(draft: DraftState) -> CreateRoadArgs | None:
    """Complete ``create_road`` arguments, or None while anything required is missing."""
    if not validate_for_create(draft).is_valid:
        return None
    return CreateRoadArgs.model_validate(_normalized(draft, (*REQUIRED_CREATE_FIELDS, *OPTIONAL_ROAD_FIELDS)))


def build_update_fields(draft: DraftState, *, include_name: bool = False) -> RoadFields:
    """Only the fields present in the draft, normalized.

    ``name`` is left out unless asked for, so a draft carried through an
    ambiguous selection never renames the road it lands on.
    """
    keys = [key for key in UPDATABLE_ROAD_FIELDS if include_name or key != "name"]
    return RoadFields.model_validate(_normalized(draft, keys))


def extract_draft_hint(lines: Iterable[str]) -> DraftState | None:
    """Decode the last ``DRAFT_JSON:`` line, if there is a readable one.

    The hint looks like ``{"intent": "create", "assetType": "road", "fields": {...}}``;
    a bare object without ``fields`` is taken as the fields themselves.
    """
    candidates = [part.strip() for line in lines for part in line.split("\n")]
    for line in reversed(candidates):
        index = line.find(DRAFT_MARKER)
        if index < 0:
            continue
        try:
            parsed = json.loads(line[index + len(DRAFT_MARKER) :].strip())
        except ValueError:
            continue
        if not isinstance(parsed, dict):
            continue
        fields = parsed.get("fields") if isinstance(parsed.get("fields"), dict) else parsed
        return DraftState(
            intent=parsed.get("intent") or parsed.get("action"),
            asset_type=parsed.get("assetType") or parsed.get("type"),
            fields={key: value for key, value in fields.items() if key not in _HINT_META_KEYS},
        )
    return None


_HINT_META_KEYS = frozenset({"intent", "action", "assetType", "type"})


def apply_hint(draft: DraftState, hint: DraftState) -> DraftState:
    merged = merge_fields(draft, hint.fields)
    return merged.model_copy(
        update={
            "intent": hint.intent or draft.intent,
            "asset_type": hint.asset_type or draft.asset_type,
        }
    )


def clean_messages(raw: Iterable[str]) -> list[str]:
    """Split into display lines, dropping blanks, hint lines and repeats."""
    cleaned: list[str] = []
    for message in raw:
        for part in message.split("\n"):
            line = part.strip()
            if not line or line.startswith(DRAFT_MARKER):
                continue
            if cleaned and cleaned[-1] == line:
                continue
            cleaned.append(line)
    return cleaned


def infer_asset_type(text: str | None) -> AssetType | None:
    if not text:
        return None
    lowered = text.lower()
    if "road" in lowered:
        return AssetType.ROAD
    if "vehicle" in lowered:
        return AssetType.VEHICLE
    return None


__all__ = [
    "DRAFT_MARKER",
    "DraftState",
    "DraftValidation",
    "apply_hint",
    "build_create_args",
    "build_update_fields",
    "clean_messages",
    "extract_draft_hint",
    "infer_asset_type",
    "merge_fields",
    "normalize_field",
    "normalize_integer",
    "normalize_number",
    "normalize_string",
    "validate_for_create",
]
