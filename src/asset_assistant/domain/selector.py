"""Selector Resolver - Finding Records Without an Identifier.

Users say "Main Street" or "the road with QR ROA-123", not hex ids. A
``SelectorSpec`` captures how to look (``by``) and what to look for
(``value``); ``resolve_selector`` returns every matching record, in store
order, across one asset type or all of them.

Strategies:
    id            Exact identifier; malformed ids match nothing
    name          Exact name equality
    nameContains  Case-insensitive substring of name
    qrTagId       Exact QR tag equality
    search        Case-insensitive substring across the type's searchable
                  fields; an empty value matches every record

The resolver only reads. Deciding what to do with zero, one or many matches
is the executor's job.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from .domain_type import AssetType, SelectorStrategy
from .domain_value import AssetId, Road, Vehicle
from .store import AssetStore

SEARCHABLE_FIELDS: dict[AssetType, tuple[str, ...]] = {
    AssetType.ROAD: (
        "name",
        "location",
        "condition",
        "notes",
        "qr_tag_id",
        "surface_type",
        "traffic_volume",
        "length",
        "width",
        "lanes",
        "speed_limit",
    ),
    AssetType.VEHICLE: (
        "name",
        "identifier",
        "location",
        "condition",
        "notes",
        "qr_tag_id",
        "priority",
        "mileage",
        "hours",
    ),
}


class SelectorSpec(BaseModel):
    """How to locate target records for an update, delete or find.

    Attributes:
        by: Matching strategy
        value: What to match; required, may be empty only for ``search``
        type: Restrict to one asset type (None searches every type)
        limit: Keep at most this many matches after combining types
    """

    by: SelectorStrategy
    value: str
    type: AssetType | None = None
    limit: int | None = None

    model_config = ConfigDict(frozen=True)


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def matches_search(record: Road | Vehicle, term: str) -> bool:
    """True when any searchable field contains ``term``, ignoring case."""
    needle = term.lower()
    for field in SEARCHABLE_FIELDS[record.type]:
        text = _as_text(getattr(record, field, None))
        if text is not None and needle in text.lower():
            return True
    return False


async def _resolve_type(store: AssetStore, asset_type: AssetType, spec: SelectorSpec) -> list[Road | Vehicle]:
    if spec.by == SelectorStrategy.ID:
        asset_id = AssetId.parse(spec.value)
        if asset_id is None:
            return []
        record = await store.find_by_id(asset_type, asset_id)
        return [record] if record is not None else []

    if spec.by == SelectorStrategy.NAME:
        return list(await store.find_by_exact(asset_type, "name", spec.value))

    if spec.by == SelectorStrategy.QR_TAG_ID:
        return list(await store.find_by_exact(asset_type, "qr_tag_id", spec.value))

    records = await store.find_all(asset_type)

    if spec.by == SelectorStrategy.NAME_CONTAINS:
        needle = spec.value.lower()
        return [record for record in records if needle in record.name.lower()]

    term = spec.value.strip()
    if not term:
        return list(records)
    return [record for record in records if matches_search(record, term)]


async def resolve_selector(store: AssetStore, spec: SelectorSpec) -> list[Road | Vehicle]:
    """All records matching ``spec``, types concatenated Road first, then truncated to ``limit``."""
    asset_types: Sequence[AssetType] = (spec.type,) if spec.type is not None else tuple(AssetType)
    matches: list[Road | Vehicle] = []
    for asset_type in asset_types:
        matches.extend(await _resolve_type(store, asset_type, spec))
    if spec.limit is not None and spec.limit > 0:
        return matches[: spec.limit]
    return matches


def candidate_set(records: Sequence[Road | Vehicle]) -> list[dict[str, Any]]:
    """Serialized records for handing back to the model or the user."""
    return [record.to_wire() for record in records]


__all__ = ["SEARCHABLE_FIELDS", "SelectorSpec", "candidate_set", "matches_search", "resolve_selector"]
