"""Identity and Record Layer - Asset Records with Persistence Identity.

This module provides the value types the resolution layer reads and writes:
strongly-typed identifiers and the Road/Vehicle records owned by the store.

Architecture:
    - Identity (our layer): AssetId, SessionId
    - Records: Road | Vehicle discriminated on ``type``
    - Wire format: camelCase keys, ISO-8601 dates, hex identifiers

Records are immutable; stores apply updates with ``model_copy`` and hand back
fresh instances, so a caller never observes a half-applied write.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated, Any, Literal
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, RootModel, model_serializer
from pydantic.alias_generators import to_camel

from .domain_type import AssetCondition, AssetType, RoadSurfaceType, TrafficVolume, VehiclePriority


class AssetId(RootModel[UUID]):
    """Unique Identifier for Stored Assets.

    Serializes as a 32-character hex string, which is what the model sees in
    candidate lists and passes back in ``id`` arguments.

    Usage:
        >>> asset_id = AssetId()  # Auto-generates UUID
        >>> asset_id.hex
        '550e8400e29b41d4a716446655440000'
        >>> AssetId.parse("not-an-id") is None
        True
    """

    root: UUID = Field(default_factory=uuid4)
    model_config = ConfigDict(frozen=True)

    @model_serializer
    def _serialize(self) -> str:
        return self.root.hex

    @property
    def hex(self) -> str:
        return self.root.hex

    @classmethod
    def parse(cls, value: Any) -> AssetId | None:
        """Parse hex or dashed UUID text; None when the format is invalid."""
        if isinstance(value, AssetId):
            return value
        if isinstance(value, UUID):
            return cls(value)
        if not isinstance(value, str):
            return None
        try:
            return cls(UUID(value.strip()))
        except ValueError:
            return None

    def __str__(self) -> str:
        return self.root.hex


class SessionId(RootModel[UUID]):
    """Unique Identifier for Assistant Sessions."""

    root: UUID = Field(default_factory=uuid4)
    model_config = ConfigDict(frozen=True)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class AssetRecord(BaseModel):
    """Fields every asset carries.

    Attributes:
        id: Store identity (hex on the wire)
        name: Display name, the main handle users refer to
        condition: Condition tier
        location, notes, qr_tag_id: Free-text fields
        created_at, updated_at: Audit timestamps (UTC)
        synced: False until a remote sync has seen the latest write
    """

    id: AssetId = Field(default_factory=AssetId)
    name: str
    location: str | None = None
    condition: AssetCondition
    notes: str | None = None
    qr_tag_id: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    synced: bool = False

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Plain, JSON-ready dict: camelCase keys, ISO dates, hex ids."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Road(AssetRecord):
    """Road segment."""

    type: Literal[AssetType.ROAD] = AssetType.ROAD
    surface_type: RoadSurfaceType
    traffic_volume: TrafficVolume
    length: float | None = None
    width: float | None = None
    lanes: int | None = None
    speed_limit: int | None = None


class Vehicle(AssetRecord):
    """Fleet vehicle or piece of equipment."""

    type: Literal[AssetType.VEHICLE] = AssetType.VEHICLE
    identifier: str
    mileage: float | None = None
    hours: float | None = None
    last_service_date: datetime | None = None
    requires_service: bool | None = None
    priority: VehiclePriority | None = None


Asset = Annotated[Road | Vehicle, Field(discriminator="type")]

RECORD_TYPES: dict[AssetType, type[Road] | type[Vehicle]] = {
    AssetType.ROAD: Road,
    AssetType.VEHICLE: Vehicle,
}


class ConversationTurn(BaseModel):
    """One line of conversation history passed to the model gateway."""

    role: Literal["user", "assistant"]
    content: str

    model_config = ConfigDict(frozen=True)


__all__ = [
    "RECORD_TYPES",
    "Asset",
    "AssetId",
    "AssetRecord",
    "ConversationTurn",
    "Road",
    "SessionId",
    "Vehicle",
]
