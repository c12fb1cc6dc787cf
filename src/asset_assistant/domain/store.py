"""Asset Store Protocol - the persistence seam.

The resolution layer never assumes a storage engine. It talks to whatever is
passed in through this protocol, which keeps the executor and resolver
testable against the in-memory store and runnable against Redis.

Field names passed to ``find_by_exact`` and the keys of ``fields`` mappings
are record attribute names (snake_case), already normalized to their typed
values by the caller.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from .domain_type import AssetType
from .domain_value import AssetId, Road, Vehicle


class StoreError(RuntimeError):
    """Raised by store implementations when a read or write itself fails."""


@runtime_checkable
class AssetStore(Protocol):
    """Create/read/update/delete/query primitives over asset records."""

    async def create(self, asset_type: AssetType, fields: Mapping[str, Any]) -> AssetId: ...

    async def find_by_exact(self, asset_type: AssetType, field: str, value: Any) -> Sequence[Road | Vehicle]: ...

    async def find_all(self, asset_type: AssetType) -> Sequence[Road | Vehicle]: ...

    async def find_by_id(self, asset_type: AssetType, asset_id: AssetId) -> Road | Vehicle | None: ...

    async def update_by_id(self, asset_type: AssetType, asset_id: AssetId, fields: Mapping[str, Any]) -> bool: ...

    async def delete_by_id(self, asset_type: AssetType, asset_id: AssetId) -> bool: ...


__all__ = ["AssetStore", "StoreError"]
