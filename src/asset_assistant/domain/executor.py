"""Tool Executor - From Validated Tool Call to Store Mutation.

Binds a raw ``ToolCall`` to its typed arguments, runs the matching store
operation and reports the outcome as a ``ToolResult`` value. Nothing raised
inside a handler escapes ``execute``: a store fault becomes a
``store_failure`` result carrying the underlying message.

Outcome Rules:
    - Identifier misses are ``not_found`` failures
    - Selector mutations need exactly one match; zero is ``not_found``, more
      than one is ``ambiguous`` with the full candidate set and no write
    - ``find_asset`` always succeeds, even with nothing to show

Observability:
    Each execution runs inside a ``tool_execute`` Logfire span annotated with
    ``ToolResult.to_logfire_attributes()``.
"""

from __future__ import annotations

from typing import Any

import logfire
from pydantic import BaseModel, ConfigDict, RootModel

from .domain_type import AssetType, ToolErrorKind
from .domain_value import AssetId, Road, Vehicle
from .selector import SelectorSpec, candidate_set, resolve_selector
from .store import AssetStore
from .tool_args import (
    CreateRoadCall,
    DeleteAssetCall,
    DeleteRoadByCall,
    FindAssetCall,
    ToolInvocation,
    ToolRejection,
    UpdateRoadByCall,
    UpdateRoadCall,
    bind_tool_call,
)
from .tool_catalog import ToolCall


class LogfireAttributes(RootModel[dict[str, Any]]):
    """Tool result exported as Logfire span attributes.

    Example:
        >>> with logfire.span("tool_execute", **result.to_logfire_attributes().root):
        ...     pass
    """

    root: dict[str, Any]
    model_config = ConfigDict(frozen=True)


class ToolResult(BaseModel):
    """Outcome of one tool execution.

    Attributes:
        success: Whether the requested effect happened (or, for find, ran)
        message: Short human-readable summary shown to the user
        data: ``{"id": hex}`` for mutations, a candidate list for find and
            ambiguous selections, otherwise None
        error_kind: Failure category; None on success
    """

    success: bool
    message: str
    data: Any = None
    error_kind: ToolErrorKind | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def ok(cls, message: str, data: Any = None) -> ToolResult:
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, kind: ToolErrorKind, message: str, data: Any = None) -> ToolResult:
        return cls(success=False, message=message, data=data, error_kind=kind)

    @property
    def candidates(self) -> list[dict[str, Any]]:
        """Records carried in ``data``, when it is a list."""
        return self.data if isinstance(self.data, list) else []

    def to_logfire_attributes(self) -> LogfireAttributes:
        attributes: dict[str, Any] = {
            "tool.success": self.success,
            "tool.result_count": len(self.candidates),
        }
        if self.error_kind is not None:
            attributes["tool.error_kind"] = self.error_kind.value
        return LogfireAttributes(attributes)


def _count_message(count: int) -> str:
    if count == 0:
        return "No results found"
    return f"Found {count} result{'' if count == 1 else 's'}"


def _ambiguous_message(count: int, action: str) -> str:
    return (
        f"Multiple roads matched ({count}). Please narrow the selection "
        f"(e.g., by QR tag) or pick one result to {action}."
    )


class ToolExecutor:
    """Runs catalogue tools against an ``AssetStore``.

    Example:
        >>> executor = ToolExecutor(InMemoryAssetStore())
        >>> result = await executor.execute(ToolCall(name="find_asset", arguments={"by": "search", "value": ""}))
        >>> result.message
        'No results found'
    """

    def __init__(self, store: AssetStore) -> None:
        self.store = store

    async def execute(self, call: ToolCall) -> ToolResult:
        with logfire.span("tool_execute {tool}", tool=call.name) as span:
            result = await self._execute(call)
            span.set_attributes(result.to_logfire_attributes().root)
            return result

    async def _execute(self, call: ToolCall) -> ToolResult:
        bound = bind_tool_call(call)
        if isinstance(bound, ToolRejection):
            return ToolResult.fail(bound.kind, bound.message)
        try:
            return await self._dispatch(bound)
        except Exception as exc:
            logfire.exception("Store operation failed for {tool}", tool=call.name)
            return ToolResult.fail(ToolErrorKind.STORE_FAILURE, str(exc) or type(exc).__name__)

    async def _dispatch(self, invocation: ToolInvocation) -> ToolResult:
        if isinstance(invocation, CreateRoadCall):
            return await self._create_road(invocation)
        if isinstance(invocation, UpdateRoadCall):
            return await self._update_road(invocation)
        if isinstance(invocation, UpdateRoadByCall):
            return await self._update_road_by(invocation)
        if isinstance(invocation, DeleteAssetCall):
            return await self._delete_asset(invocation)
        if isinstance(invocation, DeleteRoadByCall):
            return await self._delete_road_by(invocation)
        return await self._find_asset(invocation)

    async def _create_road(self, invocation: CreateRoadCall) -> ToolResult:
        asset_id = await self.store.create(AssetType.ROAD, invocation.arguments.to_store_fields())
        return ToolResult.ok("Road created", {"id": asset_id.hex})

    async def _update_road(self, invocation: UpdateRoadCall) -> ToolResult:
        args = invocation.arguments
        asset_id = AssetId.parse(args.id)
        if asset_id is None or not await self.store.update_by_id(
            AssetType.ROAD, asset_id, args.fields.to_store_fields()
        ):
            return ToolResult.fail(ToolErrorKind.NOT_FOUND, "Road not found")
        return ToolResult.ok("Road updated", {"id": asset_id.hex})

    async def _single_road(self, spec: SelectorSpec, action: str) -> Road | Vehicle | ToolResult:
        """The one road a selector names, or the failure explaining why there isn't one."""
        matches = await resolve_selector(self.store, spec)
        if not matches:
            return ToolResult.fail(ToolErrorKind.NOT_FOUND, "No results found", [])
        if len(matches) > 1:
            return ToolResult.fail(
                ToolErrorKind.AMBIGUOUS,
                _ambiguous_message(len(matches), action),
                candidate_set(matches),
            )
        return matches[0]

    async def _update_road_by(self, invocation: UpdateRoadByCall) -> ToolResult:
        args = invocation.arguments
        spec = SelectorSpec(by=args.by, value=args.value, type=AssetType.ROAD, limit=args.limit)
        target = await self._single_road(spec, "update")
        if isinstance(target, ToolResult):
            return target
        if not await self.store.update_by_id(AssetType.ROAD, target.id, args.fields.to_store_fields()):
            return ToolResult.fail(ToolErrorKind.NOT_FOUND, "Road not found")
        return ToolResult.ok("Road updated", {"id": target.id.hex})

    async def _delete_road_by(self, invocation: DeleteRoadByCall) -> ToolResult:
        args = invocation.arguments
        spec = SelectorSpec(by=args.by, value=args.value, type=AssetType.ROAD, limit=args.limit)
        target = await self._single_road(spec, "delete")
        if isinstance(target, ToolResult):
            return target
        if not await self.store.delete_by_id(AssetType.ROAD, target.id):
            return ToolResult.fail(ToolErrorKind.NOT_FOUND, "Road not found")
        return ToolResult.ok("Road deleted", {"id": target.id.hex})

    async def _delete_asset(self, invocation: DeleteAssetCall) -> ToolResult:
        args = invocation.arguments
        asset_id = AssetId.parse(args.id)
        if asset_id is None or not await self.store.delete_by_id(args.type, asset_id):
            return ToolResult.fail(ToolErrorKind.NOT_FOUND, f"{args.type.value} not found")
        return ToolResult.ok(f"{args.type.value} deleted", {"id": asset_id.hex})

    async def _find_asset(self, invocation: FindAssetCall) -> ToolResult:
        args = invocation.arguments
        spec = SelectorSpec(by=args.by, value=args.value, type=args.type, limit=args.limit)
        matches = await resolve_selector(self.store, spec)
        return ToolResult.ok(_count_message(len(matches)), candidate_set(matches))


__all__ = ["LogfireAttributes", "ToolExecutor", "ToolResult"]
