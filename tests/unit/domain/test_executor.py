"""Unit tests for the tool executor.

Tests focus on outcomes as values:
- Success messages and id payloads for each mutation
- not_found / ambiguous / invalid_arguments / store_failure never raise
- Selector mutations leave the store untouched unless exactly one road matches
"""

import pytest

from asset_assistant.domain.domain_type import AssetCondition, AssetType, ToolErrorKind
from asset_assistant.domain.domain_value import AssetId
from asset_assistant.domain.executor import ToolExecutor, ToolResult
from asset_assistant.domain.tool_catalog import ToolCall
from asset_assistant.service.storage import InMemoryAssetStore

from tests.fakes import FailingStore


async def run(executor: ToolExecutor, tool: str, /, **arguments) -> ToolResult:
    return await executor.execute(ToolCall(name=tool, arguments=arguments))


async def create(executor: ToolExecutor, name: str, **extra) -> str:
    result = await run(
        executor,
        "create_road",
        name=name,
        condition="good",
        surfaceType="asphalt",
        trafficVolume="high",
        **extra,
    )
    assert result.success
    return result.data["id"]


# =============================================================================
# Single-tool behavior
# =============================================================================


class TestCreateRoad:
    @pytest.mark.asyncio
    async def test_create_returns_hex_id(self, executor: ToolExecutor, store: InMemoryAssetStore, main_street: dict):
        result = await executor.execute(ToolCall(name="create_road", arguments=main_street))

        assert result.success
        assert result.message == "Road created"
        assert result.error_kind is None
        record = await store.find_by_id(AssetType.ROAD, AssetId.parse(result.data["id"]))
        assert record.location == "Downtown"
        assert record.synced is False

    @pytest.mark.asyncio
    async def test_missing_field_is_invalid_arguments(self, executor: ToolExecutor, store: InMemoryAssetStore):
        result = await run(executor, "create_road", name="Main Street", condition="good")

        assert not result.success
        assert result.error_kind is ToolErrorKind.INVALID_ARGUMENTS
        assert await store.find_all(AssetType.ROAD) == []

    @pytest.mark.asyncio
    async def test_round_trip_by_id(self, executor: ToolExecutor, main_street: dict):
        """Verify create then find-by-id returns the same fields."""
        created = await executor.execute(ToolCall(name="create_road", arguments=main_street))

        found = await run(executor, "find_asset", by="id", value=created.data["id"], type="Road")

        [record] = found.data
        assert record["id"] == created.data["id"]
        assert {key: record[key] for key in main_street} == main_street


class TestUpdateRoad:
    @pytest.mark.asyncio
    async def test_update_by_id(self, executor: ToolExecutor, store: InMemoryAssetStore):
        road_id = await create(executor, "Elm Street")

        result = await run(executor, "update_road", id=road_id, fields={"condition": "bad", "lanes": 2})

        assert result.success
        assert result.message == "Road updated"
        record = await store.find_by_id(AssetType.ROAD, AssetId.parse(road_id))
        assert record.condition is AssetCondition.POOR
        assert record.lanes == 2
        assert record.name == "Elm Street"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("road_id", ["0" * 32, "not-an-id"])
    async def test_unknown_or_malformed_id(self, executor: ToolExecutor, road_id: str):
        result = await run(executor, "update_road", id=road_id, fields={"condition": "poor"})

        assert result == ToolResult.fail(ToolErrorKind.NOT_FOUND, "Road not found")

    @pytest.mark.asyncio
    async def test_empty_fields_rejected(self, executor: ToolExecutor):
        road_id = await create(executor, "Elm Street")

        result = await run(executor, "update_road", id=road_id, fields={})

        assert result.error_kind is ToolErrorKind.INVALID_ARGUMENTS


class TestSelectorMutations:
    @pytest.mark.asyncio
    async def test_zero_matches(self, executor: ToolExecutor):
        result = await run(executor, "delete_road_by", by="name", value="Nowhere Road")

        assert not result.success
        assert result.message == "No results found"
        assert result.data == []
        assert result.error_kind is ToolErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_ambiguous_update_leaves_store_unchanged(self, executor: ToolExecutor, store: InMemoryAssetStore):
        await create(executor, "Main Street East")
        await create(executor, "Main Street West")
        before = [record.model_dump() for record in await store.find_all(AssetType.ROAD)]

        result = await run(
            executor, "update_road_by", by="nameContains", value="Main Street", fields={"condition": "poor"}
        )

        assert not result.success
        assert result.error_kind is ToolErrorKind.AMBIGUOUS
        assert result.message.startswith("Multiple roads matched (2)")
        assert sorted(candidate["name"] for candidate in result.data) == ["Main Street East", "Main Street West"]
        assert [record.model_dump() for record in await store.find_all(AssetType.ROAD)] == before

    @pytest.mark.asyncio
    async def test_ambiguous_delete_removes_nothing(self, executor: ToolExecutor, store: InMemoryAssetStore):
        await create(executor, "Oak One")
        await create(executor, "Oak Two")

        result = await run(executor, "delete_road_by", by="search", value="oak")

        assert result.error_kind is ToolErrorKind.AMBIGUOUS
        assert len(await store.find_all(AssetType.ROAD)) == 2

    @pytest.mark.asyncio
    async def test_limit_narrows_to_one(self, executor: ToolExecutor, store: InMemoryAssetStore):
        first = await create(executor, "Oak One")
        await create(executor, "Oak Two")

        result = await run(executor, "delete_road_by", by="search", value="oak", limit=1)

        assert result.success
        assert result.data == {"id": first}
        assert len(await store.find_all(AssetType.ROAD)) == 1

    @pytest.mark.asyncio
    async def test_update_by_qr_tag(self, executor: ToolExecutor, store: InMemoryAssetStore):
        road_id = await create(executor, "Pine Road", qrTagId="ROA-123")

        result = await run(executor, "update_road_by", by="qrTagId", value="ROA-123", fields={"condition": "fair"})

        assert result.success
        assert result.data == {"id": road_id}
        record = await store.find_by_id(AssetType.ROAD, AssetId.parse(road_id))
        assert record.condition is AssetCondition.FAIR


class TestDeleteAsset:
    @pytest.mark.asyncio
    async def test_delete_then_missing(self, executor: ToolExecutor):
        road_id = await create(executor, "Birch Road")

        deleted = await run(executor, "delete_asset", id=road_id, type="road")
        again = await run(executor, "delete_asset", id=road_id, type="Road")

        assert deleted.success
        assert deleted.message == "Road deleted"
        assert again == ToolResult.fail(ToolErrorKind.NOT_FOUND, "Road not found")

    @pytest.mark.asyncio
    async def test_type_scoped(self, executor: ToolExecutor):
        road_id = await create(executor, "Birch Road")

        result = await run(executor, "delete_asset", id=road_id, type="Vehicle")

        assert result.message == "Vehicle not found"


class TestFindAsset:
    @pytest.mark.asyncio
    async def test_no_results_is_still_success(self, executor: ToolExecutor):
        result = await run(executor, "find_asset", by="search", value="anything")

        assert result.success
        assert result.message == "No results found"
        assert result.data == []

    @pytest.mark.asyncio
    async def test_count_messages(self, executor: ToolExecutor):
        await create(executor, "Ash Road")
        one = await run(executor, "find_asset", by="name", value="Ash Road", type="Road")
        await create(executor, "Ash Lane")
        two = await run(executor, "find_asset", by="nameContains", value="ash")

        assert one.message == "Found 1 result"
        assert two.message == "Found 2 results"


class TestErrorsAsValues:
    @pytest.mark.asyncio
    async def test_unsupported_tool(self, executor: ToolExecutor):
        result = await run(executor, "launch_rocket")

        assert result.error_kind is ToolErrorKind.UNSUPPORTED_TOOL

    @pytest.mark.asyncio
    async def test_malformed_json_arguments(self, executor: ToolExecutor):
        result = await executor.execute(ToolCall(name="create_road", arguments="{nope"))

        assert not result.success
        assert result.error_kind is ToolErrorKind.PARSE_ERROR

    @pytest.mark.asyncio
    async def test_store_failure_carries_message(self, main_street: dict):
        executor = ToolExecutor(FailingStore())

        result = await executor.execute(ToolCall(name="create_road", arguments=main_street))

        assert not result.success
        assert result.error_kind is ToolErrorKind.STORE_FAILURE
        assert result.message == "disk full"

    def test_logfire_attributes(self):
        result = ToolResult.fail(ToolErrorKind.AMBIGUOUS, "Multiple", [{"id": "a"}, {"id": "b"}])

        assert result.to_logfire_attributes().root == {
            "tool.success": False,
            "tool.result_count": 2,
            "tool.error_kind": "ambiguous",
        }


# =============================================================================
# Scenarios
# =============================================================================


@pytest.mark.asyncio
async def test_create_update_find_scenario(executor: ToolExecutor, main_street: dict):
    """Verify a road created, updated by name and found reflects the update."""
    assert (await executor.execute(ToolCall(name="create_road", arguments=main_street))).success

    updated = await run(executor, "update_road_by", by="name", value="Main Street", fields={"condition": "poor"})
    found = await run(executor, "find_asset", by="name", value="Main Street", type="Road")

    assert updated.success
    [record] = found.data
    assert record["condition"] == "poor"


@pytest.mark.asyncio
async def test_delete_then_find_scenario(executor: ToolExecutor):
    """Verify a road deleted by name no longer turns up."""
    await create(executor, "Cedar Lane")

    deleted = await run(executor, "delete_road_by", by="name", value="Cedar Lane")
    found = await run(executor, "find_asset", by="name", value="Cedar Lane")

    assert deleted.success
    assert found.data == []
