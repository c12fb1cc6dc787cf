"""Unit tests for domain enums and their synonym tables.

Tests focus on what free text each enum accepts:
- Canonical values and loose synonyms resolve
- Unknown, blank and non-string input yields None (never raises)
- Asset types resolve case-insensitively
"""

import pytest

from asset_assistant.domain.domain_type import (
    AssetCondition,
    AssetType,
    AssistantState,
    RoadSurfaceType,
    TrafficVolume,
    VehiclePriority,
)


class TestAssetType:
    """Test case-insensitive asset type lookup."""

    @pytest.mark.parametrize("raw", ["Road", "road", "ROAD", " road "])
    def test_road_any_case(self, raw: str):
        """Verify the model's lowercase 'road' still resolves."""
        assert AssetType(raw) is AssetType.ROAD

    def test_unknown_type_raises(self):
        """Verify types outside the catalogue are rejected."""
        with pytest.raises(ValueError):
            AssetType("bridge")


class TestSynonyms:
    """Test loose phrasing maps onto canonical enum members."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("great", AssetCondition.GOOD),
            ("Excellent", AssetCondition.GOOD),
            ("okay", AssetCondition.FAIR),
            ("bad", AssetCondition.POOR),
            ("fair", AssetCondition.FAIR),
        ],
    )
    def test_condition(self, raw: str, expected: AssetCondition):
        assert AssetCondition.parse(raw) is expected

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("bitumen", RoadSurfaceType.ASPHALT),
            ("chip seal", RoadSurfaceType.GRAVEL),
            ("Pavers", RoadSurfaceType.PAVER),
        ],
    )
    def test_surface_type(self, raw: str, expected: RoadSurfaceType):
        assert RoadSurfaceType.parse(raw) is expected

    @pytest.mark.parametrize(("raw", "expected"), [("very high", TrafficVolume.VERY_HIGH), ("med", TrafficVolume.MEDIUM)])
    def test_traffic_volume(self, raw: str, expected: TrafficVolume):
        assert TrafficVolume.parse(raw) is expected

    def test_priority(self):
        assert VehiclePriority.parse("MED") is VehiclePriority.MEDIUM

    @pytest.mark.parametrize("raw", [None, "", "   ", "sparkly", True, 3])
    def test_unrecognized_is_none(self, raw: object):
        """Verify anything unrecognized comes back as None rather than raising."""
        assert AssetCondition.parse(raw) is None

    def test_parse_is_idempotent(self):
        """Verify parsing a parsed value gives the same member."""
        once = TrafficVolume.parse("very high")
        assert TrafficVolume.parse(once) is once


class TestAssistantState:
    """Test which states count as busy."""

    @pytest.mark.parametrize(
        "state", [AssistantState.SENDING, AssistantState.AWAITING_MODEL_REPLY, AssistantState.APPLYING]
    )
    def test_in_flight_states_are_busy(self, state: AssistantState):
        assert state.is_busy

    @pytest.mark.parametrize(
        "state",
        [
            AssistantState.IDLE,
            AssistantState.TEXT_RECEIVED,
            AssistantState.TOOL_PROPOSED,
            AssistantState.APPLIED,
            AssistantState.APPLY_FAILED,
        ],
    )
    def test_settled_states_are_not_busy(self, state: AssistantState):
        assert not state.is_busy
