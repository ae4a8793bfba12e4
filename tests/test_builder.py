"""Tests for build state, its events and the recommendation feed that follows it."""

import json

import pytest

from dreamcar.core.enums import BuildEvent, VehicleSource
from dreamcar.models.vehicle import VehicleRecord
from dreamcar.services.builder import CarBuilder
from dreamcar.services.catalog import AffiliateConfig, Catalog
from dreamcar.services.events import EventBus
from dreamcar.services.feed import (
    RecommendationFeed,
    builder_context,
    page_context,
)
from dreamcar.services.performance import MemoryStore, PerformanceTracker
from dreamcar.services.recommendations import RecommendationEngine


@pytest.fixture
def events() -> EventBus:
    return EventBus()


@pytest.fixture
def builder(events) -> CarBuilder:
    return CarBuilder(events)


@pytest.fixture
def engine() -> RecommendationEngine:
    return RecommendationEngine(Catalog.default(), AffiliateConfig())


def _record(events: EventBus, event: BuildEvent) -> list:
    seen: list = []
    events.subscribe(event, seen.append)
    return seen


# =============================================================================
# EventBus
# =============================================================================


class TestEventBus:
    def test_handlers_called_in_order(self, events):
        calls = []
        events.subscribe(BuildEvent.STEP_CHANGED, lambda p: calls.append(("a", p)))
        events.subscribe(BuildEvent.STEP_CHANGED, lambda p: calls.append(("b", p)))
        events.emit(BuildEvent.STEP_CHANGED, 2)
        assert calls == [("a", 2), ("b", 2)]

    def test_unsubscribe(self, events):
        calls = []
        unsubscribe = events.subscribe(BuildEvent.STEP_CHANGED, calls.append)
        unsubscribe()
        unsubscribe()  # second call is harmless
        events.emit(BuildEvent.STEP_CHANGED, 2)
        assert calls == []

    def test_other_events_not_delivered(self, events):
        calls = _record(events, BuildEvent.VEHICLE_SELECTED)
        events.emit(BuildEvent.STEP_CHANGED, 2)
        assert calls == []


# =============================================================================
# CarBuilder
# =============================================================================


class TestStepNavigation:
    def test_advance_one_step(self, builder, events):
        steps = _record(events, BuildEvent.STEP_CHANGED)
        assert builder.go_to_step(2) is True
        assert builder.current_step == 2
        assert steps == [2]

    def test_cannot_skip_ahead(self, builder):
        assert builder.go_to_step(3) is False
        assert builder.current_step == 1

    def test_out_of_range(self, builder):
        assert builder.go_to_step(0) is False
        assert builder.go_to_step(5) is False

    def test_can_go_back(self, builder):
        builder.go_to_step(2)
        builder.go_to_step(3)
        assert builder.go_to_step(1) is True
        assert builder.current_step == 1


class TestVehicleAndBuildType:
    def test_vehicle_from_vin(self, builder, events):
        selected = _record(events, BuildEvent.VEHICLE_SELECTED)
        changed = _record(events, BuildEvent.BUILD_STATE_CHANGED)
        record = VehicleRecord(year="2003", make="HONDA", model="Accord")

        selection = builder.set_vehicle_from_vin(record, vin="1hgcm82633a004352")

        assert selection.source == VehicleSource.VIN
        assert selection.display_name == "2003 HONDA Accord"
        assert selection.vin == "1HGCM82633A004352"
        assert selected == [selection]
        assert changed == [builder]

    def test_vehicle_manually(self, builder):
        selection = builder.set_vehicle_manually("  Ford Mustang GT ")
        assert selection.source == VehicleSource.MANUAL
        assert selection.label == "Ford Mustang GT"

    def test_build_type(self, builder, events):
        selected = _record(events, BuildEvent.BUILD_TYPE_SELECTED)
        bt = builder.select_build_type("track", "Lap times", ["suspension", "brakes"])
        assert builder.build_type == bt
        assert selected == [bt]


class TestParts:
    def test_cost_tracks_parts(self, builder, events):
        changed = _record(events, BuildEvent.BUILD_STATE_CHANGED)
        builder.add_part({"id": "B00JGZM6G8", "name": "Borla", "price": 899.99})
        builder.add_part({"id": "B07NNFM8JY", "name": "OBD2", "price": 129.99})
        assert builder.total_cost == pytest.approx(1029.98)

        builder.remove_part("B00JGZM6G8")
        assert builder.total_cost == pytest.approx(129.99)
        assert len(changed) == 3

    def test_summary_and_export(self, builder):
        builder.set_vehicle_manually("Subaru WRX")
        builder.select_build_type("street")
        builder.add_part({"id": "B075ZQVQZ1", "price": 329.99})

        exported = json.loads(builder.export_json())
        assert exported["vehicle"]["description"] == "Subaru WRX"
        assert exported["build_type"]["type"] == "street"
        assert exported["total_cost"] == pytest.approx(329.99)
        assert "generated_at" in exported

    def test_share_text(self, builder):
        assert builder.share_text() == (
            "My Dream Car Build:\nVehicle: Custom Vehicle\n"
            "Build Type: Custom\nTotal Cost: $0.00"
        )


# =============================================================================
# Recommendation feed
# =============================================================================


class TestBuilderContext:
    def test_initial_context(self, builder):
        ctx = builder_context(builder)
        assert ctx.category == "tools"
        assert ctx.build_type is None
        assert ctx.vehicle is None
        assert ctx.keywords == ()

    def test_context_from_state(self, builder):
        builder.set_vehicle_from_vin(
            VehicleRecord(year="2015", make="Subaru", model="WRX", body_style="Sedan")
        )
        builder.go_to_step(2)
        builder.select_build_type("track", categories=["Suspension", "Brakes"])

        ctx = builder_context(builder)
        assert ctx.category == "general"
        assert ctx.build_type == "track"
        assert ctx.vehicle == builder.vehicle
        assert ctx.keywords == ("Suspension", "Brakes", "Subaru", "WRX", "Sedan")

    def test_page_contexts(self):
        assert page_context("gallery").build_type == "show"
        assert page_context("homepage").category == "general"
        assert page_context("nowhere") == page_context("general")


class TestRecommendationFeed:
    def test_refreshes_on_build_events(self, engine, builder):
        tracker = PerformanceTracker(MemoryStore())
        feed = RecommendationFeed(engine, builder, tracker)
        published = []
        feed.listen(published.append)

        # step 1 maps to the "tools" category; only the torque wrench is in "Tools"
        builder.set_vehicle_manually("Ford Mustang")
        assert [p.id for p in feed.latest] == ["B08X1BK3YZ"]
        assert published == [feed.latest]
        assert tracker.snapshot().impressions == 1

    def test_each_event_triggers_one_query(self, engine, builder):
        feed = RecommendationFeed(engine, builder)
        published = []
        feed.listen(published.append)

        builder.set_vehicle_manually("Ford Mustang")
        builder.go_to_step(2)
        builder.select_build_type("track")
        assert len(published) == 3

    def test_empty_results_do_not_count_impressions(self, engine, builder):
        tracker = PerformanceTracker(MemoryStore())
        feed = RecommendationFeed(engine, builder, tracker)
        builder.go_to_step(2)  # "general" category matches nothing
        assert feed.latest == []
        assert tracker.snapshot().impressions == 0

    def test_update_with_overrides(self, engine, builder):
        feed = RecommendationFeed(engine, builder)
        results = feed.update(category=None, keywords=["carbon fiber"])
        assert {p.id for p in results} == {"B08XYZHMT4", "B08GY2J4QN"}

    def test_close_stops_following(self, engine, builder):
        feed = RecommendationFeed(engine, builder)
        published = []
        feed.listen(published.append)
        feed.close()
        builder.go_to_step(2)
        assert published == []
