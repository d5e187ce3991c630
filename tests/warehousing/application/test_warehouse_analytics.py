"""Application tests for warehouse analytics, capacity reports and layouts."""

from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError
from warehousing.analytics.aggregator import capacity_report, layout, warehouse_analytics
from warehousing.analytics.movement_log import CapacityMovementLog
from warehousing.placement.assignment import AssignItem, UnassignItem
from warehousing.shared.queries import find
from warehousing.shelf.management import DeactivateShelf


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _place(catalog, shelf_id, slots, weight=1.0):
    item = catalog.register_item("Paracetamol 500mg", size_slots=slots, weight=weight)
    return _process(AssignItem(item_id=item["item_id"], shelf_id=shelf_id))


@pytest.fixture()
def stocked(build, catalog):
    """One warehouse with an ambient and a refrigerated zone, partly filled."""
    warehouse_id = build.warehouse()
    ambient = build.zone(warehouse_id, code="AMB")
    cold = build.zone(warehouse_id, code="COLD", zone_type="refrigerated", temperature=(2.0, 8.0))
    ambient_rack = build.rack(ambient)
    low = build.shelf(ambient_rack, total_slots=10, shelf_number=1)
    full = build.shelf(ambient_rack, total_slots=10, shelf_number=2)
    cold_shelf = build.shelf(build.rack(cold), total_slots=20)
    _place(catalog, low, 2)
    _place(catalog, full, 9)
    return {"warehouse_id": warehouse_id, "ambient": ambient, "cold": cold, "shelves": [low, full, cold_shelf]}


class TestWarehouseAnalytics:
    def test_summary_figures(self, stocked):
        report = warehouse_analytics(stocked["warehouse_id"])

        assert report["period"] == "30d"
        assert report["capacity"]["total_slots"] == 40
        assert report["capacity"]["used_slots"] == 11
        assert report["utilization_percentage"] == 27.5
        assert report["average_shelf_utilization"] == round((20.0 + 90.0 + 0.0) / 3, 2)
        assert report["counts"] == {
            "zones": 2,
            "racks": 2,
            "shelves": 3,
            "active_shelves": 3,
            "placements": 2,
        }

    def test_distribution(self, stocked):
        report = warehouse_analytics(stocked["warehouse_id"])
        bands = report["distribution"]["shelf_utilization"]
        assert bands == {"0-25": 2, "25-50": 0, "50-75": 0, "75-90": 0, "90-100": 1}
        by_type = report["distribution"]["capacity_by_zone_type"]
        assert by_type["ambient"]["used_slots"] == 11
        assert by_type["refrigerated"]["total_slots"] == 20

    def test_zone_breakdown(self, stocked):
        zones = {zone["code"]: zone for zone in warehouse_analytics(stocked["warehouse_id"])["zones"]}
        assert zones["AMB"]["shelf_count"] == 2
        assert zones["AMB"]["average_shelf_utilization"] == 55.0
        assert zones["COLD"]["zone_type"] == "refrigerated"

    def test_trend_ends_at_current_usage(self, stocked):
        report = warehouse_analytics(stocked["warehouse_id"], period="7d")
        trend = report["trend"]
        assert len(trend) == 7
        assert trend[-1]["used_slots"] == 11
        assert trend[-1]["placed_slots"] == 11
        assert trend[0]["used_slots"] == 0

    def test_trend_counts_removals(self, build, catalog):
        branch = build.branch(total_slots=10)
        placement = _place(catalog, branch.shelf_id, 4)
        _process(UnassignItem(placement_id=placement["placement_id"]))

        today = warehouse_analytics(branch.warehouse_id, period="7d")["trend"][-1]
        assert today["placed_slots"] == 4
        assert today["removed_slots"] == 4
        assert today["used_slots"] == 0

    def test_cleaning_section(self, stocked):
        as_of = datetime.now(UTC) + timedelta(days=31)
        report = warehouse_analytics(stocked["warehouse_id"], as_of=as_of)
        assert len(report["cleaning"]["overdue"]) == 3
        assert report["cleaning"]["upcoming"] == []

    def test_invalid_period(self, stocked):
        with pytest.raises(ValidationError) as exc:
            warehouse_analytics(stocked["warehouse_id"], period="2w")
        assert "period" in exc.value.messages

    def test_unknown_warehouse(self):
        with pytest.raises(ObjectNotFoundError):
            warehouse_analytics("no-such-warehouse")


class TestCapacityReport:
    def test_warehouse_report_lists_zones(self, stocked):
        report = capacity_report("warehouse", stocked["warehouse_id"])
        assert [child["code"] for child in report["children"]] == ["AMB", "COLD"]
        assert report["children"][0]["level"] == "zone"
        assert report["capacity"]["used_slots"] == 11

    def test_shelf_report_lists_placements(self, stocked):
        report = capacity_report("shelf", stocked["shelves"][1])
        assert len(report["placements"]) == 1
        assert report["placements"][0]["slots_used"] == 9
        assert report["cleaning_status"] == "clean"

    def test_shelf_report_derives_cleaning_status(self, stocked):
        later = datetime.now(UTC) + timedelta(days=31)
        assert capacity_report("shelf", stocked["shelves"][1], as_of=later)["cleaning_status"] == "overdue"

    def test_unknown_level(self, stocked):
        with pytest.raises(ValidationError):
            capacity_report("aisle", stocked["warehouse_id"])


class TestLayout:
    def test_nested_tree(self, stocked):
        tree = layout("warehouse", stocked["warehouse_id"])
        assert [zone["code"] for zone in tree["children"]] == ["AMB", "COLD"]
        ambient_rack = tree["children"][0]["children"][0]
        assert [shelf["shelf_number"] for shelf in ambient_rack["children"]] == [1, 2]
        assert ambient_rack["children"][1]["placements"] == 1

    def test_inactive_containers_are_hidden(self, stocked):
        _process(DeactivateShelf(shelf_id=stocked["shelves"][2]))
        tree = layout("zone", stocked["cold"])
        assert tree["children"][0]["children"] == []


class TestMovementLog:
    def test_placements_and_removals_are_logged(self, build, catalog):
        branch = build.branch()
        placement = _place(catalog, branch.shelf_id, 3, weight=2.0)
        _process(UnassignItem(placement_id=placement["placement_id"]))

        entries = sorted(find(CapacityMovementLog, shelf_id=branch.shelf_id), key=lambda e: e.slots_change)
        assert [e.event_type for e in entries] == ["ItemRemoved", "ItemPlaced"]
        assert [e.slots_change for e in entries] == [-3, 3]
        assert entries[0].weight_change == -2.0
        assert entries[0].shelf_used_slots == 0
        assert entries[1].shelf_used_slots == 3
