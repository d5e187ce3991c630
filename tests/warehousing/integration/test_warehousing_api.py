"""Integration tests for the Warehousing API endpoints via TestClient."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain
from warehousing.api import routers
from warehousing.api.errors import install_error_handlers
from warehousing.api.permissions import set_permission_predicate
from warehousing.shelf.shelf import Shelf


def _app():
    app = FastAPI()
    for router in routers:
        app.include_router(router)
    install_error_handlers(app)
    return app


@pytest.fixture()
def client():
    return TestClient(_app())


ADDRESS = {"street": "1 Depot Road", "city": "Leeds", "region": "West Yorkshire", "postal_code": "LS1 1AA"}


def _create_warehouse(client, code="MAIN"):
    response = client.post("/warehouses", json={"name": "Main", "code": code, "address": ADDRESS})
    assert response.status_code == 201
    return response.json()["warehouse_id"]


def _create_zone(client, warehouse_id, code="AMB", zone_type="ambient", temperature=(15.0, 25.0)):
    response = client.post(
        "/zones",
        json={
            "warehouse_id": warehouse_id,
            "name": "Zone",
            "code": code,
            "zone_type": zone_type,
            "temperature_range": {"min": temperature[0], "max": temperature[1]},
        },
    )
    assert response.status_code == 201
    return response.json()["zone_id"]


def _create_rack(client, zone_id, code="R1"):
    response = client.post("/racks", json={"zone_id": zone_id, "name": "Rack", "code": code})
    assert response.status_code == 201
    return response.json()["rack_id"]


def _create_shelf(client, rack_id, code="S1", shelf_number=1, total_slots=10, total_weight=100.0):
    response = client.post(
        "/shelves",
        json={
            "rack_id": rack_id,
            "name": "Shelf",
            "code": code,
            "shelf_number": shelf_number,
            "total_slots": total_slots,
            "total_weight": total_weight,
        },
    )
    assert response.status_code == 201
    return response.json()["shelf_id"]


def _branch(client, **zone):
    warehouse_id = _create_warehouse(client)
    zone_id = _create_zone(client, warehouse_id, **zone)
    rack_id = _create_rack(client, zone_id)
    shelf_id = _create_shelf(client, rack_id)
    return warehouse_id, zone_id, rack_id, shelf_id


class TestHierarchyEndpoints:
    def test_create_and_read_warehouse(self, client):
        warehouse_id = _create_warehouse(client)
        response = client.get(f"/warehouses/{warehouse_id}")
        assert response.status_code == 200
        data = response.json()
        assert data["code"] == "MAIN"
        assert data["address"]["city"] == "Leeds"
        assert data["capacity"]["total_slots"] == 0

    def test_list_filters(self, client):
        warehouse_id = _create_warehouse(client)
        _create_zone(client, warehouse_id, code="AMB")
        _create_zone(client, warehouse_id, code="COLD", zone_type="refrigerated", temperature=(2.0, 8.0))

        response = client.get("/zones", params={"warehouse_id": warehouse_id, "zone_type": "refrigerated"})

        assert response.status_code == 200
        assert [zone["code"] for zone in response.json()] == ["COLD"]

    def test_shelf_capacity_rolls_up(self, client):
        warehouse_id, zone_id, rack_id, _ = _branch(client)
        _create_shelf(client, rack_id, code="S2", shelf_number=2, total_slots=5)
        assert client.get(f"/racks/{rack_id}").json()["capacity"]["total_slots"] == 15
        assert client.get(f"/zones/{zone_id}").json()["capacity"]["total_slots"] == 15
        assert client.get(f"/warehouses/{warehouse_id}").json()["capacity"]["total_slots"] == 15

    def test_update_shelf_and_resize(self, client):
        *_, shelf_id = _branch(client)
        assert client.put(f"/shelves/{shelf_id}", json={"name": "Top"}).status_code == 200
        assert client.put(f"/shelves/{shelf_id}/capacity", json={"total_slots": 12}).status_code == 200
        data = client.get(f"/shelves/{shelf_id}").json()
        assert data["name"] == "Top"
        assert data["capacity"]["total_slots"] == 12

    def test_zone_humidity_and_access_level(self, client):
        warehouse_id = _create_warehouse(client)
        response = client.post(
            "/zones",
            json={
                "warehouse_id": warehouse_id,
                "name": "Dry Store",
                "code": "DRY",
                "zone_type": "ambient",
                "temperature_range": {"min": 15.0, "max": 25.0},
                "humidity_range": {"min": 30.0, "max": 50.0},
                "access_level": "authorized_only",
            },
        )
        zone_id = response.json()["zone_id"]

        data = client.get(f"/zones/{zone_id}").json()
        assert data["humidity_range"] == {"min": 30.0, "max": 50.0}
        assert data["access_level"] == "authorized_only"

        assert client.put(f"/zones/{zone_id}", json={"humidity_range": {"min": 35.0, "max": 45.0}}).status_code == 200
        assert client.get(f"/zones/{zone_id}").json()["humidity_range"] == {"min": 35.0, "max": 45.0}

    def test_shelf_physical_attributes(self, client):
        *_, rack_id, _ = _branch(client)
        response = client.post(
            "/shelves",
            json={
                "rack_id": rack_id,
                "name": "Dark Shelf",
                "code": "DARK",
                "shelf_number": 2,
                "total_slots": 8,
                "total_weight": 40.0,
                "max_items_per_slot": 2,
                "grid_position": {"row": 1, "column": 3, "level": 2, "slot": 1},
                "dimensions": {"width": 1.2, "height": 0.4, "depth": 0.6},
                "storage_conditions": {"humidity": {"min": 20.0, "max": 40.0}, "light_sensitive": True},
            },
        )
        assert response.status_code == 201
        shelf_id = response.json()["shelf_id"]

        data = client.get(f"/shelves/{shelf_id}").json()
        assert data["max_items_per_slot"] == 2
        assert data["grid_position"] == {"row": 1, "column": 3, "level": 2, "slot": 1}
        assert data["dimensions"] == {"width": 1.2, "height": 0.4, "depth": 0.6}
        assert data["storage_conditions"]["light_sensitive"] is True
        assert data["storage_conditions"]["humidity"] == {"min": 20.0, "max": 40.0}
        assert data["storage_conditions"]["temperature"] is None

        client.put(f"/shelves/{shelf_id}", json={"grid_position": {"row": 2, "column": 1, "level": 1, "slot": 4}})
        assert client.get(f"/shelves/{shelf_id}").json()["grid_position"]["row"] == 2

    def test_delete_empty_warehouse(self, client):
        warehouse_id, *_ = _branch(client)
        response = client.delete(f"/warehouses/{warehouse_id}")
        assert response.status_code == 200
        assert response.json()["removed"] == {"shelves": 1, "racks": 1, "zones": 1}
        assert client.get(f"/warehouses/{warehouse_id}").status_code == 404

    def test_layout_and_capacity_report(self, client):
        warehouse_id, zone_id, rack_id, shelf_id = _branch(client)
        tree = client.get(f"/warehouses/{warehouse_id}/layout").json()
        assert tree["children"][0]["children"][0]["children"][0]["id"] == shelf_id
        report = client.get(f"/racks/{rack_id}/capacity-report").json()
        assert report["children"][0]["id"] == shelf_id


class TestPlacementEndpoints:
    def test_assign_move_and_unassign(self, client, catalog):
        warehouse_id, _, rack_id, shelf_id = _branch(client)
        other_shelf = _create_shelf(client, rack_id, code="S2", shelf_number=2)
        item = catalog.register_item("Paracetamol 500mg", size_slots=3, weight=1.5)

        response = client.post("/placements", json={"item_id": item["item_id"], "shelf_id": shelf_id})
        assert response.status_code == 201
        placement_id = response.json()["placement_id"]

        response = client.put(f"/placements/{placement_id}/move", json={"new_shelf_id": other_shelf})
        assert response.status_code == 200
        moved_id = response.json()["placement_id"]
        assert response.json()["shelf_id"] == other_shelf

        assert client.delete(f"/placements/{moved_id}").status_code == 200
        assert client.get(f"/warehouses/{warehouse_id}").json()["capacity"]["used_slots"] == 0

    def test_bulk_assignment(self, client, catalog):
        *_, shelf_id = _branch(client)
        small = catalog.register_item("Gauze", size_slots=4)
        large = catalog.register_item("Stretcher", size_slots=8)

        response = client.post(f"/shelves/{shelf_id}/items", json={"item_ids": [small["item_id"], large["item_id"]]})

        assert response.status_code == 200
        data = response.json()
        assert data["placed"] == 1
        assert data["failed"] == 1
        assert data["results"][1]["error"] == "capacity_exceeded"

    def test_unassigned_items(self, client, catalog):
        *_, shelf_id = _branch(client)
        placed = catalog.register_item("Gauze")
        waiting = catalog.register_item("Tape", required_security_level="low")
        client.post("/placements", json={"item_id": placed["item_id"], "shelf_id": shelf_id})

        response = client.get("/placements/unassigned-items")

        assert response.status_code == 200
        assert [item["item_id"] for item in response.json()] == [waiting["item_id"]]


class TestCleaningEndpoints:
    def test_record_and_refresh(self, client):
        *_, shelf_id = _branch(client)
        cleaned_at = (datetime.now(UTC) - timedelta(hours=1)).isoformat()
        assert client.put(f"/shelves/{shelf_id}/cleaning", json={"cleaned_at": cleaned_at}).status_code == 200

        as_of = (datetime.now(UTC) + timedelta(days=40)).isoformat()
        response = client.post("/cleaning/refresh", json={"as_of": as_of})

        assert response.status_code == 200
        assert response.json()["overdue"] == 1
        assert current_domain.repository_for(Shelf).get(shelf_id).cleaning_status == "overdue"

    def test_reads_show_status_due_now_without_a_refresh(self, client):
        *_, shelf_id = _branch(client)

        cleaned_at = (datetime.now(UTC) - timedelta(days=27)).isoformat()
        assert client.put(f"/shelves/{shelf_id}/cleaning", json={"cleaned_at": cleaned_at}).status_code == 200
        assert client.get(f"/shelves/{shelf_id}").json()["cleaning_status"] == "needs_cleaning"
        assert client.get(f"/shelves/{shelf_id}/capacity-report").json()["cleaning_status"] == "needs_cleaning"

        cleaned_at = (datetime.now(UTC) - timedelta(days=31)).isoformat()
        assert client.put(f"/shelves/{shelf_id}/cleaning", json={"cleaned_at": cleaned_at}).status_code == 200
        assert client.get(f"/shelves/{shelf_id}").json()["cleaning_status"] == "overdue"
        assert client.get(f"/shelves/{shelf_id}/capacity-report").json()["cleaning_status"] == "overdue"

        # Reads never persist the advance
        assert current_domain.repository_for(Shelf).get(shelf_id).cleaning_status == "clean"

    def test_recent_cleaning_reads_clean(self, client):
        *_, shelf_id = _branch(client)
        cleaned_at = (datetime.now(UTC) - timedelta(days=3)).isoformat()
        client.put(f"/shelves/{shelf_id}/cleaning", json={"cleaned_at": cleaned_at})
        assert client.get(f"/shelves/{shelf_id}").json()["cleaning_status"] == "clean"

    def test_upcoming_rejects_negative_window(self, client):
        assert client.get("/cleaning/upcoming", params={"within_days": -1}).status_code == 422

    def test_overdue_is_empty_for_fresh_shelves(self, client):
        _branch(client)
        response = client.get("/cleaning/overdue")
        assert response.status_code == 200
        assert response.json() == []


class TestErrorMapping:
    def test_duplicate_code_is_400(self, client):
        _create_warehouse(client, code="DUP")
        response = client.post("/warehouses", json={"name": "Again", "code": "DUP", "address": ADDRESS})
        assert response.status_code == 400

    def test_unknown_record_is_404(self, client):
        assert client.get("/shelves/does-not-exist").status_code == 404

    def test_oversell_is_409(self, client, catalog):
        *_, shelf_id = _branch(client)
        item = catalog.register_item("Pallet", size_slots=11)
        response = client.post("/placements", json={"item_id": item["item_id"], "shelf_id": shelf_id})
        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "capacity_exceeded"
        assert body["detail"]["available_slots"] == 10

    def test_incompatible_zone_is_422(self, client, catalog):
        *_, shelf_id = _branch(client, zone_type="refrigerated", temperature=(2.0, 8.0))
        item = catalog.register_item("Aspirin", required_temperature_range={"min": 15.0, "max": 25.0})
        response = client.post("/placements", json={"item_id": item["item_id"], "shelf_id": shelf_id})
        assert response.status_code == 422
        assert response.json()["error"] == "incompatible_zone"

    def test_delete_with_stock_is_409(self, client, catalog):
        warehouse_id, *_, shelf_id = _branch(client)
        item = catalog.register_item("Gauze")
        client.post("/placements", json={"item_id": item["item_id"], "shelf_id": shelf_id})

        response = client.delete(f"/warehouses/{warehouse_id}")

        assert response.status_code == 409
        assert response.json()["detail"]["blocking_placements"] == 1

    def test_denied_permission_is_403(self, client):
        set_permission_predicate(lambda user_id, resource, action: action != "delete")
        warehouse_id = _create_warehouse(client)
        response = client.delete(f"/warehouses/{warehouse_id}", headers={"X-User-Id": "clerk-7"})
        assert response.status_code == 403

    def test_unexpected_failure_is_opaque_500(self):
        def broken(user_id, resource, action):
            raise RuntimeError("permission service unavailable")

        set_permission_predicate(broken)
        client = TestClient(_app(), raise_server_exceptions=False)
        response = client.post("/warehouses", json={"name": "Main", "code": "X", "address": ADDRESS})
        assert response.status_code == 500
        assert response.json() == {"error": "internal_error"}
