"""Hierarchy load test scenarios.

A stateful SequentialTaskSet journey in which a site manager builds a
warehouse branch, grows it, and reads the capacity views back.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import rack_data, resize_data, shelf_data, warehouse_data, zone_data
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import HierarchyState


class BuildBranchJourney(SequentialTaskSet):
    """Create Warehouse -> Zone -> Rack -> Shelves -> Resize -> Layout -> Analytics."""

    def on_start(self):
        self.state = HierarchyState()

    @task
    def create_warehouse(self):
        with self.client.post(
            "/warehouses",
            json=warehouse_data(),
            catch_response=True,
            name="POST /warehouses",
        ) as resp:
            if resp.status_code == 201:
                self.state.warehouse_id = resp.json()["warehouse_id"]
            else:
                resp.failure(f"Create warehouse failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_zone(self):
        with self.client.post(
            "/zones",
            json=zone_data(self.state.warehouse_id),
            catch_response=True,
            name="POST /zones",
        ) as resp:
            if resp.status_code == 201:
                self.state.zone_id = resp.json()["zone_id"]
            else:
                resp.failure(f"Create zone failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_rack(self):
        with self.client.post(
            "/racks",
            json=rack_data(self.state.zone_id),
            catch_response=True,
            name="POST /racks",
        ) as resp:
            if resp.status_code == 201:
                self.state.rack_id = resp.json()["rack_id"]
            else:
                resp.failure(f"Create rack failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def create_shelves(self):
        for number in range(1, random.randint(2, 5) + 1):
            payload = shelf_data(self.state.rack_id, shelf_number=number)
            with self.client.post(
                "/shelves",
                json=payload,
                catch_response=True,
                name="POST /shelves",
            ) as resp:
                if resp.status_code == 201:
                    shelf_id = resp.json()["shelf_id"]
                    self.state.shelf_ids.append(shelf_id)
                    self.state.shelf_slots[shelf_id] = payload["total_slots"]
                else:
                    resp.failure(f"Create shelf failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def resize_shelf(self):
        if not self.state.shelf_ids:
            return
        shelf_id = random.choice(self.state.shelf_ids)
        payload = resize_data(self.state.shelf_slots[shelf_id])
        with self.client.put(
            f"/shelves/{shelf_id}/capacity",
            json=payload,
            catch_response=True,
            name="PUT /shelves/{id}/capacity",
        ) as resp:
            if resp.status_code == 200:
                self.state.shelf_slots[shelf_id] = payload["total_slots"]
            else:
                resp.failure(f"Resize shelf failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def check_rollup(self):
        with self.client.get(
            f"/warehouses/{self.state.warehouse_id}",
            catch_response=True,
            name="GET /warehouses/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get warehouse failed: {resp.status_code} — {extract_error_detail(resp)}")
                return
            expected = sum(self.state.shelf_slots.values())
            actual = resp.json()["capacity"]["total_slots"]
            if actual != expected:
                resp.failure(f"Roll-up mismatch: warehouse has {actual} slots, shelves sum to {expected}")

    @task
    def view_layout(self):
        self.client.get(f"/warehouses/{self.state.warehouse_id}/layout", name="GET /warehouses/{id}/layout")

    @task
    def view_analytics(self):
        period = random.choice(["7d", "30d", "90d"])
        self.client.get(
            f"/warehouses/{self.state.warehouse_id}/analytics?period={period}",
            name="GET /warehouses/{id}/analytics",
        )

    @task
    def done(self):
        self.interrupt()


class SiteManagerUser(HttpUser):
    """Builds warehouse branches and reads capacity views."""

    tasks = [BuildBranchJourney]
    wait_time = between(1, 3)
