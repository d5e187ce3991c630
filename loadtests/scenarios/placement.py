"""Placement contention load test scenarios.

Many clerks assign catalog items to the same small set of shelves at once.
The service must reject what does not fit (409 capacity_exceeded) and never
report a shelf with more used slots than it has. Start the server with
WAREHOUSING_FAKE_CATALOG_SEED_ITEMS set so the catalog has items to place.
"""

import random

import requests
from locust import HttpUser, SequentialTaskSet, between, events, task

from loadtests.data_generators import rack_data, shelf_data, warehouse_data, zone_data
from loadtests.helpers.response import extract_error_detail, is_capacity_rejection
from loadtests.helpers.state import PlacementState

# Shelves shared by every clerk in the run, created once at test start
CONTENDED_SHELVES: list[str] = []
CONTENDED_SHELF_COUNT = 3
CONTENDED_SHELF_SLOTS = 25


@events.test_start.add_listener
def create_contended_shelves(environment, **_kwargs):
    """Build one branch whose few shelves every PlacementClerkUser competes for."""
    host = environment.host
    CONTENDED_SHELVES.clear()
    warehouse_id = requests.post(f"{host}/warehouses", json=warehouse_data(), timeout=10).json()["warehouse_id"]
    zone_id = requests.post(f"{host}/zones", json=zone_data(warehouse_id, "ambient"), timeout=10).json()["zone_id"]
    rack_id = requests.post(f"{host}/racks", json=rack_data(zone_id), timeout=10).json()["rack_id"]
    for number in range(1, CONTENDED_SHELF_COUNT + 1):
        payload = shelf_data(rack_id, shelf_number=number, total_slots=CONTENDED_SHELF_SLOTS)
        CONTENDED_SHELVES.append(requests.post(f"{host}/shelves", json=payload, timeout=10).json()["shelf_id"])


class ContendedAssignmentJourney(SequentialTaskSet):
    """Pick unassigned items -> Assign to a contended shelf -> Occasionally unassign."""

    def on_start(self):
        self.state = PlacementState()

    @task
    def assign_items(self):
        if not CONTENDED_SHELVES:
            self.interrupt()
            return
        self.state.shelf_id = random.choice(CONTENDED_SHELVES)

        with self.client.get(
            "/placements/unassigned-items",
            catch_response=True,
            name="GET /placements/unassigned-items",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"List unassigned failed: {resp.status_code} — {extract_error_detail(resp)}")
                self.interrupt()
                return
            items = resp.json()

        for item in random.sample(items, min(3, len(items))):
            with self.client.post(
                "/placements",
                json={"item_id": item["item_id"], "shelf_id": self.state.shelf_id},
                catch_response=True,
                name="POST /placements",
            ) as resp:
                if resp.status_code == 201:
                    self.state.placement_ids.append(resp.json()["placement_id"])
                    self.state.placed += 1
                elif is_capacity_rejection(resp):
                    resp.success()
                    self.state.rejected += 1
                elif resp.status_code == 409:
                    # Another clerk placed the same item first
                    resp.success()
                else:
                    resp.failure(f"Assign failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def release_some(self):
        if not self.state.placement_ids or random.random() > 0.5:
            return
        placement_id = self.state.placement_ids.pop(random.randrange(len(self.state.placement_ids)))
        with self.client.delete(
            f"/placements/{placement_id}",
            catch_response=True,
            name="DELETE /placements/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Unassign failed: {resp.status_code} — {extract_error_detail(resp)}")

    @task
    def verify_shelf(self):
        with self.client.get(
            f"/shelves/{self.state.shelf_id}",
            catch_response=True,
            name="GET /shelves/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Get shelf failed: {resp.status_code} — {extract_error_detail(resp)}")
                return
            capacity = resp.json()["capacity"]
            if capacity["used_slots"] > capacity["total_slots"]:
                resp.failure(f"Oversold shelf: {capacity['used_slots']} of {capacity['total_slots']} slots used")

    @task
    def done(self):
        self.interrupt()


class PlacementClerkUser(HttpUser):
    """Competes with other clerks for the same shelves."""

    tasks = [ContendedAssignmentJourney]
    wait_time = between(0.1, 0.5)
