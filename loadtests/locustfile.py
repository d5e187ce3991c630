"""Warehousing Load Testing — Locust entry point.

Discovers all user classes from the scenarios package.
Run specific scenarios with Locust's class selection or use --tags.

Usage:
    # Server with a seeded fake catalog:
    WAREHOUSING_FAKE_CATALOG_SEED_ITEMS=5000 uvicorn app:app --app-dir src

    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Placement contention only:
    locust -f loadtests/locustfile.py PlacementClerkUser

    # Headless (CI mode):
    locust -f loadtests/locustfile.py PlacementClerkUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import extract_error_detail
from loadtests.scenarios.hierarchy import SiteManagerUser  # noqa: F401
from loadtests.scenarios.placement import PlacementClerkUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Fires globally for all scenarios — no per-task wiring needed.
    Extracts the API error body so you see "capacity: needs 3 slots, has 1
    available" instead of just "409".
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    """Log a marker when load test begins."""
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Report any shelf whose used capacity exceeds its total when the test ends."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    try:
        shelves = requests.get(f"{environment.host}/shelves", timeout=30).json()
    except requests.RequestException as e:
        print(f"[LOADTEST] Could not fetch shelves: {e}\n")
        return

    oversold = [s for s in shelves if s["capacity"]["used_slots"] > s["capacity"]["total_slots"]]
    used = sum(s["capacity"]["used_slots"] for s in shelves)
    total = sum(s["capacity"]["total_slots"] for s in shelves)
    print(f"[LOADTEST] {len(shelves)} shelves, {used}/{total} slots used")
    if oversold:
        print(f"[LOADTEST] OVERSOLD shelves: {', '.join(s['code'] for s in oversold)}")
    print()
