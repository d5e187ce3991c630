"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state — no cross-user sharing.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class HierarchyState:
    """Tracks one warehouse branch built by a simulated site manager."""

    warehouse_id: str | None = None
    zone_id: str | None = None
    rack_id: str | None = None
    shelf_ids: list[str] = field(default_factory=list)
    shelf_slots: dict[str, int] = field(default_factory=dict)


@dataclass
class PlacementState:
    """Tracks the placements a simulated stock clerk has made."""

    shelf_id: str | None = None
    placement_ids: list[str] = field(default_factory=list)
    placed: int = 0
    rejected: int = 0
