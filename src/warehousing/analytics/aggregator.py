"""Warehouse analytics — capacity reports, layouts and utilization trends.

Everything here is read only and takes no locks. Figures come from the
capacities stored on each container, which the roll-up keeps consistent with
the shelves beneath them.
"""

from collections import defaultdict
from datetime import UTC, datetime, timedelta

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain

from warehousing.analytics.movement_log import CapacityMovementLog
from warehousing.cleaning.queries import list_overdue, list_upcoming
from warehousing.cleaning.schedule import align
from warehousing.rack.rack import Rack
from warehousing.shared.capacity import total_of
from warehousing.shared.queries import children_of, find
from warehousing.shelf.shelf import Shelf
from warehousing.warehouse.warehouse import Warehouse
from warehousing.zone.zone import Zone

PERIODS = {"7d": 7, "30d": 30, "90d": 90, "365d": 365}

# Shelf utilization bands, as (label, lower bound inclusive)
UTILIZATION_BANDS = [
    ("0-25", 0.0),
    ("25-50", 25.0),
    ("50-75", 50.0),
    ("75-90", 75.0),
    ("90-100", 90.0),
]

LEVELS = {
    "warehouse": (Warehouse, Zone, "warehouse_id"),
    "zone": (Zone, Rack, "zone_id"),
    "rack": (Rack, Shelf, "rack_id"),
    "shelf": (Shelf, None, None),
}


def _period_days(period):
    try:
        return PERIODS[period]
    except KeyError:
        raise ValidationError({"period": [f"Period must be one of {', '.join(PERIODS)}"]}) from None


def _load(level, container_id):
    if level not in LEVELS:
        raise ValidationError({"level": [f"Level must be one of {', '.join(LEVELS)}"]})
    cls = LEVELS[level][0]
    return current_domain.repository_for(cls).get(container_id)


def _node(level, record):
    return {
        "id": str(record.id),
        "level": level,
        "code": record.code,
        "name": record.name,
        "is_active": record.is_active,
        "capacity": record.capacity.to_summary(),
    }


def _child_level(level):
    order = list(LEVELS)
    return order[order.index(level) + 1]


def average_shelf_utilization(shelves):
    if not shelves:
        return 0.0
    return round(sum(s.capacity.utilization_percentage for s in shelves) / len(shelves), 2)


def utilization_distribution(shelves):
    buckets = {label: 0 for label, _ in UTILIZATION_BANDS}
    for shelf in shelves:
        value = shelf.capacity.utilization_percentage
        label = next(label for label, lower in reversed(UTILIZATION_BANDS) if value >= lower)
        buckets[label] += 1
    return buckets


def capacity_by_zone_type(zones):
    grouped = defaultdict(list)
    for zone in zones:
        grouped[zone.zone_type].append(zone.capacity)
    return {zone_type: total_of(capacities).to_summary() for zone_type, capacities in sorted(grouped.items())}


def utilization_trend(warehouse, days, as_of):
    """Daily placement movements over the period, with end-of-day used slots.

    End-of-day usage is reconstructed backwards from the current figure, so the
    last point always equals the warehouse's used slots now.
    """
    start = (as_of - timedelta(days=days - 1)).date()
    entries = [
        entry
        for entry in find(CapacityMovementLog, warehouse_id=str(warehouse.id))
        if start <= align(entry.occurred_at, as_of).date() <= as_of.date()
    ]

    daily = defaultdict(lambda: {"placed_slots": 0, "removed_slots": 0, "net_weight": 0.0})
    for entry in entries:
        day = daily[align(entry.occurred_at, as_of).date()]
        if entry.slots_change >= 0:
            day["placed_slots"] += entry.slots_change
        else:
            day["removed_slots"] += -entry.slots_change
        day["net_weight"] += entry.weight_change or 0.0

    total = warehouse.capacity.total_slots
    used = warehouse.capacity.used_slots
    series = []
    for offset in range(days):
        day = as_of.date() - timedelta(days=offset)
        moves = daily.get(day, {"placed_slots": 0, "removed_slots": 0, "net_weight": 0.0})
        used_at_end = max(used, 0)
        series.append(
            {
                "date": day.isoformat(),
                "placed_slots": moves["placed_slots"],
                "removed_slots": moves["removed_slots"],
                "net_weight": round(moves["net_weight"], 3),
                "used_slots": used_at_end,
                "utilization_percentage": round(min(used_at_end / total * 100, 100.0), 2) if total else 0.0,
            }
        )
        used -= moves["placed_slots"] - moves["removed_slots"]
    series.reverse()
    return series


def warehouse_analytics(warehouse_id, period="30d", as_of=None):
    days = _period_days(period)
    as_of = as_of or datetime.now(UTC)
    warehouse = current_domain.repository_for(Warehouse).get(warehouse_id)

    zones = children_of(Zone, warehouse_id=str(warehouse.id))
    racks = find(Rack, warehouse_id=str(warehouse.id))
    shelves = find(Shelf, warehouse_id=str(warehouse.id))

    racks_by_zone = defaultdict(list)
    for rack in racks:
        racks_by_zone[str(rack.zone_id)].append(rack)
    shelves_by_zone = defaultdict(list)
    for shelf in shelves:
        shelves_by_zone[str(shelf.zone_id)].append(shelf)

    zone_breakdown = []
    for zone in zones:
        zone_shelves = shelves_by_zone[str(zone.id)]
        zone_breakdown.append(
            {
                **_node("zone", zone),
                "zone_type": zone.zone_type,
                "rack_count": len(racks_by_zone[str(zone.id)]),
                "shelf_count": len(zone_shelves),
                "average_shelf_utilization": average_shelf_utilization(zone_shelves),
            }
        )

    capacity = warehouse.capacity
    return {
        "warehouse_id": str(warehouse.id),
        "code": warehouse.code,
        "name": warehouse.name,
        "period": period,
        "generated_at": as_of.isoformat(),
        "capacity": capacity.to_summary(),
        "utilization_percentage": capacity.utilization_percentage,
        "average_shelf_utilization": average_shelf_utilization(shelves),
        "counts": {
            "zones": len(zones),
            "racks": len(racks),
            "shelves": len(shelves),
            "active_shelves": sum(1 for s in shelves if s.is_active),
            "placements": sum(len(s.placements or []) for s in shelves),
        },
        "zones": zone_breakdown,
        "distribution": {
            "shelf_utilization": utilization_distribution(shelves),
            "capacity_by_zone_type": capacity_by_zone_type(zones),
        },
        "trend": utilization_trend(warehouse, days, as_of),
        "cleaning": {
            "overdue": list_overdue(as_of=as_of, warehouse_id=warehouse.id),
            "upcoming": list_upcoming(as_of=as_of, warehouse_id=warehouse.id),
        },
    }


def capacity_report(level, container_id, as_of=None):
    """A container's capacity with its immediate children (placements for a shelf).

    A shelf report shows the cleaning status as of ``as_of`` (now by default).
    """
    record = _load(level, container_id)
    report = _node(level, record)

    _, child_cls, parent_field = LEVELS[level]
    if child_cls is None:
        placements = sorted(record.placements or [], key=lambda p: str(p.placed_at or ""))
        report["placements"] = [p.to_summary() for p in placements]
        report["cleaning_status"] = record.derived_cleaning_status(as_of or datetime.now(UTC))
        report["max_items_per_slot"] = record.max_items_per_slot or 1
        report["storage_conditions"] = record.storage_conditions.to_summary() if record.storage_conditions else None
        return report

    child_level = _child_level(level)
    report["children"] = [
        _node(child_level, child) for child in children_of(child_cls, **{parent_field: str(record.id)})
    ]
    return report


def _layout_node(level, record):
    node = _node(level, record)
    _, child_cls, parent_field = LEVELS[level]
    if child_cls is None:
        node["shelf_number"] = record.shelf_number
        node["grid_position"] = record.grid_position.to_summary() if record.grid_position else None
        node["placements"] = len(record.placements or [])
        return node

    child_level = _child_level(level)
    node["children"] = [
        _layout_node(child_level, child)
        for child in children_of(child_cls, **{parent_field: str(record.id)})
        if child.is_active
    ]
    return node


def layout(level, container_id):
    """Nested tree of a container's active descendants in display order."""
    return _layout_node(level, _load(level, container_id))
