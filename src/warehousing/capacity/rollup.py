"""Bottom-up capacity roll-up: Shelf -> Rack -> Zone -> Warehouse.

Every container above the shelf level stores its capacity as the element-wise
sum of its immediate children. After a shelf (or any container) changes, the
handler that changed it calls :func:`roll_up` inside the same unit of work, so
the change and every ancestor update commit together.

Children that the current unit of work already holds in memory are used in
place of their persisted copies, and children being deleted are left out of
the sums. A single call can refresh several branches, which is what a move
between warehouses needs.
"""

import structlog
from protean.utils.globals import current_domain

from warehousing.errors import ConflictError
from warehousing.rack.rack import Rack
from warehousing.shared.queries import find
from warehousing.shelf.shelf import Shelf
from warehousing.warehouse.warehouse import Warehouse
from warehousing.zone.zone import Zone

logger = structlog.get_logger(__name__)


def _key(value):
    return str(value) if value is not None else None


def _children(child_cls, parent_field, parent_id, overrides, excluded):
    children = {str(c.id): c for c in find(child_cls, **{parent_field: parent_id})}
    for obj in overrides.values():
        if isinstance(obj, child_cls) and _key(getattr(obj, parent_field)) == parent_id:
            children[str(obj.id)] = obj
    return [
        overrides.get(child_id, child)
        for child_id, child in children.items()
        if child_id not in excluded
    ]


def _refresh_level(parent_cls, parent_ids, child_cls, parent_field, overrides, excluded):
    repo = current_domain.repository_for(parent_cls)
    refreshed = []
    for parent_id in sorted(parent_ids):
        if parent_id in excluded:
            continue
        parent = overrides.get(parent_id) or repo.get(parent_id)
        children = _children(child_cls, parent_field, parent_id, overrides, excluded)
        parent.refresh_capacity([child.capacity for child in children])
        repo.add(parent)
        overrides[parent_id] = parent
        refreshed.append(parent)
    return refreshed


def roll_up(*changed, removed=()):
    """Recompute the ancestors of ``changed`` and ``removed`` containers.

    ``changed`` are in-flight shelves, racks or zones whose capacity may differ
    from their persisted copy. ``removed`` are containers being deleted in the
    same unit of work. Returns the refreshed warehouses.
    """
    overrides = {str(obj.id): obj for obj in changed}
    excluded = {str(obj.id) for obj in removed}
    touched = list(changed) + list(removed)

    rack_ids = {_key(obj.rack_id) for obj in touched if isinstance(obj, Shelf)}
    racks = _refresh_level(Rack, rack_ids, Shelf, "rack_id", overrides, excluded)

    zone_ids = {_key(obj.zone_id) for obj in touched + racks if isinstance(obj, (Shelf, Rack))}
    zones = _refresh_level(Zone, zone_ids, Rack, "zone_id", overrides, excluded)

    warehouse_ids = {_key(obj.warehouse_id) for obj in touched + zones if isinstance(obj, (Shelf, Rack, Zone))}
    warehouses = _refresh_level(Warehouse, warehouse_ids, Zone, "warehouse_id", overrides, excluded)

    logger.debug(
        "Capacity rolled up",
        racks=len(racks),
        zones=len(zones),
        warehouses=len(warehouses),
    )
    return warehouses


def blocking_shelves(**scope):
    """Shelves under ``scope`` (``rack_id=``, ``zone_id=`` or ``warehouse_id=``) that hold stock."""
    return [shelf for shelf in find(Shelf, **scope) if not shelf.is_empty]


def ensure_branch_empty(label, code, **scope):
    """Raise ConflictError when any shelf under ``scope`` still has placements."""
    blocking = blocking_shelves(**scope)
    if blocking:
        count = sum(len(shelf.placements or []) for shelf in blocking)
        raise ConflictError(
            f"{label} {code} still holds {count} placement(s) on {len(blocking)} shelf(s)",
            blocking_placements=count,
            blocking_shelves=[str(shelf.id) for shelf in blocking],
        )
