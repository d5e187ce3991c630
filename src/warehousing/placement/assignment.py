"""Item placement — commands and handler for assigning, removing and moving items.

Each command runs in a single unit of work: capacity checks, the shelf
mutation and the ancestor roll-up are committed together or not at all.
Concurrent callers are serialized by :class:`PlacementService`.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer
from protean.utils.globals import current_domain

from warehousing.capacity.rollup import roll_up
from warehousing.catalog import get_catalog
from warehousing.domain import warehousing
from warehousing.errors import ConflictError
from warehousing.placement.compatibility import ensure_compatible
from warehousing.placement.locations import locate_placement, location_of_item
from warehousing.rack.rack import Rack
from warehousing.shelf.shelf import Shelf
from warehousing.warehouse.warehouse import Warehouse
from warehousing.zone.zone import Zone

logger = structlog.get_logger(__name__)


@warehousing.command(part_of="Shelf")
class AssignItem:
    """Place an inventory item on a shelf."""

    item_id = Identifier(required=True)
    shelf_id = Identifier(required=True)
    slots_required = Integer(min_value=1)  # Defaults to the catalog size
    weight_required = Float(min_value=0.0)  # Defaults to the catalog weight


@warehousing.command(part_of="Shelf")
class UnassignItem:
    """Remove a placement and release its capacity."""

    placement_id = Identifier(required=True)


@warehousing.command(part_of="Shelf")
class MovePlacement:
    """Move a placement to another shelf as one atomic step."""

    placement_id = Identifier(required=True)
    new_shelf_id = Identifier(required=True)


def ensure_branch_active(shelf):
    """Raise unless the shelf and every container above it is active. Returns the zone."""
    rack = current_domain.repository_for(Rack).get(shelf.rack_id)
    zone = current_domain.repository_for(Zone).get(shelf.zone_id)
    warehouse = current_domain.repository_for(Warehouse).get(shelf.warehouse_id)
    for label, container in (("Shelf", shelf), ("Rack", rack), ("Zone", zone), ("Warehouse", warehouse)):
        if not container.is_active:
            raise ValidationError({"shelf_id": [f"{label} {container.code} is inactive"]})
    return zone


@warehousing.command_handler(part_of=Shelf)
class PlacementHandler:
    @handle(AssignItem)
    def assign_item(self, command):
        repo = current_domain.repository_for(Shelf)
        shelf = repo.get(command.shelf_id)
        zone = ensure_branch_active(shelf)

        item = get_catalog().get_item(command.item_id)
        existing = location_of_item(command.item_id)
        if existing is not None:
            other = repo.get(existing.shelf_id)
            raise ConflictError(
                f"Item {command.item_id} is already placed on shelf {other.code}",
                blocking_placements=1,
                blocking_shelves=[str(other.id)],
            )

        slots = command.slots_required if command.slots_required is not None else item["size_slots"]
        weight = command.weight_required if command.weight_required is not None else (item.get("weight") or 0.0)

        ensure_compatible(item, zone, shelf)
        placement = shelf.place_item(command.item_id, slots, weight)
        repo.add(shelf)
        roll_up(shelf)

        logger.info(
            "Item placed",
            item_id=str(command.item_id),
            shelf_id=str(shelf.id),
            placement_id=str(placement.id),
            slots=slots,
            weight=placement.weight_used,
            utilization=shelf.capacity.utilization_percentage,
        )
        return {**placement.to_summary(), "shelf_id": str(shelf.id)}

    @handle(UnassignItem)
    def unassign_item(self, command):
        shelf, _ = locate_placement(command.placement_id)
        placement = shelf.remove_placement(command.placement_id)
        current_domain.repository_for(Shelf).add(shelf)
        roll_up(shelf)

        logger.info(
            "Item removed",
            item_id=str(placement.item_id),
            shelf_id=str(shelf.id),
            placement_id=str(placement.id),
            slots=placement.slots_used,
        )
        return {**placement.to_summary(), "shelf_id": str(shelf.id)}

    @handle(MovePlacement)
    def move_placement(self, command):
        repo = current_domain.repository_for(Shelf)
        source, placement = locate_placement(command.placement_id)
        if str(source.id) == str(command.new_shelf_id):
            raise ValidationError({"new_shelf_id": ["Placement is already on this shelf"]})

        # Every check on the target happens before either shelf is touched
        target = repo.get(command.new_shelf_id)
        zone = ensure_branch_active(target)
        item = get_catalog().get_item(placement.item_id)
        ensure_compatible(item, zone, target)
        target.ensure_can_accept(placement.slots_used, placement.weight_used or 0.0)

        source.remove_placement(placement.id)
        moved = target.place_item(placement.item_id, placement.slots_used, placement.weight_used or 0.0)
        repo.add(source)
        repo.add(target)
        roll_up(source, target)

        logger.info(
            "Placement moved",
            item_id=str(placement.item_id),
            from_shelf_id=str(source.id),
            to_shelf_id=str(target.id),
            placement_id=str(moved.id),
        )
        return {**moved.to_summary(), "shelf_id": str(target.id), "previous_placement_id": str(placement.id)}
