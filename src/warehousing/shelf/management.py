"""Shelf management — commands and handler.

Creating, resizing and deleting a shelf changes the capacity of every
container above it, so those handlers roll the change up in the same unit of
work. Metadata updates leave capacity alone.
"""

import json

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from warehousing.capacity.rollup import roll_up
from warehousing.domain import warehousing
from warehousing.rack.rack import Rack
from warehousing.shared.queries import ensure_unique_code, next_position
from warehousing.shelf.shelf import Shelf
from warehousing.warehouse.warehouse import Warehouse
from warehousing.zone.zone import Zone

logger = structlog.get_logger(__name__)


@warehousing.command(part_of="Shelf")
class CreateShelf:
    """Mount a shelf on a rack."""

    rack_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    code = String(required=True, max_length=10)
    shelf_number = Integer(required=True, min_value=1)
    shelf_type = String(max_length=20)
    total_slots = Integer(default=0)
    total_weight = Float(default=0.0)
    description = Text()
    position = Integer()
    grid_position = Text()  # JSON-encoded row/column/level/slot
    dimensions = Text()  # JSON-encoded width/height/depth in metres
    storage_conditions = Text()  # JSON-encoded temperature/humidity/flags
    max_items_per_slot = Integer(min_value=1)


@warehousing.command(part_of="Shelf")
class UpdateShelf:
    shelf_id = Identifier(required=True)
    name = String(max_length=100)
    code = String(max_length=10)
    shelf_number = Integer(min_value=1)
    shelf_type = String(max_length=20)
    description = Text()
    grid_position = Text()
    dimensions = Text()
    storage_conditions = Text()
    max_items_per_slot = Integer(min_value=1)


@warehousing.command(part_of="Shelf")
class ResizeShelf:
    """Change a shelf's total slot and/or weight capacity."""

    shelf_id = Identifier(required=True)
    total_slots = Integer()
    total_weight = Float()


@warehousing.command(part_of="Shelf")
class DeactivateShelf:
    shelf_id = Identifier(required=True)


@warehousing.command(part_of="Shelf")
class DeleteShelf:
    shelf_id = Identifier(required=True)


def _decoded(value):
    if value is None:
        return None
    return json.loads(value) if isinstance(value, str) else value


@warehousing.command_handler(part_of=Shelf)
class ShelfManagementHandler:
    @handle(CreateShelf)
    def create_shelf(self, command):
        rack = current_domain.repository_for(Rack).get(command.rack_id)
        zone = current_domain.repository_for(Zone).get(rack.zone_id)
        warehouse = current_domain.repository_for(Warehouse).get(rack.warehouse_id)
        for label, container in (("Rack", rack), ("Zone", zone), ("Warehouse", warehouse)):
            if not container.is_active:
                raise ValidationError({"rack_id": [f"{label} {container.code} is inactive"]})
        ensure_unique_code(Shelf, command.code, rack_id=str(rack.id))

        shelf = Shelf.create(
            rack_id=rack.id,
            zone_id=rack.zone_id,
            warehouse_id=rack.warehouse_id,
            name=command.name,
            code=command.code,
            shelf_number=command.shelf_number,
            total_slots=command.total_slots if command.total_slots is not None else 0,
            total_weight=command.total_weight if command.total_weight is not None else 0.0,
            shelf_type=command.shelf_type or "standard",
            description=command.description,
            position=command.position if command.position is not None else next_position(Shelf, rack_id=str(rack.id)),
            grid_position=_decoded(command.grid_position),
            dimensions=_decoded(command.dimensions),
            storage_conditions=_decoded(command.storage_conditions),
            max_items_per_slot=command.max_items_per_slot,
        )
        current_domain.repository_for(Shelf).add(shelf)
        roll_up(shelf)

        logger.info(
            "Shelf created",
            shelf_id=str(shelf.id),
            rack_id=str(rack.id),
            total_slots=shelf.capacity.total_slots,
            total_weight=shelf.capacity.total_weight,
        )
        return str(shelf.id)

    @handle(UpdateShelf)
    def update_shelf(self, command):
        repo = current_domain.repository_for(Shelf)
        shelf = repo.get(command.shelf_id)
        if command.code is not None:
            ensure_unique_code(Shelf, command.code, exclude_id=shelf.id, rack_id=str(shelf.rack_id))
        shelf.update_details(
            name=command.name,
            code=command.code,
            shelf_number=command.shelf_number,
            shelf_type=command.shelf_type,
            description=command.description,
            grid_position=_decoded(command.grid_position),
            dimensions=_decoded(command.dimensions),
            storage_conditions=_decoded(command.storage_conditions),
            max_items_per_slot=command.max_items_per_slot,
        )
        repo.add(shelf)

    @handle(ResizeShelf)
    def resize_shelf(self, command):
        repo = current_domain.repository_for(Shelf)
        shelf = repo.get(command.shelf_id)
        shelf.resize(command.total_slots, command.total_weight)
        repo.add(shelf)
        roll_up(shelf)
        logger.info(
            "Shelf resized",
            shelf_id=str(shelf.id),
            total_slots=shelf.capacity.total_slots,
            total_weight=shelf.capacity.total_weight,
        )

    @handle(DeactivateShelf)
    def deactivate_shelf(self, command):
        repo = current_domain.repository_for(Shelf)
        shelf = repo.get(command.shelf_id)
        shelf.deactivate()
        repo.add(shelf)
        logger.info("Shelf deactivated", shelf_id=str(shelf.id))

    @handle(DeleteShelf)
    def delete_shelf(self, command):
        repo = current_domain.repository_for(Shelf)
        shelf = repo.get(command.shelf_id)
        shelf.ensure_empty("delete")
        roll_up(removed=[shelf])
        repo._dao.delete(shelf)
        logger.info("Shelf deleted", shelf_id=str(shelf.id), rack_id=str(shelf.rack_id))
