"""Rack management — commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from warehousing.capacity.rollup import ensure_branch_empty, roll_up
from warehousing.domain import warehousing
from warehousing.rack.rack import Rack
from warehousing.shared.queries import ensure_unique_code, find, next_position
from warehousing.shelf.shelf import Shelf
from warehousing.warehouse.warehouse import Warehouse
from warehousing.zone.zone import Zone

logger = structlog.get_logger(__name__)


@warehousing.command(part_of="Rack")
class CreateRack:
    """Install a rack in a zone."""

    zone_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    code = String(required=True, max_length=10)
    rack_type = String(required=True, max_length=20)
    description = Text()
    position = Integer()


@warehousing.command(part_of="Rack")
class UpdateRack:
    rack_id = Identifier(required=True)
    name = String(max_length=100)
    code = String(max_length=10)
    rack_type = String(max_length=20)
    description = Text()


@warehousing.command(part_of="Rack")
class DeactivateRack:
    rack_id = Identifier(required=True)


@warehousing.command(part_of="Rack")
class DeleteRack:
    """Delete an empty rack together with its empty shelves."""

    rack_id = Identifier(required=True)


@warehousing.command_handler(part_of=Rack)
class RackManagementHandler:
    @handle(CreateRack)
    def create_rack(self, command):
        zone = current_domain.repository_for(Zone).get(command.zone_id)
        if not zone.is_active:
            raise ValidationError({"zone_id": [f"Zone {zone.code} is inactive"]})
        warehouse = current_domain.repository_for(Warehouse).get(zone.warehouse_id)
        if not warehouse.is_active:
            raise ValidationError({"zone_id": [f"Warehouse {warehouse.code} is inactive"]})
        ensure_unique_code(Rack, command.code, zone_id=str(zone.id))

        rack = Rack.create(
            zone_id=zone.id,
            warehouse_id=zone.warehouse_id,
            name=command.name,
            code=command.code,
            rack_type=command.rack_type,
            description=command.description,
            position=command.position if command.position is not None else next_position(Rack, zone_id=str(zone.id)),
        )
        current_domain.repository_for(Rack).add(rack)
        logger.info("Rack created", rack_id=str(rack.id), zone_id=str(zone.id))
        return str(rack.id)

    @handle(UpdateRack)
    def update_rack(self, command):
        repo = current_domain.repository_for(Rack)
        rack = repo.get(command.rack_id)
        if command.code is not None:
            ensure_unique_code(Rack, command.code, exclude_id=rack.id, zone_id=str(rack.zone_id))
        rack.update_details(
            name=command.name,
            code=command.code,
            rack_type=command.rack_type,
            description=command.description,
        )
        repo.add(rack)

    @handle(DeactivateRack)
    def deactivate_rack(self, command):
        repo = current_domain.repository_for(Rack)
        rack = repo.get(command.rack_id)
        ensure_branch_empty("Rack", rack.code, rack_id=str(rack.id))
        rack.deactivate()
        repo.add(rack)
        logger.info("Rack deactivated", rack_id=str(rack.id))

    @handle(DeleteRack)
    def delete_rack(self, command):
        repo = current_domain.repository_for(Rack)
        rack = repo.get(command.rack_id)
        ensure_branch_empty("Rack", rack.code, rack_id=str(rack.id))

        shelf_repo = current_domain.repository_for(Shelf)
        shelves = find(Shelf, rack_id=str(rack.id))
        for shelf in shelves:
            shelf_repo._dao.delete(shelf)

        roll_up(removed=[rack])
        repo._dao.delete(rack)
        logger.info("Rack deleted", rack_id=str(rack.id), shelves=len(shelves))
        return {"shelves": len(shelves)}
