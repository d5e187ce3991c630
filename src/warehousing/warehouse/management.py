"""Warehouse management — commands and handler."""

import json

import structlog
from protean import handle
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from warehousing.capacity.rollup import ensure_branch_empty
from warehousing.domain import warehousing
from warehousing.rack.rack import Rack
from warehousing.shared.queries import ensure_unique_code, find
from warehousing.shelf.shelf import Shelf
from warehousing.warehouse.warehouse import Warehouse
from warehousing.zone.zone import Zone

logger = structlog.get_logger(__name__)


@warehousing.command(part_of="Warehouse")
class CreateWarehouse:
    """Register a new warehouse."""

    name = String(required=True, max_length=100)
    code = String(required=True, max_length=10)
    address = Text(required=True)  # JSON-encoded address
    security_level = String(max_length=10)
    contact_person = String(max_length=100)
    phone = String(max_length=20)
    description = Text()


@warehousing.command(part_of="Warehouse")
class UpdateWarehouse:
    """Update warehouse metadata."""

    warehouse_id = Identifier(required=True)
    name = String(max_length=100)
    code = String(max_length=10)
    address = Text()  # JSON-encoded address
    security_level = String(max_length=10)
    contact_person = String(max_length=100)
    phone = String(max_length=20)
    description = Text()


@warehousing.command(part_of="Warehouse")
class DeactivateWarehouse:
    """Take an empty warehouse out of service."""

    warehouse_id = Identifier(required=True)


@warehousing.command(part_of="Warehouse")
class DeleteWarehouse:
    """Delete an empty warehouse together with its empty zones, racks and shelves."""

    warehouse_id = Identifier(required=True)


def _address(value):
    if value is None:
        return None
    return json.loads(value) if isinstance(value, str) else value


@warehousing.command_handler(part_of=Warehouse)
class WarehouseManagementHandler:
    @handle(CreateWarehouse)
    def create_warehouse(self, command):
        ensure_unique_code(Warehouse, command.code)
        warehouse = Warehouse.create(
            name=command.name,
            code=command.code,
            address=_address(command.address),
            security_level=command.security_level or "medium",
            contact_person=command.contact_person,
            phone=command.phone,
            description=command.description,
        )
        current_domain.repository_for(Warehouse).add(warehouse)
        logger.info("Warehouse created", warehouse_id=str(warehouse.id), code=warehouse.code)
        return str(warehouse.id)

    @handle(UpdateWarehouse)
    def update_warehouse(self, command):
        repo = current_domain.repository_for(Warehouse)
        warehouse = repo.get(command.warehouse_id)
        if command.code is not None:
            ensure_unique_code(Warehouse, command.code, exclude_id=warehouse.id)
        warehouse.update_details(
            name=command.name,
            code=command.code,
            address=_address(command.address),
            security_level=command.security_level,
            contact_person=command.contact_person,
            phone=command.phone,
            description=command.description,
        )
        repo.add(warehouse)

    @handle(DeactivateWarehouse)
    def deactivate_warehouse(self, command):
        repo = current_domain.repository_for(Warehouse)
        warehouse = repo.get(command.warehouse_id)
        ensure_branch_empty("Warehouse", warehouse.code, warehouse_id=str(warehouse.id))
        warehouse.deactivate()
        repo.add(warehouse)
        logger.info("Warehouse deactivated", warehouse_id=str(warehouse.id))

    @handle(DeleteWarehouse)
    def delete_warehouse(self, command):
        repo = current_domain.repository_for(Warehouse)
        warehouse = repo.get(command.warehouse_id)
        ensure_branch_empty("Warehouse", warehouse.code, warehouse_id=str(warehouse.id))

        removed = {"shelves": 0, "racks": 0, "zones": 0}
        for cls, label in ((Shelf, "shelves"), (Rack, "racks"), (Zone, "zones")):
            child_repo = current_domain.repository_for(cls)
            for record in find(cls, warehouse_id=str(warehouse.id)):
                child_repo._dao.delete(record)
                removed[label] += 1
        repo._dao.delete(warehouse)

        logger.info("Warehouse deleted", warehouse_id=str(warehouse.id), **removed)
        return removed
