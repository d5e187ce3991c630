"""Zone management — commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from warehousing.capacity.rollup import ensure_branch_empty, roll_up
from warehousing.domain import warehousing
from warehousing.rack.rack import Rack
from warehousing.shared.environment import HumidityRange, TemperatureRange
from warehousing.shared.queries import ensure_unique_code, find, next_position
from warehousing.shelf.shelf import Shelf
from warehousing.warehouse.warehouse import Warehouse
from warehousing.zone.zone import Zone

logger = structlog.get_logger(__name__)


@warehousing.command(part_of="Zone")
class CreateZone:
    """Add a zone to a warehouse."""

    warehouse_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    code = String(required=True, max_length=10)
    zone_type = String(required=True, max_length=20)
    temperature_min = Float(required=True)
    temperature_max = Float(required=True)
    temperature_unit = String(max_length=10)
    humidity_min = Float(min_value=0.0, max_value=100.0)
    humidity_max = Float(min_value=0.0, max_value=100.0)
    security_level = String(max_length=10)
    access_level = String(max_length=20)
    description = Text()
    position = Integer()


@warehousing.command(part_of="Zone")
class UpdateZone:
    """Update zone metadata and environmental attributes."""

    zone_id = Identifier(required=True)
    name = String(max_length=100)
    code = String(max_length=10)
    zone_type = String(max_length=20)
    temperature_min = Float()
    temperature_max = Float()
    temperature_unit = String(max_length=10)
    humidity_min = Float(min_value=0.0, max_value=100.0)
    humidity_max = Float(min_value=0.0, max_value=100.0)
    security_level = String(max_length=10)
    access_level = String(max_length=20)
    description = Text()


@warehousing.command(part_of="Zone")
class DeactivateZone:
    zone_id = Identifier(required=True)


@warehousing.command(part_of="Zone")
class DeleteZone:
    """Delete an empty zone together with its empty racks and shelves."""

    zone_id = Identifier(required=True)


def _temperature_range(min_value, max_value, unit, current=None):
    if min_value is None and max_value is None and unit is None:
        return None
    unit = unit or (current.unit if current else None) or "celsius"
    # Kept bounds are converted, so a unit change alone never relabels the numbers
    base = current.in_unit(unit).to_summary() if current else {}
    return TemperatureRange(
        min=min_value if min_value is not None else base.get("min"),
        max=max_value if max_value is not None else base.get("max"),
        unit=unit,
    )


def _humidity_range(min_value, max_value, current=None):
    if min_value is None and max_value is None:
        return None
    base = current.to_summary() if current else {}
    return HumidityRange(
        min=min_value if min_value is not None else base.get("min"),
        max=max_value if max_value is not None else base.get("max"),
    )


@warehousing.command_handler(part_of=Zone)
class ZoneManagementHandler:
    @handle(CreateZone)
    def create_zone(self, command):
        warehouse = current_domain.repository_for(Warehouse).get(command.warehouse_id)
        if not warehouse.is_active:
            raise ValidationError({"warehouse_id": [f"Warehouse {warehouse.code} is inactive"]})
        ensure_unique_code(Zone, command.code, warehouse_id=str(warehouse.id))

        zone = Zone.create(
            warehouse_id=warehouse.id,
            name=command.name,
            code=command.code,
            zone_type=command.zone_type,
            temperature_range=_temperature_range(
                command.temperature_min, command.temperature_max, command.temperature_unit
            ),
            humidity_range=_humidity_range(command.humidity_min, command.humidity_max),
            security_level=command.security_level or "medium",
            access_level=command.access_level or "restricted",
            description=command.description,
            position=(
                command.position
                if command.position is not None
                else next_position(Zone, warehouse_id=str(warehouse.id))
            ),
        )
        current_domain.repository_for(Zone).add(zone)
        logger.info("Zone created", zone_id=str(zone.id), warehouse_id=str(warehouse.id), zone_type=zone.zone_type)
        return str(zone.id)

    @handle(UpdateZone)
    def update_zone(self, command):
        repo = current_domain.repository_for(Zone)
        zone = repo.get(command.zone_id)
        if command.code is not None:
            ensure_unique_code(Zone, command.code, exclude_id=zone.id, warehouse_id=str(zone.warehouse_id))
        zone.update_details(
            name=command.name,
            code=command.code,
            zone_type=command.zone_type,
            temperature_range=_temperature_range(
                command.temperature_min,
                command.temperature_max,
                command.temperature_unit,
                current=zone.temperature_range,
            ),
            humidity_range=_humidity_range(command.humidity_min, command.humidity_max, current=zone.humidity_range),
            security_level=command.security_level,
            access_level=command.access_level,
            description=command.description,
        )
        repo.add(zone)

    @handle(DeactivateZone)
    def deactivate_zone(self, command):
        repo = current_domain.repository_for(Zone)
        zone = repo.get(command.zone_id)
        ensure_branch_empty("Zone", zone.code, zone_id=str(zone.id))
        zone.deactivate()
        repo.add(zone)
        logger.info("Zone deactivated", zone_id=str(zone.id))

    @handle(DeleteZone)
    def delete_zone(self, command):
        repo = current_domain.repository_for(Zone)
        zone = repo.get(command.zone_id)
        ensure_branch_empty("Zone", zone.code, zone_id=str(zone.id))

        removed = {"shelves": 0, "racks": 0}
        for cls, label in ((Shelf, "shelves"), (Rack, "racks")):
            child_repo = current_domain.repository_for(cls)
            for record in find(cls, zone_id=str(zone.id)):
                child_repo._dao.delete(record)
                removed[label] += 1

        roll_up(removed=[zone])
        repo._dao.delete(zone)
        logger.info("Zone deleted", zone_id=str(zone.id), **removed)
        return removed
