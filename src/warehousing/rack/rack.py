"""Rack aggregate — a physical rack of shelves inside a zone."""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text, ValueObject

from warehousing.domain import warehousing
from warehousing.errors import ConflictError
from warehousing.rack.events import RackCreated, RackDeactivated, RackUpdated
from warehousing.shared.capacity import Capacity, empty, total_of


class RackType(Enum):
    STANDARD = "standard"
    MOBILE = "mobile"
    PALLET = "pallet"
    MEZZANINE = "mezzanine"
    CANTILEVER = "cantilever"


@warehousing.aggregate
class Rack:
    """Owns an ordered set of shelves. Capacity is the sum of its shelves."""

    zone_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    code = String(required=True, max_length=10)
    rack_type = String(required=True, choices=RackType)
    description = Text()
    position = Integer(default=0)
    capacity = ValueObject(Capacity)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, zone_id, warehouse_id, name, code, rack_type, description=None, position=0):
        now = datetime.now(UTC)
        rack = cls(
            zone_id=zone_id,
            warehouse_id=warehouse_id,
            name=name,
            code=code.strip().upper(),
            rack_type=rack_type,
            description=description,
            position=position,
            capacity=empty(),
            created_at=now,
            updated_at=now,
        )
        rack.raise_(
            RackCreated(
                rack_id=str(rack.id),
                zone_id=str(zone_id),
                warehouse_id=str(warehouse_id),
                name=rack.name,
                code=rack.code,
                rack_type=rack.rack_type,
                created_at=now,
            )
        )
        return rack

    def update_details(self, name=None, code=None, rack_type=None, description=None):
        if name is not None:
            self.name = name
        if code is not None:
            self.code = code.strip().upper()
        if rack_type is not None:
            self.rack_type = rack_type
        if description is not None:
            self.description = description
        self.updated_at = datetime.now(UTC)
        self.raise_(
            RackUpdated(
                rack_id=str(self.id),
                name=self.name,
                code=self.code,
                rack_type=self.rack_type,
                updated_at=self.updated_at,
            )
        )

    def refresh_capacity(self, shelf_capacities):
        self.capacity = total_of(shelf_capacities)

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"rack": ["Rack is already inactive"]})
        if self.capacity and self.capacity.used_slots > 0:
            raise ConflictError(f"Rack {self.code} still holds {self.capacity.used_slots} used slots")
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(
            RackDeactivated(
                rack_id=str(self.id),
                zone_id=str(self.zone_id),
                deactivated_at=self.updated_at,
            )
        )
