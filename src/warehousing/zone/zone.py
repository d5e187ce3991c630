"""Zone aggregate — an environmentally controlled area within a warehouse.

The zone's type, temperature and humidity ranges and security level constrain which items
may be placed on the shelves beneath it. Capacity is the sum of its racks.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, String, Text, ValueObject

from warehousing.domain import warehousing
from warehousing.errors import ConflictError
from warehousing.shared.capacity import Capacity, empty, total_of
from warehousing.shared.environment import (
    AccessLevel,
    HumidityRange,
    SecurityLevel,
    TemperatureRange,
    as_humidity_range,
    as_temperature_range,
)
from warehousing.zone.events import ZoneCreated, ZoneDeactivated, ZoneUpdated


class ZoneType(Enum):
    AMBIENT = "ambient"
    REFRIGERATED = "refrigerated"
    FREEZER = "freezer"
    CONTROLLED = "controlled"
    SECURE = "secure"
    QUARANTINE = "quarantine"


@warehousing.aggregate
class Zone:
    """A logical storage area (ambient, refrigerated, secure, ...) inside a warehouse."""

    warehouse_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    code = String(required=True, max_length=10)
    zone_type = String(required=True, choices=ZoneType)
    temperature_range = ValueObject(TemperatureRange)
    humidity_range = ValueObject(HumidityRange)
    security_level = String(choices=SecurityLevel, default=SecurityLevel.MEDIUM.value)
    access_level = String(choices=AccessLevel, default=AccessLevel.RESTRICTED.value)
    description = Text()
    position = Integer(default=0)
    capacity = ValueObject(Capacity)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(
        cls,
        warehouse_id,
        name,
        code,
        zone_type,
        temperature_range,
        security_level=SecurityLevel.MEDIUM.value,
        description=None,
        position=0,
        humidity_range=None,
        access_level=AccessLevel.RESTRICTED.value,
    ):
        now = datetime.now(UTC)
        zone = cls(
            warehouse_id=warehouse_id,
            name=name,
            code=code.strip().upper(),
            zone_type=zone_type,
            temperature_range=as_temperature_range(temperature_range),
            humidity_range=as_humidity_range(humidity_range),
            security_level=security_level,
            access_level=access_level,
            description=description,
            position=position,
            capacity=empty(),
            created_at=now,
            updated_at=now,
        )
        zone.raise_(
            ZoneCreated(
                zone_id=str(zone.id),
                warehouse_id=str(warehouse_id),
                name=zone.name,
                code=zone.code,
                zone_type=zone.zone_type,
                temperature_min=zone.temperature_range.min if zone.temperature_range else None,
                temperature_max=zone.temperature_range.max if zone.temperature_range else None,
                temperature_unit=zone.temperature_range.unit if zone.temperature_range else None,
                security_level=zone.security_level,
                created_at=now,
            )
        )
        return zone

    def update_details(
        self,
        name=None,
        code=None,
        zone_type=None,
        temperature_range=None,
        security_level=None,
        description=None,
        humidity_range=None,
        access_level=None,
    ):
        if name is not None:
            self.name = name
        if code is not None:
            self.code = code.strip().upper()
        if zone_type is not None:
            self.zone_type = zone_type
        if temperature_range is not None:
            self.temperature_range = as_temperature_range(temperature_range)
        if humidity_range is not None:
            self.humidity_range = as_humidity_range(humidity_range)
        if security_level is not None:
            self.security_level = security_level
        if access_level is not None:
            self.access_level = access_level
        if description is not None:
            self.description = description
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ZoneUpdated(
                zone_id=str(self.id),
                warehouse_id=str(self.warehouse_id),
                name=self.name,
                zone_type=self.zone_type,
                security_level=self.security_level,
                updated_at=self.updated_at,
            )
        )

    def refresh_capacity(self, rack_capacities):
        self.capacity = total_of(rack_capacities)

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"zone": ["Zone is already inactive"]})
        if self.capacity and self.capacity.used_slots > 0:
            raise ConflictError(f"Zone {self.code} still holds {self.capacity.used_slots} used slots")
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ZoneDeactivated(
                zone_id=str(self.id),
                warehouse_id=str(self.warehouse_id),
                deactivated_at=self.updated_at,
            )
        )
