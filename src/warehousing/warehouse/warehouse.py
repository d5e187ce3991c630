"""Warehouse aggregate — top of the storage containment hierarchy.

A warehouse owns zones (separate aggregates keyed by ``warehouse_id``). Its
capacity is never set directly: it is always the element-wise sum of its
zones' capacities, refreshed by the roll-up after every shelf mutation.
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String, Text, ValueObject

from warehousing.domain import warehousing
from warehousing.errors import ConflictError
from warehousing.shared.capacity import Capacity, empty, total_of
from warehousing.shared.environment import SecurityLevel
from warehousing.warehouse.events import WarehouseCreated, WarehouseDeactivated, WarehouseUpdated


@warehousing.value_object(part_of="Warehouse")
class WarehouseAddress:
    """Physical address of a warehouse."""

    street = String(required=True, max_length=200)
    city = String(required=True, max_length=50)
    region = String(required=True, max_length=50)
    postal_code = String(max_length=20)


@warehousing.aggregate
class Warehouse:
    """A physical site where pharmacy stock is stored."""

    name = String(required=True, max_length=100)
    code = String(required=True, max_length=10)
    address = ValueObject(WarehouseAddress)
    security_level = String(choices=SecurityLevel, default=SecurityLevel.MEDIUM.value)
    contact_person = String(max_length=100)
    phone = String(max_length=20)
    description = Text()
    capacity = ValueObject(Capacity)
    is_active = Boolean(default=True)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(
        cls,
        name,
        code,
        address,
        security_level=SecurityLevel.MEDIUM.value,
        contact_person=None,
        phone=None,
        description=None,
    ):
        """Create a new, empty warehouse."""
        now = datetime.now(UTC)
        warehouse = cls(
            name=name,
            code=code.strip().upper(),
            address=WarehouseAddress(**address) if isinstance(address, dict) else address,
            security_level=security_level,
            contact_person=contact_person,
            phone=phone,
            description=description,
            capacity=empty(),
            created_at=now,
            updated_at=now,
        )
        warehouse.raise_(
            WarehouseCreated(
                warehouse_id=str(warehouse.id),
                name=warehouse.name,
                code=warehouse.code,
                address=json.dumps(warehouse.address.to_dict()),
                security_level=warehouse.security_level,
                created_at=now,
            )
        )
        return warehouse

    def update_details(
        self,
        name=None,
        code=None,
        address=None,
        security_level=None,
        contact_person=None,
        phone=None,
        description=None,
    ):
        """Update descriptive metadata. Capacity is never updated here."""
        if name is not None:
            self.name = name
        if code is not None:
            self.code = code.strip().upper()
        if address is not None:
            self.address = WarehouseAddress(**address) if isinstance(address, dict) else address
        if security_level is not None:
            self.security_level = security_level
        if contact_person is not None:
            self.contact_person = contact_person
        if phone is not None:
            self.phone = phone
        if description is not None:
            self.description = description
        self.updated_at = datetime.now(UTC)
        self.raise_(
            WarehouseUpdated(
                warehouse_id=str(self.id),
                name=self.name,
                code=self.code,
                updated_at=self.updated_at,
            )
        )

    def refresh_capacity(self, zone_capacities):
        """Re-derive capacity from the zones' current capacities."""
        self.capacity = total_of(zone_capacities)

    def deactivate(self):
        """Deactivate the warehouse. Only an empty warehouse can be deactivated."""
        if not self.is_active:
            raise ValidationError({"warehouse": ["Warehouse is already inactive"]})
        if self.capacity and self.capacity.used_slots > 0:
            raise ConflictError(
                f"Warehouse {self.code} still holds {self.capacity.used_slots} used slots",
            )
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(
            WarehouseDeactivated(
                warehouse_id=str(self.id),
                deactivated_at=self.updated_at,
            )
        )
