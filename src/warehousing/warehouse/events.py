"""Domain events for the Warehouse aggregate."""

from protean.fields import DateTime, Identifier, String, Text

from warehousing.domain import warehousing


@warehousing.event(part_of="Warehouse")
class WarehouseCreated:
    """A new warehouse was created."""

    __version__ = 1

    warehouse_id = Identifier(required=True)
    name = String(required=True)
    code = String(required=True)
    address = Text(required=True)  # JSON-serialized address
    security_level = String(required=True)
    created_at = DateTime(required=True)


@warehousing.event(part_of="Warehouse")
class WarehouseUpdated:
    """Warehouse details were updated."""

    __version__ = 1

    warehouse_id = Identifier(required=True)
    name = String(required=True)
    code = String(required=True)
    updated_at = DateTime(required=True)


@warehousing.event(part_of="Warehouse")
class WarehouseDeactivated:
    """A warehouse was deactivated."""

    __version__ = 1

    warehouse_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)
