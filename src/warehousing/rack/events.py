"""Domain events for the Rack aggregate."""

from protean.fields import DateTime, Identifier, String

from warehousing.domain import warehousing


@warehousing.event(part_of="Rack")
class RackCreated:
    """A rack was installed in a zone."""

    __version__ = 1

    rack_id = Identifier(required=True)
    zone_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    name = String(required=True)
    code = String(required=True)
    rack_type = String(required=True)
    created_at = DateTime(required=True)


@warehousing.event(part_of="Rack")
class RackUpdated:
    """Rack metadata changed."""

    __version__ = 1

    rack_id = Identifier(required=True)
    name = String(required=True)
    code = String(required=True)
    rack_type = String(required=True)
    updated_at = DateTime(required=True)


@warehousing.event(part_of="Rack")
class RackDeactivated:
    """A rack was taken out of service."""

    __version__ = 1

    rack_id = Identifier(required=True)
    zone_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)
