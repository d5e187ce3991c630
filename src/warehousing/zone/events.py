"""Domain events for the Zone aggregate."""

from protean.fields import DateTime, Float, Identifier, String

from warehousing.domain import warehousing


@warehousing.event(part_of="Zone")
class ZoneCreated:
    """A zone was added to a warehouse."""

    __version__ = 1

    zone_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    name = String(required=True)
    code = String(required=True)
    zone_type = String(required=True)
    temperature_min = Float()
    temperature_max = Float()
    temperature_unit = String()
    security_level = String(required=True)
    created_at = DateTime(required=True)


@warehousing.event(part_of="Zone")
class ZoneUpdated:
    """Zone metadata or environmental attributes changed."""

    __version__ = 1

    zone_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    name = String(required=True)
    zone_type = String(required=True)
    security_level = String(required=True)
    updated_at = DateTime(required=True)


@warehousing.event(part_of="Zone")
class ZoneDeactivated:
    """A zone was deactivated."""

    __version__ = 1

    zone_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)
