"""Storage compatibility — can an item's requirements be met where it would sit?

An item may require a temperature range, a humidity range, a minimum
security level, protection from light and refrigeration. The zone's ranges
must cover the item's ranges entirely (temperatures compared in Celsius) and
the zone's security level must be at least the item's. A shelf with its own
storage conditions narrows its zone: its bands must also cover the item's,
and only light-protected shelves take light-sensitive items. Refrigerated
items need a refrigerated shelf or a refrigerated/freezer zone.
"""

from warehousing.errors import IncompatibleZoneError
from warehousing.shared.environment import as_humidity_range, as_temperature_range, security_rank

COLD_ZONE_TYPES = ("refrigerated", "freezer")


def _range_mismatch(required, available, where):
    if available is not None and available.contains(required):
        return None
    provides = available.describe() if available is not None else "uncontrolled"
    return {
        "required": required.to_summary(),
        "available": available.to_summary() if available is not None else None,
        "message": f"item needs {required.describe()}, {where} provides {provides}",
    }


def find_mismatches(item: dict, zone, shelf=None) -> dict:
    """Return ``{attribute: detail}`` for each requirement the zone or shelf fails."""
    mismatches = {}
    conditions = shelf.storage_conditions if shelf is not None else None
    shelf_label = f"shelf {shelf.code}" if shelf is not None else None

    required_temperature = as_temperature_range(item.get("required_temperature_range"))
    if required_temperature is not None:
        mismatch = _range_mismatch(required_temperature, zone.temperature_range, f"zone {zone.code}")
        if mismatch:
            mismatches["temperature_range"] = mismatch
        if conditions is not None and conditions.temperature_range is not None:
            mismatch = _range_mismatch(required_temperature, conditions.temperature_range, shelf_label)
            if mismatch:
                mismatches["shelf_temperature_range"] = mismatch

    required_humidity = as_humidity_range(item.get("required_humidity_range"))
    if required_humidity is not None:
        mismatch = _range_mismatch(required_humidity, zone.humidity_range, f"zone {zone.code}")
        if mismatch:
            mismatches["humidity_range"] = mismatch
        if conditions is not None and conditions.humidity_range is not None:
            mismatch = _range_mismatch(required_humidity, conditions.humidity_range, shelf_label)
            if mismatch:
                mismatches["shelf_humidity_range"] = mismatch

    required_level = item.get("required_security_level")
    if required_level and security_rank(required_level) > security_rank(zone.security_level):
        mismatches["security_level"] = {
            "required": required_level,
            "available": zone.security_level,
            "message": f"item needs {required_level} security, zone {zone.code} is {zone.security_level}",
        }

    if shelf is not None and item.get("light_sensitive"):
        if conditions is None or not conditions.light_sensitive:
            mismatches["light_sensitive"] = {
                "required": True,
                "available": False,
                "message": f"item is light sensitive, {shelf_label} is not protected from light",
            }

    if item.get("requires_refrigeration") and zone.zone_type not in COLD_ZONE_TYPES:
        if conditions is None or not conditions.refrigerated:
            where = shelf_label or f"zone {zone.code}"
            mismatches["refrigerated"] = {
                "required": True,
                "available": False,
                "message": f"item needs refrigeration, {where} is not refrigerated",
            }

    return mismatches


def ensure_compatible(item: dict, zone, shelf=None) -> None:
    mismatches = find_mismatches(item, zone, shelf)
    if mismatches:
        raise IncompatibleZoneError(zone.id, mismatches, shelf_id=shelf.id if shelf is not None else None)
