"""Tests for zone compatibility checks on item requirements."""

import pytest
from warehousing.errors import IncompatibleZoneError
from warehousing.placement.compatibility import ensure_compatible, find_mismatches
from warehousing.shelf.shelf import Shelf
from warehousing.zone.zone import Zone


def _zone(zone_type="refrigerated", temperature=(2, 8), unit="celsius", security_level="medium", humidity=None):
    return Zone.create(
        warehouse_id="wh-001",
        name="Cold room",
        code="COLD",
        zone_type=zone_type,
        temperature_range={"min": temperature[0], "max": temperature[1], "unit": unit},
        security_level=security_level,
        humidity_range={"min": humidity[0], "max": humidity[1]} if humidity else None,
    )


def _shelf(conditions=None):
    return Shelf.create(
        rack_id="rack-001",
        zone_id="zone-001",
        warehouse_id="wh-001",
        name="Top shelf",
        code="S1",
        shelf_number=1,
        total_slots=10,
        total_weight=50.0,
        storage_conditions=conditions,
    )


def _item(temperature=None, security=None, humidity=None, **flags):
    item = {"item_id": "item-1", "name": "Insulin", "size_slots": 1, "weight": 0.5}
    if temperature is not None:
        item["required_temperature_range"] = {"min": temperature[0], "max": temperature[1]}
    if security is not None:
        item["required_security_level"] = security
    if humidity is not None:
        item["required_humidity_range"] = {"min": humidity[0], "max": humidity[1]}
    item.update(flags)
    return item


class TestFindMismatches:
    def test_item_without_requirements_fits_anywhere(self):
        assert find_mismatches(_item(), _zone()) == {}

    def test_range_inside_zone_range(self):
        assert find_mismatches(_item(temperature=(2, 8)), _zone()) == {}
        assert find_mismatches(_item(temperature=(3, 6)), _zone()) == {}

    def test_room_temperature_item_in_fridge(self):
        mismatches = find_mismatches(_item(temperature=(15, 25)), _zone())
        assert set(mismatches) == {"temperature_range"}
        assert mismatches["temperature_range"]["required"]["min"] == 15
        assert mismatches["temperature_range"]["available"]["max"] == 8

    def test_partial_overlap_is_a_mismatch(self):
        assert "temperature_range" in find_mismatches(_item(temperature=(0, 5)), _zone())

    def test_fahrenheit_zone_is_compared_in_celsius(self):
        zone = _zone(temperature=(35.6, 46.4), unit="fahrenheit")
        assert find_mismatches(_item(temperature=(2, 8)), zone) == {}

    def test_security_level_must_be_at_least_required(self):
        assert find_mismatches(_item(security="medium"), _zone(security_level="high")) == {}
        mismatches = find_mismatches(_item(security="high"), _zone(security_level="low"))
        assert set(mismatches) == {"security_level"}

    def test_multiple_mismatches_are_all_reported(self):
        mismatches = find_mismatches(_item(temperature=(15, 25), security="high"), _zone())
        assert set(mismatches) == {"temperature_range", "security_level"}


class TestEnsureCompatible:
    def test_compatible_item_passes(self):
        ensure_compatible(_item(temperature=(2, 8)), _zone())

    def test_incompatible_item_raises(self):
        zone = _zone()
        with pytest.raises(IncompatibleZoneError) as exc:
            ensure_compatible(_item(temperature=(15, 25)), zone)
        assert exc.value.details["zone_id"] == str(zone.id)
        assert "temperature_range" in exc.value.details["mismatches"]
        assert len(exc.value.messages["zone"]) == 1


class TestHumidity:
    def test_zone_humidity_covers_item_range(self):
        assert find_mismatches(_item(humidity=(40, 50)), _zone(humidity=(30, 60))) == {}

    def test_zone_humidity_too_wide_for_item(self):
        mismatches = find_mismatches(_item(humidity=(40, 50)), _zone(humidity=(45, 70)))
        assert set(mismatches) == {"humidity_range"}
        assert mismatches["humidity_range"]["available"] == {"min": 45.0, "max": 70.0}

    def test_uncontrolled_zone_humidity_is_a_mismatch(self):
        mismatches = find_mismatches(_item(humidity=(40, 50)), _zone())
        assert mismatches["humidity_range"]["available"] is None
        assert "uncontrolled" in mismatches["humidity_range"]["message"]


class TestShelfStorageConditions:
    def test_shelf_without_conditions_follows_its_zone(self):
        assert find_mismatches(_item(temperature=(2, 8)), _zone(), _shelf()) == {}

    def test_shelf_temperature_narrows_the_zone(self):
        shelf = _shelf({"temperature": {"min": 4, "max": 6, "unit": "celsius"}})
        mismatches = find_mismatches(_item(temperature=(2, 8)), _zone(), shelf)
        assert set(mismatches) == {"shelf_temperature_range"}
        assert "shelf S1" in mismatches["shelf_temperature_range"]["message"]

    def test_shelf_humidity_narrows_the_zone(self):
        shelf = _shelf({"humidity": {"min": 45, "max": 55}})
        zone = _zone(humidity=(30, 70))
        assert find_mismatches(_item(humidity=(45, 55)), zone, shelf) == {}
        assert set(find_mismatches(_item(humidity=(35, 60)), zone, shelf)) == {"shelf_humidity_range"}

    def test_light_sensitive_item_needs_protected_shelf(self):
        item = _item(light_sensitive=True)
        assert set(find_mismatches(item, _zone(), _shelf())) == {"light_sensitive"}
        assert find_mismatches(item, _zone(), _shelf({"light_sensitive": True})) == {}

    def test_refrigerated_item_on_ambient_zone_needs_refrigerated_shelf(self):
        item = _item(requires_refrigeration=True)
        ambient = _zone(zone_type="ambient", temperature=(15, 25))
        assert set(find_mismatches(item, ambient, _shelf())) == {"refrigerated"}
        assert find_mismatches(item, ambient, _shelf({"refrigerated": True})) == {}

    def test_cold_zone_satisfies_refrigeration(self):
        assert find_mismatches(_item(requires_refrigeration=True), _zone(), _shelf()) == {}

    def test_shelf_failure_carries_shelf_id(self):
        shelf = _shelf({"light_sensitive": False})
        with pytest.raises(IncompatibleZoneError) as exc:
            ensure_compatible(_item(light_sensitive=True), _zone(), shelf)
        assert exc.value.details["shelf_id"] == str(shelf.id)
