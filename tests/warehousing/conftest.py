import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def warehousing_bed():
    from warehousing.domain import warehousing

    bed = DomainFixture(warehousing)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(warehousing_bed):
    with warehousing_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def run_around_tests(_ctx):
    """Reset collaborators before each test and stored data after it."""
    from warehousing.alerts import get_notification_sink
    from warehousing.api.permissions import reset_permission_predicate
    from warehousing.catalog import get_catalog
    from warehousing.placement.locks import capacity_locks

    get_catalog().reset()
    get_notification_sink().reset()
    reset_permission_predicate()
    capacity_locks.clear()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    current_domain.event_store.store._data_reset()


@pytest.fixture()
def catalog():
    from warehousing.catalog import get_catalog

    return get_catalog()


@pytest.fixture()
def sink():
    from warehousing.alerts import get_notification_sink

    return get_notification_sink()


class HierarchyBuilder:
    """Creates warehouses, zones, racks and shelves through their commands."""

    def __init__(self):
        self._counter = 0

    def _code(self, prefix):
        self._counter += 1
        return f"{prefix}{self._counter}"

    def warehouse(self, code=None, security_level="high", **overrides):
        import json

        from protean import current_domain
        from warehousing.warehouse.management import CreateWarehouse

        fields = {
            "name": "Central Pharmacy Store",
            "code": code or self._code("WH"),
            "address": json.dumps({"street": "1 Depot Road", "city": "Leeds", "region": "West Yorkshire"}),
            "security_level": security_level,
        }
        fields.update(overrides)
        return current_domain.process(CreateWarehouse(**fields), asynchronous=False)

    def zone(self, warehouse_id, code=None, zone_type="ambient", temperature=(15.0, 25.0), **overrides):
        from protean import current_domain
        from warehousing.zone.management import CreateZone

        fields = {
            "warehouse_id": warehouse_id,
            "name": f"{zone_type.title()} Zone",
            "code": code or self._code("Z"),
            "zone_type": zone_type,
            "temperature_min": temperature[0],
            "temperature_max": temperature[1],
            "temperature_unit": "celsius",
            "security_level": "medium",
        }
        fields.update(overrides)
        return current_domain.process(CreateZone(**fields), asynchronous=False)

    def rack(self, zone_id, code=None, rack_type="standard", **overrides):
        from protean import current_domain
        from warehousing.rack.management import CreateRack

        fields = {"zone_id": zone_id, "name": "Rack", "code": code or self._code("R"), "rack_type": rack_type}
        fields.update(overrides)
        return current_domain.process(CreateRack(**fields), asynchronous=False)

    def shelf(self, rack_id, total_slots=10, total_weight=100.0, code=None, shelf_number=1, **overrides):
        from protean import current_domain
        from warehousing.shelf.management import CreateShelf

        fields = {
            "rack_id": rack_id,
            "name": "Shelf",
            "code": code or self._code("S"),
            "shelf_number": shelf_number,
            "total_slots": total_slots,
            "total_weight": total_weight,
        }
        fields.update(overrides)
        return current_domain.process(CreateShelf(**fields), asynchronous=False)

    def branch(self, total_slots=10, total_weight=100.0, zone_type="ambient", temperature=(15.0, 25.0), **zone_fields):
        """A warehouse with one zone, one rack and one shelf."""
        from types import SimpleNamespace

        warehouse_id = self.warehouse()
        zone_id = self.zone(warehouse_id, zone_type=zone_type, temperature=temperature, **zone_fields)
        rack_id = self.rack(zone_id)
        shelf_id = self.shelf(rack_id, total_slots=total_slots, total_weight=total_weight)
        return SimpleNamespace(warehouse_id=warehouse_id, zone_id=zone_id, rack_id=rack_id, shelf_id=shelf_id)


@pytest.fixture()
def build():
    return HierarchyBuilder()
