"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the domain's validation rules
(upper-cased codes of at most 10 characters, ordered temperature ranges,
known zone and rack types) and match the field names expected by the API's
Pydantic request schemas.
"""

import random
import uuid

from faker import Faker

fake = Faker()

# Zone types with a storage range that fits them, in Celsius
ZONE_PROFILES = {
    "ambient": (15.0, 25.0),
    "refrigerated": (2.0, 8.0),
    "freezer": (-25.0, -18.0),
    "controlled": (18.0, 22.0),
}


def unique_code(prefix: str) -> str:
    """Generate container codes like 'WH-A1B2C3' (10 characters at most)."""
    return f"{prefix}-{uuid.uuid4().hex[:6].upper()}"[:10]


def address_data() -> dict:
    """Generate an AddressSchema payload."""
    return {
        "street": fake.street_address()[:200],
        "city": fake.city()[:50],
        "region": fake.state()[:50],
        "postal_code": fake.postcode()[:20],
    }


def warehouse_data() -> dict:
    """Generate CreateWarehouseRequest payload."""
    return {
        "name": f"{fake.city()} Pharmacy Store"[:100],
        "code": unique_code("WH"),
        "address": address_data(),
        "security_level": random.choice(["low", "medium", "high"]),
        "contact_person": fake.name()[:100],
        "phone": fake.numerify("0### ### ####"),
    }


def zone_data(warehouse_id: str, zone_type: str | None = None) -> dict:
    """Generate CreateZoneRequest payload with a temperature range suited to the type."""
    zone_type = zone_type or random.choice(list(ZONE_PROFILES))
    low, high = ZONE_PROFILES[zone_type]
    return {
        "warehouse_id": warehouse_id,
        "name": f"{zone_type.title()} {fake.color_name()}"[:100],
        "code": unique_code("Z"),
        "zone_type": zone_type,
        "temperature_range": {"min": low, "max": high, "unit": "celsius"},
        "security_level": "medium",
    }


def rack_data(zone_id: str) -> dict:
    """Generate CreateRackRequest payload."""
    return {
        "zone_id": zone_id,
        "name": f"Aisle {random.randint(1, 40)}",
        "code": unique_code("R"),
        "rack_type": random.choice(["standard", "mobile", "pallet"]),
    }


def shelf_data(rack_id: str, shelf_number: int = 1, total_slots: int | None = None) -> dict:
    """Generate CreateShelfRequest payload."""
    return {
        "rack_id": rack_id,
        "name": f"Level {shelf_number}",
        "code": unique_code("S"),
        "shelf_number": shelf_number,
        "total_slots": total_slots if total_slots is not None else random.randint(10, 60),
        "total_weight": float(random.randint(100, 500)),
    }


def resize_data(current_slots: int) -> dict:
    """Grow a shelf by a few slots."""
    return {"total_slots": current_slots + random.randint(1, 10)}
