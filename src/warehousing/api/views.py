"""Read views — turn aggregates into API response models."""

from datetime import UTC, datetime

from warehousing.api.schemas import (
    AddressSchema,
    CapacitySchema,
    DimensionsSchema,
    GridPositionSchema,
    HumidityRangeSchema,
    PlacementResponse,
    RackResponse,
    ShelfResponse,
    StorageConditionsSchema,
    TemperatureRangeSchema,
    WarehouseResponse,
    ZoneResponse,
)


def _iso(value):
    return value.isoformat() if value else None


def _summary(schema, value):
    return schema(**value.to_summary()) if value else None


def capacity_view(capacity) -> CapacitySchema:
    return CapacitySchema(**capacity.to_summary())


def warehouse_view(warehouse) -> WarehouseResponse:
    address = warehouse.address
    return WarehouseResponse(
        warehouse_id=str(warehouse.id),
        name=warehouse.name,
        code=warehouse.code,
        address=(
            AddressSchema(
                street=address.street,
                city=address.city,
                region=address.region,
                postal_code=address.postal_code,
            )
            if address
            else None
        ),
        security_level=warehouse.security_level,
        contact_person=warehouse.contact_person,
        phone=warehouse.phone,
        description=warehouse.description,
        is_active=warehouse.is_active,
        capacity=capacity_view(warehouse.capacity),
    )


def zone_view(zone) -> ZoneResponse:
    temperature = zone.temperature_range
    return ZoneResponse(
        zone_id=str(zone.id),
        warehouse_id=str(zone.warehouse_id),
        name=zone.name,
        code=zone.code,
        zone_type=zone.zone_type,
        temperature_range=TemperatureRangeSchema(**temperature.to_summary()) if temperature else None,
        humidity_range=_summary(HumidityRangeSchema, zone.humidity_range),
        security_level=zone.security_level,
        access_level=zone.access_level,
        description=zone.description,
        position=zone.position or 0,
        is_active=zone.is_active,
        capacity=capacity_view(zone.capacity),
    )


def rack_view(rack) -> RackResponse:
    return RackResponse(
        rack_id=str(rack.id),
        zone_id=str(rack.zone_id),
        warehouse_id=str(rack.warehouse_id),
        name=rack.name,
        code=rack.code,
        rack_type=rack.rack_type,
        description=rack.description,
        position=rack.position or 0,
        is_active=rack.is_active,
        capacity=capacity_view(rack.capacity),
    )


def placement_view(summary: dict) -> PlacementResponse:
    return PlacementResponse(**summary)


def shelf_view(shelf, as_of=None) -> ShelfResponse:
    as_of = as_of or datetime.now(UTC)
    return ShelfResponse(
        shelf_id=str(shelf.id),
        rack_id=str(shelf.rack_id),
        zone_id=str(shelf.zone_id),
        warehouse_id=str(shelf.warehouse_id),
        name=shelf.name,
        code=shelf.code,
        shelf_number=shelf.shelf_number,
        shelf_type=shelf.shelf_type,
        description=shelf.description,
        position=shelf.position or 0,
        is_active=shelf.is_active,
        capacity=capacity_view(shelf.capacity),
        max_items_per_slot=shelf.max_items_per_slot or 1,
        grid_position=_summary(GridPositionSchema, shelf.grid_position),
        dimensions=_summary(DimensionsSchema, shelf.dimensions),
        storage_conditions=_summary(StorageConditionsSchema, shelf.storage_conditions),
        cleaning_status=shelf.derived_cleaning_status(as_of),
        last_cleaned=_iso(shelf.last_cleaned),
        next_cleaning_date=_iso(shelf.next_cleaning_date),
        placements=[
            placement_view({**p.to_summary(), "shelf_id": str(shelf.id)}) for p in (shelf.placements or [])
        ],
    )
