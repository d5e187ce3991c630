"""Pydantic request/response schemas for the Warehousing API.

These are external contracts (anti-corruption layer) — separate from
internal Protean commands.
"""

from datetime import datetime

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared sub-models
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    street: str
    city: str
    region: str
    postal_code: str | None = None


class TemperatureRangeSchema(BaseModel):
    min: float
    max: float
    unit: str = "celsius"


class HumidityRangeSchema(BaseModel):
    min: float = Field(ge=0, le=100)
    max: float = Field(ge=0, le=100)


class DimensionsSchema(BaseModel):
    width: float = Field(ge=0.1)
    height: float = Field(ge=0.1)
    depth: float = Field(ge=0.1)


class GridPositionSchema(BaseModel):
    row: int = Field(ge=1)
    column: int = Field(ge=1)
    level: int = Field(ge=1)
    slot: int = Field(ge=1)


class StorageConditionsSchema(BaseModel):
    temperature: TemperatureRangeSchema | None = None
    humidity: HumidityRangeSchema | None = None
    light_sensitive: bool = False
    refrigerated: bool = False


class CapacitySchema(BaseModel):
    total_slots: int
    used_slots: int
    available_slots: int
    total_weight: float
    used_weight: float
    available_weight: float
    utilization_percentage: float
    weight_utilization_percentage: float


# ---------------------------------------------------------------------------
# Warehouse
# ---------------------------------------------------------------------------
class CreateWarehouseRequest(BaseModel):
    name: str
    code: str
    address: AddressSchema
    security_level: str = "medium"
    contact_person: str | None = None
    phone: str | None = None
    description: str | None = None


class UpdateWarehouseRequest(BaseModel):
    name: str | None = None
    code: str | None = None
    address: AddressSchema | None = None
    security_level: str | None = None
    contact_person: str | None = None
    phone: str | None = None
    description: str | None = None


class WarehouseResponse(BaseModel):
    warehouse_id: str
    name: str
    code: str
    address: AddressSchema | None = None
    security_level: str
    contact_person: str | None = None
    phone: str | None = None
    description: str | None = None
    is_active: bool
    capacity: CapacitySchema


# ---------------------------------------------------------------------------
# Zone
# ---------------------------------------------------------------------------
class CreateZoneRequest(BaseModel):
    warehouse_id: str
    name: str
    code: str
    zone_type: str
    temperature_range: TemperatureRangeSchema
    humidity_range: HumidityRangeSchema | None = None
    security_level: str = "medium"
    access_level: str = "restricted"
    description: str | None = None
    position: int | None = Field(default=None, ge=0)


class UpdateZoneRequest(BaseModel):
    name: str | None = None
    code: str | None = None
    zone_type: str | None = None
    temperature_range: TemperatureRangeSchema | None = None
    humidity_range: HumidityRangeSchema | None = None
    security_level: str | None = None
    access_level: str | None = None
    description: str | None = None


class ZoneResponse(BaseModel):
    zone_id: str
    warehouse_id: str
    name: str
    code: str
    zone_type: str
    temperature_range: TemperatureRangeSchema | None = None
    humidity_range: HumidityRangeSchema | None = None
    security_level: str
    access_level: str
    description: str | None = None
    position: int
    is_active: bool
    capacity: CapacitySchema


# ---------------------------------------------------------------------------
# Rack
# ---------------------------------------------------------------------------
class CreateRackRequest(BaseModel):
    zone_id: str
    name: str
    code: str
    rack_type: str = "standard"
    description: str | None = None
    position: int | None = Field(default=None, ge=0)


class UpdateRackRequest(BaseModel):
    name: str | None = None
    code: str | None = None
    rack_type: str | None = None
    description: str | None = None


class RackResponse(BaseModel):
    rack_id: str
    zone_id: str
    warehouse_id: str
    name: str
    code: str
    rack_type: str
    description: str | None = None
    position: int
    is_active: bool
    capacity: CapacitySchema


# ---------------------------------------------------------------------------
# Shelf
# ---------------------------------------------------------------------------
class CreateShelfRequest(BaseModel):
    rack_id: str
    name: str
    code: str
    shelf_number: int = Field(ge=1)
    shelf_type: str = "standard"
    total_slots: int = Field(ge=0, default=0)
    total_weight: float = Field(ge=0, default=0.0)
    max_items_per_slot: int = Field(ge=1, default=1)
    grid_position: GridPositionSchema | None = None
    dimensions: DimensionsSchema | None = None
    storage_conditions: StorageConditionsSchema | None = None
    description: str | None = None
    position: int | None = Field(default=None, ge=0)


class UpdateShelfRequest(BaseModel):
    name: str | None = None
    code: str | None = None
    shelf_number: int | None = Field(default=None, ge=1)
    shelf_type: str | None = None
    description: str | None = None
    max_items_per_slot: int | None = Field(default=None, ge=1)
    grid_position: GridPositionSchema | None = None
    dimensions: DimensionsSchema | None = None
    storage_conditions: StorageConditionsSchema | None = None


class ResizeShelfRequest(BaseModel):
    total_slots: int | None = Field(default=None, ge=0)
    total_weight: float | None = Field(default=None, ge=0)


class RecordCleaningRequest(BaseModel):
    cleaned_at: datetime | None = None


class PlacementResponse(BaseModel):
    placement_id: str
    item_id: str
    shelf_id: str | None = None
    slots_used: int
    weight_used: float
    placed_at: str | None = None


class ShelfResponse(BaseModel):
    shelf_id: str
    rack_id: str
    zone_id: str
    warehouse_id: str
    name: str
    code: str
    shelf_number: int
    shelf_type: str
    description: str | None = None
    position: int
    is_active: bool
    capacity: CapacitySchema
    max_items_per_slot: int = 1
    grid_position: GridPositionSchema | None = None
    dimensions: DimensionsSchema | None = None
    storage_conditions: StorageConditionsSchema | None = None
    cleaning_status: str
    last_cleaned: str | None = None
    next_cleaning_date: str | None = None
    placements: list[PlacementResponse] = []


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------
class AssignItemRequest(BaseModel):
    item_id: str
    shelf_id: str
    slots_required: int | None = Field(default=None, ge=1)
    weight_required: float | None = Field(default=None, ge=0)


class MovePlacementRequest(BaseModel):
    new_shelf_id: str


class BulkAssignRequest(BaseModel):
    item_ids: list[str] = Field(min_length=1)


class BulkAssignResult(BaseModel):
    item_id: str
    status: str
    placement: PlacementResponse | None = None
    error: str | None = None
    messages: dict | None = None
    detail: dict | None = None


class BulkAssignResponse(BaseModel):
    shelf_id: str
    placed: int
    failed: int
    results: list[BulkAssignResult]


class UnassignedItemResponse(BaseModel):
    item_id: str
    name: str
    size_slots: int
    weight: float
    required_temperature_range: TemperatureRangeSchema | None = None
    required_security_level: str | None = None
    required_humidity_range: HumidityRangeSchema | None = None
    light_sensitive: bool = False
    requires_refrigeration: bool = False


# ---------------------------------------------------------------------------
# Cleaning
# ---------------------------------------------------------------------------
class RefreshCleaningRequest(BaseModel):
    as_of: datetime | None = None
    warehouse_id: str | None = None


class CleaningEntryResponse(BaseModel):
    shelf_id: str
    code: str
    name: str
    rack_id: str
    zone_id: str
    warehouse_id: str
    cleaning_status: str
    last_cleaned: str | None = None
    next_cleaning_date: str
    days_until_due: int


# ---------------------------------------------------------------------------
# Generic responses
# ---------------------------------------------------------------------------
class WarehouseIdResponse(BaseModel):
    warehouse_id: str


class ZoneIdResponse(BaseModel):
    zone_id: str


class RackIdResponse(BaseModel):
    rack_id: str


class ShelfIdResponse(BaseModel):
    shelf_id: str


class StatusResponse(BaseModel):
    status: str = "ok"


class DeletedResponse(BaseModel):
    status: str = "ok"
    removed: dict[str, int] = {}
