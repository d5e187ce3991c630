"""FastAPI routes for the Warehousing domain — hierarchy, placements, cleaning, analytics."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from warehousing.analytics.aggregator import capacity_report, layout, warehouse_analytics
from warehousing.api.permissions import require
from warehousing.api.schemas import (
    AssignItemRequest,
    BulkAssignRequest,
    BulkAssignResponse,
    CleaningEntryResponse,
    CreateRackRequest,
    CreateShelfRequest,
    CreateWarehouseRequest,
    CreateZoneRequest,
    DeletedResponse,
    MovePlacementRequest,
    PlacementResponse,
    RackIdResponse,
    RackResponse,
    RecordCleaningRequest,
    RefreshCleaningRequest,
    ResizeShelfRequest,
    ShelfIdResponse,
    ShelfResponse,
    StatusResponse,
    UnassignedItemResponse,
    UpdateRackRequest,
    UpdateShelfRequest,
    UpdateWarehouseRequest,
    UpdateZoneRequest,
    WarehouseIdResponse,
    WarehouseResponse,
    ZoneIdResponse,
    ZoneResponse,
)
from warehousing.api.views import placement_view, rack_view, shelf_view, warehouse_view, zone_view
from warehousing.cleaning.queries import list_overdue, list_upcoming
from warehousing.cleaning.recording import RecordShelfCleaning, RefreshCleaningStatuses
from warehousing.placement.service import PlacementService
from warehousing.rack.management import CreateRack, DeactivateRack, DeleteRack, UpdateRack
from warehousing.rack.rack import Rack
from warehousing.shared.queries import children_of, find, matches
from warehousing.shelf.management import CreateShelf, DeactivateShelf, UpdateShelf
from warehousing.shelf.shelf import Shelf
from warehousing.warehouse.management import (
    CreateWarehouse,
    DeactivateWarehouse,
    DeleteWarehouse,
    UpdateWarehouse,
)
from warehousing.warehouse.warehouse import Warehouse
from warehousing.zone.management import CreateZone, DeactivateZone, DeleteZone, UpdateZone
from warehousing.zone.zone import Zone

placement_service = PlacementService()


def _filtered(cls, q, search_attrs, **filters):
    filters = {key: value for key, value in filters.items() if value is not None}
    return [record for record in children_of(cls, **filters) if matches(record, q, *search_attrs)]


def _encoded(schema):
    return schema.model_dump_json() if schema is not None else None


# ---------------------------------------------------------------------------
# Warehouse Router
# ---------------------------------------------------------------------------
warehouse_router = APIRouter(prefix="/warehouses", tags=["warehouses"])


@warehouse_router.post(
    "",
    status_code=201,
    response_model=WarehouseIdResponse,
    dependencies=[Depends(require("warehouse", "create"))],
)
async def create_warehouse(body: CreateWarehouseRequest) -> WarehouseIdResponse:
    command = CreateWarehouse(
        name=body.name,
        code=body.code,
        address=body.address.model_dump_json(),
        security_level=body.security_level,
        contact_person=body.contact_person,
        phone=body.phone,
        description=body.description,
    )
    result = current_domain.process(command, asynchronous=False)
    return WarehouseIdResponse(warehouse_id=result)


@warehouse_router.get("", response_model=list[WarehouseResponse])
async def list_warehouses(q: str | None = None, active_only: bool = False) -> list[WarehouseResponse]:
    warehouses = sorted(find(Warehouse), key=lambda w: (w.code, str(w.id)))
    return [
        warehouse_view(w)
        for w in warehouses
        if matches(w, q, "name", "code") and (w.is_active or not active_only)
    ]


@warehouse_router.get("/{warehouse_id}", response_model=WarehouseResponse)
async def get_warehouse(warehouse_id: str) -> WarehouseResponse:
    return warehouse_view(current_domain.repository_for(Warehouse).get(warehouse_id))


@warehouse_router.put(
    "/{warehouse_id}",
    response_model=StatusResponse,
    dependencies=[Depends(require("warehouse", "update"))],
)
async def update_warehouse(warehouse_id: str, body: UpdateWarehouseRequest) -> StatusResponse:
    command = UpdateWarehouse(
        warehouse_id=warehouse_id,
        name=body.name,
        code=body.code,
        address=body.address.model_dump_json() if body.address else None,
        security_level=body.security_level,
        contact_person=body.contact_person,
        phone=body.phone,
        description=body.description,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@warehouse_router.put(
    "/{warehouse_id}/deactivate",
    response_model=StatusResponse,
    dependencies=[Depends(require("warehouse", "update"))],
)
async def deactivate_warehouse(warehouse_id: str) -> StatusResponse:
    current_domain.process(DeactivateWarehouse(warehouse_id=warehouse_id), asynchronous=False)
    return StatusResponse()


@warehouse_router.delete(
    "/{warehouse_id}",
    response_model=DeletedResponse,
    dependencies=[Depends(require("warehouse", "delete"))],
)
async def delete_warehouse(warehouse_id: str) -> DeletedResponse:
    removed = current_domain.process(DeleteWarehouse(warehouse_id=warehouse_id), asynchronous=False)
    return DeletedResponse(removed=removed or {})


@warehouse_router.get("/{warehouse_id}/analytics")
async def get_warehouse_analytics(warehouse_id: str, period: str = "30d") -> dict:
    return warehouse_analytics(warehouse_id, period)


@warehouse_router.get("/{warehouse_id}/capacity-report")
async def get_warehouse_capacity_report(warehouse_id: str) -> dict:
    return capacity_report("warehouse", warehouse_id)


@warehouse_router.get("/{warehouse_id}/layout")
async def get_warehouse_layout(warehouse_id: str) -> dict:
    return layout("warehouse", warehouse_id)


# ---------------------------------------------------------------------------
# Zone Router
# ---------------------------------------------------------------------------
zone_router = APIRouter(prefix="/zones", tags=["zones"])


@zone_router.post(
    "",
    status_code=201,
    response_model=ZoneIdResponse,
    dependencies=[Depends(require("zone", "create"))],
)
async def create_zone(body: CreateZoneRequest) -> ZoneIdResponse:
    command = CreateZone(
        warehouse_id=body.warehouse_id,
        name=body.name,
        code=body.code,
        zone_type=body.zone_type,
        temperature_min=body.temperature_range.min,
        temperature_max=body.temperature_range.max,
        temperature_unit=body.temperature_range.unit,
        security_level=body.security_level,
        humidity_min=body.humidity_range.min if body.humidity_range else None,
        humidity_max=body.humidity_range.max if body.humidity_range else None,
        access_level=body.access_level,
        description=body.description,
        position=body.position,
    )
    result = current_domain.process(command, asynchronous=False)
    return ZoneIdResponse(zone_id=result)


@zone_router.get("", response_model=list[ZoneResponse])
async def list_zones(
    warehouse_id: str | None = None,
    zone_type: str | None = None,
    q: str | None = None,
) -> list[ZoneResponse]:
    zones = _filtered(Zone, q, ("name", "code"), warehouse_id=warehouse_id, zone_type=zone_type)
    return [zone_view(z) for z in zones]


@zone_router.get("/{zone_id}", response_model=ZoneResponse)
async def get_zone(zone_id: str) -> ZoneResponse:
    return zone_view(current_domain.repository_for(Zone).get(zone_id))


@zone_router.put("/{zone_id}", response_model=StatusResponse, dependencies=[Depends(require("zone", "update"))])
async def update_zone(zone_id: str, body: UpdateZoneRequest) -> StatusResponse:
    temperature = body.temperature_range
    command = UpdateZone(
        zone_id=zone_id,
        name=body.name,
        code=body.code,
        zone_type=body.zone_type,
        temperature_min=temperature.min if temperature else None,
        temperature_max=temperature.max if temperature else None,
        temperature_unit=temperature.unit if temperature else None,
        security_level=body.security_level,
        humidity_min=body.humidity_range.min if body.humidity_range else None,
        humidity_max=body.humidity_range.max if body.humidity_range else None,
        access_level=body.access_level,
        description=body.description,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@zone_router.put(
    "/{zone_id}/deactivate",
    response_model=StatusResponse,
    dependencies=[Depends(require("zone", "update"))],
)
async def deactivate_zone(zone_id: str) -> StatusResponse:
    current_domain.process(DeactivateZone(zone_id=zone_id), asynchronous=False)
    return StatusResponse()


@zone_router.delete("/{zone_id}", response_model=DeletedResponse, dependencies=[Depends(require("zone", "delete"))])
async def delete_zone(zone_id: str) -> DeletedResponse:
    removed = current_domain.process(DeleteZone(zone_id=zone_id), asynchronous=False)
    return DeletedResponse(removed=removed or {})


@zone_router.get("/{zone_id}/capacity-report")
async def get_zone_capacity_report(zone_id: str) -> dict:
    return capacity_report("zone", zone_id)


@zone_router.get("/{zone_id}/layout")
async def get_zone_layout(zone_id: str) -> dict:
    return layout("zone", zone_id)


# ---------------------------------------------------------------------------
# Rack Router
# ---------------------------------------------------------------------------
rack_router = APIRouter(prefix="/racks", tags=["racks"])


@rack_router.post(
    "",
    status_code=201,
    response_model=RackIdResponse,
    dependencies=[Depends(require("rack", "create"))],
)
async def create_rack(body: CreateRackRequest) -> RackIdResponse:
    command = CreateRack(
        zone_id=body.zone_id,
        name=body.name,
        code=body.code,
        rack_type=body.rack_type,
        description=body.description,
        position=body.position,
    )
    result = current_domain.process(command, asynchronous=False)
    return RackIdResponse(rack_id=result)


@rack_router.get("", response_model=list[RackResponse])
async def list_racks(
    zone_id: str | None = None,
    rack_type: str | None = None,
    q: str | None = None,
) -> list[RackResponse]:
    racks = _filtered(Rack, q, ("name", "code"), zone_id=zone_id, rack_type=rack_type)
    return [rack_view(r) for r in racks]


@rack_router.get("/{rack_id}", response_model=RackResponse)
async def get_rack(rack_id: str) -> RackResponse:
    return rack_view(current_domain.repository_for(Rack).get(rack_id))


@rack_router.put("/{rack_id}", response_model=StatusResponse, dependencies=[Depends(require("rack", "update"))])
async def update_rack(rack_id: str, body: UpdateRackRequest) -> StatusResponse:
    command = UpdateRack(
        rack_id=rack_id,
        name=body.name,
        code=body.code,
        rack_type=body.rack_type,
        description=body.description,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@rack_router.put(
    "/{rack_id}/deactivate",
    response_model=StatusResponse,
    dependencies=[Depends(require("rack", "update"))],
)
async def deactivate_rack(rack_id: str) -> StatusResponse:
    current_domain.process(DeactivateRack(rack_id=rack_id), asynchronous=False)
    return StatusResponse()


@rack_router.delete("/{rack_id}", response_model=DeletedResponse, dependencies=[Depends(require("rack", "delete"))])
async def delete_rack(rack_id: str) -> DeletedResponse:
    removed = current_domain.process(DeleteRack(rack_id=rack_id), asynchronous=False)
    return DeletedResponse(removed=removed or {})


@rack_router.get("/{rack_id}/capacity-report")
async def get_rack_capacity_report(rack_id: str) -> dict:
    return capacity_report("rack", rack_id)


@rack_router.get("/{rack_id}/layout")
async def get_rack_layout(rack_id: str) -> dict:
    return layout("rack", rack_id)


# ---------------------------------------------------------------------------
# Shelf Router
# ---------------------------------------------------------------------------
shelf_router = APIRouter(prefix="/shelves", tags=["shelves"])


@shelf_router.post(
    "",
    status_code=201,
    response_model=ShelfIdResponse,
    dependencies=[Depends(require("shelf", "create"))],
)
async def create_shelf(body: CreateShelfRequest) -> ShelfIdResponse:
    command = CreateShelf(
        rack_id=body.rack_id,
        name=body.name,
        code=body.code,
        shelf_number=body.shelf_number,
        shelf_type=body.shelf_type,
        total_slots=body.total_slots,
        total_weight=body.total_weight,
        description=body.description,
        position=body.position,
        max_items_per_slot=body.max_items_per_slot,
        grid_position=_encoded(body.grid_position),
        dimensions=_encoded(body.dimensions),
        storage_conditions=_encoded(body.storage_conditions),
    )
    result = current_domain.process(command, asynchronous=False)
    return ShelfIdResponse(shelf_id=result)


@shelf_router.get("", response_model=list[ShelfResponse])
async def list_shelves(
    rack_id: str | None = None,
    shelf_type: str | None = None,
    q: str | None = None,
) -> list[ShelfResponse]:
    shelves = _filtered(Shelf, q, ("name", "code"), rack_id=rack_id, shelf_type=shelf_type)
    return [shelf_view(s) for s in shelves]


@shelf_router.get("/{shelf_id}", response_model=ShelfResponse)
async def get_shelf(shelf_id: str) -> ShelfResponse:
    return shelf_view(current_domain.repository_for(Shelf).get(shelf_id))


@shelf_router.put("/{shelf_id}", response_model=StatusResponse, dependencies=[Depends(require("shelf", "update"))])
async def update_shelf(shelf_id: str, body: UpdateShelfRequest) -> StatusResponse:
    command = UpdateShelf(
        shelf_id=shelf_id,
        name=body.name,
        code=body.code,
        shelf_number=body.shelf_number,
        shelf_type=body.shelf_type,
        description=body.description,
        max_items_per_slot=body.max_items_per_slot,
        grid_position=_encoded(body.grid_position),
        dimensions=_encoded(body.dimensions),
        storage_conditions=_encoded(body.storage_conditions),
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@shelf_router.put(
    "/{shelf_id}/capacity",
    response_model=StatusResponse,
    dependencies=[Depends(require("shelf", "update"))],
)
async def resize_shelf(shelf_id: str, body: ResizeShelfRequest) -> StatusResponse:
    placement_service.resize_shelf(shelf_id, total_slots=body.total_slots, total_weight=body.total_weight)
    return StatusResponse()


@shelf_router.put(
    "/{shelf_id}/deactivate",
    response_model=StatusResponse,
    dependencies=[Depends(require("shelf", "update"))],
)
async def deactivate_shelf(shelf_id: str) -> StatusResponse:
    current_domain.process(DeactivateShelf(shelf_id=shelf_id), asynchronous=False)
    return StatusResponse()


@shelf_router.delete("/{shelf_id}", response_model=StatusResponse, dependencies=[Depends(require("shelf", "delete"))])
async def delete_shelf(shelf_id: str) -> StatusResponse:
    placement_service.delete_shelf(shelf_id)
    return StatusResponse()


@shelf_router.put(
    "/{shelf_id}/cleaning",
    response_model=StatusResponse,
    dependencies=[Depends(require("shelf", "clean"))],
)
async def record_shelf_cleaning(shelf_id: str, body: RecordCleaningRequest | None = None) -> StatusResponse:
    cleaned_at = body.cleaned_at if body else None
    current_domain.process(RecordShelfCleaning(shelf_id=shelf_id, cleaned_at=cleaned_at), asynchronous=False)
    return StatusResponse()


@shelf_router.post(
    "/{shelf_id}/items",
    response_model=BulkAssignResponse,
    dependencies=[Depends(require("placement", "create"))],
)
async def assign_items_to_shelf(shelf_id: str, body: BulkAssignRequest) -> BulkAssignResponse:
    results = placement_service.assign_items_to_shelf(shelf_id, body.item_ids)
    placed = sum(1 for r in results if r["status"] == "placed")
    return BulkAssignResponse(shelf_id=shelf_id, placed=placed, failed=len(results) - placed, results=results)


@shelf_router.get("/{shelf_id}/capacity-report")
async def get_shelf_capacity_report(shelf_id: str) -> dict:
    return capacity_report("shelf", shelf_id)


# ---------------------------------------------------------------------------
# Placement Router
# ---------------------------------------------------------------------------
placement_router = APIRouter(prefix="/placements", tags=["placements"])


@placement_router.post(
    "",
    status_code=201,
    response_model=PlacementResponse,
    dependencies=[Depends(require("placement", "create"))],
)
async def assign_item(body: AssignItemRequest) -> PlacementResponse:
    placement = placement_service.assign(
        body.item_id,
        body.shelf_id,
        slots_required=body.slots_required,
        weight_required=body.weight_required,
    )
    return placement_view(placement)


@placement_router.get("/unassigned-items", response_model=list[UnassignedItemResponse])
async def list_unassigned_items() -> list[UnassignedItemResponse]:
    return [UnassignedItemResponse(**item) for item in placement_service.list_unassigned_items()]


@placement_router.delete(
    "/{placement_id}",
    response_model=PlacementResponse,
    dependencies=[Depends(require("placement", "delete"))],
)
async def unassign_item(placement_id: str) -> PlacementResponse:
    return placement_view(placement_service.unassign(placement_id))


@placement_router.put(
    "/{placement_id}/move",
    response_model=PlacementResponse,
    dependencies=[Depends(require("placement", "update"))],
)
async def move_placement(placement_id: str, body: MovePlacementRequest) -> PlacementResponse:
    return placement_view(placement_service.move(placement_id, body.new_shelf_id))


# ---------------------------------------------------------------------------
# Cleaning Router
# ---------------------------------------------------------------------------
cleaning_router = APIRouter(prefix="/cleaning", tags=["cleaning"])


@cleaning_router.get("/overdue", response_model=list[CleaningEntryResponse])
async def get_overdue_cleaning(warehouse_id: str | None = None) -> list[CleaningEntryResponse]:
    return [CleaningEntryResponse(**entry) for entry in list_overdue(warehouse_id=warehouse_id)]


@cleaning_router.get("/upcoming", response_model=list[CleaningEntryResponse])
async def get_upcoming_cleaning(
    within_days: int = Query(default=7, ge=0),
    warehouse_id: str | None = None,
) -> list[CleaningEntryResponse]:
    return [
        CleaningEntryResponse(**entry)
        for entry in list_upcoming(within_days=within_days, warehouse_id=warehouse_id)
    ]


@cleaning_router.post(
    "/refresh",
    response_model=dict[str, int],
    dependencies=[Depends(require("shelf", "clean"))],
)
async def refresh_cleaning_statuses(body: RefreshCleaningRequest | None = None) -> dict[str, int]:
    command = RefreshCleaningStatuses(
        as_of=(body.as_of if body and body.as_of else datetime.now(UTC)),
        warehouse_id=body.warehouse_id if body else None,
    )
    return current_domain.process(command, asynchronous=False)
