from warehousing.api.routes import (
    cleaning_router,
    placement_router,
    rack_router,
    shelf_router,
    warehouse_router,
    zone_router,
)

routers = [warehouse_router, zone_router, rack_router, shelf_router, placement_router, cleaning_router]

__all__ = [
    "cleaning_router",
    "placement_router",
    "rack_router",
    "routers",
    "shelf_router",
    "warehouse_router",
    "zone_router",
]
