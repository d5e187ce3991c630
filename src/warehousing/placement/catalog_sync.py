"""Keeps the inventory catalog's item locations in step with committed placements."""

import structlog
from protean import handle

from warehousing.catalog import get_catalog
from warehousing.domain import warehousing
from warehousing.shelf.events import ItemPlaced, ItemRemoved
from warehousing.shelf.shelf import Shelf

logger = structlog.get_logger(__name__)


@warehousing.event_handler(part_of=Shelf)
class CatalogLocationHandler:
    @handle(ItemPlaced)
    def on_item_placed(self, event: ItemPlaced) -> None:
        get_catalog().set_item_location(str(event.item_id), str(event.shelf_id))

    @handle(ItemRemoved)
    def on_item_removed(self, event: ItemRemoved) -> None:
        catalog = get_catalog()
        item = catalog.get_item(str(event.item_id))
        # A move places the item elsewhere; only clear a location that still points here
        if item.get("shelf_id") in (None, str(event.shelf_id)):
            catalog.set_item_location(str(event.item_id), None)
        else:
            logger.debug("Item already relocated", item_id=str(event.item_id), shelf_id=item.get("shelf_id"))
