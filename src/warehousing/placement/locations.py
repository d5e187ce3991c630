"""Placement locations — which shelf holds each live placement.

Lets placement and item lookups go straight to one shelf instead of scanning
the hierarchy. Rows exist only while the placement does.
"""

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer
from protean.utils.globals import current_domain

from warehousing.domain import warehousing
from warehousing.shared.queries import find
from warehousing.shelf.events import ItemPlaced, ItemRemoved
from warehousing.shelf.shelf import Shelf


@warehousing.projection
class PlacementLocation:
    placement_id = Identifier(identifier=True, required=True)
    item_id = Identifier(required=True)
    shelf_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    slots_used = Integer(default=0)
    placed_at = DateTime()


@warehousing.projector(projector_for=PlacementLocation, aggregates=[Shelf])
class PlacementLocationProjector:
    @on(ItemPlaced)
    def on_item_placed(self, event):
        current_domain.repository_for(PlacementLocation).add(
            PlacementLocation(
                placement_id=event.placement_id,
                item_id=event.item_id,
                shelf_id=event.shelf_id,
                warehouse_id=event.warehouse_id,
                slots_used=event.slots_used,
                placed_at=event.placed_at,
            )
        )

    @on(ItemRemoved)
    def on_item_removed(self, event):
        dao = current_domain.repository_for(PlacementLocation)._dao
        for location in find(PlacementLocation, placement_id=str(event.placement_id)):
            dao.delete(location)


def location_of_item(item_id):
    """The live placement location of an item, or None when it is not placed."""
    return next(iter(find(PlacementLocation, item_id=str(item_id))), None)


def locate_placement(placement_id):
    """Return ``(shelf, placement)`` for a placement id, or raise ObjectNotFoundError."""
    for location in find(PlacementLocation, placement_id=str(placement_id)):
        shelf = current_domain.repository_for(Shelf).get(location.shelf_id)
        placement = shelf.find_placement(placement_id)
        if placement is not None:
            return shelf, placement
    raise ObjectNotFoundError(f"Placement {placement_id} does not exist")


def placed_item_ids():
    return {str(location.item_id) for location in find(PlacementLocation)}
