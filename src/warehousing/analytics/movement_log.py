"""Capacity movement log — append-only record of placement deltas per shelf.

Feeds the historical trend series in warehouse analytics.
"""

import uuid

from protean.core.projector import on
from protean.fields import DateTime, Float, Identifier, Integer, String
from protean.utils.globals import current_domain

from warehousing.domain import warehousing
from warehousing.shelf.events import ItemPlaced, ItemRemoved
from warehousing.shelf.shelf import Shelf


@warehousing.projection
class CapacityMovementLog:
    entry_id = Identifier(identifier=True, required=True)
    warehouse_id = Identifier(required=True)
    zone_id = Identifier(required=True)
    shelf_id = Identifier(required=True)
    item_id = Identifier(required=True)
    event_type = String(required=True)
    slots_change = Integer(default=0)
    weight_change = Float(default=0.0)
    shelf_used_slots = Integer(default=0)
    occurred_at = DateTime(required=True)


def _add_entry(event, event_type, slots_change, weight_change, occurred_at):
    current_domain.repository_for(CapacityMovementLog).add(
        CapacityMovementLog(
            entry_id=str(uuid.uuid4()),
            warehouse_id=event.warehouse_id,
            zone_id=event.zone_id,
            shelf_id=event.shelf_id,
            item_id=event.item_id,
            event_type=event_type,
            slots_change=slots_change,
            weight_change=weight_change,
            shelf_used_slots=event.used_slots or 0,
            occurred_at=occurred_at,
        )
    )


@warehousing.projector(projector_for=CapacityMovementLog, aggregates=[Shelf])
class CapacityMovementLogProjector:
    @on(ItemPlaced)
    def on_item_placed(self, event):
        _add_entry(event, "ItemPlaced", event.slots_used, event.weight_used or 0.0, event.placed_at)

    @on(ItemRemoved)
    def on_item_removed(self, event):
        _add_entry(event, "ItemRemoved", -event.slots_released, -(event.weight_released or 0.0), event.removed_at)
