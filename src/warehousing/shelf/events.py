"""Domain events for the Shelf aggregate: lifecycle, placements and cleaning."""

from protean.fields import DateTime, Float, Identifier, Integer, String

from warehousing.domain import warehousing


@warehousing.event(part_of="Shelf")
class ShelfCreated:
    """A shelf was mounted on a rack."""

    __version__ = 1

    shelf_id = Identifier(required=True)
    rack_id = Identifier(required=True)
    zone_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    name = String(required=True)
    code = String(required=True)
    shelf_number = Integer(required=True)
    shelf_type = String(required=True)
    total_slots = Integer()
    total_weight = Float()
    next_cleaning_date = DateTime()
    created_at = DateTime(required=True)


@warehousing.event(part_of="Shelf")
class ShelfUpdated:
    """Shelf metadata changed."""

    __version__ = 1

    shelf_id = Identifier(required=True)
    name = String(required=True)
    code = String(required=True)
    shelf_number = Integer()
    shelf_type = String(required=True)
    updated_at = DateTime(required=True)


@warehousing.event(part_of="Shelf")
class ShelfResized:
    """A shelf's total slot or weight capacity changed."""

    __version__ = 1

    shelf_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    previous_total_slots = Integer()
    total_slots = Integer()
    previous_total_weight = Float()
    total_weight = Float()
    resized_at = DateTime(required=True)


@warehousing.event(part_of="Shelf")
class ShelfDeactivated:
    """A shelf was taken out of service."""

    __version__ = 1

    shelf_id = Identifier(required=True)
    rack_id = Identifier(required=True)
    deactivated_at = DateTime(required=True)


@warehousing.event(part_of="Shelf")
class ItemPlaced:
    """An inventory item was placed on a shelf."""

    __version__ = 1

    shelf_id = Identifier(required=True)
    placement_id = Identifier(required=True)
    item_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    zone_id = Identifier(required=True)
    slots_used = Integer(required=True)
    weight_used = Float()
    used_slots = Integer()
    total_slots = Integer()
    placed_at = DateTime(required=True)


@warehousing.event(part_of="Shelf")
class ItemRemoved:
    """A placement was removed and its capacity released."""

    __version__ = 1

    shelf_id = Identifier(required=True)
    placement_id = Identifier(required=True)
    item_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    zone_id = Identifier(required=True)
    slots_released = Integer(required=True)
    weight_released = Float()
    used_slots = Integer()
    total_slots = Integer()
    removed_at = DateTime(required=True)


@warehousing.event(part_of="Shelf")
class ShelfCapacityCritical:
    """Shelf utilization crossed the critical threshold."""

    __version__ = 1

    shelf_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    code = String(required=True)
    utilization_percentage = Float(required=True)
    threshold = Float(required=True)
    detected_at = DateTime(required=True)


@warehousing.event(part_of="Shelf")
class ShelfCleaned:
    """A cleaning was recorded for a shelf."""

    __version__ = 1

    shelf_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    cleaned_at = DateTime(required=True)
    next_cleaning_date = DateTime(required=True)
    previous_status = String()


@warehousing.event(part_of="Shelf")
class ShelfCleaningOverdue:
    """A shelf passed its cleaning due date without being cleaned."""

    __version__ = 1

    shelf_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    code = String(required=True)
    next_cleaning_date = DateTime(required=True)
    detected_at = DateTime(required=True)
