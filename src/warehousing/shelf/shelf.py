"""Shelf aggregate — the leaf of the storage hierarchy.

Shelves are the only containers whose used capacity is recorded directly. Each
placement on a shelf consumes slots and weight; the shelf's used capacity is
always the sum of its placements. Shelves also carry their cleaning schedule.
"""

from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from warehousing.cleaning.schedule import (
    CleaningStatus,
    advance,
    align,
    derive_cleaning_status,
    next_cleaning_date,
)
from warehousing.config import CAPACITY_CRITICAL_PERCENT
from warehousing.domain import warehousing
from warehousing.errors import CapacityExceededError, ConflictError
from warehousing.shared.capacity import Capacity, round_weight, weights_equal
from warehousing.shared.environment import StorageConditions
from warehousing.shelf.events import (
    ItemPlaced,
    ItemRemoved,
    ShelfCapacityCritical,
    ShelfCleaned,
    ShelfCleaningOverdue,
    ShelfCreated,
    ShelfDeactivated,
    ShelfResized,
    ShelfUpdated,
)


class ShelfType(Enum):
    STANDARD = "standard"
    ADJUSTABLE = "adjustable"
    FIXED = "fixed"
    MOBILE = "mobile"
    SPECIALIZED = "specialized"


@warehousing.value_object
class ShelfDimensions:
    """Physical size of a shelf in metres."""

    width = Float(required=True, min_value=0.1)
    height = Float(required=True, min_value=0.1)
    depth = Float(required=True, min_value=0.1)

    def to_summary(self):
        return {"width": self.width, "height": self.height, "depth": self.depth}


@warehousing.value_object
class GridPosition:
    """Where a shelf sits in the warehouse floor grid."""

    row = Integer(required=True, min_value=1)
    column = Integer(required=True, min_value=1)
    level = Integer(required=True, min_value=1)
    slot = Integer(required=True, min_value=1)

    def to_summary(self):
        return {"row": self.row, "column": self.column, "level": self.level, "slot": self.slot}


def _value(cls, value):
    if value is None or isinstance(value, cls):
        return value
    if cls is StorageConditions:
        return StorageConditions.from_summary(value)
    return cls(**value)


@warehousing.entity(part_of="Shelf")
class Placement:
    """Record that an item occupies part of a shelf. Never edited, only removed."""

    item_id = Identifier(required=True)
    slots_used = Integer(required=True, min_value=1)
    weight_used = Float(default=0.0, min_value=0.0)
    placed_at = DateTime()

    def to_summary(self):
        return {
            "placement_id": str(self.id),
            "item_id": str(self.item_id),
            "slots_used": self.slots_used,
            "weight_used": self.weight_used,
            "placed_at": self.placed_at.isoformat() if self.placed_at else None,
        }


@warehousing.aggregate
class Shelf:
    """A single shelf on a rack, holding item placements."""

    rack_id = Identifier(required=True)
    zone_id = Identifier(required=True)
    warehouse_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    code = String(required=True, max_length=10)
    shelf_number = Integer(required=True, min_value=1)
    shelf_type = String(choices=ShelfType, default=ShelfType.STANDARD.value)
    description = Text()
    position = Integer(default=0)
    grid_position = ValueObject(GridPosition)
    dimensions = ValueObject(ShelfDimensions)
    storage_conditions = ValueObject(StorageConditions)
    capacity = ValueObject(Capacity)
    max_items_per_slot = Integer(default=1, min_value=1)
    is_active = Boolean(default=True)
    cleaning_status = String(choices=CleaningStatus, default=CleaningStatus.CLEAN.value)
    last_cleaned = DateTime()
    next_cleaning_date = DateTime()
    placements = HasMany(Placement)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def placements_account_for_used_capacity(self):
        capacity = self.capacity
        if capacity is None:
            return
        placements = self.placements or []
        slots = sum(p.slots_used for p in placements)
        weight = round_weight(sum(p.weight_used or 0.0 for p in placements))
        if slots != capacity.used_slots or not weights_equal(weight, capacity.used_weight):
            raise ValidationError(
                {
                    "placements": [
                        f"Placements use {slots} slots / {weight} kg but shelf records "
                        f"{capacity.used_slots} slots / {capacity.used_weight} kg"
                    ]
                }
            )

    @classmethod
    def create(
        cls,
        rack_id,
        zone_id,
        warehouse_id,
        name,
        code,
        shelf_number,
        total_slots,
        total_weight,
        shelf_type=ShelfType.STANDARD.value,
        description=None,
        position=0,
        created_at=None,
        grid_position=None,
        dimensions=None,
        storage_conditions=None,
        max_items_per_slot=1,
    ):
        if total_slots is None or total_slots < 0:
            raise ValidationError({"total_slots": ["Total slots must be zero or more"]})
        if total_weight is None or total_weight < 0:
            raise ValidationError({"total_weight": ["Total weight must be zero or more"]})

        now = created_at or datetime.now(UTC)
        shelf = cls(
            rack_id=rack_id,
            zone_id=zone_id,
            warehouse_id=warehouse_id,
            name=name,
            code=code.strip().upper(),
            shelf_number=shelf_number,
            shelf_type=shelf_type,
            description=description,
            position=position,
            grid_position=_value(GridPosition, grid_position),
            dimensions=_value(ShelfDimensions, dimensions),
            storage_conditions=_value(StorageConditions, storage_conditions),
            max_items_per_slot=max_items_per_slot or 1,
            capacity=Capacity(
                total_slots=total_slots,
                used_slots=0,
                total_weight=round_weight(total_weight),
                used_weight=0.0,
            ),
            cleaning_status=CleaningStatus.CLEAN.value,
            last_cleaned=now,
            next_cleaning_date=next_cleaning_date(now),
            created_at=now,
            updated_at=now,
        )
        shelf.raise_(
            ShelfCreated(
                shelf_id=str(shelf.id),
                rack_id=str(rack_id),
                zone_id=str(zone_id),
                warehouse_id=str(warehouse_id),
                name=shelf.name,
                code=shelf.code,
                shelf_number=shelf.shelf_number,
                shelf_type=shelf.shelf_type,
                total_slots=total_slots,
                total_weight=shelf.capacity.total_weight,
                next_cleaning_date=shelf.next_cleaning_date,
                created_at=now,
            )
        )
        return shelf

    def update_details(
        self,
        name=None,
        code=None,
        shelf_number=None,
        shelf_type=None,
        description=None,
        grid_position=None,
        dimensions=None,
        storage_conditions=None,
        max_items_per_slot=None,
    ):
        if name is not None:
            self.name = name
        if code is not None:
            self.code = code.strip().upper()
        if shelf_number is not None:
            self.shelf_number = shelf_number
        if shelf_type is not None:
            self.shelf_type = shelf_type
        if description is not None:
            self.description = description
        if grid_position is not None:
            self.grid_position = _value(GridPosition, grid_position)
        if dimensions is not None:
            self.dimensions = _value(ShelfDimensions, dimensions)
        if storage_conditions is not None:
            self.storage_conditions = _value(StorageConditions, storage_conditions)
        if max_items_per_slot is not None:
            self.max_items_per_slot = max_items_per_slot
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ShelfUpdated(
                shelf_id=str(self.id),
                name=self.name,
                code=self.code,
                shelf_number=self.shelf_number,
                shelf_type=self.shelf_type,
                updated_at=self.updated_at,
            )
        )

    def resize(self, total_slots, total_weight):
        """Change the shelf's totals. Cannot shrink below what is already placed."""
        current = self.capacity
        if total_slots is None:
            total_slots = current.total_slots
        if total_weight is None:
            total_weight = current.total_weight
        if total_slots < 0 or total_weight < 0:
            raise ValidationError({"capacity": ["Capacity totals must be zero or more"]})
        if total_slots < current.used_slots:
            raise ValidationError(
                {"total_slots": [f"Cannot resize to {total_slots} slots, {current.used_slots} are in use"]}
            )
        if total_weight < current.used_weight and not weights_equal(total_weight, current.used_weight):
            raise ValidationError(
                {"total_weight": [f"Cannot resize to {total_weight} kg, {current.used_weight} kg is in use"]}
            )

        self.capacity = current.resize(total_slots, total_weight)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ShelfResized(
                shelf_id=str(self.id),
                warehouse_id=str(self.warehouse_id),
                previous_total_slots=current.total_slots,
                total_slots=self.capacity.total_slots,
                previous_total_weight=current.total_weight,
                total_weight=self.capacity.total_weight,
                resized_at=self.updated_at,
            )
        )

    # -------------------------------------------------------------------
    # Placements
    # -------------------------------------------------------------------
    def find_placement(self, placement_id):
        return next((p for p in (self.placements or []) if str(p.id) == str(placement_id)), None)

    def find_item(self, item_id):
        return next((p for p in (self.placements or []) if str(p.item_id) == str(item_id)), None)

    def ensure_can_accept(self, slots, weight):
        """Raise unless ``slots``/``weight`` fit on this active shelf right now."""
        if not self.is_active:
            raise ValidationError({"shelf": [f"Shelf {self.code} is inactive"]})
        if slots is None or slots < 1:
            raise ValidationError({"slots_required": ["An item needs at least one slot"]})
        if weight is None or weight < 0:
            raise ValidationError({"weight_required": ["Weight cannot be negative"]})
        if not self.capacity.can_accommodate(slots, weight):
            raise CapacityExceededError(
                shelf_id=self.id,
                required_slots=slots,
                available_slots=self.capacity.available_slots,
                required_weight=round_weight(weight),
                available_weight=self.capacity.available_weight,
            )

    def place_item(self, item_id, slots, weight, placed_at=None):
        """Record a placement and consume its capacity. All or nothing."""
        self.ensure_can_accept(slots, weight)
        weight = round_weight(weight)
        before = self.capacity.utilization_percentage
        placed_at = placed_at or datetime.now(UTC)

        placement = Placement(item_id=item_id, slots_used=slots, weight_used=weight, placed_at=placed_at)
        with atomic_change(self):
            self.add_placements(placement)
            self.capacity = self.capacity.allocate(slots, weight)
        self.updated_at = placed_at

        self.raise_(
            ItemPlaced(
                shelf_id=str(self.id),
                placement_id=str(placement.id),
                item_id=str(item_id),
                warehouse_id=str(self.warehouse_id),
                zone_id=str(self.zone_id),
                slots_used=slots,
                weight_used=weight,
                used_slots=self.capacity.used_slots,
                total_slots=self.capacity.total_slots,
                placed_at=placed_at,
            )
        )

        after = self.capacity.utilization_percentage
        if before < CAPACITY_CRITICAL_PERCENT <= after:
            self.raise_(
                ShelfCapacityCritical(
                    shelf_id=str(self.id),
                    warehouse_id=str(self.warehouse_id),
                    code=self.code,
                    utilization_percentage=after,
                    threshold=CAPACITY_CRITICAL_PERCENT,
                    detected_at=placed_at,
                )
            )
        return placement

    def remove_placement(self, placement_id, removed_at=None):
        """Remove a placement and release exactly what it consumed."""
        placement = self.find_placement(placement_id)
        if placement is None:
            raise ValidationError({"placement_id": [f"Placement {placement_id} is not on shelf {self.code}"]})

        removed_at = removed_at or datetime.now(UTC)
        with atomic_change(self):
            self.remove_placements(placement)
            self.capacity = self.capacity.release(placement.slots_used, placement.weight_used or 0.0)
        self.updated_at = removed_at

        self.raise_(
            ItemRemoved(
                shelf_id=str(self.id),
                placement_id=str(placement.id),
                item_id=str(placement.item_id),
                warehouse_id=str(self.warehouse_id),
                zone_id=str(self.zone_id),
                slots_released=placement.slots_used,
                weight_released=placement.weight_used or 0.0,
                used_slots=self.capacity.used_slots,
                total_slots=self.capacity.total_slots,
                removed_at=removed_at,
            )
        )
        return placement

    @property
    def is_empty(self):
        return not self.placements and (self.capacity is None or self.capacity.used_slots == 0)

    def ensure_empty(self, action):
        if not self.is_empty:
            count = len(self.placements or [])
            raise ConflictError(
                f"Cannot {action} shelf {self.code}: {count} placement(s) still on it",
                blocking_placements=count,
                blocking_shelves=[str(self.id)],
            )

    def deactivate(self):
        if not self.is_active:
            raise ValidationError({"shelf": ["Shelf is already inactive"]})
        self.ensure_empty("deactivate")
        self.is_active = False
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ShelfDeactivated(
                shelf_id=str(self.id),
                rack_id=str(self.rack_id),
                deactivated_at=self.updated_at,
            )
        )

    # -------------------------------------------------------------------
    # Cleaning
    # -------------------------------------------------------------------
    def derived_cleaning_status(self, as_of):
        """Status the shelf should show at ``as_of``, never earlier than the stored one."""
        return advance(self.cleaning_status, derive_cleaning_status(self.next_cleaning_date, as_of))

    def record_cleaning(self, cleaned_at, now=None):
        now = now or datetime.now(UTC)
        cleaned_at = align(cleaned_at, now)
        if cleaned_at > now:
            raise ValidationError({"cleaned_at": ["Cleaning time cannot be in the future"]})

        previous = self.cleaning_status
        self.last_cleaned = cleaned_at
        self.next_cleaning_date = next_cleaning_date(cleaned_at)
        self.cleaning_status = CleaningStatus.CLEAN.value
        self.updated_at = now
        self.raise_(
            ShelfCleaned(
                shelf_id=str(self.id),
                warehouse_id=str(self.warehouse_id),
                cleaned_at=cleaned_at,
                next_cleaning_date=self.next_cleaning_date,
                previous_status=previous,
            )
        )

    def refresh_cleaning_status(self, as_of):
        """Persistable status advance. Returns True when the status changed."""
        status = self.derived_cleaning_status(as_of)
        if status == self.cleaning_status:
            return False

        self.cleaning_status = status
        if status == CleaningStatus.OVERDUE.value:
            self.raise_(
                ShelfCleaningOverdue(
                    shelf_id=str(self.id),
                    warehouse_id=str(self.warehouse_id),
                    code=self.code,
                    next_cleaning_date=self.next_cleaning_date,
                    detected_at=as_of,
                )
            )
        return True

    def to_summary(self):
        return {
            "shelf_id": str(self.id),
            "code": self.code,
            "name": self.name,
            "shelf_number": self.shelf_number,
            "capacity": self.capacity.to_summary(),
        }
