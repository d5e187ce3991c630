"""Placement service — the entry point for capacity-changing shelf operations.

Wraps the placement commands with advisory locks so that, per shelf, the
capacity check, the mutation and the commit happen as one step. The
warehouse of each affected shelf is locked as well, since the roll-up
rewrites every container in that branch.
"""

import structlog
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from warehousing.catalog import get_catalog
from warehousing.errors import ConcurrencyConflictError, StorageError
from warehousing.placement.assignment import AssignItem, MovePlacement, UnassignItem
from warehousing.placement.locations import locate_placement, placed_item_ids
from warehousing.placement.locks import capacity_locks
from warehousing.shelf.management import DeleteShelf, ResizeShelf
from warehousing.shelf.shelf import Shelf

logger = structlog.get_logger(__name__)


def _branch_keys(*shelves):
    keys = []
    for shelf in shelves:
        keys.append(f"shelf:{shelf.id}")
        keys.append(f"warehouse:{shelf.warehouse_id}")
    return keys


class PlacementService:
    def __init__(self, locks=None):
        self.locks = locks or capacity_locks

    def _process(self, command, entity, entity_id):
        try:
            return current_domain.process(command, asynchronous=False)
        except ExpectedVersionError as exc:
            logger.warning("Concurrent modification detected", entity=entity, entity_id=str(entity_id))
            raise ConcurrencyConflictError(entity, entity_id) from exc

    def assign(self, item_id, shelf_id, slots_required=None, weight_required=None):
        shelf = current_domain.repository_for(Shelf).get(shelf_id)
        # The item key keeps two concurrent assigns of one item from both passing the duplicate check
        with self.locks.holding(f"item:{item_id}", *_branch_keys(shelf)):
            return self._process(
                AssignItem(
                    item_id=item_id,
                    shelf_id=shelf_id,
                    slots_required=slots_required,
                    weight_required=weight_required,
                ),
                "Shelf",
                shelf_id,
            )

    def unassign(self, placement_id):
        shelf, _ = locate_placement(placement_id)
        with self.locks.holding(*_branch_keys(shelf)):
            return self._process(UnassignItem(placement_id=placement_id), "Shelf", shelf.id)

    def move(self, placement_id, new_shelf_id):
        source, _ = locate_placement(placement_id)
        target = current_domain.repository_for(Shelf).get(new_shelf_id)
        with self.locks.holding(*_branch_keys(source, target)):
            return self._process(
                MovePlacement(placement_id=placement_id, new_shelf_id=new_shelf_id),
                "Shelf",
                source.id,
            )

    def resize_shelf(self, shelf_id, total_slots=None, total_weight=None):
        shelf = current_domain.repository_for(Shelf).get(shelf_id)
        with self.locks.holding(*_branch_keys(shelf)):
            return self._process(
                ResizeShelf(shelf_id=shelf_id, total_slots=total_slots, total_weight=total_weight),
                "Shelf",
                shelf_id,
            )

    def delete_shelf(self, shelf_id):
        shelf = current_domain.repository_for(Shelf).get(shelf_id)
        with self.locks.holding(*_branch_keys(shelf)):
            return self._process(DeleteShelf(shelf_id=shelf_id), "Shelf", shelf_id)

    def assign_items_to_shelf(self, shelf_id, item_ids):
        """Attempt each item on its own. Returns one result per item, in order."""
        results = []
        for item_id in item_ids:
            try:
                placement = self.assign(item_id, shelf_id)
                results.append({"item_id": str(item_id), "status": "placed", "placement": placement})
            except StorageError as exc:
                results.append({"item_id": str(item_id), "status": "failed", **exc.to_dict()})
            except ValidationError as exc:
                results.append(
                    {"item_id": str(item_id), "status": "failed", "error": "validation_error", "messages": exc.messages}
                )
            except ObjectNotFoundError as exc:
                results.append(
                    {"item_id": str(item_id), "status": "failed", "error": "not_found", "messages": {"_entity": [str(exc)]}}
                )

        placed = sum(1 for r in results if r["status"] == "placed")
        logger.info("Bulk assignment finished", shelf_id=str(shelf_id), placed=placed, failed=len(results) - placed)
        return results

    def list_unassigned_items(self):
        placed = placed_item_ids()
        return [item for item in get_catalog().list_items() if str(item["item_id"]) not in placed]
