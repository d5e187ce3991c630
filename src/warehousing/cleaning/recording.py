"""Shelf cleaning — commands and handler for recording cleanings and advancing statuses.

Statuses are advanced by an externally triggered command (a cron job calling
the maintenance endpoint); nothing in the service runs on a timer.
"""

from datetime import UTC, datetime

import structlog
from protean import handle
from protean.fields import DateTime, Identifier, String
from protean.utils.globals import current_domain

from warehousing.cleaning.schedule import CleaningStatus
from warehousing.domain import warehousing
from warehousing.shared.queries import find
from warehousing.shelf.shelf import Shelf

logger = structlog.get_logger(__name__)


@warehousing.command(part_of="Shelf")
class RecordShelfCleaning:
    """Record that a shelf was cleaned."""

    shelf_id = Identifier(required=True)
    cleaned_at = DateTime()  # Optional: defaults to now


@warehousing.command(part_of="Shelf")
class RefreshCleaningStatuses:
    """Advance stored cleaning statuses to what the schedule says they should be."""

    as_of = DateTime()  # Optional: defaults to now
    warehouse_id = Identifier()
    cleaning_status = String()  # Restrict to shelves currently in this status


@warehousing.command_handler(part_of=Shelf)
class ShelfCleaningHandler:
    @handle(RecordShelfCleaning)
    def record_cleaning(self, command):
        repo = current_domain.repository_for(Shelf)
        shelf = repo.get(command.shelf_id)
        now = datetime.now(UTC)
        shelf.record_cleaning(command.cleaned_at or now, now=now)
        repo.add(shelf)
        logger.info(
            "Shelf cleaning recorded",
            shelf_id=str(shelf.id),
            next_cleaning_date=shelf.next_cleaning_date.isoformat(),
        )
        return shelf.next_cleaning_date

    @handle(RefreshCleaningStatuses)
    def refresh_statuses(self, command):
        as_of = command.as_of or datetime.now(UTC)
        filters = {"is_active": True}
        if command.warehouse_id:
            filters["warehouse_id"] = str(command.warehouse_id)
        if command.cleaning_status:
            filters["cleaning_status"] = command.cleaning_status

        repo = current_domain.repository_for(Shelf)
        changed = {status.value: 0 for status in CleaningStatus}
        for shelf in find(Shelf, **filters):
            if shelf.refresh_cleaning_status(as_of):
                repo.add(shelf)
                changed[shelf.cleaning_status] += 1

        logger.info("Cleaning statuses refreshed", as_of=as_of.isoformat(), **changed)
        return changed
