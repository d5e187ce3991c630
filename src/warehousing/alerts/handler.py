"""Storage alerts — forwards capacity and cleaning warnings to the notification sink."""

import structlog
from protean import handle

from warehousing.alerts import get_notification_sink
from warehousing.domain import warehousing
from warehousing.shelf.events import ShelfCapacityCritical, ShelfCleaningOverdue
from warehousing.shelf.shelf import Shelf

logger = structlog.get_logger(__name__)


def _deliver(event_type, payload):
    result = get_notification_sink().publish(event_type, payload)
    if result.get("status") != "sent":
        logger.warning("Alert delivery failed", event_type=event_type, error=result.get("error"), **payload)
    return result


@warehousing.event_handler(part_of=Shelf)
class StorageAlertsHandler:
    """Turns shelf warnings into operator alerts."""

    @handle(ShelfCapacityCritical)
    def on_capacity_critical(self, event: ShelfCapacityCritical) -> None:
        logger.warning(
            "Shelf capacity critical",
            shelf_id=str(event.shelf_id),
            utilization=event.utilization_percentage,
            threshold=event.threshold,
        )
        _deliver(
            "capacity_critical",
            {
                "shelf_id": str(event.shelf_id),
                "warehouse_id": str(event.warehouse_id),
                "code": event.code,
                "utilization_percentage": event.utilization_percentage,
                "threshold": event.threshold,
            },
        )

    @handle(ShelfCleaningOverdue)
    def on_cleaning_overdue(self, event: ShelfCleaningOverdue) -> None:
        logger.warning("Shelf cleaning overdue", shelf_id=str(event.shelf_id), code=event.code)
        _deliver(
            "cleaning_overdue",
            {
                "shelf_id": str(event.shelf_id),
                "warehouse_id": str(event.warehouse_id),
                "code": event.code,
                "next_cleaning_date": event.next_cleaning_date.isoformat(),
            },
        )
