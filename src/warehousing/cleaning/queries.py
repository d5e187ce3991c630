"""Cleaning schedule queries — overdue and upcoming shelves. Read only."""

from datetime import UTC, datetime, timedelta

from protean.exceptions import ValidationError

from warehousing.cleaning.schedule import CleaningStatus, align
from warehousing.config import UPCOMING_CLEANING_DAYS
from warehousing.shared.queries import find
from warehousing.shelf.shelf import Shelf


def _active_shelves(warehouse_id=None):
    filters = {"is_active": True}
    if warehouse_id:
        filters["warehouse_id"] = str(warehouse_id)
    return [shelf for shelf in find(Shelf, **filters) if shelf.next_cleaning_date is not None]


def _entry(shelf, as_of, status):
    due = align(shelf.next_cleaning_date, as_of)
    return {
        "shelf_id": str(shelf.id),
        "code": shelf.code,
        "name": shelf.name,
        "rack_id": str(shelf.rack_id),
        "zone_id": str(shelf.zone_id),
        "warehouse_id": str(shelf.warehouse_id),
        "cleaning_status": status,
        "last_cleaned": shelf.last_cleaned.isoformat() if shelf.last_cleaned else None,
        "next_cleaning_date": due.isoformat(),
        "days_until_due": (due - as_of).days,
    }


def list_overdue(as_of=None, warehouse_id=None):
    """Active shelves past their cleaning date at ``as_of``, oldest first."""
    as_of = as_of or datetime.now(UTC)
    overdue = [
        shelf
        for shelf in _active_shelves(warehouse_id)
        if shelf.derived_cleaning_status(as_of) == CleaningStatus.OVERDUE.value
    ]
    overdue.sort(key=lambda shelf: align(shelf.next_cleaning_date, as_of))
    return [_entry(shelf, as_of, CleaningStatus.OVERDUE.value) for shelf in overdue]


def list_upcoming(within_days=None, as_of=None, warehouse_id=None):
    """Active shelves due within ``within_days`` of ``as_of`` and not yet overdue."""
    within_days = UPCOMING_CLEANING_DAYS if within_days is None else within_days
    if within_days < 0:
        raise ValidationError({"within_days": ["Must be zero or more"]})
    as_of = as_of or datetime.now(UTC)
    horizon = as_of + timedelta(days=within_days)

    upcoming = [
        shelf
        for shelf in _active_shelves(warehouse_id)
        if as_of < align(shelf.next_cleaning_date, as_of) <= horizon
    ]
    upcoming.sort(key=lambda shelf: align(shelf.next_cleaning_date, as_of))
    return [_entry(shelf, as_of, shelf.derived_cleaning_status(as_of)) for shelf in upcoming]
