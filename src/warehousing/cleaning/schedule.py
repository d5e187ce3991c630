"""Shelf cleaning schedule — status derivation.

A shelf moves ``clean -> needs_cleaning -> overdue`` as time passes and only
returns to ``clean`` when a cleaning is recorded. The functions here are pure;
the Shelf aggregate and the cleaning handlers apply them.
"""

from datetime import timedelta
from enum import Enum

from warehousing.config import CLEANING_INTERVAL_DAYS, CLEANING_WARNING_DAYS


class CleaningStatus(Enum):
    CLEAN = "clean"
    NEEDS_CLEANING = "needs_cleaning"
    OVERDUE = "overdue"


_ORDER = {
    CleaningStatus.CLEAN.value: 0,
    CleaningStatus.NEEDS_CLEANING.value: 1,
    CleaningStatus.OVERDUE.value: 2,
}


def align(moment, reference):
    """Make ``moment`` comparable with ``reference`` (naive vs aware)."""
    if moment is None or reference is None:
        return moment
    if moment.tzinfo is not None and reference.tzinfo is None:
        return moment.replace(tzinfo=None)
    if moment.tzinfo is None and reference.tzinfo is not None:
        return moment.replace(tzinfo=reference.tzinfo)
    return moment


def next_cleaning_date(cleaned_at, interval_days=None):
    interval = CLEANING_INTERVAL_DAYS if interval_days is None else interval_days
    return cleaned_at + timedelta(days=interval)


def derive_cleaning_status(next_cleaning, now, warning_days=None):
    """Status a shelf due on ``next_cleaning`` should have at ``now``."""
    if next_cleaning is None:
        return CleaningStatus.CLEAN.value
    warning = CLEANING_WARNING_DAYS if warning_days is None else warning_days
    next_cleaning = align(next_cleaning, now)
    if now >= next_cleaning:
        return CleaningStatus.OVERDUE.value
    if now >= next_cleaning - timedelta(days=warning):
        return CleaningStatus.NEEDS_CLEANING.value
    return CleaningStatus.CLEAN.value


def advance(current, derived):
    """The later of two statuses; time alone never moves a shelf back to clean."""
    if _ORDER.get(derived, 0) > _ORDER.get(current, 0):
        return derived
    return current or derived
