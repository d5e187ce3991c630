"""Application tests for cleaning records, status refresh and schedule queries."""

from datetime import UTC, datetime, timedelta

import pytest
from protean import current_domain
from protean.exceptions import ValidationError
from warehousing.cleaning.queries import list_overdue, list_upcoming
from warehousing.cleaning.recording import RecordShelfCleaning, RefreshCleaningStatuses
from warehousing.shelf.management import DeactivateShelf
from warehousing.shelf.shelf import Shelf


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _shelf(shelf_id):
    return current_domain.repository_for(Shelf).get(shelf_id)


class TestRecordCleaning:
    def test_record_cleaning_resets_schedule(self, build):
        branch = build.branch()
        cleaned_at = datetime.now(UTC) - timedelta(days=2)

        next_date = _process(RecordShelfCleaning(shelf_id=branch.shelf_id, cleaned_at=cleaned_at))

        shelf = _shelf(branch.shelf_id)
        assert shelf.cleaning_status == "clean"
        assert next_date == shelf.next_cleaning_date
        assert shelf.next_cleaning_date - shelf.last_cleaned == timedelta(days=30)

    def test_default_cleaning_time_is_now(self, build):
        branch = build.branch()
        before = datetime.now(UTC)
        _process(RecordShelfCleaning(shelf_id=branch.shelf_id))
        last_cleaned = _shelf(branch.shelf_id).last_cleaned
        assert last_cleaned.replace(tzinfo=None) >= before.replace(tzinfo=None)

    def test_future_cleaning_is_rejected(self, build):
        branch = build.branch()
        with pytest.raises(ValidationError):
            _process(RecordShelfCleaning(shelf_id=branch.shelf_id, cleaned_at=datetime.now(UTC) + timedelta(days=1)))


class TestRefreshStatuses:
    def test_refresh_advances_statuses(self, build, sink):
        branch = build.branch()
        now = datetime.now(UTC)

        counts = _process(RefreshCleaningStatuses(as_of=now + timedelta(days=27)))
        assert counts["needs_cleaning"] == 1
        assert _shelf(branch.shelf_id).cleaning_status == "needs_cleaning"

        counts = _process(RefreshCleaningStatuses(as_of=now + timedelta(days=31)))
        assert counts["overdue"] == 1
        assert _shelf(branch.shelf_id).cleaning_status == "overdue"

        alerts = sink.of_type("cleaning_overdue")
        assert len(alerts) == 1
        assert alerts[0]["payload"]["shelf_id"] == branch.shelf_id

    def test_refresh_is_idempotent(self, build, sink):
        build.branch()
        as_of = datetime.now(UTC) + timedelta(days=31)
        _process(RefreshCleaningStatuses(as_of=as_of))
        counts = _process(RefreshCleaningStatuses(as_of=as_of))
        assert counts == {"clean": 0, "needs_cleaning": 0, "overdue": 0}
        assert len(sink.of_type("cleaning_overdue")) == 1

    def test_refresh_can_be_scoped_to_a_warehouse(self, build):
        first = build.branch()
        second = build.branch()
        as_of = datetime.now(UTC) + timedelta(days=31)
        _process(RefreshCleaningStatuses(as_of=as_of, warehouse_id=first.warehouse_id))
        assert _shelf(first.shelf_id).cleaning_status == "overdue"
        assert _shelf(second.shelf_id).cleaning_status == "clean"


class TestScheduleQueries:
    def test_overdue_lists_shelves_past_due(self, build):
        branch = build.branch()
        as_of = datetime.now(UTC) + timedelta(days=35)

        overdue = list_overdue(as_of=as_of)

        assert [entry["shelf_id"] for entry in overdue] == [branch.shelf_id]
        assert overdue[0]["cleaning_status"] == "overdue"
        assert overdue[0]["days_until_due"] < 0

    def test_upcoming_window(self, build):
        branch = build.branch()
        now = datetime.now(UTC)

        assert list_upcoming(within_days=7, as_of=now) == []
        upcoming = list_upcoming(within_days=7, as_of=now + timedelta(days=25))
        assert [entry["shelf_id"] for entry in upcoming] == [branch.shelf_id]
        assert upcoming[0]["cleaning_status"] == "needs_cleaning"
        assert list_overdue(as_of=now + timedelta(days=25)) == []

    def test_inactive_shelves_are_ignored(self, build):
        branch = build.branch()
        _process(DeactivateShelf(shelf_id=branch.shelf_id))
        assert list_overdue(as_of=datetime.now(UTC) + timedelta(days=40)) == []

    def test_negative_window_is_rejected(self):
        with pytest.raises(ValidationError):
            list_upcoming(within_days=-1)
