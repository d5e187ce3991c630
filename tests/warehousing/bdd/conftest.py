"""Shared BDD fixtures and step definitions for capacity allocation."""

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then
from warehousing.errors import StorageError
from warehousing.placement.assignment import AssignItem
from warehousing.shelf.shelf import Shelf
from warehousing.warehouse.warehouse import Warehouse


@pytest.fixture()
def outcome():
    """Mutable holder for the result (or error) of the When step."""
    return {}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.parse("an ambient warehouse branch with a shelf of {slots:d} slots and {weight:g} kg"),
    target_fixture="branch",
)
def _(build, slots, weight):
    return build.branch(total_slots=slots, total_weight=weight)


@given(parsers.parse("a catalog item needing {slots:d} slots and {weight:g} kg"), target_fixture="item")
def _(catalog, slots, weight):
    return catalog.register_item("Paracetamol 500mg", size_slots=slots, weight=weight)


@given("the item is already on the shelf", target_fixture="placement")
def _(branch, item):
    return current_domain.process(AssignItem(item_id=item["item_id"], shelf_id=branch.shelf_id), asynchronous=False)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.parse("the shelf has {slots:d} used slots"))
def _(branch, slots):
    shelf = current_domain.repository_for(Shelf).get(branch.shelf_id)
    assert shelf.capacity.used_slots == slots
    assert sum(p.slots_used for p in shelf.placements) == slots


@then(parsers.parse("the warehouse utilization is {percentage:g} percent"))
def _(branch, percentage):
    warehouse = current_domain.repository_for(Warehouse).get(branch.warehouse_id)
    assert warehouse.capacity.utilization_percentage == percentage


@then(parsers.parse('the assignment fails with "{code}"'))
def _(outcome, code):
    error = outcome.get("error")
    assert isinstance(error, StorageError)
    assert error.code == code
