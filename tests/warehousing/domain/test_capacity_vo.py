"""Tests for the Capacity value object and the capacity arithmetic."""

import pytest
from protean.exceptions import ValidationError
from warehousing.shared.capacity import Capacity, add, empty, total_of, utilization


class TestUtilization:
    def test_zero_total_is_zero_percent(self):
        assert utilization(0, 0) == 0.0

    def test_rounds_to_two_decimals(self):
        assert utilization(3, 1) == 33.33

    def test_full_is_one_hundred(self):
        assert utilization(10, 10) == 100.0

    def test_negative_inputs_are_rejected(self):
        with pytest.raises(AssertionError):
            utilization(-1, 0)


class TestCapacityConstruction:
    def test_negative_totals_are_rejected(self):
        with pytest.raises(ValidationError):
            Capacity(total_slots=-1, used_slots=0, total_weight=0.0, used_weight=0.0)

    def test_negative_weight_is_rejected(self):
        with pytest.raises(ValidationError):
            Capacity(total_slots=1, used_slots=0, total_weight=-5.0, used_weight=0.0)

    def test_used_above_total_is_rejected(self):
        with pytest.raises(ValidationError) as exc:
            Capacity(total_slots=5, used_slots=6, total_weight=10.0, used_weight=0.0)
        assert "used_slots" in exc.value.messages

    def test_used_weight_above_total_is_rejected(self):
        with pytest.raises(ValidationError):
            Capacity(total_slots=5, used_slots=0, total_weight=10.0, used_weight=10.5)


class TestDerivedFigures:
    def test_available(self):
        cap = Capacity(total_slots=10, used_slots=4, total_weight=50.0, used_weight=12.5)
        assert cap.available_slots == 6
        assert cap.available_weight == 37.5

    def test_utilization_is_slot_based(self):
        cap = Capacity(total_slots=20, used_slots=12, total_weight=100.0, used_weight=10.0)
        assert cap.utilization_percentage == 60.0
        assert cap.weight_utilization_percentage == 10.0

    def test_can_accommodate_exact_fit(self):
        cap = Capacity(total_slots=10, used_slots=6, total_weight=10.0, used_weight=6.0)
        assert cap.can_accommodate(4, 4.0)
        assert not cap.can_accommodate(5, 1.0)
        assert not cap.can_accommodate(1, 4.5)


class TestCapacityOperations:
    def test_allocate_returns_new_value(self):
        cap = Capacity(total_slots=10, used_slots=0, total_weight=10.0, used_weight=0.0)
        allocated = cap.allocate(3, 1.25)
        assert allocated.used_slots == 3
        assert allocated.used_weight == 1.25
        assert cap.used_slots == 0

    def test_release_restores_previous_use(self):
        cap = Capacity(total_slots=10, used_slots=0, total_weight=10.0, used_weight=0.0)
        assert cap.allocate(3, 0.1).allocate(2, 0.2).release(2, 0.2).release(3, 0.1) == cap

    def test_allocate_past_total_is_rejected(self):
        cap = Capacity(total_slots=2, used_slots=0, total_weight=10.0, used_weight=0.0)
        with pytest.raises(ValidationError):
            cap.allocate(3, 0.0)

    def test_resize_keeps_use(self):
        cap = Capacity(total_slots=10, used_slots=4, total_weight=10.0, used_weight=2.0)
        resized = cap.resize(20, 40.0)
        assert resized.total_slots == 20
        assert resized.used_slots == 4
        assert resized.utilization_percentage == 20.0


class TestSums:
    def test_add_is_element_wise(self):
        a = Capacity(total_slots=10, used_slots=6, total_weight=10.0, used_weight=1.5)
        b = Capacity(total_slots=10, used_slots=6, total_weight=5.0, used_weight=0.5)
        total = add(a, b)
        assert (total.total_slots, total.used_slots) == (20, 12)
        assert (total.total_weight, total.used_weight) == (15.0, 2.0)

    def test_total_of_nothing_is_empty(self):
        assert total_of([]) == empty()

    def test_total_of_ignores_missing(self):
        a = Capacity(total_slots=4, used_slots=1, total_weight=2.0, used_weight=0.0)
        assert total_of([a, None]) == a
