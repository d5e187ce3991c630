"""Capacity value object and the arithmetic every container level shares.

A capacity is tracked in two dimensions, slots and weight (kg). Utilization is
slot based; weight utilization is reported separately. A container with no
slots reports 0% rather than failing.
"""

import math

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Float, Integer

from warehousing.domain import warehousing

# Weights are kept to gram precision so repeated sums don't drift
_WEIGHT_PRECISION = 3


def round_weight(value):
    return round(float(value or 0.0), _WEIGHT_PRECISION)


def weights_equal(a, b):
    return math.isclose(a or 0.0, b or 0.0, abs_tol=10**-_WEIGHT_PRECISION / 2)


def utilization(total, used):
    """Percentage of ``total`` consumed by ``used``, clamped to [0, 100]."""
    assert total >= 0 and used >= 0, "capacity figures cannot be negative"
    if total == 0:
        return 0.0
    return round(min(max(used / total * 100, 0.0), 100.0), 2)


@warehousing.value_object
class Capacity:
    """Slot and weight capacity of a container, with its current use."""

    total_slots = Integer(default=0, min_value=0)
    used_slots = Integer(default=0, min_value=0)
    total_weight = Float(default=0.0, min_value=0.0)
    used_weight = Float(default=0.0, min_value=0.0)

    @invariant.post
    def usage_cannot_exceed_totals(self):
        if (self.used_slots or 0) > (self.total_slots or 0):
            raise ValidationError(
                {"used_slots": [f"Used slots ({self.used_slots}) exceed total slots ({self.total_slots})"]}
            )
        if (self.used_weight or 0.0) > (self.total_weight or 0.0) and not weights_equal(
            self.used_weight, self.total_weight
        ):
            raise ValidationError(
                {"used_weight": [f"Used weight ({self.used_weight}) exceeds total weight ({self.total_weight})"]}
            )

    @property
    def available_slots(self):
        return (self.total_slots or 0) - (self.used_slots or 0)

    @property
    def available_weight(self):
        return round_weight((self.total_weight or 0.0) - (self.used_weight or 0.0))

    @property
    def utilization_percentage(self):
        return utilization(self.total_slots or 0, self.used_slots or 0)

    @property
    def weight_utilization_percentage(self):
        return utilization(self.total_weight or 0.0, self.used_weight or 0.0)

    def can_accommodate(self, slots, weight):
        return self.available_slots >= slots and (
            self.available_weight >= weight or weights_equal(self.available_weight, weight)
        )

    def allocate(self, slots, weight):
        return Capacity(
            total_slots=self.total_slots,
            used_slots=self.used_slots + slots,
            total_weight=self.total_weight,
            used_weight=round_weight(self.used_weight + weight),
        )

    def release(self, slots, weight):
        return Capacity(
            total_slots=self.total_slots,
            used_slots=self.used_slots - slots,
            total_weight=self.total_weight,
            used_weight=max(round_weight(self.used_weight - weight), 0.0),
        )

    def resize(self, total_slots, total_weight):
        return Capacity(
            total_slots=total_slots,
            used_slots=self.used_slots,
            total_weight=round_weight(total_weight),
            used_weight=self.used_weight,
        )

    def to_summary(self):
        return {
            "total_slots": self.total_slots,
            "used_slots": self.used_slots,
            "available_slots": self.available_slots,
            "total_weight": self.total_weight,
            "used_weight": self.used_weight,
            "available_weight": self.available_weight,
            "utilization_percentage": self.utilization_percentage,
            "weight_utilization_percentage": self.weight_utilization_percentage,
        }


def empty():
    return Capacity(total_slots=0, used_slots=0, total_weight=0.0, used_weight=0.0)


def add(a, b):
    """Element-wise sum of two capacities."""
    return Capacity(
        total_slots=a.total_slots + b.total_slots,
        used_slots=a.used_slots + b.used_slots,
        total_weight=round_weight(a.total_weight + b.total_weight),
        used_weight=round_weight(a.used_weight + b.used_weight),
    )


def total_of(capacities):
    result = empty()
    for capacity in capacities:
        if capacity is not None:
            result = add(result, capacity)
    return result
