"""Environmental attributes shared by zones and the items placed in them."""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, String

from warehousing.domain import warehousing


class SecurityLevel(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


_SECURITY_RANK = {
    SecurityLevel.LOW.value: 0,
    SecurityLevel.MEDIUM.value: 1,
    SecurityLevel.HIGH.value: 2,
}


def security_rank(level):
    try:
        return _SECURITY_RANK[level]
    except KeyError:
        raise ValidationError({"security_level": [f"Unknown security level: {level!r}"]}) from None


class TemperatureUnit(Enum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"


@warehousing.value_object
class TemperatureRange:
    """Closed temperature interval [min, max] in the given unit."""

    min = Float(required=True)
    max = Float(required=True)
    unit = String(choices=TemperatureUnit, default=TemperatureUnit.CELSIUS.value)

    @invariant.post
    def min_cannot_exceed_max(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValidationError({"temperature_range": [f"Minimum {self.min} is above maximum {self.max}"]})

    def in_celsius(self):
        if self.unit == TemperatureUnit.FAHRENHEIT.value:
            return TemperatureRange(
                min=round((self.min - 32) * 5 / 9, 2),
                max=round((self.max - 32) * 5 / 9, 2),
                unit=TemperatureUnit.CELSIUS.value,
            )
        return self

    def in_unit(self, unit):
        """The same interval expressed in ``unit``."""
        if unit == self.unit:
            return self
        if unit == TemperatureUnit.FAHRENHEIT.value:
            return TemperatureRange(
                min=round(self.min * 9 / 5 + 32, 2),
                max=round(self.max * 9 / 5 + 32, 2),
                unit=TemperatureUnit.FAHRENHEIT.value,
            )
        return self.in_celsius()

    def contains(self, other):
        """True when ``other`` lies entirely within this range."""
        ours, theirs = self.in_celsius(), other.in_celsius()
        return ours.min <= theirs.min and theirs.max <= ours.max

    def describe(self):
        symbol = "°F" if self.unit == TemperatureUnit.FAHRENHEIT.value else "°C"
        return f"[{self.min:g}, {self.max:g}]{symbol}"

    def to_summary(self):
        return {"min": self.min, "max": self.max, "unit": self.unit}


class AccessLevel(Enum):
    PUBLIC = "public"
    RESTRICTED = "restricted"
    AUTHORIZED_ONLY = "authorized_only"


@warehousing.value_object
class HumidityRange:
    """Relative humidity interval [min, max] in percent."""

    min = Float(required=True, min_value=0.0, max_value=100.0)
    max = Float(required=True, min_value=0.0, max_value=100.0)

    @invariant.post
    def min_cannot_exceed_max(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValidationError({"humidity_range": [f"Minimum {self.min} is above maximum {self.max}"]})

    def contains(self, other):
        return self.min <= other.min and other.max <= self.max

    def describe(self):
        return f"[{self.min:g}, {self.max:g}]%RH"

    def to_summary(self):
        return {"min": self.min, "max": self.max}


def as_temperature_range(value):
    if value is None or isinstance(value, TemperatureRange):
        return value
    return TemperatureRange(**value)


def as_humidity_range(value):
    if value is None or isinstance(value, HumidityRange):
        return value
    return HumidityRange(**value)


@warehousing.value_object
class StorageConditions:
    """What a single shelf can provide beyond its zone.

    A shelf's own temperature and humidity bands narrow the zone's. The two
    flags mark shelves shielded from light and shelves with their own cooling.
    """

    temperature_min = Float()
    temperature_max = Float()
    temperature_unit = String(choices=TemperatureUnit, default=TemperatureUnit.CELSIUS.value)
    humidity_min = Float(min_value=0.0, max_value=100.0)
    humidity_max = Float(min_value=0.0, max_value=100.0)
    light_sensitive = Boolean(default=False)
    refrigerated = Boolean(default=False)

    @invariant.post
    def bounds_come_in_pairs(self):
        if (self.temperature_min is None) != (self.temperature_max is None):
            raise ValidationError({"storage_conditions": ["Temperature needs both a minimum and a maximum"]})
        if (self.humidity_min is None) != (self.humidity_max is None):
            raise ValidationError({"storage_conditions": ["Humidity needs both a minimum and a maximum"]})
        if self.temperature_min is not None and self.temperature_min > self.temperature_max:
            raise ValidationError({"storage_conditions": ["Minimum temperature is above the maximum"]})
        if self.humidity_min is not None and self.humidity_min > self.humidity_max:
            raise ValidationError({"storage_conditions": ["Minimum humidity is above the maximum"]})

    @classmethod
    def from_summary(cls, summary):
        temperature = as_temperature_range(summary.get("temperature"))
        humidity = as_humidity_range(summary.get("humidity"))
        return cls(
            temperature_min=temperature.min if temperature else None,
            temperature_max=temperature.max if temperature else None,
            temperature_unit=temperature.unit if temperature else TemperatureUnit.CELSIUS.value,
            humidity_min=humidity.min if humidity else None,
            humidity_max=humidity.max if humidity else None,
            light_sensitive=bool(summary.get("light_sensitive")),
            refrigerated=bool(summary.get("refrigerated")),
        )

    @property
    def temperature_range(self):
        if self.temperature_min is None:
            return None
        return TemperatureRange(min=self.temperature_min, max=self.temperature_max, unit=self.temperature_unit)

    @property
    def humidity_range(self):
        if self.humidity_min is None:
            return None
        return HumidityRange(min=self.humidity_min, max=self.humidity_max)

    def to_summary(self):
        temperature = self.temperature_range
        humidity = self.humidity_range
        return {
            "temperature": temperature.to_summary() if temperature else None,
            "humidity": humidity.to_summary() if humidity else None,
            "light_sensitive": bool(self.light_sensitive),
            "refrigerated": bool(self.refrigerated),
        }
