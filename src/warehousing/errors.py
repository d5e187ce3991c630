"""Expected failure outcomes of storage operations.

Field-level problems use Protean's ``ValidationError`` and missing records use
``ObjectNotFoundError``; the classes here cover the outcomes specific to
capacity allocation. Each carries a ``messages`` dict shaped like Protean's
error messages plus structured details the API layer passes to the caller.
"""


class StorageError(Exception):
    """Base class for expected storage outcomes surfaced to the API layer."""

    code = "storage_error"

    def __init__(self, messages: dict, **details):
        self.messages = messages
        self.details = details
        super().__init__(messages)

    def to_dict(self) -> dict:
        return {"error": self.code, "messages": self.messages, "detail": self.details}


class CapacityExceededError(StorageError):
    """A placement would oversell a shelf."""

    code = "capacity_exceeded"

    def __init__(self, shelf_id, required_slots, available_slots, required_weight, available_weight):
        problems = []
        if required_slots > available_slots:
            problems.append(f"needs {required_slots} slots, has {available_slots} available")
        if required_weight > available_weight:
            problems.append(f"needs {required_weight} kg, has {available_weight} kg available")
        super().__init__(
            {"capacity": problems},
            shelf_id=str(shelf_id),
            required_slots=required_slots,
            available_slots=available_slots,
            required_weight=required_weight,
            available_weight=available_weight,
        )


class IncompatibleZoneError(StorageError):
    """An item's environmental requirements are not met by the target zone or shelf."""

    code = "incompatible_zone"

    def __init__(self, zone_id, mismatches: dict, shelf_id=None):
        super().__init__(
            {"zone": [m["message"] for m in mismatches.values()]},
            zone_id=str(zone_id),
            shelf_id=str(shelf_id) if shelf_id else None,
            mismatches=mismatches,
        )


class ConflictError(StorageError):
    """A container still holds stock and cannot be removed or deactivated."""

    code = "conflict"

    def __init__(self, message: str, blocking_placements: int = 0, blocking_shelves: list | None = None):
        super().__init__(
            {"conflict": [message]},
            blocking_placements=blocking_placements,
            blocking_shelves=blocking_shelves or [],
        )


class ConcurrencyConflictError(StorageError):
    """A concurrent change won the race for the same record; safe to retry."""

    code = "concurrency_conflict"

    def __init__(self, entity: str, entity_id):
        super().__init__(
            {"concurrency": [f"{entity} {entity_id} was modified concurrently, retry the operation"]},
            entity=entity,
            entity_id=str(entity_id),
            retryable=True,
        )
