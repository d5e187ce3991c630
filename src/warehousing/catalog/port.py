"""Inventory catalog port — abstract interface to the item catalog.

Items are owned by the inventory system. Warehousing only reads their size
and storage requirements and writes back which shelf an item sits on.
"""

from abc import ABC, abstractmethod


class InventoryCatalogPort(ABC):
    """Abstract interface for inventory catalog adapters."""

    @abstractmethod
    def get_item(self, item_id: str) -> dict:
        """Look up an inventory item.

        Returns:
            dict with keys: item_id, name, size_slots, weight,
            required_temperature_range (dict with min/max/unit, optional),
            required_security_level (optional), required_humidity_range
            (dict with min/max, optional), light_sensitive, requires_refrigeration,
            shelf_id (None when unplaced)

        Raises:
            ObjectNotFoundError: the item does not exist
        """
        ...

    @abstractmethod
    def set_item_location(self, item_id: str, shelf_id: str | None) -> None:
        """Record the shelf an item now sits on, or None once removed."""
        ...

    @abstractmethod
    def list_items(self) -> list[dict]:
        """Every catalog item, in the shape returned by ``get_item``."""
        ...
