"""Fake inventory catalog — in-memory items for tests and local development."""

from uuid import uuid4

from protean.exceptions import ObjectNotFoundError

from warehousing.catalog.port import InventoryCatalogPort


class FakeInventoryCatalog(InventoryCatalogPort):
    """Catalog that keeps items in a dict and records location updates."""

    def __init__(self):
        self.items: dict[str, dict] = {}
        self.location_updates: list[tuple[str, str | None]] = []

    def register_item(
        self,
        name: str,
        size_slots: int = 1,
        weight: float = 0.0,
        required_temperature_range: dict | None = None,
        required_security_level: str | None = None,
        item_id: str | None = None,
        required_humidity_range: dict | None = None,
        light_sensitive: bool = False,
        requires_refrigeration: bool = False,
    ) -> dict:
        """Add an item to the catalog and return it."""
        item_id = item_id or str(uuid4())
        self.items[item_id] = {
            "item_id": item_id,
            "name": name,
            "size_slots": size_slots,
            "weight": weight,
            "required_temperature_range": required_temperature_range,
            "required_security_level": required_security_level,
            "required_humidity_range": required_humidity_range,
            "light_sensitive": light_sensitive,
            "requires_refrigeration": requires_refrigeration,
            "shelf_id": None,
        }
        return dict(self.items[item_id])

    def get_item(self, item_id: str) -> dict:
        try:
            return dict(self.items[str(item_id)])
        except KeyError:
            raise ObjectNotFoundError(f"Inventory item {item_id} does not exist") from None

    def set_item_location(self, item_id: str, shelf_id: str | None) -> None:
        if str(item_id) not in self.items:
            raise ObjectNotFoundError(f"Inventory item {item_id} does not exist")
        self.items[str(item_id)]["shelf_id"] = str(shelf_id) if shelf_id else None
        self.location_updates.append((str(item_id), str(shelf_id) if shelf_id else None))

    def list_items(self) -> list[dict]:
        return [dict(item) for item in self.items.values()]

    def seed(self, count: int) -> list[dict]:
        """Register ``count`` unconstrained items of mixed sizes."""
        return [
            self.register_item(f"Stock item {n:05d}", size_slots=1 + n % 3, weight=0.5 * (1 + n % 4))
            for n in range(count)
        ]

    def reset(self):
        """Forget all items (useful between tests)."""
        self.items.clear()
        self.location_updates.clear()
