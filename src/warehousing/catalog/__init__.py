"""Inventory catalog adapter — where item sizes, requirements and locations come from."""

from warehousing.config import CATALOG_ADAPTER, FAKE_CATALOG_SEED_ITEMS

_catalog_instance = None


def get_catalog():
    """Return the configured inventory catalog adapter (singleton).

    Uses FakeInventoryCatalog by default. Select another adapter with the
    WAREHOUSING_CATALOG_ADAPTER environment variable.
    """
    global _catalog_instance
    if _catalog_instance is None:
        if CATALOG_ADAPTER == "fake":
            from warehousing.catalog.fake_catalog import FakeInventoryCatalog

            _catalog_instance = FakeInventoryCatalog()
            _catalog_instance.seed(FAKE_CATALOG_SEED_ITEMS)
        else:
            raise ValueError(f"Unknown catalog adapter: {CATALOG_ADAPTER}")
    return _catalog_instance


def reset_catalog():
    """Reset the catalog singleton (useful for testing)."""
    global _catalog_instance
    _catalog_instance = None
