"""Runtime settings for the warehousing domain, read from the environment."""

import os

CLEANING_INTERVAL_DAYS = int(os.environ.get("WAREHOUSING_CLEANING_INTERVAL_DAYS", "30"))
CLEANING_WARNING_DAYS = int(os.environ.get("WAREHOUSING_CLEANING_WARNING_DAYS", "5"))
UPCOMING_CLEANING_DAYS = int(os.environ.get("WAREHOUSING_UPCOMING_CLEANING_DAYS", "7"))

# Shelf utilization (percent) at which a ShelfCapacityCritical alert is raised
CAPACITY_CRITICAL_PERCENT = float(os.environ.get("WAREHOUSING_CAPACITY_CRITICAL_PERCENT", "90"))

CATALOG_ADAPTER = os.environ.get("WAREHOUSING_CATALOG_ADAPTER", "fake")
NOTIFICATION_SINK = os.environ.get("WAREHOUSING_NOTIFICATION_SINK", "fake")

# Rows fetched per repository round trip when scanning
QUERY_PAGE_SIZE = int(os.environ.get("WAREHOUSING_QUERY_PAGE_SIZE", "500"))

# Items the fake catalog starts with, so a locally run server has stock to place
FAKE_CATALOG_SEED_ITEMS = int(os.environ.get("WAREHOUSING_FAKE_CATALOG_SEED_ITEMS", "0"))
