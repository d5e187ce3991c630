"""Warehousing bounded context — Storage Hierarchy and Capacity Allocation.

Models the physical containment chain Warehouse -> Zone -> Rack -> Shelf,
tracks slot and weight capacity at every level, places inventory items on
shelves under capacity and environmental constraints, and keeps per-shelf
cleaning schedules.
"""

from protean.domain import Domain

from warehousing.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

warehousing = Domain(name="warehousing")
