"""Timeline core for Chronology.

This package contains the pure bucketing logic and its data structures:

- **group_by**: Partition primitive used at both levels
- **bucketize**: Two-level slot/cluster grouping with slot trimming
- **Taxonomy**: Label schemes for the day and week views

Example:
    >>> from chronology.core import CalendarGranularity, TimedItem
    >>>
    >>> taxonomy = CalendarGranularity.DAY.taxonomy()
    >>> slots = taxonomy.bucketize(items)
    >>> for slot in slots:
    ...     print(slot.label, [len(c.items) for c in slot.clusters])
"""

from chronology.core.grouping import group_by
from chronology.core.models import (
    BucketizationResult,
    ClusterBucket,
    DateAttribute,
    SlotBucket,
    TimedItem,
)
from chronology.core.taxonomy import (
    CalendarGranularity,
    Taxonomy,
    day_of_week_taxonomy,
    hour_of_day_taxonomy,
)
from chronology.core.timeline import (
    assemble_slot,
    bucketize,
    bucketize_detailed,
    trim_slot_range,
)

__all__ = [
    # Grouping
    "group_by",
    # Models
    "BucketizationResult",
    "ClusterBucket",
    "DateAttribute",
    "SlotBucket",
    "TimedItem",
    # Taxonomies
    "CalendarGranularity",
    "Taxonomy",
    "day_of_week_taxonomy",
    "hour_of_day_taxonomy",
    # Bucketizer
    "assemble_slot",
    "bucketize",
    "bucketize_detailed",
    "trim_slot_range",
]
