"""Data models for the timeline view.

Models follow the flow of a timeline render:
1. INPUT (DateAttribute, TimedItem)
2. GROUPING RESULT (ClusterBucket, SlotBucket)
3. DETAILED RESULT (BucketizationResult)

The bucket models hold arbitrary items. `TimedItem` is the concrete item used
by the command line, but the bucketizer accepts any object as long as the key
functions understand it.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, computed_field


# =============================================================================
# Enums
# =============================================================================


class DateAttribute(str, Enum):
    """Which timestamp of a note placed it on the timeline.

    Attributes:
        CREATED: The note's creation time.
        MODIFIED: The note's last modification time.
    """

    CREATED = "created"
    MODIFIED = "modified"

    @property
    def badge(self) -> str:
        """Single-letter marker shown next to an item."""
        return "C" if self == DateAttribute.CREATED else "M"


# =============================================================================
# Input Items
# =============================================================================


class TimedItem(BaseModel):
    """A note placed on the timeline by one of its timestamps.

    The same note can appear twice on a timeline, once for its creation and
    once for its last modification, so identity combines both.

    Attributes:
        path: Vault-relative path of the note.
        attribute: Which timestamp this entry represents.
        time: The timestamp itself.

    Example:
        >>> item = TimedItem(
        ...     path="daily/2024-03-01.md",
        ...     attribute=DateAttribute.CREATED,
        ...     time=datetime(2024, 3, 1, 9, 15),
        ... )
        >>> item.key
        'daily/2024-03-01.md:created'
    """

    model_config = ConfigDict(frozen=True)

    path: str
    attribute: DateAttribute = DateAttribute.MODIFIED
    time: datetime

    @computed_field
    @property
    def key(self) -> str:
        """Stable identity of this entry."""
        return f"{self.path}:{self.attribute.value}"


# =============================================================================
# Grouping Result
# =============================================================================


class ClusterBucket(BaseModel):
    """Items that fell into one cluster of a slot.

    Attributes:
        label: Cluster label from the cluster taxonomy.
        items: Items keyed to this cluster, in input order. Empty when none.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    label: str
    items: list[Any] = Field(default_factory=list)

    def is_empty(self) -> bool:
        """Check if no item fell into this cluster."""
        return not self.items

    def time_span(self, time_of: Callable[[Any], datetime]) -> tuple[datetime, datetime] | None:
        """First and last timestamp of the cluster, in item order.

        Args:
            time_of: Function extracting the timestamp from an item.

        Returns:
            Tuple of (first item time, last item time), or None if empty.
        """
        if not self.items:
            return None
        return time_of(self.items[0]), time_of(self.items[-1])


class SlotBucket(BaseModel):
    """A retained slot with its full cluster sequence.

    Attributes:
        label: Slot label from the slot taxonomy.
        clusters: One bucket per cluster label, in taxonomy order.
    """

    label: str
    clusters: list[ClusterBucket] = Field(default_factory=list)

    def is_empty(self) -> bool:
        """Check if every cluster of this slot is empty."""
        return all(cluster.is_empty() for cluster in self.clusters)

    @property
    def item_count(self) -> int:
        """Number of items across all clusters."""
        return sum(len(cluster.items) for cluster in self.clusters)

    def cluster(self, label: str) -> ClusterBucket | None:
        """Look up a cluster by label."""
        for cluster in self.clusters:
            if cluster.label == label:
                return cluster
        return None


class BucketizationResult(BaseModel):
    """Grouping plus the items that could not be placed.

    Attributes:
        slots: The trimmed two-level grouping.
        unbucketed: Items whose slot key or cluster key is not in the taxonomy,
            in input order.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    slots: list[SlotBucket] = Field(default_factory=list)
    unbucketed: list[Any] = Field(default_factory=list)

    @property
    def bucketed_count(self) -> int:
        """Number of items placed in a cluster."""
        return sum(slot.item_count for slot in self.slots)

    def slot_labels(self) -> list[str]:
        """Labels of the retained slots, in order."""
        return [slot.label for slot in self.slots]
