"""Slot and cluster taxonomies for the timeline views.

A taxonomy pairs two ordered label lists with the functions that derive those
labels from an item. Two calendar views have one:

- DAY: 24 hour slots, each split into minute clusters ("0", "10", "20").
- WEEK: 7 weekday slots, each split into hour clusters listed latest first
  ("20", "16", ..., "0"). The descending order is how the week view is read
  and must not be sorted.

Month, year and free range views have no two-level layout; asking for their
taxonomy yields None and the caller skips bucketing.

Label formatting follows the process locale (`strftime`, `calendar.day_abbr`).
Labels and keys are produced by the same calls, so they always agree.
"""

from __future__ import annotations

import calendar
from collections import Counter
from datetime import datetime
from enum import Enum
from operator import attrgetter
from typing import Any, Callable, Iterable

from pydantic import BaseModel, ConfigDict, field_validator

from chronology.config import TimelineConfig
from chronology.core.models import BucketizationResult, SlotBucket
from chronology.core.timeline import bucketize, bucketize_detailed

HOUR_FORMAT_24 = "%H"
HOUR_FORMAT_12 = "%I %p"

TimeOf = Callable[[Any], datetime]

_item_time: TimeOf = attrgetter("time")


# =============================================================================
# Taxonomy Model
# =============================================================================


class Taxonomy(BaseModel):
    """Two-level label scheme plus the key functions that target it.

    Attributes:
        name: Short name of the view this taxonomy serves.
        slot_labels: Coarse labels in display order.
        cluster_labels: Fine labels in display order.
        slot_key: Maps an item to one of `slot_labels`.
        cluster_key: Maps an item to one of `cluster_labels`.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    name: str
    slot_labels: list[str]
    cluster_labels: list[str]
    slot_key: Callable[[Any], str]
    cluster_key: Callable[[Any], str]

    @field_validator("slot_labels", "cluster_labels")
    @classmethod
    def reject_duplicates(cls, v: list[str]) -> list[str]:
        duplicates = sorted(label for label, count in Counter(v).items() if count > 1)
        if duplicates:
            raise ValueError(f"Taxonomy labels must be unique, duplicated: {duplicates}")
        return v

    def bucketize(self, items: Iterable[Any]) -> list[SlotBucket]:
        """Group items using this taxonomy."""
        return bucketize(
            items, self.slot_labels, self.slot_key, self.cluster_labels, self.cluster_key
        )

    def bucketize_detailed(self, items: Iterable[Any]) -> BucketizationResult:
        """Group items using this taxonomy, keeping track of unplaceable ones."""
        return bucketize_detailed(
            items, self.slot_labels, self.slot_key, self.cluster_labels, self.cluster_key
        )


# =============================================================================
# Builders
# =============================================================================


def hour_of_day_taxonomy(
    config: TimelineConfig | None = None,
    time_of: TimeOf = _item_time,
) -> Taxonomy:
    """Taxonomy for the day view: hours split into minute buckets.

    Args:
        config: Timeline settings (clock style, minute bucket size).
        time_of: Extracts the timestamp from an item. Defaults to `item.time`.

    Returns:
        Taxonomy with 24 hour slots and `minute_bucket_count` clusters.

    Example:
        >>> tax = hour_of_day_taxonomy(TimelineConfig(use_24_hour_clock=False))
        >>> tax.slot_labels[:2]
        ['12 AM', '01 AM']
        >>> tax.cluster_labels
        ['0', '10', '20']
    """
    config = config or TimelineConfig()
    hour_format = HOUR_FORMAT_24 if config.use_24_hour_clock else HOUR_FORMAT_12
    width = config.minute_bucket_width

    def slot_key(item: Any) -> str:
        return time_of(item).strftime(hour_format)

    def cluster_key(item: Any) -> str:
        return str(time_of(item).minute // width * width)

    return Taxonomy(
        name="day",
        slot_labels=[datetime(2000, 1, 1, hour).strftime(hour_format) for hour in range(24)],
        cluster_labels=[str(minute) for minute in config.minute_bucket_starts()],
        slot_key=slot_key,
        cluster_key=cluster_key,
    )


def day_of_week_taxonomy(
    config: TimelineConfig | None = None,
    time_of: TimeOf = _item_time,
) -> Taxonomy:
    """Taxonomy for the week view: weekdays split into hour buckets.

    Weekday slots start at `config.first_weekday`. Hour clusters are listed
    from the latest bucket down to midnight.

    Args:
        config: Timeline settings (first weekday, hour bucket size).
        time_of: Extracts the timestamp from an item. Defaults to `item.time`.

    Returns:
        Taxonomy with 7 weekday slots and `24 / hour_bucket_width` clusters.
    """
    config = config or TimelineConfig()
    width = config.hour_bucket_width
    weekdays = [(config.first_weekday + offset) % 7 for offset in range(7)]

    def slot_key(item: Any) -> str:
        return calendar.day_abbr[time_of(item).weekday()]

    def cluster_key(item: Any) -> str:
        return str(time_of(item).hour // width * width)

    return Taxonomy(
        name="week",
        slot_labels=[calendar.day_abbr[day] for day in weekdays],
        cluster_labels=[str(hour) for hour in config.hour_bucket_starts()],
        slot_key=slot_key,
        cluster_key=cluster_key,
    )


# =============================================================================
# Calendar Granularity
# =============================================================================


class CalendarGranularity(str, Enum):
    """Calendar view being displayed.

    Attributes:
        DAY: A single day, bucketed by hour.
        WEEK: A single week, bucketed by weekday.
        MONTH: A month. No timeline clustering.
        YEAR: A year. No timeline clustering.
        RANGE: An arbitrary date range. No timeline clustering.
    """

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"
    RANGE = "range"

    def taxonomy(
        self,
        config: TimelineConfig | None = None,
        time_of: TimeOf = _item_time,
    ) -> Taxonomy | None:
        """Resolve the taxonomy for this view.

        Returns:
            The view's Taxonomy, or None when the view has no clustering.
        """
        if self is CalendarGranularity.DAY:
            return hour_of_day_taxonomy(config, time_of)
        if self is CalendarGranularity.WEEK:
            return day_of_week_taxonomy(config, time_of)
        return None
