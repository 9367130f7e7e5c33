"""Timeline bucketizer - two-level grouping of timed items.

Turns a flat list of items into coarse slots (hours of a day, days of a week)
each holding a fixed sequence of finer clusters. This is the structure the
timeline view draws, top to bottom.

Pipeline:
1. Group items by slot key.
2. Trim the slot taxonomy to the span between the first and last inhabited
   slot. Empty slots inside that span are kept.
3. For every kept slot, regroup its items by cluster key and lay them out over
   the complete cluster taxonomy.

Example:
    >>> from chronology.core.timeline import bucketize
    >>>
    >>> slots = bucketize(
    ...     notes,
    ...     slot_labels=["08", "09", "10"],
    ...     slot_key=lambda n: n.time.strftime("%H"),
    ...     cluster_labels=["0", "10", "20"],
    ...     cluster_key=lambda n: str(n.time.minute // 10 * 10),
    ... )
    >>> [slot.label for slot in slots]
    ['09', '10']

The functions here are pure: inputs are never mutated and nothing is cached
between calls.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Sequence

from chronology.core.grouping import group_by
from chronology.core.models import BucketizationResult, ClusterBucket, SlotBucket

logger = logging.getLogger(__name__)

KeyFn = Callable[[Any], str]


# =============================================================================
# Slot Trimming
# =============================================================================


def trim_slot_range(
    slot_labels: Sequence[str],
    grouped: dict[str, list[Any]],
) -> list[tuple[str, list[Any]]]:
    """Cut leading and trailing empty slots from the slot taxonomy.

    Args:
        slot_labels: Full slot taxonomy in display order.
        grouped: Sparse mapping from slot label to its items.

    Returns:
        (label, items) pairs from the first to the last inhabited slot,
        inclusive. Empty slots inside that range carry an empty list. An empty
        list is returned when no slot is inhabited.
    """
    labels = list(slot_labels)
    inhabited = [label in grouped for label in labels]

    first = next((index for index, has_items in enumerate(inhabited) if has_items), None)
    if first is None:
        return []

    last = next(
        index for index in range(len(labels) - 1, first - 1, -1) if inhabited[index]
    )
    return [(label, grouped.get(label, [])) for label in labels[first : last + 1]]


# =============================================================================
# Cluster Assembly
# =============================================================================


def _layout_clusters(
    label: str,
    by_cluster: dict[str, list[Any]],
    cluster_labels: Sequence[str],
) -> SlotBucket:
    return SlotBucket(
        label=label,
        clusters=[
            ClusterBucket(label=cluster_label, items=by_cluster.get(cluster_label, []))
            for cluster_label in cluster_labels
        ],
    )


def assemble_slot(
    label: str,
    slot_items: Iterable[Any],
    cluster_labels: Sequence[str],
    cluster_key: KeyFn,
) -> SlotBucket:
    """Build one slot with its complete cluster sequence.

    Clusters are never trimmed: every label of the cluster taxonomy appears
    once, in order, with an empty item list when nothing matched it.

    Args:
        label: Slot label.
        slot_items: Items already assigned to this slot.
        cluster_labels: Full cluster taxonomy in display order.
        cluster_key: Function mapping an item to its cluster label.

    Returns:
        The assembled SlotBucket.
    """
    return _layout_clusters(label, group_by(slot_items, cluster_key), cluster_labels)


# =============================================================================
# Public API
# =============================================================================


def _warn_on_duplicates(level: str, labels: Sequence[str]) -> None:
    if len(set(labels)) != len(labels):
        logger.warning(
            f"Duplicate {level} labels in taxonomy {list(labels)}; "
            "positions sharing a label receive the same items"
        )


def bucketize_detailed(
    items: Iterable[Any],
    slot_labels: Sequence[str],
    slot_key: KeyFn,
    cluster_labels: Sequence[str],
    cluster_key: KeyFn,
) -> BucketizationResult:
    """Bucketize items and report the ones that could not be placed.

    Same grouping as `bucketize`. Items whose slot key or cluster key is not
    part of the corresponding taxonomy end up in `unbucketed`, in input order,
    instead of disappearing.

    Args:
        items: Items to place on the timeline.
        slot_labels: Ordered, duplicate-free slot taxonomy.
        slot_key: Function mapping an item to its slot label.
        cluster_labels: Ordered, duplicate-free cluster taxonomy.
        cluster_key: Function mapping an item to its cluster label.

    Returns:
        BucketizationResult with the trimmed slots and the unbucketed items.
    """
    items = list(items)
    slot_labels = list(slot_labels)
    cluster_labels = list(cluster_labels)
    _warn_on_duplicates("slot", slot_labels)
    _warn_on_duplicates("cluster", cluster_labels)

    by_slot = group_by(items, slot_key)

    known_slots = set(slot_labels)
    known_clusters = set(cluster_labels)
    dropped: set[int] = set()
    for key, group in by_slot.items():
        if key not in known_slots:
            dropped.update(id(item) for item in group)

    slots: list[SlotBucket] = []
    for label, slot_items in trim_slot_range(slot_labels, by_slot):
        by_cluster = group_by(slot_items, cluster_key)
        for key, group in by_cluster.items():
            if key not in known_clusters:
                dropped.update(id(item) for item in group)
        slots.append(_layout_clusters(label, by_cluster, cluster_labels))

    unbucketed = [item for item in items if id(item) in dropped]
    if unbucketed:
        logger.debug(f"{len(unbucketed)} of {len(items)} items fall outside the taxonomy")
    logger.debug(f"Bucketized {len(items)} items into {len(slots)} slots")

    return BucketizationResult(slots=slots, unbucketed=unbucketed)


def bucketize(
    items: Iterable[Any],
    slot_labels: Sequence[str],
    slot_key: KeyFn,
    cluster_labels: Sequence[str],
    cluster_key: KeyFn,
) -> list[SlotBucket]:
    """Group items into trimmed slots of complete cluster sequences.

    Items whose keys are outside the taxonomies are left out silently; use
    `bucketize_detailed` to get them back.

    Args:
        items: Items to place on the timeline.
        slot_labels: Ordered, duplicate-free slot taxonomy.
        slot_key: Function mapping an item to its slot label.
        cluster_labels: Ordered, duplicate-free cluster taxonomy.
        cluster_key: Function mapping an item to its cluster label.

    Returns:
        Slots from the first to the last inhabited one. Empty when no item
        maps to a known slot.
    """
    return bucketize_detailed(
        items, slot_labels, slot_key, cluster_labels, cluster_key
    ).slots
