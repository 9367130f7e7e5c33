"""Generic partition helper used by the timeline bucketizer."""

from __future__ import annotations

from typing import Callable, Hashable, Iterable, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)


def group_by(items: Iterable[T], key_fn: Callable[[T], K]) -> dict[K, list[T]]:
    """Partition items by a derived key.

    The key function is called exactly once per item. Items sharing a key keep
    the order in which they were encountered. Keys with no items never appear
    in the result, so a missing key means "empty".

    Args:
        items: Items to partition.
        key_fn: Function deriving the grouping key from an item.

    Returns:
        Mapping from key to the ordered items carrying that key.

    Example:
        >>> group_by([1, 2, 3, 4], lambda n: n % 2)
        {1: [1, 3], 0: [2, 4]}
    """
    groups: dict[K, list[T]] = {}
    for item in items:
        groups.setdefault(key_fn(item), []).append(item)
    return groups
