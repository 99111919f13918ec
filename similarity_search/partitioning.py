"""Contiguous near-equal partitioning of a work list across workers."""

from typing import List, Sequence, TypeVar

T = TypeVar("T")


def partition(items: Sequence[T], k: int) -> List[List[T]]:
    """
    Split items into k contiguous groups whose sizes differ by at most one.

    The first len(items) % k groups receive one extra element. Order is
    preserved within and across groups, so concatenating the groups
    reproduces the input. When k exceeds the item count the trailing
    groups are empty.

    Returns:
        List of k lists, or an empty list when k <= 0 or items is empty.
    """
    n = len(items)
    if k <= 0 or n == 0:
        return []

    base, remainder = divmod(n, k)
    groups = []
    start = 0
    for i in range(k):
        end = start + base + (1 if i < remainder else 0)
        groups.append(list(items[start:end]))
        start = end
    return groups
