"""
Selection and summary-statistics helpers for hotspot extraction.

These avoid full sorts where only a few ranks are needed: top-K lists use a
small sorted working set and percentiles use quickselect.
"""
import math
from typing import Callable, Dict, List, Sequence, TypeVar

T = TypeVar('T')

# Below this many values (or above this many percentiles) one sort is cheaper
SORT_THRESHOLD = 100
MAX_QUICKSELECT_PERCENTILES = 5


def get_top_n(items: Sequence[T], n: int, key: Callable[[T], float]) -> List[T]:
    """
    Return the n items with the largest key, largest first.

    Keeps a working set of at most n items ordered ascending by key. A
    candidate enters the set while it has room, or when it beats the current
    minimum (index 0). The set is re-sorted after every change, which is
    cheap while n is small.

    Example:
        get_top_n([3, 9, 1, 7], 2, key=lambda x: x) -> [9, 7]

    Args:
        items: Candidate items
        n: Number of items to keep
        key: Ranking function

    Returns:
        min(n, len(items)) items in descending key order
    """
    if n <= 0:
        return []

    if len(items) <= n:
        return sorted(items, key=key, reverse=True)

    result: List[T] = []
    for item in items:
        if len(result) < n:
            result.append(item)
            result.sort(key=key)
        elif key(item) > key(result[0]):
            result[0] = item
            result.sort(key=key)

    result.reverse()
    return result


def quickselect(values: Sequence[float], k: int) -> float:
    """
    Find the k-th smallest value (0-indexed) in expected O(n) time.

    Partitions around the middle element into lows, pivots and highs and
    narrows into whichever partition holds rank k.

    Args:
        values: Non-empty sequence of numbers
        k: Rank to select, 0 <= k < len(values)

    Returns:
        The value that would sit at index k after sorting
    """
    if not values:
        raise ValueError("quickselect() arg is an empty sequence")
    if not 0 <= k < len(values):
        raise IndexError(f"rank {k} out of range for {len(values)} values")

    candidates = list(values)
    while True:
        if len(candidates) == 1:
            return candidates[0]

        pivot = candidates[len(candidates) // 2]
        lows = [v for v in candidates if v < pivot]
        highs = [v for v in candidates if v > pivot]
        pivot_count = len(candidates) - len(lows) - len(highs)

        if k < len(lows):
            candidates = lows
        elif k < len(lows) + pivot_count:
            return pivot
        else:
            k -= len(lows) + pivot_count
            candidates = highs


def _percentile_rank(p: float, n: int) -> int:
    # p * n first keeps integer percentiles exact (0.07 * 100 != 7)
    return max(0, math.ceil(p * n / 100) - 1)


def calculate_percentiles(
    values: Sequence[float],
    percentiles: Sequence[float] = (50, 90, 95, 99)
) -> Dict[float, float]:
    """
    Calculate nearest-rank percentiles.

    The p-th percentile is the value at rank ceil(p/100 * n) - 1 of the
    sorted values, clamped to 0. Small inputs, or requests for many
    percentiles at once, sort once; otherwise each percentile runs its own
    quickselect.

    Args:
        values: Sample of numbers (not modified)
        percentiles: Requested percentiles in [0, 100]

    Returns:
        Dict mapping percentile -> value (0 for every percentile when
        values is empty)
    """
    if not values:
        return {p: 0 for p in percentiles}

    n = len(values)
    if n < SORT_THRESHOLD or len(percentiles) > MAX_QUICKSELECT_PERCENTILES:
        ordered = sorted(values)
        return {p: ordered[_percentile_rank(p, n)] for p in percentiles}

    return {p: quickselect(values, _percentile_rank(p, n)) for p in percentiles}


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def standard_deviation(values: Sequence[float]) -> float:
    """Population standard deviation; 0 for an empty sample."""
    if not values:
        return 0.0
    avg = mean(values)
    return math.sqrt(sum((v - avg) ** 2 for v in values) / len(values))
