"""
Reference model: the ground truth every candidate is judged against.

An ordered set built from a multiset of integers is fully described by its
deduplicated ascending view. Everything here is computed from scratch on each
call; nothing is cached between checks.
"""

from __future__ import annotations

from bisect import bisect_right
from typing import Iterable, List, Optional


def sorted_unique(case: Iterable[int]) -> List[int]:
    """Ascending sequence of the distinct values in `case` (empty for empty input)."""
    return sorted(set(case))


def successor_of(value: int, case: Iterable[int]) -> Optional[int]:
    """
    Smallest element of sorted_unique(case) strictly greater than `value`.

    Returns None when `value` is the maximum. A value that does not occur in
    the case has no successor either: the successor relation is defined by
    position inside the set, not by numeric order alone.
    """
    view = sorted_unique(case)
    pos = bisect_right(view, value)
    if pos == 0 or view[pos - 1] != value:
        return None
    if pos >= len(view):
        return None
    return view[pos]


def without(case: Iterable[int], value: int) -> List[int]:
    """sorted_unique(case) with exactly `value` taken out."""
    return [v for v in sorted_unique(case) if v != value]
