"""
Array-backed ordered set: the handle is a sorted tuple, searched with bisect.

Not a tree at all, which is the point: the contract only talks about
observable behavior, so a flat sorted array is a legal submission.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from typing import NamedTuple, Optional, Tuple

from bstcheck.candidate import OrderedSetCandidate

CANDIDATE_NAME = "sorted_tuple"

Items = Tuple[int, ...]


class Successor(NamedTuple):
    value: int
    index: int


class SortedTuple(OrderedSetCandidate):
    def insert(self, handle: Optional[Items], value: int) -> Items:
        items = handle or ()
        pos = bisect_left(items, value)
        if pos < len(items) and items[pos] == value:
            return items
        return items[:pos] + (value,) + items[pos:]

    def find(self, handle: Optional[Items], value: int) -> bool:
        items = handle or ()
        pos = bisect_left(items, value)
        return pos < len(items) and items[pos] == value

    def successor(self, handle: Optional[Items], value: int) -> Optional[Successor]:
        items = handle or ()
        if not self.find(items, value):
            return None
        pos = bisect_right(items, value)
        if pos >= len(items):
            return None
        return Successor(items[pos], pos)

    def remove(self, handle: Optional[Items], value: int) -> Items:
        items = handle or ()
        pos = bisect_left(items, value)
        if pos < len(items) and items[pos] == value:
            return items[:pos] + items[pos + 1:]
        return items

    def sorted(self, handle: Optional[Items]) -> list[int]:
        return list(handle or ())


def make_candidate() -> SortedTuple:
    return SortedTuple()
