"""
The ordered-set capability set every candidate must expose.

Handles are opaque. The harness passes back whatever a candidate returned
from insert/remove and never looks inside. `None` is the empty set: every
candidate must accept it as "start a new set" and `sorted(None)` must be [].

Candidates may subclass OrderedSetCandidate or simply provide the five
callables; the registry checks the capability set structurally.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, List, Optional, Sequence

Handle = Any

CAPABILITIES = ("insert", "find", "successor", "remove", "sorted")

# Sentinel for a successor result that carries no `value` field.
NO_VALUE_FIELD = object()


class OrderedSetCandidate(ABC):
    """Abstract ordered set over integers, addressed through opaque handles."""

    @abstractmethod
    def insert(self, handle: Optional[Handle], value: int) -> Handle:
        """Return the handle for `handle` plus `value`."""

    @abstractmethod
    def find(self, handle: Optional[Handle], value: int) -> bool:
        """True when `value` is in the set."""

    @abstractmethod
    def successor(self, handle: Optional[Handle], value: int) -> Any:
        """Record with a `value` field for the next larger element, or None."""

    @abstractmethod
    def remove(self, handle: Optional[Handle], value: int) -> Optional[Handle]:
        """Return the handle for `handle` without `value`."""

    @abstractmethod
    def sorted(self, handle: Optional[Handle]) -> Sequence[int]:
        """Ascending, duplicate-free enumeration of the set."""


def missing_capabilities(obj: Any) -> List[str]:
    return [name for name in CAPABILITIES if not callable(getattr(obj, name, None))]


def is_found(result: Any) -> bool:
    """
    Interpret a find() result.

    Anything other than None/False counts as found, so submissions that
    return the matching node instead of a bool are accepted.
    """
    return result is not None and result is not False


def successor_value(result: Any) -> Any:
    """
    The comparable value of a successor() result.

    None stays None (no successor). Records expose `value` as an attribute
    or as a mapping key; anything else yields NO_VALUE_FIELD.
    """
    if result is None:
        return None
    if isinstance(result, Mapping):
        return result.get("value", NO_VALUE_FIELD)
    return getattr(result, "value", NO_VALUE_FIELD)
