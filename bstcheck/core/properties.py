"""
Property suite: what a conforming ordered set must do.

Each property is a function of (candidate, case) -> Observation, judged
against the reference model. Trees are always built the same way: fold
insert over the case starting from the empty handle (None).

Core suite, in sweep order:

    sort-dedup     sorted(tree) == sorted_unique(case)
    find-present   find(tree, v) for v sampled from the case
    successor      successor(tree, v).value == successor_of(v, case)
    find-absent    not find(tree, max(case) + 1)
    remove         sorted(remove(tree, v)) == sorted_unique(case) minus v

Extended suite (opt-in) adds insert-idempotent.

Samples are derived from the case with the property name as salt, so two
properties looking at the same case usually query different values.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from bstcheck.candidate import NO_VALUE_FIELD, Handle, is_found, successor_value
from bstcheck.core.case_gen import Case, absent_above, sample_present, sample_unique
from bstcheck.core.reference_model import sorted_unique, successor_of, without


@dataclass(frozen=True)
class Observation:
    ok: bool
    expected: Any
    observed: Any
    sample: Optional[int] = None


@dataclass(frozen=True)
class Property:
    name: str
    title: str
    check: Callable[[Any, Case], Observation]

    def __call__(self, candidate: Any, case: Case) -> Observation:
        if not case.values:
            raise ValueError(f"{self.name}: properties are defined over non-empty cases only")
        return self.check(candidate, case)


def build_tree(candidate: Any, case: Case) -> Handle:
    handle = None
    for v in case.values:
        handle = candidate.insert(handle, v)
    return handle


# ---------------------------------------------------------------------------
# Core properties
# ---------------------------------------------------------------------------

def check_sort_dedup(candidate: Any, case: Case) -> Observation:
    tree = build_tree(candidate, case)
    expected = sorted_unique(case.values)
    observed = list(candidate.sorted(tree))
    return Observation(observed == expected, expected, observed)


def check_find_present(candidate: Any, case: Case) -> Observation:
    tree = build_tree(candidate, case)
    v = sample_present(case, "find-present")
    observed = is_found(candidate.find(tree, v))
    return Observation(observed is True, True, observed, v)


def check_successor(candidate: Any, case: Case) -> Observation:
    tree = build_tree(candidate, case)
    v = sample_present(case, "successor")
    expected = successor_of(v, case.values)
    raw = candidate.successor(tree, v)
    observed = successor_value(raw)
    if observed is NO_VALUE_FIELD:
        return Observation(False, expected, f"<record without value field: {raw!r}>", v)
    return Observation(observed == expected, expected, observed, v)


def check_find_absent(candidate: Any, case: Case) -> Observation:
    tree = build_tree(candidate, case)
    v = absent_above(case)
    observed = is_found(candidate.find(tree, v))
    return Observation(observed is False, False, observed, v)


def check_remove(candidate: Any, case: Case) -> Observation:
    tree = build_tree(candidate, case)
    v = sample_unique(case, "remove")
    expected = without(case.values, v)
    observed = list(candidate.sorted(candidate.remove(tree, v)))
    return Observation(observed == expected, expected, observed, v)


# ---------------------------------------------------------------------------
# Extended properties
# ---------------------------------------------------------------------------

def check_insert_idempotent(candidate: Any, case: Case) -> Observation:
    tree = build_tree(candidate, case)
    v = sample_present(case, "insert-idempotent")
    expected = sorted_unique(case.values)
    observed = list(candidate.sorted(candidate.insert(tree, v)))
    return Observation(observed == expected, expected, observed, v)


CORE_PROPERTIES: Tuple[Property, ...] = (
    Property("sort-dedup", "Sort works and removes duplicates", check_sort_dedup),
    Property("find-present", "Finds things present", check_find_present),
    Property("successor", "If a successor exists we can find it", check_successor),
    Property("find-absent", "Correctly identifies absent things", check_find_absent),
    Property("remove", "Remove gets rid of the element and no others", check_remove),
)

EXTENDED_PROPERTIES: Tuple[Property, ...] = (
    Property("insert-idempotent", "Inserting twice keeps one copy", check_insert_idempotent),
)

_BY_NAME: Dict[str, Property] = {p.name: p for p in CORE_PROPERTIES + EXTENDED_PROPERTIES}


def property_suite(*, extended: bool = False) -> Tuple[Property, ...]:
    return CORE_PROPERTIES + EXTENDED_PROPERTIES if extended else CORE_PROPERTIES


def get_property(name: str) -> Property:
    try:
        return _BY_NAME[name]
    except KeyError:
        raise KeyError(f"unknown property: {name!r}") from None
