"""
Greedy counterexample shrinking.

Given a failing case and a predicate that re-runs the failing check, look
for a smaller case that still fails: first by deleting chunks of elements,
then by moving single values toward zero (or toward the allowed value
nearest to it). Every predicate call counts as one step and the total is
capped, so shrinking always terminates.

Shrunk cases are never empty.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Tuple

from bstcheck.core.case_gen import Case

logger = logging.getLogger(__name__)

DEFAULT_MAX_STEPS = 200


def _toward(v: int, pivot: int) -> List[int]:
    """Simpler values for v: strictly closer to pivot, never past it."""
    out: List[int] = []
    if v == pivot:
        return out
    step = 1 if v > pivot else -1
    for c in (pivot, pivot + int((v - pivot) / 2), v - step):
        if c != v and c not in out and abs(c - pivot) < abs(v - pivot):
            out.append(c)
    return out


def _pivot(bounds: Optional[Tuple[int, int]]) -> int:
    """The simplest value in bounds: 0, or the bound nearest to it."""
    if bounds is None:
        return 0
    lo, hi = bounds
    if lo > hi:
        raise ValueError(f"bad value bounds: [{lo}, {hi}]")
    return min(max(0, lo), hi)


class _Shrinker:
    def __init__(
        self,
        case: Case,
        still_fails: Callable[[Case], bool],
        max_steps: int,
        pivot: int = 0,
    ):
        self.values = list(case.values)
        self.trial = case.trial
        self.still_fails = still_fails
        self.max_steps = max_steps
        self.steps = 0
        self.pivot = pivot

    def _budget_left(self) -> bool:
        return self.steps < self.max_steps

    def _attempt(self, values: List[int]) -> bool:
        if not values or not self._budget_left():
            return False
        self.steps += 1
        return self.still_fails(Case(tuple(values), self.trial))

    def delete_pass(self) -> bool:
        changed = False
        chunk = max(1, len(self.values) // 2)
        while self._budget_left():
            removed = False
            i = 0
            while i < len(self.values) and self._budget_left():
                trial_values = self.values[:i] + self.values[i + chunk:]
                if self._attempt(trial_values):
                    self.values = trial_values
                    removed = changed = True
                else:
                    i += chunk
            if not removed:
                if chunk == 1:
                    break
                chunk = max(1, chunk // 2)
        return changed

    def simplify_pass(self) -> bool:
        changed = False
        for idx in range(len(self.values)):
            for target in _toward(self.values[idx], self.pivot):
                if not self._budget_left():
                    return changed
                trial_values = list(self.values)
                trial_values[idx] = target
                if self._attempt(trial_values):
                    self.values = trial_values
                    changed = True
                    break
        return changed

    def run(self) -> Case:
        while self._budget_left():
            deleted = self.delete_pass()
            simplified = self.simplify_pass()
            if not (deleted or simplified):
                break
        return Case(tuple(self.values), self.trial)


def shrink_case(
    case: Case,
    still_fails: Callable[[Case], bool],
    *,
    max_steps: int = DEFAULT_MAX_STEPS,
    bounds: Optional[Tuple[int, int]] = None,
) -> Tuple[Case, int]:
    """
    Return (smallest failing case found, predicate calls spent).

    `still_fails` must be True for cases that reproduce the original failure.
    The input case is returned unchanged when nothing smaller fails.
    With `bounds` = (min_value, max_value), values shrink toward the bound
    nearest zero instead of toward zero, so they stay in the generated range.
    """
    if not case.values:
        raise ValueError("cannot shrink an empty case")
    s = _Shrinker(case, still_fails, max_steps, _pivot(bounds))
    shrunk = s.run()
    logger.debug("shrunk %d -> %d values in %d steps", len(case), len(shrunk), s.steps)
    return shrunk, s.steps
