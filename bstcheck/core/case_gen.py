"""
Case generation for the property sweep.

A Case is a small multiset of integers drawn from a narrow value range, so
duplicates are frequent and the candidates' dedup logic is always exercised.

Secondary samples ("a value in the case", "a value to remove") are never
drawn from the PRNG. They are derived from the case contents, so anyone
holding the logged sequence can recompute exactly which value a property
queried.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

from bstcheck.core.prng import DeterministicPRNG
from bstcheck.core.reference_model import sorted_unique
from bstcheck.errors import GeneratorExhaustion

logger = logging.getLogger(__name__)

DEFAULT_MIN_LENGTH = 3
DEFAULT_MAX_LENGTH = 200
DEFAULT_MIN_VALUE = -10
DEFAULT_MAX_VALUE = 10
DEFAULT_MAX_RETRIES = 32

# Upper length bound for the "sparse tree" half of the draws.
SHORT_CASE_MAX = 12


@dataclass(frozen=True)
class Case:
    values: Tuple[int, ...]
    trial: int = -1

    def __len__(self) -> int:
        return len(self.values)

    def __iter__(self) -> Iterator[int]:
        return iter(self.values)

    def as_list(self) -> list[int]:
        return list(self.values)


def make_case(values: Sequence[int], trial: int = -1) -> Case:
    return Case(tuple(int(v) for v in values), trial)


# ---------------------------------------------------------------------------
# Deterministic samples derived from a case
# ---------------------------------------------------------------------------

def derive_index(values: Sequence[int], salt: str, modulo: int) -> int:
    """Index in [0, modulo) that depends only on `values` and `salt`."""
    if modulo <= 0:
        raise ValueError("modulo must be > 0")
    blob = json.dumps({"case": list(values), "salt": salt}, separators=(",", ":"))
    digest = hashlib.sha256(blob.encode("utf-8")).hexdigest()
    return int(digest[:16], 16) % modulo


def sample_present(case: Case, salt: str) -> int:
    """A value occurring in the case."""
    if not case.values:
        raise ValueError("cannot sample from an empty case")
    return case.values[derive_index(case.values, salt, len(case.values))]


def sample_unique(case: Case, salt: str) -> int:
    """A value of sorted_unique(case), uniform over distinct values."""
    view = sorted_unique(case.values)
    if not view:
        raise ValueError("cannot sample from an empty case")
    return view[derive_index(case.values, salt, len(view))]


def absent_above(case: Case) -> int:
    """A value strictly greater than every element of the case."""
    if not case.values:
        raise ValueError("empty case has no maximum")
    return max(case.values) + 1


# ---------------------------------------------------------------------------
# Random generation
# ---------------------------------------------------------------------------

class CaseGenerator:
    """Draws Cases from a DeterministicPRNG within fixed bounds."""

    def __init__(
        self,
        rng: DeterministicPRNG,
        *,
        min_length: int = DEFAULT_MIN_LENGTH,
        max_length: int = DEFAULT_MAX_LENGTH,
        min_value: int = DEFAULT_MIN_VALUE,
        max_value: int = DEFAULT_MAX_VALUE,
        max_retries: int = DEFAULT_MAX_RETRIES,
    ):
        if min_length < 0 or max_length < min_length:
            raise ValueError(f"bad length bounds: [{min_length}, {max_length}]")
        if max_value < min_value:
            raise ValueError(f"bad value bounds: [{min_value}, {max_value}]")
        if max_retries <= 0:
            raise ValueError("max_retries must be > 0")
        self._rng = rng
        self.min_length = min_length
        self.max_length = max_length
        self.min_value = min_value
        self.max_value = max_value
        self.max_retries = max_retries

    def _draw_length(self) -> int:
        hi = self.max_length
        # Half the draws stay short so sparse trees get as much coverage as
        # the long, duplicate-heavy ones.
        if hi > SHORT_CASE_MAX and self._rng.random() < 0.5:
            hi = max(self.min_length, SHORT_CASE_MAX)
        return self._rng.randint(self.min_length, hi)

    def next_case(self, trial: int = -1) -> Case:
        for attempt in range(1, self.max_retries + 1):
            n = self._draw_length()
            if n == 0:
                logger.debug("trial %d: empty draw, retry %d", trial, attempt)
                continue
            values = tuple(
                self._rng.randint(self.min_value, self.max_value) for _ in range(n)
            )
            return Case(values, trial)
        raise GeneratorExhaustion(self.max_retries)

    def cases(self, count: int) -> Iterator[Case]:
        for trial in range(count):
            yield self.next_case(trial)
