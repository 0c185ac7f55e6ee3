"""
Seedable PRNG with hierarchical child streams.

A sweep starts from one integer seed. Each (candidate, property) pair gets
its own child stream derived from that seed by path, so the cases a property
sees do not depend on how many other candidates or properties ran first.
"""

from __future__ import annotations

import hashlib
import random
from typing import Sequence, TypeVar

T = TypeVar("T")


def seed_to_hex(seed: int) -> str:
    # Negative seeds are legal on the CLI; keep them distinct from positives.
    return f"{seed & 0xFFFFFFFFFFFFFFFF:016x}"


class DeterministicPRNG:
    """Thin wrapper over random.Random that can fork by path."""

    def __init__(self, seed: str):
        self.seed = seed
        self._rng = random.Random(seed)

    @classmethod
    def from_int(cls, seed: int) -> "DeterministicPRNG":
        return cls(seed_to_hex(seed))

    def for_path(self, *path_components: str) -> "DeterministicPRNG":
        """
        Child stream for `path_components`.

        Derived from the parent seed only (not from the parent's current
        position), so forking the same path twice yields the same stream.
        """
        path = "/".join(path_components)
        digest = hashlib.sha256(f"{self.seed}::{path}".encode("utf-8")).hexdigest()
        return DeterministicPRNG(digest[:16])

    def randint(self, a: int, b: int) -> int:
        """Integer in [a, b], both inclusive."""
        return self._rng.randint(a, b)

    def random(self) -> float:
        return self._rng.random()

    def choice(self, seq: Sequence[T]) -> T:
        return self._rng.choice(seq)
