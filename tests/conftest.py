"""
Pytest configuration for bstcheck tests.

Provides:
- Hypothesis profiles for deterministic fuzzing (select with HYPOTHESIS_PROFILE)
- A clean candidate registry around every test
- Deliberately broken candidates used to prove the harness catches
  violations, errors and hangs
"""

import os
import threading

import pytest

from bstcheck.candidates.sorted_tuple import SortedTuple
from bstcheck.registry import clear_registry

# =============================================================================
# Hypothesis Configuration
# =============================================================================
# - print_blob=True makes failures easy to reproduce
# - "ci" derandomizes so CI runs are repeatable

try:
    from hypothesis import settings

    settings.register_profile("default", print_blob=True, derandomize=False)
    settings.register_profile("ci", print_blob=True, derandomize=True)

    settings.load_profile(os.environ.get("HYPOTHESIS_PROFILE", "default"))

except ImportError:
    pass  # hypothesis not installed, skip configuration


# =============================================================================
# Registry isolation
# =============================================================================

@pytest.fixture(autouse=True)
def _clean_registry():
    clear_registry()
    yield
    clear_registry()


# =============================================================================
# Broken candidates
# =============================================================================
# All of them are built on the correct SortedTuple and break exactly one
# operation, so any failure a test sees comes from that operation.

class KeepsDuplicates(SortedTuple):
    def insert(self, handle, value):
        items = handle or ()
        return tuple(sorted(items + (value,)))


class FindsEverything(SortedTuple):
    def find(self, handle, value):
        return True


class OffByOneSuccessor(SortedTuple):
    def successor(self, handle, value):
        items = handle or ()
        if not items or value >= items[-1]:
            return None
        return {"value": value + 1}


class BareSuccessor(SortedTuple):
    def successor(self, handle, value):
        rec = super().successor(handle, value)
        return None if rec is None else rec.value


class RemoveDropsNeighbor(SortedTuple):
    def remove(self, handle, value):
        items = super().remove(handle, value)
        return tuple(v for v in items if v != value + 1)


class RaisesOnRemove(SortedTuple):
    def remove(self, handle, value):
        raise RuntimeError("boom")


class QuitsOnRemove(SortedTuple):
    def remove(self, handle, value):
        raise SystemExit(4)


# Released at teardown so abandoned guard workers can exit.
HANG_RELEASE = threading.Event()


class HangsOnRemove(SortedTuple):
    def remove(self, handle, value):
        HANG_RELEASE.wait()
        return super().remove(handle, value)


class NoRemove:
    def insert(self, handle, value):
        return value

    def find(self, handle, value):
        return False

    def successor(self, handle, value):
        return None

    def sorted(self, handle):
        return []


@pytest.fixture
def release_hangs():
    HANG_RELEASE.clear()
    yield HANG_RELEASE
    HANG_RELEASE.set()
