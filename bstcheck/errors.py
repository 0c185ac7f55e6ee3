"""
Error taxonomy for the conformance sweep.

Only HarnessFault (and its subclasses) is allowed to escape a sweep. Every
other error is converted into a report entry against the candidate or
property that produced it.
"""

from __future__ import annotations

from typing import Any


class BstCheckError(Exception):
    """Base class for all harness errors."""


class LoadError(BstCheckError):
    """A candidate could not be loaded or lacks part of the capability set."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"{name}: {reason}")
        self.name = name
        self.reason = reason


class PropertyFailure(BstCheckError):
    """
    A property verdict came back false (or the candidate raised / hung).

    Carries the Failure record so callers that prefer exceptions over
    PropertyResult.status can still get at the counterexample.
    """

    def __init__(self, property_name: str, failure: Any):
        super().__init__(f"{property_name}: {getattr(failure, 'message', failure)}")
        self.property_name = property_name
        self.failure = failure


class CandidateTimeout(BstCheckError):
    """Candidate code did not return within the time guard."""

    def __init__(self, timeout: float):
        super().__init__(f"no result within {timeout:g}s")
        self.timeout = timeout


class HarnessFault(BstCheckError):
    """The sweep cannot run at all (e.g. no candidates were discovered)."""


class GeneratorExhaustion(HarnessFault):
    """The case generator could not produce a non-empty case."""

    def __init__(self, attempts: int):
        super().__init__(f"no non-empty case after {attempts} attempts")
        self.attempts = attempts
