"""
bstcheck public API surface.

A property-based conformance harness for ordered-set (binary search tree)
implementations:

    - Reference model: sorted_unique, successor_of
    - Candidates: OrderedSetCandidate, register_candidate, load_candidates
    - Properties: CORE_PROPERTIES, property_suite
    - Sweep: SweepConfig, run_sweep, sweep_to_json
    - Errors: LoadError, PropertyFailure, HarnessFault, GeneratorExhaustion
"""

from __future__ import annotations

from .candidate import OrderedSetCandidate
from .config import SweepConfig, config_from_env
from .core.properties import CORE_PROPERTIES, EXTENDED_PROPERTIES, property_suite
from .core.reference_model import sorted_unique, successor_of
from .core.runner import SweepReport, assert_conforms, run_sweep, sweep_to_json
from .errors import (
    CandidateTimeout,
    GeneratorExhaustion,
    HarnessFault,
    LoadError,
    PropertyFailure,
)
from .registry import load_candidates, register_candidate

__version__ = "0.1.0"

__all__ = [
    "OrderedSetCandidate",
    "SweepConfig",
    "config_from_env",
    "CORE_PROPERTIES",
    "EXTENDED_PROPERTIES",
    "property_suite",
    "sorted_unique",
    "successor_of",
    "SweepReport",
    "assert_conforms",
    "run_sweep",
    "sweep_to_json",
    "CandidateTimeout",
    "GeneratorExhaustion",
    "HarnessFault",
    "LoadError",
    "PropertyFailure",
    "load_candidates",
    "register_candidate",
]
