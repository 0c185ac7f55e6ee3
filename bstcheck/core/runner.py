"""
Sweep runner: every loaded candidate x every property x N generated cases.

For one property the runner stops at the first failing case, shrinks it
(unless the failure was a timeout) and records a Failure. Nothing a
candidate does can abort the sweep: exceptions and hangs become failures of
kind "error" and "timeout". Only HarnessFault escapes run_sweep().

Case streams are forked per property from the sweep seed, so every candidate
is checked against the same cases and reports from different candidates
line up.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from bstcheck.config import SweepConfig
from bstcheck.core.case_gen import Case, CaseGenerator
from bstcheck.core.guard import call_with_deadline
from bstcheck.core.prng import DeterministicPRNG
from bstcheck.core.properties import Observation, Property, property_suite
from bstcheck.core.shrink import shrink_case
from bstcheck.errors import CandidateTimeout, HarnessFault, PropertyFailure
from bstcheck.registry import SUBMISSION_ERRORS, LoadResult

logger = logging.getLogger(__name__)

VIOLATION = "violation"
ERROR = "error"
TIMEOUT = "timeout"

PASS = "pass"
FAIL = "fail"


@dataclass(frozen=True)
class TrialOutcome:
    kind: Optional[str]  # None when the property held
    observation: Optional[Observation] = None
    message: str = ""


@dataclass(frozen=True)
class Failure:
    kind: str
    case: Case
    shrunk_case: Case
    sample: Optional[int]
    expected: Any
    observed: Any
    message: str
    shrink_steps: int = 0


@dataclass(frozen=True)
class PropertyResult:
    name: str
    title: str
    status: str
    trials_run: int
    failure: Optional[Failure] = None

    @property
    def passed(self) -> bool:
        return self.status == PASS


@dataclass(frozen=True)
class CandidateReport:
    name: str
    load_error: Optional[str] = None
    properties: List[PropertyResult] = field(default_factory=list)

    @property
    def loaded(self) -> bool:
        return self.load_error is None

    @property
    def conforming(self) -> bool:
        return self.loaded and all(p.passed for p in self.properties)


@dataclass(frozen=True)
class SweepReport:
    config: SweepConfig
    candidates: List[CandidateReport]
    problems: List[str] = field(default_factory=list)

    def summary(self) -> Dict[str, int]:
        loaded = [c for c in self.candidates if c.loaded]
        return {
            "candidates": len(self.candidates),
            "loaded": len(loaded),
            "load_errors": len(self.candidates) - len(loaded),
            "conforming": sum(1 for c in loaded if c.conforming),
            "nonconforming": sum(1 for c in loaded if not c.conforming),
        }


def safe_repr(x: Any) -> str:
    """repr() of candidate-supplied values; a failing __repr__ is reported, not raised."""
    try:
        return repr(x)
    except SUBMISSION_ERRORS as e:
        return f"<unrepresentable {type(x).__name__}: {e!r}>"


# ---------------------------------------------------------------------------
# Single trial
# ---------------------------------------------------------------------------

def evaluate_trial(
    prop: Property, candidate: Any, case: Case, *, timeout: Optional[float]
) -> TrialOutcome:
    """Run one property on one case; candidate misbehavior never propagates."""
    try:
        obs = call_with_deadline(prop, candidate, case, timeout=timeout)
    except CandidateTimeout as e:
        return TrialOutcome(TIMEOUT, None, str(e))
    except SUBMISSION_ERRORS as e:
        return TrialOutcome(ERROR, None, f"{type(e).__name__}: {e}")
    if obs.ok:
        return TrialOutcome(None, obs)
    msg = f"expected {safe_repr(obs.expected)}, observed {safe_repr(obs.observed)}"
    return TrialOutcome(VIOLATION, obs, msg)


def _failure_from(
    prop: Property,
    candidate: Any,
    case: Case,
    outcome: TrialOutcome,
    config: SweepConfig,
) -> Failure:
    if outcome.kind is None:
        raise ValueError(f"{prop.name}: cannot build a failure from a passing trial")
    timeout = config.guard_timeout
    shrunk, steps, final = case, 0, outcome

    if outcome.kind != TIMEOUT and config.shrink and config.max_shrink_steps > 0:

        def still_fails(c: Case) -> bool:
            return evaluate_trial(prop, candidate, c, timeout=timeout).kind == outcome.kind

        shrunk, steps = shrink_case(
            case,
            still_fails,
            max_steps=config.max_shrink_steps,
            bounds=(config.min_value, config.max_value),
        )
        if shrunk != case:
            rerun = evaluate_trial(prop, candidate, shrunk, timeout=timeout)
            if rerun.kind == outcome.kind:
                final = rerun
            else:
                # Candidate is not deterministic on this case; keep the original.
                shrunk = case

    obs = final.observation
    return Failure(
        kind=outcome.kind,
        case=case,
        shrunk_case=shrunk,
        sample=obs.sample if obs else None,
        expected=obs.expected if obs else None,
        observed=obs.observed if obs else None,
        message=final.message,
        shrink_steps=steps,
    )


# ---------------------------------------------------------------------------
# Property / candidate / sweep
# ---------------------------------------------------------------------------

def _generator(rng: DeterministicPRNG, config: SweepConfig) -> CaseGenerator:
    return CaseGenerator(
        rng,
        min_length=config.min_length,
        max_length=config.max_length,
        min_value=config.min_value,
        max_value=config.max_value,
    )


def check_property(
    candidate: Any, prop: Property, rng: DeterministicPRNG, config: SweepConfig
) -> PropertyResult:
    gen = _generator(rng, config)
    timeout = config.guard_timeout
    for trial in range(config.trials):
        case = gen.next_case(trial)
        outcome = evaluate_trial(prop, candidate, case, timeout=timeout)
        if outcome.kind is None:
            continue
        logger.debug("%s failed on trial %d (%s): %s", prop.name, trial, outcome.kind, outcome.message)
        failure = _failure_from(prop, candidate, case, outcome, config)
        return PropertyResult(prop.name, prop.title, FAIL, trial + 1, failure)
    return PropertyResult(prop.name, prop.title, PASS, config.trials)


def check_candidate(name: str, candidate: Any, config: SweepConfig) -> CandidateReport:
    root = DeterministicPRNG.from_int(config.seed)
    results: List[PropertyResult] = []
    for prop in property_suite(extended=config.extended):
        result = check_property(candidate, prop, root.for_path("cases", prop.name), config)
        logger.info("%s / %s: %s", name, prop.name, result.status)
        results.append(result)
    return CandidateReport(name, None, results)


def assert_conforms(candidate: Any, config: Optional[SweepConfig] = None, *, name: str = "candidate") -> CandidateReport:
    """
    Check one candidate and raise PropertyFailure on the first failing property.

    Meant for submitters who want the sweep inside their own test suite.
    """
    report = check_candidate(name, candidate, config or SweepConfig())
    for p in report.properties:
        if p.failure is not None:
            raise PropertyFailure(p.name, p.failure)
    return report


def run_sweep(loaded: LoadResult, config: SweepConfig) -> SweepReport:
    names = loaded.names()
    if not names:
        detail = "; ".join(loaded.problems)
        raise HarnessFault("no candidates discovered" + (f" ({detail})" if detail else ""))

    reports: List[CandidateReport] = []
    for name in names:
        err = loaded.errors.get(name)
        if err is not None:
            reports.append(CandidateReport(name, err.reason))
            continue
        reports.append(check_candidate(name, loaded.candidates[name], config))
    return SweepReport(config, reports, list(loaded.problems))


# ---------------------------------------------------------------------------
# JSON payload
# ---------------------------------------------------------------------------

SCHEMA_TAG = "bstcheck-sweep.v1"
SCHEMA_DOC = "docs/sweep_report.md"
SCHEMA_JSON = "docs/schemas/sweep_report.v1.json"
SCHEMA_KIND = "sweep"
SCHEMA_VERSION = SCHEMA_TAG.rsplit(".v", 1)[1]


def _jsonable(x: Any) -> Any:
    if x is None or isinstance(x, (bool, int, str)):
        return x
    if isinstance(x, (list, tuple)):
        return [_jsonable(v) for v in x]
    return safe_repr(x)


def _failure_to_json(f: Failure) -> Dict[str, Any]:
    return {
        "kind": f.kind,
        "trial": f.case.trial,
        "case": f.case.as_list(),
        "shrunk_case": f.shrunk_case.as_list(),
        "shrink_steps": f.shrink_steps,
        "sample": f.sample,
        "expected": _jsonable(f.expected),
        "observed": _jsonable(f.observed),
        "message": f.message,
    }


def _inputs_hash(config: SweepConfig, names: List[str]) -> str:
    payload = json.dumps(
        {"seed": config.seed, "trials": config.trials, "extended": config.extended, "candidates": names},
        separators=(",", ":"),
        sort_keys=True,
    )
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def sweep_to_json(report: SweepReport) -> Dict[str, Any]:
    """
    JSON object for --json output.

    Carries no timestamps: the same seed and candidates produce
    byte-identical output. With config.schema_fields set, the payload also
    names its kind and schema version.
    """
    cfg = report.config
    candidates: List[Dict[str, Any]] = []
    for c in report.candidates:
        candidates.append(
            {
                "name": c.name,
                "loaded": c.loaded,
                "load_error": c.load_error,
                "conforming": c.conforming,
                "properties": [
                    {
                        "name": p.name,
                        "title": p.title,
                        "status": p.status,
                        "trials_run": p.trials_run,
                        "failure": _failure_to_json(p.failure) if p.failure else None,
                    }
                    for p in c.properties
                ],
            }
        )

    payload: Dict[str, Any] = {
        "schema": SCHEMA_TAG,
        "schema_doc": SCHEMA_DOC,
        "config": {
            "seed": cfg.seed,
            "trials": cfg.trials,
            "min_length": cfg.min_length,
            "max_length": cfg.max_length,
            "min_value": cfg.min_value,
            "max_value": cfg.max_value,
            "timeout_s": cfg.guard_timeout,
            "shrink": cfg.shrink,
            "extended": cfg.extended,
        },
        "candidates": candidates,
        "problems": list(report.problems),
        "summary": report.summary(),
        "meta": {
            "tool": "sweep_cli",
            "determinism": {
                "inputs_hash": _inputs_hash(cfg, [c.name for c in report.candidates]),
            },
        },
    }
    if cfg.schema_fields:
        payload["kind"] = SCHEMA_KIND
        payload["schema_version"] = SCHEMA_VERSION
    return payload
