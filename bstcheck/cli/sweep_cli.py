"""
bstcheck sweep CLI

Runs every property over every discovered ordered-set candidate and prints
a report.

Examples:
  python3 -m bstcheck
  python3 -m bstcheck.cli.sweep_cli --seed 7 --trials 500
  python3 -m bstcheck.cli.sweep_cli --candidates-dir submissions/ --no-bundled
  python3 -m bstcheck.cli.sweep_cli --json --pretty --only persistent_bst

Exit status:
  0  sweep completed (property failures and load errors are in the report)
  1  harness fault (no candidates, generator exhaustion)
  2  invalid arguments or configuration

Contract: --json emits a payload tagged bstcheck-sweep.v1 (see --schema).
"""

# Allow running this file directly without requiring PYTHONPATH.
if __package__ is None or __package__ == "":
    import sys

    from pathlib import Path

    sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

import argparse
import json
import logging
import sys
from typing import List, Optional

from bstcheck.config import SweepConfig, config_from_env
from bstcheck.core.runner import (
    SCHEMA_DOC,
    SCHEMA_JSON,
    SCHEMA_TAG,
    CandidateReport,
    Failure,
    SweepReport,
    run_sweep,
    safe_repr,
    sweep_to_json,
)
from bstcheck.errors import HarnessFault
from bstcheck.registry import LoadResult, load_candidates

PROG = "bstcheck"


# ---------------------------------------------------------------------------
# Human report
# ---------------------------------------------------------------------------

def _failure_lines(f: Failure) -> List[str]:
    pad = " " * 10
    lines = [f"{pad}case:     {f.case.as_list()}"]
    if f.shrunk_case != f.case:
        lines.append(f"{pad}shrunk:   {f.shrunk_case.as_list()} ({f.shrink_steps} steps)")
    if f.sample is not None:
        lines.append(f"{pad}sample:   {f.sample}")
    if f.kind == "violation":
        lines.append(f"{pad}expected: {safe_repr(f.expected)}")
        lines.append(f"{pad}observed: {safe_repr(f.observed)}")
    else:
        lines.append(f"{pad}{f.kind}:    {f.message}")
    return lines


def _candidate_block(c: CandidateReport) -> List[str]:
    lines = [f"*** Testing implementation: {c.name}"]
    if not c.loaded:
        lines.append(f"  LOAD ERROR  {c.load_error}")
        return lines
    width = max((len(p.name) for p in c.properties), default=0)
    for p in c.properties:
        if p.passed:
            lines.append(f"  PASS  {p.name:<{width}}  {p.title} ({p.trials_run} trials)")
            continue
        if p.failure is None:
            raise ValueError(f"{c.name} / {p.name}: failed without a failure record")
        lines.append(
            f"  FAIL  {p.name:<{width}}  {p.title} (trial {p.failure.case.trial}, {p.failure.kind})"
        )
        lines.extend(_failure_lines(p.failure))
    return lines


def render_text(report: SweepReport) -> str:
    lines: List[str] = []
    for c in report.candidates:
        lines.extend(_candidate_block(c))
    s = report.summary()
    cfg = report.config
    lines.append("")
    lines.append(
        f"== summary: {s['candidates']} candidate(s), {s['conforming']} conforming, "
        f"{s['nonconforming']} nonconforming, {s['load_errors']} load error(s) "
        f"(seed={cfg.seed}, trials={cfg.trials})"
    )
    return "\n".join(lines)


def _render_list(loaded: LoadResult) -> str:
    lines: List[str] = []
    for name in loaded.names():
        err = loaded.errors.get(name)
        lines.append(name if err is None else f"{name}  (load error: {err.reason})")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog=PROG,
        description="Property-based conformance sweep over ordered-set (BST) implementations.",
    )
    ap.add_argument("--seed", type=int, default=None, help="Sweep seed (env BSTCHECK_SEED, default 0).")
    ap.add_argument("--trials", type=int, default=None, help="Cases per property (env BSTCHECK_TRIALS, default 100).")
    ap.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-trial time guard in seconds, 0 disables (env BSTCHECK_TIMEOUT, default 5).",
    )
    ap.add_argument(
        "--candidates-dir",
        default=None,
        help="Also load implementation files from this directory (env BSTCHECK_CANDIDATES_DIR).",
    )
    ap.add_argument("--no-bundled", action="store_true", help="Skip the bundled candidates.")
    ap.add_argument(
        "--only",
        action="append",
        default=None,
        metavar="NAME",
        help="Restrict the sweep to this candidate (repeatable).",
    )
    ap.add_argument("--extended", action="store_true", help="Also check the extended properties.")
    ap.add_argument("--no-shrink", action="store_true", help="Report failing cases without shrinking.")
    ap.add_argument("--json", action="store_true", help="Emit the JSON report only (pipe-friendly).")
    ap.add_argument("--pretty", action="store_true", help="Indent JSON output.")
    ap.add_argument("--list", action="store_true", help="List discovered candidates and exit.")
    ap.add_argument("--schema", action="store_true", help="Print schema tag + doc paths and exit.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Diagnostic logging on stderr.")
    return ap


def _resolve_config(args: argparse.Namespace) -> SweepConfig:
    return config_from_env().with_overrides(
        seed=args.seed,
        trials=args.trials,
        timeout_s=args.timeout,
        candidates_dir=args.candidates_dir,
        extended=True if args.extended else None,
        shrink=False if args.no_shrink else None,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)

    if args.schema:
        print(f"{SCHEMA_TAG} {SCHEMA_DOC} {SCHEMA_JSON}")
        return 0

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = _resolve_config(args)
    except ValueError as e:
        print(f"{PROG}: invalid configuration: {e}", file=sys.stderr)
        return 2

    dirs = [config.candidates_dir] if config.candidates_dir else []
    loaded = load_candidates(
        include_bundled=not args.no_bundled,
        directories=dirs,
        only=args.only,
    )

    if not loaded.names():
        detail = "; ".join(loaded.problems)
        print(f"{PROG}: no candidates discovered" + (f" ({detail})" if detail else ""), file=sys.stderr)
        return 1
    for problem in loaded.problems:
        print(f"{PROG}: warning: {problem}", file=sys.stderr)

    if args.list:
        print(_render_list(loaded))
        return 0

    try:
        report = run_sweep(loaded, config)
    except HarnessFault as e:
        print(f"{PROG}: {e}", file=sys.stderr)
        return 1

    if args.json:
        payload = sweep_to_json(report)
        if args.pretty:
            print(json.dumps(payload, indent=2, sort_keys=True))
        else:
            print(json.dumps(payload, sort_keys=True))
        return 0

    print(render_text(report))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
