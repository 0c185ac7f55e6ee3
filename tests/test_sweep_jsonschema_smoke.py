from __future__ import annotations

import json
from pathlib import Path

import pytest

from bstcheck.config import SweepConfig
from bstcheck.core.runner import SCHEMA_JSON, run_sweep, sweep_to_json
from bstcheck.errors import LoadError
from bstcheck.registry import LoadResult, load_candidates
from conftest import FindsEverything, KeepsDuplicates, QuitsOnRemove, RaisesOnRemove

jsonschema = pytest.importorskip("jsonschema")

ROOT = Path(__file__).resolve().parents[1]
SCHEMA_PATH = ROOT / SCHEMA_JSON


def _schema() -> dict:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def test_schema_file_exists():
    assert SCHEMA_PATH.exists(), f"Missing {SCHEMA_JSON}"


def test_bundled_sweep_validates():
    report = run_sweep(load_candidates(), SweepConfig(trials=10, timeout_s=0))
    jsonschema.validate(instance=sweep_to_json(report), schema=_schema())


def test_failures_and_load_errors_validate():
    loaded = LoadResult(
        candidates={
            "dups": KeepsDuplicates(),
            "yes": FindsEverything(),
            "raiser": RaisesOnRemove(),
            "quits": QuitsOnRemove(),
        },
        errors={"broken": LoadError("broken", "import failed: SystemExit(3)")},
        problems=["no such candidate: ghost"],
    )
    payload = sweep_to_json(run_sweep(loaded, SweepConfig(trials=30, timeout_s=0, extended=True)))
    kinds = {
        p["failure"]["kind"]
        for c in payload["candidates"]
        for p in c["properties"]
        if p["failure"]
    }
    assert kinds == {"violation", "error"}
    jsonschema.validate(instance=payload, schema=_schema())


def test_versioned_payload_still_validates():
    report = run_sweep(
        load_candidates(only=["sorted_tuple"]),
        SweepConfig(trials=5, timeout_s=0, schema_fields=True),
    )
    payload = sweep_to_json(report)
    assert (payload["kind"], payload["schema_version"]) == ("sweep", "1")
    jsonschema.validate(instance=payload, schema=_schema())


def test_schema_pins_version_fields():
    report = run_sweep(load_candidates(only=["sorted_tuple"]), SweepConfig(trials=5, timeout_s=0))
    payload = dict(sweep_to_json(report), schema_version="2")
    with pytest.raises(jsonschema.ValidationError):
        jsonschema.validate(instance=payload, schema=_schema())
