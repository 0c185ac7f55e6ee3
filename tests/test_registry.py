import sys
from pathlib import Path

import pytest

from bstcheck.candidates.sorted_tuple import SortedTuple
from bstcheck.errors import LoadError
from bstcheck.registry import (
    clear_registry,
    discover_directory,
    discover_package,
    get_candidate_factory,
    has_candidate,
    instantiate,
    list_candidates,
    load_candidates,
    register_candidate,
)
from conftest import NoRemove

BUNDLED_NAMES = ["mutable_bst", "persistent_bst", "sorted_tuple"]

SUBMISSIONS = {
    "good.py": (
        "from bstcheck.candidates.sorted_tuple import SortedTuple\n"
        "def make_candidate():\n"
        "    return SortedTuple()\n"
    ),
    "tagged.py": (
        "from bstcheck.candidates.persistent_bst import PersistentBST\n"
        "CANDIDATE_NAME = 'alice'\n"
        "def make_candidate():\n"
        "    return PersistentBST()\n"
    ),
    "with_dataclass.py": (
        "from __future__ import annotations\n"
        "from dataclasses import dataclass\n"
        "from bstcheck.candidates.sorted_tuple import SortedTuple\n"
        "@dataclass(frozen=True)\n"
        "class Meta:\n"
        "    author: str\n"
        "def make_candidate():\n"
        "    return SortedTuple()\n"
    ),
    "broken_syntax.py": "def make_candidate(:\n",
    "no_factory.py": "X = 1\n",
    "raising.py": "def make_candidate():\n    raise RuntimeError('nope')\n",
    "incomplete.py": (
        "class Half:\n"
        "    def insert(self, h, v): return v\n"
        "    def find(self, h, v): return False\n"
        "def make_candidate():\n"
        "    return Half()\n"
    ),
    "quits.py": "import sys\nsys.exit(3)\n",
    "exits_in_factory.py": (
        "import sys\n"
        "def make_candidate():\n"
        "    sys.exit(5)\n"
    ),
    "_bstcheck_test_shared.py": (
        "from bstcheck.candidates.sorted_tuple import SortedTuple\n"
        "class Shared(SortedTuple):\n"
        "    pass\n"
    ),
    "uses_helper.py": (
        "from _bstcheck_test_shared import Shared\n"
        "def make_candidate():\n"
        "    return Shared()\n"
    ),
    "_helper.py": "raise RuntimeError('private modules must not be imported')\n",
    "notes.txt": "not python\n",
}


@pytest.fixture
def submissions_dir(tmp_path: Path) -> Path:
    for name, text in SUBMISSIONS.items():
        (tmp_path / name).write_text(text, encoding="utf-8")
    yield tmp_path
    sys.modules.pop("_bstcheck_test_shared", None)


def test_register_get_has_clear():
    register_candidate("inline", SortedTuple)
    assert has_candidate("inline")
    assert get_candidate_factory("inline") is SortedTuple
    assert list_candidates() == ["inline"]
    clear_registry()
    assert not has_candidate("inline")
    assert get_candidate_factory("inline") is None


def test_register_rejects_empty_name():
    with pytest.raises(ValueError):
        register_candidate("", SortedTuple)


def test_bundled_package_discovery():
    assert discover_package() == {}
    assert list_candidates() == BUNDLED_NAMES


def test_directory_discovery(submissions_dir):
    errors = discover_directory(submissions_dir)
    assert sorted(errors) == ["broken_syntax", "no_factory", "quits"]
    assert list_candidates() == [
        "alice",
        "exits_in_factory",
        "good",
        "incomplete",
        "raising",
        "uses_helper",
        "with_dataclass",
    ]


def test_load_isolates_each_failure(submissions_dir):
    result = load_candidates(include_bundled=False, directories=[submissions_dir])
    assert sorted(result.candidates) == ["alice", "good", "uses_helper", "with_dataclass"]
    assert sorted(result.errors) == [
        "broken_syntax",
        "exits_in_factory",
        "incomplete",
        "no_factory",
        "quits",
        "raising",
    ]
    assert result.problems == []
    assert "import failed" in result.errors["broken_syntax"].reason
    assert "has no make_candidate()" in result.errors["no_factory"].reason
    assert "factory raised" in result.errors["raising"].reason
    assert result.errors["quits"].reason == "import failed: SystemExit(3)"
    assert result.errors["exits_in_factory"].reason == "factory raised SystemExit(5)"
    assert result.errors["incomplete"].reason == "missing capabilities: successor, remove, sorted"
    assert result.names() == sorted(set(result.candidates) | set(result.errors))


def test_load_bundled_and_directory_together(submissions_dir):
    result = load_candidates(directories=[submissions_dir])
    for name in BUNDLED_NAMES + ["alice", "good"]:
        assert name in result.candidates


def test_only_filters_and_reports_unknown_names():
    result = load_candidates(only=["sorted_tuple", "ghost"])
    assert list(result.candidates) == ["sorted_tuple"]
    assert result.errors == {}
    assert result.names() == ["sorted_tuple"]
    assert result.problems == ["no such candidate: ghost"]


def test_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError, match="candidates directory not found"):
        discover_directory(tmp_path / "nope")


def test_missing_directory_is_a_problem_not_a_candidate(tmp_path):
    result = load_candidates(directories=[tmp_path / "typo"])
    assert result.names() == BUNDLED_NAMES
    assert len(result.problems) == 1
    assert result.problems[0].startswith("candidates directory not found: ")


def test_helper_module_is_importable_but_not_a_candidate(submissions_dir):
    result = load_candidates(include_bundled=False, directories=[submissions_dir])
    assert type(result.candidates["uses_helper"]).__name__ == "Shared"
    assert "_bstcheck_test_shared" not in result.names()
    assert str(submissions_dir.resolve()) not in sys.path


def test_instantiate_checks_capabilities():
    with pytest.raises(LoadError) as ei:
        instantiate("noremove", NoRemove)
    assert ei.value.name == "noremove"
    assert ei.value.reason == "missing capabilities: remove"


def test_each_factory_is_called_once_per_load():
    calls = []

    def factory():
        calls.append(1)
        return SortedTuple()

    register_candidate("counted", factory)
    load_candidates(include_bundled=False)
    assert calls == [1]
