# bstcheck/registry.py
"""
Candidate registry: name -> zero-argument factory.

Design:

- Registry is just a dict[str, CandidateFactory].
- Submissions reach it two ways:
    * register_candidate(name, factory) from code (tests, embedding callers)
    * discovery of implementation modules exposing make_candidate():
        - discover_package("bstcheck.candidates")  (bundled submissions)
        - discover_directory(path)                 (external submissions)
- load_candidates() builds each instance exactly once and checks its
  capability set. Anything that goes wrong for one submission becomes a
  LoadError for that name only; the remaining submissions still load.

A module's tag is its CANDIDATE_NAME attribute, or its file stem.
"""

from __future__ import annotations

import importlib
import importlib.util
import logging
import pkgutil
import sys
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType
from typing import Callable, Dict, Iterable, Iterator, List, Optional

from bstcheck.candidate import missing_capabilities
from bstcheck.errors import LoadError

logger = logging.getLogger(__name__)

CandidateFactory = Callable[[], object]

BUNDLED_PACKAGE = "bstcheck.candidates"
FACTORY_ATTR = "make_candidate"

# Internal registry mapping candidate names -> factories.
_REGISTRY: Dict[str, CandidateFactory] = {}


# Submission code may call sys.exit() at import time or from its factory;
# that is a broken submission, not a request to stop the sweep.
SUBMISSION_ERRORS = (Exception, SystemExit)


@dataclass
class LoadResult:
    candidates: Dict[str, object] = field(default_factory=dict)
    errors: Dict[str, LoadError] = field(default_factory=dict)
    # Discovery problems that name no candidate (missing directory, unknown
    # --only name). They never count as candidates.
    problems: List[str] = field(default_factory=list)

    def names(self) -> List[str]:
        """Every candidate name seen, loaded or not, in sweep order."""
        return sorted(set(self.candidates) | set(self.errors))


# ---------------------------------------------------------------------------
# Core registry operations
# ---------------------------------------------------------------------------

def register_candidate(name: str, factory: CandidateFactory) -> None:
    """Register (or overwrite) a named candidate factory."""
    if not name:
        raise ValueError("candidate name must be non-empty")
    _REGISTRY[name] = factory


def get_candidate_factory(name: str) -> Optional[CandidateFactory]:
    return _REGISTRY.get(name)


def has_candidate(name: str) -> bool:
    return name in _REGISTRY


def clear_registry() -> None:
    """
    Remove all registered candidates.

    Used by tests and callers that want a clean slate.
    """
    _REGISTRY.clear()


def list_candidates() -> List[str]:
    """Registered candidate names, sorted for stability."""
    return sorted(_REGISTRY.keys())


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------

def _module_tag(module: ModuleType, fallback: str) -> str:
    tag = getattr(module, "CANDIDATE_NAME", None)
    return tag if isinstance(tag, str) and tag else fallback


def _register_module(module: ModuleType, fallback: str, errors: Dict[str, LoadError]) -> None:
    name = _module_tag(module, fallback)
    factory = getattr(module, FACTORY_ATTR, None)
    if not callable(factory):
        errors[name] = LoadError(name, f"module {fallback} has no {FACTORY_ATTR}()")
        return
    register_candidate(name, factory)
    logger.debug("registered candidate %s from %s", name, module.__name__)


def discover_package(package: str = BUNDLED_PACKAGE) -> Dict[str, LoadError]:
    """
    Import every public module of `package` and register its factory.

    Returns the per-module load errors keyed by module stem (or tag).
    """
    errors: Dict[str, LoadError] = {}
    pkg = importlib.import_module(package)
    for info in pkgutil.iter_modules(pkg.__path__):
        if info.name.startswith("_") or info.ispkg:
            continue
        try:
            module = importlib.import_module(f"{package}.{info.name}")
        except SUBMISSION_ERRORS as e:
            errors[info.name] = LoadError(info.name, f"import failed: {e!r}")
            logger.warning("could not import %s.%s: %r", package, info.name, e)
            continue
        _register_module(module, info.name, errors)
    return errors


def _is_implementation_file(path: Path) -> bool:
    return path.is_file() and path.suffix == ".py" and not path.name.startswith("_")


@contextmanager
def _on_sys_path(root: Path) -> Iterator[None]:
    """Make sibling helper modules importable while submissions load."""
    entry = str(root.resolve())
    sys.path.insert(0, entry)
    try:
        yield
    finally:
        if entry in sys.path:
            sys.path.remove(entry)


def discover_directory(path: Path | str) -> Dict[str, LoadError]:
    """
    Load every implementation file in `path` (non-recursive) by file location.

    Modules are imported under a private name so they cannot shadow real
    packages. Files starting with "_" are not submissions, but submissions
    may import them. Raises FileNotFoundError if `path` is not a directory.
    """
    root = Path(path)
    if not root.is_dir():
        raise FileNotFoundError(f"candidates directory not found: {root}")

    errors: Dict[str, LoadError] = {}
    with _on_sys_path(root):
        for file in sorted(root.iterdir()):
            if not _is_implementation_file(file):
                continue
            stem = file.stem
            mod_name = f"_bstcheck_submission_{stem}"
            try:
                spec = importlib.util.spec_from_file_location(mod_name, file)
                if spec is None or spec.loader is None:
                    raise ImportError(f"no loader for {file}")
                module = importlib.util.module_from_spec(spec)
                sys.modules[mod_name] = module
                spec.loader.exec_module(module)
            except SUBMISSION_ERRORS as e:
                sys.modules.pop(mod_name, None)
                errors[stem] = LoadError(stem, f"import failed: {e!r}")
                logger.warning("could not load %s: %r", file, e)
                continue
            _register_module(module, stem, errors)
    return errors


# ---------------------------------------------------------------------------
# Instantiation
# ---------------------------------------------------------------------------

def instantiate(name: str, factory: CandidateFactory) -> object:
    """Build one candidate and check its capability set; raises LoadError."""
    try:
        obj = factory()
    except SUBMISSION_ERRORS as e:
        raise LoadError(name, f"factory raised {e!r}") from e
    missing = missing_capabilities(obj)
    if missing:
        raise LoadError(name, "missing capabilities: " + ", ".join(missing))
    return obj


def load_candidates(
    *,
    include_bundled: bool = True,
    directories: Iterable[Path | str] = (),
    only: Optional[Iterable[str]] = None,
) -> LoadResult:
    """
    Discover, register and instantiate every available candidate.

    Factories already in the registry (registered from code) are included.
    `only` restricts the result to the given names. Missing directories and
    `only` names that were never seen are recorded in LoadResult.problems,
    not as candidates.
    """
    result = LoadResult()
    discovery_errors: Dict[str, LoadError] = {}

    if include_bundled:
        discovery_errors.update(discover_package(BUNDLED_PACKAGE))
    for d in directories:
        try:
            discovery_errors.update(discover_directory(d))
        except FileNotFoundError as e:
            result.problems.append(str(e))
            logger.info("%s", e)

    wanted = set(only) if only is not None else None

    for name, err in discovery_errors.items():
        if wanted is None or name in wanted:
            result.errors[name] = err

    for name in list_candidates():
        if wanted is not None and name not in wanted:
            continue
        if name in result.errors:
            continue
        try:
            result.candidates[name] = instantiate(name, _REGISTRY[name])
        except LoadError as e:
            result.errors[name] = e
            logger.warning("candidate %s failed to load: %s", name, e.reason)

    if wanted is not None:
        for name in sorted(wanted - set(result.names())):
            result.problems.append(f"no such candidate: {name}")

    logger.info(
        "loaded %d candidate(s), %d load error(s)",
        len(result.candidates),
        len(result.errors),
    )
    return result
