"""
Bounded-time execution of candidate code.

A candidate that never returns (say, a removal that loops forever) must not
hang the whole sweep. The call runs on a daemon worker thread; if it has not
finished when the deadline passes the worker is abandoned and
CandidateTimeout is raised in the caller.

Python cannot kill a thread, so an abandoned worker keeps burning CPU until
the process exits.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Dict, Optional, TypeVar

from bstcheck.errors import CandidateTimeout

T = TypeVar("T")


def call_with_deadline(
    fn: Callable[..., T], *args: Any, timeout: Optional[float] = None
) -> T:
    """
    Run fn(*args) and return its result, re-raising whatever it raised.

    timeout=None (or <= 0) runs the call inline with no guard.
    """
    if timeout is None or timeout <= 0:
        return fn(*args)

    box: Dict[str, Any] = {}

    def _target() -> None:
        try:
            box["value"] = fn(*args)
        except BaseException as e:  # re-raised on the calling thread below
            box["error"] = e

    worker = threading.Thread(target=_target, name="bstcheck-guard", daemon=True)
    worker.start()
    worker.join(timeout)
    if worker.is_alive():
        raise CandidateTimeout(timeout)
    if "error" in box:
        raise box["error"]
    return box["value"]
