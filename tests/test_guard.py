import threading

import pytest

from bstcheck.core.guard import call_with_deadline
from bstcheck.errors import CandidateTimeout


def test_returns_result():
    assert call_with_deadline(lambda a, b: a + b, 1, 2, timeout=1.0) == 3


def test_reraises_candidate_exception():
    def boom():
        raise KeyError("nope")

    with pytest.raises(KeyError):
        call_with_deadline(boom, timeout=1.0)


def test_times_out_on_hang():
    release = threading.Event()
    try:
        with pytest.raises(CandidateTimeout) as ei:
            call_with_deadline(release.wait, timeout=0.05)
        assert ei.value.timeout == 0.05
        assert "0.05s" in str(ei.value)
    finally:
        release.set()


@pytest.mark.parametrize("timeout", [None, 0])
def test_disabled_guard_runs_inline(timeout):
    seen = []
    call_with_deadline(lambda: seen.append(threading.current_thread()), timeout=timeout)
    assert seen == [threading.current_thread()]


def test_guarded_call_runs_on_worker_thread():
    seen = []
    call_with_deadline(lambda: seen.append(threading.current_thread()), timeout=1.0)
    assert seen and seen[0] is not threading.current_thread()
