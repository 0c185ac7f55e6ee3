import pytest

hypothesis = pytest.importorskip("hypothesis", reason="hypothesis required for fuzzer tests")

from hypothesis import given, settings, strategies as st

from bstcheck.core.reference_model import sorted_unique, successor_of, without

small_ints = st.integers(min_value=-10, max_value=10)


def test_empty_case_is_empty_view_not_error():
    assert sorted_unique([]) == []
    assert successor_of(3, []) is None


@pytest.mark.parametrize(
    "case, view",
    [
        ([5], [5]),
        ([3, 1, 2], [1, 2, 3]),
        ([2, 2, 2], [2]),
        ([5, 3, 8, 3, 1], [1, 3, 5, 8]),
    ],
)
def test_sorted_unique_scenarios(case, view):
    assert sorted_unique(case) == view


def test_successor_scenarios():
    assert successor_of(5, [5]) is None
    assert successor_of(1, [3, 1, 2]) == 2
    assert successor_of(3, [3, 1, 2]) is None
    assert successor_of(5, [5, 3, 8, 3, 1]) == 8


def test_successor_of_absent_value_is_none():
    assert successor_of(4, [5, 3, 8]) is None


def test_without_scenarios():
    assert without([2, 2, 2], 2) == []
    assert without([5, 3, 8, 3, 1], 3) == [1, 5, 8]
    assert without([1, 2], 7) == [1, 2]


@given(st.lists(small_ints).flatmap(lambda xs: st.tuples(st.just(xs), st.permutations(xs))))
@settings(max_examples=300, deadline=None)
def test_sorted_unique_ignores_input_order(pair):
    xs, shuffled = pair
    assert sorted_unique(xs) == sorted_unique(shuffled)


@given(st.lists(small_ints))
@settings(max_examples=300, deadline=None)
def test_sorted_unique_is_strictly_ascending_and_complete(xs):
    view = sorted_unique(xs)
    assert all(a < b for a, b in zip(view, view[1:]))
    assert set(view) == set(xs)


@given(st.lists(small_ints, min_size=1), st.data())
@settings(max_examples=300, deadline=None)
def test_successor_is_next_distinct_value(xs, data):
    v = data.draw(st.sampled_from(xs))
    s = successor_of(v, xs)
    if v == max(xs):
        assert s is None
    else:
        assert s is not None and s > v
        assert not any(v < x < s for x in xs)


@given(st.lists(small_ints, min_size=1), st.data())
@settings(max_examples=300, deadline=None)
def test_without_removes_exactly_one_value(xs, data):
    v = data.draw(st.sampled_from(xs))
    rest = without(xs, v)
    assert v not in rest
    assert rest == [x for x in sorted_unique(xs) if x != v]
