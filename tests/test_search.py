# tests/test_search.py
"""
Tests for the chain, the bound calculator, candidate generation and the search.

Run: pytest -v
"""

from __future__ import annotations

import sys

import pytest

from addchain.bounds import max_sum, min_sum, sum_n_2
from addchain.candidates import possible_next_values
from addchain.chain import Chain
from addchain.search import SearchAborted, SearchLimits, SearchStats, search, solve, try_chain
from addchain.verify import check_solution

# ---------- helpers -----------------------------------------------------------


def _chain(*values: int) -> Chain:
    c = Chain.new()
    for v in values[1:]:
        c.add(v)
    return c


# ---------- Chain -------------------------------------------------------------


def test_new_chain_is_singleton_one():
    c = Chain.new()
    assert c.values == [1]
    assert c.sum == 1
    assert c.length() == 1
    assert c.last_value == 1


def test_add_keeps_running_sum():
    c = Chain.new()
    c.add(2)
    c.add(4)
    assert c.values == [1, 2, 4]
    assert c.sum == 7
    assert len(c) == 3
    assert c[1] == 2
    assert list(c) == [1, 2, 4]


def test_extended_leaves_parent_untouched():
    parent = _chain(1, 2, 4)
    child = parent.extended(8)
    assert child.values == [1, 2, 4, 8]
    assert child.sum == 15
    assert parent.values == [1, 2, 4]
    assert parent.sum == 7
    assert child.values is not parent.values


# ---------- Bound calculator --------------------------------------------------


@pytest.mark.parametrize("n, expected", [(0, 0), (1, 1), (2, 3), (4, 10), (10, 55)])
def test_sum_n_2(n, expected):
    assert sum_n_2(n) == expected


MIN_CASES = [
    ((1,), 2, 3),            # 1 2
    ((1,), 5, 15),           # 1 2 3 4 5
    ((1, 2, 4), 4, 12),      # 1 2 4 5
    ((1, 2, 4), 5, 18),      # 1 2 4 5 6
]

MAX_CASES = [
    ((1,), 2, 3),            # 1 2
    ((1,), 5, 31),           # 1 2 4 8 16
    ((1, 2, 3), 5, 24),      # 1 2 3 6 12
    ((1, 2, 3, 4), 6, 34),   # 1 2 3 4 8 16
]


@pytest.mark.parametrize("values, target_length, expected", MIN_CASES)
def test_min_sum(values, target_length, expected):
    assert min_sum(_chain(*values), target_length) == expected


@pytest.mark.parametrize("values, target_length, expected", MAX_CASES)
def test_max_sum(values, target_length, expected):
    assert max_sum(_chain(*values), target_length) == expected


def test_complete_chain_bounds_collapse_to_sum():
    c = _chain(1, 2, 3, 6)
    assert min_sum(c, 4) == c.sum == max_sum(c, 4)


def test_bounds_non_decreasing_in_largest_element():
    # same length, growing last element
    chains = [_chain(1, 2, 4, 5), _chain(1, 2, 4, 6), _chain(1, 2, 4, 8)]
    mins = [min_sum(c, 7) for c in chains]
    maxs = [max_sum(c, 7) for c in chains]
    assert mins == sorted(mins)
    assert maxs == sorted(maxs)


def test_start_chain_window_for_length_5():
    start = Chain.new()
    assert (min_sum(start, 5), max_sum(start, 5)) == (15, 31)


# ---------- Candidate generator -----------------------------------------------


@pytest.mark.parametrize("values, expected", [
    ((1,), [2]),
    ((1, 2), [3, 4]),
    ((1, 2, 4, 8, 9), [10, 11, 12, 13, 16, 17, 18]),
])
def test_possible_next_values(values, expected):
    assert possible_next_values(_chain(*values)) == expected


@pytest.mark.parametrize("values", [
    (1, 2, 3),
    (1, 2, 3, 5, 8, 13),
    (1, 2, 4, 5, 9, 18, 19),
    (1, 2, 3, 6, 12, 24, 30),
])
def test_candidates_ascending_unique_and_larger(values):
    c = _chain(*values)
    nxt = possible_next_values(c)
    assert nxt == sorted(set(nxt))
    assert all(v > c.last_value for v in nxt)
    pair_sums = {a + b for a in values for b in values}
    assert set(nxt) == {s for s in pair_sums if s > c.last_value}


# ---------- Search engine -----------------------------------------------------

SOLVABLE = [
    (1, 1),
    (2, 3),
    (5, 15),
    (5, 18),
    (5, 19),
    (5, 20),
    (5, 31),
    (10, 127),
    (13, 743),
]

UNSOLVABLE = [
    (1, 2),
    (5, 14),   # below min_sum of the start chain
    (5, 30),   # inside the bounds, but no chain has this sum
    (5, 32),   # above max_sum of the start chain
]


@pytest.mark.parametrize("target_length, target_sum", SOLVABLE)
def test_solve_finds_valid_chain(target_length, target_sum):
    values = solve(target_length, target_sum)
    assert values is not None
    assert check_solution(values, target_length, target_sum) is None


@pytest.mark.parametrize("target_length, target_sum", UNSOLVABLE)
def test_solve_reports_no_solution(target_length, target_sum):
    assert solve(target_length, target_sum) is None


@pytest.mark.parametrize("target_length, target_sum, expected", [
    (2, 3, [1, 2]),
    (5, 15, [1, 2, 3, 4, 5]),
    (5, 18, [1, 2, 3, 4, 8]),
    (5, 31, [1, 2, 4, 8, 16]),
])
def test_first_chain_in_ascending_order(target_length, target_sum, expected):
    assert solve(target_length, target_sum) == expected


def test_try_chain_from_partial_chain():
    start = _chain(1, 2, 4)
    found = try_chain(5, 18, start)
    assert found is not None
    assert found.values == [1, 2, 4, 5, 6]
    assert start.values == [1, 2, 4]


def test_try_chain_at_terminal_length():
    assert try_chain(3, 7, _chain(1, 2, 4)).values == [1, 2, 4]
    assert try_chain(3, 6, _chain(1, 2, 4)) is None


def test_search_collects_stats():
    result = search(5, 30)
    assert not result.found
    assert result.values is None
    st = result.stats
    assert st.nodes >= 1
    assert st.candidates >= st.pruned > 0
    assert st.max_depth <= 5
    assert st.elapsed_s >= 0.0


def test_search_accepts_external_stats():
    stats = SearchStats()
    result = search(5, 18, stats=stats)
    assert result.stats is stats
    assert stats.nodes > 0


def test_node_limit_aborts_search():
    with pytest.raises(SearchAborted) as exc:
        search(13, 743, limits=SearchLimits(max_nodes=1))
    assert exc.value.stats.nodes == 2
    assert "node limit" in exc.value.reason


def test_generous_limits_do_not_change_result():
    limited = search(10, 127, limits=SearchLimits(max_nodes=10_000_000, time_limit_s=600))
    assert limited.values == solve(10, 127)


@pytest.mark.parametrize("target_length, target_sum", [(0, 5), (5, 0), (-1, 3)])
def test_search_rejects_non_positive_targets(target_length, target_sum):
    with pytest.raises(ValueError):
        search(target_length, target_sum)


def test_time_limit_aborts_search():
    with pytest.raises(SearchAborted) as exc:
        search(13, 743, limits=SearchLimits(time_limit_s=1e-9))
    assert "time limit" in exc.value.reason
    assert exc.value.stats.nodes == 1


def test_deep_chain_beyond_recursion_limit():
    # [1, 2, ..., n] is the only chain reaching the minimum sum
    old = sys.getrecursionlimit()
    sys.setrecursionlimit(200)
    try:
        n = 300
        assert solve(n, sum_n_2(n)) == list(range(1, n + 1))
        assert try_chain(n, sum_n_2(n), Chain.new()).values == list(range(1, n + 1))
        assert sys.getrecursionlimit() == 200
    finally:
        sys.setrecursionlimit(old)
