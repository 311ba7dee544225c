# -----------------------------------------------------------------------------
#  search.py
#  Depth-first branch-and-bound search for addition chains
# -----------------------------------------------------------------------------

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from time import perf_counter

from addchain.bounds import max_sum, min_sum
from addchain.candidates import possible_next_values
from addchain.chain import Chain
from addchain.runtime import CFG, debug

# The wall clock is read on the first node and every _CLOCK_EVERY nodes after it
_CLOCK_EVERY = 1024

# frames kept free above the search depth
_STACK_HEADROOM = 1000


@dataclass
class SearchStats:
    nodes: int = 0                   # chains handed to try_chain
    candidates: int = 0              # next values generated
    pruned_low: int = 0              # target below min_sum
    pruned_high: int = 0             # target above max_sum
    max_depth: int = 0               # longest chain seen (elements)
    elapsed_s: float = 0.0

    @property
    def pruned(self) -> int:
        return self.pruned_low + self.pruned_high


@dataclass(frozen=True)
class SearchLimits:
    max_nodes: int | None = None
    time_limit_s: float | None = None

    @classmethod
    def from_runtime(cls) -> SearchLimits:
        """Limits from the active profile; 0 or a missing key means unlimited."""
        nodes = CFG("SEARCH.MAX_NODES", 0)
        secs = CFG("SEARCH.TIME_LIMIT_S", 0)
        return cls(
            max_nodes=int(nodes) if nodes else None,
            time_limit_s=float(secs) if secs else None,
        )

    @property
    def unlimited(self) -> bool:
        return self.max_nodes is None and self.time_limit_s is None


class SearchAborted(Exception):
    """A SearchLimits bound was hit before the search finished."""

    def __init__(self, reason: str, stats: SearchStats):
        super().__init__(reason)
        self.reason = reason
        self.stats = stats


@dataclass
class SearchResult:
    target_length: int
    target_sum: int
    chain: Chain | None
    stats: SearchStats = field(default_factory=SearchStats)

    @property
    def found(self) -> bool:
        return self.chain is not None

    @property
    def values(self) -> list[int] | None:
        return None if self.chain is None else list(self.chain.values)


class _Searcher:
    def __init__(self, target_length: int, target_sum: int,
                 limits: SearchLimits | None = None, stats: SearchStats | None = None):
        self.target_length = target_length
        self.target_sum = target_sum
        self.limits = limits or SearchLimits()
        self.stats = stats if stats is not None else SearchStats()
        self._t0 = perf_counter()

    def _check_limits(self) -> None:
        lim = self.limits
        st = self.stats
        if lim.max_nodes is not None and st.nodes > lim.max_nodes:
            raise SearchAborted(f"node limit of {lim.max_nodes} reached", st)
        if lim.time_limit_s is not None and st.nodes % _CLOCK_EVERY == 1:
            if perf_counter() - self._t0 > lim.time_limit_s:
                raise SearchAborted(f"time limit of {lim.time_limit_s:g}s reached", st)

    def try_chain(self, chain: Chain) -> Chain | None:
        st = self.stats
        st.nodes += 1
        st.max_depth = max(st.max_depth, chain.length())
        if not self.limits.unlimited:
            self._check_limits()

        if chain.length() == self.target_length:
            return chain if chain.sum == self.target_sum else None

        for v in possible_next_values(chain):
            st.candidates += 1
            child = chain.extended(v)

            if self.target_sum < min_sum(child, self.target_length):
                # forced to overshoot the target in the remaining slots
                st.pruned_low += 1
                continue
            if self.target_sum > max_sum(child, self.target_length):
                # even doubling every step falls short
                st.pruned_high += 1
                continue

            found = self.try_chain(child)
            if found is not None:
                return found
        return None

    def run(self, start: Chain) -> Chain | None:
        # one frame per element still to add
        old_limit = sys.getrecursionlimit()
        need = self.target_length + _STACK_HEADROOM
        if old_limit < need:
            debug(f"raising recursion limit to {need}")
            sys.setrecursionlimit(need)
        try:
            return self.try_chain(start)
        finally:
            self.stats.elapsed_s = perf_counter() - self._t0
            sys.setrecursionlimit(old_limit)


def try_chain(target_length: int, target_sum: int, chain: Chain) -> Chain | None:
    """
    Complete `chain` to exactly target_length elements summing to target_sum.

    Candidates are tried in ascending order, depth first; the first chain
    that fits is returned, None when the subtree is exhausted.
    """
    return _Searcher(target_length, target_sum).run(chain)


def search(target_length: int, target_sum: int, *,
           limits: SearchLimits | None = None,
           stats: SearchStats | None = None) -> SearchResult:
    """
    Run the search from the singleton chain [1] and report statistics.

    Raises SearchAborted when `limits` are exceeded; the partial statistics
    travel on the exception.
    """
    if target_length < 1 or target_sum < 1:
        raise ValueError("target_length and target_sum must be positive")
    searcher = _Searcher(target_length, target_sum, limits=limits, stats=stats)
    found = searcher.run(Chain.new())
    return SearchResult(target_length, target_sum, found, searcher.stats)


def solve(target_length: int, target_sum: int) -> list[int] | None:
    """Values of the first addition chain with the given length and sum, or None."""
    return search(target_length, target_sum).values
