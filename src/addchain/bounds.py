# -----------------------------------------------------------------------------
#  bounds.py
#  Reachable-sum bounds used for branch-and-bound pruning
# -----------------------------------------------------------------------------
#
#  Both bounds take target_length as an element count (not the number of
#  additions) and only look at (last_value, sum, length) of the chain.

from __future__ import annotations

from addchain.chain import Chain


def sum_n_2(n: int) -> int:
    """Triangular number 1 + 2 + ... + n."""
    return n * (n + 1) // 2


def min_sum(chain: Chain, target_length: int) -> int:
    """
    Smallest total any completion of `chain` to target_length elements can have.

    The cheapest continuation is biggest+1, biggest+2, ..., biggest+delta.
    """
    delta = target_length - chain.length()
    biggest = chain.last_value
    # - biggest: the series below starts at biggest, which is already in chain.sum
    next_n = (biggest - 1) * (delta + 1) + sum_n_2(delta + 1) - biggest
    return next_n + chain.sum


def max_sum(chain: Chain, target_length: int) -> int:
    """
    Largest total any completion of `chain` to target_length elements can have.

    Every new element is at most twice the current maximum, so the best
    continuation doubles: 2*biggest, 4*biggest, ..., 2**delta * biggest.
    """
    delta = target_length - chain.length()
    biggest = chain.last_value
    # sum of 2**k for k=1..delta == 2**(delta+1) - 2
    return biggest * (2 ** (delta + 1) - 2) + chain.sum

