# src/addchain/candidates.py
from __future__ import annotations

from addchain.chain import Chain


def possible_next_values(chain: Chain) -> list[int]:
    """
    Legal next elements of `chain`, strictly ascending and without duplicates.

    Only sums larger than the current maximum are kept: any addition chain
    can be reordered to be increasing, so this loses no solutions and skips
    the permutations of the same chain.
    """
    values = chain.values
    biggest = chain.last_value
    seen: set[int] = set()
    for i, a in enumerate(values):
        for b in values[i:]:
            nxt = a + b
            if nxt > biggest:
                seen.add(nxt)
    return sorted(seen)
