# src/addchain/verify.py
from __future__ import annotations

from collections.abc import Sequence


def chain_violation(values: Sequence[int]) -> str | None:
    """
    Return a short description of the first rule `values` breaks, or None
    when it is a valid addition chain (starts at 1, strictly increasing,
    each later element the sum of two earlier ones).
    """
    if not values:
        return "chain is empty"
    if values[0] != 1:
        return f"chain must start at 1, got {values[0]}"

    seen: set[int] = {values[0]}
    for i in range(1, len(values)):
        v = values[i]
        if v <= values[i - 1]:
            return f"values[{i}]={v} is not larger than values[{i - 1}]={values[i - 1]}"
        if not any((v - a) in seen for a in values[:i]):
            return f"values[{i}]={v} is not the sum of two earlier elements"
        seen.add(v)
    return None


def is_addition_chain(values: Sequence[int]) -> bool:
    return chain_violation(values) is None


def check_solution(values: Sequence[int], target_length: int, target_sum: int) -> str | None:
    """chain_violation() plus the length and sum targets."""
    why = chain_violation(values)
    if why:
        return why
    if len(values) != target_length:
        return f"length is {len(values)}, expected {target_length}"
    total = sum(values)
    if total != target_sum:
        return f"sum is {total}, expected {target_sum}"
    return None
