# src/addchain/chain.py
from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field


@dataclass
class Chain:
    """
    A partial or complete addition chain with its running sum.

    values always starts with 1. `sum` is kept up to date by add(), it is
    never recomputed from `values`. Backtracking never removes values:
    the search extends a copy and drops it when the branch fails.
    """
    values: list[int] = field(default_factory=lambda: [1])
    sum: int = 1

    @classmethod
    def new(cls) -> Chain:
        return cls()

    def add(self, v: int) -> None:
        """Append v. No validation, callers only pass legal next values."""
        self.values.append(v)
        self.sum += v

    def length(self) -> int:
        return len(self.values)

    @property
    def last_value(self) -> int:
        return self.values[-1]

    def copy(self) -> Chain:
        return Chain(values=list(self.values), sum=self.sum)

    def extended(self, v: int) -> Chain:
        """New chain = this chain + [v]; self is left untouched."""
        child = self.copy()
        child.add(v)
        return child

    def __len__(self) -> int:
        return len(self.values)

    def __getitem__(self, i: int) -> int:
        return self.values[i]

    def __iter__(self) -> Iterator[int]:
        return iter(self.values)
