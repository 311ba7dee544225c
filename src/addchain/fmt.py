# src/addchain/fmt.py
from __future__ import annotations

import re
from collections.abc import Sequence

from colorama import Fore, Style

from addchain.runtime import CFG
from addchain.search import SearchResult, SearchStats

# Single source of truth for ANSI stripping
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

NO_SOLUTION = "No solution."


def strip_ansi(s: str | None) -> str:
    """Return s with ANSI escape sequences removed."""
    return "" if s is None else ANSI_RE.sub("", s)


def _use_color() -> bool:
    return bool(CFG("OUTPUT.COLOR", True))


def format_chain(values: Sequence[int]) -> str:
    """[1, 2, 4, ...] as printed by the tool."""
    return "[" + ", ".join(str(v) for v in values) + "]"


def format_result(result: SearchResult) -> str:
    if not result.found:
        text = NO_SOLUTION
        return f"{Fore.RED}{text}{Style.RESET_ALL}" if _use_color() else text
    text = format_chain(result.values or [])
    return f"{Fore.GREEN}{text}{Style.RESET_ALL}" if _use_color() else text


def format_stats(stats: SearchStats) -> str:
    """One-line summary of the search counters."""
    return (
        f"nodes={stats.nodes:,}  candidates={stats.candidates:,}  "
        f"pruned={stats.pruned:,} (low {stats.pruned_low:,}, high {stats.pruned_high:,})  "
        f"depth={stats.max_depth}  time={stats.elapsed_s:.3f}s"
    )


def format_header(target_length: int, target_sum: int) -> str:
    head = f"length {target_length}, sum {target_sum}:"
    return f"{Style.BRIGHT}{head}{Style.RESET_ALL}" if _use_color() else head
