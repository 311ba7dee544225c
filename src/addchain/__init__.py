from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("addchain")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .bounds import max_sum, min_sum, sum_n_2
from .candidates import possible_next_values
from .chain import Chain
from .config import has_profile, load_settings, read_current_profile
from .runtime import APPLY, CFG
from .search import SearchAborted, SearchLimits, SearchResult, SearchStats, search, solve, try_chain
from .verify import check_solution, is_addition_chain
from .workspace import workspace_dir

__all__ = [
    "APPLY",
    "CFG",
    "Chain",
    "SearchAborted",
    "SearchLimits",
    "SearchResult",
    "SearchStats",
    "__version__",
    "check_solution",
    "has_profile",
    "is_addition_chain",
    "load_settings",
    "max_sum",
    "min_sum",
    "possible_next_values",
    "read_current_profile",
    "search",
    "solve",
    "sum_n_2",
    "try_chain",
    "workspace_dir",
]
