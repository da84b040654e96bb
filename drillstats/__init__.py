from __future__ import annotations

"""drillstats: problem-area ranking and cumulative stats for practice drills."""

from .stats import (
    get_generic_problem_areas,
    get_generic_mistake_areas,
    update_generic_cumulative_stats,
    update_mistake_cumulative_stats,
    clear_generic_history,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "get_generic_problem_areas",
    "get_generic_mistake_areas",
    "update_generic_cumulative_stats",
    "update_mistake_cumulative_stats",
    "clear_generic_history",
]
