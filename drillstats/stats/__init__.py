from .schema import (
    STATS_KINDS,
    StatsKind,
    TimeTrackedRecord,
    MistakeTrackedRecord,
    TimeSessionRecord,
    MistakeSessionRecord,
    ProblemArea,
    MistakeArea,
    validate_session,
)
from .ranking import get_generic_problem_areas, get_generic_mistake_areas
from .merge import update_generic_cumulative_stats, update_mistake_cumulative_stats
from .reset import CLEAR_HISTORY_MESSAGE, ConfirmationPrompt, clear_generic_history

__all__ = [
    "STATS_KINDS",
    "StatsKind",
    "TimeTrackedRecord",
    "MistakeTrackedRecord",
    "TimeSessionRecord",
    "MistakeSessionRecord",
    "ProblemArea",
    "MistakeArea",
    "validate_session",
    "get_generic_problem_areas",
    "get_generic_mistake_areas",
    "update_generic_cumulative_stats",
    "update_mistake_cumulative_stats",
    "CLEAR_HISTORY_MESSAGE",
    "ConfirmationPrompt",
    "clear_generic_history",
]
