from __future__ import annotations

"""Problem-area rankers for the two cumulative stats shapes."""

from typing import Any, List, Mapping, Optional

from .schema import MistakeArea, ProblemArea

DEFAULT_SCORE_MIN_ATTEMPTS = 5
DEFAULT_MISTAKE_MIN_ATTEMPTS = 3
DEFAULT_MAX_RESULTS = 5
MISTAKE_RATE_THRESHOLD = 0.3


def get_generic_problem_areas(
    cumulative_stats: Optional[Mapping[str, Mapping[str, Any]]],
    min_attempts: Optional[int] = None,
) -> List[ProblemArea]:
    """Rank time-tracked items by (100 - successRate) + slowRate, worst first.

    Every item with at least `min_attempts` attempts is returned; there is
    no result limit. Rates are percentages (0-100), so the score is in 0-200.
    A missing `slow` count is treated as 0.
    """
    if not cumulative_stats:
        return []
    if min_attempts is None:
        min_attempts = DEFAULT_SCORE_MIN_ATTEMPTS
    areas: List[ProblemArea] = []
    for name, data in cumulative_stats.items():
        attempts = data.get("attempts", 0)
        if attempts <= 0 or attempts < min_attempts:
            continue
        first_try = data.get("firstTry", 0)
        slow = data.get("slow") or 0
        success_rate = (first_try / attempts) * 100
        slow_rate = (slow / attempts) * 100
        avg_time = data.get("totalTime", 0) / attempts
        areas.append(
            ProblemArea(
                name=name,
                success_rate=success_rate,
                slow_rate=slow_rate,
                avg_time=avg_time,
                attempts=attempts,
                first_try=first_try,
                slow=slow,
                problem_score=(100 - success_rate) + slow_rate,
            )
        )
    # sorted() is stable, ties keep mapping order
    return sorted(areas, key=lambda a: a.problem_score, reverse=True)


def _mean(values: Any) -> float:
    if not values:
        return 0
    return sum(values) / len(values)


def get_generic_mistake_areas(
    cumulative_stats: Optional[Mapping[str, Mapping[str, Any]]],
    min_attempts: Optional[int] = None,
    *,
    max_results: Optional[int] = None,
    avg_time_threshold: Optional[float] = None,
) -> List[MistakeArea]:
    """Filter mistake-tracked items by mistake rate, highest rate first.

    An item qualifies when mistakes/attempts > 0.3, or when an
    `avg_time_threshold` is given and the mean of the record's `times`
    exceeds it. `times` is whatever list the record carries right now; the
    mistake merger never accumulates it, so this is not a lifetime average.

    `max_results` and `avg_time_threshold` treat 0 like "not given".
    """
    if not cumulative_stats:
        return []
    if min_attempts is None:
        min_attempts = DEFAULT_MISTAKE_MIN_ATTEMPTS
    max_results = max_results or DEFAULT_MAX_RESULTS
    avg_time_threshold = avg_time_threshold or None

    matches: List[MistakeArea] = []
    for key, data in cumulative_stats.items():
        attempts = data.get("attempts", 0)
        if attempts <= 0 or attempts < min_attempts:
            continue
        mistake_rate = data.get("mistakes", 0) / attempts
        avg_time = _mean(data.get("times"))
        too_slow = avg_time_threshold is not None and avg_time > avg_time_threshold
        if mistake_rate > MISTAKE_RATE_THRESHOLD or too_slow:
            matches.append(MistakeArea(key=key, mistake_rate=mistake_rate, avg_time=avg_time, attempts=attempts))
    matches.sort(key=lambda a: a.mistake_rate, reverse=True)
    return matches[:max_results]

