from __future__ import annotations

"""Drill stats registry.

Maps configured drill ids to a stats profile (which record shape the drill
keeps, its storage keys and ranking thresholds) and dispatches to the
matching ranker and merger.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from ..config.config import StatsConfig
from ..stats.merge import update_generic_cumulative_stats, update_mistake_cumulative_stats
from ..stats.ranking import get_generic_mistake_areas, get_generic_problem_areas
from ..storage.records import cumulative_key, history_key, load_cumulative_stats
from ..storage.store import KeyValueStore


@dataclass(frozen=True)
class DrillStatsProfile:
    id: str
    name: str
    kind: str
    min_attempts: int
    max_results: Optional[int] = None
    avg_time_threshold: Optional[float] = None

    @property
    def history_key(self) -> str:
        return history_key(self.id)

    @property
    def cumulative_key(self) -> Optional[str]:
        if self.kind == "history":
            return None
        return cumulative_key(self.id)

    @property
    def has_cumulative(self) -> bool:
        return self.kind != "history"


def _profile(drill_id: str, cfg: StatsConfig) -> DrillStatsProfile:
    d = cfg.drills[drill_id]
    if d.kind == "mistake":
        rk = cfg.ranking.mistake
        return DrillStatsProfile(
            id=drill_id,
            name=d.name or drill_id,
            kind=d.kind,
            min_attempts=d.min_attempts or rk.min_attempts,
            max_results=d.max_results or rk.max_results,
            avg_time_threshold=d.avg_time_threshold if d.avg_time_threshold is not None else rk.avg_time_threshold,
        )
    return DrillStatsProfile(
        id=drill_id,
        name=d.name or drill_id,
        kind=d.kind,
        min_attempts=d.min_attempts or cfg.ranking.score.min_attempts,
    )


def list_drills(cfg: StatsConfig) -> List[DrillStatsProfile]:
    return [_profile(drill_id, cfg) for drill_id in cfg.drills]


def get_drill(cfg: StatsConfig, drill_id: str) -> DrillStatsProfile:
    if drill_id not in cfg.drills:
        raise KeyError(f"Unknown drill id: {drill_id}")
    return _profile(drill_id, cfg)


def _require_cumulative(profile: DrillStatsProfile) -> str:
    key = profile.cumulative_key
    if key is None:
        raise ValueError(f"Drill '{profile.id}' keeps no cumulative stats")
    return key


def load_profile_stats(profile: DrillStatsProfile, store: KeyValueStore, *, strict: bool = False) -> Dict[str, Dict[str, Any]]:
    return load_cumulative_stats(store, _require_cumulative(profile), profile.kind, strict=strict)


def rank_problem_areas(profile: DrillStatsProfile, cumulative_stats: Optional[Mapping[str, Any]]) -> List[Any]:
    """Run the ranker that matches the drill's record shape."""
    if profile.kind == "time":
        return get_generic_problem_areas(cumulative_stats, profile.min_attempts)
    if profile.kind == "mistake":
        return get_generic_mistake_areas(
            cumulative_stats,
            profile.min_attempts,
            max_results=profile.max_results,
            avg_time_threshold=profile.avg_time_threshold,
        )
    return []


def merge_session(
    profile: DrillStatsProfile,
    session_stats: Mapping[str, Mapping[str, Any]],
    cumulative_stats: Dict[str, Dict[str, Any]],
    *,
    store: KeyValueStore,
) -> Dict[str, Dict[str, Any]]:
    key = _require_cumulative(profile)
    if profile.kind == "time":
        return update_generic_cumulative_stats(key, session_stats, cumulative_stats, store=store)
    return update_mistake_cumulative_stats(key, session_stats, cumulative_stats, store=store)
