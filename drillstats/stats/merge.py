from __future__ import annotations

"""Fold one practice session into a drill's cumulative stats and persist it.

Both mergers mutate the cumulative mapping they are given, then write the
whole mapping under the storage key as compact JSON (one `set` per call).
"""

import json
from typing import Any, Dict, Mapping

from ..app.explain import trace as xtrace
from ..storage.store import KeyValueStore


def _persist(store: KeyValueStore, storage_key: str, cumulative_stats: Dict[str, Any]) -> None:
    store.set(storage_key, json.dumps(cumulative_stats, separators=(",", ":")))


def update_generic_cumulative_stats(
    storage_key: str,
    session_stats: Mapping[str, Mapping[str, Any]],
    cumulative_stats: Dict[str, Dict[str, Any]],
    *,
    store: KeyValueStore,
) -> Dict[str, Dict[str, Any]]:
    """Merge time-tracked session results.

    Session item: {total, firstTry, times: [...], slow?}
    Cumulative item: {attempts, firstTry, totalTime, slow}
    """
    for name, data in session_stats.items():
        node = cumulative_stats.setdefault(name, {"attempts": 0, "firstTry": 0, "totalTime": 0, "slow": 0})
        node["attempts"] = node.get("attempts", 0) + data["total"]
        node["firstTry"] = node.get("firstTry", 0) + data["firstTry"]
        node["totalTime"] = node.get("totalTime", 0) + sum(data.get("times") or [])
        node["slow"] = (node.get("slow") or 0) + (data.get("slow") or 0)
    _persist(store, storage_key, cumulative_stats)
    xtrace("cumulative_merged", storage_key, kind="time", items=sorted(session_stats))
    return cumulative_stats


def update_mistake_cumulative_stats(
    storage_key: str,
    session_stats: Mapping[str, Mapping[str, Any]],
    cumulative_stats: Dict[str, Dict[str, Any]],
    *,
    store: KeyValueStore,
) -> Dict[str, Dict[str, Any]]:
    """Merge mistake-tracked session results.

    Only attempts and mistakes are summed. A `times` list on the cumulative
    record is left exactly as it was.
    """
    for key, stat in session_stats.items():
        node = cumulative_stats.setdefault(key, {"attempts": 0, "mistakes": 0})
        node["attempts"] = node.get("attempts", 0) + stat["attempts"]
        node["mistakes"] = node.get("mistakes", 0) + stat["mistakes"]
    _persist(store, storage_key, cumulative_stats)
    xtrace("cumulative_merged", storage_key, kind="mistake", items=sorted(session_stats))
    return cumulative_stats
