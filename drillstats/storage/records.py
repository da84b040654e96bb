from __future__ import annotations

"""Read/write helpers for the two records each drill owns.

Key convention (kept compatible with existing saved data):
- "<drill>_history":          JSON list of session log entries, newest first
- "<drill>_cumulativeStats":  JSON object, item name -> cumulative record
"""

import json
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..app.explain import trace as xtrace
from ..stats.schema import cumulative_model
from .store import KeyValueStore

HISTORY_SUFFIX = "_history"
CUMULATIVE_SUFFIX = "_cumulativeStats"


def history_key(drill_id: str) -> str:
    return f"{drill_id}{HISTORY_SUFFIX}"


def cumulative_key(drill_id: str) -> str:
    return f"{drill_id}{CUMULATIVE_SUFFIX}"


def _load_json(store: KeyValueStore, key: str) -> Any:
    raw = store.get(key)
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        xtrace("history_load_failed", key, error=str(e))
        return None


def load_cumulative_stats(store: KeyValueStore, key: str, kind: str, *, strict: bool = False) -> Dict[str, Dict[str, Any]]:
    """Load a cumulative mapping.

    By default entries that fail validation are dropped and unreadable
    values load as an empty mapping, which is fine for read-only views.
    With `strict=True` (used before a merge, which writes the whole mapping
    back) any such problem raises ValueError instead, so stored counts are
    never overwritten by a partial mapping.
    """
    model = cumulative_model(kind)
    raw = store.get(key)
    if raw is None:
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        if strict:
            raise ValueError(f"Stored value under '{key}' is not valid JSON: {e}") from e
        xtrace("cumulative_load_failed", key=key, kind=kind, error=str(e))
        return {}
    if not isinstance(data, dict):
        if strict:
            raise ValueError(f"Stored value under '{key}' is not a JSON object")
        xtrace("cumulative_load_failed", key=key, kind=kind, error="not a JSON object")
        return {}
    out: Dict[str, Dict[str, Any]] = {}
    for name, rec in data.items():
        try:
            out[str(name)] = model.model_validate(rec).to_store()
        except ValidationError as e:
            if strict:
                raise ValueError(f"Stored {kind} record '{name}' under '{key}' is invalid; refusing to overwrite it:\n{e}") from e
            xtrace("cumulative_entry_dropped", key=key, kind=kind, item=name, errors=e.error_count())
    return out


def load_history(store: KeyValueStore, key: str) -> List[Any]:
    data = _load_json(store, key)
    if not isinstance(data, list):
        return []
    return data


def append_history_entry(store: KeyValueStore, key: str, entry: Dict[str, Any], *, limit: Optional[int] = None) -> List[Any]:
    """Prepend one session log entry and persist the list."""
    history = load_history(store, key)
    history.insert(0, entry)
    if limit is not None and limit > 0:
        del history[limit:]
    store.set(key, json.dumps(history, separators=(",", ":")))
    return history
