from __future__ import annotations

"""Minimal tracing helpers (Explain Mode).

Enable with the CLI flag (or `explain: true` in the config) to get one line
per merge, load, rank and reset:

    [EXPLAIN] merge.cumulative_merged [int_cumulativeStats] :: {"items":["C"],"kind":"time"}
"""

import json
import sys
from typing import Any, Optional, TextIO

_ENABLED = False
_STREAM: TextIO | None = None

# event -> component that emits it
EVENT_SOURCES = {
    "cumulative_merged": "merge",
    "problems_ranked": "rank",
    "history_cleared": "reset",
    "history_clear_declined": "reset",
    "cumulative_load_failed": "records",
    "cumulative_entry_dropped": "records",
    "history_load_failed": "records",
    "store_backup": "store",
}


def enable(flag: bool = True, stream: TextIO | None = None) -> None:
    global _ENABLED, _STREAM
    _ENABLED = bool(flag)
    _STREAM = stream


def enabled() -> bool:
    return _ENABLED


def format_line(event: str, key: Optional[str] = None, **fields: Any) -> str:
    head = f"[EXPLAIN] {EVENT_SOURCES.get(event, 'app')}.{event}"
    if key:
        head += f" [{key}]"
    # default=str: paths and other odd values still print
    return f"{head} :: {json.dumps(fields, separators=(',', ':'), sort_keys=True, default=str)}"


def trace(event: str, key: Optional[str] = None, **fields: Any) -> None:
    """Print one trace line; `key` is the storage key the event concerns."""
    if not _ENABLED:
        return
    print(format_line(event, key, **fields), file=_STREAM or sys.stdout)
