from .store import KeyValueStore, MemoryStore, JsonFileStore
from .records import (
    HISTORY_SUFFIX,
    CUMULATIVE_SUFFIX,
    history_key,
    cumulative_key,
    load_cumulative_stats,
    load_history,
    append_history_entry,
)

__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "HISTORY_SUFFIX",
    "CUMULATIVE_SUFFIX",
    "history_key",
    "cumulative_key",
    "load_cumulative_stats",
    "load_history",
    "append_history_entry",
]
