from __future__ import annotations

"""Confirmed reset of a drill's persisted history and cumulative stats."""

from typing import Callable, Optional, Protocol

from ..app.explain import trace as xtrace
from ..storage.store import KeyValueStore

CLEAR_HISTORY_MESSAGE = "Clear all history and statistics for this mode?"


class ConfirmationPrompt(Protocol):
    def __call__(self, message: str) -> bool: ...


def clear_generic_history(
    history_key: str,
    cumulative_key: Optional[str],
    render_fn: Callable[[], None],
    *,
    store: KeyValueStore,
    confirm: ConfirmationPrompt,
) -> bool:
    """Remove the stored history (and cumulative stats, if a key is given).

    Returns False without touching storage when the user declines. On
    confirm, both keys are removed and `render_fn` is called once. In-memory
    session state belongs to the caller.
    """
    if not confirm(CLEAR_HISTORY_MESSAGE):
        xtrace("history_clear_declined", history_key)
        return False
    store.remove(history_key)
    if cumulative_key:
        store.remove(cumulative_key)
    xtrace("history_cleared", history_key, cumulative_key=cumulative_key)
    render_fn()
    return True
