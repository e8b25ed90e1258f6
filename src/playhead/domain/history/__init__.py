"""History domain - bounded, deduplicated log of played tracks."""

from .log import (
    HISTORY_LIMIT,
    HistoryEntry,
    add_to_history,
    history_from_records,
    history_to_records,
)

__all__ = [
    "HISTORY_LIMIT",
    "HistoryEntry",
    "add_to_history",
    "history_from_records",
    "history_to_records",
]
