"""
Persistence of player preferences and history.

Only {volume, isMuted, isShuffled, repeatMode, history} survive restarts.
The queue, cursor and playback position are never written, so a fresh
session always starts with an empty queue.
"""

from pathlib import Path
from typing import Any, Callable, Optional

from loguru import logger

from playhead.core.storage import load_record, save_record
from playhead.domain.history.log import history_from_records, history_to_records

from .selection import RepeatMode
from .state import PlayerStore, StoreEvent

STORAGE_NAME = "player-storage"

PERSISTED_KEYS = ("volume", "isMuted", "isShuffled", "repeatMode", "history")

# Actions that never touch persisted fields
_TRANSIENT_ACTIONS = frozenset(
    {
        "report_progress",
        "set_current_time",
        "set_duration",
        "set_buffered",
        "set_loading",
        "begin_seek",
        "end_seek",
        "toggle_play",
        "play",
        "pause",
        "set_playback_speed",
        "set_video_mode",
        "toggle_video_mode",
        "close_mini_player",
    }
)


def partialize(store: PlayerStore) -> dict[str, Any]:
    """Extract the persisted subset of the store."""
    return {
        "volume": store.volume,
        "isMuted": store.is_muted,
        "isShuffled": store.is_shuffled,
        "repeatMode": store.repeat_mode.value,
        "history": history_to_records(store.history),
    }


def rehydrate(store: PlayerStore, record: Optional[dict[str, Any]]) -> None:
    """Apply a persisted record to ``store``; unknown or bad values are ignored."""
    if not record:
        return

    volume = record.get("volume")
    if not isinstance(volume, (int, float)) or isinstance(volume, bool):
        volume = None

    history = record.get("history")
    store.restore(
        volume=volume,
        is_muted=_as_bool(record.get("isMuted")),
        is_shuffled=_as_bool(record.get("isShuffled")),
        repeat_mode=(
            RepeatMode.parse(record["repeatMode"]) if "repeatMode" in record else None
        ),
        history=(
            history_from_records(history, limit=store.history_limit)
            if isinstance(history, list)
            else None
        ),
    )
    logger.info(
        f"Restored player preferences: volume={store.volume}, "
        f"shuffle={store.is_shuffled}, repeat={store.repeat_mode.value}, "
        f"history={len(store.history)}"
    )


def load_player_state(store: PlayerStore, data_dir: Optional[Path] = None) -> None:
    rehydrate(store, load_record(STORAGE_NAME, data_dir))


def save_player_state(store: PlayerStore, data_dir: Optional[Path] = None) -> bool:
    return save_record(STORAGE_NAME, partialize(store), data_dir)


def bind_persistence(
    store: PlayerStore, data_dir: Optional[Path] = None
) -> Callable[[], None]:
    """Load saved state into ``store`` and save again whenever it changes.

    Returns:
        Function that stops persisting
    """
    load_player_state(store, data_dir)
    last_saved = partialize(store)

    def on_change(changed: PlayerStore, event: StoreEvent) -> None:
        nonlocal last_saved
        if event.action in _TRANSIENT_ACTIONS:
            return
        current = partialize(changed)
        if current == last_saved:
            return
        if save_record(STORAGE_NAME, current, data_dir):
            last_saved = current

    return store.subscribe(on_change)


def _as_bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None
