"""Playback domain - queue, transport and history state.

This domain handles:
- The now-playing queue and cursor (next/previous/ended transitions)
- Transport flags (play/pause, volume, mute, shuffle, repeat)
- Seek-aware progress reports from the playback element
- Persisting preferences and history across sessions
"""

# Cursor selection
from .selection import (
    RepeatMode,
    cycle_repeat,
    next_index,
    previous_index,
    is_end_of_queue,
    clamp_index,
    find_track_index,
)

# State management
from .state import (
    PlayerStore,
    PlayerSnapshot,
    StoreEvent,
    RESTART_THRESHOLD_SECONDS,
)

# Persistence
from .persistence import (
    PERSISTED_KEYS,
    partialize,
    rehydrate,
    load_player_state,
    save_player_state,
    bind_persistence,
)

__all__ = [
    # Selection
    "RepeatMode",
    "cycle_repeat",
    "next_index",
    "previous_index",
    "is_end_of_queue",
    "clamp_index",
    "find_track_index",
    # State
    "PlayerStore",
    "PlayerSnapshot",
    "StoreEvent",
    "RESTART_THRESHOLD_SECONDS",
    # Persistence
    "PERSISTED_KEYS",
    "partialize",
    "rehydrate",
    "load_player_state",
    "save_player_state",
    "bind_persistence",
]
