"""
Player service: one process-wide PlayerStore wired to its collaborators.

Keeps per-track progress and listening stats in step with store events and
persists everything to the data directory. Callers serialize access through
``service.lock`` (the web backend may run handlers on a thread pool).
"""

import random
import threading
import time
from pathlib import Path
from typing import Optional

from loguru import logger

from playhead.core.config import Config
from playhead.core.storage import load_record, save_record
from playhead.domain.playback.persistence import bind_persistence, save_player_state
from playhead.domain.playback.state import PlayerStore, StoreEvent
from playhead.domain.resume.progress import ProgressLog
from playhead.domain.resume.view import ResumeItem, get_resume_items
from playhead.domain.stats.listening import ListeningStats

PROGRESS_STORAGE = "progress-storage"
STATS_STORAGE = "stats-storage"

# Progress reports further apart than this are seeks or stalls, not listening
MAX_LISTENING_TICK_SECONDS = 5.0

# Minimum interval between progress/stats writes during playback
FLUSH_INTERVAL_SECONDS = 10.0

# Store actions after which the playing position starts over
_POSITION_RESET_ACTIONS = frozenset(
    {
        "end_seek",
        "set_current_time",
        "set_queue",
        "play_previous",
        "close_mini_player",
        "handle_ended",
    }
)


class PlayerService:
    """Owns the store, progress log and listening stats for one client."""

    def __init__(
        self,
        config: Config,
        data_dir: Optional[Path] = None,
        rng: Optional[random.Random] = None,
        persist: bool = True,
    ) -> None:
        self.config = config
        self.data_dir = data_dir
        self.persist = persist
        self.lock = threading.RLock()

        self.store = PlayerStore.from_config(config.player, rng=rng)
        self.progress = ProgressLog()
        self.stats = ListeningStats()
        self._unbind_persistence = None

        if persist:
            self.progress = ProgressLog.from_dict(load_record(PROGRESS_STORAGE, data_dir))
            self.stats = ListeningStats.from_dict(load_record(STATS_STORAGE, data_dir))
            self._unbind_persistence = bind_persistence(self.store, data_dir)

        self._last_position: Optional[tuple[str, float]] = None
        self._last_flush = time.monotonic()
        self._dirty = False
        self.store.subscribe(self._on_store_event)

        logger.info(
            f"Player service ready (persist={persist}, history={len(self.store.history)}, "
            f"progress={len(self.progress)})"
        )

    def _on_store_event(self, store: PlayerStore, event: StoreEvent) -> None:
        if event.entered_track is not None:
            self.stats.record_track_play(event.entered_track)
            self._dirty = True
            self.flush()

        if event.action == "report_progress":
            self._track_progress(store)
        elif event.action in _POSITION_RESET_ACTIONS or event.entered_track is not None:
            self._reset_position(store)
        elif event.action == "pause":
            self.flush()

    def _reset_position(self, store: PlayerStore) -> None:
        track = store.current_track
        self._last_position = (track.id, store.current_time) if track else None

    def _track_progress(self, store: PlayerStore) -> None:
        track = store.current_track
        if track is None:
            return

        if store.duration:
            self.progress.update(track.id, store.current_time, store.duration)
            self._dirty = True

        if store.is_playing and self._last_position and self._last_position[0] == track.id:
            delta = store.current_time - self._last_position[1]
            if 0 < delta <= MAX_LISTENING_TICK_SECONDS:
                self.stats.add_listening_time(delta)
                self._dirty = True

        self._last_position = (track.id, store.current_time)
        self.flush(force=False)

    def flush(self, force: bool = True) -> None:
        """Write progress and stats if they changed.

        Args:
            force: Ignore the write throttle
        """
        if not self.persist or not self._dirty:
            return
        now = time.monotonic()
        if not force and now - self._last_flush < FLUSH_INTERVAL_SECONDS:
            return
        self._prune_progress()
        save_record(PROGRESS_STORAGE, self.progress.to_dict(), self.data_dir)
        save_record(STATS_STORAGE, self.stats.to_dict(), self.data_dir)
        self._last_flush = now
        self._dirty = False

    def _prune_progress(self) -> None:
        """Forget progress for tracks that have dropped out of the history."""
        keep = {entry.track.id for entry in self.store.history}
        if self.store.current_track is not None:
            keep.add(self.store.current_track.id)
        removed = self.progress.retain(keep)
        if removed:
            logger.debug(f"Pruned {removed} progress records")

    def resume_items(self) -> list[ResumeItem]:
        return get_resume_items(
            self.store.history,
            self.progress,
            limit=self.config.player.resume_limit,
            max_percentage=self.config.player.resume_max_percentage,
        )

    def clear_stats(self) -> None:
        self.stats.clear()
        self._dirty = True
        self.flush()

    def shutdown(self) -> None:
        """Flush everything and stop persisting store changes."""
        if self.persist:
            save_player_state(self.store, self.data_dir)
            self._dirty = True
            self.flush()
        if self._unbind_persistence:
            self._unbind_persistence()
            self._unbind_persistence = None
        logger.info("Player service shut down")
