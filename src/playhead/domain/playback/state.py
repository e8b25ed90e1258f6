"""
Playback state for Playhead.

PlayerStore is the single process-wide container for the now-playing queue,
transport flags and play history. Every mutation goes through a named
method; renderers read a PlayerSnapshot.

No operation raises. Empty queues and out-of-range indices degrade to
no-ops or clamped values so the player never crashes.
"""

import random
from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Any, Callable, Iterable, NamedTuple, Optional

from loguru import logger

from playhead.core.config import PlayerConfig
from playhead.domain.history.log import HISTORY_LIMIT, HistoryEntry, add_to_history
from playhead.domain.library.models import Track

from .selection import (
    RepeatMode,
    clamp_index,
    cycle_repeat,
    find_track_index,
    is_end_of_queue,
    next_index,
    previous_index,
)

RESTART_THRESHOLD_SECONDS = 3.0
DEFAULT_VOLUME = 0.8


class StoreEvent(NamedTuple):
    """Passed to subscribers after every mutation."""

    action: str  # Name of the store method that ran
    entered_track: Optional[Track] = None  # Set when a play was recorded in history


Listener = Callable[["PlayerStore", StoreEvent], None]


@dataclass
class _PlayerState:
    current_track: Optional[Track] = None
    queue: list[Track] = field(default_factory=list)
    queue_index: int = 0

    is_playing: bool = False
    is_loading: bool = False
    duration: float = 0.0
    current_time: float = 0.0
    buffered: float = 0.0
    volume: float = DEFAULT_VOLUME
    is_muted: bool = False
    is_shuffled: bool = False
    repeat_mode: RepeatMode = RepeatMode.OFF
    playback_speed: float = 1.0
    is_video_mode: bool = True
    is_seeking: bool = False

    history: list[HistoryEntry] = field(default_factory=list)


@dataclass(frozen=True)
class PlayerSnapshot:
    """Read-only view of the store for renderers."""

    current_track: Optional[Track]
    queue: tuple[Track, ...]
    queue_index: int
    is_playing: bool
    is_loading: bool
    duration: float
    current_time: float
    buffered: float
    volume: float
    is_muted: bool
    is_shuffled: bool
    repeat_mode: RepeatMode
    playback_speed: float
    is_video_mode: bool
    is_seeking: bool
    history: tuple[HistoryEntry, ...]

    @property
    def effective_volume(self) -> float:
        return 0.0 if self.is_muted else self.volume

    @property
    def progress_percentage(self) -> float:
        return (self.current_time / self.duration) * 100 if self.duration else 0.0

    def to_dict(self, include_history: bool = False) -> dict[str, Any]:
        """Serialize with camelCase keys for the web client."""
        data = {
            "currentTrack": self.current_track.to_dict() if self.current_track else None,
            "queue": [track.to_dict() for track in self.queue],
            "queueIndex": self.queue_index,
            "isPlaying": self.is_playing,
            "isLoading": self.is_loading,
            "duration": self.duration,
            "currentTime": self.current_time,
            "buffered": self.buffered,
            "volume": self.volume,
            "isMuted": self.is_muted,
            "effectiveVolume": self.effective_volume,
            "isShuffled": self.is_shuffled,
            "repeatMode": self.repeat_mode.value,
            "playbackSpeed": self.playback_speed,
            "isVideoMode": self.is_video_mode,
            "isSeeking": self.is_seeking,
        }
        if include_history:
            data["history"] = [entry.to_dict() for entry in self.history]
        return data


def _read(name: str) -> property:
    return property(lambda self: getattr(self._state, name))


class PlayerStore:
    """Queue/playback state machine with history bookkeeping."""

    current_track: Optional[Track] = _read("current_track")
    queue_index: int = _read("queue_index")
    is_playing: bool = _read("is_playing")
    is_loading: bool = _read("is_loading")
    duration: float = _read("duration")
    current_time: float = _read("current_time")
    buffered: float = _read("buffered")
    volume: float = _read("volume")
    is_muted: bool = _read("is_muted")
    is_shuffled: bool = _read("is_shuffled")
    repeat_mode: RepeatMode = _read("repeat_mode")
    playback_speed: float = _read("playback_speed")
    is_video_mode: bool = _read("is_video_mode")
    is_seeking: bool = _read("is_seeking")

    def __init__(
        self,
        volume: float = DEFAULT_VOLUME,
        history_limit: int = HISTORY_LIMIT,
        restart_threshold: float = RESTART_THRESHOLD_SECONDS,
        stop_at_end_of_queue: bool = False,
        rng: Optional[random.Random] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._state = _PlayerState(volume=_clamp_unit(volume))
        self._history_limit = history_limit
        self._restart_threshold = restart_threshold
        self._stop_at_end_of_queue = stop_at_end_of_queue
        self._rng = rng
        self._clock = clock
        self._listeners: list[Listener] = []

    @classmethod
    def from_config(cls, config: PlayerConfig, rng: Optional[random.Random] = None) -> "PlayerStore":
        return cls(
            volume=config.volume,
            history_limit=config.history_limit,
            restart_threshold=config.restart_threshold_seconds,
            stop_at_end_of_queue=config.stop_at_end_of_queue,
            rng=rng,
        )

    # Reads

    @property
    def queue(self) -> tuple[Track, ...]:
        return tuple(self._state.queue)

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._state.history)

    @property
    def history_limit(self) -> int:
        return self._history_limit

    @property
    def effective_volume(self) -> float:
        return 0.0 if self._state.is_muted else self._state.volume

    def snapshot(self) -> PlayerSnapshot:
        values = {f.name: getattr(self._state, f.name) for f in fields(_PlayerState)}
        values["queue"] = tuple(values["queue"])
        values["history"] = tuple(values["history"])
        return PlayerSnapshot(**values)

    # Subscriptions

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener(store, event)`` after every mutation.

        Returns:
            Function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, action: str, entered_track: Optional[Track] = None) -> None:
        event = StoreEvent(action, entered_track)
        for listener in list(self._listeners):
            try:
                listener(self, event)
            except Exception:
                logger.exception(f"Player listener failed on {action}")

    def _set(self, action: str, entered_track: Optional[Track] = None, **changes: Any) -> None:
        for name, value in changes.items():
            setattr(self._state, name, value)
        self._notify(action, entered_track)

    # Queue and track transitions

    def set_queue(self, items: Iterable[Track], start_index: int = 0) -> None:
        """Replace the queue wholesale without changing is_playing.

        An out-of-range ``start_index`` is clamped into the queue.
        """
        items = list(items)
        index = clamp_index(start_index, len(items))
        if items and index != start_index:
            logger.warning(f"set_queue start_index {start_index} out of range, using {index}")
        self._set(
            "set_queue",
            queue=items,
            queue_index=index,
            current_track=items[index] if items else None,
            current_time=0.0,
            duration=0.0,
        )
        logger.debug(f"Queue set: {len(items)} tracks, index={index}")

    def set_current_track(self, track: Optional[Track]) -> None:
        """Load ``track`` without touching the queue or is_playing."""
        if track is None:
            self._set(
                "set_current_track",
                current_track=None,
                is_loading=False,
                current_time=0.0,
                duration=0.0,
            )
            return
        self._enter_track("set_current_track", track, is_loading=True)

    def play_track(self, track: Track, queue: Optional[Iterable[Track]] = None) -> None:
        """Start playing ``track``.

        With ``queue`` the queue is adopted verbatim and the cursor placed on
        the first entry with the same id (0 if absent). Without it only the
        current track changes; the existing queue is left alone.
        """
        changes: dict[str, Any] = {}
        if queue is not None:
            queue = list(queue)
            index = find_track_index([t.id for t in queue], track.id)
            if index is None:
                logger.debug(f"Track {track.id} not in supplied queue, cursor at 0")
                index = 0
            changes = {"queue": queue, "queue_index": index}
        self._enter_track("play_track", track, is_playing=True, **changes)

    def play_next(self) -> None:
        queue = self._state.queue
        if not queue:
            return

        if (
            self._stop_at_end_of_queue
            and not self._state.is_shuffled
            and is_end_of_queue(len(queue), self._state.queue_index, self._state.repeat_mode)
        ):
            logger.info("End of queue reached, pausing")
            self._set("play_next", is_playing=False)
            return

        index = next_index(
            len(queue),
            self._state.queue_index,
            self._state.is_shuffled,
            self._state.repeat_mode,
            self._rng,
        )
        self._enter_track("play_next", queue[index], is_playing=True, queue_index=index)

    def play_previous(self) -> None:
        """Restart the current track when past the threshold, else step back."""
        queue = self._state.queue
        if not queue:
            return

        if self._state.current_time > self._restart_threshold:
            self._set("play_previous", current_time=0.0, is_playing=True)
            return

        index = previous_index(len(queue), self._state.queue_index)
        self._enter_track(
            "play_previous", queue[index], record=False, is_playing=True, queue_index=index
        )

    def handle_ended(self) -> None:
        """Media element finished the current track."""
        if self._state.repeat_mode == RepeatMode.ONE and self._state.current_track:
            self._set("handle_ended", current_time=0.0, is_playing=True)
            return
        self.play_next()

    def close_mini_player(self) -> None:
        """Drop the current track and queue; history and preferences stay."""
        self._set(
            "close_mini_player",
            current_track=None,
            is_playing=False,
            is_loading=False,
            queue=[],
            queue_index=0,
            current_time=0.0,
            duration=0.0,
            is_seeking=False,
        )

    def _enter_track(
        self, action: str, track: Track, record: bool = True, **changes: Any
    ) -> None:
        same_track = (
            self._state.current_track is not None
            and self._state.current_track.id == track.id
        )
        changes.setdefault("is_loading", self._state.is_loading if same_track else True)
        duration = self._state.duration if same_track else 0.0
        self._state.current_track = track
        self._state.current_time = 0.0
        self._state.duration = duration or (track.duration or 0.0)
        self._state.is_video_mode = track.is_video
        self._state.is_seeking = False
        if record:
            self._state.history = add_to_history(
                self._state.history,
                track,
                now=self._clock() if self._clock else None,
                limit=self._history_limit,
            )
        logger.debug(f"{action}: entered track {track.id} ({track.title})")
        self._set(action, entered_track=track if record else None, **changes)

    # Transport

    def toggle_play(self) -> None:
        self._set("toggle_play", is_playing=not self._state.is_playing)

    def play(self) -> None:
        self._set("play", is_playing=True)

    def pause(self) -> None:
        self._set("pause", is_playing=False)

    def set_volume(self, volume: float) -> None:
        volume = _clamp_unit(volume)
        self._set("set_volume", volume=volume, is_muted=volume == 0)

    def toggle_mute(self) -> None:
        self._set("toggle_mute", is_muted=not self._state.is_muted)

    def toggle_shuffle(self) -> None:
        self._set("toggle_shuffle", is_shuffled=not self._state.is_shuffled)

    def toggle_repeat(self) -> None:
        self._set("toggle_repeat", repeat_mode=cycle_repeat(self._state.repeat_mode))

    def set_playback_speed(self, speed: float) -> None:
        if speed <= 0:
            logger.warning(f"Ignoring non-positive playback speed {speed}")
            return
        self._set("set_playback_speed", playback_speed=float(speed))

    def set_video_mode(self, enabled: bool) -> None:
        self._set("set_video_mode", is_video_mode=bool(enabled))

    def toggle_video_mode(self) -> None:
        self._set("toggle_video_mode", is_video_mode=not self._state.is_video_mode)

    # Playback element reports

    def set_duration(self, duration: float) -> None:
        self._set("set_duration", duration=max(0.0, float(duration)))

    def set_current_time(self, current_time: float) -> None:
        self._set("set_current_time", current_time=max(0.0, float(current_time)))

    def set_loading(self, is_loading: bool) -> None:
        self._set("set_loading", is_loading=bool(is_loading))

    def set_buffered(self, buffered: float) -> None:
        self._set("set_buffered", buffered=_clamp_unit(buffered))

    def begin_seek(self) -> None:
        """Suppress periodic progress reports until end_seek."""
        self._set("begin_seek", is_seeking=True)

    def end_seek(self, position: float) -> None:
        self._set("end_seek", is_seeking=False, current_time=max(0.0, float(position)))

    def report_progress(
        self,
        played_seconds: float,
        duration: Optional[float] = None,
        buffered: Optional[float] = None,
    ) -> bool:
        """Apply a periodic progress report from the playback element.

        Returns:
            False if the report was dropped because a seek is in progress
        """
        if self._state.is_seeking:
            return False
        changes: dict[str, Any] = {"current_time": max(0.0, float(played_seconds))}
        if duration:
            changes["duration"] = max(0.0, float(duration))
        if buffered is not None:
            changes["buffered"] = _clamp_unit(buffered)
        self._set("report_progress", **changes)
        return True

    # History and preferences

    def clear_history(self) -> None:
        self._set("clear_history", history=[])

    def restore(
        self,
        volume: Optional[float] = None,
        is_muted: Optional[bool] = None,
        is_shuffled: Optional[bool] = None,
        repeat_mode: Optional[RepeatMode] = None,
        history: Optional[list[HistoryEntry]] = None,
    ) -> None:
        """Rehydrate persisted preferences and history; None keeps the current value."""
        changes: dict[str, Any] = {}
        if volume is not None:
            changes["volume"] = _clamp_unit(volume)
        if is_muted is not None:
            changes["is_muted"] = bool(is_muted)
        if is_shuffled is not None:
            changes["is_shuffled"] = bool(is_shuffled)
        if repeat_mode is not None:
            changes["repeat_mode"] = repeat_mode
        if history is not None:
            changes["history"] = list(history)[: self._history_limit]
        self._set("restore", **changes)


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, float(value)))
