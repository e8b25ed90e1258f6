"""
Pure queue cursor selection for next/previous transitions.

Shuffle is applied only here, at selection time. The queue itself is never
reordered, so "previous" and index-based now-playing views stay stable when
shuffle is toggled.
"""

import random
from enum import Enum
from typing import Optional


class RepeatMode(str, Enum):
    OFF = "off"
    ALL = "all"
    ONE = "one"

    @classmethod
    def parse(cls, value: object, default: Optional["RepeatMode"] = None) -> "RepeatMode":
        """Parse a stored value, returning ``default`` (OFF) when unrecognized."""
        try:
            return cls(value)
        except ValueError:
            return default or cls.OFF


_REPEAT_CYCLE = (RepeatMode.OFF, RepeatMode.ALL, RepeatMode.ONE)


def cycle_repeat(mode: RepeatMode) -> RepeatMode:
    """off -> all -> one -> off"""
    return _REPEAT_CYCLE[(_REPEAT_CYCLE.index(mode) + 1) % len(_REPEAT_CYCLE)]


def next_index(
    queue_length: int,
    current_index: int,
    shuffled: bool,
    repeat_mode: RepeatMode,
    rng: Optional[random.Random] = None,
) -> Optional[int]:
    """Pick the queue index to play after ``current_index``.

    Priority:
    1. repeat ONE stays on the current index
    2. shuffle picks uniformly from the whole queue (may pick the current index)
    3. otherwise advance by one; past the end wrap to 0 under repeat ALL,
       else stay on the last index

    Args:
        queue_length: Number of tracks in the queue
        current_index: Current cursor position
        shuffled: Whether shuffle is enabled
        repeat_mode: Current repeat mode
        rng: Random source (default: module-level random)

    Returns:
        Next index, or None if the queue is empty
    """
    if queue_length <= 0:
        return None

    current_index = clamp_index(current_index, queue_length)

    if repeat_mode == RepeatMode.ONE:
        return current_index

    if shuffled:
        return (rng or random).randrange(queue_length)

    candidate = current_index + 1
    if candidate >= queue_length:
        return 0 if repeat_mode == RepeatMode.ALL else current_index
    return candidate


def previous_index(queue_length: int, current_index: int) -> Optional[int]:
    """Index before ``current_index``; always wraps from 0 to the last index.

    Returns:
        Previous index, or None if the queue is empty
    """
    if queue_length <= 0:
        return None
    current_index = clamp_index(current_index, queue_length)
    return current_index - 1 if current_index > 0 else queue_length - 1


def is_end_of_queue(queue_length: int, current_index: int, repeat_mode: RepeatMode) -> bool:
    """True when a sequential advance would not move the cursor."""
    return (
        queue_length > 0
        and repeat_mode == RepeatMode.OFF
        and current_index >= queue_length - 1
    )


def clamp_index(index: int, queue_length: int) -> int:
    """Clamp ``index`` into ``[0, queue_length - 1]`` (0 for an empty queue)."""
    if queue_length <= 0:
        return 0
    return max(0, min(index, queue_length - 1))


def find_track_index(track_ids: list[str], track_id: str) -> Optional[int]:
    """Position of the first occurrence of ``track_id``, or None."""
    for i, candidate in enumerate(track_ids):
        if candidate == track_id:
            return i
    return None
