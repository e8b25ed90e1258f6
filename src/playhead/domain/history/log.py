"""
Play history log.

A most-recent-first, deduplicated and size-bounded record of played tracks.
All functions are pure: they return new lists and never mutate their input.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from loguru import logger

from playhead.domain.library.models import Track

HISTORY_LIMIT = 100


@dataclass(frozen=True)
class HistoryEntry:
    """A single played track with the time it was entered."""

    track: Track
    played_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Flatten to the persisted form: track fields plus ``playedAt``."""
        data = self.track.to_dict()
        data["playedAt"] = self.played_at.isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HistoryEntry":
        """Inverse of to_dict.

        Raises:
            KeyError: If the track id is missing
        """
        return cls(
            track=Track.from_dict(data),
            played_at=_parse_timestamp(data.get("playedAt")),
        )


def add_to_history(
    history: list[HistoryEntry],
    track: Track,
    now: Optional[datetime] = None,
    limit: int = HISTORY_LIMIT,
) -> list[HistoryEntry]:
    """Record a play of ``track``.

    Any existing entry for the same track id is dropped, the new entry is
    prepended and the result is truncated to ``limit`` entries.

    Args:
        history: Current history, most recent first
        track: Track that was just entered
        now: Timestamp for the entry (default: current UTC time)
        limit: Maximum number of entries to keep

    Returns:
        New history list
    """
    played_at = now or datetime.now(timezone.utc)
    remaining = [entry for entry in history if entry.track.id != track.id]
    return [HistoryEntry(track=track, played_at=played_at), *remaining][:limit]


def history_to_records(history: Iterable[HistoryEntry]) -> list[dict[str, Any]]:
    return [entry.to_dict() for entry in history]


def history_from_records(
    records: Iterable[Any], limit: int = HISTORY_LIMIT
) -> list[HistoryEntry]:
    """Rebuild history from persisted records, skipping malformed ones.

    Duplicate ids keep their first (most recent) occurrence.
    """
    entries: list[HistoryEntry] = []
    seen: set[str] = set()
    for record in records:
        if not isinstance(record, dict):
            continue
        try:
            entry = HistoryEntry.from_dict(record)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed history record: {e}")
            continue
        if entry.track.id in seen:
            continue
        seen.add(entry.track.id)
        entries.append(entry)
    return entries[:limit]


def _parse_timestamp(ts: Any) -> datetime:
    """Parse an ISO timestamp, falling back to now."""
    if isinstance(ts, datetime):
        return ts
    try:
        parsed = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
