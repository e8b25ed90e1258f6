"""
Per-track playback progress, keyed by track id.

Fed by the playback element's periodic progress reports and read by the
resume view.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from loguru import logger


@dataclass(frozen=True)
class ProgressRecord:
    """How far a track has been played."""

    track_id: str
    current_time: float
    duration: float
    percentage: int  # 0-100, rounded
    updated_at: datetime

    @property
    def remaining(self) -> float:
        return max(0.0, self.duration - self.current_time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "trackId": self.track_id,
            "currentTime": self.current_time,
            "duration": self.duration,
            "percentage": self.percentage,
            "updatedAt": self.updated_at.isoformat(),
        }


def compute_percentage(current_time: float, duration: float) -> int:
    """Rounded completion percentage, clamped to 0-100."""
    if duration <= 0:
        return 0
    return max(0, min(100, round(current_time / duration * 100)))


class ProgressLog:
    """Mutable map of track id -> ProgressRecord."""

    def __init__(self) -> None:
        self._records: dict[str, ProgressRecord] = {}

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, track_id: object) -> bool:
        return track_id in self._records

    def get(self, track_id: str) -> Optional[ProgressRecord]:
        return self._records.get(track_id)

    def records(self) -> dict[str, ProgressRecord]:
        return dict(self._records)

    def update(
        self,
        track_id: str,
        current_time: float,
        duration: float,
        now: Optional[datetime] = None,
    ) -> Optional[ProgressRecord]:
        """Record the latest position for a track.

        Reports with an unknown (zero or negative) duration are ignored.

        Returns:
            The stored record, or None if the report was ignored
        """
        if not duration or duration <= 0:
            return None
        current_time = max(0.0, min(float(current_time), float(duration)))
        record = ProgressRecord(
            track_id=track_id,
            current_time=current_time,
            duration=float(duration),
            percentage=compute_percentage(current_time, duration),
            updated_at=now or datetime.now(timezone.utc),
        )
        self._records[track_id] = record
        return record

    def remove(self, track_id: str) -> None:
        self._records.pop(track_id, None)

    def retain(self, track_ids: Iterable[str]) -> int:
        """Drop records for tracks not in ``track_ids``.

        Returns:
            Number of records removed
        """
        keep = set(track_ids)
        stale = [track_id for track_id in self._records if track_id not in keep]
        for track_id in stale:
            del self._records[track_id]
        return len(stale)

    def clear(self) -> None:
        self._records.clear()

    def to_dict(self) -> dict[str, Any]:
        """Serialize for storage: {"records": {track_id: record}}."""
        return {
            "records": {
                track_id: record.to_dict() for track_id, record in self._records.items()
            }
        }

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "ProgressLog":
        """Rebuild from storage, skipping malformed records."""
        progress = cls()
        if not data:
            return progress
        records = data.get("records")
        if not isinstance(records, dict):
            return progress
        for track_id, raw in records.items():
            try:
                progress._records[track_id] = ProgressRecord(
                    track_id=track_id,
                    current_time=float(raw["currentTime"]),
                    duration=float(raw["duration"]),
                    percentage=int(raw["percentage"]),
                    updated_at=_parse_timestamp(raw.get("updatedAt")),
                )
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed progress record for {track_id}: {e}")
        return progress


def _parse_timestamp(ts: Any) -> datetime:
    try:
        parsed = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
