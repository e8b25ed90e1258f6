"""
"Continue watching / listening" view.

Joins the play history with progress records and keeps tracks that were
started but not finished. Read-only: nothing is written back.
"""

from typing import Any, Iterable, NamedTuple

from playhead.domain.history.log import HistoryEntry
from playhead.domain.library.models import Track

from .progress import ProgressLog, ProgressRecord

RESUME_MAX_PERCENTAGE = 95
RESUME_LIMIT = 10


class ResumeItem(NamedTuple):
    track: Track
    progress: ProgressRecord

    def to_dict(self) -> dict[str, Any]:
        data = self.track.to_dict()
        data["progress"] = self.progress.to_dict()
        return data


def is_resumable(record: ProgressRecord, max_percentage: int = RESUME_MAX_PERCENTAGE) -> bool:
    return 0 < record.percentage < max_percentage


def get_resume_items(
    history: Iterable[HistoryEntry],
    progress: ProgressLog,
    limit: int = RESUME_LIMIT,
    max_percentage: int = RESUME_MAX_PERCENTAGE,
) -> list[ResumeItem]:
    """Tracks with partial progress, most recently played first.

    Args:
        history: Play history, most recent first
        progress: Per-track progress records
        limit: Maximum number of items
        max_percentage: Tracks at or above this percentage count as finished

    Returns:
        List of ResumeItem
    """
    items: list[ResumeItem] = []
    for entry in history:
        if len(items) >= limit:
            break
        record = progress.get(entry.track.id)
        if record is not None and is_resumable(record, max_percentage):
            items.append(ResumeItem(entry.track, record))
    return items
