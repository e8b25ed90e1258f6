"""Stats domain - listening time, play counts and streaks."""

from .listening import (
    DailyListening,
    ListeningStats,
    NamedPlayCount,
    RecentActivity,
    StatsSummary,
    TrackPlayStats,
)

__all__ = [
    "DailyListening",
    "ListeningStats",
    "NamedPlayCount",
    "RecentActivity",
    "StatsSummary",
    "TrackPlayStats",
]
