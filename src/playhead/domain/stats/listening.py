"""
Listening statistics.

Accumulates listening time, play counts per track/artist/album/genre and
daily streaks, and answers summary and top-N queries. Dates are UTC
calendar days.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Optional

from loguru import logger

from playhead.domain.library.models import Track


@dataclass(frozen=True)
class StatsSummary:
    """Aggregated listening totals."""

    total_hours: int
    total_minutes: int  # Minutes past the whole hours
    total_listening_time: float  # seconds
    total_plays: int
    unique_tracks: int
    unique_artists: int
    current_streak: int
    longest_streak: int


@dataclass(frozen=True)
class TrackPlayStats:
    """Play count for one track with the track info seen on its last play."""

    track_id: str
    title: Optional[str]
    artist: Optional[str]
    thumbnail: Optional[str]
    duration: Optional[float]
    type: Optional[str]
    play_count: int
    last_played: Optional[datetime]


@dataclass(frozen=True)
class NamedPlayCount:
    name: str
    play_count: int
    last_played: Optional[datetime] = None


@dataclass(frozen=True)
class DailyListening:
    day: date
    display_date: str  # Short weekday, e.g. "Mon"
    seconds: float

    @property
    def minutes(self) -> int:
        return int(self.seconds // 60)


@dataclass(frozen=True)
class RecentActivity:
    plays_today: int
    plays_this_week: int


class ListeningStats:
    """Mutable listening statistics."""

    def __init__(self) -> None:
        self._reset()

    def _reset(self) -> None:
        self.total_listening_time: float = 0.0
        self.daily_listening_time: dict[str, float] = {}
        self.track_play_counts: dict[str, dict[str, Any]] = {}
        self.artist_play_counts: dict[str, dict[str, Any]] = {}
        self.album_play_counts: dict[str, dict[str, Any]] = {}
        self.genre_play_counts: dict[str, dict[str, Any]] = {}
        self.current_streak: int = 0
        self.longest_streak: int = 0
        self.last_listened_date: Optional[str] = None

    # Recording

    def add_listening_time(self, seconds: float, today: Optional[date] = None) -> None:
        """Add listened seconds to the total and today's bucket, then update the streak."""
        if seconds <= 0:
            return
        today = today or _utc_today()
        key = today.isoformat()
        self.total_listening_time += seconds
        self.daily_listening_time[key] = self.daily_listening_time.get(key, 0.0) + seconds
        self.update_streak(today)

    def record_track_play(self, track: Optional[Track], now: Optional[datetime] = None) -> None:
        """Count one play of ``track`` for the track, its artist, album and genre."""
        if track is None or not track.id:
            return
        played_at = (now or datetime.now(timezone.utc)).isoformat()

        entry = self.track_play_counts.setdefault(
            track.id, {"count": 0, "lastPlayed": None, "trackInfo": {}}
        )
        entry["count"] += 1
        entry["lastPlayed"] = played_at
        entry["trackInfo"] = {
            "id": track.id,
            "title": track.title,
            "artist": track.artist,
            "thumbnail": track.thumbnail,
            "duration": track.duration,
            "type": track.type,
        }

        if track.artist:
            artist = self.artist_play_counts.setdefault(
                track.artist, {"count": 0, "lastPlayed": None}
            )
            artist["count"] += 1
            artist["lastPlayed"] = played_at

        if track.album:
            album = self.album_play_counts.setdefault(
                track.album,
                {
                    "count": 0,
                    "lastPlayed": None,
                    "albumInfo": {
                        "title": track.album,
                        "artist": track.artist,
                        "thumbnail": track.thumbnail,
                    },
                },
            )
            album["count"] += 1
            album["lastPlayed"] = played_at

        if track.genre:
            genre = self.genre_play_counts.setdefault(track.genre, {"count": 0})
            genre["count"] += 1

        logger.debug(f"Recorded play of {track.id} (count={entry['count']})")

    def update_streak(self, today: Optional[date] = None) -> None:
        """Extend the streak on consecutive days, restart it after a gap."""
        today = today or _utc_today()
        key = today.isoformat()
        if self.last_listened_date == key:
            return

        yesterday = (today - timedelta(days=1)).isoformat()
        new_streak = self.current_streak + 1 if self.last_listened_date == yesterday else 1

        self.current_streak = new_streak
        self.longest_streak = max(self.longest_streak, new_streak)
        self.last_listened_date = key

    def clear(self) -> None:
        self._reset()

    # Queries

    def summary(self) -> StatsSummary:
        total = self.total_listening_time
        return StatsSummary(
            total_hours=int(total // 3600),
            total_minutes=int((total % 3600) // 60),
            total_listening_time=total,
            total_plays=sum(entry["count"] for entry in self.track_play_counts.values()),
            unique_tracks=len(self.track_play_counts),
            unique_artists=len(self.artist_play_counts),
            current_streak=self.current_streak,
            longest_streak=self.longest_streak,
        )

    def top_tracks(self, limit: int = 10) -> list[TrackPlayStats]:
        stats = [
            TrackPlayStats(
                track_id=track_id,
                title=data["trackInfo"].get("title"),
                artist=data["trackInfo"].get("artist"),
                thumbnail=data["trackInfo"].get("thumbnail"),
                duration=data["trackInfo"].get("duration"),
                type=data["trackInfo"].get("type"),
                play_count=data["count"],
                last_played=_parse_timestamp(data.get("lastPlayed")),
            )
            for track_id, data in self.track_play_counts.items()
        ]
        stats.sort(key=lambda s: s.play_count, reverse=True)
        return stats[:limit]

    def top_artists(self, limit: int = 10) -> list[NamedPlayCount]:
        return _top_named(self.artist_play_counts, limit)

    def top_genres(self, limit: int = 5) -> list[NamedPlayCount]:
        return _top_named(self.genre_play_counts, limit)

    def listening_time_for_period(
        self, days: int = 7, today: Optional[date] = None
    ) -> list[DailyListening]:
        """Per-day listening time for the last ``days`` days, oldest first."""
        today = today or _utc_today()
        result = []
        for offset in range(days - 1, -1, -1):
            day = today - timedelta(days=offset)
            result.append(
                DailyListening(
                    day=day,
                    display_date=day.strftime("%a"),
                    seconds=self.daily_listening_time.get(day.isoformat(), 0.0),
                )
            )
        return result

    def recent_activity(self, now: Optional[datetime] = None) -> RecentActivity:
        """Distinct tracks last played within 24 hours and within 7 days."""
        now = now or datetime.now(timezone.utc)
        one_day_ago = now - timedelta(days=1)
        one_week_ago = now - timedelta(days=7)

        plays_today = 0
        plays_this_week = 0
        for data in self.track_play_counts.values():
            last_played = _parse_timestamp(data.get("lastPlayed"))
            if last_played is None:
                continue
            if last_played >= one_day_ago:
                plays_today += 1
            if last_played >= one_week_ago:
                plays_this_week += 1
        return RecentActivity(plays_today=plays_today, plays_this_week=plays_this_week)

    # Persistence

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalListeningTime": self.total_listening_time,
            "dailyListeningTime": dict(self.daily_listening_time),
            "trackPlayCounts": self.track_play_counts,
            "artistPlayCounts": self.artist_play_counts,
            "albumPlayCounts": self.album_play_counts,
            "genrePlayCounts": self.genre_play_counts,
            "currentStreak": self.current_streak,
            "longestStreak": self.longest_streak,
            "lastListenedDate": self.last_listened_date,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "ListeningStats":
        """Rebuild from storage, dropping malformed entries."""
        stats = cls()
        if not data:
            return stats
        try:
            stats.total_listening_time = float(data.get("totalListeningTime", 0.0))
            stats.current_streak = int(data.get("currentStreak", 0))
            stats.longest_streak = int(data.get("longestStreak", 0))
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning(f"Discarding malformed listening stats: {e}")
            return cls()

        last_listened = data.get("lastListenedDate")
        stats.last_listened_date = last_listened if isinstance(last_listened, str) else None
        stats.daily_listening_time = _valid_daily(data.get("dailyListeningTime"))
        stats.track_play_counts = _valid_counts(
            data.get("trackPlayCounts"), "track", info_key="trackInfo"
        )
        stats.artist_play_counts = _valid_counts(data.get("artistPlayCounts"), "artist")
        stats.album_play_counts = _valid_counts(
            data.get("albumPlayCounts"), "album", info_key="albumInfo"
        )
        stats.genre_play_counts = _valid_counts(data.get("genrePlayCounts"), "genre")
        return stats


def _valid_counts(
    raw: Any, kind: str, info_key: Optional[str] = None
) -> dict[str, dict[str, Any]]:
    """Keep play-count entries with an integer count (and an info dict where required)."""
    if not isinstance(raw, dict):
        return {}
    counts = {}
    for name, entry in raw.items():
        count = entry.get("count") if isinstance(entry, dict) else None
        if not isinstance(count, int) or isinstance(count, bool):
            logger.warning(f"Skipping malformed {kind} play count for {name}")
            continue
        if info_key and not isinstance(entry.get(info_key), dict):
            logger.warning(f"Skipping {kind} play count for {name}: missing {info_key}")
            continue
        counts[name] = entry
    return counts


def _valid_daily(raw: Any) -> dict[str, float]:
    if not isinstance(raw, dict):
        return {}
    daily = {}
    for day, seconds in raw.items():
        if isinstance(seconds, (int, float)) and not isinstance(seconds, bool):
            daily[day] = float(seconds)
        else:
            logger.warning(f"Skipping malformed listening time for {day}")
    return daily


def _top_named(counts: dict[str, dict[str, Any]], limit: int) -> list[NamedPlayCount]:
    entries = [
        NamedPlayCount(
            name=name,
            play_count=data["count"],
            last_played=_parse_timestamp(data.get("lastPlayed")),
        )
        for name, data in counts.items()
    ]
    entries.sort(key=lambda e: e.play_count, reverse=True)
    return entries[:limit]


def _utc_today() -> date:
    return datetime.now(timezone.utc).date()


def _parse_timestamp(ts: Any) -> Optional[datetime]:
    if not ts:
        return None
    try:
        parsed = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except (ValueError, AttributeError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
