from typing import Optional

from fastapi import APIRouter, Depends, Query
from loguru import logger

from playhead.domain.stats.listening import NamedPlayCount
from playhead.service import PlayerService

from ..deps import get_player_service
from ..schemas import (
    DailyListeningEntry,
    NamedCount,
    RecentActivityResponse,
    SummaryResponse,
    TopTrack,
)

router = APIRouter()


def _isoformat(value) -> Optional[str]:
    return value.isoformat() if value else None


def _named_counts(entries: list[NamedPlayCount]) -> list[NamedCount]:
    return [
        NamedCount(
            name=entry.name,
            play_count=entry.play_count,
            last_played=_isoformat(entry.last_played),
        )
        for entry in entries
    ]


@router.get("/stats/summary", response_model=SummaryResponse)
async def get_summary(service: PlayerService = Depends(get_player_service)) -> SummaryResponse:
    """Listening totals and streaks."""
    with service.lock:
        summary = service.stats.summary()
    return SummaryResponse(
        total_hours=summary.total_hours,
        total_minutes=summary.total_minutes,
        total_listening_time=summary.total_listening_time,
        total_plays=summary.total_plays,
        unique_tracks=summary.unique_tracks,
        unique_artists=summary.unique_artists,
        current_streak=summary.current_streak,
        longest_streak=summary.longest_streak,
    )


@router.get("/stats/top-tracks", response_model=list[TopTrack])
async def get_top_tracks(
    limit: int = Query(10, ge=1, le=100),
    service: PlayerService = Depends(get_player_service),
) -> list[TopTrack]:
    with service.lock:
        entries = service.stats.top_tracks(limit=limit)
    return [
        TopTrack(
            id=entry.track_id,
            title=entry.title,
            artist=entry.artist,
            thumbnail=entry.thumbnail,
            duration=entry.duration,
            type=entry.type,
            play_count=entry.play_count,
            last_played=_isoformat(entry.last_played),
        )
        for entry in entries
    ]


@router.get("/stats/top-artists", response_model=list[NamedCount])
async def get_top_artists(
    limit: int = Query(10, ge=1, le=100),
    service: PlayerService = Depends(get_player_service),
) -> list[NamedCount]:
    with service.lock:
        return _named_counts(service.stats.top_artists(limit=limit))


@router.get("/stats/top-genres", response_model=list[NamedCount])
async def get_top_genres(
    limit: int = Query(5, ge=1, le=100),
    service: PlayerService = Depends(get_player_service),
) -> list[NamedCount]:
    with service.lock:
        return _named_counts(service.stats.top_genres(limit=limit))


@router.get("/stats/listening-time", response_model=list[DailyListeningEntry])
async def get_listening_time(
    days: int = Query(7, ge=1, le=366),
    service: PlayerService = Depends(get_player_service),
) -> list[DailyListeningEntry]:
    """Per-day listening time, oldest day first."""
    with service.lock:
        period = service.stats.listening_time_for_period(days=days)
    return [
        DailyListeningEntry(
            date=day.day.isoformat(),
            display_date=day.display_date,
            seconds=day.seconds,
            minutes=day.minutes,
        )
        for day in period
    ]


@router.get("/stats/recent", response_model=RecentActivityResponse)
async def get_recent_activity(
    service: PlayerService = Depends(get_player_service),
) -> RecentActivityResponse:
    with service.lock:
        activity = service.stats.recent_activity()
    return RecentActivityResponse(
        plays_today=activity.plays_today, plays_this_week=activity.plays_this_week
    )


@router.delete("/stats")
async def clear_stats(service: PlayerService = Depends(get_player_service)) -> dict[str, bool]:
    with service.lock:
        service.clear_stats()
    logger.info("Listening stats cleared")
    return {"cleared": True}
