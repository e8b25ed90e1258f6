from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from playhead.domain.library.models import Track


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TrackPayload(CamelModel):
    """Track as sent by the content API."""

    id: str = Field(min_length=1)
    title: str = "Untitled"
    subtitle: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    genre: Optional[str] = None
    type: Literal["video", "audio"] = "audio"
    thumbnail: Optional[str] = None
    file_url: str = ""
    duration: Optional[float] = Field(default=None, ge=0)

    def to_track(self) -> Track:
        return Track(
            id=self.id,
            title=self.title,
            type=self.type,
            file_url=self.file_url,
            subtitle=self.subtitle,
            artist=self.artist,
            album=self.album,
            genre=self.genre,
            thumbnail=self.thumbnail,
            duration=self.duration,
        )


class PlayRequest(CamelModel):
    """Start playing a track, optionally adopting a new queue."""

    track: TrackPayload
    queue: Optional[list[TrackPayload]] = None


class SetQueueRequest(CamelModel):
    items: list[TrackPayload]
    start_index: int = 0


class SetCurrentTrackRequest(CamelModel):
    track: Optional[TrackPayload] = None


class VolumeRequest(CamelModel):
    volume: float


class SpeedRequest(CamelModel):
    speed: float = Field(gt=0)


class VideoModeRequest(CamelModel):
    enabled: bool


class ProgressReport(CamelModel):
    """Periodic report from the playback element."""

    played_seconds: float = Field(ge=0)
    duration: Optional[float] = Field(default=None, ge=0)
    buffered: Optional[float] = Field(default=None, ge=0)


class SeekRequest(CamelModel):
    position: float = Field(ge=0)


class DurationRequest(CamelModel):
    duration: float = Field(ge=0)


class LoadingRequest(CamelModel):
    is_loading: bool


class ProgressReportResponse(CamelModel):
    accepted: bool
    state: dict


class SummaryResponse(CamelModel):
    total_hours: int
    total_minutes: int
    total_listening_time: float
    total_plays: int
    unique_tracks: int
    unique_artists: int
    current_streak: int
    longest_streak: int


class TopTrack(CamelModel):
    id: str
    title: Optional[str] = None
    artist: Optional[str] = None
    thumbnail: Optional[str] = None
    duration: Optional[float] = None
    type: Optional[str] = None
    play_count: int
    last_played: Optional[str] = None


class NamedCount(CamelModel):
    name: str
    play_count: int
    last_played: Optional[str] = None


class DailyListeningEntry(CamelModel):
    date: str
    display_date: str
    seconds: float
    minutes: int


class RecentActivityResponse(CamelModel):
    plays_today: int
    plays_this_week: int
