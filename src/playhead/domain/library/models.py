"""
Media library domain models.

Contains data structures for representing playable media items.
"""

from typing import Any, Literal, NamedTuple, Optional

TrackType = Literal["video", "audio"]


class Track(NamedTuple):
    """Represents one playable media item (video or audio).

    Tracks are built by the content API and never modified by the player.
    ``duration`` may be unknown until the playback element reports it.
    """
    id: str
    title: str
    type: TrackType = "audio"
    file_url: str = ""
    subtitle: Optional[str] = None
    artist: Optional[str] = None
    album: Optional[str] = None
    genre: Optional[str] = None
    thumbnail: Optional[str] = None
    duration: Optional[float] = None  # in seconds

    @property
    def is_video(self) -> bool:
        return self.type == "video"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Track":
        """Build a Track from a content API payload (camelCase keys).

        Raises:
            KeyError: If ``id`` is missing
        """
        duration = data.get("duration")
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "Untitled",
            type="video" if data.get("type") == "video" else "audio",
            file_url=data.get("fileUrl") or data.get("file_url") or "",
            subtitle=data.get("subtitle"),
            artist=data.get("artist"),
            album=data.get("album"),
            genre=data.get("genre"),
            thumbnail=data.get("thumbnail"),
            duration=float(duration) if duration is not None else None,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the content API's camelCase keys."""
        return {
            "id": self.id,
            "title": self.title,
            "subtitle": self.subtitle,
            "artist": self.artist,
            "album": self.album,
            "genre": self.genre,
            "type": self.type,
            "thumbnail": self.thumbnail,
            "fileUrl": self.file_url,
            "duration": self.duration,
        }
