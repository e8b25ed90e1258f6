"""Library domain - media item models."""

from .models import Track, TrackType

__all__ = ["Track", "TrackType"]
