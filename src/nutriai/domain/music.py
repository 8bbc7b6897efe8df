"""Domain models for music recommendations."""

from dataclasses import dataclass


@dataclass(frozen=True)
class MusicTrack:
    """Recommended track from the music catalog."""

    id: str
    name: str
    artist: str
    album_image_url: str
    external_url: str
    preview_url: str | None = None
