# Standard library imports
from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class RawHit:
    """One face match returned by the index service, before aggregation."""
    external_id: str
    similarity: float
    face_id: Optional[str] = None


@dataclass(frozen=True)
class ImageMatch:
    """A photo in which the query face appears."""
    asset_key: str
    similarity: float

    kind = "image"

    @property
    def asset_url(self) -> str:
        return self.asset_key


@dataclass(frozen=True)
class VideoMatch:
    """
    A video in which the query face appears.

    A video contributes one match no matter how many of its frames matched;
    `similarity` is the best frame similarity.
    """
    video_key: str
    video_name: str
    thumbnail_key: str
    frame_count: int
    similarity: float
    external_id: str = ""

    kind = "video"

    @property
    def asset_url(self) -> str:
        return self.video_key


Match = Union[ImageMatch, VideoMatch]


@dataclass(frozen=True)
class CollectionMatch:
    """A match tagged with the collection it was found in."""
    collection_id: str
    match: Match

    @property
    def asset_url(self) -> str:
        return self.match.asset_url


@dataclass(frozen=True)
class MediaItem:
    """A matched asset as stored on an attendee record."""
    collection_id: str
    asset_url: str
    kind: str
