# Standard library imports
from dataclasses import dataclass, field
from typing import List, Optional

# Local application imports
from .indexing import BatchResult


@dataclass(frozen=True)
class VideoMetadata:
    duration: float
    width: int
    height: int
    frame_rate: float


@dataclass(frozen=True)
class ExtractedFrame:
    """One still image taken from a video, JPEG encoded."""
    frame_number: int
    timestamp: float
    image_bytes: bytes


@dataclass(frozen=True)
class ExtractedVideo:
    thumbnail: Optional[bytes]
    frames: List[ExtractedFrame]
    metadata: VideoMetadata


@dataclass(frozen=True)
class UploadedFrame:
    frame_number: int
    timestamp: float
    asset_key: str


@dataclass
class PreparedVideo:
    """A video whose thumbnail, file and frames are stored and indexed."""
    video_key: str
    thumbnail_key: str
    video_name: str
    metadata: VideoMetadata
    frames: List[UploadedFrame] = field(default_factory=list)
    indexing: BatchResult = field(default_factory=BatchResult)

    @property
    def frame_count(self) -> int:
        return len(self.frames)
