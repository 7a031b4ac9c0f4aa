from abc import ABC, abstractmethod

from ..models.video import ExtractedVideo


class FrameExtractor(ABC):
    """Gateway interface - turns a video file into a thumbnail and still frames"""

    @abstractmethod
    async def extract(self, video_bytes: bytes, suffix: str, frame_count: int) -> ExtractedVideo:
        """
        Extract a thumbnail and up to frame_count evenly spaced JPEG frames,
        numbered from 1. Frames that cannot be decoded are skipped.
        """
        pass
