"""
OpenCV frame extractor.

Reads an uploaded video from a temporary file, captures one thumbnail and N
evenly spaced still frames, and returns them JPEG encoded.
"""

import asyncio
import logging
import os
import tempfile
from typing import List, Optional

import cv2  # type: ignore
import numpy as np

from ...domain.exceptions import VideoProcessingError
from ...domain.gateways.frame_extractor import FrameExtractor
from ...domain.models.video import ExtractedFrame, ExtractedVideo, VideoMetadata

logger = logging.getLogger(__name__)

JPEG_QUALITY = 80
THUMBNAIL_AT_SECONDS = 1.0


def frame_timestamps(duration: float, frame_count: int) -> List[float]:
    """
    Timestamps (seconds) of `frame_count` frames spread evenly over the video,
    leaving out the very first and very last frame.
    """
    if frame_count <= 0 or duration <= 0:
        return []
    step = duration / (frame_count + 1)
    return [round(step * index, 3) for index in range(1, frame_count + 1)]


def thumbnail_timestamp(duration: float) -> float:
    """One second in, or the middle of videos shorter than that."""
    if duration > THUMBNAIL_AT_SECONDS:
        return THUMBNAIL_AT_SECONDS
    return duration / 2 if duration > 0 else 0.0


class OpenCVFrameExtractor(FrameExtractor):
    """FrameExtractor backed by cv2.VideoCapture"""

    def __init__(self, jpeg_quality: int = JPEG_QUALITY) -> None:
        self.jpeg_quality = jpeg_quality

    async def extract(self, video_bytes: bytes, suffix: str, frame_count: int) -> ExtractedVideo:
        return await asyncio.to_thread(self._extract_sync, video_bytes, suffix, frame_count)

    def _extract_sync(self, video_bytes: bytes, suffix: str, frame_count: int) -> ExtractedVideo:
        # VideoCapture needs a path, not a buffer
        fd, path = tempfile.mkstemp(suffix=suffix or ".mp4")
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(video_bytes)
            return self._extract_from_path(path, frame_count)
        finally:
            try:
                os.unlink(path)
            except OSError as e:
                logger.warning(f"Could not remove temporary video file {path}: {e}")

    def _extract_from_path(self, path: str, frame_count: int) -> ExtractedVideo:
        cap = cv2.VideoCapture(path)
        try:
            if not cap.isOpened():
                raise VideoProcessingError(f"Could not open video file {path}")

            metadata = self._read_metadata(cap)
            logger.info(
                f"Video opened: duration={metadata.duration:.2f}s "
                f"size={metadata.width}x{metadata.height} fps={metadata.frame_rate:.2f}"
            )

            thumbnail = self._encode(self._read_at(cap, thumbnail_timestamp(metadata.duration)))
            if thumbnail is None:
                logger.warning("Could not capture a thumbnail frame")

            frames: List[ExtractedFrame] = []
            for number, timestamp in enumerate(frame_timestamps(metadata.duration, frame_count), start=1):
                image_bytes = self._encode(self._read_at(cap, timestamp))
                if image_bytes is None:
                    logger.warning(f"Skipping frame {number} at {timestamp}s: could not decode")
                    continue
                frames.append(ExtractedFrame(frame_number=number, timestamp=timestamp, image_bytes=image_bytes))

            return ExtractedVideo(thumbnail=thumbnail, frames=frames, metadata=metadata)
        finally:
            cap.release()

    def _read_metadata(self, cap: "cv2.VideoCapture") -> VideoMetadata:
        fps = cap.get(cv2.CAP_PROP_FPS) or 0.0
        total_frames = cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0.0
        duration = total_frames / fps if fps > 0 else 0.0
        return VideoMetadata(
            duration=duration,
            width=int(cap.get(cv2.CAP_PROP_FRAME_WIDTH) or 0),
            height=int(cap.get(cv2.CAP_PROP_FRAME_HEIGHT) or 0),
            frame_rate=fps,
        )

    def _read_at(self, cap: "cv2.VideoCapture", timestamp: float) -> Optional[np.ndarray]:
        cap.set(cv2.CAP_PROP_POS_MSEC, timestamp * 1000.0)
        ok, frame = cap.read()
        if not ok or frame is None:
            return None
        if len(frame.shape) == 3 and frame.shape[2] == 4:
            frame = cv2.cvtColor(frame, cv2.COLOR_BGRA2BGR)
        return frame

    def _encode(self, frame: Optional[np.ndarray]) -> Optional[bytes]:
        if frame is None:
            return None
        success, buffer = cv2.imencode(".jpg", frame, [cv2.IMWRITE_JPEG_QUALITY, self.jpeg_quality])
        if not success:
            return None
        return buffer.tobytes()
