"""Turns an uploaded video into a stored thumbnail, video file and indexed frames."""
import logging
import posixpath
from typing import List, Optional

from ...domain import storage_keys
from ...domain.constants.media_constants import JPEG_CONTENT_TYPE, VIDEO_CONTENT_TYPES
from ...domain.exceptions import EventFaceError, StorageError, VideoProcessingError
from ...domain.gateways.frame_extractor import FrameExtractor
from ...domain.gateways.object_storage import ObjectStorage
from ...domain.identifiers import frame_identifier
from ...domain.models.indexing import IndexRequest
from ...domain.models.video import ExtractedVideo, PreparedVideo, UploadedFrame
from .batch_indexer import BatchIndexer, ProgressCallback

logger = logging.getLogger(__name__)

DEFAULT_VIDEO_CONTENT_TYPE = "video/mp4"


class VideoFramePreparer:
    """
    Upload order is thumbnail, video file, then frames. The thumbnail and the
    video file are required; a frame that cannot be extracted or uploaded is
    skipped. Frames are indexed as ``<sanitized video name>_frame_<n>``.

    The collection must already exist when `prepare` is called.
    """

    def __init__(
        self,
        storage: ObjectStorage,
        frame_extractor: FrameExtractor,
        batch_indexer: BatchIndexer,
        frame_count: int = 10,
    ) -> None:
        self.storage = storage
        self.frame_extractor = frame_extractor
        self.batch_indexer = batch_indexer
        self.frame_count = frame_count

    async def prepare(
        self,
        video_bytes: bytes,
        video_name: str,
        collection_id: str,
        video_id: str,
        frame_count: Optional[int] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> PreparedVideo:
        if not video_bytes:
            raise VideoProcessingError(f"Video {video_name} is empty")
        if not video_id:
            raise ValueError("Video ID is required")

        count = frame_count if frame_count is not None else self.frame_count
        suffix = posixpath.splitext(video_name)[1].lower()
        logger.info(f"Preparing video {video_name} ({len(video_bytes)} bytes) for collection {collection_id}")

        extracted = await self._extract(video_bytes, video_name, suffix, count)

        thumbnail_key = storage_keys.thumbnail_key(collection_id, video_id)
        video_key = storage_keys.video_key(collection_id, video_id, video_name)

        thumbnail = extracted.thumbnail or (extracted.frames[0].image_bytes if extracted.frames else None)
        if thumbnail is None:
            raise VideoProcessingError(f"No thumbnail could be produced for {video_name}")

        try:
            await self.storage.put(thumbnail_key, thumbnail, JPEG_CONTENT_TYPE)
        except StorageError as e:
            raise VideoProcessingError(f"Thumbnail upload failed for {video_name}: {e.message}") from e

        try:
            await self.storage.put(
                video_key,
                video_bytes,
                VIDEO_CONTENT_TYPES.get(suffix, DEFAULT_VIDEO_CONTENT_TYPE),
            )
        except StorageError as e:
            raise VideoProcessingError(f"Video upload failed for {video_name}: {e.message}") from e

        uploaded: List[UploadedFrame] = []
        for frame in extracted.frames:
            key = storage_keys.frame_key(collection_id, video_id, frame.frame_number)
            try:
                await self.storage.put(key, frame.image_bytes, JPEG_CONTENT_TYPE)
            except StorageError as e:
                logger.warning(f"Skipping frame {frame.frame_number} of {video_name}: {e.message}")
                continue
            uploaded.append(UploadedFrame(frame_number=frame.frame_number, timestamp=frame.timestamp, asset_key=key))

        prepared = PreparedVideo(
            video_key=video_key,
            thumbnail_key=thumbnail_key,
            video_name=video_name,
            metadata=extracted.metadata,
            frames=uploaded,
        )

        if not uploaded:
            logger.warning(f"Video {video_name} has no indexable frames")
            return prepared

        requests = [
            IndexRequest(asset_key=frame.asset_key, external_id=frame_identifier(video_name, frame.frame_number))
            for frame in uploaded
        ]
        prepared.indexing = await self.batch_indexer.index_batch(collection_id, requests, on_progress=on_progress)
        logger.info(
            f"Video {video_name} prepared: {len(uploaded)} frame(s) stored, "
            f"{len(prepared.indexing.successful)} indexed"
        )
        return prepared

    async def _extract(self, video_bytes: bytes, video_name: str, suffix: str, count: int) -> ExtractedVideo:
        try:
            return await self.frame_extractor.extract(video_bytes, suffix, count)
        except EventFaceError:
            raise
        except Exception as e:
            logger.error(f"Frame extraction failed for {video_name}: {e}", exc_info=True)
            raise VideoProcessingError(f"Frame extraction failed for {video_name}: {e}") from e
