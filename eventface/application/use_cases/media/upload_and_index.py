# Standard library imports
import logging
import posixpath
import time
import uuid
from typing import Callable, List, Optional, Tuple

# Local application imports
from ....domain import storage_keys
from ....domain.constants.media_constants import (
    ALLOWED_IMAGE_EXTENSIONS,
    ALLOWED_VIDEO_EXTENSIONS,
    IMAGE_CONTENT_TYPES,
    UNSUPPORTED_INDEX_EXTENSIONS,
)
from ....domain.exceptions import (
    EventFaceError,
    StorageError,
    StoreFailure,
    UnsupportedFormat,
    ValidationError,
    VideoProcessingError,
)
from ....domain.gateways.object_storage import ObjectStorage
from ....domain.models.media import MediaUpload
from ....domain.models.video import PreparedVideo
from ...dto.media_dto import FailedAssetResponse, ProcessedVideoResponse, UploadResultResponse
from ...services.batch_indexer import BatchIndexer
from ...services.index_client import IndexClient
from ...services.match_store import MatchStore, check_event_collection_id
from ...services.video_frame_preparer import VideoFramePreparer

logger = logging.getLogger(__name__)

MB = 1024 * 1024


def new_upload_id() -> str:
    """Millisecond timestamp plus a random suffix, unique per stored upload."""
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


def clean_filename(filename: str) -> str:
    """Drop any client-side directory part of an uploaded file name."""
    return posixpath.basename((filename or "").replace("\\", "/")).strip()


def video_to_response(prepared: PreparedVideo) -> ProcessedVideoResponse:
    return ProcessedVideoResponse(
        video_key=prepared.video_key,
        thumbnail_key=prepared.thumbnail_key,
        video_name=prepared.video_name,
        frame_count=prepared.frame_count,
        frames_indexed=len(prepared.indexing.successful),
        duration=prepared.metadata.duration,
        width=prepared.metadata.width,
        height=prepared.metadata.height,
        frame_rate=prepared.metadata.frame_rate,
    )


class UploadAndIndexUseCase:
    """Use case for storing uploaded photos/videos and indexing their faces"""

    def __init__(
        self,
        storage: ObjectStorage,
        index_client: IndexClient,
        batch_indexer: BatchIndexer,
        video_preparer: VideoFramePreparer,
        match_store: MatchStore,
        max_image_mb: int = 50,
        max_video_mb: int = 500,
        upload_id_factory: Callable[[], str] = new_upload_id,
    ) -> None:
        self.storage = storage
        self.index_client = index_client
        self.batch_indexer = batch_indexer
        self.video_preparer = video_preparer
        self.match_store = match_store
        self.max_image_mb = max_image_mb
        self.max_video_mb = max_video_mb
        self.upload_id_factory = upload_id_factory

    def check_file(self, filename: str, size: Optional[int]) -> Tuple[str, str]:
        """
        Check the type and announced size of one file, before its content is read.

        Args:
            filename: File name as sent by the client
            size: Size in bytes, or None when the transport does not know it yet

        Returns:
            (clean file name, "image" | "video")

        Raises:
            ValidationError: bad type, empty or too large
            UnsupportedFormat: image format the face index cannot read
        """
        filename = clean_filename(filename)
        if not filename:
            raise ValidationError("Missing file name.")

        extension = posixpath.splitext(filename)[1].lower()
        if extension in UNSUPPORTED_INDEX_EXTENSIONS:
            raise UnsupportedFormat(filename, extension)

        if extension in ALLOWED_IMAGE_EXTENSIONS:
            kind, limit_mb = "image", self.max_image_mb
        elif extension in ALLOWED_VIDEO_EXTENSIONS:
            kind, limit_mb = "video", self.max_video_mb
        else:
            raise ValidationError(
                f"Unsupported file type for {filename}. "
                f"Use images ({', '.join(sorted(e.lstrip('.') for e in ALLOWED_IMAGE_EXTENSIONS - UNSUPPORTED_INDEX_EXTENSIONS))}) "
                f"or videos ({', '.join(sorted(e.lstrip('.') for e in ALLOWED_VIDEO_EXTENSIONS))})."
            )

        if size is not None:
            if size == 0:
                raise ValidationError(f"{filename} is empty.")
            if size > limit_mb * MB:
                raise ValidationError(f"{filename} is too large. Max {limit_mb} MB for {kind}s.")

        return filename, kind

    def validate(self, upload: MediaUpload) -> Tuple[str, str]:
        """Check type and size of one received upload before anything is sent anywhere."""
        return self.check_file(upload.filename, upload.size)

    async def execute(
        self,
        collection_id: str,
        files: List[MediaUpload],
        user_id: Optional[str] = None,
        rejected: Optional[List[FailedAssetResponse]] = None,
    ) -> UploadResultResponse:
        """
        Store and index a set of uploads.

        Args:
            collection_id: Collection (event) to add the media to
            files: Uploaded files
            user_id: Uploading user, flagged as a contributor of the collection
            rejected: Files the transport already refused, reported as failures

        Returns:
            UploadResultResponse with one entry per file in successful or failed

        Raises:
            ValidationError: No file passed validation, or reserved collection ID
            IndexServiceUnavailable: The face index cannot be reached
        """
        check_event_collection_id(collection_id)
        if not files and not rejected:
            raise ValidationError("No files were uploaded.")

        result = UploadResultResponse(collection_id=collection_id, failed=list(rejected or []))
        images: List[Tuple[str, MediaUpload]] = []
        videos: List[Tuple[str, MediaUpload]] = []

        for upload in files:
            try:
                filename, kind = self.validate(upload)
            except EventFaceError as e:
                result.failed.append(FailedAssetResponse(asset=upload.filename or "", error=e.user_message))
                continue
            (images if kind == "image" else videos).append((filename, upload))

        if not images and not videos:
            details = "; ".join(f"{f.asset}: {f.error}" for f in result.failed)
            raise ValidationError(f"None of the uploaded files can be indexed. {details}".strip())

        await self.index_client.ensure_collection(collection_id)

        if images:
            await self._upload_images(collection_id, images, result)
        for filename, upload in videos:
            await self._process_video(collection_id, filename, upload, result)

        result.total = len(result.successful) + len(result.failed)
        result.message = self._summary(result)

        if user_id and result.successful:
            try:
                await self.match_store.mark_contribution(user_id, collection_id)
            except StoreFailure as e:
                logger.error(f"Could not flag {user_id} as contributor of {collection_id}: {e.message}")

        logger.info(
            f"Upload to {collection_id} finished: {len(result.successful)} ok, {len(result.failed)} failed"
        )
        return result

    async def _upload_images(
        self,
        collection_id: str,
        images: List[Tuple[str, MediaUpload]],
        result: UploadResultResponse,
    ) -> None:
        stored: List[str] = []
        for filename, upload in images:
            name = storage_keys.stored_image_name(self.upload_id_factory(), filename)
            key = storage_keys.image_key(collection_id, name)
            extension = posixpath.splitext(filename)[1].lower()
            content_type = upload.content_type or IMAGE_CONTENT_TYPES.get(extension, "application/octet-stream")
            try:
                await self.storage.put(key, upload.content, content_type)
            except StorageError as e:
                logger.error(f"Upload of {filename} failed: {e.message}")
                result.failed.append(FailedAssetResponse(asset=filename, error=e.user_message))
                continue
            stored.append(key)

        if not stored:
            return

        batch = await self.batch_indexer.index_batch(collection_id, stored)
        result.successful.extend(batch.successful)
        result.images_indexed += len(batch.successful)
        result.failed.extend(FailedAssetResponse(asset=f.asset_key, error=f.error) for f in batch.failed)

    async def _process_video(
        self,
        collection_id: str,
        filename: str,
        upload: MediaUpload,
        result: UploadResultResponse,
    ) -> None:
        video_id = self.upload_id_factory()
        try:
            prepared = await self.video_preparer.prepare(
                video_bytes=upload.content,
                video_name=filename,
                collection_id=collection_id,
                video_id=video_id,
            )
        except VideoProcessingError as e:
            logger.error(f"Video {filename} could not be processed: {e.message}")
            result.failed.append(FailedAssetResponse(asset=filename, error=e.message))
            return

        # A stored video counts even when none of its frames could be indexed
        result.successful.append(prepared.video_key)
        result.videos_processed += 1
        result.frames_indexed += len(prepared.indexing.successful)
        result.videos.append(video_to_response(prepared))
        result.failed.extend(
            FailedAssetResponse(asset=f.asset_key, error=f.error) for f in prepared.indexing.failed
        )

    def _summary(self, result: UploadResultResponse) -> str:
        if not result.failed:
            return f"All {len(result.successful)} file(s) uploaded and indexed."
        if not result.successful:
            return f"All {len(result.failed)} file(s) failed."
        return f"{len(result.successful)} file(s) uploaded, {len(result.failed)} failed."
