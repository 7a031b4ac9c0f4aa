from typing import TYPE_CHECKING
from ...core.config import get_settings
from ...domain.gateways.object_storage import ObjectStorage
from ...application.services.batch_indexer import BatchIndexer
from ...application.services.index_client import IndexClient
from ...application.services.match_store import MatchStore
from ...application.services.video_frame_preparer import VideoFramePreparer
from ...application.use_cases.media.upload_and_index import UploadAndIndexUseCase
from ...application.use_cases.media.reindex_collection import ReindexCollectionUseCase

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class MediaProvider:
    """Media use case provider - registers upload and reindex use cases"""
    
    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register all media use cases.
        Use cases are created on-demand via factories.
        """
        settings = get_settings()
        
        container.register_factory(
            UploadAndIndexUseCase,
            lambda: UploadAndIndexUseCase(
                storage=container.get(ObjectStorage),
                index_client=container.get(IndexClient),
                batch_indexer=container.get(BatchIndexer),
                video_preparer=container.get(VideoFramePreparer),
                match_store=container.get(MatchStore),
                max_image_mb=settings.max_image_upload_mb,
                max_video_mb=settings.max_video_upload_mb,
            )
        )
        
        container.register_factory(
            ReindexCollectionUseCase,
            lambda: ReindexCollectionUseCase(
                batch_indexer=container.get(BatchIndexer),
            )
        )
