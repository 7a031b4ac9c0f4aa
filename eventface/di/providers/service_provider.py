from typing import TYPE_CHECKING
from ...core.config import get_settings
from ...domain.gateways.face_index import FaceIndexService
from ...domain.gateways.frame_extractor import FrameExtractor
from ...domain.gateways.object_storage import ObjectStorage
from ...domain.repositories.attendee_repository import AttendeeRepository
from ...domain.repositories.identifier_map_repository import IdentifierMapRepository
from ...application.services.batch_indexer import BatchIndexer
from ...application.services.index_client import IndexClient
from ...application.services.match_aggregator import MatchAggregator
from ...application.services.match_store import MatchStore
from ...application.services.video_frame_preparer import VideoFramePreparer
from ...infrastructure.utils.scheduler import Scheduler

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class ServiceProvider:
    """Core service provider - indexing, video preparation, aggregation, match store"""
    
    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register the core services as singletons.
        Order matters: index client -> batch indexer -> preparer/aggregator.
        """
        settings = get_settings()
        storage = container.get(ObjectStorage)
        identifier_map = container.get(IdentifierMapRepository)
        
        index_client = IndexClient(
            face_index=container.get(FaceIndexService),
            storage=storage,
            collection_prefix=settings.collection_prefix,
            duplicate_check_enabled=settings.duplicate_check_enabled,
            duplicate_check_threshold=settings.duplicate_check_threshold,
        )
        container.register_singleton(IndexClient, index_client)
        
        batch_indexer = BatchIndexer(
            index_client=index_client,
            storage=storage,
            identifier_map=identifier_map,
            scheduler=container.get(Scheduler),
            window_size=settings.batch_window_size,
            window_pause=settings.batch_window_pause,
            max_retries=settings.index_max_retries,
            base_delay=settings.retry_base_delay,
            max_delay=settings.retry_max_delay,
            jitter=settings.retry_jitter,
            asset_timeout=settings.index_asset_timeout,
        )
        container.register_singleton(BatchIndexer, batch_indexer)
        
        container.register_singleton(
            VideoFramePreparer,
            VideoFramePreparer(
                storage=storage,
                frame_extractor=container.get(FrameExtractor),
                batch_indexer=batch_indexer,
                frame_count=settings.video_frame_count,
            )
        )
        
        container.register_singleton(
            MatchAggregator,
            MatchAggregator(
                index_client=index_client,
                batch_indexer=batch_indexer,
                storage=storage,
                identifier_map=identifier_map,
                threshold=settings.search_threshold,
                max_results=settings.search_max_results,
            )
        )
        
        container.register_singleton(MatchStore, MatchStore(repository=container.get(AttendeeRepository)))
