from typing import TYPE_CHECKING
from ...core.config import get_settings
from ...domain.gateways.face_index import FaceIndexService
from ...domain.gateways.frame_extractor import FrameExtractor
from ...domain.gateways.object_storage import ObjectStorage
from ...infrastructure.aws_client_factory import get_rekognition_client, get_s3_client
from ...infrastructure.external.rekognition_face_index import RekognitionFaceIndex
from ...infrastructure.storage.s3_object_storage import S3ObjectStorage
from ...infrastructure.utils.scheduler import AsyncioScheduler, Scheduler
from ...infrastructure.video.opencv_frame_extractor import OpenCVFrameExtractor

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class GatewayProvider:
    """External capability provider - object storage, face index, frame extraction, scheduler"""
    
    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register one instance of each external client for the whole process.
        """
        settings = get_settings()
        
        container.register_singleton(
            ObjectStorage,
            S3ObjectStorage(client=get_s3_client(), bucket_name=settings.s3_bucket_name)
        )
        
        container.register_singleton(
            FaceIndexService,
            RekognitionFaceIndex(client=get_rekognition_client(), bucket_name=settings.s3_bucket_name)
        )
        
        container.register_singleton(FrameExtractor, OpenCVFrameExtractor())
        container.register_singleton(Scheduler, AsyncioScheduler())
