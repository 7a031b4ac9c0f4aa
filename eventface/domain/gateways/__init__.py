from .object_storage import ObjectStorage
from .face_index import FaceIndexService
from .frame_extractor import FrameExtractor

__all__ = ["ObjectStorage", "FaceIndexService", "FrameExtractor"]
