from .upload_and_index import UploadAndIndexUseCase
from .reindex_collection import ReindexCollectionUseCase

__all__ = ["UploadAndIndexUseCase", "ReindexCollectionUseCase"]
