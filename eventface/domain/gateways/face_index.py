from abc import ABC, abstractmethod
from typing import List

from ..models.match import RawHit


class FaceIndexService(ABC):
    """
    Gateway interface - remote face index (one collection per event).

    Implementations translate provider errors into the domain exceptions:
    CollectionNotFound, RateLimited, IndexFailure, IndexServiceUnavailable.
    """

    @abstractmethod
    async def create_collection(self, collection_name: str) -> bool:
        """Create a collection. Returns False when it already exists"""
        pass

    @abstractmethod
    async def index_faces(self, collection_name: str, asset_key: str, external_id: str) -> List[str]:
        """Detect and index faces of a stored asset, returns the new face ids"""
        pass

    @abstractmethod
    async def search_faces_by_image(
        self,
        collection_name: str,
        asset_key: str,
        max_faces: int,
        threshold: float,
    ) -> List[RawHit]:
        """Find faces similar to the largest face in a stored asset"""
        pass

    @abstractmethod
    async def delete_faces(self, collection_name: str, face_ids: List[str]) -> None:
        """Delete face entries"""
        pass
