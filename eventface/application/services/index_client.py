"""Face index capability wrapper, scoped by collection (event) id."""
import asyncio
import logging
import posixpath
from typing import Dict, List, Set

from ...domain.constants.media_constants import UNSUPPORTED_INDEX_EXTENSIONS
from ...domain.exceptions import (
    AssetNotFound,
    CollectionNotFound,
    EventFaceError,
    IndexFailure,
    IndexServiceUnavailable,
    RateLimited,
    UnsupportedFormat,
)
from ...domain.gateways.face_index import FaceIndexService
from ...domain.gateways.object_storage import ObjectStorage
from ...domain.models.match import RawHit

logger = logging.getLogger(__name__)

# The self-search only needs to see whether this asset's faces are already there
DUPLICATE_CHECK_MAX_FACES = 10


class IndexClient:
    """
    Create-collection, index-one-asset, search-by-image and delete-faces
    over a FaceIndexService, with one remote collection per event.
    """

    def __init__(
        self,
        face_index: FaceIndexService,
        storage: ObjectStorage,
        collection_prefix: str = "event-",
        duplicate_check_enabled: bool = True,
        duplicate_check_threshold: float = 95.0,
    ) -> None:
        self.face_index = face_index
        self.storage = storage
        self.collection_prefix = collection_prefix
        self.duplicate_check_enabled = duplicate_check_enabled
        self.duplicate_check_threshold = duplicate_check_threshold
        self._known_collections: Set[str] = set()
        self._creation_locks: Dict[str, asyncio.Lock] = {}

    def collection_name(self, collection_id: str) -> str:
        if not collection_id:
            raise ValueError("Collection ID is required")
        return f"{self.collection_prefix}{collection_id}"

    async def ensure_collection(self, collection_id: str) -> None:
        """Create the collection unless it already exists."""
        name = self.collection_name(collection_id)
        if name in self._known_collections:
            return

        lock = self._creation_locks.setdefault(name, asyncio.Lock())
        async with lock:
            if name in self._known_collections:
                return
            try:
                created = await self.face_index.create_collection(name)
            except IndexServiceUnavailable:
                raise
            except EventFaceError as e:
                raise IndexFailure(f"Could not create collection {name}: {e.message}") from e
            self._known_collections.add(name)
            if created:
                logger.info(f"Created face collection {name}")
            else:
                logger.debug(f"Face collection {name} already exists")

    def forget_collection(self, collection_id: str) -> None:
        """Drop the cached existence of a collection (it was found missing remotely)."""
        self._known_collections.discard(self.collection_name(collection_id))

    async def index_asset(self, collection_id: str, asset_key: str, external_id: str) -> List[str]:
        """
        Index every face of a stored asset under external_id.

        Returns:
            Face ids of the asset. When the asset was already indexed under the same
            identifier, the existing face ids are returned and nothing is added.

        Raises:
            UnsupportedFormat: HEIC/HEIF or camera raw asset (no remote call made)
            AssetNotFound: the asset key does not exist in storage
            RateLimited, IndexFailure, IndexServiceUnavailable: remote errors
        """
        extension = posixpath.splitext(asset_key)[1].lower()
        if extension in UNSUPPORTED_INDEX_EXTENSIONS:
            raise UnsupportedFormat(asset_key, extension)

        if not await self.storage.exists(asset_key):
            raise AssetNotFound(asset_key)

        name = self.collection_name(collection_id)

        if self.duplicate_check_enabled:
            existing = await self._existing_faces(name, asset_key, external_id)
            if existing:
                logger.info(f"{asset_key} already indexed with {len(existing)} face(s), skipping")
                return existing

        face_ids = await self.face_index.index_faces(name, asset_key, external_id)
        logger.debug(f"Indexed {len(face_ids)} face(s) for {asset_key} as {external_id}")
        return face_ids

    async def _existing_faces(self, collection_name: str, asset_key: str, external_id: str) -> List[str]:
        try:
            hits = await self.face_index.search_faces_by_image(
                collection_name,
                asset_key,
                max_faces=DUPLICATE_CHECK_MAX_FACES,
                threshold=self.duplicate_check_threshold,
            )
        except (RateLimited, IndexServiceUnavailable):
            raise
        except EventFaceError as e:
            # No face in the image, or empty collection: nothing indexed yet
            logger.debug(f"Duplicate check skipped for {asset_key}: {e.message}")
            return []
        return [hit.face_id for hit in hits if hit.external_id == external_id and hit.face_id]

    async def search_similar(
        self,
        collection_id: str,
        query_asset_key: str,
        max_results: int,
        threshold: float,
    ) -> List[RawHit]:
        """
        Search the collection with the largest face of the query asset.

        Raises:
            CollectionNotFound: the collection was never created
        """
        name = self.collection_name(collection_id)
        try:
            return await self.face_index.search_faces_by_image(
                name, query_asset_key, max_faces=max_results, threshold=threshold
            )
        except CollectionNotFound:
            self.forget_collection(collection_id)
            raise CollectionNotFound(collection_id)

    async def delete_faces(self, collection_id: str, face_ids: List[str]) -> None:
        if not face_ids:
            return
        await self.face_index.delete_faces(self.collection_name(collection_id), face_ids)
        logger.info(f"Deleted {len(face_ids)} face(s) from {self.collection_name(collection_id)}")
