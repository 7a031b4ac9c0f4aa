"""
Search a collection with a query face and collapse the raw hits into one
match per photo and one match per video.

Hits are resolved to stored assets through the identifier side index. For
identifiers the side index cannot resolve, the asset is found by comparing
the identifier with the sanitized names of the stored files. A disambiguated
identifier is matched on its base name plus the digest of the asset key.
"""
import logging
from collections import OrderedDict
from typing import Dict, List, Optional

from ...domain import storage_keys
from ...domain.exceptions import (
    CollectionNotFound,
    NoIndexableContent,
    StorageError,
    StoreFailure,
)
from ...domain.gateways.object_storage import ObjectStorage
from ...domain.identifiers import (
    asset_digest,
    parse_frame_identifier,
    sanitize,
    split_disambiguation,
    split_extension,
)
from ...domain.models.match import ImageMatch, Match, RawHit, VideoMatch
from ...domain.repositories.identifier_map_repository import IdentifierMapRepository
from .batch_indexer import BatchIndexer
from .index_client import IndexClient

logger = logging.getLogger(__name__)


class _VideoDirectory:
    """What one ``videos/<video_id>/`` listing tells about a video."""

    def __init__(self, directory: str) -> None:
        self.directory = directory
        self.video_key: Optional[str] = None
        self.frame_keys: List[str] = []

    @property
    def thumbnail_key(self) -> str:
        return storage_keys.thumbnail_for_video_dir(self.directory)


class _CollectionListing:
    """
    Lazily lists the images and videos of a collection, at most once each.
    A failed listing is remembered so later hits do not retry it.
    """

    def __init__(self, storage: ObjectStorage, collection_id: str) -> None:
        self.storage = storage
        self.collection_id = collection_id
        self._images: Optional[Dict[str, str]] = None
        self._image_keys: List[str] = []
        self._videos: Optional[Dict[str, _VideoDirectory]] = None
        self._images_failed = False
        self._videos_failed = False

    async def images_by_identifier(self) -> Dict[str, str]:
        """sanitized file name -> image key"""
        if self._images is None and not self._images_failed:
            try:
                keys = await self.storage.list_keys(storage_keys.images_prefix(self.collection_id))
            except StorageError as e:
                logger.warning(f"Could not list images of {self.collection_id}: {e.message}")
                self._images_failed = True
                return {}
            images: Dict[str, str] = {}
            for key in keys:
                images.setdefault(sanitize(storage_keys.basename(key)), key)
            self._image_keys = list(keys)
            self._images = images
        return self._images or {}

    async def find_image_by_digest(self, identifier: str) -> Optional[str]:
        """Image key behind a disambiguated identifier such as ``photo-1a2b3c4d.jpg``."""
        stem, extension = split_extension(identifier)
        base, digest = split_disambiguation(stem)
        if digest is None:
            return None
        await self.images_by_identifier()
        for key in self._image_keys:
            if sanitize(storage_keys.basename(key)) == f"{base}{extension}" and asset_digest(key) == digest:
                return key
        return None

    async def video_directories(self) -> Dict[str, _VideoDirectory]:
        """video directory -> its video file and frames"""
        if self._videos is None and not self._videos_failed:
            try:
                keys = await self.storage.list_keys(storage_keys.videos_prefix(self.collection_id))
            except StorageError as e:
                logger.warning(f"Could not list videos of {self.collection_id}: {e.message}")
                self._videos_failed = True
                return {}
            videos: Dict[str, _VideoDirectory] = {}
            for key in keys:
                directory = storage_keys.video_dir_of(key)
                if directory is None:
                    continue
                entry = videos.setdefault(directory, _VideoDirectory(directory))
                if storage_keys.is_video_file_key(key):
                    entry.video_key = key
                elif storage_keys.is_frame_key(key):
                    entry.frame_keys.append(key)
            self._videos = videos
        return self._videos or {}

    async def find_video_by_stem(self, video_stem: str) -> Optional[_VideoDirectory]:
        entries = [entry for entry in (await self.video_directories()).values() if entry.video_key]
        for entry in entries:
            if sanitize(storage_keys.basename(entry.video_key)) == video_stem:
                return entry

        # "<stem>-<digest>": the digest is taken from the key of one of the video's frames
        base, digest = split_disambiguation(video_stem)
        if digest is None:
            return None
        for entry in entries:
            if sanitize(storage_keys.basename(entry.video_key)) != base:
                continue
            if any(asset_digest(key) == digest for key in entry.frame_keys):
                return entry
        return None


class MatchAggregator:
    """Runs a similarity search and builds the deduplicated match list."""

    def __init__(
        self,
        index_client: IndexClient,
        batch_indexer: BatchIndexer,
        storage: ObjectStorage,
        identifier_map: IdentifierMapRepository,
        threshold: float = 70.0,
        max_results: int = 50,
    ) -> None:
        self.index_client = index_client
        self.batch_indexer = batch_indexer
        self.storage = storage
        self.identifier_map = identifier_map
        self.threshold = threshold
        self.max_results = max_results

    async def find_matches(
        self,
        collection_id: str,
        query_asset_key: str,
        threshold: Optional[float] = None,
        max_results: Optional[int] = None,
    ) -> List[Match]:
        """
        Return the photos and videos of the collection showing the query face,
        best similarity first.

        Raises:
            NoIndexableContent: the collection did not exist and nothing could be indexed
        """
        threshold = self.threshold if threshold is None else threshold
        max_results = self.max_results if max_results is None else max_results

        hits = await self._search(collection_id, query_asset_key, threshold, max_results)
        logger.info(f"Search in {collection_id} returned {len(hits)} raw hit(s)")

        listing = _CollectionListing(self.storage, collection_id)
        images: "OrderedDict[str, ImageMatch]" = OrderedDict()
        videos: "OrderedDict[str, VideoMatch]" = OrderedDict()

        for hit in hits:
            match = await self._resolve(collection_id, hit, listing)
            if match is None:
                continue
            if isinstance(match, VideoMatch):
                current = videos.get(match.video_key)
                if current is None or match.similarity > current.similarity:
                    videos[match.video_key] = match
            else:
                current_image = images.get(match.asset_key)
                if current_image is None or match.similarity > current_image.similarity:
                    images[match.asset_key] = match

        combined: List[Match] = [*images.values(), *videos.values()]
        kept = [match for match in combined if match.similarity >= threshold]
        kept = sorted(kept, key=lambda match: match.similarity, reverse=True)
        logger.info(
            f"Aggregated {len(hits)} hit(s) into {len(kept)} match(es) for {collection_id} "
            f"({len(images)} image(s), {len(videos)} video(s) before threshold {threshold})"
        )
        return kept

    async def _search(
        self,
        collection_id: str,
        query_asset_key: str,
        threshold: float,
        max_results: int,
    ) -> List[RawHit]:
        try:
            return await self.index_client.search_similar(collection_id, query_asset_key, max_results, threshold)
        except CollectionNotFound:
            logger.info(f"Collection {collection_id} does not exist yet, indexing stored assets")

        rebuilt = await self.batch_indexer.index_all_outstanding(collection_id)
        if not rebuilt.successful:
            raise NoIndexableContent(collection_id)

        logger.info(f"Indexed {len(rebuilt.successful)} asset(s) for {collection_id}, searching again")
        return await self.index_client.search_similar(collection_id, query_asset_key, max_results, threshold)

    async def _lookup(self, collection_id: str, external_id: str) -> Optional[str]:
        try:
            return await self.identifier_map.resolve(collection_id, external_id)
        except StoreFailure as e:
            logger.warning(f"Identifier lookup failed for {external_id}, using file names: {e.message}")
            return None

    async def _resolve(self, collection_id: str, hit: RawHit, listing: _CollectionListing) -> Optional[Match]:
        mapped = await self._lookup(collection_id, hit.external_id)

        if mapped is not None:
            if storage_keys.is_frame_key(mapped):
                return await self._video_match(hit, listing, storage_keys.video_dir_of(mapped), None)
            return ImageMatch(asset_key=mapped, similarity=hit.similarity)

        frame = parse_frame_identifier(hit.external_id)
        if frame.is_frame:
            return await self._video_match(hit, listing, None, frame.video_stem)

        images = await listing.images_by_identifier()
        asset_key = (
            images.get(hit.external_id)
            or await listing.find_image_by_digest(hit.external_id)
            or storage_keys.images_prefix(collection_id) + hit.external_id
        )
        return ImageMatch(asset_key=asset_key, similarity=hit.similarity)

    async def _video_match(
        self,
        hit: RawHit,
        listing: _CollectionListing,
        directory: Optional[str],
        video_stem: Optional[str],
    ) -> Optional[VideoMatch]:
        if directory is not None:
            entry = (await listing.video_directories()).get(directory)
        else:
            entry = await listing.find_video_by_stem(video_stem or "")

        if entry is None or entry.video_key is None:
            logger.warning(f"Dropping hit {hit.external_id}: parent video not found")
            return None

        return VideoMatch(
            video_key=entry.video_key,
            video_name=storage_keys.basename(entry.video_key),
            thumbnail_key=entry.thumbnail_key,
            frame_count=len(entry.frame_keys),
            similarity=hit.similarity,
            external_id=hit.external_id,
        )
