# Standard library imports
import logging

# Local application imports
from ....domain.exceptions import AssetNotFound, StoreFailure
from ....domain.gateways.object_storage import ObjectStorage
from ....domain.models.match import CollectionMatch, ImageMatch, VideoMatch
from ...dto.match_dto import FindMatchesRequest, FindMatchesResponse
from ...services.match_aggregator import MatchAggregator
from ...services.match_store import MatchStore, check_event_collection_id, deduplicate_matches
from .mappers import match_to_response

logger = logging.getLogger(__name__)


class FindMatchesUseCase:
    """Use case for searching a collection with a user's selfie and saving the result"""

    def __init__(
        self,
        aggregator: MatchAggregator,
        match_store: MatchStore,
        storage: ObjectStorage,
    ) -> None:
        self.aggregator = aggregator
        self.match_store = match_store
        self.storage = storage

    async def execute(
        self,
        user_id: str,
        collection_id: str,
        request: FindMatchesRequest,
    ) -> FindMatchesResponse:
        """
        Search, then replace the user's stored matches for the collection.

        A failure to save the matches is logged and the matches are still
        returned, with `persisted` set to False.

        Raises:
            ValueError: Missing user or collection ID
            ValidationError: Reserved collection ID
            AssetNotFound: The selfie is not in storage
            NoIndexableContent: The collection has nothing to search
        """
        if not user_id or not collection_id:
            raise ValueError("User ID and collection ID are required")
        check_event_collection_id(collection_id)

        if not await self.storage.exists(request.selfie_key):
            raise AssetNotFound(request.selfie_key)

        matches = await self.aggregator.find_matches(
            collection_id,
            request.selfie_key,
            threshold=request.threshold,
        )
        unique = deduplicate_matches(CollectionMatch(collection_id, match) for match in matches)
        matches = [entry.match for entry in unique]

        image_keys = [m.asset_key for m in matches if isinstance(m, ImageMatch)]
        video_keys = [m.video_key for m in matches if isinstance(m, VideoMatch)]

        persisted = True
        try:
            await self.match_store.replace_matches(
                user_id=user_id,
                collection_id=collection_id,
                selfie_ref=request.selfie_key,
                image_keys=image_keys,
                video_keys=video_keys,
                display_name=request.display_name,
                cover_ref=request.cover_image,
            )
        except StoreFailure as e:
            persisted = False
            logger.error(f"Matches of {user_id} in {collection_id} were found but not saved: {e.message}")

        if matches:
            message = f"Found {len(image_keys)} photo(s) and {len(video_keys)} video(s)."
        else:
            message = "No matches found."
        if not persisted:
            message = f"{message} Your results could not be saved."

        return FindMatchesResponse(
            user_id=user_id,
            collection_id=collection_id,
            matches=[match_to_response(m) for m in matches],
            total_matches=len(matches),
            image_count=len(image_keys),
            video_count=len(video_keys),
            persisted=persisted,
            message=message,
        )
