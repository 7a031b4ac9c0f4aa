# Standard library imports
import logging

# Local application imports
from ....domain.exceptions import AssetNotFound
from ....domain.gateways.object_storage import ObjectStorage
from ...dto.match_dto import SelfieUpdateRequest, SelfieUpdateResponse
from ...services.match_store import MatchStore

logger = logging.getLogger(__name__)


class SetDefaultSelfieUseCase:
    """Use case for replacing a user's profile selfie on every record"""

    def __init__(self, match_store: MatchStore, storage: ObjectStorage) -> None:
        self.match_store = match_store
        self.storage = storage

    async def execute(self, user_id: str, request: SelfieUpdateRequest) -> SelfieUpdateResponse:
        if not user_id:
            raise ValueError("User ID is required")
        if not await self.storage.exists(request.selfie_key):
            raise AssetNotFound(request.selfie_key)

        await self.match_store.store_default_selfie(user_id, request.selfie_key)
        updated = await self.match_store.update_selfie_everywhere(user_id, request.selfie_key)
        logger.info(f"Default selfie of {user_id} set to {request.selfie_key}")
        return SelfieUpdateResponse(user_id=user_id, selfie_ref=request.selfie_key, records_updated=updated)
