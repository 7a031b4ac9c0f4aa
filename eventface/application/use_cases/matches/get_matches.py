# Local application imports
from ...dto.match_dto import AttendeeRecordResponse
from ...services.match_store import MatchStore
from .mappers import record_to_response


class GetMatchesUseCase:
    """Use case for reading the stored matches of a user in one collection"""

    def __init__(self, match_store: MatchStore) -> None:
        self.match_store = match_store

    async def execute(self, user_id: str, collection_id: str) -> AttendeeRecordResponse:
        """
        Raises:
            ValueError: No record exists for the pair
        """
        record = await self.match_store.get_matches(user_id, collection_id)
        if record is None:
            raise ValueError(f"No matches stored for user {user_id} in collection {collection_id}")
        return record_to_response(record)
