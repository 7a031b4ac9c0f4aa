# Local application imports
from ...dto.match_dto import AttendeeRecordListResponse
from ...services.match_store import MatchStore
from .mappers import record_to_response

FILTER_ALL = "all"
FILTER_VIEWING_ONLY = "viewing_only"
FILTER_WITH_VIDEOS = "with_videos"
FILTERS = (FILTER_ALL, FILTER_VIEWING_ONLY, FILTER_WITH_VIDEOS)


class ListUserMatchesUseCase:
    """Use case for listing the match records of a user across collections"""

    def __init__(self, match_store: MatchStore) -> None:
        self.match_store = match_store

    async def execute(self, user_id: str, view: str = FILTER_ALL) -> AttendeeRecordListResponse:
        if view == FILTER_VIEWING_ONLY:
            records = await self.match_store.list_viewing_only(user_id)
        elif view == FILTER_WITH_VIDEOS:
            records = await self.match_store.list_with_videos(user_id)
        elif view == FILTER_ALL:
            records = await self.match_store.list_matches_for_user(user_id)
        else:
            raise ValueError(f"Unknown filter '{view}'. Use one of: {', '.join(FILTERS)}")

        items = [record_to_response(record) for record in records]
        return AttendeeRecordListResponse(items=items, total=len(items))
