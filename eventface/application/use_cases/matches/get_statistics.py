# Local application imports
from ...dto.match_dto import StatisticsResponse
from ...services.match_store import MatchStore
from .mappers import statistics_to_response


class GetStatisticsUseCase:
    """Use case for the event/photo/video counts of a user"""

    def __init__(self, match_store: MatchStore) -> None:
        self.match_store = match_store

    async def execute(self, user_id: str) -> StatisticsResponse:
        statistics = await self.match_store.statistics(user_id)
        return statistics_to_response(statistics)
