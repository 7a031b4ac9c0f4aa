from typing import TYPE_CHECKING
from ...domain.gateways.object_storage import ObjectStorage
from ...application.services.match_aggregator import MatchAggregator
from ...application.services.match_store import MatchStore
from ...application.use_cases.matches.find_matches import FindMatchesUseCase
from ...application.use_cases.matches.get_matches import GetMatchesUseCase
from ...application.use_cases.matches.get_statistics import GetStatisticsUseCase
from ...application.use_cases.matches.list_user_matches import ListUserMatchesUseCase
from ...application.use_cases.matches.list_user_media import ListUserMediaUseCase
from ...application.use_cases.matches.set_default_selfie import SetDefaultSelfieUseCase

if TYPE_CHECKING:
    from ..base_container import BaseContainer


class MatchProvider:
    """Match use case provider - registers search, listing and statistics use cases"""
    
    @staticmethod
    def register(container: "BaseContainer") -> None:
        """
        Register all match use cases.
        Use cases are created on-demand via factories.
        """
        container.register_factory(
            FindMatchesUseCase,
            lambda: FindMatchesUseCase(
                aggregator=container.get(MatchAggregator),
                match_store=container.get(MatchStore),
                storage=container.get(ObjectStorage),
            )
        )
        
        container.register_factory(
            GetMatchesUseCase,
            lambda: GetMatchesUseCase(match_store=container.get(MatchStore))
        )
        
        container.register_factory(
            ListUserMatchesUseCase,
            lambda: ListUserMatchesUseCase(match_store=container.get(MatchStore))
        )
        
        container.register_factory(
            ListUserMediaUseCase,
            lambda: ListUserMediaUseCase(match_store=container.get(MatchStore))
        )
        
        container.register_factory(
            GetStatisticsUseCase,
            lambda: GetStatisticsUseCase(match_store=container.get(MatchStore))
        )
        
        container.register_factory(
            SetDefaultSelfieUseCase,
            lambda: SetDefaultSelfieUseCase(
                match_store=container.get(MatchStore),
                storage=container.get(ObjectStorage),
            )
        )
