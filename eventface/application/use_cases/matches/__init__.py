from .find_matches import FindMatchesUseCase
from .get_matches import GetMatchesUseCase
from .get_statistics import GetStatisticsUseCase
from .list_user_matches import ListUserMatchesUseCase
from .list_user_media import ListUserMediaUseCase
from .set_default_selfie import SetDefaultSelfieUseCase

__all__ = [
    "FindMatchesUseCase",
    "GetMatchesUseCase",
    "GetStatisticsUseCase",
    "ListUserMatchesUseCase",
    "ListUserMediaUseCase",
    "SetDefaultSelfieUseCase",
]
