from .media import (
    ReindexCollectionUseCase,
    UploadAndIndexUseCase,
)
from .matches import (
    FindMatchesUseCase,
    GetMatchesUseCase,
    GetStatisticsUseCase,
    ListUserMatchesUseCase,
    ListUserMediaUseCase,
    SetDefaultSelfieUseCase,
)

__all__ = [
    "ReindexCollectionUseCase",
    "UploadAndIndexUseCase",
    "FindMatchesUseCase",
    "GetMatchesUseCase",
    "GetStatisticsUseCase",
    "ListUserMatchesUseCase",
    "ListUserMediaUseCase",
    "SetDefaultSelfieUseCase",
]
