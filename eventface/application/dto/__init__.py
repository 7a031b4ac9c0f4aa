from .media_dto import FailedAssetResponse, ProcessedVideoResponse, ReindexResponse, UploadResultResponse
from .match_dto import (
    AttendeeRecordListResponse,
    AttendeeRecordResponse,
    FindMatchesRequest,
    FindMatchesResponse,
    MatchResponse,
    MediaItemResponse,
    SelfieUpdateRequest,
    SelfieUpdateResponse,
    StatisticsResponse,
    UserMediaResponse,
)

__all__ = [
    "FailedAssetResponse",
    "ProcessedVideoResponse",
    "ReindexResponse",
    "UploadResultResponse",
    "AttendeeRecordListResponse",
    "AttendeeRecordResponse",
    "FindMatchesRequest",
    "FindMatchesResponse",
    "MatchResponse",
    "MediaItemResponse",
    "SelfieUpdateRequest",
    "SelfieUpdateResponse",
    "StatisticsResponse",
    "UserMediaResponse",
]
