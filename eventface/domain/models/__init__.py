from .attendee import AttendeeRecord, AttendeeStatistics
from .indexing import AssetState, BatchResult, FailedAsset, IndexRequest
from .match import CollectionMatch, ImageMatch, Match, MediaItem, RawHit, VideoMatch
from .media import MediaUpload
from .video import ExtractedFrame, ExtractedVideo, PreparedVideo, UploadedFrame, VideoMetadata

__all__ = [
    "AttendeeRecord",
    "AttendeeStatistics",
    "AssetState",
    "BatchResult",
    "FailedAsset",
    "IndexRequest",
    "CollectionMatch",
    "ImageMatch",
    "MediaItem",
    "Match",
    "RawHit",
    "VideoMatch",
    "MediaUpload",
    "ExtractedFrame",
    "ExtractedVideo",
    "PreparedVideo",
    "UploadedFrame",
    "VideoMetadata",
]
