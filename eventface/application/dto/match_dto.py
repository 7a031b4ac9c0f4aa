from typing import List, Optional
from pydantic import BaseModel, Field


class FindMatchesRequest(BaseModel):
    """DTO for a search with a selfie already stored in object storage"""
    selfie_key: str = Field(min_length=1)
    display_name: Optional[str] = None
    cover_image: Optional[str] = None
    threshold: Optional[float] = Field(default=None, ge=0, le=100)


class MatchResponse(BaseModel):
    """DTO for one image or video match"""
    kind: str  # "image" | "video"
    asset_url: str
    similarity: float
    video_name: Optional[str] = None
    thumbnail_key: Optional[str] = None
    frame_count: Optional[int] = None
    external_id: Optional[str] = None


class FindMatchesResponse(BaseModel):
    """DTO for findMatches result"""
    user_id: str
    collection_id: str
    matches: List[MatchResponse] = Field(default_factory=list)
    total_matches: int = 0
    image_count: int = 0
    video_count: int = 0
    persisted: bool = True
    message: str = ""


class AttendeeRecordResponse(BaseModel):
    """DTO for a stored (user, collection) match record"""
    user_id: str
    collection_id: str
    selfie_ref: str
    matched_images: List[str] = Field(default_factory=list)
    matched_videos: List[str] = Field(default_factory=list)
    display_name: Optional[str] = None
    cover_ref: Optional[str] = None
    created_at: Optional[str] = None
    last_updated: Optional[str] = None
    has_contributed: bool = False


class AttendeeRecordListResponse(BaseModel):
    items: List[AttendeeRecordResponse] = Field(default_factory=list)
    total: int = 0


class MediaItemResponse(BaseModel):
    collection_id: str
    asset_url: str
    kind: str


class UserMediaResponse(BaseModel):
    """DTO for every matched asset of a user, across collections"""
    user_id: str
    items: List[MediaItemResponse] = Field(default_factory=list)
    total: int = 0
    image_count: int = 0
    video_count: int = 0


class StatisticsResponse(BaseModel):
    total_events: int = 0
    total_images: int = 0
    total_videos: int = 0
    first_date: Optional[str] = None
    latest_date: Optional[str] = None


class SelfieUpdateRequest(BaseModel):
    selfie_key: str = Field(min_length=1)


class SelfieUpdateResponse(BaseModel):
    user_id: str
    selfie_ref: str
    records_updated: int = 0
