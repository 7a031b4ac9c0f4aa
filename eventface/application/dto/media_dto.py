from typing import List, Optional
from pydantic import BaseModel, Field


class FailedAssetResponse(BaseModel):
    """DTO for one file or asset that could not be stored or indexed"""
    asset: str  # original file name, or asset key once stored
    error: str


class ProcessedVideoResponse(BaseModel):
    """DTO for one stored video and the frames taken from it"""
    video_key: str
    thumbnail_key: str
    video_name: str
    frame_count: int  # frames stored
    frames_indexed: int = 0
    duration: float = 0.0  # seconds
    width: int = 0
    height: int = 0
    frame_rate: float = 0.0


class UploadResultResponse(BaseModel):
    """DTO for uploadAndIndex result"""
    collection_id: str
    successful: List[str] = Field(default_factory=list)  # asset keys
    failed: List[FailedAssetResponse] = Field(default_factory=list)
    total: int = 0
    images_indexed: int = 0
    videos_processed: int = 0
    frames_indexed: int = 0
    message: Optional[str] = None
    videos: List[ProcessedVideoResponse] = Field(default_factory=list)


class ReindexResponse(BaseModel):
    """DTO for a full rebuild of a collection's face index"""
    collection_id: str
    successful: List[str] = Field(default_factory=list)
    failed: List[FailedAssetResponse] = Field(default_factory=list)
    total: int = 0
