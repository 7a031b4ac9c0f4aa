# Standard library imports
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass
class AttendeeRecord:
    """
    Match state of one user in one collection (event).

    At most one record exists per (user_id, collection_id). The match lists
    are replaced wholesale by every successful search.
    """
    user_id: str
    collection_id: str
    selfie_ref: str
    matched_images: List[str] = field(default_factory=list)
    matched_videos: List[str] = field(default_factory=list)
    display_name: Optional[str] = None
    cover_ref: Optional[str] = None
    created_at: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    has_contributed: bool = False

    def __post_init__(self) -> None:
        """Business validations"""
        if not self.user_id:
            raise ValueError("User ID is required")
        if not self.collection_id:
            raise ValueError("Collection ID is required")

    @property
    def has_matches(self) -> bool:
        return bool(self.matched_images) or bool(self.matched_videos)


@dataclass(frozen=True)
class AttendeeStatistics:
    total_events: int = 0
    total_images: int = 0
    total_videos: int = 0
    first_date: Optional[datetime] = None
    latest_date: Optional[datetime] = None
