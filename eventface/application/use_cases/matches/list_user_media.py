# Standard library imports
from datetime import datetime, timezone

# Local application imports
from ....domain.models.attendee import AttendeeRecord
from ....domain.models.match import ImageMatch, MediaItem, VideoMatch
from ....utils.datetime_utils import ensure_utc
from ...dto.match_dto import MediaItemResponse, UserMediaResponse
from ...services.match_store import MatchStore, deduplicate_matches

_NEVER = datetime.min.replace(tzinfo=timezone.utc)


def _recency(record: AttendeeRecord) -> datetime:
    return ensure_utc(record.last_updated or record.created_at) or _NEVER


class ListUserMediaUseCase:
    """Use case for listing every matched photo and video of a user, without repeats"""

    def __init__(self, match_store: MatchStore) -> None:
        self.match_store = match_store

    async def execute(self, user_id: str) -> UserMediaResponse:
        records = await self.match_store.list_matches_for_user(user_id)
        # Most recently updated collections first
        records = sorted(records, key=_recency, reverse=True)

        entries = []
        for record in records:
            entries.extend(MediaItem(record.collection_id, key, ImageMatch.kind) for key in record.matched_images)
            entries.extend(MediaItem(record.collection_id, key, VideoMatch.kind) for key in record.matched_videos)

        items = [
            MediaItemResponse(collection_id=e.collection_id, asset_url=e.asset_url, kind=e.kind)
            for e in deduplicate_matches(entries)
        ]
        return UserMediaResponse(
            user_id=user_id,
            items=items,
            total=len(items),
            image_count=sum(1 for item in items if item.kind == ImageMatch.kind),
            video_count=sum(1 for item in items if item.kind == VideoMatch.kind),
        )
