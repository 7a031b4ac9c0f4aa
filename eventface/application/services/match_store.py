"""
Attendee match records: one record per (user, collection), replaced
wholesale by every successful search.
"""
import logging
from typing import Iterable, List, Optional, Sequence, Tuple, TypeVar

from ...domain.constants.media_constants import DEFAULT_COLLECTION_ID, DEFAULT_COLLECTION_NAME
from ...domain.exceptions import ValidationError
from ...domain.models.attendee import AttendeeRecord, AttendeeStatistics
from ...domain.repositories.attendee_repository import AttendeeRepository
from ...utils.datetime_utils import utc_now

logger = logging.getLogger(__name__)

T = TypeVar("T")


def deduplicate_matches(entries: Iterable[T]) -> List[T]:
    """
    Drop entries whose (collection_id, asset_url) was already seen, keeping
    the first occurrence and the original order.
    """
    seen = set()
    unique: List[T] = []
    for entry in entries:
        key: Tuple[str, str] = (getattr(entry, "collection_id"), getattr(entry, "asset_url"))
        if key in seen:
            continue
        seen.add(key)
        unique.append(entry)
    return unique


def is_default_record(record: AttendeeRecord) -> bool:
    return record.collection_id == DEFAULT_COLLECTION_ID


def check_event_collection_id(collection_id: str) -> None:
    """
    Reject ids that cannot name an event collection.

    Raises:
        ValidationError: empty id, or the id reserved for the profile selfie record
    """
    if not collection_id:
        raise ValidationError("Collection ID is required.")
    if collection_id == DEFAULT_COLLECTION_ID:
        raise ValidationError(f"\"{DEFAULT_COLLECTION_ID}\" is a reserved collection ID.")


class MatchStore:
    """Persists match results and derives per-user views over them."""

    def __init__(self, repository: AttendeeRepository) -> None:
        self.repository = repository

    async def replace_matches(
        self,
        user_id: str,
        collection_id: str,
        selfie_ref: str,
        image_keys: Sequence[str],
        video_keys: Sequence[str],
        display_name: Optional[str] = None,
        cover_ref: Optional[str] = None,
    ) -> AttendeeRecord:
        """
        Overwrite the selfie and both match lists of the (user, collection)
        record, or create it. Display name and cover are kept when not given.
        """
        check_event_collection_id(collection_id)
        existing = await self.repository.find(user_id, collection_id)
        now = utc_now()

        if existing is not None:
            record = AttendeeRecord(
                user_id=user_id,
                collection_id=collection_id,
                selfie_ref=selfie_ref,
                matched_images=list(image_keys),
                matched_videos=list(video_keys),
                display_name=display_name or existing.display_name,
                cover_ref=cover_ref or existing.cover_ref,
                created_at=existing.created_at or now,
                last_updated=now,
                has_contributed=existing.has_contributed,
            )
            logger.info(
                f"Replacing matches of user {user_id} in {collection_id}: "
                f"{len(existing.matched_images)}/{len(existing.matched_videos)} -> "
                f"{len(record.matched_images)}/{len(record.matched_videos)} image(s)/video(s)"
            )
        else:
            record = AttendeeRecord(
                user_id=user_id,
                collection_id=collection_id,
                selfie_ref=selfie_ref,
                matched_images=list(image_keys),
                matched_videos=list(video_keys),
                display_name=display_name,
                cover_ref=cover_ref,
                created_at=now,
                last_updated=now,
            )
            logger.info(f"Creating match record of user {user_id} in {collection_id}")

        return await self.repository.save(record)

    async def get_matches(self, user_id: str, collection_id: str) -> Optional[AttendeeRecord]:
        return await self.repository.find(user_id, collection_id)

    async def list_matches_for_user(self, user_id: str, include_default: bool = False) -> List[AttendeeRecord]:
        records = await self.repository.find_by_user(user_id)
        if include_default:
            return records
        return [record for record in records if not is_default_record(record)]

    async def statistics(self, user_id: str) -> AttendeeStatistics:
        """Event, image and video counts plus the date range over all collections."""
        records = await self.list_matches_for_user(user_id)
        if not records:
            return AttendeeStatistics()

        collection_ids = set()
        total_images = 0
        total_videos = 0
        dates = []
        for record in records:
            collection_ids.add(record.collection_id)
            total_images += len(record.matched_images)
            total_videos += len(record.matched_videos)
            date = record.created_at or record.last_updated
            if date is not None:
                dates.append(date)

        return AttendeeStatistics(
            total_events=len(collection_ids),
            total_images=total_images,
            total_videos=total_videos,
            first_date=min(dates) if dates else None,
            latest_date=max(dates) if dates else None,
        )

    async def mark_contribution(self, user_id: str, collection_id: str, selfie_ref: str = "") -> AttendeeRecord:
        """Flag that the user uploaded media to the collection (record created if needed)."""
        check_event_collection_id(collection_id)
        existing = await self.repository.find(user_id, collection_id)
        if existing is not None:
            if existing.has_contributed:
                return existing
            existing.has_contributed = True
            existing.last_updated = utc_now()
            return await self.repository.save(existing)

        now = utc_now()
        return await self.repository.save(AttendeeRecord(
            user_id=user_id,
            collection_id=collection_id,
            selfie_ref=selfie_ref,
            created_at=now,
            last_updated=now,
            has_contributed=True,
        ))

    async def store_default_selfie(self, user_id: str, selfie_ref: str) -> AttendeeRecord:
        now = utc_now()
        existing = await self.repository.find(user_id, DEFAULT_COLLECTION_ID)
        return await self.repository.save(AttendeeRecord(
            user_id=user_id,
            collection_id=DEFAULT_COLLECTION_ID,
            selfie_ref=selfie_ref,
            display_name=DEFAULT_COLLECTION_NAME,
            created_at=existing.created_at if existing and existing.created_at else now,
            last_updated=now,
        ))

    async def get_default_selfie(self, user_id: str) -> Optional[str]:
        record = await self.repository.find(user_id, DEFAULT_COLLECTION_ID)
        if record is None or not record.selfie_ref:
            return None
        return record.selfie_ref

    async def update_selfie_everywhere(self, user_id: str, selfie_ref: str) -> int:
        """Point every record of the user at a new selfie. Returns the number updated."""
        updated = await self.repository.set_selfie_for_user(user_id, selfie_ref)
        logger.info(f"Updated selfie on {updated} record(s) of user {user_id}")
        return updated

    async def list_viewing_only(self, user_id: str) -> List[AttendeeRecord]:
        """Collections where the user has matches but never uploaded anything."""
        records = await self.list_matches_for_user(user_id)
        return [record for record in records if record.has_matches and not record.has_contributed]

    async def list_with_videos(self, user_id: str) -> List[AttendeeRecord]:
        records = await self.list_matches_for_user(user_id)
        return [record for record in records if record.matched_videos]
