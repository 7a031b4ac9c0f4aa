"""
Unit tests for MatchStore and deduplicate_matches
"""
from datetime import datetime, timezone

import pytest
from eventface.application.services.match_store import deduplicate_matches
from eventface.domain.constants.media_constants import DEFAULT_COLLECTION_ID, DEFAULT_COLLECTION_NAME
from eventface.domain.exceptions import ValidationError
from eventface.domain.models.attendee import AttendeeRecord
from eventface.domain.models.match import MediaItem


def _record(collection_id, images=0, videos=0, created_at=None, **kwargs):
    return AttendeeRecord(
        user_id="user-1",
        collection_id=collection_id,
        selfie_ref="selfies/user-1.jpg",
        matched_images=[f"{collection_id}/img_{n}.jpg" for n in range(images)],
        matched_videos=[f"{collection_id}/vid_{n}.mp4" for n in range(videos)],
        created_at=created_at,
        **kwargs,
    )


class TestDeduplicateMatches:
    """Tests for deduplicate_matches"""

    def test_keeps_first_occurrence(self):
        entries = [
            MediaItem("party", "a.jpg", "image"),
            MediaItem("party", "b.jpg", "image"),
            MediaItem("party", "a.jpg", "image"),
            MediaItem("wedding", "a.jpg", "image"),
        ]
        assert deduplicate_matches(entries) == [entries[0], entries[1], entries[3]]

    def test_empty(self):
        assert deduplicate_matches([]) == []


class TestReplaceMatches:
    """Tests for MatchStore.replace_matches"""

    @pytest.mark.asyncio
    async def test_creates_record(self, match_store, attendee_repository):
        record = await match_store.replace_matches("user-1", "party", "s.jpg", ["a.jpg"], ["v.mp4"], display_name="Party")
        assert record.matched_images == ["a.jpg"]
        assert record.matched_videos == ["v.mp4"]
        assert record.display_name == "Party"
        assert record.created_at is not None
        assert ("user-1", "party") in attendee_repository.records

    @pytest.mark.asyncio
    async def test_replaces_lists(self, match_store):
        await match_store.replace_matches("user-1", "party", "s.jpg", ["a.jpg", "b.jpg"], ["v.mp4"])
        record = await match_store.replace_matches("user-1", "party", "s2.jpg", ["c.jpg"], [])
        assert record.matched_images == ["c.jpg"]
        assert record.matched_videos == []
        assert record.selfie_ref == "s2.jpg"

    @pytest.mark.asyncio
    async def test_empty_result_clears_matches(self, match_store):
        await match_store.replace_matches("user-1", "party", "s.jpg", ["a.jpg"], ["v.mp4"])
        record = await match_store.replace_matches("user-1", "party", "s.jpg", [], [])
        assert record.has_matches is False

    @pytest.mark.asyncio
    async def test_keeps_metadata(self, match_store):
        first = await match_store.replace_matches(
            "user-1", "party", "s.jpg", ["a.jpg"], [], display_name="Party", cover_ref="cover.jpg"
        )
        await match_store.mark_contribution("user-1", "party")
        second = await match_store.replace_matches("user-1", "party", "s.jpg", ["b.jpg"], [])
        assert second.display_name == "Party"
        assert second.cover_ref == "cover.jpg"
        assert second.created_at == first.created_at
        assert second.has_contributed is True

    @pytest.mark.asyncio
    async def test_reserved_collection_rejected(self, match_store, attendee_repository):
        await match_store.store_default_selfie("user-1", "selfies/profile.jpg")

        with pytest.raises(ValidationError, match="reserved"):
            await match_store.replace_matches("user-1", DEFAULT_COLLECTION_ID, "s.jpg", ["a.jpg"], [])

        profile = attendee_repository.records[("user-1", DEFAULT_COLLECTION_ID)]
        assert profile.matched_images == []
        assert profile.display_name == DEFAULT_COLLECTION_NAME

    @pytest.mark.asyncio
    async def test_get_matches(self, match_store):
        assert await match_store.get_matches("user-1", "party") is None
        await match_store.replace_matches("user-1", "party", "s.jpg", ["a.jpg"], [])
        record = await match_store.get_matches("user-1", "party")
        assert record.matched_images == ["a.jpg"]


class TestStatistics:
    """Tests for MatchStore.statistics"""

    @pytest.mark.asyncio
    async def test_no_records(self, match_store):
        stats = await match_store.statistics("user-1")
        assert stats.total_events == 0
        assert stats.first_date is None

    @pytest.mark.asyncio
    async def test_default_record_excluded(self, match_store, attendee_repository):
        early = datetime(2025, 1, 1, tzinfo=timezone.utc)
        late = datetime(2025, 6, 1, tzinfo=timezone.utc)
        for record in [
            _record("party", images=2, videos=1, created_at=late),
            _record(DEFAULT_COLLECTION_ID, created_at=datetime(2024, 1, 1, tzinfo=timezone.utc)),
            _record("wedding", images=3, videos=2, created_at=early),
        ]:
            await attendee_repository.save(record)

        stats = await match_store.statistics("user-1")

        assert stats.total_events == 2
        assert stats.total_images == 5
        assert stats.total_videos == 3
        assert stats.first_date == early
        assert stats.latest_date == late


class TestUserViews:
    """Tests for the per-user record views"""

    @pytest.mark.asyncio
    async def test_list_excludes_default(self, match_store, attendee_repository):
        await attendee_repository.save(_record("party", images=1))
        await attendee_repository.save(_record(DEFAULT_COLLECTION_ID))
        records = await match_store.list_matches_for_user("user-1")
        assert [r.collection_id for r in records] == ["party"]
        everything = await match_store.list_matches_for_user("user-1", include_default=True)
        assert len(everything) == 2

    @pytest.mark.asyncio
    async def test_viewing_only(self, match_store, attendee_repository):
        await attendee_repository.save(_record("viewer", images=1))
        await attendee_repository.save(_record("uploader", images=1, has_contributed=True))
        await attendee_repository.save(_record("empty"))
        records = await match_store.list_viewing_only("user-1")
        assert [r.collection_id for r in records] == ["viewer"]

    @pytest.mark.asyncio
    async def test_with_videos(self, match_store, attendee_repository):
        await attendee_repository.save(_record("photos", images=2))
        await attendee_repository.save(_record("clips", videos=1))
        records = await match_store.list_with_videos("user-1")
        assert [r.collection_id for r in records] == ["clips"]


class TestContributionAndSelfie:
    """Tests for contribution flag and selfie management"""

    @pytest.mark.asyncio
    async def test_mark_contribution_creates_record(self, match_store):
        record = await match_store.mark_contribution("user-1", "party")
        assert record.has_contributed is True
        assert record.matched_images == []

    @pytest.mark.asyncio
    async def test_mark_contribution_keeps_matches(self, match_store):
        await match_store.replace_matches("user-1", "party", "s.jpg", ["a.jpg"], [])
        record = await match_store.mark_contribution("user-1", "party")
        assert record.has_contributed is True
        assert record.matched_images == ["a.jpg"]

    @pytest.mark.asyncio
    async def test_mark_contribution_reserved_collection(self, match_store):
        with pytest.raises(ValidationError):
            await match_store.mark_contribution("user-1", DEFAULT_COLLECTION_ID)

    @pytest.mark.asyncio
    async def test_default_selfie(self, match_store):
        assert await match_store.get_default_selfie("user-1") is None
        record = await match_store.store_default_selfie("user-1", "selfies/new.jpg")
        assert record.collection_id == DEFAULT_COLLECTION_ID
        assert record.display_name == DEFAULT_COLLECTION_NAME
        assert await match_store.get_default_selfie("user-1") == "selfies/new.jpg"

    @pytest.mark.asyncio
    async def test_update_selfie_everywhere(self, match_store):
        await match_store.replace_matches("user-1", "party", "old.jpg", ["a.jpg"], [])
        await match_store.replace_matches("user-1", "wedding", "old.jpg", [], [])
        await match_store.replace_matches("user-2", "party", "other.jpg", [], [])

        updated = await match_store.update_selfie_everywhere("user-1", "new.jpg")

        assert updated == 2
        assert (await match_store.get_matches("user-1", "party")).selfie_ref == "new.jpg"
        assert (await match_store.get_matches("user-2", "party")).selfie_ref == "other.jpg"
