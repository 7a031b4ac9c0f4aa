"""
Unit tests for match use cases.
"""
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest
from eventface.application.dto.match_dto import FindMatchesRequest, SelfieUpdateRequest
from eventface.application.use_cases.matches.find_matches import FindMatchesUseCase
from eventface.application.use_cases.matches.get_matches import GetMatchesUseCase
from eventface.application.use_cases.matches.get_statistics import GetStatisticsUseCase
from eventface.application.use_cases.matches.list_user_matches import ListUserMatchesUseCase
from eventface.application.use_cases.matches.list_user_media import ListUserMediaUseCase
from eventface.application.use_cases.matches.set_default_selfie import SetDefaultSelfieUseCase
from eventface.domain.constants.media_constants import DEFAULT_COLLECTION_ID
from eventface.domain.exceptions import AssetNotFound, ValidationError
from eventface.domain.models.attendee import AttendeeRecord
from eventface.domain.models.match import ImageMatch, VideoMatch

SELFIE = "selfies/user-1.jpg"


def _video_match(similarity=88.0):
    return VideoMatch(
        video_key="events/shared/party/videos/v1/clip.mp4",
        video_name="clip.mp4",
        thumbnail_key="events/shared/party/videos/v1/thumbnail.jpg",
        frame_count=10,
        similarity=similarity,
        external_id="clip.mp4_frame_7",
    )


@pytest.fixture
def aggregator_mock():
    return AsyncMock()


@pytest.fixture
def find_use_case(aggregator_mock, match_store, storage):
    storage.add(SELFIE)
    return FindMatchesUseCase(aggregator=aggregator_mock, match_store=match_store, storage=storage)


class TestFindMatchesUseCase:
    """Tests for FindMatchesUseCase"""

    @pytest.mark.asyncio
    async def test_matches_saved(self, find_use_case, aggregator_mock, match_store, mock_settings):
        aggregator_mock.find_matches.return_value = [
            _video_match(),
            ImageMatch(asset_key="events/shared/party/images/a.jpg", similarity=80.0),
        ]

        result = await find_use_case.execute("user-1", "party", FindMatchesRequest(selfie_key=SELFIE))

        assert result.persisted is True
        assert result.total_matches == 2
        assert result.video_count == 1
        assert result.image_count == 1
        assert result.matches[0].kind == "video"
        assert result.matches[0].frame_count == 10
        record = await match_store.get_matches("user-1", "party")
        assert record.matched_videos == ["events/shared/party/videos/v1/clip.mp4"]
        assert record.matched_images == ["events/shared/party/images/a.jpg"]
        assert record.selfie_ref == SELFIE

    @pytest.mark.asyncio
    async def test_threshold_forwarded(self, find_use_case, aggregator_mock):
        aggregator_mock.find_matches.return_value = []
        await find_use_case.execute("user-1", "party", FindMatchesRequest(selfie_key=SELFIE, threshold=85))
        aggregator_mock.find_matches.assert_awaited_once_with("party", SELFIE, threshold=85)

    @pytest.mark.asyncio
    async def test_missing_selfie(self, aggregator_mock, match_store, storage):
        use_case = FindMatchesUseCase(aggregator=aggregator_mock, match_store=match_store, storage=storage)
        with pytest.raises(AssetNotFound):
            await use_case.execute("user-1", "party", FindMatchesRequest(selfie_key="selfies/missing.jpg"))
        aggregator_mock.find_matches.assert_not_called()

    @pytest.mark.asyncio
    async def test_requires_ids(self, find_use_case):
        with pytest.raises(ValueError):
            await find_use_case.execute("", "party", FindMatchesRequest(selfie_key=SELFIE))

    @pytest.mark.asyncio
    async def test_reserved_collection_rejected(self, find_use_case, aggregator_mock, match_store):
        with pytest.raises(ValidationError, match="reserved"):
            await find_use_case.execute("user-1", DEFAULT_COLLECTION_ID, FindMatchesRequest(selfie_key=SELFIE))
        aggregator_mock.find_matches.assert_not_called()
        assert (await match_store.statistics("user-1")).total_events == 0
        assert await match_store.get_matches("user-1", DEFAULT_COLLECTION_ID) is None

    @pytest.mark.asyncio
    async def test_no_matches_clears_record(self, find_use_case, aggregator_mock, match_store):
        await match_store.replace_matches("user-1", "party", SELFIE, ["old.jpg"], [])
        aggregator_mock.find_matches.return_value = []

        result = await find_use_case.execute("user-1", "party", FindMatchesRequest(selfie_key=SELFIE))

        assert result.message == "No matches found."
        record = await match_store.get_matches("user-1", "party")
        assert record.matched_images == []

    @pytest.mark.asyncio
    async def test_store_failure_still_returns_matches(
        self, find_use_case, aggregator_mock, attendee_repository
    ):
        aggregator_mock.find_matches.return_value = [_video_match()]
        attendee_repository.fail_saves = True

        result = await find_use_case.execute("user-1", "party", FindMatchesRequest(selfie_key=SELFIE))

        assert result.persisted is False
        assert result.total_matches == 1
        assert "could not be saved" in result.message


class TestGetMatchesUseCase:
    """Tests for GetMatchesUseCase"""

    @pytest.mark.asyncio
    async def test_not_found(self, match_store):
        with pytest.raises(ValueError, match="No matches stored"):
            await GetMatchesUseCase(match_store).execute("user-1", "party")

    @pytest.mark.asyncio
    async def test_found(self, match_store, mock_settings):
        await match_store.replace_matches("user-1", "party", SELFIE, ["a.jpg"], [])
        result = await GetMatchesUseCase(match_store).execute("user-1", "party")
        assert result.matched_images == ["a.jpg"]
        assert result.created_at.endswith("Z")


class TestListUserMatchesUseCase:
    """Tests for ListUserMatchesUseCase"""

    @pytest.mark.asyncio
    async def test_filters(self, match_store, attendee_repository, mock_settings):
        await attendee_repository.save(AttendeeRecord("user-1", "viewer", SELFIE, matched_images=["a.jpg"]))
        await attendee_repository.save(AttendeeRecord("user-1", "clips", SELFIE, matched_videos=["v.mp4"], has_contributed=True))
        await attendee_repository.save(AttendeeRecord("user-1", DEFAULT_COLLECTION_ID, SELFIE))
        use_case = ListUserMatchesUseCase(match_store)

        everything = await use_case.execute("user-1")
        viewing = await use_case.execute("user-1", "viewing_only")
        videos = await use_case.execute("user-1", "with_videos")

        assert everything.total == 2
        assert [r.collection_id for r in viewing.items] == ["viewer"]
        assert [r.collection_id for r in videos.items] == ["clips"]

    @pytest.mark.asyncio
    async def test_unknown_filter(self, match_store):
        with pytest.raises(ValueError, match="Unknown filter"):
            await ListUserMatchesUseCase(match_store).execute("user-1", "favourites")


class TestListUserMediaUseCase:
    """Tests for ListUserMediaUseCase"""

    @pytest.mark.asyncio
    async def test_deduplicated_and_counted(self, match_store, attendee_repository):
        older = datetime(2025, 1, 1, tzinfo=timezone.utc)
        newer = datetime(2025, 3, 1, tzinfo=timezone.utc)
        await attendee_repository.save(AttendeeRecord(
            "user-1", "party", SELFIE,
            matched_images=["a.jpg", "a.jpg", "b.jpg"], matched_videos=["v.mp4"], last_updated=older,
        ))
        await attendee_repository.save(AttendeeRecord(
            "user-1", "wedding", SELFIE, matched_images=["a.jpg"], last_updated=newer,
        ))

        result = await ListUserMediaUseCase(match_store).execute("user-1")

        assert result.total == 4
        assert result.image_count == 3
        assert result.video_count == 1
        assert result.items[0].collection_id == "wedding"


class TestGetStatisticsUseCase:
    """Tests for GetStatisticsUseCase"""

    @pytest.mark.asyncio
    async def test_statistics(self, match_store, attendee_repository, mock_settings):
        await attendee_repository.save(AttendeeRecord(
            "user-1", "party", SELFIE, matched_images=["a.jpg", "b.jpg"], matched_videos=["v.mp4"],
            created_at=datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc),
        ))
        result = await GetStatisticsUseCase(match_store).execute("user-1")
        assert result.total_events == 1
        assert result.total_images == 2
        assert result.total_videos == 1
        assert result.first_date == "2025-01-15T12:00:00Z"


class TestSetDefaultSelfieUseCase:
    """Tests for SetDefaultSelfieUseCase"""

    @pytest.mark.asyncio
    async def test_updates_every_record(self, match_store, storage):
        storage.add("selfies/new.jpg")
        await match_store.replace_matches("user-1", "party", SELFIE, ["a.jpg"], [])

        result = await SetDefaultSelfieUseCase(match_store, storage).execute(
            "user-1", SelfieUpdateRequest(selfie_key="selfies/new.jpg")
        )

        assert result.records_updated == 2
        assert await match_store.get_default_selfie("user-1") == "selfies/new.jpg"
        assert (await match_store.get_matches("user-1", "party")).selfie_ref == "selfies/new.jpg"

    @pytest.mark.asyncio
    async def test_missing_selfie(self, match_store, storage):
        with pytest.raises(AssetNotFound):
            await SetDefaultSelfieUseCase(match_store, storage).execute(
                "user-1", SelfieUpdateRequest(selfie_key="selfies/missing.jpg")
            )
