"""
Unit tests for VideoFramePreparer
"""
import pytest
from eventface.application.services.video_frame_preparer import VideoFramePreparer
from eventface.domain import storage_keys
from eventface.domain.exceptions import VideoProcessingError

from tests.fakes import FakeFrameExtractor

VIDEO_BYTES = b"\x00\x00\x00\x18ftypmp42"


async def _prepare(preparer, index_client, name="Party Night.mp4", frame_count=None):
    await index_client.ensure_collection("party")
    return await preparer.prepare(VIDEO_BYTES, name, "party", "v1", frame_count=frame_count)


class TestPrepare:
    """Tests for VideoFramePreparer.prepare"""

    @pytest.mark.asyncio
    async def test_stores_and_indexes_everything(self, video_preparer, index_client, storage, face_index):
        prepared = await _prepare(video_preparer, index_client)

        assert prepared.video_key == storage_keys.video_key("party", "v1", "Party Night.mp4")
        assert prepared.thumbnail_key == storage_keys.thumbnail_key("party", "v1")
        assert prepared.frame_count == 10
        assert len(prepared.indexing.successful) == 10
        assert storage.objects[prepared.video_key] == (VIDEO_BYTES, "video/mp4")
        assert storage.objects[prepared.thumbnail_key][1] == "image/jpeg"
        assert "Party_Night.mp4_frame_1" in face_index.external_ids("event-party")
        assert "Party_Night.mp4_frame_10" in face_index.external_ids("event-party")

    @pytest.mark.asyncio
    async def test_frame_count_override(self, video_preparer, index_client, frame_extractor):
        prepared = await _prepare(video_preparer, index_client, frame_count=4)
        assert prepared.frame_count == 4
        assert frame_extractor.calls == [(".mp4", 4)]

    @pytest.mark.asyncio
    async def test_content_type_from_extension(self, video_preparer, index_client, storage):
        prepared = await _prepare(video_preparer, index_client, name="clip.MOV")
        assert storage.objects[prepared.video_key][1] == "video/quicktime"

    @pytest.mark.asyncio
    async def test_undecodable_frames_skipped(self, storage, batch_indexer, index_client):
        preparer = VideoFramePreparer(
            storage=storage,
            frame_extractor=FakeFrameExtractor(undecodable_frames={2, 5}),
            batch_indexer=batch_indexer,
        )
        prepared = await _prepare(preparer, index_client)
        numbers = [frame.frame_number for frame in prepared.frames]
        assert numbers == [1, 3, 4, 6, 7, 8, 9, 10]

    @pytest.mark.asyncio
    async def test_frame_upload_failure_skips_frame(self, video_preparer, index_client, storage):
        storage.failing_put_suffixes.add("frames/frame_3.jpg")
        prepared = await _prepare(video_preparer, index_client)
        assert prepared.frame_count == 9
        assert 3 not in [frame.frame_number for frame in prepared.frames]

    @pytest.mark.asyncio
    async def test_thumbnail_upload_failure(self, video_preparer, index_client, storage):
        storage.failing_put_keys.add(storage_keys.thumbnail_key("party", "v1"))
        with pytest.raises(VideoProcessingError, match="Thumbnail"):
            await _prepare(video_preparer, index_client)
        assert storage_keys.video_key("party", "v1", "Party Night.mp4") not in storage.objects

    @pytest.mark.asyncio
    async def test_video_upload_failure(self, video_preparer, index_client, storage, face_index):
        storage.failing_put_keys.add(storage_keys.video_key("party", "v1", "Party Night.mp4"))
        with pytest.raises(VideoProcessingError, match="Video upload"):
            await _prepare(video_preparer, index_client)
        assert face_index.external_ids("event-party") == []

    @pytest.mark.asyncio
    async def test_thumbnail_falls_back_to_first_frame(self, storage, batch_indexer, index_client):
        preparer = VideoFramePreparer(
            storage=storage,
            frame_extractor=FakeFrameExtractor(thumbnail=None),
            batch_indexer=batch_indexer,
        )
        prepared = await _prepare(preparer, index_client)
        assert storage.objects[prepared.thumbnail_key][0] == b"frame-1"

    @pytest.mark.asyncio
    async def test_no_thumbnail_and_no_frames(self, storage, batch_indexer, index_client):
        preparer = VideoFramePreparer(
            storage=storage,
            frame_extractor=FakeFrameExtractor(thumbnail=None, undecodable_frames=range(1, 11)),
            batch_indexer=batch_indexer,
        )
        with pytest.raises(VideoProcessingError):
            await _prepare(preparer, index_client)

    @pytest.mark.asyncio
    async def test_extractor_crash_wrapped(self, storage, batch_indexer, index_client):
        preparer = VideoFramePreparer(
            storage=storage,
            frame_extractor=FakeFrameExtractor(error=RuntimeError("codec missing")),
            batch_indexer=batch_indexer,
        )
        with pytest.raises(VideoProcessingError, match="codec missing"):
            await _prepare(preparer, index_client)

    @pytest.mark.asyncio
    async def test_empty_video_rejected(self, video_preparer):
        with pytest.raises(VideoProcessingError):
            await video_preparer.prepare(b"", "clip.mp4", "party", "v1")

    @pytest.mark.asyncio
    async def test_no_frames_stored_skips_indexing(self, storage, batch_indexer, index_client, face_index):
        preparer = VideoFramePreparer(
            storage=storage,
            frame_extractor=FakeFrameExtractor(undecodable_frames=range(1, 11)),
            batch_indexer=batch_indexer,
        )
        prepared = await _prepare(preparer, index_client)
        assert prepared.frame_count == 0
        assert prepared.indexing.total == 0
        assert prepared.video_key in storage.objects
        assert face_index.index_calls == {}
