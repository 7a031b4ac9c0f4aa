"""
Shared pytest fixtures for eventface tests.
"""
import os
from unittest.mock import MagicMock, patch

import pytest

from eventface.application.services.batch_indexer import BatchIndexer
from eventface.application.services.index_client import IndexClient
from eventface.application.services.match_aggregator import MatchAggregator
from eventface.application.services.match_store import MatchStore
from eventface.application.services.video_frame_preparer import VideoFramePreparer

from .fakes import (
    FakeFaceIndex,
    FakeFrameExtractor,
    InMemoryAttendeeRepository,
    InMemoryIdentifierMap,
    InMemoryObjectStorage,
    RecordingScheduler,
    no_jitter,
)


@pytest.fixture
def mock_env():
    """Fixture to set common test environment variables."""
    env_vars = {
        "MONGO_URI": "mongodb://localhost:27017",
        "MONGO_DB_NAME": "test_eventface_db",
        "AWS_REGION": "us-east-1",
        "AWS_S3_BUCKET": "test-bucket",
        "LOCAL_TIMEZONE": "UTC",
    }
    with patch.dict(os.environ, env_vars, clear=False):
        yield env_vars


@pytest.fixture
def mock_settings():
    """Fixture to mock get_settings for tests. Patches all modules that use it."""
    mock = MagicMock()
    mock.mongo_uri = "mongodb://localhost:27017"
    mock.mongo_database_name = "test_db"
    mock.local_timezone = "UTC"
    mock.collection_prefix = "event-"

    # Patch at source and at use sites (modules import get_settings at load time)
    with patch("eventface.core.config.get_settings", return_value=mock), patch(
        "eventface.utils.datetime_utils.get_settings", return_value=mock
    ):
        yield mock


@pytest.fixture
def storage():
    return InMemoryObjectStorage()


@pytest.fixture
def face_index():
    return FakeFaceIndex()


@pytest.fixture
def identifier_map():
    return InMemoryIdentifierMap()


@pytest.fixture
def attendee_repository():
    return InMemoryAttendeeRepository()


@pytest.fixture
def scheduler():
    return RecordingScheduler()


@pytest.fixture
def frame_extractor():
    return FakeFrameExtractor()


@pytest.fixture
def index_client(face_index, storage):
    return IndexClient(face_index=face_index, storage=storage)


@pytest.fixture
def batch_indexer(index_client, storage, identifier_map, scheduler):
    return BatchIndexer(
        index_client=index_client,
        storage=storage,
        identifier_map=identifier_map,
        scheduler=scheduler,
        random_fn=no_jitter,
    )


@pytest.fixture
def video_preparer(storage, frame_extractor, batch_indexer):
    return VideoFramePreparer(storage=storage, frame_extractor=frame_extractor, batch_indexer=batch_indexer)


@pytest.fixture
def aggregator(index_client, batch_indexer, storage, identifier_map):
    return MatchAggregator(
        index_client=index_client,
        batch_indexer=batch_indexer,
        storage=storage,
        identifier_map=identifier_map,
    )


@pytest.fixture
def match_store(attendee_repository):
    return MatchStore(repository=attendee_repository)
