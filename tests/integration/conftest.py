"""
Fixtures for API tests: the application runs against a mocked DI container.
"""
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from eventface.infrastructure.utils.scheduler import Scheduler


@pytest.fixture
def use_cases():
    """Use case doubles by type, filled in by each test module."""
    return {}


@pytest.fixture
def mock_container(use_cases):
    container = MagicMock()
    scheduler = MagicMock(spec=Scheduler)
    container.get.side_effect = lambda cls: use_cases.get(cls, scheduler if cls is Scheduler else None)
    return container


@pytest.fixture
def client(mock_container):
    """Create test client with mocked container (lifespan included)."""
    from eventface.main import app

    with patch("eventface.main.get_container", return_value=mock_container), patch(
        "eventface.api.v1.media_controller.get_container", return_value=mock_container
    ), patch(
        "eventface.api.v1.match_controller.get_container", return_value=mock_container
    ):
        with TestClient(app) as c:
            yield c
