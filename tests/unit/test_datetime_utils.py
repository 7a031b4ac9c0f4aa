"""
Unit tests for eventface.utils.datetime_utils, as seen through attendee
record timestamps (stored in UTC, rendered in LOCAL_TIMEZONE).
"""
from datetime import datetime, timedelta, timezone

from eventface.application.use_cases.matches.mappers import record_to_response, statistics_to_response
from eventface.domain.models.attendee import AttendeeRecord, AttendeeStatistics
from eventface.utils.datetime_utils import ensure_utc, to_iso, utc_now

# MongoDB hands BSON dates back as naive UTC datetimes
STORED_NAIVE = datetime(2024, 6, 1, 18, 45, 12, 345000)


def _record(**kwargs):
    return AttendeeRecord(user_id="user-1", collection_id="party", selfie_ref="selfies/user-1.jpg", **kwargs)


class TestEnsureUtc:
    """Tests for ensure_utc on values read back from the record store"""

    def test_missing_timestamp(self):
        assert ensure_utc(None) is None

    def test_driver_value_is_utc(self):
        result = ensure_utc(STORED_NAIVE)
        assert result.tzinfo == timezone.utc
        assert (result.hour, result.minute) == (18, 45)

    def test_offset_value_converted(self):
        uploaded_at = datetime(2024, 6, 1, 20, 45, tzinfo=timezone(timedelta(hours=2)))
        assert ensure_utc(uploaded_at) == datetime(2024, 6, 1, 18, 45, tzinfo=timezone.utc)


class TestRecordTimestamps:
    """Record and statistics timestamps as returned by the API"""

    def test_record_dates_rendered_in_utc(self, mock_settings):
        response = record_to_response(_record(created_at=STORED_NAIVE, last_updated=None))
        assert response.created_at == "2024-06-01T18:45:12Z"
        assert response.last_updated is None

    def test_record_dates_rendered_in_local_timezone(self, mock_settings):
        mock_settings.local_timezone = "Europe/Madrid"
        response = record_to_response(_record(created_at=STORED_NAIVE))
        assert response.created_at == "2024-06-01T20:45:12+02:00"

    def test_invalid_timezone_falls_back_to_utc(self, mock_settings):
        mock_settings.local_timezone = "Not/AZone"
        assert to_iso(STORED_NAIVE) == "2024-06-01T18:45:12Z"

    def test_statistics_date_range(self, mock_settings):
        statistics = AttendeeStatistics(
            total_events=2,
            first_date=datetime(2024, 1, 5, 9, 0, tzinfo=timezone.utc),
            latest_date=ensure_utc(STORED_NAIVE),
        )
        response = statistics_to_response(statistics)
        assert response.first_date == "2024-01-05T09:00:00Z"
        assert response.latest_date == "2024-06-01T18:45:12Z"


def test_utc_now_is_aware():
    assert utc_now().tzinfo == timezone.utc
