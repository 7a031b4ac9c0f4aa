"""Domain model -> DTO conversion shared by the match use cases"""

from ....domain.models.attendee import AttendeeRecord, AttendeeStatistics
from ....domain.models.match import Match, VideoMatch
from ....utils.datetime_utils import to_iso
from ...dto.match_dto import AttendeeRecordResponse, MatchResponse, StatisticsResponse


def match_to_response(match: Match) -> MatchResponse:
    if isinstance(match, VideoMatch):
        return MatchResponse(
            kind=match.kind,
            asset_url=match.asset_url,
            similarity=match.similarity,
            video_name=match.video_name,
            thumbnail_key=match.thumbnail_key,
            frame_count=match.frame_count,
            external_id=match.external_id or None,
        )
    return MatchResponse(kind=match.kind, asset_url=match.asset_url, similarity=match.similarity)


def record_to_response(record: AttendeeRecord) -> AttendeeRecordResponse:
    return AttendeeRecordResponse(
        user_id=record.user_id,
        collection_id=record.collection_id,
        selfie_ref=record.selfie_ref,
        matched_images=list(record.matched_images),
        matched_videos=list(record.matched_videos),
        display_name=record.display_name,
        cover_ref=record.cover_ref,
        created_at=to_iso(record.created_at),
        last_updated=to_iso(record.last_updated),
        has_contributed=record.has_contributed,
    )


def statistics_to_response(statistics: AttendeeStatistics) -> StatisticsResponse:
    return StatisticsResponse(
        total_events=statistics.total_events,
        total_images=statistics.total_images,
        total_videos=statistics.total_videos,
        first_date=to_iso(statistics.first_date),
        latest_date=to_iso(statistics.latest_date),
    )
