# External package imports
from fastapi import APIRouter, HTTPException, Query, status

# Local application imports
from ...application.dto.match_dto import (
    AttendeeRecordListResponse,
    AttendeeRecordResponse,
    FindMatchesRequest,
    FindMatchesResponse,
    SelfieUpdateRequest,
    SelfieUpdateResponse,
    StatisticsResponse,
    UserMediaResponse,
)
from ...application.use_cases.matches.find_matches import FindMatchesUseCase
from ...application.use_cases.matches.get_matches import GetMatchesUseCase
from ...application.use_cases.matches.get_statistics import GetStatisticsUseCase
from ...application.use_cases.matches.list_user_matches import FILTER_ALL, ListUserMatchesUseCase
from ...application.use_cases.matches.list_user_media import ListUserMediaUseCase
from ...application.use_cases.matches.set_default_selfie import SetDefaultSelfieUseCase
from ...di.container import get_container
from ...domain.exceptions import EventFaceError
from .errors import to_http_exception


router = APIRouter(prefix="/users", tags=["matches"])


@router.post("/{user_id}/collections/{collection_id}/matches", response_model=FindMatchesResponse)
async def find_matches(
    user_id: str,
    collection_id: str,
    request: FindMatchesRequest,
) -> FindMatchesResponse:
    """
    Search a collection with the user's selfie and store the result
    
    Args:
        user_id: User searching for themselves
        collection_id: Collection (event) to search
        request: Selfie key in object storage, optional display name/cover/threshold
        
    Returns:
        FindMatchesResponse with matches, best similarity first
    """
    container = get_container()
    find_matches_use_case = container.get(FindMatchesUseCase)
    
    try:
        return await find_matches_use_case.execute(
            user_id=user_id,
            collection_id=collection_id,
            request=request,
        )
    except EventFaceError as exception:
        raise to_http_exception(exception)
    except ValueError as exception:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exception)
        )


@router.get("/{user_id}/collections/{collection_id}/matches", response_model=AttendeeRecordResponse)
async def get_matches(user_id: str, collection_id: str) -> AttendeeRecordResponse:
    """
    Get the stored matches of a user in one collection
    """
    container = get_container()
    get_matches_use_case = container.get(GetMatchesUseCase)
    
    try:
        return await get_matches_use_case.execute(user_id=user_id, collection_id=collection_id)
    except EventFaceError as exception:
        raise to_http_exception(exception)
    except ValueError as exception:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(exception)
        )


@router.get("/{user_id}/matches", response_model=AttendeeRecordListResponse)
async def list_user_matches(
    user_id: str,
    view: str = Query(FILTER_ALL, description="all | viewing_only | with_videos"),
) -> AttendeeRecordListResponse:
    """
    List the match records of a user across collections
    """
    container = get_container()
    list_matches_use_case = container.get(ListUserMatchesUseCase)
    
    try:
        return await list_matches_use_case.execute(user_id=user_id, view=view)
    except EventFaceError as exception:
        raise to_http_exception(exception)
    except ValueError as exception:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exception)
        )


@router.get("/{user_id}/media", response_model=UserMediaResponse)
async def list_user_media(user_id: str) -> UserMediaResponse:
    """
    List every matched photo and video of a user, without repeats
    """
    container = get_container()
    list_media_use_case = container.get(ListUserMediaUseCase)
    
    try:
        return await list_media_use_case.execute(user_id=user_id)
    except EventFaceError as exception:
        raise to_http_exception(exception)


@router.get("/{user_id}/statistics", response_model=StatisticsResponse)
async def get_statistics(user_id: str) -> StatisticsResponse:
    """
    Event, photo and video counts of a user
    """
    container = get_container()
    statistics_use_case = container.get(GetStatisticsUseCase)
    
    try:
        return await statistics_use_case.execute(user_id=user_id)
    except EventFaceError as exception:
        raise to_http_exception(exception)


@router.put("/{user_id}/selfie", response_model=SelfieUpdateResponse)
async def set_default_selfie(user_id: str, request: SelfieUpdateRequest) -> SelfieUpdateResponse:
    """
    Store the user's profile selfie and use it on every existing record
    """
    container = get_container()
    selfie_use_case = container.get(SetDefaultSelfieUseCase)
    
    try:
        return await selfie_use_case.execute(user_id=user_id, request=request)
    except EventFaceError as exception:
        raise to_http_exception(exception)
    except ValueError as exception:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exception)
        )
