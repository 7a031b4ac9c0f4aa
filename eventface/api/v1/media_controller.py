# Standard library imports
from typing import List, Optional

# External package imports
from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

# Local application imports
from ...application.dto.media_dto import FailedAssetResponse, ReindexResponse, UploadResultResponse
from ...application.use_cases.media.upload_and_index import UploadAndIndexUseCase
from ...application.use_cases.media.reindex_collection import ReindexCollectionUseCase
from ...di.container import get_container
from ...domain.exceptions import EventFaceError
from ...domain.models.media import MediaUpload
from .errors import to_http_exception


router = APIRouter(tags=["media"])


@router.post("/collections/{collection_id}/media", response_model=UploadResultResponse)
async def upload_media(
    collection_id: str,
    files: List[UploadFile] = File(...),
    user_id: Optional[str] = Form(None),
) -> UploadResultResponse:
    """
    Upload photos and videos to a collection and index their faces
    
    Args:
        collection_id: Collection (event) receiving the media
        files: Image (jpg, jpeg, png) and video (mp4, mov, avi, mkv, webm) files
        user_id: Optional uploading user, recorded as a contributor
        
    Returns:
        UploadResultResponse with stored asset keys and per-file failures
    """
    container = get_container()
    upload_use_case = container.get(UploadAndIndexUseCase)
    
    # Type and size are checked before a file body is read
    uploads: List[MediaUpload] = []
    rejected: List[FailedAssetResponse] = []
    for file in files:
        try:
            upload_use_case.check_file(file.filename or "", file.size)
        except EventFaceError as exception:
            rejected.append(FailedAssetResponse(asset=file.filename or "", error=exception.user_message))
            continue
        uploads.append(
            MediaUpload(
                filename=file.filename or "",
                content=await file.read(),
                content_type=file.content_type or "",
            )
        )
    
    try:
        return await upload_use_case.execute(
            collection_id=collection_id,
            files=uploads,
            user_id=user_id,
            rejected=rejected,
        )
    except EventFaceError as exception:
        raise to_http_exception(exception)


@router.post("/collections/{collection_id}/reindex", response_model=ReindexResponse)
async def reindex_collection(collection_id: str) -> ReindexResponse:
    """
    Index every stored photo and video frame of a collection
    
    Args:
        collection_id: Collection (event) to rebuild
        
    Returns:
        ReindexResponse with indexed asset keys and failures
    """
    container = get_container()
    reindex_use_case = container.get(ReindexCollectionUseCase)
    
    try:
        return await reindex_use_case.execute(collection_id=collection_id)
    except EventFaceError as exception:
        raise to_http_exception(exception)
    except ValueError as exception:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exception)
        )
