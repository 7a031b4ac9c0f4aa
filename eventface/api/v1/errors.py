# External package imports
from fastapi import HTTPException, status

# Local application imports
from ...domain.exceptions import (
    AssetNotFound,
    CollectionNotFound,
    EventFaceError,
    IndexFailure,
    IndexServiceUnavailable,
    NoIndexableContent,
    RateLimited,
    StorageError,
    StoreFailure,
    UnsupportedFormat,
    ValidationError,
    VideoProcessingError,
    get_user_message,
)

_STATUS_BY_ERROR = (
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (UnsupportedFormat, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE),
    (AssetNotFound, status.HTTP_404_NOT_FOUND),
    (CollectionNotFound, status.HTTP_404_NOT_FOUND),
    (NoIndexableContent, status.HTTP_404_NOT_FOUND),
    (RateLimited, status.HTTP_429_TOO_MANY_REQUESTS),
    (IndexServiceUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
    (StorageError, status.HTTP_503_SERVICE_UNAVAILABLE),
    (StoreFailure, status.HTTP_503_SERVICE_UNAVAILABLE),
    (IndexFailure, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (VideoProcessingError, status.HTTP_422_UNPROCESSABLE_ENTITY),
)


def status_for(exception: EventFaceError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exception, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(exception: EventFaceError) -> HTTPException:
    """Translate a domain error into an HTTPException with the user-facing message"""
    return HTTPException(
        status_code=status_for(exception),
        detail=get_user_message(exception),
    )
