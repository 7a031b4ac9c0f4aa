"""
Exception hierarchy for the face indexing and matching core.

Every error raised by the core inherits from EventFaceError and can carry a
user-facing message. The `retryable` flag is read by the retry helper: only
rate-limit signals are retried.
"""

# -----------------------------------------------------------------------------
# Standard library
# -----------------------------------------------------------------------------
from typing import Any, Dict, Optional


# -----------------------------------------------------------------------------
# Base
# -----------------------------------------------------------------------------


class EventFaceError(Exception):
    """Base exception for all eventface errors."""

    retryable: bool = False

    def __init__(
        self,
        message: str,
        user_message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.user_message = user_message or "An error occurred. Please try again."
        self.details = details or {}


# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------


class ValidationError(EventFaceError):
    """Raised for a bad file type or size, before any network call."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("user_message", message)
        super().__init__(message, **kwargs)


# -----------------------------------------------------------------------------
# Assets and storage
# -----------------------------------------------------------------------------


class AssetNotFound(EventFaceError):
    """Raised when an asset key does not exist in object storage."""

    def __init__(self, asset_key: str):
        super().__init__(
            f"Asset not found in storage: {asset_key}",
            user_message="The requested file could not be found.",
            details={"asset_key": asset_key},
        )
        self.asset_key = asset_key


class UnsupportedFormat(EventFaceError):
    """Raised for formats the index service cannot read (HEIC, camera raw)."""

    def __init__(self, asset_key: str, extension: str):
        super().__init__(
            f"Unsupported format '{extension}' for {asset_key}. Convert to JPEG first.",
            user_message=f"{extension.upper().lstrip('.')} files are not supported. Please convert to JPEG.",
            details={"asset_key": asset_key, "extension": extension},
        )
        self.asset_key = asset_key
        self.extension = extension


class StorageError(EventFaceError):
    """Raised when an object storage call fails."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("user_message", "File storage is unavailable. Please try again.")
        super().__init__(message, **kwargs)


# -----------------------------------------------------------------------------
# Face index service
# -----------------------------------------------------------------------------


class CollectionNotFound(EventFaceError):
    """Raised when a collection was never created (triggers a lazy rebuild)."""

    def __init__(self, collection_id: str):
        super().__init__(
            f"Collection not found: {collection_id}",
            details={"collection_id": collection_id},
        )
        self.collection_id = collection_id


class RateLimited(EventFaceError):
    """Raised when the index service throttles a call. Retried internally."""

    retryable = True

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("user_message", "The face service is busy. Please try again shortly.")
        super().__init__(message, **kwargs)


class IndexFailure(EventFaceError):
    """Terminal per-asset failure reported by the index service."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("user_message", "The file could not be indexed.")
        super().__init__(message, **kwargs)


class IndexServiceUnavailable(EventFaceError):
    """Connectivity or credential failure. Fatal to the whole operation."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("user_message", "The face service is unavailable. Please try again later.")
        super().__init__(message, **kwargs)


class NoIndexableContent(EventFaceError):
    """Raised when a collection is still empty after a lazy rebuild."""

    def __init__(self, collection_id: str):
        super().__init__(
            f"No assets were successfully indexed for collection {collection_id}",
            user_message="This event has no photos or videos that could be searched yet.",
            details={"collection_id": collection_id},
        )
        self.collection_id = collection_id


# -----------------------------------------------------------------------------
# Video preparation
# -----------------------------------------------------------------------------


class VideoProcessingError(EventFaceError):
    """Raised when a video's thumbnail or file could not be produced/uploaded."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("user_message", "The video could not be processed.")
        super().__init__(message, **kwargs)


# -----------------------------------------------------------------------------
# Persistence
# -----------------------------------------------------------------------------


class StoreFailure(EventFaceError):
    """Raised when writing or reading attendee records fails."""

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        kwargs.setdefault("user_message", "Your results could not be saved.")
        super().__init__(message, **kwargs)
        self.operation = operation


# -----------------------------------------------------------------------------
# Safe user-facing message
# -----------------------------------------------------------------------------

def get_user_message(exc: BaseException) -> str:
    """
    Return a safe, user-facing message for any exception.
    Use this at API/use-case boundaries so internal details are never exposed.
    """
    if isinstance(exc, EventFaceError) and getattr(exc, "user_message", None):
        return exc.user_message
    return "Something went wrong. Please try again."
