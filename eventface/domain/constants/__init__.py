"""Constants for domain model field names and media rules"""

from .attendee_fields import AttendeeFields
from .identifier_map_fields import IdentifierMapFields
from .media_constants import (
    ALLOWED_IMAGE_EXTENSIONS,
    ALLOWED_VIDEO_EXTENSIONS,
    DEFAULT_COLLECTION_ID,
    DEFAULT_COLLECTION_NAME,
    INDEXABLE_IMAGE_EXTENSIONS,
    UNSUPPORTED_INDEX_EXTENSIONS,
)

__all__ = [
    "AttendeeFields",
    "IdentifierMapFields",
    "ALLOWED_IMAGE_EXTENSIONS",
    "ALLOWED_VIDEO_EXTENSIONS",
    "DEFAULT_COLLECTION_ID",
    "DEFAULT_COLLECTION_NAME",
    "INDEXABLE_IMAGE_EXTENSIONS",
    "UNSUPPORTED_INDEX_EXTENSIONS",
]
