"""
Shared constants for media assets (images, videos and derived frames).

Used by the upload use case, the indexing services and the match aggregator.
Single place for the storage key layout and the accepted formats.
"""

# -----------------------------------------------------------------------------
# Accepted uploads
# -----------------------------------------------------------------------------
ALLOWED_IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".heic", ".heif"})
ALLOWED_VIDEO_EXTENSIONS = frozenset({".mp4", ".mov", ".avi", ".mkv", ".webm"})

# Extensions the index service can read directly
INDEXABLE_IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png"})

# Formats that must be normalized to JPEG before indexing
UNSUPPORTED_INDEX_EXTENSIONS = frozenset({
    ".heic", ".heif",
    ".cr2", ".cr3", ".nef", ".arw", ".dng", ".orf", ".rw2", ".raf",
})

VIDEO_CONTENT_TYPES = {
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
    ".avi": "video/x-msvideo",
    ".mkv": "video/x-matroska",
    ".webm": "video/webm",
}

IMAGE_CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".heic": "image/heic",
    ".heif": "image/heif",
}

JPEG_CONTENT_TYPE = "image/jpeg"

# -----------------------------------------------------------------------------
# Storage key layout
# -----------------------------------------------------------------------------
EVENT_ROOT = "events/shared"
IMAGES_SUBDIR = "images"
VIDEOS_SUBDIR = "videos"
FRAMES_SUBDIR = "frames"
THUMBNAIL_NAME = "thumbnail.jpg"
FRAME_NAME_TEMPLATE = "frame_{number}.jpg"

# -----------------------------------------------------------------------------
# Attendee records
# -----------------------------------------------------------------------------
DEFAULT_COLLECTION_ID = "default"
DEFAULT_COLLECTION_NAME = "Default Profile"
