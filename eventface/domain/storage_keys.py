"""
Object storage key layout for event media.

    events/shared/<event>/images/<upload_id>-<filename>
    events/shared/<event>/videos/<video_id>/<video_name>
    events/shared/<event>/videos/<video_id>/thumbnail.jpg
    events/shared/<event>/videos/<video_id>/frames/frame_<n>.jpg
"""

# Standard library imports
import posixpath
import re
from typing import Optional

# Local application imports
from .constants.media_constants import (
    ALLOWED_VIDEO_EXTENSIONS,
    EVENT_ROOT,
    FRAME_NAME_TEMPLATE,
    FRAMES_SUBDIR,
    IMAGES_SUBDIR,
    THUMBNAIL_NAME,
    VIDEOS_SUBDIR,
)

_FRAME_FILE = re.compile(r"^frame_(\d+)\.[A-Za-z0-9]+$")


def event_prefix(collection_id: str) -> str:
    return f"{EVENT_ROOT}/{collection_id}/"


def images_prefix(collection_id: str) -> str:
    return f"{EVENT_ROOT}/{collection_id}/{IMAGES_SUBDIR}/"


def videos_prefix(collection_id: str) -> str:
    return f"{EVENT_ROOT}/{collection_id}/{VIDEOS_SUBDIR}/"


def image_key(collection_id: str, filename: str) -> str:
    return f"{images_prefix(collection_id)}{filename}"


def stored_image_name(upload_id: str, filename: str) -> str:
    """Object name of an uploaded image. The upload id keeps same-named photos apart."""
    return f"{upload_id}-{filename}"


def video_dir(collection_id: str, video_id: str) -> str:
    return f"{videos_prefix(collection_id)}{video_id}/"


def video_key(collection_id: str, video_id: str, video_name: str) -> str:
    return f"{video_dir(collection_id, video_id)}{video_name}"


def thumbnail_key(collection_id: str, video_id: str) -> str:
    return f"{video_dir(collection_id, video_id)}{THUMBNAIL_NAME}"


def frames_prefix(collection_id: str, video_id: str) -> str:
    return f"{video_dir(collection_id, video_id)}{FRAMES_SUBDIR}/"


def frame_key(collection_id: str, video_id: str, frame_number: int) -> str:
    return f"{frames_prefix(collection_id, video_id)}{FRAME_NAME_TEMPLATE.format(number=frame_number)}"


def basename(key: str) -> str:
    return posixpath.basename(key)


def video_dir_of(key: str) -> Optional[str]:
    """
    Return the ``.../videos/<video_id>/`` directory containing ``key``
    (a video file, its thumbnail or one of its frames), or None.
    """
    parts = key.split("/")
    try:
        index = parts.index(VIDEOS_SUBDIR)
    except ValueError:
        return None
    if index + 2 >= len(parts):
        return None
    return "/".join(parts[: index + 2]) + "/"


def thumbnail_for_video_dir(directory: str) -> str:
    return f"{directory}{THUMBNAIL_NAME}"


def frames_prefix_for_video_dir(directory: str) -> str:
    return f"{directory}{FRAMES_SUBDIR}/"


def is_frame_key(key: str) -> bool:
    return f"/{FRAMES_SUBDIR}/" in key and frame_number_from_key(key) is not None


def frame_number_from_key(key: str) -> Optional[int]:
    match = _FRAME_FILE.match(basename(key))
    return int(match.group(1)) if match else None


def is_video_file_key(key: str) -> bool:
    """True for the video file itself (not its thumbnail or frames)."""
    directory = video_dir_of(key)
    if directory is None or not key.startswith(directory):
        return False
    remainder = key[len(directory):]
    if "/" in remainder or remainder == THUMBNAIL_NAME:
        return False
    return posixpath.splitext(remainder)[1].lower() in ALLOWED_VIDEO_EXTENSIONS
